# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Attribute derivation: (final_seed, token_id) -> AttributeSet.

Draw order per slot (all from the token's stream, sequentially):

    item      <- slot table
    greatness <- uniform(GREATNESS_BOUND)
    if greatness >= SUFFIX_MIN_GREATNESS:
        order suffix  (without replacement across the bag)
    if greatness >= NAME_MIN_GREATNESS:
        name prefix, name suffix  -> '"Prefix Suffix" '
    if greatness == PLUS_ONE_GREATNESS:
        ' +1'

The draw order is part of the output format; reordering it changes every bag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from blinddrop.generator import tables
from blinddrop.generator.stream import TokenStream


@dataclass(frozen=True, slots=True)
class SlotAttribute:
    slot: str
    item: str
    greatness: int
    order_suffix: Optional[str] = None
    name_prefix: Optional[str] = None
    name_suffix: Optional[str] = None

    @property
    def plus_one(self) -> bool:
        return self.greatness == tables.PLUS_ONE_GREATNESS

    @property
    def display(self) -> str:
        out = self.item
        if self.order_suffix:
            out = f"{out} {self.order_suffix}"
        if self.name_prefix and self.name_suffix:
            out = f'"{self.name_prefix} {self.name_suffix}" {out}'
        if self.plus_one:
            out = f"{out} +1"
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot": self.slot,
            "item": self.item,
            "greatness": self.greatness,
            "orderSuffix": self.order_suffix,
            "namePrefix": self.name_prefix,
            "nameSuffix": self.name_suffix,
            "display": self.display,
        }


@dataclass(frozen=True, slots=True)
class AttributeSet:
    token_id: int
    slots: Tuple[SlotAttribute, ...]

    def lines(self) -> List[str]:
        return [s.display for s in self.slots]

    def traits(self) -> List[Dict[str, str]]:
        return [{"trait_type": s.slot, "value": s.display} for s in self.slots]

    def get(self, slot: str) -> SlotAttribute:
        for s in self.slots:
            if s.slot.lower() == slot.lower():
                return s
        raise KeyError(slot)

    @property
    def order_suffixes(self) -> List[str]:
        return [s.order_suffix for s in self.slots if s.order_suffix]

    def to_dict(self) -> Dict[str, Any]:
        return {"tokenId": self.token_id, "slots": [s.to_dict() for s in self.slots]}


def _derive_slot(
    stream: TokenStream, slot: str, table: tables.WeightedTable, used_suffixes: Set[str]
) -> SlotAttribute:
    item = table.pick(stream)
    greatness = stream.uniform(tables.GREATNESS_BOUND)
    order_suffix = name_prefix = name_suffix = None
    if greatness >= tables.SUFFIX_MIN_GREATNESS:
        order_suffix = tables.ORDER_SUFFIXES.pick_excluding(stream, used_suffixes)
        used_suffixes.add(order_suffix)
    if greatness >= tables.NAME_MIN_GREATNESS:
        name_prefix = tables.NAME_PREFIXES.pick(stream)
        name_suffix = tables.NAME_SUFFIXES.pick(stream)
    return SlotAttribute(
        slot=slot,
        item=item,
        greatness=greatness,
        order_suffix=order_suffix,
        name_prefix=name_prefix,
        name_suffix=name_suffix,
    )


def derive_attributes(final_seed: bytes, token_id: int) -> AttributeSet:
    """Pure function of the final seed and the token id."""
    stream = TokenStream(final_seed, token_id)
    used: Set[str] = set()
    slots = tuple(_derive_slot(stream, name, table, used) for name, table in tables.SLOTS)
    return AttributeSet(token_id=int(token_id), slots=slots)


__all__ = ["SlotAttribute", "AttributeSet", "derive_attributes"]
