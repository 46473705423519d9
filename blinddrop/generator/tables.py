# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Weighted lookup tables for the gear generator.

A :class:`WeightedTable` maps a uniform draw in ``[0, total_weight)`` to an
entry via cumulative weights and :func:`bisect.bisect_right`. Rarer entries
carry smaller weights. Tables are frozen at import time; changing an entry or
weight changes every rendered token.

Slots (in render order): weapon, chest, head, waist, foot, hand, neck, ring.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import AbstractSet, Sequence, Tuple

from blinddrop.generator.stream import TokenStream


@dataclass(frozen=True)
class WeightedTable:
    name: str
    entries: Tuple[str, ...]
    weights: Tuple[int, ...]
    _cumulative: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError(f"table {self.name!r} is empty")
        if len(self.entries) != len(self.weights):
            raise ValueError(f"table {self.name!r}: entries/weights length mismatch")
        if len(set(self.entries)) != len(self.entries):
            raise ValueError(f"table {self.name!r}: duplicate entries")
        if any(w <= 0 for w in self.weights):
            raise ValueError(f"table {self.name!r}: weights must be positive")
        running, acc = 0, []
        for w in self.weights:
            running += w
            acc.append(running)
        object.__setattr__(self, "_cumulative", tuple(acc))

    @classmethod
    def of(cls, name: str, pairs: Sequence[Tuple[str, int]]) -> "WeightedTable":
        return cls(name, tuple(p[0] for p in pairs), tuple(p[1] for p in pairs))

    @classmethod
    def uniform(cls, name: str, entries: Sequence[str]) -> "WeightedTable":
        return cls(name, tuple(entries), tuple(1 for _ in entries))

    @property
    def total_weight(self) -> int:
        return self._cumulative[-1]

    def index_for(self, r: int) -> int:
        """Entry index for a draw ``r`` in ``[0, total_weight)``."""
        if not (0 <= r < self.total_weight):
            raise ValueError("draw out of range")
        return bisect.bisect_right(self._cumulative, r)

    def pick(self, stream: TokenStream) -> str:
        return self.entries[self.index_for(stream.uniform(self.total_weight))]

    def pick_excluding(self, stream: TokenStream, exclude: AbstractSet[str]) -> str:
        """Weighted pick among entries not in ``exclude`` (sampling without replacement)."""
        remaining = [(e, w) for e, w in zip(self.entries, self.weights) if e not in exclude]
        if not remaining:
            raise ValueError(f"table {self.name!r} exhausted")
        return WeightedTable.of(self.name, remaining).pick(stream)

    def probability(self, entry: str) -> float:
        return self.weights[self.entries.index(entry)] / self.total_weight


WEAPONS = WeightedTable.of("weapon", [
    ("Warhammer", 3), ("Quarterstaff", 8), ("Maul", 6), ("Mace", 8), ("Club", 10),
    ("Katana", 2), ("Falchion", 5), ("Scimitar", 6), ("Long Sword", 7), ("Short Sword", 10),
    ("Ghost Wand", 2), ("Grave Wand", 4), ("Bone Wand", 6), ("Wand", 10),
    ("Grimoire", 2), ("Chronicle", 4), ("Tome", 6), ("Book", 10),
])

CHEST = WeightedTable.of("chest", [
    ("Divine Robe", 2), ("Silk Robe", 4), ("Linen Robe", 6), ("Robe", 8), ("Shirt", 10),
    ("Demon Husk", 2), ("Dragonskin Armor", 4), ("Studded Leather Armor", 6),
    ("Hard Leather Armor", 8), ("Leather Armor", 10),
    ("Holy Chestplate", 2), ("Ornate Chestplate", 4), ("Plate Mail", 6), ("Chain Mail", 8),
    ("Ring Mail", 10),
])

HEAD = WeightedTable.of("head", [
    ("Ancient Helm", 2), ("Ornate Helm", 4), ("Great Helm", 6), ("Full Helm", 8), ("Helm", 10),
    ("Demon Crown", 2), ("Dragon's Crown", 4), ("War Cap", 6), ("Leather Cap", 8), ("Cap", 10),
    ("Crown", 2), ("Divine Hood", 4), ("Silk Hood", 6), ("Linen Hood", 8), ("Hood", 10),
])

WAIST = WeightedTable.of("waist", [
    ("Ornate Belt", 2), ("War Belt", 4), ("Plated Belt", 6), ("Mesh Belt", 8), ("Heavy Belt", 10),
    ("Demonhide Belt", 2), ("Dragonskin Belt", 4), ("Studded Leather Belt", 6),
    ("Hard Leather Belt", 8), ("Leather Belt", 10),
    ("Brightsilk Sash", 2), ("Silk Sash", 4), ("Wool Sash", 6), ("Linen Sash", 8), ("Sash", 10),
])

FOOT = WeightedTable.of("foot", [
    ("Holy Greaves", 2), ("Ornate Greaves", 4), ("Greaves", 6), ("Chain Boots", 8),
    ("Heavy Boots", 10),
    ("Demonhide Boots", 2), ("Dragonskin Boots", 4), ("Studded Leather Boots", 6),
    ("Hard Leather Boots", 8), ("Leather Boots", 10),
    ("Divine Slippers", 2), ("Silk Slippers", 4), ("Wool Shoes", 6), ("Linen Shoes", 8),
    ("Shoes", 10),
])

HAND = WeightedTable.of("hand", [
    ("Holy Gauntlets", 2), ("Ornate Gauntlets", 4), ("Gauntlets", 6), ("Chain Gloves", 8),
    ("Heavy Gloves", 10),
    ("Demon's Hands", 2), ("Dragonskin Gloves", 4), ("Studded Leather Gloves", 6),
    ("Hard Leather Gloves", 8), ("Leather Gloves", 10),
    ("Divine Gloves", 2), ("Silk Gloves", 4), ("Wool Gloves", 6), ("Linen Gloves", 8),
    ("Gloves", 10),
])

NECK = WeightedTable.of("neck", [("Necklace", 5), ("Amulet", 3), ("Pendant", 4)])

RING = WeightedTable.of("ring", [
    ("Gold Ring", 3), ("Silver Ring", 6), ("Bronze Ring", 10), ("Platinum Ring", 2),
    ("Titanium Ring", 4),
])

SLOTS: Tuple[Tuple[str, WeightedTable], ...] = (
    ("Weapon", WEAPONS),
    ("Chest", CHEST),
    ("Head", HEAD),
    ("Waist", WAIST),
    ("Foot", FOOT),
    ("Hand", HAND),
    ("Neck", NECK),
    ("Ring", RING),
)

# Drawn without replacement within one bag.
ORDER_SUFFIXES = WeightedTable.uniform("order_suffix", [
    "of Power", "of Giants", "of Titans", "of Skill", "of Perfection", "of Brilliance",
    "of Enlightenment", "of Protection", "of Anger", "of Rage", "of Fury", "of Vitriol",
    "of the Fox", "of Detection", "of Reflection", "of the Twins",
])

NAME_PREFIXES = WeightedTable.uniform("name_prefix", [
    "Agony", "Apocalypse", "Armageddon", "Beast", "Behemoth", "Blight", "Blood", "Bramble",
    "Brimstone", "Brood", "Carrion", "Cataclysm", "Chimeric", "Corpse", "Corruption",
    "Damnation", "Death", "Demon", "Dire", "Dragon", "Dread", "Doom", "Dusk", "Eagle",
    "Empyrean", "Fate", "Foe", "Gale", "Ghoul", "Gloom", "Glyph", "Golem", "Grim", "Hate",
    "Havoc", "Honour", "Horror", "Hypnotic", "Kraken", "Loath", "Maelstrom", "Mind", "Miracle",
    "Morbid", "Oblivion", "Onslaught", "Pain", "Pandemonium", "Phoenix", "Plague", "Rage",
    "Rapture", "Rune", "Skull", "Sol", "Soul", "Sorrow", "Spirit", "Storm", "Tempest",
    "Torment", "Vengeance", "Victory", "Viper", "Vortex", "Woe", "Wrath", "Light's",
    "Shimmering",
])

NAME_SUFFIXES = WeightedTable.uniform("name_suffix", [
    "Bane", "Root", "Bite", "Song", "Roar", "Grasp", "Instrument", "Glow", "Bender", "Shadow",
    "Whisper", "Shout", "Growl", "Tear", "Peak", "Form", "Sun", "Moon",
])

# Greatness is uniform in [0, GREATNESS_BOUND).
GREATNESS_BOUND = 21
SUFFIX_MIN_GREATNESS = 15
NAME_MIN_GREATNESS = 19
PLUS_ONE_GREATNESS = 20

__all__ = [
    "WeightedTable",
    "SLOTS",
    "ORDER_SUFFIXES",
    "NAME_PREFIXES",
    "NAME_SUFFIXES",
    "GREATNESS_BOUND",
    "SUFFIX_MIN_GREATNESS",
    "NAME_MIN_GREATNESS",
    "PLUS_ONE_GREATNESS",
]
