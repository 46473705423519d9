# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Token registry: sequential ids, owners and enumeration.

This is the minimal ownership book the drop needs:

- ``mint(owner)`` assigns the next id (1, 2, 3, ...) and emits ``Transfer``
  from ``ZERO_OWNER``.
- ``owner_of(id)`` / ``balance_of(owner)`` / ``total_supply()``.
- Enumeration by global index (``token_by_index``) and per owner
  (``token_of_owner_by_index``). Per-owner order follows acquisition order;
  when a token leaves an owner the last entry is swapped into its slot.
- ``transfer(sender, to, id)`` moves a token between owners. Approvals and
  operator delegation are not modelled.

Ids are never reused and tokens are never destroyed.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from blinddrop.errors import IndexOutOfRange, NotTokenOwner, TokenNotFound
from blinddrop.ledger.oracle import EventSink
from blinddrop.types.core import ZERO_OWNER, Owner, TokenId, TransferEvent

logger = logging.getLogger(__name__)


class TokenRegistry:
    """In-memory ownership registry with enumeration."""

    def __init__(self, events: Optional[EventSink] = None) -> None:
        self._events = events
        self._owners: Dict[int, Owner] = {}
        self._all: List[int] = []
        self._owned: Dict[Owner, List[int]] = {}
        self._owned_pos: Dict[int, int] = {}

    # ---- Mutations ----

    def mint(self, owner: Owner) -> TokenId:
        if not owner or owner == ZERO_OWNER:
            raise ValueError("cannot mint to the zero owner")
        token_id = len(self._all) + 1
        self._owners[token_id] = owner
        self._all.append(token_id)
        self._add_to_owner(owner, token_id)
        self._emit(ZERO_OWNER, owner, token_id)
        return TokenId(token_id)

    def transfer(self, sender: Owner, to: Owner, token_id: int) -> None:
        current = self.owner_of(token_id)
        if current != sender:
            raise NotTokenOwner(token_id=token_id)
        if not to or to == ZERO_OWNER:
            raise ValueError("cannot transfer to the zero owner")
        self._remove_from_owner(sender, token_id)
        self._add_to_owner(to, token_id)
        self._owners[token_id] = to
        self._emit(sender, to, token_id)
        logger.debug("token %d transferred %s -> %s", token_id, sender, to)

    # ---- Queries ----

    def exists(self, token_id: int) -> bool:
        return token_id in self._owners

    def owner_of(self, token_id: int) -> Owner:
        try:
            return self._owners[token_id]
        except KeyError:
            raise TokenNotFound(token_id=token_id) from None

    def balance_of(self, owner: Owner) -> int:
        return len(self._owned.get(owner, ()))

    def total_supply(self) -> int:
        return len(self._all)

    def token_by_index(self, index: int) -> TokenId:
        if not (0 <= index < len(self._all)):
            raise IndexOutOfRange(index=index, size=len(self._all))
        return TokenId(self._all[index])

    def token_of_owner_by_index(self, owner: Owner, index: int) -> TokenId:
        owned = self._owned.get(owner, [])
        if not (0 <= index < len(owned)):
            raise IndexOutOfRange(index=index, size=len(owned))
        return TokenId(owned[index])

    def tokens_of(self, owner: Owner) -> List[TokenId]:
        return [TokenId(t) for t in self._owned.get(owner, [])]

    # ---- Internals ----

    def _add_to_owner(self, owner: Owner, token_id: int) -> None:
        owned = self._owned.setdefault(owner, [])
        self._owned_pos[token_id] = len(owned)
        owned.append(token_id)

    def _remove_from_owner(self, owner: Owner, token_id: int) -> None:
        owned = self._owned[owner]
        pos = self._owned_pos.pop(token_id)
        last = owned.pop()
        if last != token_id:
            owned[pos] = last
            self._owned_pos[last] = pos

    def _emit(self, sender: Owner, to: Owner, token_id: int) -> None:
        if self._events is not None:
            self._events.emit(TransferEvent(sender=sender, to=to, token_id=TokenId(token_id)))


__all__ = ["TokenRegistry"]
