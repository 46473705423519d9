# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Procedural generator: (final seed, token id) -> attributes, SVG, token URI.

Everything here is a pure function of public inputs. :func:`render_with_seed`
lets any observer who knows the final seed reproduce a token's output;
:class:`ProceduralGenerator` adds the drop's preconditions (final seed set,
token allocated) on top.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from blinddrop.constants import DEFAULT_COLLECTION_NAME, DEFAULT_DESCRIPTION
from blinddrop.errors import UnknownIdentifier
from blinddrop.generator.attributes import AttributeSet, SlotAttribute, derive_attributes
from blinddrop.generator.metadata import decode_token_uri, encode_token_uri, token_metadata
from blinddrop.generator.stream import TokenStream
from blinddrop.generator.svg import render_svg
from blinddrop.metrics import METRICS, Metrics

logger = logging.getLogger(__name__)

Rendered = Tuple[AttributeSet, str]


def render_with_seed(final_seed: bytes, token_id: int) -> Rendered:
    attrs = derive_attributes(final_seed, token_id)
    return attrs, render_svg(attrs.lines())


def token_uri_with_seed(
    final_seed: bytes,
    token_id: int,
    *,
    collection_name: str = DEFAULT_COLLECTION_NAME,
    description: str = DEFAULT_DESCRIPTION,
) -> str:
    attrs, svg = render_with_seed(final_seed, token_id)
    meta = token_metadata(attrs, svg, collection_name=collection_name, description=description)
    return encode_token_uri(meta)


class ProceduralGenerator:
    """
    Drop-aware renderer.

    Args:
        seed_source: returns the final seed or raises FinalSeedNotSet.
        exists: tells whether a token id has been allocated.
    """

    def __init__(
        self,
        *,
        seed_source: Callable[[], bytes],
        exists: Callable[[int], bool],
        collection_name: str = DEFAULT_COLLECTION_NAME,
        description: str = DEFAULT_DESCRIPTION,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self._seed_source = seed_source
        self._exists = exists
        self.collection_name = collection_name
        self.description = description
        self._metrics = metrics or METRICS

    def _checked_seed(self, token_id: int) -> bytes:
        seed = self._seed_source()
        if not self._exists(token_id):
            raise UnknownIdentifier(token_id=token_id)
        return seed

    def render(self, token_id: int) -> Rendered:
        seed = self._checked_seed(token_id)
        with self._metrics.render_timer():
            return render_with_seed(seed, token_id)

    def token_uri(self, token_id: int) -> str:
        seed = self._checked_seed(token_id)
        with self._metrics.render_timer():
            return token_uri_with_seed(
                seed,
                token_id,
                collection_name=self.collection_name,
                description=self.description,
            )


__all__ = [
    "AttributeSet",
    "SlotAttribute",
    "TokenStream",
    "ProceduralGenerator",
    "derive_attributes",
    "render_svg",
    "render_with_seed",
    "token_uri_with_seed",
    "token_metadata",
    "encode_token_uri",
    "decode_token_uri",
]
