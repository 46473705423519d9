# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Token metadata document and its data-URI encoding.

    token_uri = "data:application/json;base64," + b64(json)
    json      = {"name": "Bag #N", "description": ..., "image": svg_uri,
                 "attributes": [{"trait_type": ..., "value": ...}, ...]}
    svg_uri   = "data:image/svg+xml;base64," + b64(svg)

JSON is serialized with compact separators and stable key order so the URI is
byte-for-byte reproducible.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Dict

from blinddrop.constants import DEFAULT_COLLECTION_NAME, DEFAULT_DESCRIPTION, SVG_URI_PREFIX, TOKEN_URI_PREFIX
from blinddrop.generator.attributes import AttributeSet


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def svg_data_uri(svg: str) -> str:
    return SVG_URI_PREFIX + _b64(svg.encode("utf-8"))


def token_metadata(
    attributes: AttributeSet,
    svg: str,
    *,
    collection_name: str = DEFAULT_COLLECTION_NAME,
    description: str = DEFAULT_DESCRIPTION,
) -> Dict[str, Any]:
    return {
        "name": f"{collection_name} #{attributes.token_id}",
        "description": description,
        "image": svg_data_uri(svg),
        "attributes": attributes.traits(),
    }


def encode_token_uri(metadata: Dict[str, Any]) -> str:
    body = json.dumps(metadata, separators=(",", ":"), ensure_ascii=False)
    return TOKEN_URI_PREFIX + _b64(body.encode("utf-8"))


def decode_token_uri(uri: str) -> Dict[str, Any]:
    """Inverse of :func:`encode_token_uri`; raises ValueError on a foreign prefix."""
    if not uri.startswith(TOKEN_URI_PREFIX):
        raise ValueError("not a base64 JSON data URI")
    raw = base64.b64decode(uri[len(TOKEN_URI_PREFIX):], validate=True)
    return json.loads(raw.decode("utf-8"))


def decode_svg_uri(uri: str) -> str:
    if not uri.startswith(SVG_URI_PREFIX):
        raise ValueError("not a base64 SVG data URI")
    return base64.b64decode(uri[len(SVG_URI_PREFIX):], validate=True).decode("utf-8")


__all__ = ["token_metadata", "encode_token_uri", "decode_token_uri", "decode_svg_uri", "svg_data_uri"]
