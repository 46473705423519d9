# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""SVG text card: one line per slot on a black 350x350 canvas."""

from __future__ import annotations

from typing import Iterable
from xml.sax.saxutils import escape

SVG_SIZE = 350
LINE_START_Y = 20
LINE_STEP_Y = 20
TEXT_X = 10

_HEADER = (
    '<svg xmlns="http://www.w3.org/2000/svg" preserveAspectRatio="xMinYMin meet" '
    f'viewBox="0 0 {SVG_SIZE} {SVG_SIZE}">'
    "<style>.base { fill: white; font-family: serif; font-size: 14px; }</style>"
    '<rect width="100%" height="100%" fill="black" />'
)
_FOOTER = "</svg>"


def render_svg(lines: Iterable[str]) -> str:
    parts = [_HEADER]
    for i, line in enumerate(lines):
        y = LINE_START_Y + LINE_STEP_Y * i
        parts.append(f'<text x="{TEXT_X}" y="{y}" class="base">{escape(line)}</text>')
    parts.append(_FOOTER)
    return "".join(parts)


__all__ = ["render_svg", "SVG_SIZE"]
