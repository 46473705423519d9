# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
blinddrop — fair blind-drop distribution.

Tokens are claimed while the distribution window is open; their metadata is
only determined once the seed finalization (automatic block seed XOR guardian
or fallback seed) completes, after which every token renders
deterministically from the public final seed.

Only light, stable exports are surfaced here to avoid import cycles.
"""

from __future__ import annotations

from .version import __version__

__all__ = ["__version__"]
