"""
Version helpers for the blinddrop package.

Resolution order:
1) the installed distribution metadata (``importlib.metadata``),
2) the static ``BASE_VERSION`` with a ``+local`` marker for source checkouts.

The drop's on-ledger behaviour never depends on this value; it is surfaced by
the CLI and embedded in ``DropConfig.to_dict()`` for diagnostics only.
"""
from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as _pkg_version

# Bump this when making intentional, source-level releases.
BASE_VERSION = "0.3.0"

_PKG_NAME = "blinddrop"


@lru_cache(maxsize=1)
def get_version() -> str:
    try:
        return _pkg_version(_PKG_NAME)
    except PackageNotFoundError:
        return f"{BASE_VERSION}+local"


__version__ = get_version()
__all__ = ["__version__", "get_version", "BASE_VERSION"]
