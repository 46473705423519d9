"""
blinddrop constants.

This module centralizes:
- Domain separation tags for the per-token generator stream
- Seed/commitment sizes
- Ledger defaults (block-hash look-back window)
- Default drop parameters used by the CLI and the dev ledger

Keep the domain tags stable; changing them changes every rendered token for
an already-finalized seed.
"""

from __future__ import annotations

# -----------------------------
# Domain separation (bytes tags)
# -----------------------------
DOMAIN_PREFIX: bytes = b"blinddrop."

# Per-token pseudorandom stream (SHAKE-256 absorb prefix)
DOMAIN_TOKEN_STREAM: bytes = DOMAIN_PREFIX + b"token.stream.v1"

# Dev-ledger block hash derivation (only used by DevLedger)
DOMAIN_DEV_BLOCK: bytes = DOMAIN_PREFIX + b"dev.block.v1"

# Hash function identifier for commitments and block hashes (documentation aid)
HASH_FN_COMMITMENT: str = "sha3_256"

# -----------------------------
# Sizes
# -----------------------------
SEED_LEN: int = 32          # automatic / guardian / fallback / final seeds
COMMITMENT_LEN: int = 32    # SHA3-256 digest of the guardian seed

# -----------------------------
# Ledger defaults
# -----------------------------
# Block hashes older than this many blocks are no longer readable.
DEFAULT_BLOCK_HASH_LOOKBACK: int = 256

# -----------------------------
# Drop defaults
# -----------------------------
DEFAULT_GUARDIAN_WINDOW_S: int = 24 * 60 * 60            # 1 day
DEFAULT_MAX_DISTRIBUTION_S: int = 24 * 60 * 60 * 10      # 10 days
DEFAULT_MAX_SUPPLY: int = 8000

DEFAULT_COLLECTION_NAME: str = "Bag"
DEFAULT_DESCRIPTION: str = (
    "Randomized adventurer gear, generated and stored on chain. "
    "Stats, images, and other functionality are intentionally omitted for "
    "others to interpret. Metadata was unknown at claim time and derived "
    "from a commit-reveal final seed."
)

# -----------------------------
# Metadata encodings
# -----------------------------
TOKEN_URI_PREFIX: str = "data:application/json;base64,"
SVG_URI_PREFIX: str = "data:image/svg+xml;base64,"

__all__ = [
    "DOMAIN_PREFIX",
    "DOMAIN_TOKEN_STREAM",
    "DOMAIN_DEV_BLOCK",
    "HASH_FN_COMMITMENT",
    "SEED_LEN",
    "COMMITMENT_LEN",
    "DEFAULT_BLOCK_HASH_LOOKBACK",
    "DEFAULT_GUARDIAN_WINDOW_S",
    "DEFAULT_MAX_DISTRIBUTION_S",
    "DEFAULT_MAX_SUPPLY",
    "DEFAULT_COLLECTION_NAME",
    "DEFAULT_DESCRIPTION",
    "TOKEN_URI_PREFIX",
    "SVG_URI_PREFIX",
]
