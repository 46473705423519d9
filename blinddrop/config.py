# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Blind-drop configuration.

One dataclass, :class:`DropConfig`, holds the construction parameters of a
drop:

- ``guardian_commitment``: hex SHA3-256 commitment of the guardian seed
- ``guardian_window_s``: how long the guardian may reveal after the automatic seed
- ``max_distribution_s``: claim window length, measured from construction
- ``max_supply``: number of tokens that can ever be claimed
- ``collection_name`` / ``description``: token metadata strings
- ``block_hash_lookback``: how many recent block hashes the ledger exposes

Loaders:
- :meth:`DropConfig.from_env` (prefix ``BLINDDROP_``)
- :meth:`DropConfig.from_file` (JSON or YAML)
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict

import yaml

from blinddrop.commitment import Commitment
from blinddrop.constants import (
    DEFAULT_BLOCK_HASH_LOOKBACK,
    DEFAULT_COLLECTION_NAME,
    DEFAULT_DESCRIPTION,
    DEFAULT_GUARDIAN_WINDOW_S,
    DEFAULT_MAX_DISTRIBUTION_S,
    DEFAULT_MAX_SUPPLY,
)
from blinddrop.utils.bytes import is_hex
from blinddrop.version import __version__


@dataclass
class DropConfig:
    guardian_commitment: str
    guardian_window_s: int = DEFAULT_GUARDIAN_WINDOW_S
    max_distribution_s: int = DEFAULT_MAX_DISTRIBUTION_S
    max_supply: int = DEFAULT_MAX_SUPPLY
    collection_name: str = DEFAULT_COLLECTION_NAME
    description: str = DEFAULT_DESCRIPTION
    block_hash_lookback: int = DEFAULT_BLOCK_HASH_LOOKBACK

    def commitment(self) -> Commitment:
        return Commitment.parse(self.guardian_commitment)

    def validate(self) -> None:
        # YAML reads an unquoted 0x… value as an int.
        if not isinstance(self.guardian_commitment, str) or not is_hex(self.guardian_commitment):
            raise ValueError("guardian_commitment must be a quoted hex string")
        self.commitment()
        for f_name in ("collection_name", "description"):
            if not isinstance(getattr(self, f_name), str):
                raise ValueError(f"{f_name} must be a string")
        for f_name in ("guardian_window_s", "max_distribution_s", "max_supply", "block_hash_lookback"):
            v = getattr(self, f_name)
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValueError(f"{f_name} must be an integer")
            if v <= 0:
                raise ValueError(f"{f_name} must be > 0")
        if not self.collection_name.strip():
            raise ValueError("collection_name must be non-empty")

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["guardian_commitment"] = self.commitment().hex
        data["version"] = __version__
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "BLINDDROP_") -> "DropConfig":
        """
        Load configuration from environment variables. Only the commitment is
        required.

          - BLINDDROP_GUARDIAN_COMMITMENT=0x…
          - BLINDDROP_GUARDIAN_WINDOW_S=86400
          - BLINDDROP_MAX_DISTRIBUTION_S=864000
          - BLINDDROP_MAX_SUPPLY=8000
          - BLINDDROP_COLLECTION_NAME=Bag
          - BLINDDROP_DESCRIPTION=…
          - BLINDDROP_BLOCK_HASH_LOOKBACK=256
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None:
                return default
            try:
                return cast(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        commitment = _get("GUARDIAN_COMMITMENT", str, None)
        if not commitment:
            raise ValueError(f"{prefix}GUARDIAN_COMMITMENT is required")
        cfg = DropConfig(
            guardian_commitment=commitment,
            guardian_window_s=_get("GUARDIAN_WINDOW_S", int, DEFAULT_GUARDIAN_WINDOW_S),
            max_distribution_s=_get("MAX_DISTRIBUTION_S", int, DEFAULT_MAX_DISTRIBUTION_S),
            max_supply=_get("MAX_SUPPLY", int, DEFAULT_MAX_SUPPLY),
            collection_name=_get("COLLECTION_NAME", str, DEFAULT_COLLECTION_NAME),
            description=_get("DESCRIPTION", str, DEFAULT_DESCRIPTION),
            block_hash_lookback=_get("BLOCK_HASH_LOOKBACK", int, DEFAULT_BLOCK_HASH_LOOKBACK),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "DropConfig":
        """
        Load configuration from a JSON or YAML file. Example (YAML):

            guardian_commitment: "0x5f0c…"
            guardian_window_s: 86400
            max_distribution_s: 864000
            max_supply: 8000
        """
        data = _parse_json_or_yaml(_read_text(path), path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping")
        data.pop("version", None)
        unknown = set(data) - set(DropConfig.__dataclass_fields__)
        if unknown:
            raise ValueError(f"unknown config keys in {path!r}: {sorted(unknown)}")
        if "guardian_commitment" not in data:
            raise ValueError(f"{path!r} is missing guardian_commitment")
        cfg = DropConfig(**data)
        cfg.validate()
        return cfg


# -------------------------
# Utilities
# -------------------------


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e


__all__ = ["DropConfig"]
