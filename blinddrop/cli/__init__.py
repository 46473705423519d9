# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
blinddrop.cli
-------------

Offline tooling for blind drops.

Commands:
  - commit    : Generate (or take) a guardian seed and print its commitment.
  - verify    : Check a revealed guardian seed against a commitment.
  - render    : Attributes / SVG / token URI for a public final seed.
  - simulate  : Run a complete drop on an in-process ledger.

Example:
  python -m blinddrop.cli commit
  python -m blinddrop.cli render --final-seed 0x… --token 7 --format uri
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, NoReturn, Optional

import typer

from blinddrop.commitment import Commitment, build_commitment_hex, generate_guardian_seed
from blinddrop.config import DropConfig
from blinddrop.drop import BlindDrop
from blinddrop.errors import DropError
from blinddrop.generator import render_with_seed, token_uri_with_seed
from blinddrop.ledger.dev import DevLedger
from blinddrop.utils.bytes import ensure_len, from_hex, to_hex
from blinddrop.version import __version__

__all__ = ["app", "main"]

app = typer.Typer(
    name="blinddrop",
    help="Blind-drop tooling (guardian commitment, verification, rendering, simulation).",
    no_args_is_help=True,
    add_completion=False,
)


def _fail(msg: str) -> NoReturn:
    typer.echo(msg, err=True)
    raise typer.Exit(code=1)


def _seed_arg(value: str, name: str) -> bytes:
    try:
        return ensure_len(from_hex(value), 32, name=name)
    except (TypeError, ValueError) as e:
        _fail(f"Invalid {name}: {e}")


def _dump(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2))


@app.callback()
def _root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log state transitions to stderr."),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command("version")
def cmd_version() -> None:
    """Print the package version."""
    typer.echo(__version__)


@app.command("commit")
def cmd_commit(
    seed: Optional[str] = typer.Option(
        None, "--seed", "-s", help="0x-hex 32-byte guardian seed (generated if omitted)."
    ),
) -> None:
    """
    Print a guardian seed and its commitment.

    Keep the seed secret; publish only the commitment. The seed is revealed
    after the automatic seed has been set.
    """
    raw = _seed_arg(seed, "seed") if seed else generate_guardian_seed()
    _dump({"seed": to_hex(raw), "commitment": build_commitment_hex(raw)})


@app.command("verify")
def cmd_verify(
    seed: str = typer.Option(..., "--seed", "-s", help="0x-hex revealed guardian seed."),
    commitment: str = typer.Option(..., "--commitment", "-c", help="0x-hex SHA3-256 commitment."),
) -> None:
    """Exit 0 if SHA3-256(seed) equals the commitment, 1 otherwise."""
    try:
        c = Commitment.parse(commitment)
    except (TypeError, ValueError) as e:
        _fail(f"Invalid commitment: {e}")
    raw = _seed_arg(seed, "seed")
    ok = c.matches(raw)
    _dump({"valid": ok, "commitment": c.hex, "seed_hash": build_commitment_hex(raw)})
    if not ok:
        raise typer.Exit(code=1)


@app.command("render")
def cmd_render(
    final_seed: str = typer.Option(..., "--final-seed", "-f", help="0x-hex public final seed."),
    token: int = typer.Option(..., "--token", "-t", min=1, help="Token id (1-based)."),
    fmt: str = typer.Option("attributes", "--format", help="attributes | svg | uri"),
    collection_name: str = typer.Option("Bag", "--name", help="Collection name used in the URI."),
) -> None:
    """Reproduce a token's output from the public final seed."""
    raw = _seed_arg(final_seed, "final seed")
    if fmt == "attributes":
        attrs, _ = render_with_seed(raw, token)
        _dump(attrs.to_dict())
    elif fmt == "svg":
        _, svg = render_with_seed(raw, token)
        typer.echo(svg)
    elif fmt == "uri":
        typer.echo(token_uri_with_seed(raw, token, collection_name=collection_name))
    else:
        _fail(f"Unknown --format {fmt!r} (expected attributes, svg or uri)")


@app.command("simulate")
def cmd_simulate(
    supply: int = typer.Option(3, "--supply", min=1, help="Max supply."),
    claims: int = typer.Option(3, "--claims", min=0, help="Number of claims before closing."),
    guardian: bool = typer.Option(
        True, "--guardian/--no-guardian", help="Reveal the guardian seed or take the fallback path."
    ),
    guardian_seed: Optional[str] = typer.Option(
        None, "--guardian-seed", help="0x-hex guardian seed (generated if omitted)."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", help="JSON/YAML DropConfig; its commitment must match --guardian-seed."
    ),
) -> None:
    """Run claim -> seed finalization -> rendering on a DevLedger and print a summary."""
    seed = _seed_arg(guardian_seed, "guardian seed") if guardian_seed else generate_guardian_seed()
    try:
        if config:
            cfg = DropConfig.from_file(config)
        else:
            cfg = DropConfig(guardian_commitment=build_commitment_hex(seed), max_supply=supply)
        cfg.validate()
        result = _run_simulation(cfg, seed, claims=claims, guardian=guardian)
    except (DropError, ValueError) as e:
        _fail(f"Simulation failed: {e}")
    _dump(result)


def _run_simulation(cfg: DropConfig, seed: bytes, *, claims: int, guardian: bool) -> Dict[str, Any]:
    ledger = DevLedger(lookback=cfg.block_hash_lookback)
    drop = BlindDrop.local(cfg, ledger=ledger)
    for i in range(claims):
        drop.claim("0x" + f"{i + 1:040x}")
    if not drop.is_distribution_closed():
        ledger.advance_time(cfg.max_distribution_s)
    drop.set_automatic_seed_block_number()
    ledger.mine()
    drop.set_automatic_seed()
    if guardian:
        drop.set_guardian_seed(seed)
    else:
        ledger.advance_time(cfg.guardian_window_s + 1)
        drop.set_fallback_seed_block_number()
        ledger.mine()
        drop.set_fallback_seed()
    drop.set_final_seed()
    tokens = {}
    for i in range(drop.total_supply()):
        tid = int(drop.token_by_index(i))
        attrs, _ = drop.render(tid)
        tokens[str(tid)] = attrs.lines()
    return {
        "snapshot": drop.snapshot(),
        "events": [e.to_dict() for e in ledger.log],
        "tokens": tokens,
    }


def main() -> None:  # pragma: no cover - thin wrapper
    """Entry-point for the ``blinddrop`` console script and ``python -m blinddrop.cli``."""
    try:
        app(prog_name="blinddrop")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
