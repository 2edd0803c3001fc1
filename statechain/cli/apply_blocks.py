#!/usr/bin/env python3
"""
statechain.cli.apply_blocks — execute a JSON chain description and print the result.

This CLI:
  1) Builds an empty Runtime
  2) Seeds genesis balances (administrative; no nonces are touched)
  3) Executes every block in order via Runtime.execute_block
  4) Prints per-block outcomes and the final state snapshot

Input document:

    {
      "genesis": {"balances": {"alice": 100}},
      "blocks": [
        {"header": {"block_number": 1},
         "extrinsics": [{"caller": "alice",
                         "call": {"module": "balances", "call": "transfer",
                                  "args": {"to": "bob", "amount": 69}}}]}
      ]
    }

Usage:
    python -m statechain.cli.apply_blocks --input chain.json [--json]
    python -m statechain.cli.apply_blocks --demo

Exit codes:
    0  all blocks executed (individual extrinsics may have failed)
    1  a block was rejected (BlockNumberMismatch); later blocks are not executed
    2  unreadable or malformed input
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .. import logging as slog
from ..config import summary
from ..errors import BlockNumberMismatch
from ..pallets.balances import Transfer
from ..pallets.proof_of_existence import CreateClaim, RevokeClaim
from ..runtime.dispatcher import RuntimeCall
from ..runtime.executor import Runtime
from ..types.block import Block, Extrinsic
from ..types.result import BlockResult
from ..version import __version__, version_metadata

log = slog.get_logger("statechain.cli.apply_blocks")


# --- Helpers -------------------------------------------------------------------------------------
def eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def demo_chain() -> Dict[str, Any]:
    """The reference scenario: two transfers out of alice, then claim traffic."""
    alice, bob, charlie = "alice", "bob", "charlie"
    blocks = [
        Block.build(1, [
            Extrinsic(alice, RuntimeCall.balances(Transfer(to=bob, amount=30))),
            Extrinsic(alice, RuntimeCall.balances(Transfer(to=charlie, amount=20))),
        ]),
        Block.build(2, [
            Extrinsic(alice, RuntimeCall.proof_of_existence(CreateClaim("Hello, world!"))),
            Extrinsic(bob, RuntimeCall.proof_of_existence(CreateClaim("Hello, world!"))),
        ]),
        Block.build(3, [
            Extrinsic(alice, RuntimeCall.proof_of_existence(RevokeClaim("Hello, world!"))),
            Extrinsic(bob, RuntimeCall.proof_of_existence(CreateClaim("Hello, world!"))),
        ]),
    ]
    return {
        "genesis": {"balances": {alice: 100}},
        "blocks": [b.to_dict() for b in blocks],
    }


def load_document(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        doc = json.load(f)
    if not isinstance(doc, Mapping):
        raise ValueError("input must be a JSON object")
    return dict(doc)


def seed_genesis(runtime: Runtime, genesis: Mapping[str, Any]) -> None:
    balances = genesis.get("balances") or {}
    if not isinstance(balances, Mapping):
        raise ValueError("genesis.balances must be an object")
    for who, amount in balances.items():
        if isinstance(amount, str) and amount.isdigit():
            amount = int(amount)
        runtime.balances.set_balance(who, amount)


def run(doc: Mapping[str, Any], runtime: Optional[Runtime] = None) -> Dict[str, Any]:
    """
    Execute `doc` and return a JSON-friendly report.

    Report keys: 'blocks' (list of BlockResult dicts), 'rejected' (error dict or
    None), 'state' (final snapshot), 'stateRoot' (hex).

    Every block is decoded before genesis is seeded, so a malformed document
    leaves `runtime` untouched.
    """
    raw_blocks = doc.get("blocks") or []
    if not isinstance(raw_blocks, (list, tuple)):
        raise ValueError("blocks must be a list")
    blocks = [Block.from_dict(b) for b in raw_blocks]

    runtime = runtime or Runtime()
    seed_genesis(runtime, doc.get("genesis") or {})

    results: List[BlockResult] = []
    rejected: Optional[Dict[str, Any]] = None
    for block in blocks:
        try:
            results.append(runtime.execute_block(block))
        except BlockNumberMismatch as err:
            rejected = err.to_dict()
            break

    return {
        "blocks": [r.to_dict() for r in results],
        "rejected": rejected,
        "state": runtime.snapshot(),
        "stateRoot": "0x" + runtime.state_root().hex(),
    }


def _print_text(report: Mapping[str, Any]) -> None:
    for b in report["blocks"]:
        print(f"block #{b['blockNumber']}: {b['extrinsics']} extrinsic(s), {b['failed']} failed")
        for o in b["outcomes"]:
            if o["status"] != "success":
                err = o.get("error") or {}
                print(f"  [{o['index']}] {o['caller']} {o['module']}.{o['call']}: {err.get('code')}")
    if report["rejected"]:
        print(f"rejected: {report['rejected']['code']} {report['rejected'].get('data')}")
    state = report["state"]
    print(f"block_number: {state['system']['block_number']}")
    for who, bal in state["balances"]["balances"].items():
        print(f"balance {who}: {bal}")
    for who, n in state["system"]["nonces"].items():
        print(f"nonce {who}: {n}")
    for claim, owner in state["proof_of_existence"]["claims"].items():
        print(f"claim {claim!r}: {owner}")
    print(f"state_root: {report['stateRoot']}")


# --- Main ----------------------------------------------------------------------------------------
def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="statechain.cli.apply_blocks",
        description="Execute blocks of extrinsics against a fresh in-memory runtime.",
    )
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", type=Path, help="Path to a JSON chain document")
    src.add_argument("--demo", action="store_true", help="Run the built-in demo scenario")
    ap.add_argument("--json", action="store_true", help="Print the full report as JSON")
    ap.add_argument("--log-level", default=None, help="Log level (default: $STATECHAIN_LOG_LEVEL or INFO)")
    ap.add_argument("--log-format", choices=("json", "text"), default="text", help="Log output format")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = ap.parse_args(argv)

    slog.configure(json=args.log_format == "json", level=args.log_level)

    with slog.trace_scope():
        slog.bind(component="apply_blocks")
        try:
            log.debug("starting %s", summary(), extra=version_metadata())
            doc = demo_chain() if args.demo else load_document(args.input)
            report = run(doc)
        except (OSError, ValueError, TypeError, KeyError, OverflowError) as ex:
            eprint(f"[apply_blocks] invalid input: {ex}")
            return 2

        log.info(
            "blocks applied",
            extra={"blocks": len(report["blocks"]), "rejected": bool(report["rejected"])},
        )

    if args.json:
        print(json.dumps(report, indent=2, sort_keys=True))
    else:
        _print_text(report)
    return 1 if report["rejected"] else 0


if __name__ == "__main__":
    sys.exit(main())
