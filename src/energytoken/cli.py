# src/energytoken/cli.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple

from energytoken.env import load_dotenv_if_present

Json = Dict[str, Any]


class ReplayInputError(ValueError):
    pass


def _iter_envelopes(path: Path) -> Iterator[Tuple[int, Json]]:
    """Yield (line_no, envelope) from a JSON Lines file; blank and '#' lines are skipped."""
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            try:
                obj = json.loads(s)
            except json.JSONDecodeError as e:
                raise ReplayInputError(f"{path}:{line_no}: invalid JSON: {e.msg}") from e
            if not isinstance(obj, dict):
                raise ReplayInputError(f"{path}:{line_no}: envelope must be a JSON object")
            yield line_no, obj


def _emit(out: TextIO, obj: Json) -> None:
    out.write(json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False) + "\n")


def _cmd_replay(args: argparse.Namespace, out: TextIO) -> int:
    # Import after dotenv load (prevents "config read before env" surprises)
    from energytoken.runtime.energy_ledger import EnergyLedger
    from energytoken.runtime.ledger_config import load_ledger_config
    from energytoken.structured_logging import configure_structured_logging

    try:
        cfg = load_ledger_config(config_path=args.config)
    except (OSError, ValueError) as e:
        print(f"energytoken: bad ledger config: {e}", file=sys.stderr)
        return 2
    configure_structured_logging(cfg.log_level)

    ledger = EnergyLedger(cfg, admin=args.admin)

    path = Path(args.file)
    if not path.is_file():
        print(f"energytoken: no such file: {path}", file=sys.stderr)
        return 2

    rejected = 0
    try:
        for line_no, env in _iter_envelopes(path):
            res = ledger.submit(env)
            if not res.ok:
                rejected += 1
            _emit(
                out,
                {
                    "line": line_no,
                    "tx_type": str(env.get("tx_type", "")),
                    "ok": res.ok,
                    "code": res.code,
                    "reason": res.reason,
                    "result": res.to_json(),
                },
            )
    except ReplayInputError as e:
        print(f"energytoken: {e}", file=sys.stderr)
        return 2

    view = ledger.view()
    _emit(
        out,
        {
            "admin": view.admin,
            "producers": view.producers,
            "balances": view.balances,
            "total_supply": view.total_supply(),
        },
    )

    if args.strict and rejected:
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="energytoken", description="Energy tokenization ledger tools.")
    sub = p.add_subparsers(dest="command", required=True)

    rp = sub.add_parser("replay", help="Replay a JSON Lines file of tx envelopes against a fresh ledger.")
    rp.add_argument("file", help="Path to a .jsonl file with one {tx_type, signer, payload} object per line")
    rp.add_argument("--config", default=None, help="Ledger config JSON (default: $ENERGYTOKEN_CONFIG_PATH)")
    rp.add_argument("--admin", default=None, help="Override the initial admin identity")
    rp.add_argument("--strict", action="store_true", help="Exit 1 if any envelope was rejected")
    rp.set_defaults(func=_cmd_replay)

    return p


def main(argv: Optional[List[str]] = None, *, out: Optional[TextIO] = None) -> int:
    # Load .env early so ENERGYTOKEN_* vars exist before anything reads them.
    load_dotenv_if_present()

    args = build_parser().parse_args(argv)
    return int(args.func(args, out or sys.stdout))


__all__ = ["build_parser", "main"]
