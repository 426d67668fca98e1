# src/energytoken/runtime/ledger_config.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from energytoken.ledger.constants import DEFAULT_ADMIN, DEFAULT_LEDGER_ID, DEFAULT_MAX_RECEIPTS

Json = Dict[str, Any]


def _as_int(v: Any, default: int) -> int:
    if v is None:
        return int(default)
    if isinstance(v, bool):
        raise ValueError(f"expected int, got bool: {v!r}")
    return int(v)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


def _as_bool(v: Any, default: bool) -> bool:
    if v is None:
        return bool(default)
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return bool(default)


@dataclass(frozen=True)
class LedgerConfig:
    ledger_id: str

    # Admin identity installed on a fresh (or reset) ledger.
    admin: str

    # Bound on the in-memory receipt list.
    max_receipts: int

    # Audit state invariants after every committed tx.
    check_invariants: bool

    log_level: str


def validate_ledger_config(cfg: LedgerConfig) -> None:
    """Fail-fast validation for operator config."""

    if not isinstance(cfg.ledger_id, str) or not cfg.ledger_id.strip():
        raise ValueError("ledger_id must be a non-empty string")

    if not isinstance(cfg.admin, str) or not cfg.admin.strip():
        raise ValueError("admin must be a non-empty string")

    if int(cfg.max_receipts) < 0:
        raise ValueError(f"max_receipts must be >= 0; got: {cfg.max_receipts}")

    level = str(cfg.log_level or "").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"log_level must be a logging level name; got: {cfg.log_level!r}")


def default_ledger_config() -> LedgerConfig:
    return LedgerConfig(
        ledger_id=DEFAULT_LEDGER_ID,
        admin=DEFAULT_ADMIN,
        max_receipts=DEFAULT_MAX_RECEIPTS,
        check_invariants=True,
        # Config files may override; otherwise the environment decides.
        log_level=_as_str(os.environ.get("ENERGYTOKEN_LOG_LEVEL"), "INFO").strip().upper(),
    )


def read_ledger_config_file(path: str) -> LedgerConfig:
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("ledger config must be a JSON object")

    d = default_ledger_config()

    cfg = LedgerConfig(
        ledger_id=_as_str(raw.get("ledger_id"), d.ledger_id),
        admin=_as_str(raw.get("admin"), d.admin),
        max_receipts=_as_int(raw.get("max_receipts"), d.max_receipts),
        check_invariants=_as_bool(raw.get("check_invariants"), d.check_invariants),
        log_level=_as_str(raw.get("log_level"), d.log_level).strip().upper(),
    )

    validate_ledger_config(cfg)
    return cfg


def load_ledger_config(*, config_path: Optional[str] = None) -> LedgerConfig:
    p = config_path or os.environ.get("ENERGYTOKEN_CONFIG_PATH")
    if p:
        return read_ledger_config_file(p)

    cfg = default_ledger_config()
    validate_ledger_config(cfg)
    return cfg


__all__ = [
    "LedgerConfig",
    "default_ledger_config",
    "load_ledger_config",
    "read_ledger_config_file",
    "validate_ledger_config",
]
