# src/energytoken/tx/canon.py
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, TypedDict

import yaml

DEFAULT_CANON_PATH = Path(__file__).resolve().parent / "tx_canon.yaml"


class CanonError(RuntimeError):
    pass


class CanonTxType(TypedDict, total=False):
    """
    Canonical TxType entry.

    total=False so we can carry extra forward-compatible fields
    while validating required fields at load-time.
    """
    id: int
    name: str
    domain: str
    admin_only: bool
    notes: str


class CanonErrorCode(TypedDict):
    code: str
    number: int
    name: str


@dataclass(frozen=True)
class TxCanon:
    """
    Normalized tx canon.

    - by_name / by_id index the tx types
    - errors_by_code maps the string error code used in ApplyError to its entry
    """
    tx_types: List[CanonTxType]
    by_name: Dict[str, CanonTxType]
    by_id: Dict[int, CanonTxType]
    errors_by_code: Dict[str, CanonErrorCode]
    meta: Dict[str, Any]
    source_sha256: str

    def get(self, name: str) -> Optional[CanonTxType]:
        return self.by_name.get(str(name or "").strip().upper())

    def get_by_id(self, tx_id: int) -> Optional[CanonTxType]:
        return self.by_id.get(int(tx_id))

    def names(self) -> frozenset[str]:
        return frozenset(self.by_name)

    def error_number(self, code: str) -> int:
        entry = self.errors_by_code.get(code)
        if entry is None:
            raise CanonError(f"unknown error code: {code!r}")
        return entry["number"]

    def error_name(self, code: str) -> str:
        entry = self.errors_by_code.get(code)
        if entry is None:
            raise CanonError(f"unknown error code: {code!r}")
        return entry["name"]


def _sha256_bytes(data: bytes) -> str:
    h = hashlib.sha256()
    h.update(data)
    return h.hexdigest()


def _validate_tx_entry(tx: Any) -> CanonTxType:
    if not isinstance(tx, dict):
        raise CanonError("tx entry must be a mapping")

    name = tx.get("name")
    if not isinstance(name, str) or not name.strip():
        raise CanonError("tx entry 'name' must be non-empty string")

    tx_id = tx.get("id")
    # bool is an int subclass; disallow it explicitly
    if isinstance(tx_id, bool) or not isinstance(tx_id, int):
        raise CanonError(f"tx '{name}' id must be int")

    out: CanonTxType = dict(tx)  # type: ignore[assignment]
    out["name"] = name.strip().upper()
    out["domain"] = str(tx.get("domain") or "").strip().lower()
    out["admin_only"] = bool(tx.get("admin_only", False))
    return out


def _validate_error_entry(err: Any) -> CanonErrorCode:
    if not isinstance(err, dict):
        raise CanonError("error entry must be a mapping")

    code = err.get("code")
    number = err.get("number")
    if not isinstance(code, str) or not code.strip():
        raise CanonError("error entry 'code' must be non-empty string")
    if isinstance(number, bool) or not isinstance(number, int):
        raise CanonError(f"error '{code}' number must be int")

    return {"code": code.strip(), "number": number, "name": str(err.get("name") or code).strip()}


def load_tx_canon_yaml(path: str | Path) -> TxCanon:
    """Load a tx canon YAML file and return a normalized, validated index."""
    p = Path(path)
    if not p.is_file():
        raise CanonError(f"canon artifact not found: {p}")

    raw = p.read_bytes()
    try:
        obj = yaml.safe_load(raw.decode("utf-8"))
    except yaml.YAMLError as e:
        raise CanonError(f"failed to parse {p.name}: {e}") from e

    if not isinstance(obj, dict):
        raise CanonError(f"canon invalid: expected mapping root in {p}")

    txs = obj.get("tx_types")
    if not isinstance(txs, list) or not txs:
        raise CanonError(f"canon invalid: expected non-empty list at 'tx_types' in {p}")

    errs = obj.get("errors")
    if not isinstance(errs, list):
        raise CanonError(f"canon invalid: expected list at 'errors' in {p}")

    tx_list: List[CanonTxType] = []
    by_name: Dict[str, CanonTxType] = {}
    by_id: Dict[int, CanonTxType] = {}
    for it in txs:
        tx = _validate_tx_entry(it)
        name = tx["name"]
        tx_id = tx["id"]
        if name in by_name:
            raise CanonError(f"duplicate tx name in canon: {name}")
        if tx_id in by_id:
            raise CanonError(f"duplicate tx id in canon: {tx_id}")
        by_name[name] = tx
        by_id[tx_id] = tx
        tx_list.append(tx)

    tx_list.sort(key=lambda x: int(x["id"]))

    errors_by_code: Dict[str, CanonErrorCode] = {}
    numbers: set[int] = set()
    for it in errs:
        err = _validate_error_entry(it)
        if err["code"] in errors_by_code:
            raise CanonError(f"duplicate error code in canon: {err['code']}")
        if err["number"] in numbers:
            raise CanonError(f"duplicate error number in canon: {err['number']}")
        errors_by_code[err["code"]] = err
        numbers.add(err["number"])

    meta = {k: v for k, v in obj.items() if k not in {"tx_types", "errors"}}

    return TxCanon(
        tx_types=tx_list,
        by_name=by_name,
        by_id=by_id,
        errors_by_code=errors_by_code,
        meta=meta,
        source_sha256=_sha256_bytes(raw),
    )


@lru_cache(maxsize=1)
def load_tx_canon() -> TxCanon:
    """Load the packaged canon once per process."""
    return load_tx_canon_yaml(DEFAULT_CANON_PATH)


__all__ = [
    "DEFAULT_CANON_PATH",
    "CanonError",
    "CanonErrorCode",
    "CanonTxType",
    "TxCanon",
    "load_tx_canon",
    "load_tx_canon_yaml",
]
