from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

from energytoken.tx.canon import load_tx_canon


@dataclass(frozen=True)
class TxResult:
    ok: bool
    code: str
    reason: str
    details: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None

    def __iter__(self) -> Iterator[Any]:
        """Allow `ok, code = ledger.mint_energy(...)` unpacking."""
        yield self.ok
        yield None if self.ok else self.code

    @staticmethod
    def success(meta: Optional[Dict[str, Any]] = None) -> "TxResult":
        return TxResult(True, "ok", "applied", None, meta)

    @staticmethod
    def failure(code: str, reason: str, details: Optional[Dict[str, Any]] = None) -> "TxResult":
        return TxResult(False, code, reason, details, None)

    @property
    def error_number(self) -> Optional[int]:
        if self.ok:
            return None
        return load_tx_canon().error_number(self.code)

    def to_json(self) -> Dict[str, Any]:
        """Contract-shaped result: {"value": true} or {"error": <numeric code>}."""
        if self.ok:
            return {"value": True}
        return {"error": self.error_number}


@dataclass(frozen=True)
class TxEnvelope:
    tx_type: str
    signer: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_json(j: Any) -> "TxEnvelope":
        if isinstance(j, TxEnvelope):
            if j.tx_type == j.tx_type.strip().upper():
                return j
            j = j.to_json()
        if not isinstance(j, dict):
            j = dict(j)  # type: ignore[arg-type]
        payload = j.get("payload")
        signer = j.get("signer")
        return TxEnvelope(
            tx_type=str(j.get("tx_type", "") or "").strip().upper(),
            # Non-str signers are kept as-is so dispatch can reject them.
            signer="" if signer is None else signer,
            # Non-dict payloads are kept as-is so schema validation can reject them.
            payload={} if payload is None else payload,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "tx_type": self.tx_type,
            "signer": self.signer,
            "payload": self.payload,
        }
