from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Flat error taxonomy. Numeric codes live in tx/tx_canon.yaml.
NOT_AUTHORIZED = "not_authorized"
ALREADY_REGISTERED = "already_registered"
NOT_FOUND = "not_found"
INVALID_AMOUNT = "invalid_amount"
INSUFFICIENT_BALANCE = "insufficient_balance"
INVALID_PAYLOAD = "invalid_payload"
TX_UNIMPLEMENTED = "tx_unimplemented"


@dataclass
class ApplyError(Exception):
    """Canonical error type for domain apply and dispatch failures."""

    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


__all__ = [
    "ALREADY_REGISTERED",
    "INSUFFICIENT_BALANCE",
    "INVALID_AMOUNT",
    "INVALID_PAYLOAD",
    "NOT_AUTHORIZED",
    "NOT_FOUND",
    "TX_UNIMPLEMENTED",
    "ApplyError",
]
