# src/energytoken/runtime/apply/admin.py
from __future__ import annotations

from typing import Any, Dict, Optional, Set

from energytoken.runtime.tx_types import TxEnvelope

Json = Dict[str, Any]


def _apply_admin_transfer(state: Json, env: TxEnvelope) -> Json:
    # Signer is the current admin (canon admin_only, checked at dispatch).
    previous = state.get("admin")
    new_admin = env.payload["new_admin"]
    state["admin"] = new_admin
    return {"applied": "ADMIN_TRANSFER", "from": previous, "to": new_admin}


ADMIN_TX_TYPES: Set[str] = {"ADMIN_TRANSFER"}


def apply_admin(state: Json, env: TxEnvelope) -> Optional[Json]:
    if env.tx_type not in ADMIN_TX_TYPES:
        return None
    return _apply_admin_transfer(state, env)


__all__ = ["ADMIN_TX_TYPES", "apply_admin"]
