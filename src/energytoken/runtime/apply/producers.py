# src/energytoken/runtime/apply/producers.py
from __future__ import annotations

from typing import Any, Dict, Optional, Set

from energytoken.runtime.errors import ALREADY_REGISTERED, NOT_FOUND, ApplyError
from energytoken.runtime.tx_types import TxEnvelope

Json = Dict[str, Any]


def _producers(state: Json) -> Json:
    p = state.get("producers")
    if not isinstance(p, dict):
        p = {}
        state["producers"] = p
    return p


def _apply_producer_register(state: Json, env: TxEnvelope) -> Json:
    producers = _producers(state)
    if env.signer in producers:
        raise ApplyError(ALREADY_REGISTERED, "producer_exists", {"producer": env.signer})

    name = env.payload["name"]
    producers[env.signer] = {"name": name, "verified": False}
    return {"applied": "PRODUCER_REGISTER", "producer": env.signer, "name": name}


def _apply_producer_verify(state: Json, env: TxEnvelope) -> Json:
    # Admin signer already checked at dispatch (canon admin_only).
    producer_id = env.payload["producer"]
    rec = _producers(state).get(producer_id)
    if not isinstance(rec, dict):
        raise ApplyError(NOT_FOUND, "producer_not_found", {"producer": producer_id})

    # Re-verifying a verified producer is a no-op success.
    rec["verified"] = True
    return {"applied": "PRODUCER_VERIFY", "producer": producer_id}


PRODUCER_TX_TYPES: Set[str] = {
    "PRODUCER_REGISTER",
    "PRODUCER_VERIFY",
}


def apply_producers(state: Json, env: TxEnvelope) -> Optional[Json]:
    """
    Returns:
      - dict: applied result (receipt convenience)
      - None: tx_type not in producers domain
    """
    t = env.tx_type
    if t not in PRODUCER_TX_TYPES:
        return None

    if t == "PRODUCER_REGISTER":
        return _apply_producer_register(state, env)

    if t == "PRODUCER_VERIFY":
        return _apply_producer_verify(state, env)

    return None


__all__ = ["PRODUCER_TX_TYPES", "apply_producers"]
