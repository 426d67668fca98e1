# src/energytoken/runtime/apply/energy.py
from __future__ import annotations

from typing import Any, Dict, Optional, Set

from energytoken.runtime.errors import (
    INSUFFICIENT_BALANCE,
    INVALID_AMOUNT,
    NOT_AUTHORIZED,
    NOT_FOUND,
    ApplyError,
)
from energytoken.runtime.tx_types import TxEnvelope

Json = Dict[str, Any]


def _balances(state: Json) -> Json:
    b = state.get("balances")
    if not isinstance(b, dict):
        b = {}
        state["balances"] = b
    return b


def _balance_of(balances: Json, who: str) -> int:
    # Absent key reads as zero.
    return int(balances.get(who, 0))


def _require_positive_amount(env: TxEnvelope) -> int:
    amount = env.payload["amount"]
    if amount <= 0:
        raise ApplyError(INVALID_AMOUNT, "amount_must_be_positive", {"tx_type": env.tx_type, "amount": amount})
    return amount


def _apply_energy_mint(state: Json, env: TxEnvelope) -> Json:
    amount = _require_positive_amount(env)

    rec = state.get("producers", {}).get(env.signer)
    if not isinstance(rec, dict):
        raise ApplyError(NOT_FOUND, "producer_not_found", {"producer": env.signer})
    if not rec.get("verified", False):
        raise ApplyError(NOT_AUTHORIZED, "producer_not_verified", {"producer": env.signer})

    balances = _balances(state)
    balances[env.signer] = _balance_of(balances, env.signer) + amount
    return {"applied": "ENERGY_MINT", "producer": env.signer, "amount": amount}


def _apply_energy_burn(state: Json, env: TxEnvelope) -> Json:
    amount = _require_positive_amount(env)

    balances = _balances(state)
    bal = _balance_of(balances, env.signer)
    if bal < amount:
        raise ApplyError(INSUFFICIENT_BALANCE, "burn_exceeds_balance", {"balance": bal, "amount": amount})

    balances[env.signer] = bal - amount
    return {"applied": "ENERGY_BURN", "account": env.signer, "amount": amount}


def _apply_energy_transfer(state: Json, env: TxEnvelope) -> Json:
    amount = _require_positive_amount(env)

    frm = env.signer
    to = env.payload["to"]

    balances = _balances(state)
    fb = _balance_of(balances, frm)
    if fb < amount:
        raise ApplyError(INSUFFICIENT_BALANCE, "transfer_exceeds_balance", {"balance": fb, "amount": amount})

    # Self-transfer leaves balances unchanged.
    if to != frm:
        tb = _balance_of(balances, to)
        balances[frm] = fb - amount
        balances[to] = tb + amount

    return {"applied": "ENERGY_TRANSFER", "from": frm, "to": to, "amount": amount}


ENERGY_TX_TYPES: Set[str] = {
    "ENERGY_MINT",
    "ENERGY_BURN",
    "ENERGY_TRANSFER",
}


def apply_energy(state: Json, env: TxEnvelope) -> Optional[Json]:
    """
    Returns:
      - dict: applied result (receipt convenience)
      - None: tx_type not in energy domain
    """
    t = env.tx_type
    if t not in ENERGY_TX_TYPES:
        return None

    if t == "ENERGY_MINT":
        return _apply_energy_mint(state, env)

    if t == "ENERGY_BURN":
        return _apply_energy_burn(state, env)

    if t == "ENERGY_TRANSFER":
        return _apply_energy_transfer(state, env)

    return None


__all__ = ["ENERGY_TX_TYPES", "apply_energy"]
