# src/energytoken/runtime/domain_dispatch.py

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from energytoken.runtime.apply.admin import apply_admin
from energytoken.runtime.apply.energy import apply_energy
from energytoken.runtime.apply.producers import apply_producers
from energytoken.runtime.errors import INVALID_PAYLOAD, NOT_AUTHORIZED, TX_UNIMPLEMENTED, ApplyError
from energytoken.runtime.state_invariants import ensure_state
from energytoken.runtime.tx_schema import validate_payload
from energytoken.runtime.tx_types import TxEnvelope
from energytoken.tx.canon import load_tx_canon

Json = Dict[str, Any]
ApplyFn = Callable[[Json, TxEnvelope], Optional[Json]]


_APPLIERS: tuple[ApplyFn, ...] = (
    apply_producers,
    apply_energy,
    apply_admin,
)


def _enforce_canon(env: TxEnvelope) -> None:
    """Reject tx types that are missing from the canon before any applier sees them."""
    if not env.tx_type:
        raise ApplyError(TX_UNIMPLEMENTED, "missing_tx_type", {"tx_type": env.tx_type})
    if load_tx_canon().get(env.tx_type) is None:
        raise ApplyError(TX_UNIMPLEMENTED, "tx_type_not_in_canon", {"tx_type": env.tx_type})


def _enforce_signer(env: TxEnvelope) -> None:
    if not isinstance(env.signer, str):
        raise ApplyError(
            INVALID_PAYLOAD,
            "signer_must_be_str",
            {"tx_type": env.tx_type, "signer_type": type(env.signer).__name__},
        )


def _enforce_admin_only(state: Json, env: TxEnvelope) -> None:
    """Canon admin_only txs must be signed by the current admin."""
    txdef = load_tx_canon().get(env.tx_type)
    if txdef is None or not txdef.get("admin_only", False):
        return
    if env.signer != state.get("admin"):
        raise ApplyError(NOT_AUTHORIZED, "admin_required", {"tx_type": env.tx_type, "signer": env.signer})


def apply_tx(state: Json, env: Any) -> Json:
    """Apply a single tx envelope to state in place.

    Raises ApplyError on rejection. State may be partially mutated when this
    raises; callers wanting fail-atomic semantics use apply_tx_atomic().
    """
    ensure_state(state)

    # Tests and tools pass raw dict envelopes. Normalize to TxEnvelope so
    # domain appliers can rely on attribute access.
    env_norm = TxEnvelope.from_json(env)

    _enforce_canon(env_norm)
    _enforce_signer(env_norm)

    ok, code, reason, details = validate_payload(tx_type=env_norm.tx_type, payload=env_norm.payload)
    if not ok:
        raise ApplyError(code, reason, details)

    # Shape errors win over authorization errors.
    _enforce_admin_only(state, env_norm)

    for fn in _APPLIERS:
        out = fn(state, env_norm)
        if out is not None:
            return out

    raise ApplyError(TX_UNIMPLEMENTED, "tx_type_not_implemented", {"tx_type": env_norm.tx_type})


__all__ = ["ApplyError", "apply_tx"]
