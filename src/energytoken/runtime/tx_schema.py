from __future__ import annotations

"""Transaction payload schemas.

Every canon TxType has a strict payload model (unknown keys rejected, no type
coercion). Validation runs before a tx reaches its domain applier, so appliers
can rely on payload shape and only enforce ledger semantics (authorization,
existence, amounts and balances).

Range checks on `amount` are deliberately NOT done here: `amount <= 0` is a
ledger-level InvalidAmount rejection, not a malformed payload.
"""

from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, ValidationError

from energytoken.runtime.errors import INVALID_AMOUNT, INVALID_PAYLOAD

Json = Dict[str, Any]


class _StrictModel(BaseModel):
    """Strict model: reject unknown keys."""

    model_config = ConfigDict(extra="forbid", strict=True)


# ---------------------------------------------------------------------------
# Producers
# ---------------------------------------------------------------------------


class ProducerRegisterPayload(_StrictModel):
    name: StrictStr


class ProducerVerifyPayload(_StrictModel):
    producer: StrictStr


# ---------------------------------------------------------------------------
# Energy
# ---------------------------------------------------------------------------


class EnergyAmountPayload(_StrictModel):
    amount: StrictInt


class EnergyTransferPayload(_StrictModel):
    to: StrictStr
    amount: StrictInt


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class AdminTransferPayload(_StrictModel):
    new_admin: StrictStr


Schema = Type[BaseModel]

_SCHEMA_BY_TX_TYPE: Dict[str, Schema] = {
    "PRODUCER_REGISTER": ProducerRegisterPayload,
    "PRODUCER_VERIFY": ProducerVerifyPayload,
    "ENERGY_MINT": EnergyAmountPayload,
    "ENERGY_BURN": EnergyAmountPayload,
    "ENERGY_TRANSFER": EnergyTransferPayload,
    "ADMIN_TRANSFER": AdminTransferPayload,
}


def schema_for(tx_type: str) -> Optional[Schema]:
    return _SCHEMA_BY_TX_TYPE.get(str(tx_type or "").strip().upper())


def _touches_amount(errors: list[Dict[str, Any]]) -> bool:
    for err in errors:
        loc = err.get("loc") or ()
        if loc and loc[0] == "amount" and err.get("type") != "missing":
            return True
    return False


def validate_payload(*, tx_type: str, payload: Any) -> Tuple[bool, str, str, Optional[Json]]:
    """Validate payload against the schema for tx_type.

    Returns: (ok, code, reason, details)

    A tx_type without a schema is accepted here; the dispatcher rejects it
    as unimplemented.
    """
    sch = schema_for(tx_type)
    if sch is None:
        return True, "", "", None

    if not isinstance(payload, dict):
        return False, INVALID_PAYLOAD, "payload_must_be_object", {"tx_type": tx_type}

    try:
        sch.model_validate(payload)
    except ValidationError as ve:
        errors = ve.errors(include_url=False, include_context=False, include_input=False)
        details: Json = {"tx_type": tx_type, "errors": errors}
        if _touches_amount(errors):
            return False, INVALID_AMOUNT, "amount_must_be_int", details
        return False, INVALID_PAYLOAD, "payload_schema_mismatch", details

    return True, "", "", None


__all__ = [
    "AdminTransferPayload",
    "EnergyAmountPayload",
    "EnergyTransferPayload",
    "ProducerRegisterPayload",
    "ProducerVerifyPayload",
    "schema_for",
    "validate_payload",
]
