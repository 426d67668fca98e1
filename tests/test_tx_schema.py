# tests/test_tx_schema.py
from __future__ import annotations

from energytoken.runtime.errors import INVALID_AMOUNT, INVALID_PAYLOAD
from energytoken.runtime.tx_schema import schema_for, validate_payload


def test_every_canon_tx_type_has_a_schema() -> None:
    from energytoken.tx.canon import load_tx_canon

    for name in load_tx_canon().names():
        assert schema_for(name) is not None, name


def test_valid_payloads_pass() -> None:
    assert validate_payload(tx_type="ENERGY_TRANSFER", payload={"to": "STUSER1", "amount": 1})[0] is True
    # Range is a ledger concern, not a schema concern.
    assert validate_payload(tx_type="ENERGY_BURN", payload={"amount": -3})[0] is True


def test_unknown_keys_are_rejected() -> None:
    ok, code, reason, details = validate_payload(tx_type="PRODUCER_REGISTER", payload={"name": "x", "verified": True})
    assert ok is False
    assert code == INVALID_PAYLOAD
    assert reason == "payload_schema_mismatch"
    assert details["tx_type"] == "PRODUCER_REGISTER"


def test_missing_amount_is_a_payload_error() -> None:
    ok, code, _, _ = validate_payload(tx_type="ENERGY_MINT", payload={})
    assert ok is False
    assert code == INVALID_PAYLOAD


def test_non_int_amount_is_an_amount_error() -> None:
    ok, code, reason, _ = validate_payload(tx_type="ENERGY_TRANSFER", payload={"to": "U1", "amount": 2.5})
    assert ok is False
    assert code == INVALID_AMOUNT
    assert reason == "amount_must_be_int"


def test_identities_must_be_strings() -> None:
    ok, code, _, _ = validate_payload(tx_type="ADMIN_TRANSFER", payload={"new_admin": 7})
    assert ok is False
    assert code == INVALID_PAYLOAD


def test_payload_must_be_an_object() -> None:
    ok, code, reason, _ = validate_payload(tx_type="ENERGY_MINT", payload=[100])
    assert (ok, code, reason) == (False, INVALID_PAYLOAD, "payload_must_be_object")


def test_unknown_tx_type_is_left_to_dispatch() -> None:
    assert validate_payload(tx_type="NOPE", payload=None) == (True, "", "", None)
