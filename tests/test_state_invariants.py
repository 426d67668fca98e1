# tests/test_state_invariants.py
from __future__ import annotations

import pytest

from energytoken.runtime.energy_ledger import EnergyLedger, LedgerInvariantError
from energytoken.runtime.state_invariants import check_state_invariants, ensure_state


def test_ensure_state_backfills_roots() -> None:
    st = ensure_state({})
    assert st == {"producers": {}, "balances": {}, "admin": ""}


def test_ensure_state_rejects_non_mapping() -> None:
    with pytest.raises(TypeError):
        ensure_state([])


def test_ensure_state_rejects_non_str_admin() -> None:
    with pytest.raises(TypeError):
        ensure_state({"admin": 1})


@pytest.mark.parametrize(
    "state",
    [
        {"admin": "A", "producers": {}, "balances": {"x": -1}},
        {"admin": "A", "producers": {}, "balances": {"x": 1.0}},
        {"admin": "A", "producers": {}, "balances": {"x": True}},
        {"admin": "A", "producers": {"p": {"name": "n", "verified": "yes"}}, "balances": {}},
        {"admin": "A", "producers": {"p": {"verified": True}}, "balances": {}},
        {"admin": None, "producers": {}, "balances": {}},
    ],
)
def test_check_state_invariants_flags_bad_state(state: dict) -> None:
    with pytest.raises(ValueError):
        check_state_invariants(state)


def test_check_state_invariants_accepts_good_state() -> None:
    check_state_invariants(
        {"admin": "A", "producers": {"p": {"name": "n", "verified": False}}, "balances": {"p": 0, "q": 5}}
    )


def test_ledger_raises_when_committed_state_is_corrupt(ledger: EnergyLedger) -> None:
    # Corrupt state behind the ledger's back; the next commit must refuse to pass silently.
    ledger.state["balances"]["ghost"] = -5
    with pytest.raises(LedgerInvariantError):
        ledger.register_producer("STPROD1", "SolarCo")
