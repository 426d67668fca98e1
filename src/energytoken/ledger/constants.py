# src/energytoken/ledger/constants.py
from __future__ import annotations

"""Ledger defaults."""

# Initial admin identity for a fresh ledger when no config overrides it.
DEFAULT_ADMIN: str = "STADMIN"

DEFAULT_LEDGER_ID: str = "energy-dev"

# Receipts kept in memory per ledger instance; oldest are dropped first.
DEFAULT_MAX_RECEIPTS: int = 10_000
