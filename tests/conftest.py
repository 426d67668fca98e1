from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# Ensure local "src/" takes precedence over any globally-installed "energytoken" package.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

src_str = str(SRC)
if src_str not in sys.path:
    sys.path.insert(0, src_str)

from energytoken.runtime.energy_ledger import EnergyLedger  # noqa: E402
from energytoken.runtime.ledger_config import default_ledger_config  # noqa: E402


@pytest.fixture
def ledger() -> EnergyLedger:
    """Fresh ledger with the default admin "STADMIN"."""
    return EnergyLedger(default_ledger_config())


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """configure_structured_logging() replaces root handlers; undo it after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    configured = getattr(root, "_energytoken_configured", False)
    yield
    root.handlers = handlers
    root.setLevel(level)
    setattr(root, "_energytoken_configured", configured)
