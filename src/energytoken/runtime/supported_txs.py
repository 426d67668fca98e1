"""Build-time supported tx types.

The canon (tx/tx_canon.yaml) lists every tx type the protocol knows about;
this set lists the ones this build actually routes to an applier. The two are
expected to match; the dispatcher fails closed for anything outside both.
"""

from __future__ import annotations

from typing import AbstractSet

from energytoken.runtime.apply.admin import ADMIN_TX_TYPES
from energytoken.runtime.apply.energy import ENERGY_TX_TYPES
from energytoken.runtime.apply.producers import PRODUCER_TX_TYPES

SUPPORTED_TX_TYPES: AbstractSet[str] = frozenset(PRODUCER_TX_TYPES | ENERGY_TX_TYPES | ADMIN_TX_TYPES)


__all__ = ["SUPPORTED_TX_TYPES"]
