"""Domain-specific apply modules.

Each module claims a subset of tx types and implements the deterministic
ledger state transitions for them. An applier returns None for tx types it
does not own so the dispatcher can try the next one.
"""

from __future__ import annotations

__all__ = [
    "admin",
    "energy",
    "producers",
]
