from __future__ import annotations

"""State invariants / normalization helpers.

Ledger state is a JSON-like dict mutated by the apply/* modules:

    {"admin": str, "producers": {id: {"name": str, "verified": bool}}, "balances": {id: int}}

`ensure_state` is the single place that creates missing roots, so domain
modules can rely on them. `check_state_invariants` is the post-commit audit.
"""

from collections.abc import MutableMapping
from typing import Any, Dict

Json = Dict[str, Any]


def ensure_state(st: Any) -> Json:
    """Ensure `st` is a dict and contains the core roots.

    Returns the (possibly mutated) dict.

    Raises:
        TypeError: if st is not a MutableMapping or a root has the wrong type
    """
    if not isinstance(st, MutableMapping):
        raise TypeError(f"state must be MutableMapping, got {type(st)}")

    for root in ("producers", "balances"):
        v = st.get(root)
        if v is None:
            st[root] = {}
        elif not isinstance(v, dict):
            # Fail closed: do not attempt to coerce arbitrary types.
            raise TypeError(f"state[{root!r}] must be dict, got {type(v)}")

    admin = st.get("admin")
    if admin is None:
        st["admin"] = ""
    elif not isinstance(admin, str):
        raise TypeError(f"state['admin'] must be str, got {type(admin)}")

    return st  # type: ignore[return-value]


def check_state_invariants(st: Json) -> None:
    """Raise ValueError if the committed state breaks a ledger invariant."""
    admin = st.get("admin")
    if not isinstance(admin, str):
        raise ValueError(f"admin must be str, got {type(admin).__name__}")

    balances = st.get("balances")
    if not isinstance(balances, dict):
        raise ValueError("balances root missing")
    for who, bal in balances.items():
        if isinstance(bal, bool) or not isinstance(bal, int):
            raise ValueError(f"balance of {who!r} must be int, got {type(bal).__name__}")
        if bal < 0:
            raise ValueError(f"balance of {who!r} is negative: {bal}")

    producers = st.get("producers")
    if not isinstance(producers, dict):
        raise ValueError("producers root missing")
    for who, rec in producers.items():
        if not isinstance(rec, dict):
            raise ValueError(f"producer record of {who!r} must be dict")
        if not isinstance(rec.get("name"), str):
            raise ValueError(f"producer {who!r} name must be str")
        if not isinstance(rec.get("verified"), bool):
            raise ValueError(f"producer {who!r} verified flag must be bool")


__all__ = ["check_state_invariants", "ensure_state"]
