from __future__ import annotations

from dataclasses import dataclass, field
import copy
from typing import Any, Dict, Optional


Json = Dict[str, Any]


@dataclass(frozen=True, slots=True)
class ProducerRecord:
    name: str
    verified: bool = False

    @classmethod
    def from_json(cls, d: Json) -> "ProducerRecord":
        return cls(name=str(d.get("name", "")), verified=bool(d.get("verified", False)))

    def to_json(self) -> Json:
        return {"name": self.name, "verified": self.verified}


@dataclass(frozen=True, slots=True)
class LedgerView:
    """
    Immutable read-only ledger view used by callers that must not mutate state.
    """

    admin: str = ""
    producers: Dict[str, Any] = field(default_factory=dict)
    balances: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_ledger(cls, state: Dict[str, Any]) -> "LedgerView":
        return cls(
            admin=str(state.get("admin", "") or ""),
            producers=copy.deepcopy(state.get("producers", {})),
            balances=copy.deepcopy(state.get("balances", {})),
        )

    def is_admin(self, who: str) -> bool:
        return who == self.admin

    def producer(self, who: str) -> Optional[ProducerRecord]:
        rec = self.producers.get(who)
        return ProducerRecord.from_json(rec) if isinstance(rec, dict) else None

    def balance_of(self, who: str) -> int:
        return int(self.balances.get(who, 0))

    def total_supply(self) -> int:
        return sum(int(v) for v in self.balances.values())
