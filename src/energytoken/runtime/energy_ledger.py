# src/energytoken/runtime/energy_ledger.py
from __future__ import annotations

import copy
import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional

from energytoken.ledger.state import LedgerView, ProducerRecord
from energytoken.runtime.domain_apply import ApplyError, apply_tx_atomic
from energytoken.runtime.ledger_config import LedgerConfig, load_ledger_config, validate_ledger_config
from energytoken.runtime.state_invariants import check_state_invariants
from energytoken.runtime.tx_types import TxEnvelope, TxResult
from energytoken.structured_logging import log_event

Json = Dict[str, Any]

_log = logging.getLogger("energytoken.ledger")


class LedgerInvariantError(RuntimeError):
    pass


class EnergyLedger:
    """In-memory energy token ledger.

    Every operation is one atomic transaction against the shared state,
    serialized by a single ledger-wide lock. Rejections come back as failed
    TxResult values; they never raise.
    """

    def __init__(self, config: Optional[LedgerConfig] = None, *, admin: Optional[str] = None) -> None:
        cfg = config or load_ledger_config()
        validate_ledger_config(cfg)
        self.config = cfg
        self.ledger_id = cfg.ledger_id

        self._initial_admin = str(admin) if admin is not None else cfg.admin
        self._lock = threading.RLock()
        self._receipts: Deque[Json] = deque(maxlen=int(cfg.max_receipts))
        self.state: Json = self._initial_state()

    def _initial_state(self) -> Json:
        return {"admin": self._initial_admin, "producers": {}, "balances": {}}

    # ----------------------------
    # Public accessors
    # ----------------------------

    @property
    def admin(self) -> str:
        with self._lock:
            return str(self.state["admin"])

    def is_admin(self, who: str) -> bool:
        with self._lock:
            return who == self.state["admin"]

    def producer(self, who: str) -> Optional[ProducerRecord]:
        with self._lock:
            rec = self.state["producers"].get(who)
            return ProducerRecord.from_json(rec) if isinstance(rec, dict) else None

    def balance_of(self, who: str) -> int:
        with self._lock:
            return int(self.state["balances"].get(who, 0))

    def total_supply(self) -> int:
        with self._lock:
            return sum(int(v) for v in self.state["balances"].values())

    def view(self) -> LedgerView:
        with self._lock:
            return LedgerView.from_ledger(self.state)

    def read_state(self) -> Json:
        """Deep copy of the current state."""
        with self._lock:
            return copy.deepcopy(self.state)

    def receipts(self) -> List[Json]:
        with self._lock:
            return list(self._receipts)

    def reset(self) -> None:
        """Restore the initial admin and drop all producers, balances and receipts."""
        with self._lock:
            self.state = self._initial_state()
            self._receipts.clear()
            log_event(_log, "ledger_reset", ledger_id=self.ledger_id, admin=self._initial_admin)

    # ----------------------------
    # Tx submission
    # ----------------------------

    def submit(self, env: Any) -> TxResult:
        """Apply one envelope atomically and return its result."""
        env_norm = TxEnvelope.from_json(env)

        with self._lock:
            try:
                meta = apply_tx_atomic(self.state, env_norm)
            except ApplyError as e:
                details = e.details if isinstance(e.details, dict) else None
                result = TxResult.failure(e.code, e.reason, details)
            else:
                if self.config.check_invariants:
                    try:
                        check_state_invariants(self.state)
                    except ValueError as e:
                        raise LedgerInvariantError(f"{env_norm.tx_type}: {e}") from e
                result = TxResult.success(meta)

            self._receipts.append(
                {
                    "tx_type": env_norm.tx_type,
                    "signer": env_norm.signer,
                    "ok": result.ok,
                    "code": result.code,
                    "reason": result.reason,
                }
            )

            # Logged under the lock so event order matches commit order.
            if result.ok:
                log_event(_log, "tx_applied", ledger_id=self.ledger_id, tx_type=env_norm.tx_type, signer=env_norm.signer)
            else:
                log_event(
                    _log,
                    "tx_rejected",
                    ledger_id=self.ledger_id,
                    tx_type=env_norm.tx_type,
                    signer=env_norm.signer,
                    code=result.code,
                    reason=result.reason,
                )
        return result

    def replay(self, envs: Iterable[Any]) -> List[TxResult]:
        """Apply envelopes in order; a rejection does not stop the replay."""
        return [self.submit(env) for env in envs]

    # ----------------------------
    # Operations
    # ----------------------------

    def register_producer(self, caller: str, name: str) -> TxResult:
        return self.submit(TxEnvelope("PRODUCER_REGISTER", caller, {"name": name}))

    def verify_producer(self, caller: str, producer_id: str) -> TxResult:
        return self.submit(TxEnvelope("PRODUCER_VERIFY", caller, {"producer": producer_id}))

    def mint_energy(self, caller: str, amount: int) -> TxResult:
        return self.submit(TxEnvelope("ENERGY_MINT", caller, {"amount": amount}))

    def burn_energy(self, caller: str, amount: int) -> TxResult:
        return self.submit(TxEnvelope("ENERGY_BURN", caller, {"amount": amount}))

    def transfer_energy(self, sender: str, recipient: str, amount: int) -> TxResult:
        return self.submit(TxEnvelope("ENERGY_TRANSFER", sender, {"to": recipient, "amount": amount}))

    def transfer_admin(self, caller: str, new_admin: str) -> TxResult:
        return self.submit(TxEnvelope("ADMIN_TRANSFER", caller, {"new_admin": new_admin}))

    @classmethod
    def from_env(cls) -> "EnergyLedger":
        return cls(load_ledger_config())


__all__ = ["EnergyLedger", "LedgerInvariantError"]
