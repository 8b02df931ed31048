"""
Redemption Coordinator
======================

Purpose:
- The single authoritative active -> redeemed transition.
- Write-through of the redeemed-code ledger before reporting success.

Design:
- Check-then-set runs under the record's lock, and the ledger write happens
  before that lock is released, so a concurrent redeem of the same code only
  sees "already" once the write was attempted.
- Ledger writes are serialized by one ledger lock. Lock order is always
  record lock, then ledger lock.
- A failed ledger write does not undo the in-memory redemption. It is logged
  on its own path and the code stays in the in-memory ledger, so the next
  successful write carries it to disk.
"""

from __future__ import annotations

import logging
import threading
from contextlib import ExitStack
from typing import Optional, Set

from apps.backend.services.vouchers.ledger_store import LedgerStore, LedgerWriteError
from apps.backend.services.vouchers.records import RedemptionResult
from apps.backend.services.vouchers.registry import CodeRegistry

log = logging.getLogger("voucherdesk.redemption")


class RedemptionCoordinator:
    def __init__(self, registry: CodeRegistry, ledger_store: LedgerStore) -> None:
        self.registry = registry
        self.ledger_store = ledger_store

        self._ledger_lock = threading.Lock()
        self._ledger: Optional[Set[str]] = None
        self.unpersisted: Set[str] = set()
        self.ledger_stale = False

    def _ledger_codes(self) -> Set[str]:
        # caller holds _ledger_lock
        if self._ledger is None:
            self._ledger = self.ledger_store.read()
        return self._ledger

    def ledger_snapshot(self) -> Set[str]:
        with self._ledger_lock:
            return set(self._ledger_codes())

    def redeem(self, code: Optional[str]) -> RedemptionResult:
        record = self.registry.record_for(code)
        if record is None:
            return RedemptionResult(ok=False)

        with record.lock:
            if record.is_redeemed:
                return RedemptionResult(ok=True, already=True)

            record.mark_redeemed()
            persisted = self._persist_redemption(record.code)

        log.info("Code %s redeemed", record.code)
        return RedemptionResult(ok=True, already=False, persisted=persisted)

    def _persist_redemption(self, code: str) -> bool:
        with self._ledger_lock:
            ledger = self._ledger_codes()
            ledger.add(code)
            try:
                self.ledger_store.write(ledger)
            except LedgerWriteError as e:
                self.unpersisted.add(code)
                log.error(
                    "ledger write failed; redemption of %s held in memory only (%s)",
                    code, e.cause,
                )
                return False
            self.unpersisted.clear()
            self.ledger_stale = False
            return True

    def reset_all(self) -> bool:
        """
        Return every record to active and empty the ledger.
        The in-memory reset always happens; the return value reports only
        whether the empty ledger reached disk.
        """
        records = self.registry.records()
        with ExitStack() as stack:
            for record in records:
                stack.enter_context(record.lock)
            for record in records:
                record.mark_active()

            with self._ledger_lock:
                self._ledger = set()
                self.unpersisted.clear()
                try:
                    self.ledger_store.write([])
                except LedgerWriteError as e:
                    self.ledger_stale = True
                    log.error("ledger write failed during reset; on-disk ledger is stale (%s)", e.cause)
                    return False
                self.ledger_stale = False

        log.warning("All %d vouchers reset to active", len(records))
        return True
