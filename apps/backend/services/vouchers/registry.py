"""
Code Registry
=============

Purpose:
- Authoritative in-memory view of every voucher record.
- Loaded once per process from the first available code source, then
  reconciled against the redeemed-code ledger so redemptions survive
  restarts.

Design:
- The record map is built privately and published in one assignment; after
  that the key set never changes, so lookups need no map-level lock.
- Each record carries its own lock. The reservation manager and the
  redemption coordinator take it for their check-then-set sequences.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from apps.backend.services.vouchers.code_source import resolve_codes
from apps.backend.services.vouchers.ledger_store import LedgerStore
from apps.backend.services.vouchers.records import (
    ValidationResult,
    VoucherRecord,
    normalize_code,
    now_utc_iso,
)

log = logging.getLogger("voucherdesk.registry")


class CodeRegistry:
    def __init__(
        self,
        ledger_store: LedgerStore,
        *,
        inline_codes: Optional[str] = None,
        codes_file: Optional[str] = None,
    ) -> None:
        self.ledger_store = ledger_store
        self.inline_codes = inline_codes
        self.codes_file = codes_file

        self._records: Dict[str, VoucherRecord] = {}
        self._loaded = False
        self._load_lock = threading.Lock()
        self.source: Optional[str] = None

    # -----------------------------
    # Loading
    # -----------------------------
    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> int:
        """Populate and reconcile once; later calls return the current count."""
        if self._loaded:
            return len(self._records)

        with self._load_lock:
            if self._loaded:
                return len(self._records)

            loaded = resolve_codes(self.inline_codes, self.codes_file)
            records = {code: VoucherRecord(code=code) for code in loaded.codes}

            redeemed = self.ledger_store.read()
            reconciled_at = now_utc_iso()
            reconciled = 0
            for code in redeemed:
                record = records.get(code)
                if record is not None:
                    record.mark_redeemed(reconciled_at)
                    reconciled += 1

            self._records = records
            self.source = loaded.source
            self._loaded = True

            log.info(
                "Registry loaded %d codes from %s source (%d already redeemed per ledger)",
                len(records), loaded.source, reconciled,
            )
            return len(records)

    # -----------------------------
    # Lookups
    # -----------------------------
    def record_for(self, code: Optional[str]) -> Optional[VoucherRecord]:
        """
        Record for a (trimmed) code. Internal to the voucher package: callers
        outside it go through validate / reserve / redeem.
        """
        self.load()
        key = normalize_code(code)
        if not key:
            return None
        return self._records.get(key)

    def records(self) -> List[VoucherRecord]:
        """Snapshot of all records in code order (stable lock ordering)."""
        self.load()
        return [self._records[k] for k in sorted(self._records)]

    def validate(self, code: Optional[str]) -> ValidationResult:
        record = self.record_for(code)
        if record is None:
            return ValidationResult(exists=False, redeemed=False)
        return ValidationResult(exists=True, redeemed=record.is_redeemed)

    def __len__(self) -> int:
        self.load()
        return len(self._records)

    def counts(self) -> Dict[str, int]:
        records = self.records()
        redeemed = sum(1 for r in records if r.is_redeemed)
        return {
            "total": len(records),
            "redeemed": redeemed,
            "active": len(records) - redeemed,
        }
