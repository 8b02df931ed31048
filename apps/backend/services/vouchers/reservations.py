"""
Reservation Manager
===================

Short-lived soft locks that let one cashier claim a code before redeeming
it. Reservations live only in memory and expire lazily: the TTL is checked
on the next access, nothing sweeps them.

Correctness does not depend on reservations. The redemption coordinator
re-checks the monotonic redeemed status at commit time.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from apps.backend.services.settings import DEFAULT_RESERVATION_TTL_SECONDS
from apps.backend.services.vouchers.records import ReservationResult
from apps.backend.services.vouchers.registry import CodeRegistry

log = logging.getLogger("voucherdesk.reservations")


class ReservationManager:
    def __init__(
        self,
        registry: CodeRegistry,
        *,
        ttl_seconds: float = DEFAULT_RESERVATION_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.registry = registry
        self.ttl_seconds = float(ttl_seconds)
        self.clock = clock

    def reserve(self, code: Optional[str], claimant_id: str) -> ReservationResult:
        record = self.registry.record_for(code)
        if record is None:
            return ReservationResult("not_found")

        with record.lock:
            if record.is_redeemed:
                return ReservationResult("already_redeemed")

            now = self.clock()
            holder = record.active_reservation(now, self.ttl_seconds)
            if holder is not None and holder != claimant_id:
                log.info("Code %s held by %s; %s refused", record.code, holder, claimant_id)
                return ReservationResult("reserved_by_other", reserved_by=holder)

            record.reserved_by = claimant_id
            record.reserved_at = now

        log.debug("Code %s reserved by %s", record.code, claimant_id)
        return ReservationResult("reserved", reserved_by=claimant_id)

    def release(self, code: Optional[str], claimant_id: str) -> bool:
        """Drop a reservation held by `claimant_id`. Returns True if one was dropped."""
        record = self.registry.record_for(code)
        if record is None:
            return False

        with record.lock:
            holder = record.active_reservation(self.clock(), self.ttl_seconds)
            if holder != claimant_id:
                return False
            record.clear_reservation()
        return True

    def holder(self, code: Optional[str]) -> Optional[str]:
        record = self.registry.record_for(code)
        if record is None:
            return None
        with record.lock:
            return record.active_reservation(self.clock(), self.ttl_seconds)
