from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

from apps.backend.services.settings import Settings
from apps.backend.services.vouchers.ledger_store import LedgerStore
from apps.backend.services.vouchers.records import (
    RedemptionResult,
    ReservationResult,
    ValidationResult,
)
from apps.backend.services.vouchers.redemption import RedemptionCoordinator
from apps.backend.services.vouchers.registry import CodeRegistry
from apps.backend.services.vouchers.reservations import ReservationManager


class VoucherService:
    """
    The four voucher operations behind one object. This is the only voucher
    surface the routes see; the record map stays inside the registry.
    """

    def __init__(
        self,
        *,
        ledger_path: str,
        inline_codes: Optional[str] = None,
        codes_file: Optional[str] = None,
        reservation_ttl_seconds: float = 120,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ledger_store = LedgerStore(ledger_path)
        self.registry = CodeRegistry(
            self.ledger_store,
            inline_codes=inline_codes,
            codes_file=codes_file,
        )
        self.reservations = ReservationManager(
            self.registry,
            ttl_seconds=reservation_ttl_seconds,
            clock=clock,
        )
        self.coordinator = RedemptionCoordinator(self.registry, self.ledger_store)

    @classmethod
    def from_settings(cls, settings: Settings) -> "VoucherService":
        return cls(
            ledger_path=settings.ledger_path,
            inline_codes=settings.inline_codes,
            codes_file=settings.codes_file,
            reservation_ttl_seconds=settings.reservation_ttl_seconds,
        )

    def load(self) -> int:
        return self.registry.load()

    def validate(self, code: Optional[str]) -> ValidationResult:
        return self.registry.validate(code)

    def reserve(self, code: Optional[str], claimant_id: str) -> ReservationResult:
        return self.reservations.reserve(code, claimant_id)

    def release(self, code: Optional[str], claimant_id: str) -> bool:
        return self.reservations.release(code, claimant_id)

    def redeem(self, code: Optional[str]) -> RedemptionResult:
        return self.coordinator.redeem(code)

    def reset_all(self) -> bool:
        return self.coordinator.reset_all()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "source": self.registry.source,
            "codes": self.registry.counts(),
            "ledger_path": self.ledger_store.path,
            "unpersisted_redemptions": sorted(self.coordinator.unpersisted),
            "ledger_stale": self.coordinator.ledger_stale,
            "reservation_ttl_seconds": self.reservations.ttl_seconds,
        }
