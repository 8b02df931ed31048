"""
Voucher Records (Canonical)
===========================

Purpose:
- In-memory voucher record owned by the code registry.
- Typed, transport-independent results for validate / reserve / redeem.

Design:
- Expected outcomes (unknown code, already redeemed, reservation conflict)
  are values, never exceptions.
- Every result exposes to_dict() for the HTTP layer.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional


VoucherStatus = Literal["active", "redeemed"]

ReservationOutcome = Literal[
    "not_found",
    "already_redeemed",
    "reserved_by_other",
    "reserved",
]


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def normalize_code(code: Optional[str]) -> str:
    """Codes are case-sensitive; only surrounding whitespace is dropped."""
    if not isinstance(code, str):
        return ""
    return code.strip()


@dataclass
class VoucherRecord:
    """
    Mutable record. Only touch status / reservation fields while holding
    `lock`.
    """
    code: str
    status: VoucherStatus = "active"
    redeemed_at: Optional[str] = None
    reserved_by: Optional[str] = None
    reserved_at: Optional[float] = None

    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def is_redeemed(self) -> bool:
        return self.status == "redeemed"

    def active_reservation(self, now: float, ttl_seconds: float) -> Optional[str]:
        """Claimant holding an unexpired reservation, if any."""
        if self.is_redeemed or not self.reserved_by or self.reserved_at is None:
            return None
        if now - self.reserved_at < ttl_seconds:
            return self.reserved_by
        return None

    def clear_reservation(self) -> None:
        self.reserved_by = None
        self.reserved_at = None

    def mark_redeemed(self, redeemed_at: Optional[str] = None) -> None:
        self.status = "redeemed"
        self.redeemed_at = redeemed_at or now_utc_iso()
        self.clear_reservation()

    def mark_active(self) -> None:
        self.status = "active"
        self.redeemed_at = None
        self.clear_reservation()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "status": self.status,
            "redeemed_at": self.redeemed_at,
            "reserved_by": self.reserved_by,
            "reserved_at": self.reserved_at,
        }


@dataclass(frozen=True)
class ValidationResult:
    exists: bool
    redeemed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"exists": self.exists, "redeemed": self.redeemed}


@dataclass(frozen=True)
class ReservationResult:
    outcome: ReservationOutcome
    reserved_by: Optional[str] = None

    @property
    def exists(self) -> bool:
        return self.outcome != "not_found"

    @property
    def redeemed(self) -> bool:
        return self.outcome == "already_redeemed"

    @property
    def reserved(self) -> bool:
        return self.outcome in ("reserved", "reserved_by_other")

    @property
    def conflict(self) -> bool:
        return self.outcome == "reserved_by_other"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "redeemed": self.redeemed,
            "reserved": self.reserved,
            "reserved_by": self.reserved_by,
            "outcome": self.outcome,
        }


@dataclass(frozen=True)
class RedemptionResult:
    """
    ok=False      -> unknown code
    already=True  -> idempotent repeat, nothing changed
    persisted     -> whether the ledger write for a new redemption succeeded
    """
    ok: bool
    already: bool = False
    persisted: bool = True

    @property
    def newly_redeemed(self) -> bool:
        return self.ok and not self.already

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "already": self.already, "persisted": self.persisted}
