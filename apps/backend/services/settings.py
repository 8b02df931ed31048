"""
Portal Settings
===============

Env-driven configuration for the voucher desk. Values are read once into a
frozen dataclass; a `.env` file next to the process is honoured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional

from dotenv import load_dotenv

DEFAULT_RESERVATION_TTL_SECONDS = 120
DEFAULT_SESSION_MAX_AGE_SECONDS = 30 * 24 * 60 * 60
DEFAULT_SESSION_SECRET = "voucher-desk-secret-key-change-in-production"


def is_enabled(flag: str, default: bool = False) -> bool:
    return os.getenv(flag, str(default)).lower() == "true"


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def parse_credentials(raw: Optional[str]) -> Dict[str, str]:
    """
    "alice:1111,bob:2222" -> {"alice": "1111", "bob": "2222"}
    Entries without a colon are skipped.
    """
    out: Dict[str, str] = {}
    for chunk in (raw or "").split(","):
        cashier_id, sep, pin = chunk.strip().partition(":")
        if sep and cashier_id.strip():
            out[cashier_id.strip()] = pin.strip()
    return out


@dataclass(frozen=True)
class Settings:
    version: str = "1.0.0"
    environment: str = "development"
    log_level: str = "INFO"

    inline_codes: Optional[str] = None
    codes_file: str = "codes.csv"
    ledger_path: str = "redeemed.json"
    stats_path: str = "stats.json"
    reservation_ttl_seconds: int = DEFAULT_RESERVATION_TTL_SECONDS

    session_secret: str = DEFAULT_SESSION_SECRET
    session_max_age_seconds: int = DEFAULT_SESSION_MAX_AGE_SECONDS
    cashier_credentials: Dict[str, str] = field(default_factory=lambda: {"test": "1234"})

    request_logging: bool = True

    @property
    def secure_cookies(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        credentials = parse_credentials(os.getenv("CASHIER_CREDENTIALS"))
        return cls(
            version=os.getenv("PORTAL_VERSION", "1.0.0"),
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            inline_codes=os.getenv("VOUCHER_CODES") or None,
            codes_file=os.getenv("VOUCHER_CODES_FILE", "codes.csv"),
            ledger_path=os.getenv("LEDGER_PATH", "redeemed.json"),
            stats_path=os.getenv("STATS_PATH", "stats.json"),
            reservation_ttl_seconds=_int_env("RESERVATION_TTL_SECONDS", DEFAULT_RESERVATION_TTL_SECONDS),
            session_secret=os.getenv("SESSION_SECRET", DEFAULT_SESSION_SECRET),
            session_max_age_seconds=_int_env("SESSION_MAX_AGE_SECONDS", DEFAULT_SESSION_MAX_AGE_SECONDS),
            cashier_credentials=credentials or {"test": "1234"},
            request_logging=is_enabled("REQUEST_LOGGING", True),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
