from typing import Any, Dict, Optional

from fastapi import Request

from apps.backend.services.session import read_session
from apps.backend.services.settings import Settings
from apps.backend.services.stats.cashier_stats import CashierStats
from apps.backend.services.vouchers.voucher_service import VoucherService


class CoreError(Exception):
    def __init__(self, message: str, status_code: int = 400, code: str = "error"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_vouchers(request: Request) -> VoucherService:
    return request.app.state.vouchers


def get_stats(request: Request) -> CashierStats:
    return request.app.state.stats


def require_cashier(request: Request) -> Dict[str, Any]:
    settings = get_settings(request)
    session = read_session(request, settings.session_secret)
    if not session or not session.get("cashier_id"):
        raise CoreError("Unauthorized", 401, "unauthorized")
    return session


def require_code(code: Optional[str]) -> str:
    if not isinstance(code, str) or not code.strip():
        raise CoreError("No code provided", 400, "missing_code")
    return code
