import hmac
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from apps.backend.services.core_service import (
    CoreError,
    get_settings,
    get_stats,
    require_cashier,
)
from apps.backend.services.session import clear_session, write_session
from apps.backend.utils.envelope import ok

log = logging.getLogger("voucherdesk.auth")

router = APIRouter(tags=["auth"])


class LoginIn(BaseModel):
    cashier_id: Optional[str] = None
    pin: Optional[str] = None


def _pin_matches(expected: Optional[str], given: Optional[str]) -> bool:
    if expected is None or given is None:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), given.encode("utf-8"))


@router.post("/login")
def login(inb: LoginIn, request: Request):
    settings = get_settings(request)
    cashier_id = (inb.cashier_id or "").strip()

    if not cashier_id or not _pin_matches(settings.cashier_credentials.get(cashier_id), inb.pin):
        log.info("Rejected login for cashier_id=%r", cashier_id)
        raise CoreError("Invalid credentials", 401, "invalid_credentials")

    session = {
        "cashier_id": cashier_id,
        "processed_count": get_stats(request).get_count(cashier_id),
        "login_time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }

    response = ok(cashier_id=cashier_id, processed_count=session["processed_count"])
    write_session(
        response,
        session,
        secret=settings.session_secret,
        max_age=settings.session_max_age_seconds,
        secure=settings.secure_cookies,
    )
    log.info("Cashier %s logged in", cashier_id)
    return response


@router.post("/logout")
def logout():
    response = ok()
    clear_session(response)
    return response


@router.get("/me")
def me(request: Request):
    session = require_cashier(request)
    cashier_id = session["cashier_id"]
    return ok(
        cashier_id=cashier_id,
        processed_count=get_stats(request).get_count(cashier_id),
    )
