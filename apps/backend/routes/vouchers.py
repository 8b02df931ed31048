import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from apps.backend.services.core_service import (
    get_settings,
    get_stats,
    get_vouchers,
    require_cashier,
    require_code,
)
from apps.backend.services.session import write_session
from apps.backend.utils.envelope import error, ok

log = logging.getLogger("voucherdesk.vouchers")

router = APIRouter(tags=["vouchers"])


class CodeIn(BaseModel):
    code: Optional[str] = None


def _refresh_session(request: Request, response, session: dict) -> None:
    settings = get_settings(request)
    write_session(
        response,
        session,
        secret=settings.session_secret,
        max_age=settings.session_max_age_seconds,
        secure=settings.secure_cookies,
    )


@router.post("/validate")
def validate_code(inb: CodeIn, request: Request):
    require_cashier(request)
    code = require_code(inb.code)

    result = get_vouchers(request).validate(code)
    if not result.exists:
        return ok(valid=False, reason="Invalid code")
    if result.redeemed:
        return ok(valid=False, status="redeemed", reason="Code already redeemed")
    return ok(valid=True, status="active")


@router.post("/reserve")
def reserve_code(inb: CodeIn, request: Request):
    session = require_cashier(request)
    code = require_code(inb.code)

    result = get_vouchers(request).reserve(code, session["cashier_id"])
    if result.conflict:
        return error(
            f"Code is being processed by {result.reserved_by}",
            "reserved_by_other",
            409,
            reserved_by=result.reserved_by,
        )
    if not result.exists:
        return ok(valid=False, reason="Invalid code", **result.to_dict())
    if result.redeemed:
        return ok(valid=False, reason="Code already redeemed", **result.to_dict())
    return ok(valid=True, **result.to_dict())


@router.post("/release")
def release_code(inb: CodeIn, request: Request):
    session = require_cashier(request)
    code = require_code(inb.code)
    released = get_vouchers(request).release(code, session["cashier_id"])
    return ok(released=released)


@router.post("/redeem")
def redeem_code(inb: CodeIn, request: Request):
    session = require_cashier(request)
    code = require_code(inb.code)

    result = get_vouchers(request).redeem(code)
    if not result.ok:
        return ok(redeemed=False, reason="Invalid code")
    if result.already:
        return ok(redeemed=False, reason="Code already redeemed")

    cashier_id = session["cashier_id"]
    count = get_stats(request).increment(cashier_id, 1)
    log.info("Cashier %s redeemed %s (count=%d)", cashier_id, code.strip(), count)

    response = ok(redeemed=True, processed_count=count)
    _refresh_session(request, response, {**session, "processed_count": count})
    return response


@router.post("/reset")
def reset_all(request: Request):
    session = require_cashier(request)

    stats_ok = get_stats(request).reset()
    vouchers_ok = get_vouchers(request).reset_all()
    log.warning("Reset requested by %s (stats=%s, vouchers=%s)", session["cashier_id"], stats_ok, vouchers_ok)

    response = JSONResponse(content={"ok": stats_ok and vouchers_ok})
    _refresh_session(request, response, {**session, "processed_count": 0})
    return response
