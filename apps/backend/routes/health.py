from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from apps.backend.services.core_service import get_vouchers

from .health_checks.ledger_healthcheck import ledger_healthcheck


router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_root():
    return {"ok": True}


@router.get("/ledger")
def health_ledger(request: Request):
    res = ledger_healthcheck(get_vouchers(request))
    return JSONResponse(content=res, status_code=200 if res.get("ok") else 503)
