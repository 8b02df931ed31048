from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from apps.backend.services.admin.observability import system_snapshot
from apps.backend.services.core_service import get_stats, get_vouchers

# mounted under /admin in main.py
router = APIRouter(tags=["admin"])


@router.get("/observability")
def observability(request: Request):
    return JSONResponse(content=system_snapshot(get_vouchers(request), get_stats(request)))
