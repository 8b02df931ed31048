import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from apps.backend.services.core_service import CoreError

log = logging.getLogger("voucherdesk.errors")


def ok(**fields):
    return JSONResponse(content={"ok": True, **fields})


def error(message: str, code: str = "error", status: int = 400, **extra):
    return JSONResponse(
        status_code=status,
        content={
            "ok": False,
            "error": code,
            "message": message,
            **extra,
        },
    )


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CoreError)
    async def _core_error(request: Request, exc: CoreError):
        return error(exc.message, exc.code, exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error("Internal Server Error", "internal_error", 500)
