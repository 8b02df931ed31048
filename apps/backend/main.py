# apps/backend/main.py
import logging
import time
from typing import Optional

from fastapi import FastAPI, Request

from apps.backend.routes.admin import router as admin_router
from apps.backend.routes.auth import router as auth_router
from apps.backend.routes.health import router as health_router
from apps.backend.routes.vouchers import router as vouchers_router
from apps.backend.services.admin.logger import log_request_response
from apps.backend.services.settings import Settings, get_settings
from apps.backend.services.stats.cashier_stats import CashierStats
from apps.backend.services.vouchers.voucher_service import VoucherService
from apps.backend.utils.envelope import install_error_handlers

log = logging.getLogger("voucherdesk.main")


def create_app(
    settings: Optional[Settings] = None,
    *,
    vouchers: Optional[VoucherService] = None,
    stats: Optional[CashierStats] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Voucher Desk",
        version=settings.version,
        description="Single-use voucher validation, reservation and redemption for cashiers",
    )

    app.state.settings = settings
    app.state.vouchers = vouchers or VoucherService.from_settings(settings)
    app.state.stats = stats or CashierStats(settings.stats_path)

    # -------------------------------------------------------------------
    # Error handling (stable envelopes, no stack leaks)
    # -------------------------------------------------------------------
    install_error_handlers(app)

    # -------------------------------------------------------------------
    # Request logging (sensitive headers masked)
    # -------------------------------------------------------------------
    if settings.request_logging:
        @app.middleware("http")
        async def request_logging(request: Request, call_next):
            start = time.time()
            response = await call_next(request)
            await log_request_response(request, response, start)
            return response

    # -------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------
    app.include_router(health_router)
    app.include_router(auth_router, prefix="/api")
    app.include_router(vouchers_router, prefix="/api")
    app.include_router(admin_router, prefix="/admin")

    @app.get("/")
    def root():
        return {
            "status": "Voucher Desk Online",
            "environment": settings.environment,
            "routes": [
                "/health",
                "/api/login",
                "/api/logout",
                "/api/me",
                "/api/validate",
                "/api/reserve",
                "/api/release",
                "/api/redeem",
                "/api/reset",
                "/admin/observability",
            ],
        }

    # -------------------------------------------------------------------
    # Startup: load codes and reconcile with the ledger before serving
    # -------------------------------------------------------------------
    @app.on_event("startup")
    def load_vouchers():
        count = app.state.vouchers.load()
        log.info("Voucher Desk starting with %d codes", count)

    return app


app = create_app()
