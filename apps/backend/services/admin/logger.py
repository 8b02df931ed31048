import logging
import time
from typing import Any, Dict, Optional

from fastapi import Request, Response

from apps.backend.services.session import read_session

log = logging.getLogger("voucherdesk.requests")

# never echoed into logs: the session cookie is a bearer credential
SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "set-cookie",
}


def mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {
        k: ("***masked***" if k.lower() in SENSITIVE_HEADERS else v)
        for k, v in headers.items()
    }


def _cashier_for(request: Request) -> Optional[str]:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        return None
    session = read_session(request, settings.session_secret)
    return session.get("cashier_id") if session else None


async def log_request_response(request: Request, response: Response, start_time: float) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "status_code": response.status_code,
        "duration_ms": int((time.time() - start_time) * 1000),
        "cashier_id": _cashier_for(request),
        "client": request.client.host if request.client else None,
        "headers": mask_headers(dict(request.headers)),
    }

    if response.status_code >= 500:
        log.warning(entry)
    else:
        log.info(entry)
    return entry
