"""
Signed cookie sessions.

Cookie value: base64url(HMAC-SHA256(payload)) + "." + base64url(payload),
where payload is the session dict as JSON. Anything that does not verify
reads as "no session".
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
from typing import Any, Dict, Optional

from fastapi import Request, Response

log = logging.getLogger("voucherdesk.session")

COOKIE_NAME = "session"


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64url_decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _sign(secret: str, payload: bytes) -> bytes:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).digest()


def encode_session(secret: str, data: Dict[str, Any]) -> str:
    payload = json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return f"{_b64url_encode(_sign(secret, payload))}.{_b64url_encode(payload)}"


def decode_session(secret: str, value: Optional[str]) -> Optional[Dict[str, Any]]:
    if not value or "." not in value:
        return None

    sig_part, _, payload_part = value.partition(".")
    try:
        signature = _b64url_decode(sig_part)
        payload = _b64url_decode(payload_part)
    except (binascii.Error, ValueError):
        return None

    if not hmac.compare_digest(signature, _sign(secret, payload)):
        return None

    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        log.warning("Signed session cookie carried an unparseable payload")
        return None
    return data if isinstance(data, dict) else None


def read_session(request: Request, secret: str) -> Optional[Dict[str, Any]]:
    return decode_session(secret, request.cookies.get(COOKIE_NAME))


def write_session(
    response: Response,
    data: Dict[str, Any],
    *,
    secret: str,
    max_age: int,
    secure: bool = False,
) -> None:
    response.set_cookie(
        COOKIE_NAME,
        encode_session(secret, data),
        max_age=max_age,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def clear_session(response: Response) -> None:
    response.delete_cookie(COOKIE_NAME, path="/", httponly=True, samesite="lax")
