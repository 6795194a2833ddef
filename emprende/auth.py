# emprende/auth.py
"""Admin session handling.

A single shared password unlocks the admin console. A successful login sets
a signed, time-limited `admin_token` cookie; every admin route depends on
`require_admin`, which rejects missing, tampered or expired tokens.
"""
import hmac

from fastapi import HTTPException, Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from .config import get_settings
from .utils import logger

COOKIE_NAME = "admin_token"
SESSION_MAX_AGE = 60 * 60 * 24  # 24 horas
_SALT = "admin-session"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(get_settings().secret_key, salt=_SALT)


def check_password(password: str) -> bool:
    expected = get_settings().admin_password
    if not expected or not password:
        return False
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


def issue_token() -> str:
    return _serializer().dumps({"rol": "admin"})


def verify_token(token: str | None) -> bool:
    if not token:
        return False
    try:
        payload = _serializer().loads(token, max_age=SESSION_MAX_AGE)
    except SignatureExpired:
        logger.info("Expired admin session rejected")
        return False
    except BadSignature:
        logger.warning("Admin session with invalid signature rejected")
        return False
    return isinstance(payload, dict) and payload.get("rol") == "admin"


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=SESSION_MAX_AGE,
        path="/",
        httponly=True,
        samesite="strict",
        secure=get_settings().is_production,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(COOKIE_NAME, path="/")


def require_admin(request: Request) -> None:
    if not verify_token(request.cookies.get(COOKIE_NAME)):
        raise HTTPException(status_code=401, detail="No autorizado")
