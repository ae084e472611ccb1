"""Cookie-based CSRF protection.

The secret lives in an httpOnly cookie; the client receives a token derived
from it (``<salt>-<hmac(secret, salt)>``) and echoes it back in the
``X-CSRF-Token`` header on state-changing requests.
"""

import hashlib
import hmac
import logging
import secrets

from fastapi import APIRouter, HTTPException, Request, Response, status

from api.models import CsrfTokenResponse

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "_csrf"
CSRF_HEADER_NAMES = ("x-csrf-token", "x-xsrf-token", "csrf-token", "xsrf-token")
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

router = APIRouter(tags=["csrf"])


def _sign(secret: str, salt: str) -> str:
    return hmac.new(secret.encode("utf-8"), salt.encode("utf-8"), hashlib.sha256).hexdigest()


def create_csrf_token(secret: str) -> str:
    salt = secrets.token_hex(8)
    return f"{salt}-{_sign(secret, salt)}"


def verify_csrf_token(secret: str, token: str) -> bool:
    salt, sep, signature = token.partition("-")
    if not sep or not salt:
        return False
    return hmac.compare_digest(signature, _sign(secret, salt))


def csrf_protect(request: Request) -> None:
    """Reject unsafe requests without a token matching the secret cookie."""
    if request.method in SAFE_METHODS:
        return

    secret = request.cookies.get(CSRF_COOKIE_NAME)
    token = next((request.headers[h] for h in CSRF_HEADER_NAMES if h in request.headers), None)
    if not secret or not token or not verify_csrf_token(secret, token):
        logger.warning("CSRF check failed", extra={"path": request.url.path})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid CSRF token")


@router.get("/csrf-token", response_model=CsrfTokenResponse)
async def get_csrf_token(request: Request, response: Response):
    """Issue a CSRF token, creating the secret cookie on first use."""
    secret = request.cookies.get(CSRF_COOKIE_NAME)
    if not secret:
        secret = secrets.token_urlsafe(18)
        response.set_cookie(CSRF_COOKIE_NAME, secret, httponly=True, samesite="strict")
    return CsrfTokenResponse(csrf_token=create_csrf_token(secret))
