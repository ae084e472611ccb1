"""Access and refresh token issuance.

Access tokens are stateless. Refresh tokens are returned to the caller
once; only their HMAC digest is kept on the user document.
"""

import hashlib
import hmac
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from jose import JWTError, jwt

from domain.model.user import User
from port.user_repository import UserRepository
from services.user_service import save_user
from utils.config import Settings

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def _require_secret(secret: str | None, name: str) -> str:
    if not secret:
        raise ValueError(
            f"{name} environment variable is required. "
            "Generate a secure key with: openssl rand -hex 32"
        )
    return secret


def create_access_token(user: User, settings: Settings) -> str:
    """Create a signed access token carrying the user's id and email."""
    secret = _require_secret(settings.access_token_secret, "AUTH_ACCESS_TOKEN_SECRET")
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "email": user.email,
        "iat": now,
        "exp": now + settings.access_token_expiry,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Optional[str]:
    """Verify an access token and return its user id, or None if invalid."""
    secret = _require_secret(settings.access_token_secret, "AUTH_ACCESS_TOKEN_SECRET")
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None
    return payload.get("sub")


def hash_refresh_token(token: str, secret: str) -> str:
    """Keyed SHA-256 digest of a refresh token, as stored on the user."""
    return hmac.new(secret.encode("utf-8"), token.encode("utf-8"), hashlib.sha256).hexdigest()


def issue_refresh_token(repo: UserRepository, user: User, settings: Settings) -> str:
    """Create a refresh token, store its digest on the user and save the user.

    Returns:
        The raw refresh token. It is never persisted.
    """
    secret = _require_secret(settings.refresh_token_secret, "AUTH_REFRESH_TOKEN_SECRET")
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + settings.refresh_token_expiry,
    }
    token = jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)

    user.add_token(hash_refresh_token(token, secret))
    save_user(repo, user)
    return token
