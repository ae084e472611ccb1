"""Bearer token authentication dependencies."""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_user_repo
from domain.model.user import User
from port.user_repository import UserRepository
from services.token_service import decode_access_token
from utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
    user_repo: UserRepository = Depends(get_user_repo),
) -> User:
    """Get current authenticated user. Raises 401 if not authenticated."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    user_id = decode_access_token(credentials.credentials, settings)
    if not user_id:
        raise _unauthorized("Invalid authentication credentials")

    user = user_repo.get_by_id(user_id)
    if not user:
        raise _unauthorized("User not found")

    return user
