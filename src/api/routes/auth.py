"""Authentication routes (register, login, me)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_user_repo
from api.models import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from api.security import get_current_user_required
from domain.model.errors import AuthenticationError, DuplicateError, ValidationError
from domain.model.user import User
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import create_access_token, issue_refresh_token
from utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

REFRESH_TOKEN_COOKIE = "refreshToken"


def _set_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        token,
        httponly=True,
        samesite="lax",
        max_age=int(settings.refresh_token_expiry.total_seconds()),
        path="/",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Register a new user and log them in.

    Raises:
        HTTPException: 409 if email already exists, 400 if validation fails
    """
    try:
        user = auth_service.register(
            repo,
            email=request.email,
            password=request.password,
            name=request.name,
            phone=request.phone,
        )
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    access_token = create_access_token(user, settings)
    refresh_token = issue_refresh_token(repo, user, settings)
    _set_refresh_cookie(response, refresh_token, settings)

    return AuthResponse(
        user=UserResponse.from_domain(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Login user and return an access token and a refresh token.

    Raises:
        HTTPException: 401 if credentials are invalid
    """
    try:
        result = auth_service.login(repo, settings, request.email, request.password)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    _set_refresh_cookie(response, result.refresh_token, settings)

    return AuthResponse(
        user=UserResponse.from_domain(result.user),
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user_required)):
    """Get current authenticated user info."""
    return UserResponse.from_domain(current_user)
