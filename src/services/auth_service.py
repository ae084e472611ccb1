"""Auth service — registration, credential checks and login.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
from dataclasses import dataclass

from domain.model.errors import AuthenticationError, DuplicateError
from domain.model.user import User
from port.user_repository import UserRepository
from services.token_service import create_access_token, issue_refresh_token
from services.user_service import save_user, verify_password
from utils.config import Settings

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class LoginResult:
    """Authenticated user together with a fresh token pair."""
    user: User
    access_token: str
    refresh_token: str


def register(
    repo: UserRepository,
    email: str,
    password: str,
    name: str | None = None,
    phone: str | None = None,
) -> User:
    """Register a new user.

    Returns the created User domain object with its password hashed.

    Raises:
        DuplicateError: email already registered
        ValidationError: a field fails validation
    """
    if repo.get_by_email(email):
        raise DuplicateError("Email already registered")

    user = User.create(email=email, password=password, name=name, phone=phone)
    save_user(repo, user)

    logger.info("User registered", extra={"userId": user.id, "email": email})
    return user


def authenticate(repo: UserRepository, email: str, password: str) -> User:
    """Find a user by email and check the password.

    Unknown email and wrong password fail with the same message.

    Raises:
        AuthenticationError: invalid credentials
    """
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password):
        logger.warning("Login failed", extra={"email": email})
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user


def login(repo: UserRepository, settings: Settings, email: str, password: str) -> LoginResult:
    """Authenticate and issue an access token and a refresh token."""
    user = authenticate(repo, email, password)
    access_token = create_access_token(user, settings)
    refresh_token = issue_refresh_token(repo, user, settings)

    logger.info("User logged in", extra={"userId": user.id, "email": email})
    return LoginResult(user=user, access_token=access_token, refresh_token=refresh_token)
