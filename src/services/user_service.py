"""User service — password hashing on save and order statistics.

Every write of a User goes through save_user(), which is where the
plaintext password is replaced by its bcrypt hash.
"""

import logging
from datetime import datetime, timezone

import bcrypt

from domain.model.order import OrderStats
from domain.model.user import User
from port.order_repository import OrderRepository
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def save_user(repo: UserRepository, user: User) -> User:
    """Validate, hash the password if it changed, and persist the user.

    Raises:
        ValidationError: field rules violated (DuplicateError for a taken email)
        PersistenceError: the store rejected the write
    """
    user.validate()

    plaintext = user.password if user.is_password_modified else None
    if plaintext is not None:
        user.password = hash_password(plaintext)

    user.updated_at = datetime.now(timezone.utc)
    try:
        repo.save(user)
    except Exception:
        # The plaintext outlives a failed write
        if plaintext is not None:
            user.password = plaintext
        raise
    user.mark_persisted()
    return user


def recalculate_order_stats(
    user_repo: UserRepository,
    order_repo: OrderRepository,
    user: User,
) -> User:
    """Recompute the user's order statistics from the orders collection.

    This is a full recomputation; a user without orders is reset to zero.
    """
    stats = order_repo.aggregate_stats(user.id) or OrderStats()
    user.apply_order_stats(stats)
    save_user(user_repo, user)

    logger.info("Order stats recalculated", extra={
        "userId": user.id,
        "orderCount": user.order_count,
        "totalAmount": user.total_amount,
    })
    return user
