# domain/model/user.py

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from email_validator import EmailNotValidError, validate_email

from domain.model.errors import ValidationError
from domain.model.order import OrderStats

DEFAULT_NAME = 'Evlampiy'
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6
# bcrypt only reads the first 72 bytes
PASSWORD_MAX_BYTES = 72


class Role(str, Enum):
    """Roles a user can hold."""
    CUSTOMER = 'customer'
    ADMIN = 'admin'


@dataclass
class User:
    """Domain model representing a shop user.

    ``password`` holds plaintext between construction (or ``change_password``)
    and the next save; after that it holds the bcrypt hash. The last persisted
    value is shadowed so the save path can tell the two apart.
    """
    id: str
    email: str
    password: str
    created_at: datetime
    updated_at: datetime
    name: str = DEFAULT_NAME
    tokens: list[str] = field(default_factory=list)
    roles: list[Role] = field(default_factory=lambda: [Role.CUSTOMER])
    phone: str | None = None
    total_amount: float = 0
    order_count: int = 0
    last_order_date: datetime | None = None
    last_order: str | None = None
    _persisted_password: str | None = field(default=None, repr=False, compare=False)

    # ── factory ───────────────────────────────────────────

    @staticmethod
    def create(
        email: str,
        password: str,
        name: str | None = None,
        phone: str | None = None,
    ) -> 'User':
        """Create a new, not yet persisted User with a plaintext password."""
        now = datetime.now(timezone.utc)
        return User(
            id=uuid.uuid4().hex,
            email=email,
            password=password,
            created_at=now,
            updated_at=now,
            name=name or DEFAULT_NAME,
            phone=phone,
        )

    # ── queries ───────────────────────────────────────────

    @property
    def is_password_modified(self) -> bool:
        return self.password != self._persisted_password

    def validate(self) -> None:
        """Check field rules before a write.

        Raises:
            ValidationError: name length, email syntax or password length
        """
        if not NAME_MIN_LENGTH <= len(self.name) <= NAME_MAX_LENGTH:
            raise ValidationError(
                f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
        try:
            validate_email(self.email, check_deliverability=False)
        except EmailNotValidError:
            raise ValidationError("Email must be a valid email address")
        if not self.password:
            raise ValidationError("Password is required")
        # Only plaintext can be length-checked; a stored hash is always long enough.
        if self.is_password_modified:
            if len(self.password) < PASSWORD_MIN_LENGTH:
                raise ValidationError(
                    f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
                )
            if len(self.password.encode('utf-8')) > PASSWORD_MAX_BYTES:
                raise ValidationError("Password is too long")

    # ── state transitions ─────────────────────────────────

    def change_password(self, password: str) -> None:
        self.password = password

    def mark_persisted(self) -> None:
        """Record the current password as the last persisted value."""
        self._persisted_password = self.password

    def add_token(self, token_hash: str) -> None:
        self.tokens.append(token_hash)

    def apply_order_stats(self, stats: OrderStats) -> None:
        """Replace all derived order statistics with a fresh aggregate."""
        self.total_amount = stats.total_amount
        self.order_count = stats.order_count
        self.last_order_date = stats.last_order_date
        self.last_order = stats.last_order
