"""In-memory implementation of UserRepository for testing."""

import copy

from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        # Stored copies stand in for persisted documents
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def save(self, user: User) -> None:
        if any(u.email == user.email and u.id != user.id for u in self.store.values()):
            raise DuplicateError("Email already registered")
        self.store[user.id] = copy.deepcopy(user)

    # ── read operations ──────────────────────────────────────

    def _load(self, user: User) -> User:
        loaded = copy.deepcopy(user)
        loaded.mark_persisted()
        return loaded

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return self._load(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return self._load(user) if user else None
