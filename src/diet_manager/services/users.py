"""User-related business logic."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from diet_manager.domain.models import User, check_field

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for registered users."""

    def load_all(self) -> dict[str, User]:
        """Return all users keyed by name."""

    def save_all(self, users: dict[str, User]) -> None:
        """Replace the persisted users with the given collection."""


@dataclass
class UserService:
    """Application service for user registration and lookup."""

    repository: UserRepository
    users: dict[str, User] = field(default_factory=dict)

    def load(self) -> None:
        """Replace the in-memory users with the persisted ones."""
        self.users = self.repository.load_all()

    def register(  # noqa: PLR0913
        self, name: str, age: int, sex: str, height: float, weight: float
    ) -> User:
        """Register a user, overwriting any user with the same name.

        The in-memory users change only after the file is rewritten.
        """
        user = User(
            name=check_field(name, "name"),
            age=age,
            sex=check_field(sex, "sex"),
            height=height,
            weight=weight,
        )
        users = {**self.users, user.name: user}
        self.repository.save_all(users)
        self.users = users
        _logger.info("Registered user: name=%s", user.name)
        return user

    def find(self, name: str) -> User | None:
        """Return the user with the given name, if registered."""
        return self.users.get(name.strip())

    def list_users(self) -> list[User]:
        """Return all users sorted by name."""
        return sorted(self.users.values(), key=lambda user: user.name)

    def save(self) -> None:
        """Persist every user."""
        self.repository.save_all(self.users)
