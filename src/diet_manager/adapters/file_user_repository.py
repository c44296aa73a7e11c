"""Text-file repository for users."""

from dataclasses import dataclass

from diet_manager.adapters.flat_records import decode_users, encode_users
from diet_manager.adapters.text_file_storage import TextFileStorage
from diet_manager.domain.models import User
from diet_manager.services.users import UserRepository


@dataclass
class FileUserRepository(UserRepository):
    """Stores users in ``users.txt``."""

    storage: TextFileStorage
    file_name: str = "users.txt"

    def load_all(self) -> dict[str, User]:
        """Return all users keyed by name."""
        return decode_users(self.storage.read_text(self.file_name), self.file_name)

    def save_all(self, users: dict[str, User]) -> None:
        """Rewrite the users file."""
        self.storage.write_text(self.file_name, encode_users(users.values()))
