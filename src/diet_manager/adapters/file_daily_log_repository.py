"""Text-file repository for daily logs."""

from dataclasses import dataclass
from datetime import date

from diet_manager.adapters.flat_records import decode_daily_logs, encode_daily_logs
from diet_manager.adapters.text_file_storage import TextFileStorage
from diet_manager.domain.models import DailyLog
from diet_manager.services.daily_logs import DailyLogRepository


@dataclass
class FileDailyLogRepository(DailyLogRepository):
    """Stores daily logs in ``daily_logs.txt``.

    With ``grouped`` False the file keeps the legacy five-field layout, which
    reloads every item as its own ``Loaded Meal``.
    """

    storage: TextFileStorage
    file_name: str = "daily_logs.txt"
    grouped: bool = True

    def load_all(self) -> dict[tuple[str, date], DailyLog]:
        """Return all logs keyed by (username, day)."""
        return decode_daily_logs(
            self.storage.read_text(self.file_name), self.file_name
        )

    def save_all(self, logs: dict[tuple[str, date], DailyLog]) -> None:
        """Rewrite the daily logs file."""
        self.storage.write_text(
            self.file_name, encode_daily_logs(logs.values(), grouped=self.grouped)
        )
