"""Daily intake logging and aggregation."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from diet_manager.domain.models import DailyLog, Meal, check_field
from diet_manager.domain.nutrition import NutrientTotals
from diet_manager.services.nutrition import ProductLookup, meal_totals

_logger = logging.getLogger(__name__)

LogKey = tuple[str, date]


class DailyLogRepository(Protocol):
    """Persistence interface for daily logs."""

    def load_all(self) -> dict[LogKey, DailyLog]:
        """Return all daily logs keyed by (username, day)."""

    def save_all(self, logs: dict[LogKey, DailyLog]) -> None:
        """Replace the persisted logs with the given collection."""


@dataclass
class DailyLogStore:
    """Per (user, day) collection of logged meals."""

    repository: DailyLogRepository
    timezone_name: str | None = None
    logs: dict[LogKey, DailyLog] = field(default_factory=dict)

    def load(self) -> None:
        """Replace the in-memory logs with the persisted ones."""
        self.logs = self.repository.load_all()

    def today(self) -> date:
        """Return today's date in the configured timezone, or local time."""
        if self.timezone_name:
            return datetime.now(tz=ZoneInfo(self.timezone_name)).date()
        return datetime.now().astimezone().date()

    def log_meal(self, username: str, meal: Meal, day: date | None = None) -> DailyLog:
        """Append a meal to the user's log for a day and persist every log.

        The in-memory logs change only after the file is rewritten.
        """
        username = check_field(username, "username")
        resolved_day = day or self.today()
        key = (username, resolved_day)
        existing = self.logs.get(key)
        log = DailyLog(
            username=username,
            day=resolved_day,
            meals=[*(existing.meals if existing else []), meal],
        )
        logs = {**self.logs, key: log}
        self.repository.save_all(logs)
        self.logs = logs
        _logger.info(
            "Logged meal: user=%s day=%s meal=%s",
            username,
            resolved_day.isoformat(),
            meal.name,
        )
        return log

    def query(self, username: str) -> list[DailyLog]:
        """Return the user's logs, most recent day first."""
        user_logs = [log for (name, _), log in self.logs.items() if name == username]
        return sorted(user_logs, key=lambda log: log.day, reverse=True)

    def save(self) -> None:
        """Persist every log."""
        self.repository.save_all(self.logs)


def aggregate(log: DailyLog, catalog: ProductLookup) -> NutrientTotals:
    """Sum every logged meal's totals, resolving products at call time."""
    total = NutrientTotals()
    for meal in log.meals:
        total = total.plus(meal_totals(meal, catalog))
    return total
