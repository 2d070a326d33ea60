"""Owned state container for the profile and food log."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from pydantic import ValidationError

from nutrition_coach.domain.analysis import AnalysisResult
from nutrition_coach.domain.food_log import FoodEntry, MealType, UserData
from nutrition_coach.domain.profile import Profile

DEFAULT_APP_DATA_KEY = "nutritionAppData"

_logger = logging.getLogger(__name__)


class UserDataRepository(Protocol):
    """Key-value persistence for the user data document."""

    def load(self, key: str) -> dict[str, object] | None:
        """Return the stored document for a key, if present."""

    def save(self, key: str, document: dict[str, object]) -> None:
        """Replace the stored document for a key."""


@dataclass
class UserDataStore:
    """Holds the UserData document and persists it after every mutation."""

    repository: UserDataRepository
    key: str = DEFAULT_APP_DATA_KEY
    _data: UserData = field(init=False, default_factory=UserData)

    def __post_init__(self) -> None:
        self.reload()

    @property
    def data(self) -> UserData:
        """Return the current document."""
        return self._data

    def reload(self) -> UserData:
        """Read the persisted document, falling back to the empty state."""
        document = self.repository.load(self.key)
        if document is None:
            self._data = UserData()
            return self._data
        try:
            self._data = UserData.model_validate(document)
        except ValidationError:
            _logger.warning(
                "Stored user data is invalid, starting empty", extra={"key": self.key}
            )
            self._data = UserData()
        return self._data

    def get_profile(self) -> Profile | None:
        return self._data.profile

    def set_profile(self, profile: Profile) -> None:
        """Replace the profile as a whole."""
        self._commit(UserData(profile=profile, food_log=self._data.food_log))

    def append(self, entry: FoodEntry) -> None:
        """Add an entry to the end of the log."""
        self._commit(
            UserData(profile=self._data.profile, food_log=[*self._data.food_log, entry])
        )

    def clear(self) -> None:
        """Remove every entry from the log."""
        self._commit(UserData(profile=self._data.profile, food_log=[]))

    def list(self, sort_descending_by_date: bool = True) -> list[FoodEntry]:
        """Return the log, newest first by default or in insertion order."""
        entries = list(self._data.food_log)
        if sort_descending_by_date:
            entries.sort(key=_entry_timestamp, reverse=True)
        return entries

    def get_entry(self, entry_id: str) -> FoodEntry | None:
        """Return a logged entry by id."""
        for entry in self._data.food_log:
            if entry.id == entry_id:
                return entry
        return None

    def record_analysis(
        self,
        analysis: AnalysisResult,
        meal_type: MealType,
        logged_at: datetime | None = None,
    ) -> FoodEntry:
        """Create a food entry for a finished analysis and append it."""
        timestamp = (logged_at or datetime.now(tz=UTC)).astimezone(UTC)
        entry = FoodEntry(
            id=self._unique_id(timestamp),
            date=format_timestamp(timestamp),
            meal_type=meal_type,
            analysis=analysis,
        )
        self.append(entry)
        return entry

    def _unique_id(self, timestamp: datetime) -> str:
        base = timestamp.strftime("%Y%m%dT%H%M%S%fZ")
        existing = {entry.id for entry in self._data.food_log}
        candidate = base
        suffix = 1
        while candidate in existing:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _commit(self, data: UserData) -> None:
        self.repository.save(self.key, data.to_document())
        self._data = data


def format_timestamp(value: datetime) -> str:
    """Format a UTC timestamp as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    return (
        value.astimezone(UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _entry_timestamp(entry: FoodEntry) -> datetime:
    parsed = datetime.fromisoformat(entry.date)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
