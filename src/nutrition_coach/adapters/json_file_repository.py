"""Local JSON file repository for the user data document."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from nutrition_coach.services.user_data import UserDataRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileUserDataRepository(UserDataRepository):
    """Stores documents under their keys in a single JSON file."""

    path: Path

    def load(self, key: str) -> dict[str, object] | None:
        """Return the stored document for a key, if present."""
        document = self._read_all().get(key)
        if isinstance(document, dict):
            return document
        return None

    def save(self, key: str, document: dict[str, object]) -> None:
        """Replace the document for a key and rewrite the file atomically."""
        records = self._read_all()
        records[key] = document
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)

    def _read_all(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        try:
            records = json.loads(raw)
        except json.JSONDecodeError:
            # unreadable file is replaced on the next save
            _logger.warning("Data file is not valid JSON, ignoring: %s", self.path)
            return {}
        if not isinstance(records, dict):
            raise RuntimeError(f"Unexpected data file format: {self.path}")
        return records
