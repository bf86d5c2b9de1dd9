"""JSON file storage for time tracking state."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from .. import __version__
from ..time_tracking.models import TimeTrackingSnapshot

logger = logging.getLogger(__name__)


class TimeTrackingStorage:
    """Persists live sessions and time entries as a single JSON document."""

    def __init__(self, file_path: str | Path = "data/time_tracking.json"):
        """Initialize storage.

        Args:
            file_path: JSON file holding the snapshot. Its directory is
                created when missing.
        """
        self.file_path = Path(file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def exists(self) -> bool:
        return self.file_path.exists()

    def load(self) -> TimeTrackingSnapshot:
        """Load the stored snapshot.

        Returns:
            The stored snapshot, or an empty one when the file is missing

        Raises:
            ValueError: If the file exists but cannot be read as a snapshot.
                The file is left untouched.
        """
        if not self.file_path.exists():
            return TimeTrackingSnapshot()

        try:
            with open(self.file_path, encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict) and "snapshot" in data:
                data = data["snapshot"]
            return TimeTrackingSnapshot.model_validate(data)

        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error loading time tracking data from {self.file_path}: {e}")
            raise ValueError(
                f"Cannot read time tracking data from {self.file_path}. "
                f"Fix or move the file before recording more time."
            ) from e

    def save(self, snapshot: TimeTrackingSnapshot) -> Path:
        """Write a snapshot, replacing the stored one.

        Returns:
            Path to the saved file
        """
        document = {
            "metadata": {
                "saved_at": datetime.now(timezone.utc).isoformat(),
                "tool_version": __version__,
            },
            "snapshot": snapshot.model_dump(mode="json", by_alias=True),
        }

        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.file_path)

            logger.debug(
                f"Saved {len(snapshot.sessions)} sessions and "
                f"{len(snapshot.entries)} entries to {self.file_path}"
            )
            return self.file_path

        except OSError as e:
            logger.error(f"Error saving time tracking data to {self.file_path}: {e}")
            raise
