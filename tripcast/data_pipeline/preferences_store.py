"""
Preferences Store
================

Local key-value persistence for user preferences. The planner stores a
single string, the last location whose weather was fetched successfully.

Classes:
    KeyValueStore: Capability interface for string preferences
    JsonFileStore: Preferences kept in a JSON file on disk
    InMemoryStore: Preferences kept for the life of the process

Author: Route Weather Trip Planner Team
"""

import os
import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

# Import configuration
from config import config


LAST_LOCATION_KEY = "last_location"


class KeyValueStore(Protocol):
    """String preferences keyed by name."""

    def get_string(self, key: str) -> Optional[str]:
        """Stored value, or None if the key was never written."""
        ...

    def set_string(self, key: str, value: str) -> None:
        """Store value under key."""
        ...


class InMemoryStore:
    """Process-local preferences"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get_string(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStore:
    """
    Preferences persisted as a flat JSON object

    A missing or unreadable file reads as empty. Writes go through a
    temporary file so a crash never leaves a half-written file behind.
    """

    def __init__(self, file_path: str = None):
        self.logger = logging.getLogger(__name__)
        self.file_path = Path(file_path or config.PREFERENCES_FILE_PATH)
        self._lock = threading.Lock()

    def get_string(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_string(self, key: str, value: str) -> None:
        with self._lock:
            values = self._read()
            values[key] = value
            self._write(values)

    def _read(self) -> Dict[str, str]:
        """Load all preferences from file"""
        if not self.file_path.exists():
            return {}

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}

        except (OSError, ValueError) as e:
            self.logger.warning(f"Failed to read preferences from {self.file_path}: {e}")
            return {}

    def _write(self, values: Dict[str, str]) -> None:
        """Save all preferences to file"""
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")

            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(values, f, ensure_ascii=False, indent=2)

            os.replace(temp_path, self.file_path)

        except OSError as e:
            self.logger.warning(f"Failed to save preferences to {self.file_path}: {e}")
