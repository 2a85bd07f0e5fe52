"""Simple key-value store used when the primary store rejects a write.

All keys live in one JSON object on disk. Writes go to a temporary file that
is then renamed over the original, so a failed write never truncates it.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from familypoints.domain.errors import StorageError, storage_failure

logger = logging.getLogger(__name__)

# Holds the whole snapshot as one interchange blob.
FALLBACK_KEY = "family_points_db_v1"


class FallbackStore:
    """JSON-file backed key-value store."""

    def __init__(self, path: str):
        """Initialize fallback store.

        Args:
            path: Path of the JSON file holding all keys
        """
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(storage_failure("read fallback store", e)) from e
        if not isinstance(data, dict):
            raise StorageError(f"Fallback store {self.path} is corrupt")
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(storage_failure("write fallback store", e)) from e

    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under `key`, or None."""
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""
        data = self._read()
        data[key] = value
        self._write(data)
        logger.debug("Wrote %d characters to fallback key %s", len(value), key)

    def remove_item(self, key: str) -> None:
        """Delete `key` if present."""
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
