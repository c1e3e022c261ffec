"""JSON-file research cache.

The whole cache is one JSON object mapping normalized identifier ->
research record (camelCase wire format). Each write re-reads the file,
replaces one entry and swaps the file in with ``os.replace``, so readers
see either the old or the new file, never a partial one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from backend.config.settings import Settings
from backend.models.research import ResearchRecord

from .base import ResearchCache

logger = logging.getLogger(__name__)


class JsonFileResearchCache(ResearchCache):
    def __init__(self, path: Path | str | None = None, settings: Optional[Settings] = None):
        if path is None:
            path = (settings or Settings()).cache_path
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self, key: str) -> Optional[ResearchRecord]:
        raw = self._load().get(key)
        if raw is None:
            return None
        try:
            return ResearchRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid cache entry '{key}' in {self._path}: {e}")
            return None

    def _write(self, key: str, record: ResearchRecord) -> None:
        entries = self._load()
        entries[key] = record.to_wire()

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=self._path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(entries, f, indent=2)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load(self) -> dict[str, Any]:
        """Read the whole cache file; a missing or corrupt file reads as empty."""
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Research cache {self._path} unreadable, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Research cache {self._path} is not a JSON object, starting empty")
            return {}
        return data
