from __future__ import annotations

from typing import Optional

from backend.models.research import ResearchRecord

from .base import ResearchCache


class InMemoryResearchCache(ResearchCache):
    """Process-local cache; contents are lost on exit."""

    def __init__(self) -> None:
        self._records: dict[str, ResearchRecord] = {}

    def _read(self, key: str) -> Optional[ResearchRecord]:
        return self._records.get(key)

    def _write(self, key: str, record: ResearchRecord) -> None:
        self._records[key] = record

    def __len__(self) -> int:
        return len(self._records)
