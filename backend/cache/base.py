from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from backend.models.research import ResearchRecord


def normalize_identifier(identifier: str) -> str:
    """Cache key for a company identifier: trimmed and lowercased."""
    return (identifier or "").strip().lower()


class ResearchCache(ABC):
    """Keyed store of research records; one whole record per identifier."""

    def get(self, identifier: str) -> Optional[ResearchRecord]:
        key = normalize_identifier(identifier)
        if not key:
            return None
        return self._read(key)

    def set(self, identifier: str, record: ResearchRecord) -> None:
        key = normalize_identifier(identifier)
        if not key:
            return
        self._write(key, record)

    @abstractmethod
    def _read(self, key: str) -> Optional[ResearchRecord]:
        ...

    @abstractmethod
    def _write(self, key: str, record: ResearchRecord) -> None:
        ...
