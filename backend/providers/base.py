from __future__ import annotations

from abc import ABC, abstractmethod

from backend.models.research import ResearchRecord


class ResearchProvider(ABC):
    """Abstract base for company research providers."""

    @abstractmethod
    async def research(self, domain: str) -> ResearchRecord:
        """Research a company domain and return its metrics record."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the provider is reachable and configured."""
        ...
