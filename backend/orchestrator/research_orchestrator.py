"""Research orchestrator -- cache first, provider on miss."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Optional

from backend.cache.base import ResearchCache, normalize_identifier
from backend.cache.json_file import JsonFileResearchCache
from backend.config.settings import Settings
from backend.hooks.audit_hooks import log_lookup
from backend.models.enums import LookupSource
from backend.models.research import ResearchRecord
from backend.providers.base import ResearchProvider
from backend.providers.errors import InvalidIdentifierError
from backend.providers.perplexity_provider import PerplexityProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupResult:
    key: str
    record: ResearchRecord
    from_cache: bool


class ResearchOrchestrator:
    """Resolves a company identifier to a research record.

    Flow:
    - Empty identifier -> InvalidIdentifierError, no cache or network access.
    - Cache hit -> returned as-is, provider not called.
    - Cache miss -> provider call, record written to the cache.
    Provider errors propagate unchanged; nothing is retried.
    """

    def __init__(
        self,
        provider: Optional[ResearchProvider] = None,
        cache: Optional[ResearchCache] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or Settings()
        self._provider = provider or PerplexityProvider(settings=self._settings)
        self._cache = cache or JsonFileResearchCache(settings=self._settings)
        # newest entries win once the limit is reached
        self._audit: deque[dict[str, Any]] = deque(maxlen=self._settings.audit_log_limit)

    @property
    def audit_log(self) -> list[dict[str, Any]]:
        return list(self._audit)

    async def lookup(self, identifier: str) -> LookupResult:
        key = normalize_identifier(identifier)
        if not key:
            raise InvalidIdentifierError("Domain is required")

        cached = self._cache.get(key)
        if cached is not None:
            logger.info(f"Research cache hit for '{key}'")
            self._audit.append(log_lookup(key, LookupSource.CACHE, cached.company_name))
            return LookupResult(key=key, record=cached, from_cache=True)

        logger.info(f"Research cache miss for '{key}', calling provider")
        record = await self._provider.research(key)
        self._cache.set(key, record)
        self._audit.append(log_lookup(key, LookupSource.PROVIDER, record.company_name))
        return LookupResult(key=key, record=record, from_cache=False)
