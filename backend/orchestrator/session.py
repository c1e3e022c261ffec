"""ROISession -- one user's lookup + edit loop over a ParameterStore."""

from __future__ import annotations

import logging
from typing import Any, Optional

from backend.engine.result import ROIResult
from backend.models.params import PARAM_SPECS, ParamIssue, Params
from backend.models.research import ResearchRecord
from backend.providers.errors import ResearchError

from .parameter_store import ParameterStore
from .research_orchestrator import ResearchOrchestrator

logger = logging.getLogger(__name__)


class ROISession:
    """Binds a research orchestrator to a parameter store.

    Overlapping lookups are not cancelled; the most recently started lookup
    is the one that seeds the store. A stale response is still written to
    the cache by the orchestrator but is otherwise discarded.
    """

    def __init__(
        self,
        orchestrator: ResearchOrchestrator,
        store: Optional[ParameterStore] = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._store = store or ParameterStore()
        self._generation = 0
        self.record: Optional[ResearchRecord] = None
        self.from_cache = False
        self.error: Optional[str] = None
        self.loading = False

    @property
    def store(self) -> ParameterStore:
        return self._store

    @property
    def params(self) -> Optional[Params]:
        return self._store.params

    async def research(self, identifier: str) -> Optional[ROIResult]:
        """Look up a company and seed the store. Returns the first result,
        or None when the lookup failed or was superseded."""
        self._generation += 1
        generation = self._generation
        self.record = None
        self.from_cache = False
        self.error = None
        self.loading = True
        self._store.clear()

        try:
            lookup = await self._orchestrator.lookup(identifier)
        except ResearchError as e:
            if generation == self._generation:
                self.error = e.message
            logger.warning(f"Research failed for '{identifier}': {e.message}")
            return None
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.info(f"Discarding superseded lookup for '{lookup.key}'")
            return None

        self.record = lookup.record
        self.from_cache = lookup.from_cache
        self._store.seed(lookup.record.to_metrics())
        return self._store.result()

    def set_field(self, key: str, value: Any) -> Optional[ROIResult]:
        self._store.set_field(key, value)
        return self._store.result()

    def reset_rates(self) -> Optional[ROIResult]:
        self._store.reset_rates()
        return self._store.result()

    def result(self) -> Optional[ROIResult]:
        return self._store.result()

    def issues(self) -> list[ParamIssue]:
        return self._store.issues()

    def notes(self) -> dict[str, str]:
        """Sourcing note per field: research notes for metrics, benchmark
        citations for conversion rates."""
        notes = {key: spec.note for key, spec in PARAM_SPECS.items()}
        if self.record is not None:
            notes.update(self.record.notes())
        return notes
