"""Parameter store -- the single editable Params snapshot behind the UI."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Optional

from backend.engine.calculator import FunnelEngine
from backend.engine.options import EngineOptions
from backend.engine.result import ROIResult
from backend.models.enums import StoreState
from backend.models.params import (
    METRIC_FIELDS,
    CompanyMetrics,
    ConversionRates,
    ParamIssue,
    Params,
    coerce_number,
    get_param_spec,
    validate_params,
)

logger = logging.getLogger(__name__)


class ParameterStore:
    """Holds the current Params through ``unseeded -> seeded -> edited``.

    Seeding takes metric fields from the research record and conversion
    rates from the benchmark defaults. Every read of ``result()`` is a fresh
    engine run over the current snapshot.
    """

    def __init__(self, options: Optional[EngineOptions] = None) -> None:
        self._engine = FunnelEngine(options)
        self._state = StoreState.UNSEEDED
        self._params: Optional[Params] = None
        self._seeded: Optional[Params] = None

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def params(self) -> Optional[Params]:
        return self._params

    def seed(self, metrics: CompanyMetrics, rates: Optional[ConversionRates] = None) -> Params:
        self._params = Params.from_parts(metrics, rates or ConversionRates())
        self._seeded = self._params
        self._state = StoreState.SEEDED
        return self._params

    def clear(self) -> None:
        self._params = None
        self._seeded = None
        self._state = StoreState.UNSEEDED

    def set_field(self, key: str, value: Any) -> Optional[Params]:
        """Replace one field (snake_case or camelCase key), leaving the rest.

        Malformed or non-finite values are stored as 0.0. Unknown keys raise
        KeyError. Does nothing while unseeded.
        """
        spec = get_param_spec(key)
        if spec is None:
            raise KeyError(key)
        if self._params is None:
            logger.warning(f"Ignoring edit of '{key}' before any company was researched")
            return None
        self._params = self._params.with_value(spec.key, coerce_number(value, spec.key))
        self._state = StoreState.EDITED
        return self._params

    def reset_rates(self) -> Optional[Params]:
        """Restore benchmark conversion rates, keeping metric edits."""
        if self._params is None:
            return None
        metrics = {name: getattr(self._params, name) for name in METRIC_FIELDS}
        self._params = Params(**metrics, **asdict(ConversionRates()))
        self._state = StoreState.SEEDED if self._params == self._seeded else StoreState.EDITED
        return self._params

    def issues(self) -> list[ParamIssue]:
        if self._params is None:
            return []
        return validate_params(self._params)

    def result(self) -> Optional[ROIResult]:
        if self._params is None:
            return None
        return self._engine.calculate(self._params)
