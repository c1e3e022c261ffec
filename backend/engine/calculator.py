"""Core funnel engine.

Takes a Params snapshot -> produces an ROIResult with per-channel
derivation steps. Pure and deterministic: no I/O, no state between runs,
and no exceptions for any finite numeric input.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

# Ensure all channels are registered on import
import backend.channel_library.channels  # noqa: F401
from backend.channel_library.registry import ChannelDefinition, get_all_channels
from backend.engine.options import EngineOptions
from backend.engine.result import ChannelResult, ROIResult, SavingsResult
from backend.models.enums import ChannelKind, DealValueMode
from backend.models.params import Params

logger = logging.getLogger(__name__)


class FunnelEngine:
    """Stateless engine that evaluates every registered channel."""

    def __init__(self, options: Optional[EngineOptions] = None) -> None:
        self._options = options or EngineOptions()

    @property
    def options(self) -> EngineOptions:
        return self._options

    def calculate(self, params: Params) -> ROIResult:
        """Run every registered channel and total them."""
        sales = {
            channel_id: self._run_sales(definition, params)
            for channel_id, definition in get_all_channels(ChannelKind.SALES).items()
        }
        savings = {
            channel_id: self._run_savings(definition, params)
            for channel_id, definition in get_all_channels(ChannelKind.SAVINGS).items()
        }

        return ROIResult(
            warmbound=sales["warmbound"],
            form_abandonment=sales["form_abandonment"],
            reactivation=sales["reactivation"],
            linkedin=savings["linkedin"],
            google=savings["google"],
            total_pipeline=sum(result.pipeline for result in sales.values()),
            total_revenue=sum(result.revenue for result in sales.values()),
            total_ad_savings=sum(result.savings for result in savings.values()),
        )

    def _run_sales(self, definition: ChannelDefinition, params: Params) -> ChannelResult:
        result = replace(definition.formula_fn(params, self._options), label=definition.label)
        if self._options.deal_value_mode is DealValueMode.COMBINED:
            # Single deal-value figure: the won value stands in for pipeline.
            return replace(result, pipeline=result.revenue)
        return result

    def _run_savings(self, definition: ChannelDefinition, params: Params) -> SavingsResult:
        return replace(definition.formula_fn(params, self._options), label=definition.label)


def compute_roi(params: Params, options: Optional[EngineOptions] = None) -> ROIResult:
    """Convenience wrapper: one engine run with the given options."""
    return FunnelEngine(options).calculate(params)
