from __future__ import annotations

from dataclasses import dataclass

from backend.models.enums import DealValueMode, WarmBaseline


@dataclass(frozen=True)
class EngineOptions:
    """Switches between the known variants of the funnel model.

    The defaults give the canonical model: warm-vs-cold uplift measured on
    the warm-account subset, negative uplift reported as-is, reactivation
    demos converted with the shared demo->deal rate, and separate
    pipeline/revenue figures.
    """

    warm_baseline: WarmBaseline = WarmBaseline.WARM_ACCOUNTS
    floor_uplift: bool = False
    reactivation_demo_to_deal: bool = True
    deal_value_mode: DealValueMode = DealValueMode.SPLIT
