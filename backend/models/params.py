"""Engine inputs: researched company metrics, conversion-rate benchmarks,
and the flat Params struct the funnel engine consumes.

All percentage fields hold values in [0, 100]. Validation never raises;
``validate_params`` reports issues for the caller to surface.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Optional

from pydantic.alias_generators import to_camel

from .enums import Confidence, ParamGroup, ParamUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompanyMetrics:
    """Researched facts about a prospect. Immutable once fetched."""

    company_name: str
    description: str
    monthly_traffic: float
    acv: float
    tam: float
    linkedin_ad_spend: float
    google_ad_spend: float
    confidence: Confidence = Confidence.LOW
    citations: tuple[str, ...] = ()

    def override(self, **changes: Any) -> CompanyMetrics:
        """Return a copy with individual fields replaced by user values."""
        return replace(self, **changes)


@dataclass(frozen=True)
class ConversionRates:
    """Industry-benchmark funnel rates. Percentages unless noted."""

    form_fill_rate: float = 1.0
    form_abandon_rate: float = 67.0
    abandon_to_demo: float = 5.0
    demo_to_deal: float = 30.0
    deal_win_rate: float = 20.0
    cold_reach_to_meeting: float = 2.0
    warm_reach_to_meeting: float = 6.0
    meeting_to_deal: float = 40.0
    deal_to_close: float = 20.0
    warm_account_pct: float = 5.0
    crm_years: int = 5  # lookback window, years
    reactivation_rate: float = 10.0
    reactivation_demo_rate: float = 7.0
    reactivation_win_rate: float = 15.0
    linkedin_roi_gain: float = 20.0
    google_roi_gain: float = 10.0


@dataclass(frozen=True)
class Params:
    """Company metric numbers plus conversion rates -- the engine input."""

    monthly_traffic: float
    acv: float
    tam: float
    linkedin_ad_spend: float
    google_ad_spend: float
    form_fill_rate: float
    form_abandon_rate: float
    abandon_to_demo: float
    demo_to_deal: float
    deal_win_rate: float
    cold_reach_to_meeting: float
    warm_reach_to_meeting: float
    meeting_to_deal: float
    deal_to_close: float
    warm_account_pct: float
    crm_years: float
    reactivation_rate: float
    reactivation_demo_rate: float
    reactivation_win_rate: float
    linkedin_roi_gain: float
    google_roi_gain: float

    @classmethod
    def from_parts(
        cls,
        metrics: CompanyMetrics,
        rates: Optional[ConversionRates] = None,
    ) -> Params:
        rates = rates or ConversionRates()
        return cls(
            monthly_traffic=metrics.monthly_traffic,
            acv=metrics.acv,
            tam=metrics.tam,
            linkedin_ad_spend=metrics.linkedin_ad_spend,
            google_ad_spend=metrics.google_ad_spend,
            **asdict(rates),
        )

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Params:
        """Build from a camelCase (or snake_case) mapping.

        Missing conversion rates fall back to the benchmark defaults;
        missing metrics and malformed values coerce to 0.0.
        """
        values: dict[str, float] = {**asdict(ConversionRates())}
        for key, raw in data.items():
            spec = get_param_spec(key)
            if spec is None:
                continue
            values[spec.key] = coerce_number(raw, spec.key)
        for spec in PARAM_SPECS.values():
            values.setdefault(spec.key, 0.0)
        return cls(**values)

    def with_value(self, key: str, value: float) -> Params:
        """Return a copy with exactly one field replaced."""
        return replace(self, **{key: value})

    def rates(self) -> ConversionRates:
        return ConversionRates(
            **{f.name: getattr(self, f.name) for f in fields(ConversionRates)}
        )

    def to_wire(self) -> dict[str, float]:
        return {spec.alias: getattr(self, spec.key) for spec in PARAM_SPECS.values()}


METRIC_FIELDS = ("monthly_traffic", "acv", "tam", "linkedin_ad_spend", "google_ad_spend")


@dataclass(frozen=True)
class ParamSpec:
    """Display and validation metadata for one Params field."""

    key: str
    label: str
    unit: ParamUnit
    group: ParamGroup
    note: str = ""

    @property
    def alias(self) -> str:
        return to_camel(self.key)

    @property
    def default(self) -> Optional[float]:
        return getattr(ConversionRates(), self.key, None)


_SPECS = (
    ParamSpec("monthly_traffic", "Monthly Traffic", ParamUnit.COUNT, ParamGroup.METRICS),
    ParamSpec("acv", "ACV (USD/year)", ParamUnit.CURRENCY, ParamGroup.METRICS),
    ParamSpec("tam", "TAM (Target Accounts)", ParamUnit.COUNT, ParamGroup.METRICS),
    ParamSpec("linkedin_ad_spend", "LinkedIn Ads / Month", ParamUnit.CURRENCY, ParamGroup.METRICS),
    ParamSpec("google_ad_spend", "Google Ads / Month", ParamUnit.CURRENCY, ParamGroup.METRICS),
    ParamSpec(
        "form_fill_rate", "Form Fill Rate", ParamUnit.PERCENT, ParamGroup.CONVERSION,
        "Conservative floor: 1-2% of all traffic. Source: First Page Sage, Chili Piper 2025.",
    ),
    ParamSpec(
        "form_abandon_rate", "Form Abandon Rate", ParamUnit.PERCENT, ParamGroup.CONVERSION,
        "Industry average is 67-70%. Source: Formstack 2025, Feathery 150-form study.",
    ),
    ParamSpec(
        "abandon_to_demo", "Abandon -> Demo", ParamUnit.PERCENT, ParamGroup.CONVERSION,
        "Of recovered abandon contacts, 5-8% book a demo. Source: Insiteful, practitioner data.",
    ),
    ParamSpec(
        "demo_to_deal", "Demo -> Deal", ParamUnit.PERCENT, ParamGroup.CONVERSION,
        "Conservative end of 30-35% for mid-market. Source: Operatix 500+ SDR campaigns.",
    ),
    ParamSpec(
        "deal_win_rate", "Deal Win Rate", ParamUnit.PERCENT, ParamGroup.CONVERSION,
        "Mid-market B2B average is 20-22%. Source: HubSpot 2024, Pavilion/Ebsta.",
    ),
    ParamSpec(
        "cold_reach_to_meeting", "Cold Reach -> Meeting", ParamUnit.PERCENT, ParamGroup.OUTBOUND,
        "~1-2% blended across email and calls. Source: SalesLoft, Gradient Works 2024.",
    ),
    ParamSpec(
        "warm_reach_to_meeting", "Warm Reach -> Meeting", ParamUnit.PERCENT, ParamGroup.OUTBOUND,
        "Conservative 3x uplift over cold (3-5x range). Source: Demandbase, 6sense.",
    ),
    ParamSpec(
        "meeting_to_deal", "Meeting -> Deal", ParamUnit.PERCENT, ParamGroup.OUTBOUND,
        "Conservative end of 40-50%; Operatix 10-yr dataset averages 52.7%.",
    ),
    ParamSpec(
        "deal_to_close", "Deal -> Close", ParamUnit.PERCENT, ParamGroup.OUTBOUND,
        "Same rate as win rate. Mid-market B2B average: 20-22%. Source: HubSpot 2024.",
    ),
    ParamSpec(
        "warm_account_pct", "Warm Account %", ParamUnit.PERCENT, ParamGroup.OUTBOUND,
        "Only ~5% of a TAM is in an active buying cycle (Ehrenberg-Bass 95:5 rule).",
    ),
    ParamSpec(
        "crm_years", "CRM Lead History", ParamUnit.YEARS, ParamGroup.REACTIVATION,
        "Standard lookback window for lead reactivation programs.",
    ),
    ParamSpec(
        "reactivation_rate", "Return to Site Rate", ParamUnit.PERCENT, ParamGroup.REACTIVATION,
        "10% of dormant leads return within 12 months. Source: Mixed Media Ventures.",
    ),
    ParamSpec(
        "reactivation_demo_rate", "Reactivation Demo Rate", ParamUnit.PERCENT, ParamGroup.REACTIVATION,
        "Of re-engaged contacts, 5-10% book a demo. Source: Mutare, Insiteful.",
    ),
    ParamSpec(
        "reactivation_win_rate", "Reactivation Win Rate", ParamUnit.PERCENT, ParamGroup.REACTIVATION,
        "Conservative end of 15-20% for reactivated leads. Source: Adonis Media.",
    ),
    ParamSpec(
        "linkedin_roi_gain", "LinkedIn ROI Gain", ParamUnit.PERCENT, ParamGroup.ADS,
        "Intent-based audience refinement yields 15-25%. Source: LinkedIn case studies.",
    ),
    ParamSpec(
        "google_roi_gain", "Google ROI Gain", ParamUnit.PERCENT, ParamGroup.ADS,
        "Smart bidding + audience exclusion yields 8-12%. Source: Google Ads benchmarks.",
    ),
)

# Maps Params field name -> ParamSpec, in display order.
PARAM_SPECS: dict[str, ParamSpec] = {spec.key: spec for spec in _SPECS}
_ALIASES: dict[str, str] = {spec.alias: spec.key for spec in _SPECS}


def get_param_spec(key: str) -> Optional[ParamSpec]:
    """Look up field metadata by field name or camelCase alias."""
    return PARAM_SPECS.get(key) or PARAM_SPECS.get(_ALIASES.get(key, ""))


def coerce_number(value: Any, key: str = "") -> float:
    """Turn user input into a finite float; anything malformed becomes 0.0."""
    if value is None or value == "":
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Non-numeric value {value!r} for '{key}', using 0")
        return 0.0
    if not math.isfinite(number):
        logger.warning(f"Non-finite value {value!r} for '{key}', using 0")
        return 0.0
    return number


@dataclass(frozen=True)
class ParamIssue:
    key: str
    message: str


def validate_params(params: Params) -> list[ParamIssue]:
    """Report out-of-range fields. Never raises."""
    issues: list[ParamIssue] = []
    for spec in PARAM_SPECS.values():
        value = getattr(params, spec.key)
        if value < 0:
            issues.append(ParamIssue(spec.key, f"{spec.label} cannot be negative"))
        if spec.unit is ParamUnit.PERCENT and value > 100:
            issues.append(ParamIssue(spec.key, f"{spec.label} must be 0-100, got {value:g}"))
        if spec.unit is ParamUnit.YEARS and (value < 1 or not float(value).is_integer()):
            issues.append(
                ParamIssue(spec.key, f"{spec.label} must be a whole number of years, got {value:g}")
            )
    if params.warm_reach_to_meeting < params.cold_reach_to_meeting:
        issues.append(
            ParamIssue(
                "warm_reach_to_meeting",
                "Warm reach rate is below the cold rate; warmbound uplift will be negative",
            )
        )
    return issues
