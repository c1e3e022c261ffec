"""Immutable funnel result structures."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional


def json_number(value: float) -> Optional[float]:
    """JSON has no inf/nan; overflowed figures serialise as null."""
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class ChannelResult:
    """Pipeline and revenue for one acquisition channel."""

    channel_id: str
    pipeline: float
    revenue: float
    steps: list[str] = field(default_factory=list)
    label: str = ""  # filled from the channel definition

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.channel_id,
            "label": self.label,
            "pipeline": json_number(self.pipeline),
            "revenue": json_number(self.revenue),
            "steps": list(self.steps),
        }


@dataclass(frozen=True)
class SavingsResult:
    """Ad-spend efficiency savings for one paid channel."""

    channel_id: str
    savings: float
    steps: list[str] = field(default_factory=list)
    label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.channel_id,
            "label": self.label,
            "savings": json_number(self.savings),
            "steps": list(self.steps),
        }


@dataclass(frozen=True)
class ROIResult:
    """Top-level result of one engine run, recomputed on every change."""

    warmbound: ChannelResult
    form_abandonment: ChannelResult
    reactivation: ChannelResult
    linkedin: SavingsResult
    google: SavingsResult
    total_pipeline: float
    total_revenue: float
    total_ad_savings: float

    @property
    def channels(self) -> list[ChannelResult]:
        return [self.warmbound, self.form_abandonment, self.reactivation]

    @property
    def savings(self) -> list[SavingsResult]:
        return [self.linkedin, self.google]

    @property
    def total_value(self) -> float:
        """Revenue with ad savings folded in."""
        return self.total_revenue + self.total_ad_savings

    def to_dict(self) -> dict[str, Any]:
        return {
            "warmbound": self.warmbound.to_dict(),
            "formAbandonment": self.form_abandonment.to_dict(),
            "reactivation": self.reactivation.to_dict(),
            "linkedin": self.linkedin.to_dict(),
            "google": self.google.to_dict(),
            "totalPipeline": json_number(self.total_pipeline),
            "totalRevenue": json_number(self.total_revenue),
            "totalAdSavings": json_number(self.total_ad_savings),
            "totalValue": json_number(self.total_value),
        }
