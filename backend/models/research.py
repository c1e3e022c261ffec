"""Pydantic model for the research endpoint payload."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import Confidence
from .params import METRIC_FIELDS, CompanyMetrics


class ResearchRecord(BaseModel):
    """Company metrics as returned by the research provider.

    Every numeric metric is paired with a one-sentence note describing
    the signal it was estimated from.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )

    company_name: str
    description: str = ""
    monthly_traffic: float = Field(ge=0)
    monthly_traffic_note: str = ""
    acv: float = Field(ge=0)
    acv_note: str = ""
    tam: float = Field(ge=0)
    tam_note: str = ""
    linkedin_ad_spend: float = Field(ge=0)
    linkedin_ad_spend_note: str = ""
    google_ad_spend: float = Field(ge=0)
    google_ad_spend_note: str = ""
    confidence: Confidence
    citations: list[str] = Field(default_factory=list)

    @field_validator("confidence", mode="before")
    @classmethod
    def normalize_confidence(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_metrics(self) -> CompanyMetrics:
        return CompanyMetrics(
            company_name=self.company_name,
            description=self.description,
            monthly_traffic=self.monthly_traffic,
            acv=self.acv,
            tam=self.tam,
            linkedin_ad_spend=self.linkedin_ad_spend,
            google_ad_spend=self.google_ad_spend,
            confidence=self.confidence,
            citations=tuple(self.citations),
        )

    def notes(self) -> dict[str, str]:
        """Map each metric field name to its sourcing note."""
        return {name: getattr(self, f"{name}_note") for name in METRIC_FIELDS}

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
