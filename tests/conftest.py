"""Shared test fixtures for the ROI calculator test suite."""

import pytest

from backend.models.enums import Confidence
from backend.models.params import CompanyMetrics, Params
from backend.models.research import ResearchRecord
from backend.providers.base import ResearchProvider


ACME_PAYLOAD = {
    "companyName": "Acme",
    "description": "Acme sells workflow automation to mid-market teams.",
    "monthlyTraffic": 50_000,
    "monthlyTrafficNote": "SimilarWeb estimates ~50K monthly visits.",
    "acv": 20_000,
    "acvNote": "Pricing page tiers suggest ~$20K ACV.",
    "tam": 5_000,
    "tamNote": "~5K mid-market SaaS companies per Crunchbase filters.",
    "linkedinAdSpend": 10_000,
    "linkedinAdSpendNote": "Active LinkedIn Ads Library campaigns.",
    "googleAdSpend": 8_000,
    "googleAdSpendNote": "Moderate paid search activity per SpyFu.",
    "confidence": "medium",
    "citations": [
        "https://www.similarweb.com/website/acme.com/",
        "https://acme.com/pricing",
        "https://www.crunchbase.com/organization/acme",
    ],
}


def make_record(**overrides) -> ResearchRecord:
    """Helper to build a ResearchRecord from the Acme payload."""
    return ResearchRecord.model_validate({**ACME_PAYLOAD, **overrides})


class FakeProvider(ResearchProvider):
    """Provider double that records calls and returns a fixed outcome."""

    def __init__(self, record=None, error=None):
        self.record = record
        self.error = error
        self.calls: list[str] = []

    async def research(self, domain: str) -> ResearchRecord:
        self.calls.append(domain)
        if self.error is not None:
            raise self.error
        return self.record

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def acme_record() -> ResearchRecord:
    return make_record()


@pytest.fixture
def acme_metrics() -> CompanyMetrics:
    return CompanyMetrics(
        company_name="Acme",
        description="Acme sells workflow automation.",
        monthly_traffic=50_000,
        acv=20_000,
        tam=5_000,
        linkedin_ad_spend=10_000,
        google_ad_spend=8_000,
        confidence=Confidence.MEDIUM,
    )


@pytest.fixture
def worked_params() -> Params:
    """Reference scenario with hand-checked channel values.

    Warmbound 480K/96K, form abandonment 603K/120.6K, reactivation
    630K/94.5K, LinkedIn 24K, Google 9.6K.
    """
    return Params(
        monthly_traffic=50_000,
        acv=20_000,
        tam=5_000,
        linkedin_ad_spend=10_000,
        google_ad_spend=8_000,
        form_fill_rate=0.5,
        form_abandon_rate=67,
        abandon_to_demo=5,
        demo_to_deal=30,
        deal_win_rate=20,
        cold_reach_to_meeting=2,
        warm_reach_to_meeting=10,
        meeting_to_deal=40,
        deal_to_close=20,
        warm_account_pct=15,
        crm_years=5,
        reactivation_rate=10,
        reactivation_demo_rate=7,
        reactivation_win_rate=15,
        linkedin_roi_gain=20,
        google_roi_gain=10,
    )


@pytest.fixture
def fake_provider(acme_record) -> FakeProvider:
    return FakeProvider(record=acme_record)
