"""Tests for Params, ParamSpec metadata, validation and the research record model."""

import pytest
from pydantic import ValidationError

from backend.models.enums import Confidence, ParamGroup, ParamUnit
from backend.models.params import (
    PARAM_SPECS,
    ConversionRates,
    Params,
    coerce_number,
    get_param_spec,
    validate_params,
)
from backend.models.research import ResearchRecord
from tests.conftest import ACME_PAYLOAD, make_record


class TestConversionRates:
    def test_benchmark_defaults(self):
        rates = ConversionRates()
        assert rates.form_fill_rate == 1.0
        assert rates.form_abandon_rate == 67.0
        assert rates.warm_reach_to_meeting == 6.0
        assert rates.warm_account_pct == 5.0
        assert rates.crm_years == 5


class TestParams:
    def test_from_parts_uses_default_rates(self, acme_metrics):
        params = Params.from_parts(acme_metrics)
        assert params.tam == 5_000
        assert params.acv == 20_000
        assert params.rates() == ConversionRates()

    def test_from_parts_with_custom_rates(self, acme_metrics):
        rates = ConversionRates(deal_win_rate=25.0)
        assert Params.from_parts(acme_metrics, rates).deal_win_rate == 25.0

    def test_with_value_replaces_one_field(self, worked_params):
        updated = worked_params.with_value("acv", 30_000)
        assert updated.acv == 30_000
        assert worked_params.acv == 20_000
        assert updated.with_value("acv", 20_000) == worked_params

    def test_from_wire_accepts_camel_case(self):
        params = Params.from_wire({"monthlyTraffic": 50_000, "acv": "20000", "dealWinRate": 25})
        assert params.monthly_traffic == 50_000
        assert params.acv == 20_000
        assert params.deal_win_rate == 25

    def test_from_wire_defaults(self):
        params = Params.from_wire({})
        assert params.tam == 0.0
        assert params.form_abandon_rate == 67.0

    def test_from_wire_ignores_unknown_keys(self):
        params = Params.from_wire({"bogus": 1, "tam": 10})
        assert params.tam == 10

    def test_wire_round_trip(self, worked_params):
        assert Params.from_wire(worked_params.to_wire()) == worked_params

    def test_to_wire_uses_camel_case(self, worked_params):
        wire = worked_params.to_wire()
        assert wire["linkedinAdSpend"] == 10_000
        assert wire["crmYears"] == 5
        assert len(wire) == len(PARAM_SPECS)


class TestParamSpecs:
    def test_every_params_field_has_metadata(self):
        assert set(PARAM_SPECS) == set(Params.__dataclass_fields__)

    def test_alias_lookup(self):
        assert get_param_spec("warmAccountPct").key == "warm_account_pct"
        assert get_param_spec("warm_account_pct").unit is ParamUnit.PERCENT
        assert get_param_spec("nope") is None

    def test_defaults_only_for_rates(self):
        assert PARAM_SPECS["acv"].default is None
        assert PARAM_SPECS["meeting_to_deal"].default == 40.0

    def test_metric_group(self):
        metric_keys = [k for k, s in PARAM_SPECS.items() if s.group is ParamGroup.METRICS]
        assert metric_keys == ["monthly_traffic", "acv", "tam", "linkedin_ad_spend", "google_ad_spend"]

    def test_ad_gains_have_their_own_group(self):
        ads = [k for k, s in PARAM_SPECS.items() if s.group is ParamGroup.ADS]
        reactivation = [k for k, s in PARAM_SPECS.items() if s.group is ParamGroup.REACTIVATION]
        assert ads == ["linkedin_roi_gain", "google_roi_gain"]
        assert not set(ads) & set(reactivation)


class TestCoerceNumber:
    @pytest.mark.parametrize(
        "value,expected",
        [(12, 12.0), ("3.5", 3.5), ("", 0.0), (None, 0.0), ("abc", 0.0), ("nan", 0.0), ("inf", 0.0)],
    )
    def test_coercion(self, value, expected):
        assert coerce_number(value, "tam") == expected


class TestValidateParams:
    def test_worked_params_are_valid(self, worked_params):
        assert validate_params(worked_params) == []

    def test_negative_value(self, worked_params):
        issues = validate_params(worked_params.with_value("tam", -5))
        assert [i.key for i in issues] == ["tam"]
        assert "negative" in issues[0].message

    def test_percentage_over_100(self, worked_params):
        issues = validate_params(worked_params.with_value("form_abandon_rate", 120))
        assert [i.key for i in issues] == ["form_abandon_rate"]

    def test_currency_over_100_is_fine(self, worked_params):
        assert validate_params(worked_params.with_value("acv", 150_000)) == []

    @pytest.mark.parametrize("years", [0, 2.5])
    def test_crm_years_must_be_whole_and_positive(self, worked_params, years):
        issues = validate_params(worked_params.with_value("crm_years", years))
        assert [i.key for i in issues] == ["crm_years"]

    def test_warm_below_cold(self, worked_params):
        issues = validate_params(worked_params.with_value("warm_reach_to_meeting", 1))
        assert [i.key for i in issues] == ["warm_reach_to_meeting"]
        assert "negative" in issues[0].message


class TestResearchRecord:
    def test_parses_camel_case_payload(self):
        record = ResearchRecord.model_validate(ACME_PAYLOAD)
        assert record.company_name == "Acme"
        assert record.monthly_traffic == 50_000
        assert record.confidence is Confidence.MEDIUM
        assert record.citations[1] == "https://acme.com/pricing"

    def test_confidence_is_case_insensitive(self):
        assert make_record(confidence=" HIGH ").confidence is Confidence.HIGH

    def test_unknown_confidence_rejected(self):
        with pytest.raises(ValidationError):
            make_record(confidence="certain")

    def test_negative_metric_rejected(self):
        with pytest.raises(ValidationError):
            make_record(tam=-1)

    def test_missing_metric_rejected(self):
        payload = {k: v for k, v in ACME_PAYLOAD.items() if k != "acv"}
        with pytest.raises(ValidationError):
            ResearchRecord.model_validate(payload)

    def test_notes_default_to_empty(self):
        payload = {k: v for k, v in ACME_PAYLOAD.items() if not k.endswith("Note")}
        record = ResearchRecord.model_validate(payload)
        assert record.notes()["tam"] == ""

    def test_notes_keyed_by_metric(self, acme_record):
        notes = acme_record.notes()
        assert set(notes) == {"monthly_traffic", "acv", "tam", "linkedin_ad_spend", "google_ad_spend"}
        assert notes["acv"].startswith("Pricing page")

    def test_to_metrics(self, acme_record):
        metrics = acme_record.to_metrics()
        assert metrics.company_name == "Acme"
        assert metrics.google_ad_spend == 8_000
        assert metrics.citations == tuple(ACME_PAYLOAD["citations"])

    def test_to_wire_round_trip(self, acme_record):
        wire = acme_record.to_wire()
        assert wire["companyName"] == "Acme"
        assert wire["confidence"] == "medium"
        assert ResearchRecord.model_validate(wire) == acme_record

    def test_metrics_override(self, acme_metrics):
        edited = acme_metrics.override(acv=35_000)
        assert edited.acv == 35_000
        assert acme_metrics.acv == 20_000
