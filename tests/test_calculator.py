"""Tests for the FunnelEngine end-to-end calculation."""

from dataclasses import replace
from unittest.mock import patch

import pytest

from backend.channel_library.registry import get_channel, register_channel
from backend.engine.calculator import FunnelEngine, compute_roi
from backend.engine.options import EngineOptions
from backend.engine.result import ChannelResult, ROIResult, json_number
from backend.models.enums import DealValueMode, WarmBaseline


class TestFunnelEngine:
    def test_returns_roi_result(self, worked_params):
        result = FunnelEngine().calculate(worked_params)
        assert isinstance(result, ROIResult)
        assert [c.channel_id for c in result.channels] == [
            "warmbound", "form_abandonment", "reactivation",
        ]
        assert [s.channel_id for s in result.savings] == ["linkedin", "google"]

    def test_warmbound_values(self, worked_params):
        # 5K TAM * 15% = 750 warm; 750 * 8% * 40% = 24 deals * $20K = $480K
        result = compute_roi(worked_params)
        assert result.warmbound.pipeline == pytest.approx(480_000)
        assert result.warmbound.revenue == pytest.approx(96_000)

    def test_form_abandonment_values(self, worked_params):
        # 600K visitors * 0.5% * 67% * 5% * 30% = 30.15 deals
        result = compute_roi(worked_params)
        assert result.form_abandonment.pipeline == pytest.approx(603_000)
        assert result.form_abandonment.revenue == pytest.approx(120_600)

    def test_reactivation_values(self, worked_params):
        # 3,000 form fills * 5 yrs * 10% * 7% * 30% = 31.5 deals
        result = compute_roi(worked_params)
        assert result.reactivation.pipeline == pytest.approx(630_000)
        assert result.reactivation.revenue == pytest.approx(94_500)

    def test_ad_savings_values(self, worked_params):
        result = compute_roi(worked_params)
        assert result.linkedin.savings == pytest.approx(24_000)
        assert result.google.savings == pytest.approx(9_600)

    def test_totals_match_worked_scenario(self, worked_params):
        result = compute_roi(worked_params)
        assert result.total_pipeline == pytest.approx(1_713_000)
        assert result.total_revenue == pytest.approx(311_100)
        assert result.total_ad_savings == pytest.approx(33_600)
        assert result.total_value == pytest.approx(344_700)

    def test_totals_are_exact_sums(self, worked_params):
        result = compute_roi(worked_params)
        assert result.total_pipeline == (
            result.warmbound.pipeline
            + result.form_abandonment.pipeline
            + result.reactivation.pipeline
        )
        assert result.total_revenue == (
            result.warmbound.revenue
            + result.form_abandonment.revenue
            + result.reactivation.revenue
        )
        assert result.total_ad_savings == result.linkedin.savings + result.google.savings

    def test_deterministic(self, worked_params):
        assert compute_roi(worked_params) == compute_roi(worked_params)

    def test_single_field_change_only_touches_dependent_channels(self, worked_params):
        before = compute_roi(worked_params)
        after = compute_roi(worked_params.with_value("linkedin_ad_spend", 20_000))
        assert after.linkedin.savings == pytest.approx(48_000)
        assert after.warmbound == before.warmbound
        assert after.form_abandonment == before.form_abandonment
        assert after.google == before.google


class TestBoundaries:
    def test_zero_tam_zeroes_warmbound(self, worked_params):
        result = compute_roi(worked_params.with_value("tam", 0))
        assert result.warmbound.pipeline == 0
        assert result.warmbound.revenue == 0

    def test_zero_traffic_zeroes_traffic_channels(self, worked_params):
        result = compute_roi(worked_params.with_value("monthly_traffic", 0))
        assert result.form_abandonment.pipeline == 0
        assert result.form_abandonment.revenue == 0
        assert result.reactivation.pipeline == 0
        assert result.reactivation.revenue == 0
        # Warmbound depends on TAM, not traffic
        assert result.warmbound.pipeline == pytest.approx(480_000)

    def test_zero_acv_zeroes_every_sales_channel(self, worked_params):
        result = compute_roi(worked_params.with_value("acv", 0))
        assert result.total_pipeline == 0
        assert result.total_revenue == 0
        assert result.total_ad_savings == pytest.approx(33_600)

    def test_equal_warm_and_cold_rates_give_no_uplift(self, worked_params):
        params = worked_params.with_value("warm_reach_to_meeting", 2)
        assert compute_roi(params).warmbound.pipeline == 0

    def test_negative_uplift_is_reported(self, worked_params):
        # warm 1% < cold 2%: 750 * -1% * 40% = -3 deals
        params = worked_params.with_value("warm_reach_to_meeting", 1)
        result = compute_roi(params)
        assert result.warmbound.pipeline == pytest.approx(-60_000)
        assert result.warmbound.revenue == pytest.approx(-12_000)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("deal_win_rate", 0),
            ("deal_win_rate", 100),
            ("deal_to_close", 55),
            ("reactivation_win_rate", 100),
            ("form_fill_rate", 3),
        ],
    )
    def test_revenue_never_exceeds_pipeline(self, worked_params, field, value):
        result = compute_roi(worked_params.with_value(field, value))
        for channel in result.channels:
            assert channel.revenue <= channel.pipeline + 1e-9

    @pytest.mark.parametrize(
        "field,value",
        [("tam", -10), ("form_abandon_rate", 250), ("crm_years", 2.5), ("acv", 1e300)],
    )
    def test_out_of_range_inputs_do_not_raise(self, worked_params, field, value):
        result = compute_roi(worked_params.with_value(field, value))
        assert isinstance(result, ROIResult)


class TestEngineOptions:
    def test_default_options(self):
        assert FunnelEngine().options == EngineOptions()

    def test_full_tam_baseline(self, worked_params):
        # warm: 750 * 10% * 40% = 30 deals; cold: 5000 * 2% * 40% = 40 deals
        options = EngineOptions(warm_baseline=WarmBaseline.FULL_TAM)
        result = compute_roi(worked_params, options)
        assert result.warmbound.pipeline == pytest.approx(-200_000)

    def test_floor_uplift_clamps_negative_deals(self, worked_params):
        options = EngineOptions(warm_baseline=WarmBaseline.FULL_TAM, floor_uplift=True)
        result = compute_roi(worked_params, options)
        assert result.warmbound.pipeline == 0
        assert result.warmbound.revenue == 0

    def test_floor_uplift_leaves_positive_uplift(self, worked_params):
        result = compute_roi(worked_params, EngineOptions(floor_uplift=True))
        assert result.warmbound.pipeline == pytest.approx(480_000)

    def test_reactivation_without_demo_to_deal(self, worked_params):
        # 105 demos treated as deals: 105 * $20K = $2.1M
        options = EngineOptions(reactivation_demo_to_deal=False)
        result = compute_roi(worked_params, options)
        assert result.reactivation.pipeline == pytest.approx(2_100_000)
        assert result.reactivation.revenue == pytest.approx(315_000)

    def test_combined_deal_value_uses_revenue_as_pipeline(self, worked_params):
        options = EngineOptions(deal_value_mode=DealValueMode.COMBINED)
        result = compute_roi(worked_params, options)
        for channel in result.channels:
            assert channel.pipeline == channel.revenue
        assert result.total_pipeline == pytest.approx(311_100)


class TestResultSerialization:
    def test_to_dict_keys(self, worked_params):
        data = compute_roi(worked_params).to_dict()
        assert set(data) == {
            "warmbound", "formAbandonment", "reactivation", "linkedin", "google",
            "totalPipeline", "totalRevenue", "totalAdSavings", "totalValue",
        }
        assert data["warmbound"]["id"] == "warmbound"
        assert data["linkedin"]["savings"] == pytest.approx(24_000)
        assert isinstance(data["google"]["steps"], list)
        assert data["warmbound"]["label"] == "Warmbound Sales Uplift"

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_numbers_become_null(self, value):
        assert json_number(value) is None

    def test_finite_numbers_pass_through(self):
        assert json_number(-480_000.0) == -480_000.0

    def test_overflowed_channel_serializes_as_null(self):
        data = ChannelResult("warmbound", float("inf"), float("nan")).to_dict()
        assert data["pipeline"] is None
        assert data["revenue"] is None


class TestRegistryDrivenEngine:
    def test_labels_come_from_channel_definitions(self, worked_params):
        result = compute_roi(worked_params)
        assert result.warmbound.label == "Warmbound Sales Uplift"
        assert result.linkedin.label == get_channel("linkedin").label

    def test_relabelled_definition_is_used(self, worked_params):
        renamed = replace(get_channel("warmbound"), label="Warm Accounts")
        with patch.dict("backend.channel_library.registry._REGISTRY", {"warmbound": renamed}):
            result = compute_roi(worked_params)
        assert result.warmbound.label == "Warm Accounts"

    def test_registered_channel_counts_toward_totals(self, worked_params):
        with patch.dict("backend.channel_library.registry._REGISTRY"):

            @register_channel("referrals", "Referral Uplift", "Flat referral pipeline.", ["acv"])
            def calc_referrals(params, options):
                return ChannelResult("referrals", params.acv, params.acv / 2)

            result = compute_roi(worked_params)
        assert result.total_pipeline == pytest.approx(1_713_000 + 20_000)
        assert result.total_revenue == pytest.approx(311_100 + 10_000)
        assert get_channel("referrals") is None
