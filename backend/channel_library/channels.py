"""Channel funnels: three pipeline/revenue channels and two ad-savings
channels.

Each function is a pure calculation with no side effects. All monetary
values are in the currency of the ACV and ad-spend inputs (typically USD)
and are annualised.
"""

from __future__ import annotations

import logging
from typing import Callable

from backend.engine.formatting import fmt_count, fmt_money, fmt_pct
from backend.engine.options import EngineOptions
from backend.engine.result import ChannelResult, SavingsResult
from backend.engine.stages import Funnel, Stage
from backend.models.enums import ChannelKind, WarmBaseline
from backend.models.params import Params

from .registry import register_channel

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12

WARM_SEGMENT = Stage("warm accounts", "warm_account_pct", "showing intent")
MEETING_TO_DEAL = Stage("deals", "meeting_to_deal", "meeting→deal")

FORM_FUNNEL = Funnel(
    (
        Stage("form fills", "form_fill_rate", "form fill"),
        Stage("abandoned", "form_abandon_rate", "abandoned"),
        Stage("demos", "abandon_to_demo", "→demo"),
        Stage("deals", "demo_to_deal", "→deal"),
    )
)

REACTIVATION_FUNNEL = Funnel(
    (
        Stage("re-engaged", "reactivation_rate", "return to site"),
        Stage("demos", "reactivation_demo_rate", "demo rate"),
        Stage("deals", "demo_to_deal", "→deal"),
    )
)


def derive_steps(channel_id: str, build: Callable[[], list[str]]) -> list[str]:
    """Render derivation text; a rendering failure never affects numbers."""
    try:
        return build()
    except (ArithmeticError, ValueError, TypeError) as e:
        logger.warning(f"Could not render derivation steps for {channel_id}: {e}")
        return []


def annual_form_fills(params: Params) -> float:
    annual_visitors = params.monthly_traffic * MONTHS_PER_YEAR
    return FORM_FUNNEL.stages[0].apply(annual_visitors, params)


@register_channel(
    channel_id="warmbound",
    label="Warmbound Sales Uplift",
    description=(
        "Incremental deals from targeting accounts showing buying intent "
        "instead of cold outreach. Only the warm-minus-cold difference counts."
    ),
    required_params=[
        "tam", "acv", "warm_account_pct", "warm_reach_to_meeting",
        "cold_reach_to_meeting", "meeting_to_deal", "deal_to_close",
    ],
)
def calc_warmbound(params: Params, options: EngineOptions) -> ChannelResult:
    warm_accounts = WARM_SEGMENT.apply(params.tam, params)
    warm_rate = params.warm_reach_to_meeting
    cold_rate = params.cold_reach_to_meeting

    if options.warm_baseline is WarmBaseline.FULL_TAM:
        warm_deals = MEETING_TO_DEAL.apply(warm_accounts * (warm_rate / 100), params)
        cold_deals = MEETING_TO_DEAL.apply(params.tam * (cold_rate / 100), params)
        uplift_deals = warm_deals - cold_deals
    else:
        reach_delta = (warm_rate - cold_rate) / 100
        uplift_deals = MEETING_TO_DEAL.apply(warm_accounts * reach_delta, params)

    if options.floor_uplift:
        uplift_deals = max(0.0, uplift_deals)

    pipeline = uplift_deals * params.acv
    revenue = pipeline * (params.deal_to_close / 100)

    def steps() -> list[str]:
        lines = [
            f"{fmt_count(params.tam)} TAM × {fmt_pct(params.warm_account_pct)} "
            f"{WARM_SEGMENT.label} = {fmt_count(warm_accounts)} {WARM_SEGMENT.name}",
        ]
        if options.warm_baseline is WarmBaseline.FULL_TAM:
            lines += [
                f"Warm: {fmt_count(warm_accounts)} × {fmt_pct(warm_rate)} reach→meeting "
                f"× {fmt_pct(params.meeting_to_deal)} →deal = {fmt_count(warm_deals)} deals",
                f"Cold baseline: {fmt_count(params.tam)} × {fmt_pct(cold_rate)} "
                f"× {fmt_pct(params.meeting_to_deal)} = {fmt_count(cold_deals)} deals",
            ]
        else:
            lines.append(
                f"Reach uplift: {fmt_pct(warm_rate)} warm − {fmt_pct(cold_rate)} cold "
                f"= {fmt_pct(warm_rate - cold_rate)} reach→meeting",
            )
            lines.append(
                f"{fmt_count(warm_accounts)} × {fmt_pct(warm_rate - cold_rate)} "
                f"× {fmt_pct(params.meeting_to_deal)} {MEETING_TO_DEAL.label} "
                f"= {fmt_count(uplift_deals)} uplift deals",
            )
        lines += [
            f"Pipeline: {fmt_count(uplift_deals)} deals × {fmt_money(params.acv)} ACV "
            f"= {fmt_money(pipeline)}",
            f"Revenue: {fmt_money(pipeline)} × {fmt_pct(params.deal_to_close)} win rate "
            f"= {fmt_money(revenue)}",
        ]
        return lines

    return ChannelResult(
        channel_id="warmbound",
        pipeline=pipeline,
        revenue=revenue,
        steps=derive_steps("warmbound", steps),
    )


@register_channel(
    channel_id="form_abandonment",
    label="Form Abandonment Recovery",
    description=(
        "Deals recovered from visitors who started a conversion form "
        "but did not submit it."
    ),
    required_params=[
        "monthly_traffic", "acv", "form_fill_rate", "form_abandon_rate",
        "abandon_to_demo", "demo_to_deal", "deal_win_rate",
    ],
)
def calc_form_abandonment(params: Params, options: EngineOptions) -> ChannelResult:
    annual_visitors = params.monthly_traffic * MONTHS_PER_YEAR
    trace = FORM_FUNNEL.run(annual_visitors, params)
    deals = trace.final
    pipeline = deals * params.acv
    won = deals * (params.deal_win_rate / 100)
    revenue = won * params.acv

    def steps() -> list[str]:
        return [
            f"{fmt_count(params.monthly_traffic)}/mo × 12 = "
            f"{fmt_count(annual_visitors)} annual visitors",
            f"× {fmt_pct(params.form_fill_rate)} form fill = "
            f"{fmt_count(trace.count('form fills'))} submissions → "
            f"× {fmt_pct(params.form_abandon_rate)} abandoned = "
            f"{fmt_count(trace.count('abandoned'))}",
            f"× {fmt_pct(params.abandon_to_demo)} →demo = {fmt_count(trace.count('demos'))} → "
            f"× {fmt_pct(params.demo_to_deal)} →deal = {fmt_count(deals)} deals",
            f"Pipeline: {fmt_count(deals)} × {fmt_money(params.acv)} ACV = {fmt_money(pipeline)}",
            f"Revenue: {fmt_count(deals)} × {fmt_pct(params.deal_win_rate)} win rate = "
            f"{fmt_count(won)} won × {fmt_money(params.acv)} = {fmt_money(revenue)}",
        ]

    return ChannelResult(
        channel_id="form_abandonment",
        pipeline=pipeline,
        revenue=revenue,
        steps=derive_steps("form_abandonment", steps),
    )


@register_channel(
    channel_id="reactivation",
    label="CRM Lead Reactivation",
    description=(
        "Deals from dormant CRM leads (a multi-year backlog of past form "
        "fills) that return to the site."
    ),
    required_params=[
        "monthly_traffic", "acv", "form_fill_rate", "crm_years", "reactivation_rate",
        "reactivation_demo_rate", "demo_to_deal", "reactivation_win_rate",
    ],
)
def calc_reactivation(params: Params, options: EngineOptions) -> ChannelResult:
    form_fills = annual_form_fills(params)
    crm_leads = form_fills * params.crm_years
    funnel = REACTIVATION_FUNNEL
    if not options.reactivation_demo_to_deal:
        funnel = funnel.without("deals")
    trace = funnel.run(crm_leads, params)
    deals = trace.final
    pipeline = deals * params.acv
    won = deals * (params.reactivation_win_rate / 100)
    revenue = won * params.acv

    def steps() -> list[str]:
        lines = [
            f"{fmt_count(form_fills)} annual form fills × {params.crm_years:g} yrs = "
            f"{fmt_count(crm_leads)} CRM leads",
            f"× {fmt_pct(params.reactivation_rate)} return to site = "
            f"{fmt_count(trace.count('re-engaged'))} re-engaged",
            f"× {fmt_pct(params.reactivation_demo_rate)} demo rate = "
            f"{fmt_count(trace.count('demos'))} demos",
        ]
        if options.reactivation_demo_to_deal:
            lines.append(
                f"× {fmt_pct(params.demo_to_deal)} →deal = {fmt_count(deals)} deals"
            )
        lines += [
            f"Pipeline: {fmt_count(deals)} × {fmt_money(params.acv)} ACV = {fmt_money(pipeline)}",
            f"Revenue: {fmt_count(deals)} × {fmt_pct(params.reactivation_win_rate)} win rate = "
            f"{fmt_count(won)} won × {fmt_money(params.acv)} = {fmt_money(revenue)}",
        ]
        return lines

    return ChannelResult(
        channel_id="reactivation",
        pipeline=pipeline,
        revenue=revenue,
        steps=derive_steps("reactivation", steps),
    )


def _ad_savings(channel_id: str, monthly_spend: float, roi_gain: float) -> SavingsResult:
    annual_spend = monthly_spend * MONTHS_PER_YEAR
    savings = annual_spend * (roi_gain / 100)

    def steps() -> list[str]:
        return [
            f"{fmt_money(monthly_spend)}/mo × 12 = {fmt_money(annual_spend)} annual spend",
            f"× {fmt_pct(roi_gain)} efficiency gain = {fmt_money(savings)} saved",
        ]

    return SavingsResult(
        channel_id=channel_id,
        savings=savings,
        steps=derive_steps(channel_id, steps),
    )


@register_channel(
    channel_id="linkedin",
    label="LinkedIn Ads Efficiency",
    description="Annual LinkedIn spend saved by intent-based audience refinement.",
    required_params=["linkedin_ad_spend", "linkedin_roi_gain"],
    kind=ChannelKind.SAVINGS,
)
def calc_linkedin_savings(params: Params, options: EngineOptions) -> SavingsResult:
    return _ad_savings("linkedin", params.linkedin_ad_spend, params.linkedin_roi_gain)


@register_channel(
    channel_id="google",
    label="Google Ads Efficiency",
    description="Annual Google Ads spend saved by smarter bidding and exclusions.",
    required_params=["google_ad_spend", "google_roi_gain"],
    kind=ChannelKind.SAVINGS,
)
def calc_google_savings(params: Params, options: EngineOptions) -> SavingsResult:
    return _ad_savings("google", params.google_ad_spend, params.google_roi_gain)
