"""
ROI Calculator (Streamlit)
==========================
Enter a prospect's domain, review the researched company metrics, and
adjust any metric or conversion rate to recalculate pipeline, revenue and
ad savings immediately.

Run the API first (uvicorn backend.main:app), then:
    streamlit run ui/streamlit_app.py
"""

import asyncio

import streamlit as st

from backend.cache.json_file import JsonFileResearchCache
from backend.channel_library.registry import get_channel
from backend.config.settings import Settings
from backend.engine.formatting import fmt_money
from backend.models.enums import Confidence, ParamGroup, ParamUnit
from backend.models.params import PARAM_SPECS
from backend.orchestrator.research_orchestrator import ResearchOrchestrator
from backend.orchestrator.session import ROISession
from backend.providers.api_client import ResearchAPIClient

GROUP_TITLES = {
    ParamGroup.METRICS: ("Company Metrics", "Pre-filled from AI research. Edit any value to recalculate."),
    ParamGroup.CONVERSION: ("Conversion Rates", "Industry defaults. Adjust to match the prospect."),
    ParamGroup.OUTBOUND: ("Outbound Rates", "Cold vs warm outreach performance."),
    ParamGroup.REACTIVATION: ("CRM Reactivation", "Old leads returning to the website."),
    ParamGroup.ADS: ("Ad Efficiency", "Spend saved by intent-based targeting and bidding."),
}

UNIT_SUFFIXES = {ParamUnit.PERCENT: " (%)", ParamUnit.CURRENCY: " ($)", ParamUnit.YEARS: " (yrs)"}

CONFIDENCE_BADGES = {
    Confidence.HIGH: "🟢 high confidence",
    Confidence.MEDIUM: "🟡 medium confidence",
    Confidence.LOW: "🔴 low confidence",
}


def get_session() -> ROISession:
    if "roi_session" not in st.session_state:
        settings = Settings()
        orchestrator = ResearchOrchestrator(
            provider=ResearchAPIClient(settings=settings),
            cache=JsonFileResearchCache(settings=settings),
            settings=settings,
        )
        st.session_state.roi_session = ROISession(orchestrator)
        st.session_state.lookup_id = 0
    return st.session_state.roi_session


def run_research(session: ROISession, domain: str) -> None:
    with st.spinner("Researching..."):
        asyncio.run(session.research(domain))
    # New widget keys so inputs pick up the freshly seeded values
    st.session_state.lookup_id += 1


def on_param_change(session: ROISession, key: str, widget_key: str) -> None:
    session.set_field(key, st.session_state[widget_key])


def render_inputs(session: ROISession) -> None:
    notes = session.notes()
    params = session.params
    for group, (title, caption) in GROUP_TITLES.items():
        st.markdown(f"#### {title}")
        st.caption(caption)
        specs = [spec for spec in PARAM_SPECS.values() if spec.group is group]
        cols = st.columns(3)
        for i, spec in enumerate(specs):
            widget_key = f"param_{st.session_state.lookup_id}_{spec.key}"
            with cols[i % 3]:
                st.number_input(
                    spec.label + UNIT_SUFFIXES.get(spec.unit, ""),
                    value=float(getattr(params, spec.key)),
                    key=widget_key,
                    on_change=on_param_change,
                    args=(session, spec.key, widget_key),
                )
                if notes.get(spec.key):
                    st.caption(f"_{notes[spec.key]}_")


def render_steps(steps: list[str]) -> None:
    st.markdown("\n".join(f"{i}. `{step}`" for i, step in enumerate(steps, start=1)))


def render_results(session: ROISession) -> None:
    roi = session.result()
    st.markdown("### Estimated Annual ROI")

    for channel in roi.channels:
        label_col, pipe_col, rev_col = st.columns([3, 1, 1])
        label_col.markdown(f"**{channel.label}**")
        label_col.caption(get_channel(channel.channel_id).description)
        pipe_col.metric("Pipeline", fmt_money(channel.pipeline))
        rev_col.metric("Revenue", fmt_money(channel.revenue))
        render_steps(channel.steps)

    for saving in roi.savings:
        label_col, savings_col = st.columns([4, 1])
        label_col.markdown(f"**{saving.label}**")
        label_col.caption(get_channel(saving.channel_id).description)
        savings_col.metric("Ad Savings", fmt_money(saving.savings))
        render_steps(saving.steps)

    st.divider()
    total_pipe, total_rev, total_savings = st.columns(3)
    total_pipe.metric("Total Pipeline", fmt_money(roi.total_pipeline))
    total_rev.metric("Total Revenue", fmt_money(roi.total_revenue))
    total_savings.metric("Ad Savings", fmt_money(roi.total_ad_savings))

    for issue in session.issues():
        st.warning(f"{PARAM_SPECS[issue.key].label}: {issue.message}")


st.set_page_config(page_title="ROI Calculator", layout="wide")
st.title("ROI Calculator")
st.caption("Enter a prospect's domain to research their metrics and estimate ROI.")

session = get_session()

with st.form("research"):
    domain = st.text_input("Company domain", placeholder="e.g. hubspot.com")
    submitted = st.form_submit_button("Research")
if submitted and domain.strip():
    run_research(session, domain)

if session.error:
    st.error(session.error)

if session.record is not None and session.params is not None:
    record = session.record
    header_col, badge_col = st.columns([4, 1])
    with header_col:
        cached = " · cached" if session.from_cache else ""
        st.subheader(f"{record.company_name}{cached}")
        st.caption(record.description)
    badge_col.markdown(CONFIDENCE_BADGES[record.confidence])
    if record.citations:
        with st.expander("Sources"):
            for url in record.citations:
                st.markdown(f"- [{url}]({url})")

    render_inputs(session)
    render_results(session)
