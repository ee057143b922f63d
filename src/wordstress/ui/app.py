from __future__ import annotations

import asyncio

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from wordstress.analysis import compare_reports
from wordstress.config import (
    BurstConfig,
    HttpMethod,
    LoadMode,
    RequestOptions,
    RunConfig,
    SteadyStateConfig,
    build_url,
    validate,
)
from wordstress.errors import ConfigurationError
from wordstress.loadgen.runner import run_test
from wordstress.metrics import AggregateReport
from wordstress.storage import default_storage
from wordstress.useragent import BROWSER_USER_AGENTS, resolve_user_agent


st.set_page_config(page_title="wordstress", layout="wide")

storage = default_storage()


@st.cache_data
def _load_runs() -> pd.DataFrame:
    return storage.list_runs()


def _render_header() -> None:
    st.title("wordstress")
    st.caption("Steady-state and burst HTTP load against a single endpoint.")


def _build_config() -> RunConfig:
    with st.sidebar:
        st.header("Run Configuration")
        domain = st.text_input("Domain", "example.com")
        endpoint = st.text_input("Endpoint", "/")
        https = st.checkbox("HTTPS", value=True)
        method = st.selectbox("Method", [m.value for m in HttpMethod])
        mode = st.selectbox("Mode", [m.value for m in LoadMode])
        timeout_ms = st.number_input("Timeout (ms)", min_value=1, value=30_000)
        follow_redirects = st.checkbox("Follow redirects", value=True)
        browser = st.selectbox("Browser", sorted(BROWSER_USER_AGENTS))
        notes = st.text_input("Notes", "")

        st.subheader("Mode parameters")
        if mode == LoadMode.STEADY_STATE.value:
            clients = st.slider("Clients", 1, 200, 5)
            interval_ms = st.number_input("Interval (ms)", min_value=1, value=1000)
            duration = st.slider("Duration (sec)", 1, 600, 60)
            steady = SteadyStateConfig(clients=clients, interval_ms=int(interval_ms), duration_sec=duration)
            burst = BurstConfig()
        else:
            steady = SteadyStateConfig()
            burst = BurstConfig(burst_clients=st.slider("Simultaneous requests", 1, 1000, 50))

    return RunConfig(
        target_url=build_url(https, domain, endpoint),
        mode=LoadMode(mode),
        request=RequestOptions(
            method=method,
            timeout_ms=int(timeout_ms),
            follow_redirects=follow_redirects,
            user_agent=resolve_user_agent(browser=browser),
        ),
        steady=steady,
        burst=burst,
        notes=notes,
    )


def _run_button(config: RunConfig) -> None:
    if not st.sidebar.button("Start run"):
        return
    try:
        validate(config)
    except ConfigurationError as exc:
        st.sidebar.error(str(exc))
        return
    bar = st.sidebar.progress(0.0, text="Running...")

    async def on_progress(elapsed: float, expected: float | None) -> None:
        if expected:
            bar.progress(min(1.0, elapsed / expected), text=f"{elapsed:.0f}s / {expected:.0f}s")
        else:
            bar.progress(0.0, text=f"{elapsed:.0f}s elapsed")

    result = asyncio.run(run_test(config, storage, progress=on_progress))
    bar.progress(1.0, text="Done")
    st.sidebar.success(f"Run completed: {result.run_id}")
    st.cache_data.clear()


def _render_summary(report: AggregateReport) -> None:
    cols = st.columns(5)
    cols[0].metric("Requests", report.total_requests)
    cols[1].metric("Success rate", f"{report.success_rate_pct:.2f}%")
    cols[2].metric("Throughput", f"{report.throughput_rps:.2f} req/s")
    cols[3].metric("p95", f"{report.response_time.p95:.1f}ms")
    cols[4].metric("p99", f"{report.response_time.p99:.1f}ms")


def _plot_status_codes(report: AggregateReport) -> go.Figure:
    labels = list(report.status_codes) + ["errors"]
    counts = list(report.status_codes.values()) + [report.error_total]
    fig = go.Figure(go.Bar(x=labels, y=counts))
    fig.update_layout(height=300, margin=dict(l=10, r=10, t=30, b=10), title="Status codes")
    return fig


def _plot_latency(per_second: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    for col, label in [("p50_ms", "p50"), ("p95_ms", "p95"), ("p99_ms", "p99")]:
        fig.add_trace(go.Scatter(x=per_second["second"], y=per_second[col], name=label, mode="lines"))
    fig.update_layout(height=300, margin=dict(l=10, r=10, t=30, b=10), title="Latency per second")
    return fig


def _plot_latency_hist(outcomes: pd.DataFrame) -> go.Figure:
    ok = outcomes[outcomes["error_kind"].isna()] if not outcomes.empty else outcomes
    if ok.empty:
        return go.Figure()
    fig = px.histogram(ok, x="response_time_ms", nbins=30, title="Response time distribution")
    fig.update_layout(height=300, margin=dict(l=10, r=10, t=30, b=10))
    return fig


def _render_errors(report: AggregateReport) -> None:
    if not report.errors:
        return
    errors = pd.DataFrame(
        [{"error": error, "count": count} for error, count in report.errors.items()]
    ).sort_values("count", ascending=False)
    st.dataframe(errors, use_container_width=True)


def _render_run_view(run_id: str) -> None:
    report = storage.load_report(run_id)
    if report is None:
        st.warning(f"Run {run_id} not found")
        return
    meta = storage.load_run_meta(run_id) or {}
    per_second = storage.load_per_second(run_id)
    outcomes = storage.load_outcomes(run_id)

    st.subheader(f"Run {run_id}")
    st.caption(f"{meta.get('mode', '')} {meta.get('target_url', '')} {meta.get('notes', '')}")
    _render_summary(report)

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(_plot_status_codes(report), use_container_width=True)
    with col2:
        st.plotly_chart(_plot_latency_hist(outcomes), use_container_width=True)
    if not per_second.empty:
        st.plotly_chart(_plot_latency(per_second), use_container_width=True)
    _render_errors(report)


def _render_comparison(runs: pd.DataFrame) -> None:
    run_ids = runs["run_id"].tolist()
    if len(run_ids) < 2:
        return
    st.subheader("Run Comparison")
    base_id = st.selectbox("Baseline run", run_ids, index=1)
    candidate_id = st.selectbox("Candidate run", run_ids, index=0)
    if base_id == candidate_id:
        st.info("Select two different runs for comparison")
        return
    base = storage.load_report(base_id)
    candidate = storage.load_report(candidate_id)
    if base is None or candidate is None:
        return
    regressions = compare_reports(base, candidate)
    if not regressions:
        st.success("No regressions detected")
    for reg in regressions:
        st.error(f"{reg.message} ({reg.delta_pct:.1f}% on {reg.metric})")


def main() -> None:
    _render_header()
    config = _build_config()
    _run_button(config)

    runs = _load_runs()
    if runs.empty:
        st.info("No runs yet. Start one from the sidebar.")
        return
    selected_run = st.selectbox("Select run", runs["run_id"].tolist())
    _render_run_view(selected_run)
    _render_comparison(runs)


if __name__ == "__main__":
    main()
