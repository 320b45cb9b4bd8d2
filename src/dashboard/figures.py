"""Plotly figures built from precomputed chart data."""

from decimal import Decimal

import plotly.graph_objects as go

from src.models.chart_data import PrecomputedChartData

WITH_COLOR = "#e94560"
WITHOUT_COLOR = "#1a1a2e"
PRINCIPAL_COLOR = "#2ecc71"
INTEREST_COLOR = "#f39c12"


def _floats(values: list[Decimal | None]) -> list[float | None]:
    # None stays None so plotly draws a gap
    return [float(v) if v is not None else None for v in values]


def cumulative_figure(data: PrecomputedChartData) -> go.Figure:
    points = data.cumulative_data
    months = [p.month for p in points]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=months, y=_floats([p.without_extra_cumulative_principal for p in points]),
        mode="lines", name="Principal (without extra)",
        line=dict(color=WITHOUT_COLOR, width=2),
    ))
    fig.add_trace(go.Scatter(
        x=months, y=_floats([p.with_extra_cumulative_principal for p in points]),
        mode="lines", name="Principal (with extra)",
        line=dict(color=WITH_COLOR, width=2),
    ))
    fig.add_trace(go.Scatter(
        x=months, y=_floats([p.without_extra_cumulative_interest for p in points]),
        mode="lines", name="Interest (without extra)",
        line=dict(color=WITHOUT_COLOR, width=2, dash="dot"),
    ))
    fig.add_trace(go.Scatter(
        x=months, y=_floats([p.with_extra_cumulative_interest for p in points]),
        mode="lines", name="Interest (with extra)",
        line=dict(color=WITH_COLOR, width=2, dash="dot"),
    ))
    limits = data.axes_limits
    fig.update_layout(
        title="Cumulative Principal & Interest",
        xaxis_title="Month",
        yaxis_title="Amount",
        yaxis_range=[0, max(limits.principal_max, limits.interest_max)],
        hovermode="x unified",
    )
    return fig


def balance_figure(data: PrecomputedChartData) -> go.Figure:
    points = data.cumulative_data
    months = [p.month for p in points]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=months, y=_floats([p.without_extra_balance for p in points]),
        mode="lines", name="Without extra",
        line=dict(color=WITHOUT_COLOR, width=3),
    ))
    fig.add_trace(go.Scatter(
        x=months, y=_floats([p.with_extra_balance for p in points]),
        mode="lines", name="With extra",
        line=dict(color=WITH_COLOR, width=3),
    ))
    fig.update_layout(
        title="Outstanding Balance",
        xaxis_title="Month",
        yaxis_title="Balance",
        yaxis_range=[0, data.axes_limits.balance_max],
        hovermode="x unified",
    )
    return fig


def payment_split_figure(data: PrecomputedChartData) -> go.Figure:
    """Stacked principal/interest bars, one stack per scenario."""
    bars = data.all_bar_months
    months = [b.month for b in bars]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=months, y=[float(b.without_principal) for b in bars],
        name="Principal (without extra)", marker_color=PRINCIPAL_COLOR,
        offsetgroup="without",
    ))
    fig.add_trace(go.Bar(
        x=months, y=[float(b.without_interest) for b in bars],
        name="Interest (without extra)", marker_color=INTEREST_COLOR,
        offsetgroup="without", base=[float(b.without_principal) for b in bars],
    ))
    fig.add_trace(go.Bar(
        x=months, y=[float(b.with_principal) for b in bars],
        name="Principal (with extra)", marker_color=WITH_COLOR,
        offsetgroup="with",
    ))
    fig.add_trace(go.Bar(
        x=months, y=[float(b.with_interest) for b in bars],
        name="Interest (with extra)", marker_color=WITHOUT_COLOR,
        offsetgroup="with", base=[float(b.with_principal) for b in bars],
    ))
    fig.update_layout(
        title="Monthly Principal vs Interest",
        barmode="group",
        xaxis_title="Month",
        yaxis_title="Amount",
        yaxis_range=[0, data.axes_limits.bar_max],
    )
    return fig


def outflow_figure(data: PrecomputedChartData) -> go.Figure:
    points = data.outflow_comparison
    months = [p.month for p in points]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=months, y=_floats([p.without_extra for p in points]),
        mode="lines", name="Without extra",
        line=dict(color=WITHOUT_COLOR, width=2),
    ))
    fig.add_trace(go.Scatter(
        x=months, y=_floats([p.with_extra for p in points]),
        mode="lines", name="With extra",
        line=dict(color=WITH_COLOR, width=2),
    ))
    fig.update_layout(
        title="Monthly Outflow",
        xaxis_title="Month",
        yaxis_title="Paid",
        yaxis_range=[0, data.axes_limits.outflow_max],
        hovermode="x unified",
    )
    return fig


def donut_figure(data: PrecomputedChartData) -> go.Figure:
    """One donut per scenario, side by side."""
    fig = go.Figure()
    count = len(data.donut_data)
    for i, slice_ in enumerate(data.donut_data):
        fig.add_trace(go.Pie(
            labels=["Principal", "Interest"],
            values=[float(slice_.principal), float(slice_.interest)],
            name=slice_.name,
            title=slice_.name,
            hole=0.5,
            marker=dict(colors=[PRINCIPAL_COLOR, INTEREST_COLOR]),
            domain=dict(x=[i / count, (i + 1) / count]),
        ))
    fig.update_layout(title="Principal vs Interest")
    return fig


def build_figures(data: PrecomputedChartData) -> dict[str, go.Figure]:
    return {
        "cumulative": cumulative_figure(data),
        "balance": balance_figure(data),
        "payment_split": payment_split_figure(data),
        "outflow": outflow_figure(data),
        "donut": donut_figure(data),
    }
