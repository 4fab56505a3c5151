# src/ui/charts.py
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import altair as alt
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from src.config import settings
from src.core.geometry import (
    ChartLayout,
    DualAxisGeometry,
    SweepGeometry,
    build_sweep_geometry,
    category_at,
)
from src.core.report_model import DualAxisChart, RankingTable
from src.core.sensitivity import SweepSeries
from src.ui.style import (
    AXIS_LABEL_COLOR,
    BAR_OPACITY,
    LINE_WIDTH_PRIMARY,
    MARKER_SIZE_CURRENT,
    TICK_FONT_SIZE,
)

logger = logging.getLogger(__name__)


def _tick_label(value: float, prefix: str = "") -> str:
    if abs(value) >= 1000:
        return f"{prefix}{value / 1000:.1f}k"
    return f"{prefix}{value:.3g}"


def _canvas_figure(layout: ChartLayout) -> go.Figure:
    """
    Empty figure whose data coordinates are the geometry's pixel coordinates.

    The y axis is reversed so geometry (y-down) can be drawn unchanged, and
    the line path strings can be passed straight to Plotly path shapes.
    """
    fig = go.Figure()
    fig.update_layout(
        width=layout.width,
        height=layout.height,
        margin=dict(l=0, r=0, t=0, b=0),
        plot_bgcolor="white",
        showlegend=False,
        hovermode="closest",
        xaxis=dict(range=[0, layout.width], visible=False, fixedrange=True),
        yaxis=dict(range=[layout.height, 0], visible=False, fixedrange=True),
    )
    left = layout.padding.left
    right = layout.width - layout.padding.right
    fig.add_shape(
        type="line", x0=left, x1=right, y0=layout.baseline_y, y1=layout.baseline_y,
        line=dict(color=settings.BORDER_GREY_HEX, width=1),
    )
    fig.add_shape(
        type="line", x0=left, x1=left, y0=layout.padding.top, y1=layout.baseline_y,
        line=dict(color=settings.BORDER_GREY_HEX, width=1),
    )
    return fig


def _add_label(fig: go.Figure, x: float, y: float, text: str, anchor: str, color: str) -> None:
    fig.add_annotation(
        x=x, y=y, text=text, showarrow=False, xanchor=anchor, yanchor="middle",
        font=dict(size=TICK_FONT_SIZE, color=color),
    )


def sweep_figure(series: SweepSeries, geometry: SweepGeometry) -> go.Figure:
    """Sensitivity line chart; the current inputs are marked on the line."""
    layout = geometry.layout
    fig = _canvas_figure(layout)

    for tick in geometry.y_ticks:
        _add_label(fig, layout.padding.left - 4, tick.position, _tick_label(tick.value), "right", AXIS_LABEL_COLOR)
    for tick in geometry.x_ticks:
        _add_label(fig, tick.position, layout.baseline_y + 10, _tick_label(tick.value), "center", AXIS_LABEL_COLOR)
    if geometry.zero_line_y is not None:
        fig.add_shape(
            type="line",
            x0=layout.padding.left,
            x1=layout.width - layout.padding.right,
            y0=geometry.zero_line_y,
            y1=geometry.zero_line_y,
            line=dict(color=settings.MUTED_TEXT_HEX, dash="dot", width=1),
        )

    fig.add_shape(
        type="path",
        path=geometry.line.path,
        line=dict(color=settings.PRIMARY_HEX, width=LINE_WIDTH_PRIMARY * 2),
    )
    fig.add_trace(
        go.Scatter(
            x=[p.x for p in geometry.line.points],
            y=[p.y for p in geometry.line.points],
            mode="markers",
            marker=dict(size=6, color=settings.PRIMARY_HEX, opacity=0.0),
            customdata=list(zip(series.xs, series.ys)),
            hovertemplate=(
                f"{series.x_label}: %{{customdata[0]:.4g}} {series.x_unit}<br>"
                f"{series.y_label}: %{{customdata[1]:.2f}} {series.y_unit}<extra></extra>"
            ),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=[geometry.current.x],
            y=[geometry.current.y],
            mode="markers+text",
            text=["YOU"],
            textposition="top center",
            marker=dict(size=MARKER_SIZE_CURRENT, color=settings.CURRENT_POINT_HEX, line=dict(color="white", width=1)),
            hovertemplate=(
                f"Your inputs<br>{series.y_label}: {series.current[1]:.2f} {series.y_unit}<extra></extra>"
            ),
        )
    )
    fig.add_annotation(
        x=layout.width / 2, y=8, text=f"<b>{series.title}</b>", showarrow=False,
        font=dict(size=12),
    )
    return fig


def render_sweep_grid(
    sweeps: Sequence[SweepSeries],
    columns: int,
    layout: Optional[ChartLayout] = None,
) -> None:
    layout = layout or ChartLayout.from_config(settings.LINE_CHART)
    # Scale the report layout up for the screen; proportions are unchanged.
    screen = ChartLayout(
        width=layout.width * 1.5, height=layout.height * 1.5, padding=layout.padding
    )
    cols = st.columns(columns)
    for i, series in enumerate(sweeps):
        geometry = build_sweep_geometry(series.xs, series.ys, series.current, screen)
        with cols[i % columns]:
            st.plotly_chart(sweep_figure(series, geometry), width="content")
            st.caption(series.caption)


def dual_axis_figure(chart: DualAxisChart) -> go.Figure:
    """
    Bars (left axis) and line (right axis) drawn from the shared geometry.

    Each category gets an invisible, full-height hover target so hovering or
    clicking anywhere over a month selects it.
    """
    geometry: DualAxisGeometry = chart.geometry
    layout = geometry.layout
    fig = _canvas_figure(layout)

    for bar in geometry.bars:
        fig.add_shape(
            type="rect",
            x0=bar.x,
            x1=bar.x + bar.width,
            y0=bar.y,
            y1=bar.y + bar.height,
            fillcolor=settings.BITCOIN_ORANGE_HEX,
            opacity=BAR_OPACITY,
            line=dict(width=0),
        )
    fig.add_shape(
        type="path",
        path=geometry.path,
        line=dict(color=settings.GENERATION_GREEN_HEX, width=LINE_WIDTH_PRIMARY * 2),
    )
    fig.add_trace(
        go.Scatter(
            x=[p.x for p in geometry.line.points],
            y=[p.y for p in geometry.line.points],
            mode="markers",
            marker=dict(size=6, color=settings.GENERATION_GREEN_HEX),
            hoverinfo="skip",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=[bar.center_x for bar in geometry.bars],
            y=[layout.padding.top + layout.chart_height / 2] * len(geometry.bars),
            mode="markers",
            marker=dict(size=layout.chart_width / len(geometry.bars), opacity=0.0, symbol="square"),
            customdata=list(zip(chart.categories, chart.bar_values, chart.line_values)),
            hovertemplate=(
                "<b>%{customdata[0]}</b><br>"
                f"{chart.bar_label}: {chart.bar_unit}%{{customdata[1]:,.2f}}<br>"
                f"{chart.line_label}: %{{customdata[2]:,.0f}} {chart.line_unit}<extra></extra>"
            ),
        )
    )

    left = layout.padding.left
    right = layout.width - layout.padding.right
    for tick in geometry.bar_ticks:
        _add_label(fig, left - 6, tick.position, _tick_label(tick.value, chart.bar_unit), "right", settings.BITCOIN_ORANGE_HEX)
    for tick in geometry.line_ticks:
        _add_label(fig, right + 6, tick.position, _tick_label(tick.value), "left", settings.GENERATION_GREEN_HEX)
    for bar, label in zip(geometry.bars, chart.categories):
        _add_label(fig, bar.center_x, layout.baseline_y + 14, label, "center", AXIS_LABEL_COLOR)

    _add_label(fig, left, layout.padding.top / 2, f"{chart.bar_label} ({chart.bar_unit})", "left", settings.BITCOIN_ORANGE_HEX)
    _add_label(fig, right, layout.padding.top / 2, f"{chart.line_label} ({chart.line_unit})", "right", settings.GENERATION_GREEN_HEX)
    return fig


def selected_category(event, layout: ChartLayout, category_count: int) -> Optional[int]:
    """
    Category under the first selected point of a Plotly selection event.

    Event x values are canvas coordinates, so the left padding is removed
    before mapping.
    """
    try:
        points = event.selection.points
    except AttributeError:
        return None
    if not points:
        return None
    return category_at(
        float(points[0]["x"]) - layout.padding.left, layout, category_count
    )


def render_dual_axis_chart(chart: DualAxisChart, key: str = "dual_axis") -> Optional[int]:
    """Show the dual-axis chart and return the month the user clicked, if any."""
    fig = dual_axis_figure(chart)
    event = st.plotly_chart(
        fig,
        width="content",
        key=key,
        on_select="rerun",
        selection_mode="points",
    )
    index = selected_category(event, chart.geometry.layout, len(chart.categories))
    if index is not None:
        logger.debug("Dual-axis selection: %s", chart.categories[index])
    return index


def ranking_dataframe(table: RankingTable) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Rank": [row.rank for row in table.rows],
            "Region": [row.display_name for row in table.rows],
            table.metric_label: [row.display_value for row in table.rows],
            "You": [row.is_user for row in table.rows],
        }
    )


def ranking_bar_chart(table: RankingTable, clamp: float = settings.COPE_CHART_CLAMP) -> alt.Chart:
    """Horizontal bars for a mini ranking with the user's row highlighted."""
    values: List[float] = []
    for row in table.rows:
        value = row.value
        # Infinite COPe cannot be drawn; show it at the chart clamp.
        if table.metric_key == "cope" and (math.isnan(value) or value > clamp):
            value = clamp
        values.append(value)
    df = pd.DataFrame(
        {
            "label": [f"#{row.rank} {row.display_name}" for row in table.rows],
            "value": values,
            "display": [row.display_value for row in table.rows],
            "is_user": [row.is_user for row in table.rows],
        }
    )
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("value:Q", title=table.metric_label),
            y=alt.Y("label:N", sort=None, title=None),
            color=alt.Color(
                "is_user:N",
                scale=alt.Scale(
                    domain=[True, False],
                    range=[settings.BITCOIN_ORANGE_HEX, settings.BORDER_GREY_HEX],
                ),
                legend=None,
            ),
            tooltip=[
                alt.Tooltip("label:N", title="Region"),
                alt.Tooltip("display:N", title=table.metric_label),
            ],
        )
        .properties(height=30 * len(df))
    )


def render_ranking_panel(tables: Sequence[RankingTable]) -> None:
    cols = st.columns(len(tables))
    for col, table in zip(cols, tables):
        with col:
            st.markdown(f"**{table.metric_label}**")
            st.altair_chart(ranking_bar_chart(table), width="stretch")
            st.dataframe(
                ranking_dataframe(table).drop(columns=["You"]),
                hide_index=True,
                width="stretch",
            )
            st.caption(f"You rank {table.position_label} of {table.population_size} regions.")
