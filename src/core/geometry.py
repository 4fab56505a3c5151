# src/core/geometry.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from src.config import settings
from src.core.scales import (
    CategoryScale,
    LinearScale,
    TickMode,
    TickSet,
    make_category_scale,
    make_even_ticks,
    make_linear_scale,
    make_nice_ticks,
    series_max,
    series_min,
)

logger = logging.getLogger(__name__)

# Coordinates are rounded so the on-screen chart and the PDF see identical
# numbers (and identical path strings).
COORD_DECIMALS = 4


def _r(value: float) -> float:
    return round(float(value), COORD_DECIMALS) + 0.0


def _fmt(value: float) -> str:
    return f"{_r(value):g}"


@dataclass(frozen=True)
class Padding:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class ChartLayout:
    width: float
    height: float
    padding: Padding

    @property
    def chart_width(self) -> float:
        return self.width - self.padding.left - self.padding.right

    @property
    def chart_height(self) -> float:
        return self.height - self.padding.top - self.padding.bottom

    @property
    def baseline_y(self) -> float:
        return self.padding.top + self.chart_height

    @classmethod
    def from_config(cls, config: Mapping) -> "ChartLayout":
        """Build from a settings dict: ``{"width", "height", "padding": (t, r, b, l)}``."""
        top, right, bottom, left = config["padding"]
        return cls(
            width=float(config["width"]),
            height=float(config["height"]),
            padding=Padding(top=top, right=right, bottom=bottom, left=left),
        )


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class BarGeometry:
    index: int
    x: float
    y: float
    width: float
    height: float
    center_x: float
    value: float


@dataclass(frozen=True)
class LineGeometry:
    points: Tuple[Point, ...]
    path: str


@dataclass(frozen=True)
class AxisTick:
    value: float
    position: float  # absolute y (value axes) or x (category/sweep axes)


@dataclass(frozen=True)
class BarChartGeometry:
    layout: ChartLayout
    bars: Tuple[BarGeometry, ...]
    ticks: Tuple[AxisTick, ...]
    tick_set: TickSet


@dataclass(frozen=True)
class SweepGeometry:
    """Line chart of a sensitivity sweep with the user's current point highlighted."""

    layout: ChartLayout
    line: LineGeometry
    current: Point
    y_ticks: Tuple[AxisTick, ...]
    x_ticks: Tuple[AxisTick, ...]
    zero_line_y: Optional[float]


@dataclass(frozen=True)
class DualAxisGeometry:
    layout: ChartLayout
    bars: Tuple[BarGeometry, ...]
    line: LineGeometry
    bar_ticks: Tuple[AxisTick, ...]
    line_ticks: Tuple[AxisTick, ...]
    bar_tick_set: TickSet
    line_tick_set: TickSet

    @property
    def path(self) -> str:
        return self.line.path


def clamp_finite(values: Sequence[float], limit: float) -> List[float]:
    """
    Replace non-finite values so they can be drawn.

    ``+inf`` and values above ``limit`` become ``limit``; ``-inf`` and values
    below ``-limit`` become ``-limit``; ``NaN`` becomes 0.
    """
    clamped: List[float] = []
    for value in values:
        v = float(value)
        if math.isnan(v):
            clamped.append(0.0)
        else:
            clamped.append(max(-limit, min(limit, v)))
    return clamped


def build_path(points: Sequence[Point]) -> str:
    """SVG-style polyline: move to the first point, then line to each next one."""
    parts = []
    for i, point in enumerate(points):
        command = "M" if i == 0 else "L"
        parts.append(f"{command} {_fmt(point.x)} {_fmt(point.y)}")
    return " ".join(parts)


def build_bar_geometry(
    series: Sequence[float],
    scale: LinearScale,
    layout: ChartLayout,
    gap_fraction: float = settings.BAR_GAP_FRACTION,
) -> List[BarGeometry]:
    """
    One bar per category, centred in its slot.

    ``scale`` must be a value-up scale over ``layout.chart_height``. Each
    slot is ``gap | bar | gap`` with ``gap = slot * gap_fraction``, so the
    bars never overlap and bar + gaps fill the slot exactly. Negative values
    draw as zero-height bars on the baseline. An empty series has no bars.
    """
    if not 0 <= gap_fraction < 0.5:
        raise ValueError("gap_fraction must be in [0, 0.5)")
    if not series:
        return []

    categories = make_category_scale(len(series), layout.chart_width)
    slot = categories.slot_width
    bar_width = slot * (1 - 2 * gap_fraction)
    bars: List[BarGeometry] = []
    for i, value in enumerate(series):
        top = max(0.0, min(scale(max(0.0, value)), layout.chart_height))
        x = layout.padding.left + categories.slot_start(i) + slot * gap_fraction
        bars.append(
            BarGeometry(
                index=i,
                x=_r(x),
                y=_r(layout.padding.top + top),
                width=_r(bar_width),
                height=_r(layout.chart_height - top),
                center_x=_r(layout.padding.left + categories(i)),
                value=float(value),
            )
        )
    return bars


def build_line_geometry(
    series: Sequence[float],
    scale_x: CategoryScale,
    scale_y: LinearScale,
    layout: ChartLayout,
) -> LineGeometry:
    """One point per category at the slot centre, joined in category order."""
    if not series:
        return LineGeometry(points=(), path="")
    points = tuple(
        Point(
            x=_r(layout.padding.left + scale_x(i)),
            y=_r(layout.padding.top + scale_y(value)),
        )
        for i, value in enumerate(series)
    )
    return LineGeometry(points=points, path=build_path(points))


def _value_ticks(
    tick_set: TickSet, scale: LinearScale, layout: ChartLayout
) -> Tuple[AxisTick, ...]:
    return tuple(
        AxisTick(value=tick, position=_r(layout.padding.top + scale(tick)))
        for tick in tick_set.ticks
    )


def build_bar_chart(
    series: Sequence[float],
    layout: ChartLayout,
    tick_count: int = settings.BAR_CHART_TICK_COUNT,
    tick_mode: TickMode = "log",
) -> BarChartGeometry:
    tick_set = make_nice_ticks(series_max(series), tick_count, mode=tick_mode)
    scale = make_linear_scale((0.0, tick_set.nice_max), layout.chart_height, invert=True)
    bars = build_bar_geometry(series, scale, layout)
    return BarChartGeometry(
        layout=layout,
        bars=tuple(bars),
        ticks=_value_ticks(tick_set, scale, layout),
        tick_set=tick_set,
    )


def build_sweep_geometry(
    xs: Sequence[float],
    ys: Sequence[float],
    current: Tuple[float, float],
    layout: ChartLayout,
    tick_count: int = settings.LINE_CHART_TICK_COUNT,
) -> SweepGeometry:
    """
    Geometry for a sensitivity line chart.

    x is keyed by value (the swept input); y spans ``[min(0, ys), max(ys)]``.
    Callers clamp unbounded y values with :func:`clamp_finite` first.
    """
    if len(xs) != len(ys):
        raise ValueError("Sweep needs matching x and y series")

    x_lo, x_hi = series_min(xs), series_max(xs)
    y_lo, y_hi = min(series_min(ys), 0.0), series_max(ys)
    scale_x = make_linear_scale((x_lo, x_hi), layout.chart_width)
    scale_y = make_linear_scale((y_lo, y_hi), layout.chart_height, invert=True)

    def to_point(x: float, y: float) -> Point:
        return Point(
            x=_r(layout.padding.left + scale_x(x)),
            y=_r(layout.padding.top + scale_y(y)),
        )

    points = tuple(to_point(x, y) for x, y in zip(xs, ys))
    y_ticks = tuple(
        AxisTick(value=v, position=_r(layout.padding.top + scale_y(v)))
        for v in make_even_ticks(scale_y.domain_min, scale_y.domain_max, tick_count)
    )
    x_ticks = tuple(
        AxisTick(value=v, position=_r(layout.padding.left + scale_x(v)))
        for v in make_even_ticks(scale_x.domain_min, scale_x.domain_max, tick_count)
    )
    zero_line_y = (
        _r(layout.padding.top + scale_y(0.0)) if y_lo < 0 < y_hi else None
    )
    return SweepGeometry(
        layout=layout,
        line=LineGeometry(points=points, path=build_path(points)),
        current=to_point(*current),
        y_ticks=y_ticks,
        x_ticks=x_ticks,
        zero_line_y=zero_line_y,
    )


def build_dual_axis_geometry(
    bars: Sequence[float],
    line: Sequence[float],
    layout: ChartLayout,
    tick_count: int = settings.DUAL_AXIS_TICK_COUNT,
    tick_mode: TickMode = "log",
) -> DualAxisGeometry:
    """
    Bars (left axis) and a line (right axis) over the same categories.

    Each series gets its own nice max, but both are scaled onto the same
    chart height, and the line points sit on the bar centres. With no
    categories there are no bars or points, only the fallback axes.
    """
    if len(bars) != len(line):
        raise ValueError(
            f"Bar and line series differ in length: {len(bars)} != {len(line)}"
        )

    bar_ticks = make_nice_ticks(series_max(bars), tick_count, mode=tick_mode)
    line_ticks = make_nice_ticks(series_max(line), tick_count, mode=tick_mode)
    bar_scale = make_linear_scale((0.0, bar_ticks.nice_max), layout.chart_height, invert=True)
    line_scale = make_linear_scale((0.0, line_ticks.nice_max), layout.chart_height, invert=True)
    bar_geoms = build_bar_geometry(bars, bar_scale, layout)
    if bars:
        categories = make_category_scale(len(bars), layout.chart_width)
        line_geom = build_line_geometry(line, categories, line_scale, layout)
    else:
        line_geom = LineGeometry(points=(), path="")
    logger.debug(
        "Dual-axis geometry: %d categories, bar max %s, line max %s",
        len(bars),
        bar_ticks.nice_max,
        line_ticks.nice_max,
    )
    return DualAxisGeometry(
        layout=layout,
        bars=tuple(bar_geoms),
        line=line_geom,
        bar_ticks=_value_ticks(bar_ticks, bar_scale, layout),
        line_ticks=_value_ticks(line_ticks, line_scale, layout),
        bar_tick_set=bar_ticks,
        line_tick_set=line_ticks,
    )


def category_at(
    chart_x: float, layout: ChartLayout, category_count: int
) -> Optional[int]:
    """
    Map a pointer x to a category.

    ``chart_x`` is relative to the plot area, i.e. with ``padding.left``
    already subtracted.

    Returns None when the pointer is outside the plotted categories.
    """
    if category_count < 1:
        return None
    slot = layout.chart_width / category_count
    index = math.floor(chart_x / slot)
    if 0 <= index < category_count:
        return index
    return None
