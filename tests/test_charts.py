# tests/test_charts.py
import math
from types import SimpleNamespace

from src.config import settings
from src.core.geometry import ChartLayout, build_sweep_geometry
from src.core.report_model import RankingRow, RankingTable
from src.core.reports import solar_dual_axis_chart
from src.core.sensitivity import run_sweep
from src.core.solar_metrics import compute_solar_mining
from src.ui.charts import (
    dual_axis_figure,
    ranking_bar_chart,
    ranking_dataframe,
    selected_category,
    sweep_figure,
)


def _chart(network, miner):
    result = compute_solar_mining([12.0 * d for d in settings.DAYS_PER_MONTH], miner, network)
    return solar_dual_axis_chart(
        result,
        layout=ChartLayout.from_config(settings.INTERACTIVE_DUAL_AXIS_CHART),
        tick_count=settings.INTERACTIVE_DUAL_AXIS_TICK_COUNT,
        tick_mode="step",
    )


def _path_shapes(fig):
    return [shape for shape in fig.layout.shapes if shape.type == "path"]


def test_sweep_figure_draws_geometry_path(heating_inputs):
    series = run_sweep(heating_inputs, "electricity", "savings")
    geometry = build_sweep_geometry(
        series.xs, series.ys, series.current, ChartLayout.from_config(settings.LINE_CHART)
    )
    fig = sweep_figure(series, geometry)

    (path,) = _path_shapes(fig)
    assert path.path == geometry.line.path
    current = fig.data[-1]
    assert list(current.x) == [geometry.current.x]
    assert list(current.text) == ["YOU"]


def test_dual_axis_figure_matches_geometry(network, miner):
    chart = _chart(network, miner)
    fig = dual_axis_figure(chart)

    (path,) = _path_shapes(fig)
    assert path.path == chart.geometry.path
    rects = [shape for shape in fig.layout.shapes if shape.type == "rect"]
    assert [r.x0 for r in rects] == [bar.x for bar in chart.geometry.bars]


def test_selected_category_from_event(network, miner):
    chart = _chart(network, miner)
    layout = chart.geometry.layout
    march = chart.geometry.bars[2]
    event = SimpleNamespace(selection=SimpleNamespace(points=[{"x": march.center_x}]))

    assert selected_category(event, layout, 12) == 2


def test_selected_category_without_selection(network, miner):
    layout = _chart(network, miner).geometry.layout
    assert selected_category(SimpleNamespace(selection=SimpleNamespace(points=[])), layout, 12) is None
    assert selected_category(None, layout, 12) is None
    outside = SimpleNamespace(selection=SimpleNamespace(points=[{"x": 1.0}]))
    assert selected_category(outside, layout, 12) is None


def _cope_table():
    rows = (
        RankingRow(1, "WA", "Washington", math.inf, "∞"),
        RankingRow(2, "YOU", "You", 3.2, "3.20", is_user=True),
        RankingRow(3, "NY", "New York", 1.4, "1.40"),
    )
    return RankingTable("cope", "COPe", "", rows, "between #1-#2", 2)


def test_ranking_dataframe():
    df = ranking_dataframe(_cope_table())
    assert list(df.columns) == ["Rank", "Region", "COPe", "You"]
    assert df["You"].tolist() == [False, True, False]


def test_ranking_bar_chart_clamps_infinite_cope():
    chart = ranking_bar_chart(_cope_table())
    values = chart.data["value"].tolist()
    assert values[0] == settings.COPE_CHART_CLAMP
    assert values[1:] == [3.2, 1.4]
