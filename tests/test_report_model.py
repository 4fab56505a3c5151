# tests/test_report_model.py
import math
from dataclasses import replace

import pytest

from src.config import settings
from src.core.report_model import (
    ChartGrid,
    ChartSlot,
    Narrative,
    RankingRow,
    RankingTable,
    ReportDocument,
    ReportStructureError,
    Section,
    SectionKind,
    build_ranking_table,
    format_metric,
    make_page,
    validate_document,
)
from src.core.geometry import ChartLayout, build_dual_axis_geometry, build_sweep_geometry
from src.core.ranking import RegionRecord, UserRecord, rank
from src.core.reports import (
    build_heating_report,
    build_solar_report,
    heating_rankings,
    solar_data_table,
    solar_dual_axis_chart,
)
from src.core.solar_metrics import compute_solar_mining
from src.data.region_prices import STATE_FUEL_PRICES


def _doc(pages):
    return ReportDocument(
        title="T", subtitle="S", generated_date="January 01, 2025", location="Here", pages=tuple(pages)
    )


def _table(rows):
    return RankingTable(
        metric_key="savings",
        metric_label="Savings %",
        unit="%",
        rows=tuple(rows),
        position_label="above #1",
        population_size=len(rows),
    )


@pytest.fixture
def solar_result(network, miner):
    return compute_solar_mining([12.0 * d for d in settings.DAYS_PER_MONTH], miner, network)


def test_heating_report_structure(heating_inputs):
    doc = build_heating_report(heating_inputs, "New York", generated_date="March 01, 2025")

    assert doc.total_pages == 5
    assert [p.number for p in doc.pages] == [1, 2, 3, 4, 5]
    assert doc.generated_date == "March 01, 2025"
    assert doc.pages[0].sections[0].kind == SectionKind.COVER

    grids = doc.sections_of(SectionKind.CHART_GRID)
    assert [len(g.payload.slots) for g in grids] == [4, 3, 3]
    assert [g.payload.columns for g in grids] == [2, 3, 3]

    tables = doc.sections_of(SectionKind.RANKING_TABLE)
    assert len(tables) == 3
    for section in tables:
        assert section.payload.user_row.display_name == "New York"
    assert len(doc.sections_of(SectionKind.RECOMMENDATION)) == 1


def test_heating_report_recommendation_follows_savings(heating_inputs):
    doc = build_heating_report(heating_inputs, "Here")
    (rec,) = doc.sections_of(SectionKind.RECOMMENDATION)
    assert rec.payload.positive is True

    # Cheap propane makes the miner the dearer option.
    dear = replace(heating_inputs, fuel_rate=0.10, electricity_rate=0.30)
    doc = build_heating_report(dear, "Here")
    (rec,) = doc.sections_of(SectionKind.RECOMMENDATION)
    assert rec.payload.positive is False
    assert "NOT" in rec.payload.headline


def test_heating_report_charts_share_layouts(heating_inputs):
    doc = build_heating_report(heating_inputs, "Here")
    savings, cope, subsidy = doc.sections_of(SectionKind.CHART_GRID)
    assert savings.payload.slots[0].geometry.layout.width == settings.LINE_CHART["width"]
    assert cope.payload.slots[0].geometry.layout.width == settings.LINE_CHART_ROW["width"]


def test_heating_rankings_have_one_user_row(heating_inputs):
    tables = heating_rankings(heating_inputs, location_label="Me")
    assert set(tables) == {"savings", "cope", "subsidy"}
    for table in tables.values():
        assert sum(row.is_user for row in table.rows) == 1
        assert table.population_size == len(STATE_FUEL_PRICES)


def test_solar_report_without_net_metering(solar_result, network, miner):
    doc = build_solar_report(solar_result, miner, network, "Rooftop")

    assert doc.total_pages == 4
    assert doc.title == "Solar Mining Potential"
    assert not doc.sections_of(SectionKind.RECOMMENDATION)
    (chart,) = doc.sections_of(SectionKind.DUAL_AXIS_CHART)
    assert len(chart.payload.categories) == 12
    (table,) = doc.sections_of(SectionKind.DATA_TABLE)
    assert len(table.payload.rows) == 12
    assert table.payload.total_row[0] == "Total"


def test_solar_report_with_net_metering(solar_result, network, miner):
    doc = build_solar_report(solar_result, miner, network, "Rooftop", net_metering_rate=0.02)

    assert doc.total_pages == 4
    assert doc.title == "Mining vs Net Metering"
    (rec,) = doc.sections_of(SectionKind.RECOMMENDATION)
    assert rec.payload.positive is True
    assert rec.payload.headline == "MINING RECOMMENDED"


def test_solar_report_zero_production(network, miner):
    result = compute_solar_mining([0.0] * 12, miner, network)
    doc = build_solar_report(result, miner, network, "Shade")
    assert doc.total_pages == 4


def test_solar_data_table_totals(solar_result):
    table = solar_data_table(solar_result)
    assert table.columns == ("Month", "Solar kWh", "Sats", "USD", "Hours/day")
    assert table.rows[0][0] == "Jan"
    assert table.total_row[1] == "4,380"
    assert table.total_row[3] == "$182.50"


def test_solar_dual_axis_chart_log_ticks(solar_result):
    chart = solar_dual_axis_chart(solar_result)
    assert chart.geometry.bar_ticks[0].value == 0
    assert len(chart.geometry.bar_ticks) == settings.DUAL_AXIS_TICK_COUNT + 1
    assert len(chart.geometry.bars) == len(chart.geometry.line.points) == 12


@pytest.mark.parametrize(
    "value, key, unit, expected",
    [
        (12.345, "savings", "%", "12.3%"),
        (math.inf, "cope", "", "∞"),
        (2.5, "cope", "", "2.50"),
        (math.nan, "subsidy", "%", "N/A"),
        (-math.inf, "savings", "%", "-∞"),
        (1234.5, "other", "", "1,234.50"),
    ],
)
def test_format_metric(value, key, unit, expected):
    assert format_metric(value, key, unit) == expected


def test_build_ranking_table_marks_user():
    population = [RegionRecord(f"R{i}", f"Region {i}", float(i)) for i in range(10)]
    ranking = rank(population, UserRecord("YOU", "You", 4.5))
    table = build_ranking_table(ranking, "savings", "Savings %", "%", top_n=3, radius=1)

    assert [row.rank for row in table.rows] == [1, 2, 3, 5, 6, 6]
    assert table.user_row.display_value == "4.5%"
    assert table.position_label == "between #5-#6"
    assert table.population_size == 10


def test_validate_rejects_empty_and_misnumbered():
    with pytest.raises(ReportStructureError):
        validate_document(_doc([]))
    page = make_page(2, "H", [Section(SectionKind.NARRATIVE, "N", Narrative(("x",)))])
    with pytest.raises(ReportStructureError):
        validate_document(_doc([page]))


def test_validate_rejects_payload_mismatch():
    page = make_page(1, "H", [Section(SectionKind.COVER, "N", Narrative(("x",)))])
    with pytest.raises(ReportStructureError):
        validate_document(_doc([page]))


def test_validate_rejects_chart_slot_without_geometry():
    grid = ChartGrid(2, (ChartSlot("Empty", "x", "y", None),))
    page = make_page(1, "H", [Section(SectionKind.CHART_GRID, "Grid", grid)])
    with pytest.raises(ReportStructureError):
        validate_document(_doc([page]))


def test_validate_rejects_ranking_without_single_user():
    rows = [RankingRow(1, "A", "Alpha", 1.0, "1.0%"), RankingRow(2, "B", "Beta", 0.5, "0.5%")]
    page = make_page(1, "H", [Section(SectionKind.RANKING_TABLE, "Rank", _table(rows))])
    with pytest.raises(ReportStructureError):
        validate_document(_doc([page]))
    with pytest.raises(ReportStructureError):
        _table(rows).user_row


def test_validate_rejects_mismatched_dual_axis_labels(solar_result):
    chart = solar_dual_axis_chart(solar_result)
    broken = replace(chart, categories=chart.categories[:-1])
    page = make_page(1, "H", [Section(SectionKind.DUAL_AXIS_CHART, "Chart", broken)])
    with pytest.raises(ReportStructureError):
        validate_document(_doc([page]))


def test_report_structure_error_is_value_error():
    assert issubclass(ReportStructureError, ValueError)


def test_validate_rejects_empty_dual_axis_chart(solar_result):
    chart = solar_dual_axis_chart(solar_result)
    empty = replace(
        chart,
        categories=(),
        bar_values=(),
        line_values=(),
        geometry=build_dual_axis_geometry([], [], chart.geometry.layout),
    )
    page = make_page(1, "H", [Section(SectionKind.DUAL_AXIS_CHART, "Chart", empty)])
    with pytest.raises(ReportStructureError):
        validate_document(_doc([page]))


def test_validate_rejects_empty_sweep_slot():
    layout = ChartLayout.from_config(settings.LINE_CHART)
    slot = ChartSlot("Empty", "x", "y", build_sweep_geometry([], [], (0.0, 0.0), layout))
    page = make_page(1, "H", [Section(SectionKind.CHART_GRID, "Grid", ChartGrid(2, (slot,)))])
    with pytest.raises(ReportStructureError):
        validate_document(_doc([page]))
