# src/core/report_model.py
"""
Page-structured document model for the exported reports.

A report is an ordered list of pages, each page an ordered list of typed
sections. The model is renderer-agnostic: charts carry the same geometry
descriptors the interactive charts use, and ranking tables carry the rows
already cut down to the mini-ranking window.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from src.config import settings
from src.core.geometry import DualAxisGeometry, SweepGeometry
from src.core.heating_metrics import format_cope
from src.core.ranking import Ranking


class ReportStructureError(ValueError):
    """Raised when a report document is structurally incomplete."""


class SectionKind(str, Enum):
    COVER = "cover"
    INPUT_SUMMARY = "input_summary"
    RESULTS_SUMMARY = "results_summary"
    CHART_GRID = "chart_grid"
    RANKING_TABLE = "ranking_table"
    NARRATIVE = "narrative"
    DUAL_AXIS_CHART = "dual_axis_chart"
    DATA_TABLE = "data_table"
    RECOMMENDATION = "recommendation"


# ---------------------------------------------------------------------------
# Section payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyMetric:
    label: str
    value: str


@dataclass(frozen=True)
class Cover:
    description: str
    summary: str
    is_positive: bool
    key_metrics: Tuple[KeyMetric, ...] = ()


@dataclass(frozen=True)
class InputCategory:
    title: str
    items: Tuple[Tuple[str, str], ...]  # (label, formatted value)


@dataclass(frozen=True)
class InputSummary:
    categories: Tuple[InputCategory, ...]


@dataclass(frozen=True)
class ResultItem:
    label: str
    value: str
    explanation: str = ""
    sub_value: Optional[str] = None


@dataclass(frozen=True)
class ResultsSummary:
    items: Tuple[ResultItem, ...]


@dataclass(frozen=True)
class ChartSlot:
    title: str
    x_label: str
    y_label: str
    geometry: Optional[SweepGeometry]
    caption: str = ""


@dataclass(frozen=True)
class ChartGrid:
    columns: int
    slots: Tuple[ChartSlot, ...]


@dataclass(frozen=True)
class RankingRow:
    rank: int
    code: str
    display_name: str
    value: float
    display_value: str
    is_user: bool = False


@dataclass(frozen=True)
class RankingTable:
    metric_key: str
    metric_label: str
    unit: str
    rows: Tuple[RankingRow, ...]
    position_label: str
    population_size: int

    @property
    def user_row(self) -> RankingRow:
        users = [row for row in self.rows if row.is_user]
        if len(users) != 1:
            raise ReportStructureError(
                f"Ranking table {self.metric_key!r} has {len(users)} user rows"
            )
        return users[0]


@dataclass(frozen=True)
class Narrative:
    paragraphs: Tuple[str, ...]


@dataclass(frozen=True)
class DualAxisChart:
    categories: Tuple[str, ...]
    bar_values: Tuple[float, ...]
    line_values: Tuple[float, ...]
    bar_label: str
    bar_unit: str
    line_label: str
    line_unit: str
    geometry: Optional[DualAxisGeometry]
    caption: str = ""


@dataclass(frozen=True)
class DataTable:
    columns: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    total_row: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class Recommendation:
    headline: str
    body: str
    positive: bool


Payload = Union[
    Cover,
    InputSummary,
    ResultsSummary,
    ChartGrid,
    RankingTable,
    Narrative,
    DualAxisChart,
    DataTable,
    Recommendation,
]

PAYLOAD_TYPES = {
    SectionKind.COVER: Cover,
    SectionKind.INPUT_SUMMARY: InputSummary,
    SectionKind.RESULTS_SUMMARY: ResultsSummary,
    SectionKind.CHART_GRID: ChartGrid,
    SectionKind.RANKING_TABLE: RankingTable,
    SectionKind.NARRATIVE: Narrative,
    SectionKind.DUAL_AXIS_CHART: DualAxisChart,
    SectionKind.DATA_TABLE: DataTable,
    SectionKind.RECOMMENDATION: Recommendation,
}


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Section:
    kind: SectionKind
    title: str
    payload: Payload


@dataclass(frozen=True)
class Page:
    number: int
    header_title: str
    sections: Tuple[Section, ...]


@dataclass(frozen=True)
class ReportDocument:
    title: str
    subtitle: str
    generated_date: str
    location: str
    pages: Tuple[Page, ...]
    author: str = field(default="")

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    def sections_of(self, kind: SectionKind) -> List[Section]:
        return [s for page in self.pages for s in page.sections if s.kind == kind]


def _check_chart_grid(title: str, grid: ChartGrid) -> None:
    if grid.columns < 1:
        raise ReportStructureError(f"Chart grid {title!r} needs at least one column")
    if not grid.slots:
        raise ReportStructureError(f"Chart grid {title!r} declares no charts")
    for slot in grid.slots:
        if slot.geometry is None or not slot.geometry.line.points:
            raise ReportStructureError(
                f"Chart {slot.title!r} in {title!r} has no data"
            )


def _check_dual_axis(title: str, chart: DualAxisChart) -> None:
    if chart.geometry is None or not chart.geometry.bars:
        raise ReportStructureError(f"Dual-axis chart {title!r} has no data")
    if len(chart.categories) != len(chart.geometry.bars):
        raise ReportStructureError(
            f"Dual-axis chart {title!r} has {len(chart.categories)} labels "
            f"for {len(chart.geometry.bars)} categories"
        )


def validate_document(doc: ReportDocument) -> ReportDocument:
    """
    Check a report for structural completeness.

    - pages are numbered 1..n in order
    - each section's payload matches its kind
    - every declared chart slot has geometry
    - every ranking table has exactly one user-flagged row

    Returns the document unchanged so it can be used inline.
    """
    if not doc.pages:
        raise ReportStructureError("Report has no pages")
    numbers = [page.number for page in doc.pages]
    if numbers != list(range(1, len(doc.pages) + 1)):
        raise ReportStructureError(f"Pages must be numbered 1..n, got {numbers}")

    for page in doc.pages:
        for section in page.sections:
            expected = PAYLOAD_TYPES[section.kind]
            if not isinstance(section.payload, expected):
                raise ReportStructureError(
                    f"Section {section.title!r} on page {page.number} is "
                    f"{section.kind.value} but carries {type(section.payload).__name__}"
                )
            if section.kind == SectionKind.CHART_GRID:
                _check_chart_grid(section.title, section.payload)
            elif section.kind == SectionKind.DUAL_AXIS_CHART:
                _check_dual_axis(section.title, section.payload)
            elif section.kind == SectionKind.RANKING_TABLE:
                user_rows = sum(1 for row in section.payload.rows if row.is_user)
                if user_rows != 1:
                    raise ReportStructureError(
                        f"Ranking table {section.title!r} has {user_rows} user rows"
                    )
    return doc


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_metric(value: float, metric_key: str, unit: str = "") -> str:
    """Table/report display of a metric value; COPe is capped at "∞"."""
    if metric_key == "cope":
        return format_cope(value)
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    if unit == "%":
        return f"{value:.1f}%"
    return f"{value:,.2f}{unit}"


def build_ranking_table(
    ranking: Ranking,
    metric_key: str,
    metric_label: str,
    unit: str = "",
    top_n: int = settings.RANKING_TOP_N,
    radius: int = settings.RANKING_RADIUS,
) -> RankingTable:
    """Mini-ranking table payload from a ranking's window."""
    rows = tuple(
        RankingRow(
            rank=entry.rank,
            code=entry.region.code,
            display_name=entry.region.display_name,
            value=float(entry.value),
            display_value=format_metric(float(entry.value), metric_key, unit),
            is_user=entry.is_user,
        )
        for entry in ranking.window(top_n=top_n, radius=radius)
    )
    return RankingTable(
        metric_key=metric_key,
        metric_label=metric_label,
        unit=unit,
        rows=rows,
        position_label=ranking.position.label,
        population_size=ranking.population_size,
    )


def make_page(number: int, header_title: str, sections: Sequence[Section]) -> Page:
    return Page(number=number, header_title=header_title, sections=tuple(sections))
