from __future__ import annotations

import io
import logging
from typing import List
from xml.sax.saxutils import escape

from reportlab.graphics.shapes import (  # type: ignore[import]
    Circle,
    Drawing,
    Line,
    PolyLine,
    Rect,
    String,
)
from reportlab.lib import colors  # type: ignore[import]
from reportlab.lib.pagesizes import A4  # type: ignore[import]
from reportlab.lib.styles import getSampleStyleSheet  # type: ignore[import]
from reportlab.pdfgen import canvas  # type: ignore[import]
from reportlab.platypus import (  # type: ignore[import]
    ListFlowable,
    ListItem,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from src.config import settings
from src.config.version import APP_VERSION
from src.core.geometry import ChartLayout
from src.core.report_model import (
    ChartGrid,
    ChartSlot,
    Cover,
    DataTable,
    DualAxisChart,
    InputSummary,
    Narrative,
    RankingTable,
    Recommendation,
    ReportDocument,
    ResultsSummary,
    Section,
    SectionKind,
)

logger = logging.getLogger(__name__)

Styles = getSampleStyleSheet()

ORANGE = colors.HexColor(settings.BITCOIN_ORANGE_HEX)
PRIMARY = colors.HexColor(settings.PRIMARY_HEX)
GREEN = colors.HexColor(settings.GENERATION_GREEN_HEX)
CURRENT = colors.HexColor(settings.CURRENT_POINT_HEX)
BORDER = colors.HexColor(settings.BORDER_GREY_HEX)
MUTED = colors.HexColor(settings.MUTED_TEXT_HEX)
USER_ROW = colors.HexColor(settings.USER_ROW_HEX)

PAGE_MARGIN = 40


def _plain(text: str) -> str:
    # The standard PDF fonts have no infinity glyph.
    return str(text).replace("∞", "inf")


def _para(text: str, style) -> Paragraph:
    return Paragraph(escape(_plain(text)), style)


def _tick_label(value: float) -> str:
    if abs(value) >= 1000:
        return f"{value / 1000:.1f}k"
    return f"{value:.3g}"


def _flip(layout: ChartLayout, y: float) -> float:
    # Geometry is y-down (screen); ReportLab drawings are y-up.
    return layout.height - y


def _frame(drawing: Drawing, layout: ChartLayout) -> None:
    base = _flip(layout, layout.baseline_y)
    left = layout.padding.left
    right = layout.width - layout.padding.right
    drawing.add(Line(left, base, right, base, strokeColor=BORDER, strokeWidth=0.5))
    drawing.add(
        Line(left, base, left, _flip(layout, layout.padding.top), strokeColor=BORDER, strokeWidth=0.5)
    )


def sweep_drawing(slot: ChartSlot) -> Drawing:
    """Sensitivity line chart drawn from its geometry descriptor."""
    geom = slot.geometry
    layout = geom.layout
    drawing = Drawing(layout.width, layout.height)
    _frame(drawing, layout)

    left = layout.padding.left
    for tick in geom.y_ticks:
        drawing.add(
            String(left - 3, _flip(layout, tick.position) - 2, _tick_label(tick.value),
                   fontSize=5, fillColor=MUTED, textAnchor="end")
        )
    base = _flip(layout, layout.baseline_y)
    for tick in geom.x_ticks:
        drawing.add(
            String(tick.position, base - 8, _tick_label(tick.value),
                   fontSize=5, fillColor=MUTED, textAnchor="middle")
        )
    if geom.zero_line_y is not None:
        zero = _flip(layout, geom.zero_line_y)
        drawing.add(
            Line(left, zero, layout.width - layout.padding.right, zero,
                 strokeColor=MUTED, strokeWidth=0.5, strokeDashArray=[2, 2])
        )

    points: List[float] = []
    for point in geom.line.points:
        points.extend([point.x, _flip(layout, point.y)])
    drawing.add(PolyLine(points, strokeColor=PRIMARY, strokeWidth=1.25))
    drawing.add(
        Circle(geom.current.x, _flip(layout, geom.current.y), 3,
               fillColor=CURRENT, strokeColor=colors.white, strokeWidth=0.75)
    )

    drawing.add(
        String(layout.width / 2, layout.height - 10, slot.title,
               fontName="Helvetica-Bold", fontSize=7, textAnchor="middle")
    )
    drawing.add(
        String(layout.width / 2, 3, slot.x_label, fontSize=5, fillColor=MUTED, textAnchor="middle")
    )
    return drawing


def dual_axis_drawing(chart: DualAxisChart) -> Drawing:
    """Monthly bars (left axis) and line (right axis) from shared geometry."""
    geom = chart.geometry
    layout = geom.layout
    drawing = Drawing(layout.width, layout.height)
    _frame(drawing, layout)

    for bar in geom.bars:
        drawing.add(
            Rect(bar.x, _flip(layout, bar.y + bar.height), bar.width, bar.height,
                 fillColor=ORANGE, strokeColor=None)
        )

    points: List[float] = []
    for point in geom.line.points:
        points.extend([point.x, _flip(layout, point.y)])
    drawing.add(PolyLine(points, strokeColor=GREEN, strokeWidth=1.5))
    for point in geom.line.points:
        drawing.add(Circle(point.x, _flip(layout, point.y), 2, fillColor=GREEN, strokeColor=None))

    left = layout.padding.left
    right = layout.width - layout.padding.right
    for tick in geom.bar_ticks:
        drawing.add(
            String(left - 4, _flip(layout, tick.position) - 2,
                   f"{chart.bar_unit}{_tick_label(tick.value)}",
                   fontSize=6, fillColor=ORANGE, textAnchor="end")
        )
    for tick in geom.line_ticks:
        drawing.add(
            String(right + 4, _flip(layout, tick.position) - 2,
                   _tick_label(tick.value), fontSize=6, fillColor=GREEN)
        )

    base = _flip(layout, layout.baseline_y)
    for bar, label in zip(geom.bars, chart.categories):
        drawing.add(String(bar.center_x, base - 10, label, fontSize=6, fillColor=MUTED, textAnchor="middle"))

    drawing.add(
        String(left, layout.height - 12, f"{chart.bar_label} ({chart.bar_unit})",
               fontSize=6, fillColor=ORANGE)
    )
    drawing.add(
        String(right, layout.height - 12, f"{chart.line_label} ({chart.line_unit})",
               fontSize=6, fillColor=GREEN, textAnchor="end")
    )
    return drawing


def _table_style(header: bool = False) -> TableStyle:
    style_commands = [
        ("BOX", (0, 0), (-1, -1), 0.25, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
    ]
    if header:
        style_commands.extend(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
            ]
        )
    return TableStyle(style_commands)


def _cover_flowables(doc: ReportDocument, cover: Cover) -> list:
    story: list = [
        Spacer(1, 80),
        _para(doc.title, Styles["Title"]),
        _para(doc.subtitle, Styles["Heading2"]),
        Spacer(1, 12),
        _para(f"{doc.location} • {doc.generated_date}", Styles["Normal"]),
        Spacer(1, 24),
        _para(cover.description, Styles["Normal"]),
        Spacer(1, 12),
        _para(cover.summary, Styles["Normal"]),
        Spacer(1, 24),
    ]
    if cover.key_metrics:
        table = Table(
            [[m.label, _plain(m.value)] for m in cover.key_metrics], hAlign="LEFT"
        )
        table.setStyle(_table_style())
        story.append(table)
    return story


def _ranking_table(table: RankingTable) -> Table:
    rows = [["#", "Region", f"{table.metric_label}"]]
    for row in table.rows:
        rows.append([str(row.rank), row.display_name, _plain(row.display_value)])
    rendered = Table(rows, repeatRows=1, hAlign="LEFT")
    rendered.setStyle(_table_style(header=True))
    user_index = next(i for i, row in enumerate(table.rows, start=1) if row.is_user)
    rendered.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, user_index), (-1, user_index), USER_ROW),
                ("FONTNAME", (0, user_index), (-1, user_index), "Helvetica-Bold"),
                ("ALIGN", (2, 1), (2, -1), "RIGHT"),
            ]
        )
    )
    return rendered


def _section_flowables(doc: ReportDocument, section: Section) -> list:
    payload = section.payload
    if section.kind == SectionKind.COVER:
        return _cover_flowables(doc, payload)

    story: list = [_para(section.title, Styles["Heading2"])]
    if isinstance(payload, InputSummary):
        for category in payload.categories:
            story.append(_para(category.title, Styles["Heading4"]))
            table = Table([list(item) for item in category.items], hAlign="LEFT")
            table.setStyle(_table_style())
            story.append(table)
    elif isinstance(payload, ResultsSummary):
        rows = [["Result", "Value", ""]]
        for item in payload.items:
            rows.append([item.label, _plain(item.value), item.sub_value or ""])
        table = Table(rows, repeatRows=1, hAlign="LEFT")
        table.setStyle(_table_style(header=True))
        story.append(table)
    elif isinstance(payload, ChartGrid):
        drawings = [sweep_drawing(slot) for slot in payload.slots]
        grid = [
            drawings[i : i + payload.columns]
            for i in range(0, len(drawings), payload.columns)
        ]
        if len(grid[-1]) < payload.columns:
            grid[-1] = grid[-1] + [""] * (payload.columns - len(grid[-1]))
        grid_table = Table(grid, hAlign="LEFT")
        grid_table.setStyle(
            TableStyle([("LEFTPADDING", (0, 0), (-1, -1), 0), ("RIGHTPADDING", (0, 0), (-1, -1), 0)])
        )
        story.append(grid_table)
    elif isinstance(payload, RankingTable):
        story.append(_ranking_table(payload))
        story.append(
            _para(
                f"You rank {payload.position_label} of {payload.population_size} regions.",
                Styles["Italic"],
            )
        )
    elif isinstance(payload, Narrative):
        if len(payload.paragraphs) > 1:
            story.append(
                ListFlowable(
                    [ListItem(_para(p, Styles["Normal"])) for p in payload.paragraphs],
                    bulletType="bullet",
                )
            )
        else:
            story.extend(_para(p, Styles["Normal"]) for p in payload.paragraphs)
    elif isinstance(payload, DualAxisChart):
        story.append(dual_axis_drawing(payload))
        if payload.caption:
            story.append(_para(payload.caption, Styles["Italic"]))
    elif isinstance(payload, DataTable):
        rows = [list(payload.columns)] + [list(row) for row in payload.rows]
        if payload.total_row:
            rows.append(list(payload.total_row))
        table = Table(rows, repeatRows=1, hAlign="LEFT")
        table.setStyle(_table_style(header=True))
        table.setStyle(TableStyle([("ALIGN", (1, 1), (-1, -1), "RIGHT")]))
        if payload.total_row:
            table.setStyle(TableStyle([("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold")]))
        story.append(table)
    elif isinstance(payload, Recommendation):
        colour = "#16a34a" if payload.positive else "#dc2626"
        story.append(
            Paragraph(
                f'<font color="{colour}"><b>{escape(payload.headline)}</b></font>',
                Styles["Normal"],
            )
        )
        story.append(_para(payload.body, Styles["Normal"]))
    story.append(Spacer(1, 12))
    return story


def build_pdf_report(report: ReportDocument) -> bytes:
    """Render a report document to PDF bytes."""

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=f"{report.title} {report.subtitle}",
        author=report.author,
        topMargin=60,
        bottomMargin=60,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
    )
    story: list = []
    for page in report.pages:
        if page.number > 1:
            story.append(PageBreak())
        for section in page.sections:
            story.extend(_section_flowables(report, section))

    header_text = report.pages[-1].header_title
    footer_text = f"Generated {report.generated_date} • {report.author} • Version {APP_VERSION}"

    doc.build(
        story,
        onFirstPage=lambda canv, doc: _draw_header_footer(canv, doc, "", footer_text),
        onLaterPages=lambda canv, doc: _draw_header_footer(
            canv, doc, header_text, footer_text
        ),
        canvasmaker=lambda *args, **kwargs: NumberedCanvas(*args, **kwargs),
    )
    buffer.seek(0)
    logger.info("Rendered %r to PDF (%d pages)", report.title, report.total_pages)
    return buffer.read()


def _draw_header_footer(canvas_obj, doc, header_text: str, footer_text: str) -> None:
    canvas_obj.saveState()
    width, height = A4
    if header_text:
        canvas_obj.setFont("Helvetica-Bold", 12)
        canvas_obj.drawString(doc.leftMargin, height - 40, header_text)
    canvas_obj.setFont("Helvetica", 8)
    canvas_obj.drawString(doc.leftMargin, 40, footer_text)
    canvas_obj.restoreState()


class NumberedCanvas(canvas.Canvas):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_page_number(page_count)
            super().showPage()
        super().save()

    def draw_page_number(self, page_count: int) -> None:
        self.setFont("Helvetica", 8)
        self.drawRightString(
            self._pagesize[0] - 40,
            40,
            f"Page {self._pageNumber} of {page_count}",
        )
