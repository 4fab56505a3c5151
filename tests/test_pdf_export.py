# tests/test_pdf_export.py
from reportlab.graphics.shapes import Drawing, PolyLine, Rect

from src.config import settings
from src.core.report_model import SectionKind
from src.core.reports import build_heating_report, build_solar_report, solar_dual_axis_chart
from src.core.solar_metrics import compute_solar_mining
from src.ui.pdf_export import _plain, build_pdf_report, dual_axis_drawing, sweep_drawing


def _solar_result(network, miner):
    return compute_solar_mining([12.0 * d for d in settings.DAYS_PER_MONTH], miner, network)


def test_heating_pdf_renders(heating_inputs):
    doc = build_heating_report(heating_inputs, "New York")
    pdf = build_pdf_report(doc)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_solar_pdf_renders(network, miner):
    doc = build_solar_report(_solar_result(network, miner), miner, network, "Rooftop", net_metering_rate=0.05)
    assert build_pdf_report(doc).startswith(b"%PDF")


def test_sweep_drawing_follows_geometry(heating_inputs):
    doc = build_heating_report(heating_inputs, "Here")
    slot = doc.sections_of(SectionKind.CHART_GRID)[0].payload.slots[0]
    drawing = sweep_drawing(slot)

    assert isinstance(drawing, Drawing)
    assert drawing.width == slot.geometry.layout.width
    (line,) = [s for s in drawing.contents if isinstance(s, PolyLine)]
    # x is shared with the screen geometry; y is flipped for the PDF canvas.
    xs = line.points[0::2]
    ys = line.points[1::2]
    layout = slot.geometry.layout
    assert xs == [p.x for p in slot.geometry.line.points]
    assert ys == [layout.height - p.y for p in slot.geometry.line.points]


def test_dual_axis_drawing_has_one_bar_per_month(network, miner):
    chart = solar_dual_axis_chart(_solar_result(network, miner))
    drawing = dual_axis_drawing(chart)
    bars = [s for s in drawing.contents if isinstance(s, Rect)]
    assert len(bars) == 12
    assert [b.x for b in bars] == [bar.x for bar in chart.geometry.bars]


def test_plain_replaces_infinity():
    assert _plain("COPe ∞") == "COPe inf"
