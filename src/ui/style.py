# src/ui/style.py

from __future__ import annotations

"""
UI / visual style constants for the calculators.

Keep anything purely presentational in here (line widths, opacities, font
sizes), and keep domain / layout constants in src/config/settings.py.
"""

# ---------------------------------------------------------------------------
# Chart line widths
# ---------------------------------------------------------------------------

LINE_WIDTH_PRIMARY = 1.25  # sweep lines and the generation line


# ---------------------------------------------------------------------------
# Marks
# ---------------------------------------------------------------------------

BAR_OPACITY = 0.85
MARKER_SIZE_CURRENT = 11  # the "YOU" point on sensitivity charts

AXIS_LABEL_COLOR = "#6b7280"
TICK_FONT_SIZE = 10
