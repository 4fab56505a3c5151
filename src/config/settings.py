# src/config/settings.py

from src.config.env import APP_ENV

# Development / production settings for the hashrate heating & solar calculators
DEV_DEFAULT_REGION_CODE = "NY"
DEV_DEFAULT_MONTHLY_SOLAR_KWH = 800.0

# --- Network snapshot defaults ---
# Entered manually in the UI; the calculators never fetch live data.
BLOCK_SUBSIDY_BTC = 3.125
BLOCKS_PER_DAY = 144
SATS_PER_BTC = 100_000_000

DEFAULT_BTC_PRICE_USD = 90000.0
DEFAULT_NETWORK_HASHRATE_EH = 800.0  # EH/s
DEFAULT_FEE_PCT = 1.5  # tx fees as % of block reward

# Caching config
POPULATION_CACHE_TTL_S = 60 * 60 * 24 if APP_ENV == "dev" else 10 * 60

# --- Heating defaults ---
DEFAULT_MONTHLY_HEAT_KWH = 1500.0
BTU_PER_KWH = 3412.0
KWH_PER_MMBTU = 293.07
KWH_PER_THERM = 29.307

# --- Ranking ---
RANKING_TOP_N = 5  # fixed rows at the top of the mini ranking
RANKING_RADIUS = 2  # neighbours shown either side of the user
RANKING_TOLERANCE = 1e-9  # values closer than this rank as ties

# COPe values at/above this are shown as "∞" in tables and reports
COPE_DISPLAY_CAP = 100.0
# Sensitivity charts clamp unbounded values (COPe) to this before plotting
COPE_CHART_CLAMP = 20.0

# --- Sensitivity sweeps ---
SWEEP_STEPS = 11  # points per sweep, current value sits in the middle
SWEEP_SPAN_PCT = 0.5  # +/- 50% around the current value

# --- Axis ticks ---
NICE_MAX_FALLBACK = 100.0
BAR_CHART_TICK_COUNT = 4
LINE_CHART_TICK_COUNT = 4
DUAL_AXIS_TICK_COUNT = 4
INTERACTIVE_DUAL_AXIS_TICK_COUNT = 5
STEP_TICK_SIZE = 100.0  # round-to-nearest-100 mode

# Fraction of each category slot left empty on either side of a bar
BAR_GAP_FRACTION = 0.2

# --- Chart layouts (points for PDF, pixels on screen) ---
# padding is (top, right, bottom, left)
BAR_CHART = {"width": 480, "height": 150, "padding": (20, 20, 35, 45)}
LINE_CHART = {"width": 220, "height": 130, "padding": (20, 15, 25, 35)}
LINE_CHART_ROW = {"width": 168, "height": 140, "padding": (20, 15, 25, 35)}
DUAL_AXIS_CHART = {"width": 500, "height": 180, "padding": (25, 50, 40, 60)}
INTERACTIVE_DUAL_AXIS_CHART = {
    "width": 800,
    "height": 400,
    "padding": (50, 60, 60, 60),
}

# --- Colours ---
BITCOIN_ORANGE_HEX = "#F7931A"
PRIMARY_HEX = "#2563eb"
GENERATION_GREEN_HEX = "#22c55e"
CURRENT_POINT_HEX = "#f59e0b"
BORDER_GREY_HEX = "#d1d5db"
MUTED_TEXT_HEX = "#6b7280"
USER_ROW_HEX = "#f0fdf4"

DATE_DISPLAY_FMT = "%B %d, %Y"
MONTH_LABELS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]
DAYS_PER_MONTH = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

# Typical share of annual solar output per month (northern hemisphere)
DEFAULT_SOLAR_MONTHLY_SHARE = [
    0.050,
    0.060,
    0.082,
    0.095,
    0.107,
    0.112,
    0.115,
    0.108,
    0.090,
    0.072,
    0.055,
    0.054,
]
