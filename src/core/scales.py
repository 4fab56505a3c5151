# src/core/scales.py
from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass
from typing import Iterable, Literal, Tuple

from src.config import settings

logger = logging.getLogger(__name__)

TickMode = Literal["log", "step"]


def _is_finite(value) -> bool:
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def series_max(values: Iterable[float]) -> float:
    """Largest finite value of a series, 0.0 for an empty (or all non-finite) one."""
    finite = [float(v) for v in values if _is_finite(v)]
    return max(finite) if finite else 0.0


def series_min(values: Iterable[float]) -> float:
    finite = [float(v) for v in values if _is_finite(v)]
    return min(finite) if finite else 0.0


@dataclass(frozen=True)
class LinearScale:
    """
    Maps a numeric domain onto ``[0, range_length]``.

    With ``invert=True`` the scale is "value-up": larger values give smaller
    offsets, which is what y-down screen and PDF coordinates need.
    """

    domain_min: float
    domain_max: float
    range_length: float
    invert: bool = False

    @property
    def span(self) -> float:
        return self.domain_max - self.domain_min

    def fraction(self, value: float) -> float:
        return (float(value) - self.domain_min) / self.span

    def __call__(self, value: float) -> float:
        offset = self.fraction(value) * self.range_length
        if self.invert:
            return self.range_length - offset
        return offset


@dataclass(frozen=True)
class CategoryScale:
    """
    "Value-across" scale: x position is keyed by category index, not by value.

    Each category owns a slot of equal width and maps to the slot centre.
    """

    category_count: int
    range_length: float

    @property
    def slot_width(self) -> float:
        return self.range_length / self.category_count

    def slot_start(self, index: int) -> float:
        return index * self.slot_width

    def __call__(self, index: int) -> float:
        return (index + 0.5) * self.slot_width


def make_linear_scale(
    domain: Tuple[float, float],
    range_length: float,
    invert: bool = False,
) -> LinearScale:
    """
    Build a linear scale, substituting a safe domain when the given one is
    degenerate.

    - non-finite bounds are treated as 0
    - ``max <= min`` (e.g. an all-zero or all-negative series with a 0 floor)
      becomes ``[min, min + 1]`` so every value maps to the range floor
    """
    lo, hi = domain
    lo = float(lo) if _is_finite(lo) else 0.0
    hi = float(hi) if _is_finite(hi) else 0.0
    if hi <= lo:
        logger.debug("Degenerate scale domain (%s, %s); using max = min + 1", lo, hi)
        hi = lo + 1.0
    return LinearScale(
        domain_min=lo,
        domain_max=hi,
        range_length=float(range_length),
        invert=invert,
    )


def make_category_scale(category_count: int, range_length: float) -> CategoryScale:
    if category_count < 1:
        raise ValueError("category_count must be >= 1")
    return CategoryScale(category_count=category_count, range_length=float(range_length))


def nice_max(max_value: float, fallback: float = settings.NICE_MAX_FALLBACK) -> float:
    """
    Round ``max_value`` up to 1, 2, 5 or 10 times a power of ten.

    Non-positive or non-finite input returns ``fallback`` so an axis is
    never degenerate. Near the top of the float range, where rounding up
    would overflow, the largest finite float is returned.
    """
    if not _is_finite(max_value) or max_value <= 0:
        return float(fallback)
    magnitude = 10.0 ** math.floor(math.log10(max_value))
    normalized = max_value / magnitude
    top = 10.0 * magnitude
    for multiplier in (1, 2, 5):
        if normalized <= multiplier:
            top = multiplier * magnitude
            break
    if not math.isfinite(top):
        return sys.float_info.max
    return top


@dataclass(frozen=True)
class TickSet:
    nice_max: float
    ticks: Tuple[float, ...]
    mode: TickMode

    @property
    def step(self) -> float:
        return self.ticks[1] - self.ticks[0]


def _even_fractions(top: float, count: int) -> Tuple[float, ...]:
    # Multiples of top / count stay below top, so they cannot overflow.
    step = top / count
    return tuple(step * i for i in range(count)) + (top,)


def make_nice_ticks(
    max_value: float,
    tick_count: int,
    mode: TickMode = "log",
    fallback: float = settings.NICE_MAX_FALLBACK,
    step_size: float = settings.STEP_TICK_SIZE,
) -> TickSet:
    """
    Evenly spaced ticks covering ``[0, nice_max]``.

    Modes
    -----
    log:
        ``nice_max`` from :func:`nice_max`; ticks ``i * nice_max / tick_count``.
    step:
        step is ``max / tick_count`` rounded up to the next multiple of
        ``step_size`` (at least one ``step_size``); ticks ``i * step``.

    Both modes return ``tick_count + 1`` strictly increasing ticks with the
    last one ``>= max_value``.
    """
    count = max(1, int(tick_count))
    if mode == "log":
        top = nice_max(max_value, fallback)
        ticks = _even_fractions(top, count)
    elif mode == "step":
        if _is_finite(max_value) and max_value > 0:
            steps = math.ceil(max_value / count / step_size)
        else:
            steps = math.ceil(fallback / count / step_size)
        step = max(1, steps) * step_size
        top = step * count
        # Rounding can undershoot (or overflow) for huge maxima.
        if math.isfinite(top) and not (_is_finite(max_value) and top < max_value):
            ticks = tuple(i * step for i in range(count + 1))
        else:
            top = nice_max(max_value, fallback)
            ticks = _even_fractions(top, count)
    else:
        raise ValueError(f"Unknown tick mode: {mode}")
    return TickSet(nice_max=float(top), ticks=ticks, mode=mode)


def make_even_ticks(lo: float, hi: float, tick_count: int) -> Tuple[float, ...]:
    """Plain evenly spaced ticks over ``[lo, hi]`` (sensitivity chart axes)."""
    count = max(1, int(tick_count))
    if hi <= lo:
        hi = lo + 1.0
    return tuple(lo + (hi - lo) * i / count for i in range(count + 1))
