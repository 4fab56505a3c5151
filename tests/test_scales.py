# tests/test_scales.py
import math

import pytest

from src.core.scales import (
    make_category_scale,
    make_even_ticks,
    make_linear_scale,
    make_nice_ticks,
    nice_max,
    series_max,
)


def test_nice_max_rounds_up_to_1_2_5_10():
    assert nice_max(47) == 50
    assert nice_max(1) == 1
    assert nice_max(100) == 100
    assert nice_max(101) == 200
    assert nice_max(7.2) == 10
    assert nice_max(0.3) == pytest.approx(0.5)


def test_nice_max_fallback_for_degenerate_input():
    assert nice_max(0) == 100
    assert nice_max(-5) == 100
    assert nice_max(float("nan")) == 100
    assert nice_max(0, fallback=10) == 10


def test_log_ticks_for_47():
    ticks = make_nice_ticks(47, 4)
    assert ticks.ticks == (0, 12.5, 25, 37.5, 50)
    assert ticks.nice_max == 50
    assert ticks.mode == "log"
    assert ticks.step == 12.5


def test_step_ticks_for_150():
    ticks = make_nice_ticks(150, 5, mode="step")
    assert ticks.ticks == (0, 100, 200, 300, 400, 500)
    assert ticks.nice_max == 500


def test_step_ticks_minimum_one_step():
    ticks = make_nice_ticks(3, 4, mode="step")
    assert ticks.ticks == (0, 100, 200, 300, 400)


def test_step_ticks_round_up_to_next_hundred():
    ticks = make_nice_ticks(1234, 4, mode="step")
    # 1234 / 4 = 308.5 -> 400 per step
    assert ticks.ticks == (0, 400, 800, 1200, 1600)


@pytest.mark.parametrize("mode", ["log", "step"])
@pytest.mark.parametrize(
    "series",
    [[47], [0.003, 0.02], [1, 2, 3], [999, 1000], [-5, 12], [123456.7], [0.5]],
)
def test_ticks_cover_series_and_increase(series, mode):
    ticks = make_nice_ticks(series_max(series), 4, mode=mode).ticks
    assert all(b > a for a, b in zip(ticks, ticks[1:]))
    assert ticks[0] == 0
    assert ticks[-1] >= max(series)


@pytest.mark.parametrize("mode", ["log", "step"])
@pytest.mark.parametrize("series", [[], [0, 0], [-3, -1], [float("nan")]])
def test_ticks_for_non_positive_series_are_valid(series, mode):
    ticks = make_nice_ticks(series_max(series), 4, mode=mode).ticks
    assert len(ticks) == 5
    assert all(math.isfinite(t) for t in ticks)
    assert all(b > a for a, b in zip(ticks, ticks[1:]))


def test_tick_count_below_one_is_coerced():
    assert make_nice_ticks(47, 0).ticks == (0, 50)


def test_unknown_tick_mode_raises():
    with pytest.raises(ValueError):
        make_nice_ticks(10, 4, mode="linear")


def test_series_max_ignores_non_finite():
    assert series_max([]) == 0.0
    assert series_max([1, float("inf"), float("nan"), -2]) == 1


def test_linear_scale_orientations():
    across = make_linear_scale((0, 50), 200)
    assert across(0) == 0
    assert across(50) == 200
    assert across(25) == 100

    up = make_linear_scale((0, 50), 200, invert=True)
    assert up(0) == 200
    assert up(50) == 0


def test_degenerate_domain_maps_to_floor():
    scale = make_linear_scale((0, 0), 100, invert=True)
    assert scale.domain_max == 1
    assert scale(0) == 100


def test_category_scale_centres():
    scale = make_category_scale(3, 300)
    assert scale.slot_width == 100
    assert [scale(i) for i in range(3)] == [50, 150, 250]


def test_category_scale_needs_a_category():
    with pytest.raises(ValueError):
        make_category_scale(0, 300)


def test_even_ticks():
    assert make_even_ticks(-10, 10, 4) == (-10, -5, 0, 5, 10)
    assert make_even_ticks(3, 3, 1) == (3, 4)


@pytest.mark.parametrize("mode", ["log", "step"])
@pytest.mark.parametrize("top", [1.5e308, 1.7976931348623157e308, 9e307])
def test_ticks_near_float_max_stay_finite(top, mode):
    ticks = make_nice_ticks(top, 4, mode=mode).ticks
    assert all(math.isfinite(t) for t in ticks)
    assert all(b > a for a, b in zip(ticks, ticks[1:]))
    assert ticks[-1] >= top


def test_nice_max_never_overflows():
    assert math.isfinite(nice_max(1.5e308))
    assert nice_max(1.5e308) >= 1.5e308
