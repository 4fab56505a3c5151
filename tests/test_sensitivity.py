# tests/test_sensitivity.py
from dataclasses import replace

import pytest

from src.config import settings
from src.core.sensitivity import (
    COPE_SWEEPS,
    SAVINGS_SWEEPS,
    SUBSIDY_SWEEPS,
    heating_sweeps,
    run_sweep,
    sweep_range,
)


def test_sweep_range_centred_on_current():
    xs = sweep_range(0.10)
    assert len(xs) == settings.SWEEP_STEPS
    assert xs[0] == pytest.approx(0.05)
    assert xs[-1] == pytest.approx(0.15)
    assert xs[len(xs) // 2] == pytest.approx(0.10)
    assert xs == sorted(xs)


def test_sweep_range_degenerate_current():
    assert sweep_range(0.0, steps=3) == [0.0, 0.5, 1.0]
    assert sweep_range(float("inf"), steps=3) == [0.0, 0.5, 1.0]


def test_sweep_range_never_negative():
    assert min(sweep_range(1.0, steps=5, span_pct=2.0)) == 0.0


def test_sweep_range_needs_two_steps():
    with pytest.raises(ValueError):
        sweep_range(1.0, steps=1)


@pytest.mark.parametrize("input_key", ["electricity", "fuel", "efficiency", "hashprice"])
def test_middle_step_reproduces_current_point(heating_inputs, input_key):
    series = run_sweep(heating_inputs, input_key, "savings")
    middle = len(series.xs) // 2
    assert series.xs[middle] == pytest.approx(series.current[0])
    assert series.ys[middle] == pytest.approx(series.current[1])


def test_electricity_sweep_lowers_savings(heating_inputs):
    series = run_sweep(heating_inputs, "electricity", "savings")
    assert series.ys[0] > series.ys[-1]
    assert series.x_unit == "$/kWh"
    assert series.title == "Savings vs Electricity Rate"


def test_fuel_sweep_uses_fuel_unit(heating_inputs):
    series = run_sweep(heating_inputs, "fuel", "savings")
    assert series.x_unit == "gallon"
    assert series.ys[-1] > series.ys[0]


def test_efficiency_sweep_keeps_power(heating_inputs):
    series = run_sweep(heating_inputs, "efficiency", "subsidy")
    assert series.current[0] == pytest.approx(100.0)
    # Less efficient hardware earns less per kWh.
    assert series.ys[0] > series.ys[-1]
    # 50 J/TH at 1 kW is 20 TH/s: $2/day against $2.40/day of power.
    assert series.ys[0] == pytest.approx(2.0 / 2.4 * 100)


def test_hashprice_sweep(heating_inputs):
    series = run_sweep(heating_inputs, "hashprice", "subsidy")
    assert series.current[0] == pytest.approx(0.10)
    assert series.ys[-1] == pytest.approx(1.5 / 2.4 * 100)


def test_cope_sweep_clamped(heating_inputs):
    cheap = replace(heating_inputs, electricity_rate=0.05)
    series = run_sweep(cheap, "electricity", "cope")
    assert max(series.ys) <= settings.COPE_CHART_CLAMP
    # At $0.025/kWh mining pays the whole bill.
    assert series.ys[0] == settings.COPE_CHART_CLAMP
    assert series.current[1] == pytest.approx(6.0)


def test_unknown_input_or_metric_raises(heating_inputs):
    with pytest.raises(ValueError):
        run_sweep(heating_inputs, "weather", "savings")
    with pytest.raises(ValueError):
        run_sweep(heating_inputs, "electricity", "comfort")


def test_heating_sweeps_groups(heating_inputs):
    sweeps = heating_sweeps(heating_inputs)
    assert [len(sweeps[k]) for k in ("savings", "cope", "subsidy")] == [
        len(SAVINGS_SWEEPS),
        len(COPE_SWEEPS),
        len(SUBSIDY_SWEEPS),
    ] == [4, 3, 3]
    for group in sweeps.values():
        for series in group:
            assert len(series.xs) == len(series.ys) == settings.SWEEP_STEPS
