# src/core/sensitivity.py
"""
Sensitivity sweeps for the hashrate heating calculator.

Each sweep varies a single input around the user's value, holds everything
else fixed, and records one heating metric at every step. The user's own
inputs give the highlighted "current" point on the chart.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Tuple

import numpy as np

from src.config import settings
from src.core.geometry import clamp_finite
from src.core.heating_metrics import (
    HeatingInputs,
    evaluate_heating,
    hashprice_usd_per_th_day,
    hashvalue_sats_per_th_day,
)
from src.core.miner_models import MinerOption

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepSeries:
    title: str
    x_label: str
    x_unit: str
    y_label: str
    y_unit: str
    xs: Tuple[float, ...]
    ys: Tuple[float, ...]  # already clamped, safe to hand to geometry
    current: Tuple[float, float]
    caption: str = ""


@dataclass(frozen=True)
class SweepInput:
    key: str
    label: str
    unit: str
    current: Callable[[HeatingInputs], float]
    apply: Callable[[HeatingInputs, float], HeatingInputs]


def _with_efficiency(inputs: HeatingInputs, j_per_th: float) -> HeatingInputs:
    # Keep the heater's power (its heat output) and change the hashrate.
    hashrate = inputs.miner.power_w / j_per_th if j_per_th > 0 else 0.0
    miner = MinerOption(
        name=inputs.miner.name,
        hashrate_th=hashrate,
        power_w=inputs.miner.power_w,
        supplier=inputs.miner.supplier,
    )
    return replace(inputs, miner=miner)


def _with_hashprice(inputs: HeatingInputs, hashprice: float) -> HeatingInputs:
    # Hashprice is linear in BTC price for a fixed network, so solve for price.
    btc_per_th_day = hashvalue_sats_per_th_day(inputs.network) / settings.SATS_PER_BTC
    if btc_per_th_day <= 0:
        return inputs
    network = replace(inputs.network, btc_price_usd=hashprice / btc_per_th_day)
    return replace(inputs, network=network)


SWEEP_INPUTS: Dict[str, SweepInput] = {
    "electricity": SweepInput(
        key="electricity",
        label="Electricity Rate",
        unit="$/kWh",
        current=lambda i: i.electricity_rate,
        apply=lambda i, x: replace(i, electricity_rate=x),
    ),
    "fuel": SweepInput(
        key="fuel",
        label="Fuel Rate",
        unit="$/unit",
        current=lambda i: i.fuel_rate,
        apply=lambda i, x: replace(i, fuel_rate=x),
    ),
    "efficiency": SweepInput(
        key="efficiency",
        label="Miner Efficiency",
        unit="J/TH",
        current=lambda i: i.miner.efficiency_j_per_th,
        apply=_with_efficiency,
    ),
    "hashprice": SweepInput(
        key="hashprice",
        label="Hashprice",
        unit="$/TH/day",
        current=lambda i: hashprice_usd_per_th_day(i.network),
        apply=_with_hashprice,
    ),
}

METRIC_AXES: Dict[str, Tuple[str, str]] = {
    "savings": ("Savings", "%"),
    "cope": ("COPe", ""),
    "subsidy": ("Subsidy", "%"),
}

# Sweeps drawn for each metric, in chart order
SAVINGS_SWEEPS = ("electricity", "fuel", "efficiency", "hashprice")
COPE_SWEEPS = ("electricity", "efficiency", "hashprice")
SUBSIDY_SWEEPS = ("electricity", "efficiency", "hashprice")


def sweep_range(
    current: float,
    steps: int = settings.SWEEP_STEPS,
    span_pct: float = settings.SWEEP_SPAN_PCT,
) -> List[float]:
    """``steps`` evenly spaced values from ``current*(1-span)`` to ``current*(1+span)``."""
    if steps < 2:
        raise ValueError("A sweep needs at least 2 steps")
    if not math.isfinite(current) or current <= 0:
        return [float(x) for x in np.linspace(0.0, 1.0, steps)]
    lo = max(0.0, current * (1 - span_pct))
    hi = current * (1 + span_pct)
    return [float(x) for x in np.linspace(lo, hi, steps)]


def _clamp_metric(metric: str, values: List[float]) -> List[float]:
    if metric == "cope":
        return clamp_finite(values, settings.COPE_CHART_CLAMP)
    # Savings and subsidy are finite except for degenerate inputs.
    return clamp_finite(values, 1e6)


def run_sweep(
    inputs: HeatingInputs,
    input_key: str,
    metric: str,
    steps: int = settings.SWEEP_STEPS,
    span_pct: float = settings.SWEEP_SPAN_PCT,
) -> SweepSeries:
    """Vary one input of ``inputs`` and record ``metric`` at every step."""
    if input_key not in SWEEP_INPUTS:
        raise ValueError(f"Unknown sweep input: {input_key}")
    if metric not in METRIC_AXES:
        raise ValueError(f"Unknown heating metric: {metric}")

    sweep = SWEEP_INPUTS[input_key]
    current_x = float(sweep.current(inputs))
    xs = sweep_range(current_x, steps, span_pct)
    raw = [evaluate_heating(sweep.apply(inputs, x))[metric] for x in xs]
    current_y = evaluate_heating(inputs)[metric]

    ys = _clamp_metric(metric, raw)
    (current_y_clamped,) = _clamp_metric(metric, [current_y])

    x_unit = inputs.fuel_spec.unit if input_key == "fuel" else sweep.unit
    y_label, y_unit = METRIC_AXES[metric]
    logger.debug(
        "Sweep %s -> %s: %d steps around %.4g", input_key, metric, len(xs), current_x
    )
    return SweepSeries(
        title=f"{y_label} vs {sweep.label}",
        x_label=sweep.label,
        x_unit=x_unit,
        y_label=y_label,
        y_unit=y_unit,
        xs=tuple(xs),
        ys=tuple(ys),
        current=(current_x, current_y_clamped),
        caption=f"Current: {current_x:.4g} {x_unit}".strip(),
    )


def heating_sweeps(
    inputs: HeatingInputs,
    steps: int = settings.SWEEP_STEPS,
    span_pct: float = settings.SWEEP_SPAN_PCT,
) -> Dict[str, List[SweepSeries]]:
    """All sensitivity charts of the heating calculator, grouped by metric."""
    groups = {
        "savings": SAVINGS_SWEEPS,
        "cope": COPE_SWEEPS,
        "subsidy": SUBSIDY_SWEEPS,
    }
    return {
        metric: [run_sweep(inputs, key, metric, steps, span_pct) for key in keys]
        for metric, keys in groups.items()
    }
