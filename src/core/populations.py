# src/core/populations.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping

from src.core.heating_metrics import compute_cope, compute_savings
from src.core.miner_models import MinerOption, NetworkSnapshot
from src.core.ranking import Direction, RegionRecord
from src.data.region_prices import (
    COUNTRY_US,
    REGION_TABLES,
    FuelPrices,
    RegionInfo,
    get_default_fuel_rate,
    get_fuel_spec,
)

logger = logging.getLogger(__name__)

# (prices of one region) -> metric value; may return +inf
RegionMetricFn = Callable[[FuelPrices], float]


@dataclass(frozen=True)
class MetricDefinition:
    key: str
    label: str
    unit: str
    direction: Direction


METRICS: Dict[str, MetricDefinition] = {
    "savings": MetricDefinition("savings", "Savings %", "%", "desc"),
    "cope": MetricDefinition("cope", "COPe", "", "desc"),
    "subsidy": MetricDefinition("subsidy", "Subsidy %", "%", "desc"),
}


def build_population(
    table: Mapping[str, RegionInfo], metric_fn: RegionMetricFn
) -> List[RegionRecord]:
    """Apply a metric function to every region of a reference table."""
    return [
        RegionRecord(code=code, display_name=info.name, value=metric_fn(info.prices))
        for code, info in table.items()
    ]


def heating_metric_functions(
    fuel_type: str,
    miner: MinerOption,
    network: NetworkSnapshot,
    country: str = COUNTRY_US,
) -> Dict[str, RegionMetricFn]:
    """Per-region savings / COPe / subsidy functions for one fuel and miner."""
    spec = get_fuel_spec(fuel_type, country)

    def savings(prices: FuelPrices) -> float:
        return compute_savings(
            fuel_type,
            spec,
            get_default_fuel_rate(fuel_type, prices),
            prices.electricity,
            miner,
            network,
        ).savings_pct

    def cope(prices: FuelPrices) -> float:
        return compute_cope(prices.electricity, miner, network).cope

    def subsidy(prices: FuelPrices) -> float:
        return compute_cope(prices.electricity, miner, network).subsidy_pct

    return {"savings": savings, "cope": cope, "subsidy": subsidy}


def build_heating_populations(
    fuel_type: str,
    miner: MinerOption,
    network: NetworkSnapshot,
    country: str = COUNTRY_US,
) -> Dict[str, List[RegionRecord]]:
    """One reference population per heating metric for the given country."""
    if country not in REGION_TABLES:
        raise ValueError(f"No reference table for country {country!r}")
    table = REGION_TABLES[country]
    functions = heating_metric_functions(fuel_type, miner, network, country)
    populations = {
        key: build_population(table, fn) for key, fn in functions.items()
    }
    logger.debug(
        "Built %d-region populations for %s / %s", len(table), country, fuel_type
    )
    return populations
