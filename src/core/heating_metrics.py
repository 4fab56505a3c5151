# src/core/heating_metrics.py
from __future__ import annotations

import math
from dataclasses import dataclass

from src.config import settings
from src.core.miner_models import MinerOption, NetworkSnapshot
from src.data.region_prices import FuelSpec


@dataclass
class COPeResult:
    revenue_ratio: float  # R: mining revenue / electricity cost
    cope: float  # inf when mining covers the whole bill
    effective_cost_per_kwh: float  # net heat cost after the BTC offset
    breakeven_rate: float  # electricity rate at which heat is free
    daily_electricity_cost: float
    daily_mining_revenue: float
    daily_btc: float
    status: str  # "profitable" | "subsidized" | "loss"

    @property
    def subsidy_pct(self) -> float:
        return self.revenue_ratio * 100.0

    @property
    def effective_cost_per_therm(self) -> float:
        return self.effective_cost_per_kwh * settings.KWH_PER_THERM

    @property
    def effective_cost_per_mmbtu(self) -> float:
        return self.effective_cost_per_kwh * settings.KWH_PER_MMBTU


@dataclass
class SavingsResult:
    traditional_cost_per_kwh: float
    hashrate_cost_per_kwh: float
    savings_pct: float
    monthly_savings: float
    annual_savings: float


def hashvalue_sats_per_th_day(network: NetworkSnapshot) -> float:
    """Sats earned per TH/s per day across the whole network."""
    if network.network_hashrate_th <= 0:
        return 0.0
    daily_sats = (
        settings.BLOCKS_PER_DAY * network.block_reward_btc * settings.SATS_PER_BTC
    )
    return daily_sats / network.network_hashrate_th


def hashprice_usd_per_th_day(network: NetworkSnapshot) -> float:
    return hashvalue_sats_per_th_day(network) * network.btc_price_usd / settings.SATS_PER_BTC


def daily_btc(hashrate_th: float, network: NetworkSnapshot) -> float:
    if network.network_hashrate_th <= 0:
        return 0.0
    share = max(0.0, hashrate_th) / network.network_hashrate_th
    return share * settings.BLOCKS_PER_DAY * network.block_reward_btc


def compute_cope(
    electricity_rate: float,
    miner: MinerOption,
    network: NetworkSnapshot,
) -> COPeResult:
    """
    Economic coefficient of performance of a hashrate heater.

    COPe = 1 / (1 - R), with R the share of the electricity bill paid by
    mining revenue. R >= 1 means free heat and COPe is infinite.
    """
    daily_kwh = miner.power_kw * 24.0
    daily_cost = daily_kwh * max(0.0, electricity_rate)
    btc_per_day = daily_btc(miner.hashrate_th, network)
    revenue = btc_per_day * network.btc_price_usd

    ratio = revenue / daily_cost if daily_cost > 0 else 0.0
    if daily_cost <= 0 and revenue > 0:
        ratio = math.inf
    cope = math.inf if ratio >= 1 else 1.0 / (1.0 - ratio)

    effective = (daily_cost - revenue) / daily_kwh if daily_kwh > 0 else 0.0
    breakeven = revenue / daily_kwh if daily_kwh > 0 else 0.0

    if ratio >= 1:
        status = "profitable"
    elif ratio > 0.5:
        status = "subsidized"
    else:
        status = "loss"

    return COPeResult(
        revenue_ratio=ratio,
        cope=cope,
        effective_cost_per_kwh=effective,
        breakeven_rate=breakeven,
        daily_electricity_cost=daily_cost,
        daily_mining_revenue=revenue,
        daily_btc=btc_per_day,
        status=status,
    )


def traditional_cost_per_kwh(
    fuel_type: str,
    fuel_spec: FuelSpec,
    fuel_rate: float,
    efficiency: float | None = None,
) -> float:
    """Cost of one kWh of delivered heat from a conventional fuel."""
    if fuel_type == "electric_resistance":
        eff = 1.0
    else:
        eff = efficiency if efficiency is not None else fuel_spec.typical_efficiency
    if eff <= 0 or fuel_spec.btu_per_unit <= 0:
        return 0.0
    units_per_kwh = settings.BTU_PER_KWH / (fuel_spec.btu_per_unit * eff)
    return units_per_kwh * fuel_rate


def compute_savings(
    fuel_type: str,
    fuel_spec: FuelSpec,
    fuel_rate: float,
    electricity_rate: float,
    miner: MinerOption,
    network: NetworkSnapshot,
    monthly_heat_kwh: float = settings.DEFAULT_MONTHLY_HEAT_KWH,
    efficiency: float | None = None,
) -> SavingsResult:
    """Savings of hashrate heating against a conventional fuel."""
    traditional = traditional_cost_per_kwh(fuel_type, fuel_spec, fuel_rate, efficiency)
    hashrate = compute_cope(electricity_rate, miner, network).effective_cost_per_kwh

    savings_pct = (
        (traditional - hashrate) / traditional * 100.0 if traditional > 0 else 0.0
    )
    monthly = (traditional - hashrate) * monthly_heat_kwh
    return SavingsResult(
        traditional_cost_per_kwh=traditional,
        hashrate_cost_per_kwh=hashrate,
        savings_pct=savings_pct,
        monthly_savings=monthly,
        annual_savings=monthly * 12,
    )


def format_cope(value: float, cap: float = settings.COPE_DISPLAY_CAP) -> str:
    """Display COPe; unbounded values (or anything >= cap) read as "∞"."""
    if math.isnan(value):
        return "N/A"
    if math.isinf(value) or value >= cap:
        return "∞"
    return f"{value:.2f}"


@dataclass(frozen=True)
class HeatingInputs:
    """Everything the heating metrics depend on, as entered by the user."""

    fuel_type: str
    fuel_spec: FuelSpec
    fuel_rate: float
    electricity_rate: float
    miner: MinerOption
    network: NetworkSnapshot
    fuel_efficiency: float | None = None
    monthly_heat_kwh: float = settings.DEFAULT_MONTHLY_HEAT_KWH


def evaluate_heating(inputs: HeatingInputs) -> dict[str, float]:
    """Savings %, COPe and subsidy % for one set of inputs."""
    cope = compute_cope(inputs.electricity_rate, inputs.miner, inputs.network)
    savings = compute_savings(
        inputs.fuel_type,
        inputs.fuel_spec,
        inputs.fuel_rate,
        inputs.electricity_rate,
        inputs.miner,
        inputs.network,
        monthly_heat_kwh=inputs.monthly_heat_kwh,
        efficiency=inputs.fuel_efficiency,
    )
    return {
        "savings": savings.savings_pct,
        "cope": cope.cope,
        "subsidy": cope.subsidy_pct,
        "annual_savings": savings.annual_savings,
    }
