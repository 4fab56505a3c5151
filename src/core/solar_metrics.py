# src/core/solar_metrics.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from src.config import settings
from src.core.heating_metrics import daily_btc
from src.core.miner_models import MinerOption, NetworkSnapshot


@dataclass
class SolarMiningResult:
    monthly_kwh: List[float]
    monthly_btc: List[float]
    monthly_usd: List[float]
    mining_hours_per_day: List[float]

    @property
    def annual_kwh(self) -> float:
        return sum(self.monthly_kwh)

    @property
    def annual_btc(self) -> float:
        return sum(self.monthly_btc)

    @property
    def annual_usd(self) -> float:
        return sum(self.monthly_usd)

    @property
    def monthly_sats(self) -> List[int]:
        return [round(btc * settings.SATS_PER_BTC) for btc in self.monthly_btc]

    @property
    def revenue_per_kwh(self) -> float:
        return self.annual_usd / self.annual_kwh if self.annual_kwh > 0 else 0.0


def distribute_annual_kwh(
    annual_kwh: float,
    monthly_share: Sequence[float] = settings.DEFAULT_SOLAR_MONTHLY_SHARE,
) -> List[float]:
    """Split an annual production figure across months by a seasonal profile."""
    total = sum(monthly_share)
    if total <= 0:
        return [annual_kwh / 12.0] * 12
    return [annual_kwh * share / total for share in monthly_share]


def compute_solar_mining(
    monthly_kwh: Sequence[float],
    miner: MinerOption,
    network: NetworkSnapshot,
) -> SolarMiningResult:
    """
    Mine with solar output only: each month the miner runs for as many hours
    per day as the average daily solar energy can power (capped at 24).
    """
    if len(monthly_kwh) != 12:
        raise ValueError("Expected 12 monthly production values")

    full_day_btc = daily_btc(miner.hashrate_th, network)
    btc: List[float] = []
    usd: List[float] = []
    hours: List[float] = []
    for kwh, days in zip(monthly_kwh, settings.DAYS_PER_MONTH):
        daily_kwh = max(0.0, kwh) / days
        run_hours = min(daily_kwh / miner.power_kw, 24.0) if miner.power_kw > 0 else 0.0
        month_btc = full_day_btc * (run_hours / 24.0) * days
        hours.append(run_hours)
        btc.append(month_btc)
        usd.append(month_btc * network.btc_price_usd)

    return SolarMiningResult(
        monthly_kwh=[float(k) for k in monthly_kwh],
        monthly_btc=btc,
        monthly_usd=usd,
        mining_hours_per_day=hours,
    )


def compare_net_metering(
    result: SolarMiningResult, net_metering_rate: float
) -> dict[str, float | bool]:
    """Mining revenue against exporting the same energy at a credit rate."""
    net_metering_value = result.annual_kwh * max(0.0, net_metering_rate)
    advantage = result.annual_usd - net_metering_value
    multiplier = (
        result.annual_usd / net_metering_value if net_metering_value > 0 else 0.0
    )
    return {
        "net_metering_value": net_metering_value,
        "mining_revenue": result.annual_usd,
        "advantage": advantage,
        "advantage_multiplier": multiplier,
        "recommend_mining": advantage > 0,
    }
