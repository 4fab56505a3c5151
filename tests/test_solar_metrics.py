# tests/test_solar_metrics.py
import pytest

from src.config import settings
from src.core.solar_metrics import (
    compare_net_metering,
    compute_solar_mining,
    distribute_annual_kwh,
)


def _half_day_production():
    # 12 kWh/day runs a 1 kW miner for 12 hours a day.
    return [12.0 * days for days in settings.DAYS_PER_MONTH]


def test_half_day_mining(network, miner):
    result = compute_solar_mining(_half_day_production(), miner, network)

    assert result.mining_hours_per_day == pytest.approx([12.0] * 12)
    assert result.annual_btc == pytest.approx(0.5e-5 * 365)
    assert result.annual_usd == pytest.approx(0.5 * 365)
    assert result.annual_kwh == pytest.approx(12 * 365)
    assert result.revenue_per_kwh == pytest.approx(0.5 / 12)
    assert result.monthly_sats[0] == round(0.5e-5 * 31 * 1e8)


def test_run_hours_capped_at_full_day(network, miner):
    production = [100.0 * days for days in settings.DAYS_PER_MONTH]
    result = compute_solar_mining(production, miner, network)
    assert max(result.mining_hours_per_day) == 24.0
    assert result.annual_btc == pytest.approx(1e-5 * 365)


def test_negative_production_treated_as_zero(network, miner):
    production = [-5.0] + [0.0] * 11
    result = compute_solar_mining(production, miner, network)
    assert result.annual_btc == 0.0
    assert result.revenue_per_kwh == 0.0


def test_requires_twelve_months(network, miner):
    with pytest.raises(ValueError):
        compute_solar_mining([100.0] * 11, miner, network)


def test_distribute_annual_kwh_sums_to_total():
    months = distribute_annual_kwh(6000.0)
    assert len(months) == 12
    assert sum(months) == pytest.approx(6000.0)
    # Summer outproduces winter.
    assert months[5] > months[11]


def test_distribute_flat_when_profile_empty():
    assert distribute_annual_kwh(1200.0, [0.0] * 12) == [100.0] * 12


def test_net_metering_comparison(network, miner):
    result = compute_solar_mining(_half_day_production(), miner, network)
    comparison = compare_net_metering(result, 0.02)

    assert comparison["net_metering_value"] == pytest.approx(12 * 365 * 0.02)
    assert comparison["advantage"] == pytest.approx(0.5 * 365 - 12 * 365 * 0.02)
    assert comparison["advantage_multiplier"] == pytest.approx((0.5 / 12) / 0.02)
    assert comparison["recommend_mining"] is True

    expensive = compare_net_metering(result, 0.10)
    assert expensive["recommend_mining"] is False


def test_net_metering_zero_rate(network, miner):
    result = compute_solar_mining(_half_day_production(), miner, network)
    comparison = compare_net_metering(result, 0.0)
    assert comparison["advantage_multiplier"] == 0.0
    assert comparison["recommend_mining"] is True
