# tests/conftest.py
import pytest

from src.core.heating_metrics import HeatingInputs
from src.core.miner_models import MinerOption, NetworkSnapshot
from src.data.region_prices import get_fuel_spec


@pytest.fixture
def network() -> NetworkSnapshot:
    # 450 EH/s, no fees: exactly 100 sats/TH/day, i.e. $0.10/TH/day at $100k.
    return NetworkSnapshot(
        btc_price_usd=100_000.0,
        network_hashrate_th=450e6,
        block_subsidy_btc=3.125,
        fee_pct=0.0,
    )


@pytest.fixture
def miner() -> MinerOption:
    # 10 TH/s at 1 kW earns 1e-5 BTC ($1) per day on the network above.
    return MinerOption(name="TestHeater", hashrate_th=10.0, power_w=1000)


@pytest.fixture
def heating_inputs(network, miner) -> HeatingInputs:
    return HeatingInputs(
        fuel_type="propane",
        fuel_spec=get_fuel_spec("propane"),
        fuel_rate=2.50,
        electricity_rate=0.10,
        miner=miner,
        network=network,
    )
