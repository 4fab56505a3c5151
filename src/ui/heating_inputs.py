# src/ui/heating_inputs.py
from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from src.config import settings
from src.config.env import APP_ENV, ENV_DEV
from src.core.heating_metrics import HeatingInputs
from src.core.miner_models import MinerOption, NetworkSnapshot
from src.data.miners_prod import DEFAULT_CUSTOM_MINER, MINERS
from src.data.region_prices import (
    COUNTRY_CA,
    COUNTRY_US,
    FUEL_TYPES,
    REGION_TABLES,
    get_default_fuel_rate,
    get_fuel_spec,
    get_region_prices,
)

CUSTOM_MINER_LABEL = "Custom"


@dataclass
class HeatingSelection:
    """What the heating tab needs besides the metric inputs themselves."""

    inputs: HeatingInputs
    country: str
    region_code: str
    location: str


def render_miner_picker(key_prefix: str) -> MinerOption:
    """Preset hashrate heaters plus a custom entry."""
    labels = list(MINERS) + [CUSTOM_MINER_LABEL]
    choice = st.selectbox(
        "Hashrate heater",
        labels,
        index=0,
        key=f"{key_prefix}_miner",
        help="Pick a preset heater or enter your own miner's specs.",
    )
    if choice != CUSTOM_MINER_LABEL:
        miner = MINERS[choice]
        st.caption(
            f"{miner.hashrate_th:,.0f} TH/s · {miner.power_w:,} W · "
            f"{miner.efficiency_j_per_th:.1f} J/TH"
        )
        return miner

    col_hash, col_power = st.columns(2)
    with col_hash:
        hashrate = st.number_input(
            "Hashrate (TH/s)",
            min_value=0.1,
            max_value=2000.0,
            value=DEFAULT_CUSTOM_MINER.hashrate_th,
            step=1.0,
            key=f"{key_prefix}_custom_hashrate",
        )
    with col_power:
        power = st.number_input(
            "Power draw (W)",
            min_value=10,
            max_value=20000,
            value=DEFAULT_CUSTOM_MINER.power_w,
            step=10,
            format="%d",
            key=f"{key_prefix}_custom_power",
        )
    return MinerOption(name=CUSTOM_MINER_LABEL, hashrate_th=float(hashrate), power_w=int(power))


def render_heating_inputs(network: NetworkSnapshot) -> HeatingSelection:
    """Render the inputs of the hashrate heating calculator.

    Region defaults pre-fill the electricity and fuel rates; the user can
    override both.
    """
    st.markdown(
        "Compare heating with a bitcoin miner against your current heating "
        "fuel. Rates default to your region's averages."
    )

    col_country, col_region, col_fuel = st.columns(3)
    with col_country:
        country = st.radio(
            "Country",
            [COUNTRY_US, COUNTRY_CA],
            horizontal=True,
            key="heating_country",
        )
    table = REGION_TABLES[country]
    codes = sorted(table, key=lambda code: table[code].name)
    is_dev = APP_ENV == ENV_DEV
    default_code = settings.DEV_DEFAULT_REGION_CODE if is_dev else codes[0]
    with col_region:
        region_code = st.selectbox(
            "State / province",
            codes,
            index=codes.index(default_code) if default_code in codes else 0,
            format_func=lambda code: table[code].name,
            key=f"heating_region_{country}",
        )
    with col_fuel:
        fuel_type = st.selectbox(
            "Compare against",
            FUEL_TYPES,
            format_func=lambda fuel: get_fuel_spec(fuel, country).label,
            key="heating_fuel",
        )

    prices = get_region_prices(region_code, country)
    fuel_spec = get_fuel_spec(fuel_type, country)

    col_elec, col_fuel_rate = st.columns(2)
    with col_elec:
        electricity_rate = st.number_input(
            "Electricity rate ($ per kWh)",
            min_value=0.0,
            max_value=2.0,
            value=float(prices.electricity),
            step=0.001,
            format="%.3f",
            key=f"heating_elec_{country}_{region_code}",
        )
    with col_fuel_rate:
        fuel_rate = st.number_input(
            f"{fuel_spec.label} rate ($ per {fuel_spec.unit})",
            min_value=0.0,
            max_value=100.0,
            value=float(get_default_fuel_rate(fuel_type, prices)),
            step=0.01,
            format="%.3f",
            key=f"heating_fuel_rate_{country}_{region_code}_{fuel_type}",
        )

    miner = render_miner_picker("heating")

    with st.expander("Heating system details...", expanded=False):
        efficiency = st.slider(
            f"{fuel_spec.label} efficiency",
            min_value=0.5,
            max_value=5.0 if fuel_type == "heat_pump" else 1.0,
            value=float(fuel_spec.typical_efficiency),
            step=0.01,
            help="AFUE for furnaces and boilers, COP for heat pumps.",
            key=f"heating_efficiency_{fuel_type}",
        )
        monthly_heat_kwh = st.number_input(
            "Monthly heat demand (kWh)",
            min_value=0.0,
            value=settings.DEFAULT_MONTHLY_HEAT_KWH,
            step=50.0,
            key="heating_monthly_heat",
        )

    inputs = HeatingInputs(
        fuel_type=fuel_type,
        fuel_spec=fuel_spec,
        fuel_rate=fuel_rate,
        electricity_rate=electricity_rate,
        miner=miner,
        network=network,
        fuel_efficiency=efficiency,
        monthly_heat_kwh=monthly_heat_kwh,
    )
    return HeatingSelection(
        inputs=inputs,
        country=country,
        region_code=region_code,
        location=table[region_code].name,
    )
