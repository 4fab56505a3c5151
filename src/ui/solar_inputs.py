# src/ui/solar_inputs.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import pandas as pd
import streamlit as st

from src.config import settings
from src.config.env import APP_ENV, ENV_DEV
from src.core.miner_models import MinerOption
from src.core.solar_metrics import distribute_annual_kwh
from src.ui.heating_inputs import render_miner_picker

INPUT_ANNUAL = "Annual total"
INPUT_MONTHLY = "Month by month"


@dataclass
class SolarInputs:
    monthly_kwh: List[float]
    miner: MinerOption
    location: str
    net_metering_rate: Optional[float]


def render_solar_inputs() -> SolarInputs:
    """Render the solar monetization inputs.

    Production is entered either as an annual figure (spread over the year
    with a typical seasonal profile) or month by month.
    """
    st.markdown(
        "Estimate what your solar production would earn if it powered a "
        "bitcoin miner instead of being exported to the grid."
    )

    is_dev = APP_ENV == ENV_DEV
    default_monthly = settings.DEV_DEFAULT_MONTHLY_SOLAR_KWH if is_dev else 500.0

    location = st.text_input("Location (for the report)", value="My site", key="solar_location")
    method = st.radio(
        "Solar production input",
        [INPUT_ANNUAL, INPUT_MONTHLY],
        horizontal=True,
        key="solar_input_method",
    )

    if method == INPUT_ANNUAL:
        annual_kwh = st.number_input(
            "Annual production (kWh)",
            min_value=0.0,
            value=default_monthly * 12,
            step=100.0,
            key="solar_annual_kwh",
        )
        monthly_kwh = distribute_annual_kwh(annual_kwh)
    else:
        editor_df = pd.DataFrame(
            {
                "Month": settings.MONTH_LABELS,
                "kWh": distribute_annual_kwh(default_monthly * 12),
            }
        )
        edited = st.data_editor(
            editor_df,
            hide_index=True,
            disabled=["Month"],
            key="solar_monthly_editor",
        )
        monthly_kwh = [max(0.0, float(v)) for v in edited["kWh"].fillna(0.0)]

    miner = render_miner_picker("solar")

    compare = st.toggle(
        "Compare with net metering", value=False, key="solar_compare_toggle"
    )
    net_metering_rate = None
    if compare:
        net_metering_rate = st.number_input(
            "Net metering credit ($ per kWh)",
            min_value=0.0,
            max_value=2.0,
            value=0.10,
            step=0.005,
            format="%.3f",
            key="solar_net_metering_rate",
        )

    return SolarInputs(
        monthly_kwh=monthly_kwh,
        miner=miner,
        location=location or "My site",
        net_metering_rate=net_metering_rate,
    )
