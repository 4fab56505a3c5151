# src/ui/layout.py
from __future__ import annotations

import logging
from datetime import date

import pandas as pd
import streamlit as st

from src.config import settings
from src.config.version import APP_NAME, APP_VERSION, REPORT_AUTHOR
from src.core.geometry import ChartLayout
from src.core.heating_metrics import (
    compute_cope,
    compute_savings,
    format_cope,
    hashprice_usd_per_th_day,
    hashvalue_sats_per_th_day,
)
from src.core.miner_models import NetworkSnapshot
from src.core.report_model import ReportStructureError
from src.core.reports import (
    build_heating_report,
    build_solar_report,
    heating_rankings,
    solar_data_table,
    solar_dual_axis_chart,
)
from src.core.sensitivity import heating_sweeps
from src.core.solar_metrics import compare_net_metering, compute_solar_mining
from src.ui.charts import render_dual_axis_chart, render_ranking_panel, render_sweep_grid
from src.ui.heating_inputs import render_heating_inputs
from src.ui.pdf_export import build_pdf_report
from src.ui.solar_inputs import render_solar_inputs

logger = logging.getLogger(__name__)


@st.cache_data(ttl=settings.POPULATION_CACHE_TTL_S, show_spinner=False)
def _cached_rankings(inputs, country: str):
    return heating_rankings(inputs, country, location_label="You")


def render_network_inputs() -> NetworkSnapshot:
    """Sidebar inputs for the bitcoin network snapshot."""
    with st.sidebar.expander("BTC network data in use", expanded=True):
        btc_price = st.number_input(
            "BTC price (USD)",
            min_value=1.0,
            value=settings.DEFAULT_BTC_PRICE_USD,
            step=500.0,
            format="%.0f",
            help="Price of one bitcoin. Drives all mining revenue figures.",
        )
        hashrate_eh = st.number_input(
            "Network hashrate (EH/s)",
            min_value=1.0,
            value=settings.DEFAULT_NETWORK_HASHRATE_EH,
            step=10.0,
            format="%.0f",
            help="Total hashrate securing the network.",
        )
        fee_pct = st.number_input(
            "Transaction fees (% of subsidy)",
            min_value=0.0,
            max_value=100.0,
            value=settings.DEFAULT_FEE_PCT,
            step=0.5,
        )
        network = NetworkSnapshot(
            btc_price_usd=btc_price,
            network_hashrate_th=hashrate_eh * 1e6,
            block_subsidy_btc=settings.BLOCK_SUBSIDY_BTC,
            fee_pct=fee_pct,
        )
        st.metric("Hashvalue", f"{hashvalue_sats_per_th_day(network):,.1f} sats/TH/day")
        st.metric("Hashprice", f"${hashprice_usd_per_th_day(network):.4f}/TH/day")
        st.caption("Entered manually; these values drive every calculation.")
    return network


def _render_pdf_download(build, file_name: str, key: str) -> None:
    """Build a report on demand and offer it as a download."""
    if not st.button("Prepare PDF report", key=f"{key}_prepare"):
        return
    try:
        pdf_bytes = build_pdf_report(build())
    except (ReportStructureError, ValueError) as exc:
        logger.exception("PDF export failed")
        st.error(f"Could not build the PDF report: {exc}")
        return
    st.download_button(
        "Download PDF",
        data=pdf_bytes,
        file_name=file_name,
        mime="application/pdf",
        key=f"{key}_download",
    )


def render_heating_tab(network: NetworkSnapshot) -> None:
    st.markdown("## 1. Your heating setup")
    selection = render_heating_inputs(network)
    inputs = selection.inputs

    cope = compute_cope(inputs.electricity_rate, inputs.miner, network)
    savings = compute_savings(
        inputs.fuel_type,
        inputs.fuel_spec,
        inputs.fuel_rate,
        inputs.electricity_rate,
        inputs.miner,
        network,
        monthly_heat_kwh=inputs.monthly_heat_kwh,
        efficiency=inputs.fuel_efficiency,
    )

    st.markdown("## 2. Results")
    col_savings, col_cope, col_subsidy, col_cost = st.columns(4)
    col_savings.metric(
        f"Savings vs {inputs.fuel_spec.label}",
        f"{savings.savings_pct:.1f}%",
        f"${savings.annual_savings:,.0f}/yr",
    )
    col_cope.metric("COPe", format_cope(cope.cope))
    col_subsidy.metric("Mining subsidy", f"{cope.subsidy_pct:.1f}%")
    col_cost.metric("Effective heat cost", f"${cope.effective_cost_per_kwh:.3f}/kWh")
    if cope.status == "profitable":
        st.success("Mining revenue covers the whole electricity bill: heat is free.")
    elif savings.savings_pct < 0:
        st.warning(
            f"At these rates hashrate heating costs more than {inputs.fuel_spec.label.lower()}."
        )

    st.markdown("## 3. How you compare")
    rankings = _cached_rankings(inputs, selection.country)
    render_ranking_panel(list(rankings.values()))

    st.markdown("## 4. Sensitivity")
    sweeps = heating_sweeps(inputs)
    st.markdown(f"**Savings vs {inputs.fuel_spec.label}**")
    render_sweep_grid(sweeps["savings"], columns=2)
    st.markdown("**COPe**")
    render_sweep_grid(sweeps["cope"], columns=3, layout=ChartLayout.from_config(settings.LINE_CHART_ROW))
    st.markdown("**Mining subsidy**")
    render_sweep_grid(sweeps["subsidy"], columns=3, layout=ChartLayout.from_config(settings.LINE_CHART_ROW))

    st.markdown("## 5. Report")
    _render_pdf_download(
        lambda: build_heating_report(
            inputs,
            selection.location,
            country=selection.country,
            rankings=rankings,
            sweeps=sweeps,
        ),
        file_name=f"hashrate-heating-{selection.region_code.lower()}-{date.today():%Y%m%d}.pdf",
        key="heating_pdf",
    )


def render_solar_tab(network: NetworkSnapshot) -> None:
    st.markdown("## 1. Your solar production")
    solar = render_solar_inputs()
    result = compute_solar_mining(solar.monthly_kwh, solar.miner, network)

    st.markdown("## 2. Results")
    col_btc, col_usd, col_rate = st.columns(3)
    col_btc.metric("Annual BTC", f"{result.annual_btc:.6f}")
    col_usd.metric("Annual revenue", f"${result.annual_usd:,.2f}")
    col_rate.metric("Revenue per kWh", f"${result.revenue_per_kwh:.3f}")

    if solar.net_metering_rate is not None:
        comparison = compare_net_metering(result, solar.net_metering_rate)
        if comparison["recommend_mining"]:
            st.success(
                f"Mining earns ${comparison['advantage']:,.0f}/yr more than net metering "
                f"({comparison['advantage_multiplier']:.1f}x)."
            )
        else:
            st.info(
                f"Net metering earns ${abs(comparison['advantage']):,.0f}/yr more than "
                "mining at the current BTC price."
            )

    st.markdown("## 3. Month by month")
    if result.annual_kwh <= 0:
        st.warning("Enter some solar production to see the monthly chart.")
    chart = solar_dual_axis_chart(
        result,
        layout=ChartLayout.from_config(settings.INTERACTIVE_DUAL_AXIS_CHART),
        tick_count=settings.INTERACTIVE_DUAL_AXIS_TICK_COUNT,
        tick_mode="step",
    )
    selected = render_dual_axis_chart(chart, key="solar_dual_axis")
    if selected is not None:
        month = chart.categories[selected]
        st.metric(
            f"{month}: mining revenue",
            f"${result.monthly_usd[selected]:,.2f}",
            f"{result.monthly_sats[selected]:,} sats · {result.monthly_kwh[selected]:,.0f} kWh",
        )

    table = solar_data_table(result)
    rows = list(table.rows) + ([table.total_row] if table.total_row else [])
    st.dataframe(pd.DataFrame(rows, columns=list(table.columns)), hide_index=True, width="stretch")

    st.markdown("## 4. Report")
    _render_pdf_download(
        lambda: build_solar_report(
            result,
            solar.miner,
            network,
            solar.location,
            net_metering_rate=solar.net_metering_rate,
        ),
        file_name=f"solar-mining-{date.today():%Y%m%d}.pdf",
        key="solar_pdf",
    )


def render_footer() -> None:
    st.markdown("---")
    footer_html = (
        f"<p style='text-align: center;'>"
        f"{APP_NAME} · Version {APP_VERSION} · {REPORT_AUTHOR}"
        f"</p>"
    )
    st.markdown(footer_html, unsafe_allow_html=True)


def render_dashboard() -> None:
    st.title(APP_NAME)
    st.caption("Bitcoin mining economics for heating and solar, with exportable reports.")

    network = render_network_inputs()

    tab_heating, tab_solar = st.tabs(["🔥 Hashrate heating", "☀️ Solar monetization"])
    with tab_heating:
        render_heating_tab(network)
    with tab_solar:
        render_solar_tab(network)

    render_footer()
