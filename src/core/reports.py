# src/core/reports.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence

from src.config import settings
from src.config.version import REPORT_AUTHOR
from src.core.geometry import (
    ChartLayout,
    build_dual_axis_geometry,
    build_sweep_geometry,
)
from src.core.heating_metrics import (
    HeatingInputs,
    compute_cope,
    compute_savings,
    evaluate_heating,
    format_cope,
    hashprice_usd_per_th_day,
    hashvalue_sats_per_th_day,
)
from src.core.miner_models import MinerOption, NetworkSnapshot
from src.core.populations import METRICS, build_heating_populations
from src.core.ranking import UserRecord, rank
from src.core.scales import TickMode
from src.core.report_model import (
    ChartGrid,
    ChartSlot,
    Cover,
    DataTable,
    DualAxisChart,
    InputCategory,
    InputSummary,
    KeyMetric,
    Narrative,
    Recommendation,
    ReportDocument,
    ResultItem,
    ResultsSummary,
    RankingTable,
    Section,
    SectionKind,
    build_ranking_table,
    make_page,
    validate_document,
)
from src.core.sensitivity import SweepSeries, heating_sweeps
from src.core.solar_metrics import SolarMiningResult, compare_net_metering
from src.data.region_prices import COUNTRY_US

logger = logging.getLogger(__name__)

HEATING_HEADER = "Hashrate Heating Analysis"
SOLAR_HEADER = "Solar Mining Analysis"

USER_CODE = "YOU"


def _today() -> str:
    return date.today().strftime(settings.DATE_DISPLAY_FMT)


def _usd(value: float, decimals: int = 2) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def sweep_slot(series: SweepSeries, layout: ChartLayout) -> ChartSlot:
    """Chart slot for one sensitivity sweep, geometry included."""
    geometry = build_sweep_geometry(series.xs, series.ys, series.current, layout)
    y_axis = f"{series.y_label} ({series.y_unit})" if series.y_unit else series.y_label
    return ChartSlot(
        title=series.title,
        x_label=f"{series.x_label} ({series.x_unit})",
        y_label=y_axis,
        geometry=geometry,
        caption=series.caption,
    )


def heating_rankings(
    inputs: HeatingInputs,
    country: str = COUNTRY_US,
    location_label: str = "Your Location",
    reference_miner: Optional[MinerOption] = None,
) -> Dict[str, RankingTable]:
    """
    Mini-ranking tables for savings, COPe and subsidy.

    Regions are evaluated with their own default prices on the same miner and
    network as the user; the user's value comes from their actual inputs.
    """
    miner = reference_miner or inputs.miner
    populations = build_heating_populations(
        inputs.fuel_type, miner, inputs.network, country
    )
    user_values = evaluate_heating(replace(inputs, miner=miner))

    tables: Dict[str, RankingTable] = {}
    for key, definition in METRICS.items():
        user = UserRecord(code=USER_CODE, display_name=location_label, value=user_values[key])
        ranking = rank(
            populations[key],
            user,
            direction=definition.direction,
            tolerance=settings.RANKING_TOLERANCE,
        )
        tables[key] = build_ranking_table(ranking, key, definition.label, definition.unit)
    return tables


def _heating_inputs_summary(inputs: HeatingInputs) -> InputSummary:
    miner = inputs.miner
    network = inputs.network
    efficiency = (
        inputs.fuel_efficiency
        if inputs.fuel_efficiency is not None
        else inputs.fuel_spec.typical_efficiency
    )
    return InputSummary(
        categories=(
            InputCategory(
                title="Energy Prices",
                items=(
                    ("Electricity Rate", f"${inputs.electricity_rate:.3f}/kWh"),
                    (
                        f"{inputs.fuel_spec.label} Rate",
                        f"${inputs.fuel_rate:.2f}/{inputs.fuel_spec.unit}",
                    ),
                    (f"{inputs.fuel_spec.label} Efficiency", f"{efficiency:.0%}"),
                ),
            ),
            InputCategory(
                title="Miner",
                items=(
                    ("Model", miner.name),
                    ("Power", f"{miner.power_w:,} W"),
                    ("Hashrate", f"{miner.hashrate_th:,.1f} TH/s"),
                    ("Efficiency", f"{miner.efficiency_j_per_th:.1f} J/TH"),
                ),
            ),
            InputCategory(
                title="Network",
                items=(
                    ("BTC Price", _usd(network.btc_price_usd, 0)),
                    ("Network Hashrate", f"{network.network_hashrate_th / 1e6:,.0f} EH/s"),
                    ("Hashvalue", f"{hashvalue_sats_per_th_day(network):,.1f} sats/TH/day"),
                    ("Hashprice", f"${hashprice_usd_per_th_day(network):.4f}/TH/day"),
                ),
            ),
        )
    )


def _heating_results(inputs: HeatingInputs):
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
    fuel = inputs.fuel_spec.label
    items = (
        ResultItem(
            label=f"Savings vs {fuel}",
            value=f"{savings.savings_pct:.1f}%",
            explanation=f"Cheaper (or dearer) than heating with {fuel.lower()}",
            sub_value=f"{_usd(savings.annual_savings, 0)}/yr",
        ),
        ResultItem(
            label="COPe",
            value=format_cope(cope.cope),
            explanation="Heat value per dollar of net electricity cost",
        ),
        ResultItem(
            label="Mining Subsidy",
            value=f"{cope.subsidy_pct:.1f}%",
            explanation="Share of the electricity bill paid by mining",
        ),
        ResultItem(
            label="Effective Heat Cost",
            value=f"{_usd(cope.effective_cost_per_kwh, 3)}/kWh",
            explanation="Electricity cost minus mining revenue, per kWh of heat",
            sub_value=f"{_usd(cope.effective_cost_per_therm)}/therm",
        ),
        ResultItem(
            label="Break-even Rate",
            value=f"${cope.breakeven_rate:.3f}/kWh",
            explanation="Electricity rate at which heat is free",
        ),
        ResultItem(
            label=f"{fuel} Heat Cost",
            value=f"${savings.traditional_cost_per_kwh:.3f}/kWh",
            explanation="Delivered heat cost of the conventional system",
        ),
    )
    return cope, savings, items


HEATING_EQUATIONS = (
    "Effective Heat Cost = (Daily Elec Cost - Mining Revenue) / Daily kWh",
    "Break-even Rate = Daily Mining Revenue / Daily kWh",
    "Heating Power = Miner Wattage x 3.412 BTU/h per Watt",
    "Savings = 1 - (Effective Heat Cost / Fuel Heat Cost)",
    "COPe = 1 / (1 - R), R = Mining Revenue / Elec Cost",
    "Mining Subsidy = (Mining Revenue / Elec Cost) x 100%",
)


def build_heating_report(
    inputs: HeatingInputs,
    location: str,
    country: str = COUNTRY_US,
    generated_date: Optional[str] = None,
    rankings: Optional[Dict[str, RankingTable]] = None,
    sweeps: Optional[Dict[str, List[SweepSeries]]] = None,
) -> ReportDocument:
    """Five-page hashrate heating report."""
    cope, savings, results = _heating_results(inputs)
    fuel = inputs.fuel_spec.label
    is_profitable = savings.savings_pct > 0
    rankings = rankings or heating_rankings(inputs, country, location_label=location)
    sweeps = sweeps or heating_sweeps(inputs)

    grid_layout = ChartLayout.from_config(settings.LINE_CHART)
    row_layout = ChartLayout.from_config(settings.LINE_CHART_ROW)

    if is_profitable:
        summary = (
            f"Hashrate heating saves {savings.savings_pct:.1f}% "
            f"({_usd(savings.annual_savings, 0)}/yr) compared to {fuel.lower()} "
            f"at your rates, with {cope.subsidy_pct:.0f}% of the electricity "
            "bill paid by mining."
        )
    else:
        summary = (
            f"At your rates hashrate heating costs {abs(savings.savings_pct):.1f}% "
            f"more than {fuel.lower()}. Mining offsets {cope.subsidy_pct:.0f}% "
            "of the electricity bill."
        )

    cover = Section(
        SectionKind.COVER,
        "Hashrate Heating",
        Cover(
            description=(
                "Compares heating with a bitcoin miner against a conventional "
                "system, counting mining revenue as an offset to the electricity "
                "bill."
            ),
            summary=summary,
            is_positive=is_profitable,
            key_metrics=tuple(KeyMetric(r.label, r.value) for r in results[:4]),
        ),
    )

    comparison = "  ".join(
        f"{table.metric_label}: {table.position_label}." for table in rankings.values()
    )
    viability = "economically viable" if is_profitable else "not cost-effective"

    pages = [
        make_page(1, HEATING_HEADER, [cover]),
        make_page(
            2,
            HEATING_HEADER,
            [
                Section(SectionKind.INPUT_SUMMARY, "Input Parameters", _heating_inputs_summary(inputs)),
                Section(SectionKind.RESULTS_SUMMARY, "Results", ResultsSummary(results)),
                Section(SectionKind.NARRATIVE, "Key Equations", Narrative(HEATING_EQUATIONS)),
            ],
        ),
        make_page(
            3,
            HEATING_HEADER,
            [
                Section(
                    SectionKind.NARRATIVE,
                    f"Savings vs {fuel} Sensitivity",
                    Narrative(
                        (
                            f"How savings against {fuel.lower()} change as one input "
                            "varies. Positive values mean hashrate heating is cheaper. "
                            "The highlighted point marks your current inputs.",
                        )
                    ),
                ),
                Section(
                    SectionKind.CHART_GRID,
                    "Savings Sensitivity",
                    ChartGrid(2, tuple(sweep_slot(s, grid_layout) for s in sweeps["savings"])),
                ),
            ],
        ),
        make_page(
            4,
            HEATING_HEADER,
            [
                Section(
                    SectionKind.CHART_GRID,
                    "COPe Sensitivity",
                    ChartGrid(3, tuple(sweep_slot(s, row_layout) for s in sweeps["cope"])),
                ),
                Section(
                    SectionKind.CHART_GRID,
                    "Mining Subsidy Sensitivity",
                    ChartGrid(3, tuple(sweep_slot(s, row_layout) for s in sweeps["subsidy"])),
                ),
            ],
        ),
        make_page(
            5,
            HEATING_HEADER,
            [
                *(
                    Section(SectionKind.RANKING_TABLE, table.metric_label, table)
                    for table in rankings.values()
                ),
                Section(
                    SectionKind.NARRATIVE,
                    "How You Compare",
                    Narrative(
                        (
                            f"{comparison} With {savings.savings_pct:.1f}% savings vs "
                            f"{fuel.lower()}, hashrate heating is {viability} at your location.",
                        )
                    ),
                ),
                Section(
                    SectionKind.RECOMMENDATION,
                    "Recommendation",
                    Recommendation(
                        headline=(
                            "HASHRATE HEATING IS RECOMMENDED"
                            if is_profitable
                            else "HASHRATE HEATING IS NOT RECOMMENDED"
                        ),
                        body=summary,
                        positive=is_profitable,
                    ),
                ),
            ],
        ),
    ]

    doc = ReportDocument(
        title="HASHRATE HEATING",
        subtitle="Energy Comparison Analysis Report",
        generated_date=generated_date or _today(),
        location=location,
        pages=tuple(pages),
        author=REPORT_AUTHOR,
    )
    logger.info("Assembled heating report for %s (%d pages)", location, doc.total_pages)
    return validate_document(doc)


SOLAR_EQUATIONS = (
    "BTC Earnings (sats) = Solar kWh x Hashvalue x (Miner TH/s / Miner Watts) x 1000",
    "USD Revenue = BTC Earnings x BTC Price",
    "Revenue per kWh = Annual USD Revenue / Annual kWh",
)

SOLAR_ASSUMPTIONS = (
    "Network conditions are a point-in-time snapshot entered by the user.",
    "The miner runs only on solar output, as many hours per day as the "
    "average daily production can power.",
    "Revenue is valued at the current BTC price; actual value depends on when "
    "you sell.",
)


def solar_data_table(result: SolarMiningResult) -> DataTable:
    rows = tuple(
        (
            month,
            f"{kwh:,.0f}",
            f"{sats:,}",
            _usd(usd),
            f"{hours:.1f}",
        )
        for month, kwh, sats, usd, hours in zip(
            settings.MONTH_LABELS,
            result.monthly_kwh,
            result.monthly_sats,
            result.monthly_usd,
            result.mining_hours_per_day,
        )
    )
    total = (
        "Total",
        f"{result.annual_kwh:,.0f}",
        f"{sum(result.monthly_sats):,}",
        _usd(result.annual_usd),
        "",
    )
    return DataTable(
        columns=("Month", "Solar kWh", "Sats", "USD", "Hours/day"),
        rows=rows,
        total_row=total,
    )


def solar_dual_axis_chart(
    result: SolarMiningResult,
    layout: Optional[ChartLayout] = None,
    tick_count: int = settings.DUAL_AXIS_TICK_COUNT,
    tick_mode: TickMode = "log",
) -> DualAxisChart:
    """Monthly revenue bars (left axis) with solar production line (right axis)."""
    layout = layout or ChartLayout.from_config(settings.DUAL_AXIS_CHART)
    bars: Sequence[float] = result.monthly_usd
    line: Sequence[float] = result.monthly_kwh
    geometry = build_dual_axis_geometry(
        bars, line, layout, tick_count=tick_count, tick_mode=tick_mode
    )
    return DualAxisChart(
        categories=tuple(settings.MONTH_LABELS[: len(bars)]),
        bar_values=tuple(bars),
        line_values=tuple(line),
        bar_label="Mining Revenue",
        bar_unit="$",
        line_label="Solar Production",
        line_unit="kWh",
        geometry=geometry,
        caption="Bars: monthly mining revenue (left axis). Line: solar production (right axis).",
    )


def build_solar_report(
    result: SolarMiningResult,
    miner: MinerOption,
    network: NetworkSnapshot,
    location: str,
    net_metering_rate: Optional[float] = None,
    generated_date: Optional[str] = None,
) -> ReportDocument:
    """
    Solar mining report: cover, inputs/results, equations/assumptions and the
    monthly dual-axis chart with its data table.

    With a ``net_metering_rate`` the report compares mining against exporting
    the same energy and adds a recommendation.
    """
    comparison = (
        compare_net_metering(result, net_metering_rate)
        if net_metering_rate is not None
        else None
    )
    monthly_avg_sats = sum(result.monthly_sats) / 12

    if comparison is None:
        title = "Solar Mining Potential"
        key_metrics = (
            KeyMetric("Annual BTC", f"{result.annual_btc:.6f} BTC"),
            KeyMetric("Monthly Avg Sats", f"{monthly_avg_sats:,.0f}"),
            KeyMetric("Annual Revenue", _usd(result.annual_usd)),
            KeyMetric("Annual Production", f"{result.annual_kwh:,.0f} kWh"),
        )
        summary = (
            f"Mining with {result.annual_kwh:,.0f} kWh of solar output earns about "
            f"{result.annual_btc:.6f} BTC ({_usd(result.annual_usd)}) per year."
        )
    else:
        title = "Mining vs Net Metering"
        advantage = comparison["advantage"]
        key_metrics = (
            KeyMetric("Mining Revenue", f"{_usd(comparison['mining_revenue'], 0)}/yr"),
            KeyMetric("Net Metering", f"{_usd(comparison['net_metering_value'], 0)}/yr"),
            KeyMetric("Advantage", f"{'+' if advantage >= 0 else '-'}{_usd(abs(advantage), 0)}/yr"),
            KeyMetric("Excess Energy", f"{result.annual_kwh:,.0f} kWh"),
        )
        summary = (
            f"Mining earns {_usd(comparison['mining_revenue'], 0)}/yr against "
            f"{_usd(comparison['net_metering_value'], 0)}/yr from net metering."
        )

    inputs = InputSummary(
        categories=(
            InputCategory(
                title="Solar",
                items=(
                    ("Annual Production", f"{result.annual_kwh:,.0f} kWh"),
                    ("Monthly Average", f"{result.annual_kwh / 12:,.0f} kWh"),
                )
                + (
                    (("Net Metering Rate", f"${net_metering_rate:.3f}/kWh"),)
                    if net_metering_rate is not None
                    else ()
                ),
            ),
            InputCategory(
                title="Miner",
                items=(
                    ("Model", miner.name),
                    ("Power", f"{miner.power_w:,} W"),
                    ("Hashrate", f"{miner.hashrate_th:,.1f} TH/s"),
                ),
            ),
            InputCategory(
                title="Network",
                items=(
                    ("BTC Price", _usd(network.btc_price_usd, 0)),
                    ("Hashvalue", f"{hashvalue_sats_per_th_day(network):,.1f} sats/TH/day"),
                ),
            ),
        )
    )
    results = ResultsSummary(
        items=(
            ResultItem("Annual BTC", f"{result.annual_btc:.6f}", "Bitcoin mined in a year"),
            ResultItem("Annual Revenue", _usd(result.annual_usd), "At the current BTC price"),
            ResultItem(
                "Revenue per kWh",
                f"${result.revenue_per_kwh:.3f}",
                "Effective value of each solar kWh when mined",
            ),
        )
    )

    page2: List[Section] = [
        Section(SectionKind.INPUT_SUMMARY, "Input Parameters", inputs),
        Section(SectionKind.RESULTS_SUMMARY, "Results", results),
    ]
    if comparison is not None:
        recommend = bool(comparison["recommend_mining"])
        if recommend:
            body = (
                f"Mining your excess solar could earn {_usd(comparison['advantage'], 0)} "
                f"more per year than net metering, "
                f"{comparison['advantage_multiplier']:.1f}x the value."
            )
        else:
            body = (
                f"Net metering currently provides {_usd(abs(comparison['advantage']), 0)} "
                "more per year than mining at the current BTC price."
            )
        page2.append(
            Section(
                SectionKind.RECOMMENDATION,
                "Recommendation",
                Recommendation(
                    headline="MINING RECOMMENDED" if recommend else "NET METERING MAY BE BETTER",
                    body=body,
                    positive=recommend,
                ),
            )
        )

    pages = [
        make_page(
            1,
            SOLAR_HEADER,
            [
                Section(
                    SectionKind.COVER,
                    title,
                    Cover(
                        description="Monetizing solar production by mining bitcoin.",
                        summary=summary,
                        is_positive=True,
                        key_metrics=key_metrics,
                    ),
                )
            ],
        ),
        make_page(2, SOLAR_HEADER, page2),
        make_page(
            3,
            SOLAR_HEADER,
            [
                Section(SectionKind.NARRATIVE, "Key Equations", Narrative(SOLAR_EQUATIONS)),
                Section(SectionKind.NARRATIVE, "Assumptions", Narrative(SOLAR_ASSUMPTIONS)),
            ],
        ),
        make_page(
            4,
            SOLAR_HEADER,
            [
                Section(
                    SectionKind.DUAL_AXIS_CHART,
                    "Monthly Mining Revenue & Solar Production",
                    solar_dual_axis_chart(result),
                ),
                Section(SectionKind.DATA_TABLE, "Monthly Breakdown", solar_data_table(result)),
            ],
        ),
    ]

    doc = ReportDocument(
        title=title,
        subtitle="Analysis Report",
        generated_date=generated_date or _today(),
        location=location,
        pages=tuple(pages),
        author=REPORT_AUTHOR,
    )
    logger.info("Assembled solar report for %s (%d pages)", location, doc.total_pages)
    return validate_document(doc)
