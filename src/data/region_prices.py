# src/data/region_prices.py
"""
Regional energy prices for the reference populations.

US figures are EIA state averages (late 2024 / early 2025) in USD; Canadian
figures are provincial averages in CAD. These are approximate: users should
override with their actual rates for accurate calculations.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class FuelPrices:
    electricity: float  # per kWh
    natural_gas: float  # per therm (US) / per GJ (CA)
    propane: float  # per gallon (US) / per litre (CA)
    heating_oil: float  # per gallon (US) / per litre (CA)


@dataclass(frozen=True)
class RegionInfo:
    code: str
    name: str
    prices: FuelPrices


@dataclass(frozen=True)
class FuelSpec:
    label: str
    unit: str
    btu_per_unit: float
    typical_efficiency: float  # AFUE for combustion, COP for heat pumps


COUNTRY_US = "US"
COUNTRY_CA = "CA"

FUEL_TYPES = (
    "natural_gas",
    "propane",
    "heating_oil",
    "electric_resistance",
    "heat_pump",
)

_US_FUEL_SPECS = {
    "natural_gas": FuelSpec("Natural Gas", "therm", 100_000, 0.92),
    "propane": FuelSpec("Propane", "gallon", 91_500, 0.90),
    "heating_oil": FuelSpec("Heating Oil", "gallon", 138_500, 0.85),
    "electric_resistance": FuelSpec("Electric Resistance", "kWh", 3412, 1.0),
    "heat_pump": FuelSpec("Heat Pump", "kWh", 3412, 3.0),
}

_CA_FUEL_SPECS = {
    "natural_gas": FuelSpec("Natural Gas", "GJ", 947_817, 0.92),
    "propane": FuelSpec("Propane", "litre", 24_170, 0.90),
    "heating_oil": FuelSpec("Heating Oil", "litre", 36_590, 0.85),
    "electric_resistance": FuelSpec("Electric Resistance", "kWh", 3412, 1.0),
    "heat_pump": FuelSpec("Heat Pump", "kWh", 3412, 3.0),
}

FUEL_SPECS: Mapping[str, Mapping[str, FuelSpec]] = MappingProxyType(
    {
        COUNTRY_US: MappingProxyType(_US_FUEL_SPECS),
        COUNTRY_CA: MappingProxyType(_CA_FUEL_SPECS),
    }
)

NATIONAL_AVERAGE: Mapping[str, FuelPrices] = MappingProxyType(
    {
        COUNTRY_US: FuelPrices(0.16, 1.20, 2.75, 3.80),
        COUNTRY_CA: FuelPrices(0.14, 7.50, 1.10, 1.60),
    }
)


def _table(rows) -> Mapping[str, RegionInfo]:
    return MappingProxyType(
        {
            code: RegionInfo(code=code, name=name, prices=FuelPrices(*prices))
            for code, name, prices in rows
        }
    )


STATE_FUEL_PRICES: Mapping[str, RegionInfo] = _table(
    [
        ("AL", "Alabama", (0.14, 1.15, 2.60, 3.70)),
        ("AK", "Alaska", (0.24, 1.50, 3.50, 4.20)),
        ("AZ", "Arizona", (0.14, 1.30, 2.80, 3.90)),
        ("AR", "Arkansas", (0.12, 1.10, 2.50, 3.60)),
        ("CA", "California", (0.27, 1.80, 3.20, 4.50)),
        ("CO", "Colorado", (0.14, 1.00, 2.60, 3.80)),
        ("CT", "Connecticut", (0.26, 1.60, 3.30, 4.00)),
        ("DE", "Delaware", (0.14, 1.30, 2.90, 3.85)),
        ("FL", "Florida", (0.15, 1.40, 2.80, 3.90)),
        ("GA", "Georgia", (0.13, 1.20, 2.70, 3.75)),
        ("HI", "Hawaii", (0.43, 4.50, 4.50, 5.00)),
        ("ID", "Idaho", (0.11, 1.10, 2.70, 3.80)),
        ("IL", "Illinois", (0.15, 1.00, 2.50, 3.70)),
        ("IN", "Indiana", (0.14, 1.00, 2.45, 3.65)),
        ("IA", "Iowa", (0.13, 1.05, 2.30, 3.60)),
        ("KS", "Kansas", (0.14, 1.10, 2.40, 3.65)),
        ("KY", "Kentucky", (0.12, 1.10, 2.50, 3.60)),
        ("LA", "Louisiana", (0.12, 1.00, 2.40, 3.50)),
        ("ME", "Maine", (0.20, 1.70, 3.20, 3.90)),
        ("MD", "Maryland", (0.15, 1.30, 2.90, 3.85)),
        ("MA", "Massachusetts", (0.26, 1.70, 3.40, 4.10)),
        ("MI", "Michigan", (0.18, 1.00, 2.50, 3.70)),
        ("MN", "Minnesota", (0.14, 1.00, 2.30, 3.65)),
        ("MS", "Mississippi", (0.12, 1.10, 2.50, 3.55)),
        ("MO", "Missouri", (0.13, 1.05, 2.40, 3.60)),
        ("MT", "Montana", (0.12, 1.00, 2.60, 3.75)),
        ("NE", "Nebraska", (0.12, 1.00, 2.35, 3.60)),
        ("NV", "Nevada", (0.14, 1.30, 2.80, 3.90)),
        ("NH", "New Hampshire", (0.22, 1.70, 3.30, 4.00)),
        ("NJ", "New Jersey", (0.18, 1.20, 3.00, 3.95)),
        ("NM", "New Mexico", (0.14, 1.00, 2.60, 3.80)),
        ("NY", "New York", (0.22, 1.50, 3.20, 4.10)),
        ("NC", "North Carolina", (0.13, 1.20, 2.70, 3.70)),
        ("ND", "North Dakota", (0.11, 0.90, 2.20, 3.55)),
        ("OH", "Ohio", (0.14, 1.00, 2.40, 3.65)),
        ("OK", "Oklahoma", (0.12, 1.00, 2.35, 3.55)),
        ("OR", "Oregon", (0.12, 1.20, 2.80, 3.90)),
        ("PA", "Pennsylvania", (0.16, 1.20, 2.90, 3.90)),
        ("RI", "Rhode Island", (0.24, 1.70, 3.40, 4.05)),
        ("SC", "South Carolina", (0.13, 1.20, 2.65, 3.65)),
        ("SD", "South Dakota", (0.12, 1.00, 2.30, 3.60)),
        ("TN", "Tennessee", (0.12, 1.10, 2.55, 3.60)),
        ("TX", "Texas", (0.13, 1.00, 2.40, 3.60)),
        ("UT", "Utah", (0.11, 1.00, 2.60, 3.80)),
        ("VT", "Vermont", (0.20, 1.70, 3.25, 4.00)),
        ("VA", "Virginia", (0.13, 1.20, 2.75, 3.75)),
        ("WA", "Washington", (0.11, 1.30, 2.90, 4.00)),
        ("WV", "West Virginia", (0.12, 1.10, 2.60, 3.70)),
        ("WI", "Wisconsin", (0.15, 1.00, 2.35, 3.65)),
        ("WY", "Wyoming", (0.11, 0.95, 2.50, 3.70)),
    ]
)

PROVINCE_FUEL_PRICES: Mapping[str, RegionInfo] = _table(
    [
        ("AB", "Alberta", (0.17, 5.50, 0.95, 1.55)),
        ("BC", "British Columbia", (0.11, 11.50, 1.05, 1.70)),
        ("MB", "Manitoba", (0.10, 7.00, 1.00, 1.60)),
        ("NB", "New Brunswick", (0.14, 16.00, 1.15, 1.55)),
        ("NL", "Newfoundland and Labrador", (0.13, 18.00, 1.25, 1.60)),
        ("NS", "Nova Scotia", (0.19, 17.50, 1.20, 1.65)),
        ("NT", "Northwest Territories", (0.38, 20.00, 1.60, 1.85)),
        ("NU", "Nunavut", (0.45, 22.00, 1.90, 2.10)),
        ("ON", "Ontario", (0.13, 7.50, 1.05, 1.65)),
        ("PE", "Prince Edward Island", (0.18, 18.00, 1.20, 1.60)),
        ("QC", "Quebec", (0.08, 12.00, 1.10, 1.70)),
        ("SK", "Saskatchewan", (0.18, 6.00, 0.95, 1.55)),
        ("YT", "Yukon", (0.20, 19.00, 1.45, 1.75)),
    ]
)

REGION_TABLES: Mapping[str, Mapping[str, RegionInfo]] = MappingProxyType(
    {COUNTRY_US: STATE_FUEL_PRICES, COUNTRY_CA: PROVINCE_FUEL_PRICES}
)


def get_fuel_spec(fuel_type: str, country: str = COUNTRY_US) -> FuelSpec:
    specs = FUEL_SPECS.get(country, FUEL_SPECS[COUNTRY_US])
    if fuel_type not in specs:
        raise ValueError(f"Unknown fuel type: {fuel_type}")
    return specs[fuel_type]


def get_region_prices(code: str | None, country: str = COUNTRY_US) -> FuelPrices:
    """Prices for a region, falling back to the national average."""
    table = REGION_TABLES.get(country, STATE_FUEL_PRICES)
    if code and code in table:
        return table[code].prices
    return NATIONAL_AVERAGE.get(country, NATIONAL_AVERAGE[COUNTRY_US])


def get_default_fuel_rate(fuel_type: str, prices: FuelPrices) -> float:
    """Default price per fuel unit for a fuel type from a region's prices."""
    if fuel_type == "natural_gas":
        return prices.natural_gas
    if fuel_type == "propane":
        return prices.propane
    if fuel_type == "heating_oil":
        return prices.heating_oil
    if fuel_type in ("electric_resistance", "heat_pump"):
        return prices.electricity
    return 0.0
