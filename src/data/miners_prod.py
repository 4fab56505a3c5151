# src/data/miners_prod.py
from __future__ import annotations

from typing import Dict

from src.core.miner_models import MinerOption

# Hashrate heater presets offered in the calculators.
MINERS: Dict[str, MinerOption] = {
    "Heatbit Trio (10 TH/s)": MinerOption(
        name="Heatbit Trio",
        hashrate_th=10.0,
        power_w=400,
        supplier="Heatbit",
    ),
    "Avalon Mini 3 (40 TH/s)": MinerOption(
        name="Avalon Mini 3",
        hashrate_th=40.0,
        power_w=850,
        supplier="Canaan",
    ),
    "Avalon Q (90 TH/s)": MinerOption(
        name="Avalon Q",
        hashrate_th=90.0,
        power_w=1700,
        supplier="Canaan",
    ),
    "Heat Core HS05 (228 TH/s)": MinerOption(
        name="Heat Core HS05",
        hashrate_th=228.0,
        power_w=5000,
        supplier="Exergy",
    ),
}

# Reference miner used to compute the regional populations, so every region
# is compared on the same hardware.
DEFAULT_CUSTOM_MINER = MinerOption(name="Custom", hashrate_th=50.0, power_w=1000)
