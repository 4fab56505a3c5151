# src/core/miner_models.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MinerOption:
    """
    Represents a single hashrate heater / ASIC miner option.

    Kept in core models so both UI (selection) and core calculations
    (heating metrics, solar revenue) can depend on the same schema.
    """

    name: str
    hashrate_th: float  # terahash per second
    power_w: int  # watts
    supplier: str | None = None

    @property
    def power_kw(self) -> float:
        return self.power_w / 1000.0

    @property
    def efficiency_j_per_th(self) -> float:
        return self.power_w / self.hashrate_th if self.hashrate_th > 0 else 0.0


@dataclass(frozen=True)
class NetworkSnapshot:
    """Point-in-time bitcoin network conditions entered by the user."""

    btc_price_usd: float
    network_hashrate_th: float  # TH/s
    block_subsidy_btc: float
    fee_pct: float = 0.0  # fees as % of the block subsidy

    @property
    def block_reward_btc(self) -> float:
        return self.block_subsidy_btc * (1.0 + max(0.0, self.fee_pct) / 100.0)
