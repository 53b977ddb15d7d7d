"""
Progression State.

Responsibility boundaries:
- Global economy (spendable money, lifetime accumulation) and prestige rank.
- Permanent multipliers that survive prestige resets.

Mutation constraints:
- One instance per run, shared by reference with every system.
- Multipliers are monotonically non-decreasing.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from config.config import SimulationConfig
from utils.cidr_utils import CIDRTier
from utils.logger import AuditLogger


@dataclass
class PermanentMultipliers:
    bandwidth_multiplier: float = 1.0
    income_multiplier: float = 1.0
    vision_multiplier: float = 1.0


@dataclass
class PrestigeRecord:
    total_prestiges: int = 0
    multipliers: PermanentMultipliers = field(default_factory=PermanentMultipliers)

    def copy(self) -> "PrestigeRecord":
        return PrestigeRecord(self.total_prestiges, replace(self.multipliers))


class ProgressionState:
    """
    Money, current CIDR tier and prestige bookkeeping.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, logger: Optional[AuditLogger] = None) -> None:
        self._config = config or SimulationConfig()
        self._logger = logger
        self._money = 0.0
        self._current_tier = self._config.starting_tier
        self._total_accumulated = 0.0
        self._prestige = PrestigeRecord()

    # Money

    def get_money(self) -> float:
        return self._money

    def add_money(self, amount: float) -> None:
        """Credit `amount` scaled by the permanent income multiplier."""
        self._money += amount * self._prestige.multipliers.income_multiplier

    def spend_money(self, amount: float) -> bool:
        if self._money >= amount:
            self._money -= amount
            return True
        return False

    # Lifetime bandwidth

    def get_total_accumulated(self) -> float:
        return self._total_accumulated

    def add_bandwidth(self, amount: float) -> None:
        self._total_accumulated += amount

    def remove_bandwidth(self, amount: float) -> None:
        self._total_accumulated = max(0.0, self._total_accumulated - amount)

    # Tier

    def get_current_tier(self) -> CIDRTier:
        return self._current_tier

    def set_tier(self, tier: CIDRTier) -> None:
        self._current_tier = tier

    def get_vision_radius(self) -> float:
        """Lower prefix length (larger subnet) sees further."""
        base_radius = 200.0
        tier_bonus = (32 - int(self._current_tier)) * 50.0
        return (base_radius + tier_bonus) * self._prestige.multipliers.vision_multiplier

    # Prestige

    def get_prestige_data(self) -> PrestigeRecord:
        """Return a detached copy; callers cannot mutate the multipliers."""
        return self._prestige.copy()

    @property
    def income_multiplier(self) -> float:
        return self._prestige.multipliers.income_multiplier

    def _prestige_gains(self) -> Dict[str, float]:
        bandwidth_bonus = math.sqrt(self._total_accumulated / 1000.0)
        prestige_bonus = 1.0 + self._prestige.total_prestiges * 0.1
        return {
            "bandwidth": bandwidth_bonus * 0.1,
            "income": bandwidth_bonus * 0.1,
            "vision": prestige_bonus * 0.05,
        }

    def preview_prestige(self) -> Dict[str, float]:
        """Multiplier increments a prestige would grant right now, without applying them."""
        return self._prestige_gains()

    def perform_prestige(self, new_tier: CIDRTier) -> None:
        """
        Convert lifetime accumulation into permanent multipliers, then reset
        money and accumulation and move to `new_tier`.
        """
        gains = self._prestige_gains()
        multipliers = self._prestige.multipliers
        multipliers.bandwidth_multiplier += gains["bandwidth"]
        multipliers.income_multiplier += gains["income"]
        multipliers.vision_multiplier += gains["vision"]
        self._prestige.total_prestiges += 1

        self._money = 0.0
        self._total_accumulated = 0.0
        self._current_tier = new_tier

        if self._logger:
            self._logger.log_event("prestige_performed", {
                "tier": int(new_tier),
                "total_prestiges": self._prestige.total_prestiges,
                **gains,
            })

    def reset(self) -> None:
        """Fresh game: drops multipliers too."""
        self._money = 0.0
        self._current_tier = self._config.starting_tier
        self._total_accumulated = 0.0
        self._prestige = PrestigeRecord()
