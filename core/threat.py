"""
Threat Aggregator.

Responsibility boundaries:
- Derives a bounded threat scalar from registry state every tick.
- Exposes the firewall escalation hook.

Mutation constraints:
- `calculate_threat_from_data` overwrites the level from scratch; `update`
  decays that fresh value. The decay therefore does not persist across
  ticks once the aggregate is recomputed.
"""

import math
from typing import Optional

from config.config import SimulationConfig
from graph.node import HoneypotData
from graph.node_registry import NodeRegistry
from progression.progression_state import ProgressionState
from utils.math_utils import clamp


class ThreatAggregator:

    def __init__(self, progression: ProgressionState, config: Optional[SimulationConfig] = None) -> None:
        self._progression = progression
        self._config = config or SimulationConfig()
        self._threat_level = 0.0

    @property
    def max_threat(self) -> float:
        return self._config.max_threat

    def calculate_threat_from_data(self, registry: NodeRegistry) -> float:
        """
        area   = min(50, pi * r^2 * n / 10000)
        count  = min(30, 2n)
        honeypot = sum of honeypot threat levels
        total clamped to [0, max_threat]
        """
        vision_radius = self._progression.get_vision_radius()
        nodes = registry.get_all_nodes()
        node_count = len(nodes)

        area_threat = min(50.0, math.pi * vision_radius * vision_radius * node_count / 10000.0)
        count_threat = min(30.0, node_count * 2.0)
        honeypot_threat = sum(
            n.threat_level for n in nodes
            if isinstance(n, HoneypotData)
        )

        self._threat_level = clamp(area_threat + count_threat + honeypot_threat, 0.0, self.max_threat)
        return self._threat_level

    def get_threat_level(self) -> float:
        return self._threat_level

    def get_threat_percentage(self) -> float:
        return self._threat_level / self.max_threat

    def update(self, delta: float) -> None:
        decay = self._config.threat_decay_per_second * (delta / 1000.0)
        self._threat_level = max(0.0, self._threat_level - decay)

    def add_threat(self, amount: float) -> None:
        self._threat_level = clamp(self._threat_level + amount, 0.0, self.max_threat)

    def should_trigger_ai_firewall(self) -> bool:
        # No consumer yet; escalation mechanic hook.
        return self._threat_level >= self.max_threat * self._config.firewall_threshold_ratio

    def reset(self) -> None:
        self._threat_level = 0.0
