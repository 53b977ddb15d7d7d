"""
Simulation State.

Responsibility boundaries:
- Context object bundling every component of one run, wired by reference.
- Replaces process-wide singletons: one ProgressionState and one
  NodeRegistry per SimulationState, shared by every system.

Mutation constraints:
- Components are created once; `reset_world()` clears their contents but
  keeps object identity so held references stay valid.
"""

import hashlib
from typing import Optional

from config.config import SimulationConfig
from core.attack_engine import AttackEngine, CaptureHandler
from core.threat import ThreatAggregator
from core.visibility import VisibilityMap
from graph.node_registry import NodeRegistry
from graph.topology import TopologyManager
from progression.progression_state import ProgressionState
from utils.logger import AuditLogger


class SimulationState:
    """
    Mutable state container strictly owned by the SimulationEngine.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, logger: Optional[AuditLogger] = None,
                 capture_handler: Optional[CaptureHandler] = None) -> None:
        self._config = config or SimulationConfig()
        self._logger = logger
        self._progression = ProgressionState(self._config, logger)
        self._registry = NodeRegistry(self._progression, self._config, logger)
        self._topology = TopologyManager(self._registry, self._config, logger)
        self._attack_engine = AttackEngine(self._registry, self._topology, self._config, logger, capture_handler)
        self._threat = ThreatAggregator(self._progression, self._config)
        self._visibility = VisibilityMap(self._registry, self._progression, self._config)
        self._time = 0.0
        self._tick = 0

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def logger(self) -> Optional[AuditLogger]:
        return self._logger

    @property
    def progression(self) -> ProgressionState:
        return self._progression

    @property
    def registry(self) -> NodeRegistry:
        return self._registry

    @property
    def topology(self) -> TopologyManager:
        return self._topology

    @property
    def attack_engine(self) -> AttackEngine:
        return self._attack_engine

    @property
    def threat(self) -> ThreatAggregator:
        return self._threat

    @property
    def visibility(self) -> VisibilityMap:
        return self._visibility

    @property
    def time(self) -> float:
        return self._time

    @property
    def tick(self) -> int:
        return self._tick

    def advance_clock(self, time: float) -> None:
        self._time = time
        self._tick += 1

    def reset_world(self) -> None:
        """Clear nodes, links, attacks, fog and threat. Progression is untouched."""
        self._registry.clear()
        self._topology.clear()
        self._attack_engine.clear()
        self._visibility.clear()
        self._threat.reset()

    def compute_state_hash(self) -> str:
        """
        Deterministic digest of the simulation state. Identical (time, delta)
        sequences and inputs must produce identical digests.
        """
        parts = [f"t={self._time!r}", f"money={self._progression.get_money()!r}",
                 f"tier={int(self._progression.get_current_tier())}",
                 f"threat={self._threat.get_threat_level()!r}"]
        for node in self._registry.get_all_nodes():
            parts.append(f"n:{node.node_id}:{node.node_type.value}:{node.level}:{node.health!r}:"
                         f"{','.join(sorted(node.connections))}")
        for conn in sorted(self._topology.get_all_connections(), key=lambda c: c.key):
            parts.append(f"c:{conn.key}:{conn.level}:{conn.throughput!r}")
        for attack in self._attack_engine.get_active_attacks():
            parts.append(f"a:{attack.attack_id}:{attack.source_id}:{attack.target_id}:{attack.start_time!r}")
        return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()
