"""
Simulation Engine.

Responsibility boundaries:
- Holds the simulation state context for one run.
- Acts as the external driver: placement, removal, upgrades, prestige and
  the per-frame tick all enter through here.
- Translates agent commands (PlayerAction, AttackOrder) into core operations.

Error contract:
- Every operation reports failure through its return value; malformed driver
  sequences (double removal, unknown ids) degrade to no-ops.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from config.config import SimulationConfig
from core.actions import ActionType, AttackOrder, PlayerAction
from core.attack_engine import CaptureHandler
from core.state import SimulationState
from core.step_pipeline import TickPipeline, TickReport
from graph.node import NodeType
from graph.topology_events import DeviceJoinEvent, DeviceLeaveEvent, LinkNodesEvent
from observation.observation_builder import ObservationBuilder
from utils.cidr_utils import CIDRTier, get_next_tier
from utils.logger import AuditLogger


class BaseEnvironment(ABC):
    """
    Abstract frame-driven simulation environment.
    """

    @abstractmethod
    def reset(self) -> Dict[str, Any]:
        """Reset the simulation to an initial state and return initial observations."""
        pass

    @abstractmethod
    def step(self, time: float, delta: float) -> TickReport:
        """Advance the simulation by one frame."""
        pass

    @abstractmethod
    def get_observation_by_id(self, agent_id: str) -> Dict[str, Any]:
        pass


class SimulationEngine(BaseEnvironment):
    """
    Frame driver over a single SimulationState.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, logger: Optional[AuditLogger] = None,
                 capture_handler: Optional[CaptureHandler] = None):
        self._config = config or SimulationConfig()
        self._logger = logger
        self._capture_handler = capture_handler
        self._state = self._build_initial_state()
        self._pipeline = TickPipeline()
        self._obs_builder = ObservationBuilder()

    def _build_initial_state(self) -> SimulationState:
        return SimulationState(self._config, self._logger, self._capture_handler)

    @property
    def state(self) -> SimulationState:
        return self._state

    def reset(self) -> Dict[str, Any]:
        """Start a fresh run, progression included."""
        self._state = self._build_initial_state()
        return {
            "atk": self.get_observation_by_id("atk_1"),
            "def": self.get_observation_by_id("def_1"),
        }

    # Placement / removal

    def place_node(self, node_type: NodeType, x: float, y: float, node_id: Optional[str] = None,
                   level: int = 1) -> Optional[str]:
        return DeviceJoinEvent(node_type, x, y, node_id, level).apply(self._state)

    def place_router(self, x: float, y: float, node_id: Optional[str] = None) -> Optional[str]:
        """Place a router; its free slots are immediately filled with Hosts."""
        return self.place_node(NodeType.ROUTER, x, y, node_id)

    def place_honeypot(self, x: float, y: float, node_id: Optional[str] = None) -> Optional[str]:
        return self.place_node(NodeType.HONEYPOT, x, y, node_id)

    def link_nodes(self, from_id: str, to_id: str) -> bool:
        return LinkNodesEvent(from_id, to_id).apply(self._state)

    def remove_node(self, node_id: str) -> bool:
        return DeviceLeaveEvent(node_id).apply(self._state)

    # Upgrades

    def upgrade_node(self, node_id: str) -> bool:
        return self._state.registry.upgrade(node_id)

    def upgrade_connection(self, from_id: str, to_id: str) -> bool:
        return self._state.topology.upgrade_connection(from_id, to_id)

    # Attacks

    def launch_attack(self, source_id: str, target_id: str, damage: float, duration: float) -> bool:
        return self._state.attack_engine.start_attack(source_id, target_id, damage, duration)

    def apply_attack_order(self, order: AttackOrder) -> bool:
        if order.is_no_op:
            return False
        return self.launch_attack(order.source_node, order.target_node, order.damage, order.duration)

    # Prestige

    def prestige(self, new_tier: Optional[CIDRTier] = None) -> bool:
        """
        Jump to `new_tier` (default: next tier), converting progress into
        permanent multipliers and clearing the world. False at /8.
        """
        if new_tier is None:
            new_tier = get_next_tier(self._state.progression.get_current_tier())
            if new_tier is None:
                return False
        self._state.progression.perform_prestige(new_tier)
        self._state.reset_world()
        return True

    # Commands

    def apply_action(self, action: PlayerAction) -> bool:
        action.validate()
        if action.action_type == ActionType.PLACE_ROUTER:
            return self.place_router(*action.position) is not None
        if action.action_type == ActionType.PLACE_HONEYPOT:
            return self.place_honeypot(*action.position) is not None
        if action.action_type == ActionType.UPGRADE_NODE:
            return self.upgrade_node(action.target_node)
        if action.action_type == ActionType.UPGRADE_CONNECTION:
            return self.upgrade_connection(action.target_node, action.peer_node)
        if action.action_type == ActionType.PRESTIGE:
            return self.prestige()
        return False

    # Tick

    def step(self, time: float, delta: float) -> TickReport:
        return self._pipeline.execute(self._state, time, delta)

    def get_observation_by_id(self, agent_id: str) -> Dict[str, Any]:
        return self._obs_builder.build_observation(self._state, agent_id)
