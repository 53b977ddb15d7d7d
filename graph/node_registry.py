"""
Node Registry.

Responsibility boundaries:
- Authoritative store of all node records, keyed by id (insertion ordered).
- Derives per-type stats (health, income, slots, aggro radius, upgrade cost).
- Maintains the symmetric adjacency kept on each node record.

Mutation constraints:
- Operations never raise on unknown ids; they return a sentinel
  (False, None, 0 or math.inf) and leave state untouched.
- Dead nodes are NOT purged here. The tick driver polls for health <= 0.
"""

import math
from typing import Dict, List, Optional

from config.config import SimulationConfig
from graph.node import (
    NodeType,
    NodeData,
    HostData,
    RouterData,
    HoneypotData,
    NODE_RECORD_CLASSES,
    compute_max_health,
)
from progression.progression_state import ProgressionState
from utils.logger import AuditLogger


class NodeRegistry:
    """
    Coordinates and maintains node records for the simulation.
    """

    def __init__(self, progression: ProgressionState, config: Optional[SimulationConfig] = None,
                 logger: Optional[AuditLogger] = None) -> None:
        self._progression = progression
        self._config = config or SimulationConfig()
        self._logger = logger
        self._nodes: Dict[str, NodeData] = {}
        self._node_counter = 0

    @property
    def progression(self) -> ProgressionState:
        return self._progression

    def generate_id(self, prefix: str = "node") -> str:
        node_id = f"{prefix}_{self._node_counter}"
        self._node_counter += 1
        return node_id

    # Factories

    def create_node(self, node_type: NodeType, x: float, y: float, node_id: Optional[str] = None,
                    level: int = 1) -> Optional[NodeData]:
        """
        Allocate and register a node of any type at full health.
        Returns None if an explicit `node_id` is already taken.
        """
        if node_id is not None and node_id in self._nodes:
            return None
        if node_id is None:
            node_id = self.generate_id(node_type.value)
            while node_id in self._nodes:
                node_id = self.generate_id(node_type.value)
        max_health = compute_max_health(node_type, level)
        record_cls = NODE_RECORD_CLASSES[node_type]

        if record_cls is HostData:
            node = HostData(node_id, node_type, x, y, level, max_health, max_health,
                            base_income=self._config.host_base_income, last_income_time=0.0)
        elif record_cls is RouterData:
            node = RouterData(node_id, node_type, x, y, level, max_health, max_health,
                              max_slots=self._compute_router_slots(level))
        elif record_cls is HoneypotData:
            node = HoneypotData(node_id, node_type, x, y, level, max_health, max_health,
                                aggro_radius=self._config.honeypot_base_aggro_radius, threat_level=0.0)
        else:
            node = NodeData(node_id, node_type, x, y, level, max_health, max_health)

        self._nodes[node_id] = node
        if self._logger:
            self._logger.log_event("node_created", {"node_id": node_id, "type": node_type.value, "x": x, "y": y})
        return node

    def create_host(self, x: float, y: float, node_id: Optional[str] = None, level: int = 1) -> Optional[HostData]:
        return self.create_node(NodeType.HOST, x, y, node_id, level)

    def create_router(self, x: float, y: float, node_id: Optional[str] = None, level: int = 1) -> Optional[RouterData]:
        return self.create_node(NodeType.ROUTER, x, y, node_id, level)

    def create_honeypot(self, x: float, y: float, node_id: Optional[str] = None,
                        level: int = 1) -> Optional[HoneypotData]:
        return self.create_node(NodeType.HONEYPOT, x, y, node_id, level)

    # Lookup

    def get_node(self, node_id: str) -> Optional[NodeData]:
        return self._nodes.get(node_id)

    def get_all_nodes(self) -> List[NodeData]:
        """Return a copy of the list of all nodes, in insertion order."""
        return list(self._nodes.values())

    def get_nodes_by_type(self, node_type: NodeType) -> List[NodeData]:
        return [n for n in self._nodes.values() if n.node_type == node_type]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node_count(self) -> int:
        return len(self._nodes)

    # Mutation

    def remove_node(self, node_id: str) -> bool:
        node = self._nodes.get(node_id)
        if node is None:
            return False

        for neighbour_id in node.connections:
            neighbour = self._nodes.get(neighbour_id)
            if neighbour is not None:
                neighbour.connections = [c for c in neighbour.connections if c != node_id]

        del self._nodes[node_id]
        if self._logger:
            self._logger.log_event("node_removed", {"node_id": node_id})
        return True

    def set_position(self, node_id: str, x: float, y: float) -> None:
        node = self._nodes.get(node_id)
        if node is not None:
            node.x = x
            node.y = y

    def take_damage(self, node_id: str, amount: float) -> bool:
        """
        Subtract health, floored at 0. Returns True while the node is dead,
        so repeated calls on a dead node keep returning True.
        """
        node = self._nodes.get(node_id)
        if node is None:
            return False
        node.health = max(0.0, node.health - amount)
        return node.health <= 0

    def heal(self, node_id: str, amount: float) -> None:
        node = self._nodes.get(node_id)
        if node is not None:
            node.health = min(node.max_health, node.health + amount)

    def add_connection(self, from_id: str, to_id: str) -> bool:
        from_node = self._nodes.get(from_id)
        to_node = self._nodes.get(to_id)
        if from_node is None or to_node is None or from_id == to_id:
            return False
        if to_id in from_node.connections or from_id in to_node.connections:
            return False

        from_node.connections.append(to_id)
        to_node.connections.append(from_id)
        return True

    def remove_connection(self, from_id: str, to_id: str) -> None:
        from_node = self._nodes.get(from_id)
        to_node = self._nodes.get(to_id)
        if from_node is not None:
            from_node.connections = [c for c in from_node.connections if c != to_id]
        if to_node is not None:
            to_node.connections = [c for c in to_node.connections if c != from_id]

    # Upgrades

    def get_upgrade_cost(self, node_id: str) -> float:
        node = self._nodes.get(node_id)
        if node is None:
            return math.inf

        if node.node_type == NodeType.HOST:
            return 50 * 1.5 ** node.level
        if node.node_type == NodeType.HONEYPOT:
            return 300 * 2 ** node.level
        # Router curve is the default for every other type.
        return 100 * 2 ** node.level

    def upgrade(self, node_id: str) -> bool:
        node = self._nodes.get(node_id)
        if node is None:
            return False

        cost = self.get_upgrade_cost(node_id)
        if not self._progression.spend_money(cost):
            return False

        node.level += 1
        node.max_health = compute_max_health(node.node_type, node.level)
        node.health = node.max_health
        if isinstance(node, RouterData):
            node.max_slots = self.get_router_max_slots(node_id)

        if self._logger:
            self._logger.log_event("node_upgraded", {"node_id": node_id, "level": node.level, "cost": cost})
        return True

    # Host economy

    def get_income(self, node_id: str) -> float:
        node = self._nodes.get(node_id)
        if not isinstance(node, HostData):
            return 0.0
        return node.base_income * node.level * self._progression.income_multiplier

    def generate_income(self, node_id: str, current_time: float) -> float:
        node = self._nodes.get(node_id)
        if not isinstance(node, HostData):
            return 0.0

        if current_time - node.last_income_time >= self._config.income_interval_ms:
            node.last_income_time = current_time
            income = self.get_income(node_id)
            self._progression.add_money(income)
            self._progression.add_bandwidth(income)
            return income
        return 0.0

    # Router capacity

    def _compute_router_slots(self, level: int) -> int:
        tier = int(self._progression.get_current_tier())
        base_slots = 2 ** ((24 - tier) / 4) * 4
        return math.floor(base_slots) + level // 2

    def get_router_max_slots(self, node_id: str) -> int:
        node = self._nodes.get(node_id)
        if not isinstance(node, RouterData):
            return 0
        return self._compute_router_slots(node.level)

    def get_router_host_count(self, node_id: str) -> int:
        node = self._nodes.get(node_id)
        if not isinstance(node, RouterData):
            return 0
        count = 0
        for conn_id in node.connections:
            neighbour = self._nodes.get(conn_id)
            if neighbour is not None and neighbour.node_type == NodeType.HOST:
                count += 1
        return count

    def router_has_available_slots(self, node_id: str) -> bool:
        return self.get_router_host_count(node_id) < self.get_router_max_slots(node_id)

    # Honeypots

    def get_honeypot_aggro_radius(self, node_id: str) -> float:
        node = self._nodes.get(node_id)
        if not isinstance(node, HoneypotData):
            return 0.0
        return node.aggro_radius * (1 + node.level * 0.15)

    def add_honeypot_threat(self, node_id: str, amount: float) -> None:
        node = self._nodes.get(node_id)
        if isinstance(node, HoneypotData):
            node.threat_level = max(0.0, node.threat_level + amount)

    def reduce_honeypot_threat(self, node_id: str, amount: float) -> None:
        node = self._nodes.get(node_id)
        if isinstance(node, HoneypotData):
            node.threat_level = max(0.0, node.threat_level - amount)

    # Tick

    def update(self, time: float, delta: float) -> float:
        """Generate host income and decay honeypot threat. Returns income generated this tick."""
        generated = 0.0
        for node in list(self._nodes.values()):
            if node.node_type == NodeType.HOST:
                generated += self.generate_income(node.node_id, time)
            elif node.node_type == NodeType.HONEYPOT:
                self.reduce_honeypot_threat(node.node_id, delta * self._config.honeypot_threat_decay_per_ms)
        return generated

    def clear(self) -> None:
        self._nodes.clear()
        self._node_counter = 0
