"""
Attack Engine.

Responsibility boundaries:
- Lifecycle of in-flight attacks: ACTIVE -> RESOLVED | CANCELLED.
- Path, obfuscation, honeypot aggro and DDoS mitigation rules.
- Damage over time on partial ticks, full resolution once at the end.

Mutation constraints:
- Node health changes only through `NodeRegistry.take_damage`.
- Dead nodes are left in place; cleanup belongs to the tick driver.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Set

from config.config import SimulationConfig
from graph.node import NodeType
from graph.node_registry import NodeRegistry
from graph.topology import TopologyManager
from utils.logger import AuditLogger
from utils.math_utils import distance


class AttackState(Enum):
    ACTIVE = auto()
    RESOLVED = auto()
    CANCELLED = auto()


@dataclass
class Attack:
    attack_id: str
    source_id: str
    target_id: str
    damage: float
    duration: float
    start_time: float
    state: AttackState = AttackState.ACTIVE


# (attacker_id, target_id) -> None
CaptureHandler = Callable[[str, str], None]


class AttackEngine:
    """
    Starts, advances and resolves attacks between registered nodes.
    """

    def __init__(self, registry: NodeRegistry, topology: TopologyManager,
                 config: Optional[SimulationConfig] = None, logger: Optional[AuditLogger] = None,
                 capture_handler: Optional[CaptureHandler] = None) -> None:
        self._registry = registry
        self._topology = topology
        self._config = config or SimulationConfig()
        self._logger = logger
        self._capture_handler = capture_handler
        self._active_attacks: Dict[str, Attack] = {}
        self._registered_node_ids: Set[str] = set()
        self._attack_counter = 0
        self._now = 0.0

    @property
    def now(self) -> float:
        """Timestamp of the most recent tick; used as the start time of new attacks."""
        return self._now

    # Node bookkeeping

    def register_node_data(self, node_id: str) -> None:
        self._registered_node_ids.add(node_id)

    def unregister_node(self, node_id: str) -> None:
        self._registered_node_ids.discard(node_id)
        for attack in list(self._active_attacks.values()):
            if attack.source_id == node_id or attack.target_id == node_id:
                self._finish(attack, AttackState.CANCELLED)

    def is_registered(self, node_id: str) -> bool:
        return node_id in self._registered_node_ids

    # Lifecycle

    def start_attack(self, from_id: str, target_id: str, damage: float, duration: float) -> bool:
        if self._registry.get_node(from_id) is None or self._registry.get_node(target_id) is None:
            return False
        if self.is_node_obfuscated(target_id):
            return False
        if not self._topology.is_connected(from_id, target_id):
            if not self.has_connection_path(from_id, target_id):
                return False

        attack_id = f"attack_{self._attack_counter}"
        self._attack_counter += 1
        self._active_attacks[attack_id] = Attack(attack_id, from_id, target_id, damage, duration, self._now)
        if self._logger:
            self._logger.log_event("attack_started", {
                "attack_id": attack_id, "source": from_id, "target": target_id,
                "damage": damage, "duration": duration,
            })
        return True

    def update(self, time: float, delta: float) -> None:
        self._now = time
        for attack in list(self._active_attacks.values()):
            elapsed = time - attack.start_time
            if elapsed >= attack.duration:
                self.apply_attack_damage(attack)
                self._finish(attack, AttackState.RESOLVED)
            else:
                damage_per_second = attack.damage / (attack.duration / 1000.0)
                self._apply_mitigated_damage(attack.target_id, damage_per_second * (delta / 1000.0))

    def cancel_attack(self, attack_id: str) -> None:
        attack = self._active_attacks.get(attack_id)
        if attack is not None:
            self._finish(attack, AttackState.CANCELLED)

    def _finish(self, attack: Attack, state: AttackState) -> None:
        attack.state = state
        del self._active_attacks[attack.attack_id]
        if self._logger:
            self._logger.log_event(f"attack_{state.name.lower()}", {"attack_id": attack.attack_id})

    # Resolution

    def apply_attack_damage(self, attack: Attack) -> None:
        """
        Final resolution: honeypot redirect first, otherwise DDoS-mitigated
        damage to the target, then capture handling on death.
        """
        if self._registry.get_node(attack.target_id) is None:
            return

        honeypot_id = self.find_nearest_honeypot(attack.target_id)
        if honeypot_id is not None:
            self._registry.add_honeypot_threat(
                honeypot_id, attack.damage * self._config.honeypot_redirect_threat_ratio)
            self._registry.take_damage(honeypot_id, attack.damage)
            if self._logger:
                self._logger.log_event("attack_redirected", {
                    "attack_id": attack.attack_id, "honeypot": honeypot_id, "damage": attack.damage,
                })
            return

        died = self._apply_mitigated_damage(attack.target_id, attack.damage)
        if died:
            self.handle_node_capture(attack.source_id, attack.target_id)

    def _apply_mitigated_damage(self, node_id: str, damage: float) -> bool:
        if self._registry.get_node(node_id) is None:
            return False
        if self.find_nearest_ddos_protect(node_id) is not None:
            damage *= self._config.ddos_damage_factor
        return self._registry.take_damage(node_id, damage)

    def handle_node_capture(self, attacker_id: str, target_id: str) -> None:
        """Extension point for ownership transfer. The dead node is removed by the tick driver."""
        if self._capture_handler is not None:
            self._capture_handler(attacker_id, target_id)

    # Spatial rules

    def is_node_obfuscated(self, node_id: str) -> bool:
        """True if any TOR node other than `node_id` is strictly within the obfuscation radius."""
        target = self._registry.get_node(node_id)
        if target is None:
            return False
        for node in self._registry.get_nodes_by_type(NodeType.TOR):
            if node.node_id == node_id:
                continue
            if distance(target.x, target.y, node.x, node.y) < self._config.obfuscation_radius:
                return True
        return False

    def find_nearest_honeypot(self, node_id: str) -> Optional[str]:
        target = self._registry.get_node(node_id)
        if target is None:
            return None

        nearest_id = None
        nearest_distance = float("inf")
        for node in self._registry.get_nodes_by_type(NodeType.HONEYPOT):
            d = distance(target.x, target.y, node.x, node.y)
            if d < nearest_distance and d <= self._registry.get_honeypot_aggro_radius(node.node_id):
                nearest_id = node.node_id
                nearest_distance = d
        return nearest_id

    def find_nearest_ddos_protect(self, node_id: str) -> Optional[str]:
        target = self._registry.get_node(node_id)
        if target is None:
            return None

        nearest_id = None
        nearest_distance = float("inf")
        for node in self._registry.get_nodes_by_type(NodeType.DDOS_PROTECT):
            d = distance(target.x, target.y, node.x, node.y)
            if d < nearest_distance and d <= self._config.ddos_protect_radius:
                nearest_id = node.node_id
                nearest_distance = d
        return nearest_id

    def has_connection_path(self, from_id: str, to_id: str) -> bool:
        """Breadth-first search over every stored connection as an undirected edge."""
        visited: Set[str] = set()
        queue = deque([from_id])
        while queue:
            current = queue.popleft()
            if current == to_id:
                return True
            if current in visited:
                continue
            visited.add(current)
            for neighbour_id in self._topology.get_neighbors(current):
                if neighbour_id not in visited:
                    queue.append(neighbour_id)
        return False

    # Queries

    def get_active_attacks(self) -> List[Attack]:
        return list(self._active_attacks.values())

    def get_attack(self, attack_id: str) -> Optional[Attack]:
        return self._active_attacks.get(attack_id)

    def clear(self) -> None:
        self._active_attacks.clear()
        self._registered_node_ids.clear()
