"""
Node Entities.

Responsibility boundaries:
- Plain data records for every placeable network device.
- One record class per behaviour-bearing type; aura-only types share the base record.

Mutation constraints:
- Fields are mutated exclusively by `NodeRegistry` operations, which keep
  derived values (max_health, slot counts) consistent.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Type


class NodeType(Enum):
    ROUTER = "router"
    HOST = "host"
    HONEYPOT = "honeypot"
    VPN = "vpn"
    TOR = "tor"
    DDOS_PROTECT = "ddos_protect"


NODE_BASE_MAX_HEALTH: Dict[NodeType, float] = {
    NodeType.HOST: 50.0,
    NodeType.ROUTER: 100.0,
    NodeType.HONEYPOT: 200.0,
    NodeType.VPN: 75.0,
    NodeType.TOR: 75.0,
    NodeType.DDOS_PROTECT: 150.0,
}


def compute_max_health(node_type: NodeType, level: int) -> float:
    return NODE_BASE_MAX_HEALTH[node_type] * (1 + level * 0.1)


@dataclass
class NodeData:
    """Common fields shared by every node type."""
    node_id: str
    node_type: NodeType
    x: float
    y: float
    level: int = 1
    health: float = 0.0
    max_health: float = 0.0
    connections: List[str] = field(default_factory=list)

    @property
    def is_dead(self) -> bool:
        return self.health <= 0


@dataclass
class HostData(NodeData):
    base_income: float = 10.0
    last_income_time: float = 0.0


@dataclass
class RouterData(NodeData):
    max_slots: int = 4


@dataclass
class HoneypotData(NodeData):
    aggro_radius: float = 200.0
    threat_level: float = 0.0


# Record class per type. Every NodeType must appear here.
NODE_RECORD_CLASSES: Dict[NodeType, Type[NodeData]] = {
    NodeType.HOST: HostData,
    NodeType.ROUTER: RouterData,
    NodeType.HONEYPOT: HoneypotData,
    NodeType.VPN: NodeData,
    NodeType.TOR: NodeData,
    NodeType.DDOS_PROTECT: NodeData,
}
