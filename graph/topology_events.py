"""
Topology Events.

Responsibility boundaries:
- Formalizes placement, linking and removal of nodes across every tracker
  (registry, topology, attack engine, visibility) as single commands.
- The only place where a node is registered with or purged from all systems.
"""

import math
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from core.state import SimulationState
from graph.node import NodeType


class TopologyEvent(ABC):
    """Abstract base event for network topology changes."""

    @abstractmethod
    def apply(self, state: SimulationState) -> Any:
        """Apply the deterministic topology event to the simulation state."""
        pass


def register_everywhere(state: SimulationState, node_id: str) -> None:
    state.topology.register_node_data(node_id)
    state.attack_engine.register_node_data(node_id)
    state.visibility.register_node_data(node_id)


class LinkNodesEvent(TopologyEvent):
    """Link two nodes in both the registry adjacency and the topology layer."""

    def __init__(self, from_id: str, to_id: str):
        self.from_id = from_id
        self.to_id = to_id

    def apply(self, state: SimulationState) -> bool:
        if not state.registry.add_connection(self.from_id, self.to_id):
            return False
        if not state.topology.create_connection_from_data(self.from_id, self.to_id):
            # Keep both views consistent: either both links exist or neither does.
            state.registry.remove_connection(self.from_id, self.to_id)
            return False
        return True


class LinkFailureEvent(TopologyEvent):
    """Represents a network link going down. Idempotent."""

    def __init__(self, from_id: str, to_id: str):
        self.from_id = from_id
        self.to_id = to_id

    def apply(self, state: SimulationState) -> None:
        state.topology.remove_connection(self.from_id, self.to_id)


class RouterHostRefillEvent(TopologyEvent):
    """
    Fill a router's free slots with Hosts on a ring around it.
    Host i sits at angle i * 2*pi / max_slots for i in [current_hosts, max_slots).
    """

    def __init__(self, router_id: str):
        self.router_id = router_id

    def apply(self, state: SimulationState) -> List[str]:
        registry = state.registry
        router = registry.get_node(self.router_id)
        if router is None or router.node_type != NodeType.ROUTER:
            return []

        max_slots = registry.get_router_max_slots(self.router_id)
        current = registry.get_router_host_count(self.router_id)
        if max_slots - current <= 0:
            return []

        radius = state.config.host_ring_radius
        # A ring beyond link range never attaches, so nothing is generated.
        if radius > state.topology.get_max_connection_range():
            return []

        angle_step = 2 * math.pi / max_slots
        created = []
        for i in range(current, max_slots):
            angle = i * angle_step
            host = registry.create_host(router.x + math.cos(angle) * radius,
                                        router.y + math.sin(angle) * radius)
            register_everywhere(state, host.node_id)
            if not LinkNodesEvent(self.router_id, host.node_id).apply(state):
                # An unlinked host is never counted against the router's slots.
                DeviceLeaveEvent(host.node_id).apply(state)
                break
            created.append(host.node_id)
        return created


class DeviceJoinEvent(TopologyEvent):
    """Represents a new device being placed on the plane."""

    def __init__(self, node_type: NodeType, x: float, y: float, node_id: Optional[str] = None, level: int = 1):
        self.node_type = node_type
        self.x = x
        self.y = y
        self.node_id = node_id
        self.level = level

    def apply(self, state: SimulationState) -> Optional[str]:
        node = state.registry.create_node(self.node_type, self.x, self.y, self.node_id, self.level)
        if node is None:
            return None
        register_everywhere(state, node.node_id)
        if node.node_type == NodeType.ROUTER:
            RouterHostRefillEvent(node.node_id).apply(state)
        return node.node_id


class DeviceLeaveEvent(TopologyEvent):
    """Represents a device leaving the network (death or explicit removal). Idempotent."""

    def __init__(self, node_id: str):
        self.node_id = node_id

    def apply(self, state: SimulationState) -> bool:
        state.topology.unregister_node(self.node_id)
        state.attack_engine.unregister_node(self.node_id)
        state.visibility.unregister_node(self.node_id)
        return state.registry.remove_node(self.node_id)
