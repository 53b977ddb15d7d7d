"""
Topology Manager.

Responsibility boundaries:
- Owns the undirected connection records between registered nodes.
- Range-gates connection creation and computes per-edge throughput.
- Cascades connection removal when a node is unregistered.

Mutation constraints:
- Throughput is recomputed on `update()`; it carries no meaning between ticks.
"""

from typing import Dict, List, Optional, Set, Tuple

from config.config import SimulationConfig
from graph.connection import Connection, connection_key
from graph.node_registry import NodeRegistry
from utils.logger import AuditLogger
from utils.math_utils import distance


class TopologyManager:
    """
    Maintains throughput-carrying links for the simulation environment.
    """

    def __init__(self, registry: NodeRegistry, config: Optional[SimulationConfig] = None,
                 logger: Optional[AuditLogger] = None) -> None:
        self._registry = registry
        self._config = config or SimulationConfig()
        self._logger = logger
        self._connections: Dict[Tuple[str, str], Connection] = {}
        self._registered_node_ids: Set[str] = set()
        self._max_connection_range = self._config.max_connection_range

    # Node bookkeeping

    def register_node_data(self, node_id: str) -> None:
        self._registered_node_ids.add(node_id)

    def unregister_node(self, node_id: str) -> None:
        self._registered_node_ids.discard(node_id)
        self.remove_all_connections(node_id)

    def is_registered(self, node_id: str) -> bool:
        return node_id in self._registered_node_ids

    # Range

    def set_max_connection_range(self, max_range: float) -> None:
        self._max_connection_range = max_range

    def get_max_connection_range(self) -> float:
        return self._max_connection_range

    # Connections

    def create_connection_from_data(self, from_id: str, to_id: str) -> bool:
        """Create a link if both nodes exist, are unlinked and lie within range (inclusive)."""
        from_node = self._registry.get_node(from_id)
        to_node = self._registry.get_node(to_id)
        if from_node is None or to_node is None or from_id == to_id:
            return False
        if self.is_connected(from_id, to_id):
            return False
        if distance(from_node.x, from_node.y, to_node.x, to_node.y) > self._max_connection_range:
            return False

        connection = Connection(from_id, to_id, base_throughput=self._config.base_connection_throughput)
        self._connections[connection.key] = connection
        if self._logger:
            self._logger.log_event("connection_created", {"from": from_id, "to": to_id})
        return True

    def remove_connection(self, from_id: str, to_id: str) -> None:
        """Remove the link record and the registry adjacency. Idempotent."""
        self._connections.pop(connection_key(from_id, to_id), None)
        self._registry.remove_connection(from_id, to_id)

    def remove_all_connections(self, node_id: str) -> None:
        stale = [key for key, conn in self._connections.items() if conn.touches(node_id)]
        for key in stale:
            del self._connections[key]
        if stale and self._logger:
            self._logger.log_event("connections_removed", {"node_id": node_id, "count": len(stale)})

    def is_connected(self, from_id: str, to_id: str) -> bool:
        return connection_key(from_id, to_id) in self._connections

    def get_connection(self, from_id: str, to_id: str) -> Optional[Connection]:
        return self._connections.get(connection_key(from_id, to_id))

    def get_all_connections(self) -> List[Connection]:
        return list(self._connections.values())

    def get_node_connections(self, node_id: str) -> List[Connection]:
        return [conn for conn in self._connections.values() if conn.touches(node_id)]

    def get_neighbors(self, node_id: str) -> List[str]:
        return [conn.other_end(node_id) for conn in self.get_node_connections(node_id)]

    def upgrade_connection(self, from_id: str, to_id: str) -> bool:
        connection = self.get_connection(from_id, to_id)
        if connection is None:
            return False
        connection.upgrade()
        return True

    # Throughput

    def calculate_throughput(self, from_id: str, to_id: str) -> float:
        """
        Model the link as a capacity-limited pipe for the source's income:
        min(income(from_id), max_throughput).
        """
        connection = self.get_connection(from_id, to_id)
        if connection is None:
            return 0.0
        income = self._registry.get_income(from_id)
        connection.throughput = min(income, connection.max_throughput)
        return connection.throughput

    def is_overloaded(self, from_id: str, to_id: str) -> bool:
        connection = self.get_connection(from_id, to_id)
        if connection is None:
            return False
        return connection.is_overloaded

    def update(self) -> None:
        for connection in list(self._connections.values()):
            if not self._registry.has_node(connection.from_id) or not self._registry.has_node(connection.to_id):
                continue
            self.calculate_throughput(connection.from_id, connection.to_id)

    def number_of_connections(self) -> int:
        return len(self._connections)

    def clear(self) -> None:
        self._connections.clear()
        self._registered_node_ids.clear()
