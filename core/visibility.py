"""
Visibility (Fog of War).

Responsibility boundaries:
- Radius-based visibility around registered nodes.
- Vision radius comes from ProgressionState; positions from NodeRegistry.
- Read-only with respect to simulation state.
"""

import math
from typing import List, Optional, Sequence, Set, Tuple

import numpy as np

from config.config import SimulationConfig
from graph.node_registry import NodeRegistry
from progression.progression_state import ProgressionState
from utils.math_utils import point_in_circle


class VisibilityMap:

    def __init__(self, registry: NodeRegistry, progression: ProgressionState,
                 config: Optional[SimulationConfig] = None) -> None:
        self._registry = registry
        self._progression = progression
        self._config = config or SimulationConfig()
        # Insertion order is kept so numpy batches line up with registration order.
        self._registered_node_ids: List[str] = []
        self._registered_lookup: Set[str] = set()

    def register_node_data(self, node_id: str) -> None:
        if node_id not in self._registered_lookup:
            self._registered_lookup.add(node_id)
            self._registered_node_ids.append(node_id)

    def unregister_node(self, node_id: str) -> None:
        if node_id in self._registered_lookup:
            self._registered_lookup.discard(node_id)
            self._registered_node_ids.remove(node_id)

    def _observer_positions(self) -> np.ndarray:
        coords = []
        for node_id in self._registered_node_ids:
            node = self._registry.get_node(node_id)
            if node is not None:
                coords.append((node.x, node.y))
        return np.asarray(coords, dtype=np.float64).reshape(-1, 2)

    def is_point_visible(self, x: float, y: float) -> bool:
        vision_radius = self._progression.get_vision_radius()
        for node_id in self._registered_node_ids:
            node = self._registry.get_node(node_id)
            if node is not None and point_in_circle(x, y, node.x, node.y, vision_radius):
                return True
        return False

    def visibility_mask(self, points: Sequence[Tuple[float, float]]) -> np.ndarray:
        """Vectorised `is_point_visible` over many points. Returns a boolean array."""
        query = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        observers = self._observer_positions()
        if observers.shape[0] == 0 or query.shape[0] == 0:
            return np.zeros(query.shape[0], dtype=bool)

        radius = self._progression.get_vision_radius()
        # pairwise squared distances [n_query, n_observers]
        diff = query[:, None, :] - observers[None, :, :]
        dist_sq = np.einsum("ijk,ijk->ij", diff, diff)
        return np.any(dist_sq <= radius * radius, axis=1)

    def visible_node_ids(self) -> List[str]:
        """Ids of every registry node inside some registered observer's vision."""
        nodes = self._registry.get_all_nodes()
        if not nodes:
            return []
        mask = self.visibility_mask([(n.x, n.y) for n in nodes])
        return [n.node_id for n, visible in zip(nodes, mask) if visible]

    def get_visibility_percentage(self) -> float:
        """Rough revealed fraction of the world square; overlaps are not subtracted."""
        vision_radius = self._progression.get_vision_radius()
        total_area = self._config.world_size * self._config.world_size
        revealed = math.pi * vision_radius * vision_radius * len(self._registered_node_ids)
        return min(1.0, revealed / total_area)

    def clear(self) -> None:
        self._registered_node_ids.clear()
        self._registered_lookup.clear()
