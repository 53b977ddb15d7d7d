"""
State Encoder.

Responsibility boundaries:
- Converts variable-size defender observation dictionaries into fixed-size numeric vectors.
- Only encodes what is in the observation; never reads simulation state.
"""

import math

import numpy as np
from typing import Dict, Any

from utils.cidr_utils import TIER_ORDER, get_tier_name


class StateEncoder:
    """
    Encoder for converting observations into fixed-dimensional arrays.
    """

    def __init__(self, max_nodes: int = 32, world_size: float = 4000.0):
        self.max_nodes = max_nodes
        self.world_size = world_size
        self.node_types = ["router", "host", "honeypot", "vpn", "tor", "ddos_protect"]
        self.tier_names = [get_tier_name(t) for t in TIER_ORDER]

        # present(1) + type(6) + level(1) + health_ratio(1) + x,y(2) + honeypot_threat(1) + under_attack(1)
        self.node_feature_dim = 13
        # money, threat, tier, active attacks
        self.global_feature_dim = 4

    @property
    def observation_dim(self) -> int:
        return self.max_nodes * self.node_feature_dim + self.global_feature_dim

    def encode(self, observation: Dict[str, Any]) -> np.ndarray:
        """
        Encodes an observation into a flattened float32 array.

        Output shape: [MAX_NODES * NODE_FEATURE_DIM + GLOBAL_FEATURE_DIM]
        """
        node_matrix = np.zeros((self.max_nodes, self.node_feature_dim), dtype=np.float32)

        # Deterministic slot assignment by id
        sorted_nodes = sorted(observation.get("nodes", []), key=lambda n: n["node_id"])
        attacked = {a["target"] for a in observation.get("attacks", [])}

        for i, node in enumerate(sorted_nodes[:self.max_nodes]):
            node_matrix[i, 0] = 1.0

            node_type = node.get("node_type")
            if node_type in self.node_types:
                node_matrix[i, 1 + self.node_types.index(node_type)] = 1.0

            node_matrix[i, 7] = min(node.get("level", 1) / 10.0, 1.0)
            max_health = node.get("max_health", 0.0)
            node_matrix[i, 8] = node.get("health", 0.0) / max_health if max_health > 0 else 0.0
            node_matrix[i, 9] = np.clip(node.get("x", 0.0) / self.world_size, -1.0, 1.0)
            node_matrix[i, 10] = np.clip(node.get("y", 0.0) / self.world_size, -1.0, 1.0)
            node_matrix[i, 11] = min(node.get("threat_level", 0.0) / 100.0, 1.0)
            node_matrix[i, 12] = 1.0 if node["node_id"] in attacked else 0.0

        global_vec = np.zeros(self.global_feature_dim, dtype=np.float32)
        global_vec[0] = math.log1p(max(observation.get("money", 0.0), 0.0)) / 10.0
        global_vec[1] = observation.get("threat_percentage", 0.0)
        tier = observation.get("tier")
        if tier in self.tier_names:
            global_vec[2] = self.tier_names.index(tier) / (len(self.tier_names) - 1)
        global_vec[3] = min(len(observation.get("attacks", [])) / 10.0, 1.0)

        return np.concatenate([node_matrix.flatten(), global_vec])
