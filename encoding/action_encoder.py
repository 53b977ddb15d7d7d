"""
Action Encoder.

Responsibility boundaries:
- Maps discrete action indices to PlayerAction objects and back.
- Generates action masks so only currently valid commands are selectable.
- Maintains a fixed-dimensional action space.

Index layout (N = max_nodes, node slots sorted by id):
    [0, N)        UPGRADE_NODE   slot i
    [N, 2N)       PLACE_HONEYPOT next to slot i
    [2N, 3N)      PLACE_ROUTER   next to slot i
    3N            PRESTIGE
    3N + 1        NO_OP
"""

import numpy as np
from typing import Dict, Any, List

from core.actions import PlayerAction, ActionType


class ActionEncoder:
    """
    Encoder for a fixed-size discrete action space.
    """

    def __init__(self, max_nodes: int = 32, honeypot_offset: float = 60.0, router_offset: float = 150.0):
        self.max_nodes = max_nodes
        self.honeypot_offset = honeypot_offset
        self.router_offset = router_offset
        self.slot_types = [ActionType.UPGRADE_NODE, ActionType.PLACE_HONEYPOT, ActionType.PLACE_ROUTER]
        self.prestige_index = len(self.slot_types) * self.max_nodes
        self.no_op_index = self.prestige_index + 1
        self.action_dim = self.no_op_index + 1

    def _placement(self, action_type: ActionType, node: Dict[str, Any]) -> tuple:
        if action_type == ActionType.PLACE_HONEYPOT:
            return (node["x"], node["y"] + self.honeypot_offset)
        return (node["x"] + self.router_offset, node["y"])

    def encode_action(self, action: PlayerAction, sorted_node_ids: List[str]) -> int:
        """
        Converts an action to a discrete index. Placements are encoded by the
        slot of their anchor node, passed as `metadata["anchor"]`.
        """
        if action.action_type == ActionType.NO_OP:
            return self.no_op_index
        if action.action_type == ActionType.PRESTIGE:
            return self.prestige_index
        if action.action_type not in self.slot_types:
            return self.no_op_index

        anchor = action.target_node if action.action_type == ActionType.UPGRADE_NODE else action.metadata.get("anchor")
        if anchor in sorted_node_ids:
            node_idx = sorted_node_ids.index(anchor)
            if node_idx < self.max_nodes:
                return self.slot_types.index(action.action_type) * self.max_nodes + node_idx
        return self.no_op_index

    def decode_action(self, index: int, sorted_nodes: List[Dict[str, Any]], agent_id: str) -> PlayerAction:
        """
        Converts a discrete index to a PlayerAction. Indices pointing at an
        empty slot decode to NO_OP.
        """
        if index == self.prestige_index:
            return PlayerAction(agent_id, ActionType.PRESTIGE)
        if index >= self.no_op_index or index < 0:
            return PlayerAction(agent_id, ActionType.NO_OP)

        type_idx, node_idx = divmod(index, self.max_nodes)
        if node_idx >= len(sorted_nodes):
            return PlayerAction(agent_id, ActionType.NO_OP)

        action_type = self.slot_types[type_idx]
        node = sorted_nodes[node_idx]
        if action_type == ActionType.UPGRADE_NODE:
            return PlayerAction(agent_id, action_type, target_node=node["node_id"])
        return PlayerAction(agent_id, action_type, position=self._placement(action_type, node),
                            metadata={"anchor": node["node_id"]})

    def generate_action_mask(self, observation: Dict[str, Any]) -> np.ndarray:
        """
        1.0 for selectable indices, 0.0 otherwise. NO_OP is always valid.
        """
        mask = np.zeros(self.action_dim, dtype=np.float32)
        mask[self.no_op_index] = 1.0

        sorted_nodes = sorted(observation.get("nodes", []), key=lambda n: n["node_id"])
        money = observation.get("money", 0.0)
        for i, node in enumerate(sorted_nodes[:self.max_nodes]):
            if node.get("upgrade_cost", float("inf")) <= money:
                mask[i] = 1.0
            mask[self.max_nodes + i] = 1.0
            mask[2 * self.max_nodes + i] = 1.0

        if observation.get("tier") != "/8" and observation.get("total_accumulated", 0.0) > 0:
            mask[self.prestige_index] = 1.0
        return mask
