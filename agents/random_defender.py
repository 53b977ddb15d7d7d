"""
Random Defender Agent.

Responsibility boundaries:
- Baseline player: picks uniformly among currently valid commands.
"""

from typing import Any, Dict, List

from agents.base_agent import BaseAgent
from core.actions import PlayerAction, ActionType
from utils.rng import CentralizedRNG


class RandomDefender(BaseAgent):
    """
    A defender that selects commands randomly.
    """

    def __init__(self, agent_id: str, rng: CentralizedRNG, placement_spread: float = 150.0):
        super().__init__(agent_id)
        self._rng = rng
        self.placement_spread = placement_spread

    def act(self, observation: Dict[str, Any]) -> PlayerAction:
        nodes = observation.get("nodes", [])
        valid_actions: List[PlayerAction] = [PlayerAction(self.agent_id, ActionType.NO_OP)]

        money = observation.get("money", 0.0)
        for node in nodes:
            if node.get("upgrade_cost", float("inf")) <= money:
                valid_actions.append(PlayerAction(self.agent_id, ActionType.UPGRADE_NODE, target_node=node["node_id"]))

        if nodes:
            anchor = self._rng.choice(nodes)
            x = anchor["x"] + self._rng.uniform(-self.placement_spread, self.placement_spread)
            y = anchor["y"] + self._rng.uniform(-self.placement_spread, self.placement_spread)
        else:
            x, y = 0.0, 0.0
        valid_actions.append(PlayerAction(self.agent_id, ActionType.PLACE_ROUTER, position=(x, y)))
        valid_actions.append(PlayerAction(self.agent_id, ActionType.PLACE_HONEYPOT, position=(x, y)))

        return self._rng.choice(valid_actions)
