"""
Greedy Defender Agent.

Responsibility boundaries:
- Scripted player: covers attacked nodes with honeypots, then spends money
  on the cheapest affordable upgrade.
"""

from typing import Any, Dict, List, Optional

from agents.base_agent import BaseAgent
from core.actions import PlayerAction, ActionType
from utils.math_utils import distance


class GreedyDefender(BaseAgent):
    """
    A defender that prioritizes honeypot cover, then upgrades.
    """

    def __init__(self, agent_id: str, honeypot_offset: float = 60.0):
        super().__init__(agent_id)
        self.honeypot_offset = honeypot_offset

    def act(self, observation: Dict[str, Any]) -> PlayerAction:
        nodes = observation.get("nodes", [])
        if not nodes:
            return PlayerAction(self.agent_id, ActionType.NO_OP)

        # Priority 1: cover the most attacked node with a honeypot
        target = self._most_attacked_uncovered(observation)
        if target is not None:
            return PlayerAction(
                self.agent_id,
                ActionType.PLACE_HONEYPOT,
                position=(target["x"] + self.honeypot_offset, target["y"]),
            )

        # Priority 2: cheapest affordable upgrade
        money = observation.get("money", 0.0)
        affordable = [n for n in nodes if n.get("upgrade_cost", float("inf")) <= money]
        if affordable:
            cheapest = min(affordable, key=lambda n: (n["upgrade_cost"], n["node_id"]))
            return PlayerAction(self.agent_id, ActionType.UPGRADE_NODE, target_node=cheapest["node_id"])

        return PlayerAction(self.agent_id, ActionType.NO_OP)

    def _most_attacked_uncovered(self, observation: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        by_id = {n["node_id"]: n for n in observation.get("nodes", [])}
        honeypots: List[Dict[str, Any]] = [n for n in by_id.values() if n["node_type"] == "honeypot"]

        counts: Dict[str, int] = {}
        for attack in observation.get("attacks", []):
            counts[attack["target"]] = counts.get(attack["target"], 0) + 1

        for node_id, _ in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
            node = by_id.get(node_id)
            if node is None:
                continue
            covered = any(
                distance(node["x"], node["y"], h["x"], h["y"]) <= h.get("aggro_radius", 0.0)
                for h in honeypots
            )
            if not covered:
                return node
        return None
