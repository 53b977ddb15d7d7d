"""
Random Attacker Agent.

Responsibility boundaries:
- Generates the automated attacks the player defends against.
- Picks a random link from its observation and attacks one end from the other.
- Draws only from the shared CentralizedRNG so runs can be replayed.
"""

from typing import Any, Dict, List, Tuple

from agents.base_agent import BaseAgent
from core.actions import AttackOrder
from utils.rng import CentralizedRNG


class RandomAttacker(BaseAgent):
    """
    An attacker that launches attacks at random across known links.
    """

    def __init__(self, agent_id: str, rng: CentralizedRNG, attack_probability: float = 0.2,
                 damage_range: Tuple[float, float] = (10.0, 40.0),
                 duration_range: Tuple[float, float] = (1000.0, 3000.0)):
        super().__init__(agent_id)
        self._rng = rng
        self.attack_probability = attack_probability
        self.damage_range = damage_range
        self.duration_range = duration_range

    def act(self, observation: Dict[str, Any]) -> AttackOrder:
        edges = observation.get("edges", [])
        if not edges or self._rng.random() >= self.attack_probability:
            return AttackOrder(self.agent_id)

        obfuscated = {n["node_id"] for n in observation.get("nodes", []) if n.get("obfuscated")}
        candidates: List[Tuple[str, str]] = []
        for edge in edges:
            if edge["target"] not in obfuscated:
                candidates.append((edge["source"], edge["target"]))
            if edge["source"] not in obfuscated:
                candidates.append((edge["target"], edge["source"]))
        if not candidates:
            return AttackOrder(self.agent_id)

        source, target = self._rng.choice(candidates)
        return AttackOrder(
            self.agent_id,
            source_node=source,
            target_node=target,
            damage=self._rng.uniform(*self.damage_range),
            duration=self._rng.uniform(*self.duration_range),
        )
