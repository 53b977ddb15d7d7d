"""
Base Agent.

Responsibility boundaries:
- Receives observations and emits commands (PlayerAction or AttackOrder).
- Never touches simulation state directly; the SimulationEngine applies commands.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class BaseAgent(ABC):
    """
    Abstract representation of an automated player or adversary.
    """

    def __init__(self, agent_id: str) -> None:
        self.agent_id = agent_id

    @abstractmethod
    def act(self, observation: Dict[str, Any]) -> Any:
        """
        Process an observation and return a chosen command.

        Args:
            observation: A view built by `ObservationBuilder` for this agent's role.

        Returns:
            The command to be applied by the engine.
        """
        pass
