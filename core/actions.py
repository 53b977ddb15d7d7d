"""
Action Schema.

Responsibility boundaries:
- Defines strict, immutable commands issued by players and agents.
- Enforces structural validation of payloads at construction time.

Mutation constraints:
- Actions are strictly immutable post-initialization.
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Dict, Any, Optional


class ActionType(Enum):
    PLACE_ROUTER = auto()
    PLACE_HONEYPOT = auto()
    UPGRADE_NODE = auto()
    UPGRADE_CONNECTION = auto()
    PRESTIGE = auto()
    NO_OP = auto()


class InvalidActionError(Exception):
    pass


@dataclass(frozen=True)
class PlayerAction:
    """
    Defender-side command.

    PLACE_*            require `position`.
    UPGRADE_NODE       requires `target_node`.
    UPGRADE_CONNECTION requires `target_node` and `peer_node`.
    PRESTIGE / NO_OP   take no target.
    """
    agent_id: str
    action_type: ActionType
    target_node: Optional[str] = None
    peer_node: Optional[str] = None
    position: Optional[tuple] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        placement = {ActionType.PLACE_ROUTER, ActionType.PLACE_HONEYPOT}
        untargeted = {ActionType.PRESTIGE, ActionType.NO_OP}

        if self.action_type in placement:
            if self.position is None or len(self.position) != 2:
                raise InvalidActionError(f"Action '{self.action_type.name}' requires an (x, y) position.")
        elif self.action_type in untargeted:
            if self.target_node is not None:
                raise InvalidActionError(f"Action '{self.action_type.name}' must not specify a target_node.")
        elif not self.target_node:
            raise InvalidActionError(f"Action '{self.action_type.name}' requires a target_node.")

        if self.action_type == ActionType.UPGRADE_CONNECTION and not self.peer_node:
            raise InvalidActionError("Action 'UPGRADE_CONNECTION' requires a peer_node.")


@dataclass(frozen=True)
class AttackOrder:
    """
    Attacker-side command: launch a damage-over-time attack.
    An order with no source is a no-op.
    """
    agent_id: str
    source_node: Optional[str] = None
    target_node: Optional[str] = None
    damage: float = 0.0
    duration: float = 1000.0

    def __post_init__(self) -> None:
        if (self.source_node is None) != (self.target_node is None):
            raise InvalidActionError("AttackOrder needs both source_node and target_node, or neither.")
        if self.damage < 0:
            raise InvalidActionError("AttackOrder damage must be non-negative.")
        if self.duration <= 0:
            raise InvalidActionError("AttackOrder duration must be positive.")

    @property
    def is_no_op(self) -> bool:
        return self.source_node is None
