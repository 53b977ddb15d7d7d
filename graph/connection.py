"""
Connection Entity.

Responsibility boundaries:
- Represents a throughput-carrying link between two nodes.
- Undirected: (a, b) and (b, a) share a single canonical key.
"""

from typing import Tuple


def connection_key(a: str, b: str) -> Tuple[str, str]:
    """Canonical unordered-pair key, lexicographically ordered."""
    return (a, b) if a < b else (b, a)


class Connection:
    """Link between two nodes. `throughput` is recomputed every tick."""

    def __init__(self, from_id: str, to_id: str, base_throughput: float = 100.0, level: int = 1):
        if from_id == to_id:
            raise ValueError(f"Self-loops are not allowed: {from_id} -> {to_id}")

        self._from_id = from_id
        self._to_id = to_id
        self._base_throughput = base_throughput
        self.level = level
        self.max_throughput = base_throughput * level
        self.throughput = 0.0

    @property
    def from_id(self) -> str:
        return self._from_id

    @property
    def to_id(self) -> str:
        return self._to_id

    @property
    def key(self) -> Tuple[str, str]:
        return connection_key(self._from_id, self._to_id)

    def touches(self, node_id: str) -> bool:
        return node_id == self._from_id or node_id == self._to_id

    def other_end(self, node_id: str) -> str:
        return self._to_id if node_id == self._from_id else self._from_id

    def upgrade(self) -> None:
        self.level += 1
        self.max_throughput = self._base_throughput * self.level

    @property
    def is_overloaded(self) -> bool:
        return self.throughput >= self.max_throughput

    def __repr__(self) -> str:
        return (f"Connection({self._from_id} <-> {self._to_id}, "
                f"lvl={self.level}, tp={self.throughput}/{self.max_throughput})")
