"""
Audit Logger.

Responsibility boundaries:
- Handles structured event logging for the simulation core.
- Writes immutable records; never mutates simulation state.

Mutation constraints:
- Records are append-only. `clear()` is the only way to drop them.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional


class AuditRecord(NamedTuple):
    sequence: int
    event_type: str
    data: Mapping[str, Any]


class AuditLogger:
    """
    A centralized logger for audit and replay purposes.
    """

    def __init__(self) -> None:
        self._records: List[AuditRecord] = []

    def log_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Log a specific event.

        Args:
            event_type: The category of the event.
            data: The event payload. A read-only copy is stored.
        """
        record = AuditRecord(len(self._records), event_type, MappingProxyType(dict(data)))
        self._records.append(record)

    def get_events(self, event_type: Optional[str] = None) -> List[AuditRecord]:
        """Return recorded events, optionally filtered by category."""
        if event_type is None:
            return list(self._records)
        return [r for r in self._records if r.event_type == event_type]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
