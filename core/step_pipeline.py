"""
Tick Pipeline.

Responsibility boundaries:
- Advances every system exactly once per frame, in a fixed order:
    1. registry.update()            income, honeypot threat decay
    2. refill_routers()             auto-generate Hosts into free router slots
    3. topology.update()            per-edge throughput
    4. attack_engine.update()       damage over time, final resolution
    5. threat recompute + decay
    6. cleanup_dead_nodes()         poll health <= 0 and purge everywhere
- Death is polled once after all damage is applied, never event-pushed.
"""

from dataclasses import dataclass, field
from typing import List

from core.state import SimulationState
from graph.node import NodeType
from graph.topology_events import DeviceLeaveEvent, RouterHostRefillEvent


@dataclass
class TickReport:
    """Summary of what one tick did."""
    tick: int
    time: float
    income: float = 0.0
    hosts_created: List[str] = field(default_factory=list)
    removed_nodes: List[str] = field(default_factory=list)
    threat_level: float = 0.0
    firewall_triggered: bool = False


class TickPipeline:
    """
    Formalizer for the strict per-frame update order.
    """

    def execute(self, state: SimulationState, time: float, delta: float) -> TickReport:
        state.advance_clock(time)
        report = TickReport(tick=state.tick, time=time)

        report.income = state.registry.update(time, delta)
        report.hosts_created = self.refill_routers(state)
        state.topology.update()
        state.attack_engine.update(time, delta)

        state.threat.calculate_threat_from_data(state.registry)
        state.threat.update(delta)
        report.threat_level = state.threat.get_threat_level()
        report.firewall_triggered = state.threat.should_trigger_ai_firewall()

        report.removed_nodes = self.cleanup_dead_nodes(state)

        if state.logger:
            state.logger.log_event("tick_completed", {
                "tick": report.tick, "time": time, "income": report.income,
                "removed": list(report.removed_nodes), "threat": report.threat_level,
            })
        return report

    def refill_routers(self, state: SimulationState) -> List[str]:
        created: List[str] = []
        for router in state.registry.get_nodes_by_type(NodeType.ROUTER):
            created.extend(RouterHostRefillEvent(router.node_id).apply(state))
        return created

    def cleanup_dead_nodes(self, state: SimulationState) -> List[str]:
        dead = [node.node_id for node in state.registry.get_all_nodes() if node.is_dead]
        for node_id in dead:
            DeviceLeaveEvent(node_id).apply(state)
        return dead
