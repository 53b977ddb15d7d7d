"""
Observation Builder.

Responsibility boundaries:
- Constructs pull-only views of the simulation for presentation code and agents.
- Defender/presentation view: full state plus economy, threat and fog flags.
- Attacker view: node positions, health and links; no economy.

Mutation constraints:
- Produces entirely new output dicts. No references to live simulation state.
"""

from typing import Any, Dict, List

from core.state import SimulationState
from graph.node import HoneypotData, HostData, RouterData, NodeData
from utils.cidr_utils import get_tier_name


class ObservationBuilder:
    """
    Constructs read-only snapshots based on agent role.
    """

    def build_observation(self, state: SimulationState, agent_id: str) -> Dict[str, Any]:
        """
        Create a customized view of the simulation for the specified agent.

        Args:
            state: The simulation state.
            agent_id: Identifier of the consumer (starts with 'atk' or 'def').

        Returns:
            A sanitized dictionary describing the observed state.
        """
        if agent_id.startswith("atk"):
            return self._build_attacker_observation(state)
        elif agent_id.startswith("def"):
            return self._build_defender_observation(state)
        else:
            return {"time": state.time, "error": "Unknown agent role"}

    def _node_view(self, state: SimulationState, node: NodeData) -> Dict[str, Any]:
        view = {
            "node_id": node.node_id,
            "node_type": node.node_type.value,
            "x": node.x,
            "y": node.y,
            "level": node.level,
            "health": node.health,
            "max_health": node.max_health,
            "connections": list(node.connections),
        }
        if isinstance(node, HostData):
            view["income"] = state.registry.get_income(node.node_id)
        elif isinstance(node, RouterData):
            view["max_slots"] = state.registry.get_router_max_slots(node.node_id)
            view["host_count"] = state.registry.get_router_host_count(node.node_id)
        elif isinstance(node, HoneypotData):
            view["aggro_radius"] = state.registry.get_honeypot_aggro_radius(node.node_id)
            view["threat_level"] = node.threat_level
        return view

    def _connection_views(self, state: SimulationState) -> List[Dict[str, Any]]:
        return [
            {
                "source": conn.from_id,
                "target": conn.to_id,
                "level": conn.level,
                "throughput": conn.throughput,
                "max_throughput": conn.max_throughput,
                "overloaded": conn.is_overloaded,
            }
            for conn in state.topology.get_all_connections()
        ]

    def _build_attacker_observation(self, state: SimulationState) -> Dict[str, Any]:
        engine = state.attack_engine
        nodes_info = []
        for node in state.registry.get_all_nodes():
            nodes_info.append({
                "node_id": node.node_id,
                "node_type": node.node_type.value,
                "x": node.x,
                "y": node.y,
                "health": node.health,
                "obfuscated": engine.is_node_obfuscated(node.node_id),
            })

        return {
            "time": state.time,
            "nodes": nodes_info,
            "edges": [{"source": c.from_id, "target": c.to_id} for c in state.topology.get_all_connections()],
            "active_attacks": len(engine.get_active_attacks()),
        }

    def _build_defender_observation(self, state: SimulationState) -> Dict[str, Any]:
        visible = set(state.visibility.visible_node_ids())
        nodes_info = []
        for node in state.registry.get_all_nodes():
            view = self._node_view(state, node)
            view["visible"] = node.node_id in visible
            view["upgrade_cost"] = state.registry.get_upgrade_cost(node.node_id)
            nodes_info.append(view)

        attacks = [
            {
                "attack_id": a.attack_id,
                "source": a.source_id,
                "target": a.target_id,
                "damage": a.damage,
                "duration": a.duration,
                "start_time": a.start_time,
            }
            for a in state.attack_engine.get_active_attacks()
        ]

        progression = state.progression
        prestige = progression.get_prestige_data()
        return {
            "time": state.time,
            "nodes": nodes_info,
            "edges": self._connection_views(state),
            "attacks": attacks,
            "money": progression.get_money(),
            "total_accumulated": progression.get_total_accumulated(),
            "tier": get_tier_name(progression.get_current_tier()),
            "vision_radius": progression.get_vision_radius(),
            "total_prestiges": prestige.total_prestiges,
            "threat_percentage": state.threat.get_threat_percentage(),
            "firewall_triggered": state.threat.should_trigger_ai_firewall(),
            "visibility_percentage": state.visibility.get_visibility_percentage(),
        }
