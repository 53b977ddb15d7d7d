"""
End-to-end frames through the SimulationEngine driver.
"""

import sys
import os
import math

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from agents.random_attacker import RandomAttacker
from config.config import SimulationConfig
from core.actions import ActionType, AttackOrder, InvalidActionError, PlayerAction
from core.environment import SimulationEngine
from graph.node import NodeType
from utils.cidr_utils import CIDRTier
from utils.logger import AuditLogger
from utils.rng import CentralizedRNG


def test_router_placement_fills_host_ring():
    engine = SimulationEngine()
    router_id = engine.place_router(0, 0)
    state = engine.state

    assert router_id == "router_0"
    hosts = state.registry.get_nodes_by_type(NodeType.HOST)
    assert [h.node_id for h in hosts] == ["host_1", "host_2", "host_3", "host_4"]

    expected = [(40.0, 0.0), (0.0, 40.0), (-40.0, 0.0), (0.0, -40.0)]
    for host, (ex, ey) in zip(hosts, expected):
        assert host.x == pytest.approx(ex, abs=1e-9)
        assert host.y == pytest.approx(ey, abs=1e-9)
        assert math.hypot(host.x, host.y) == pytest.approx(40.0)
        assert host.node_id in state.registry.get_node(router_id).connections
        assert state.topology.is_connected(router_id, host.node_id)
        assert state.attack_engine.is_registered(host.node_id)

    assert state.registry.get_router_host_count(router_id) == 4
    assert not state.registry.router_has_available_slots(router_id)


def test_first_second_of_income():
    engine = SimulationEngine()
    engine.place_router(0, 0)

    report = engine.step(1000, 1000)
    assert report.tick == 1
    assert report.income == 40
    assert engine.state.progression.get_money() == 40
    assert report.hosts_created == []
    assert report.removed_nodes == []

    # nothing is due again until another full interval has passed
    assert engine.step(1500, 500).income == 0


def test_dead_host_is_purged_then_refilled():
    engine = SimulationEngine()
    router_id = engine.place_router(0, 0)
    state = engine.state
    state.registry.take_damage("host_1", 10_000)

    report = engine.step(1000, 1000)
    assert report.removed_nodes == ["host_1"]
    assert not state.registry.has_node("host_1")
    assert not state.topology.is_connected(router_id, "host_1")
    assert not state.attack_engine.is_registered("host_1")
    assert state.registry.get_router_host_count(router_id) == 3

    report = engine.step(2000, 1000)
    assert report.hosts_created == ["host_5"]
    assert state.registry.get_router_host_count(router_id) == 4
    # the replacement takes the first free ring position
    refill = state.registry.get_node("host_5")
    assert refill.x == pytest.approx(0.0, abs=1e-9)
    assert refill.y == pytest.approx(-40.0)


def test_short_link_range_does_not_pile_up_hosts():
    engine = SimulationEngine(SimulationConfig(max_connection_range=30.0))
    engine.place_router(0, 0)
    registry = engine.state.registry

    counts = [registry.get_node_count()]
    for frame in range(1, 6):
        report = engine.step(frame * 100.0, 100.0)
        assert report.hosts_created == []
        counts.append(registry.get_node_count())
    assert counts == [1] * 6

    # widening the range at runtime lets the next tick fill the ring
    engine.state.topology.set_max_connection_range(200.0)
    assert len(engine.step(700.0, 100.0).hosts_created) == 4
    assert registry.get_node_count() == 5


def test_failed_host_link_removes_the_host():
    engine = SimulationEngine()
    state = engine.state
    state.topology.create_connection_from_data = lambda from_id, to_id: False

    router_id = engine.place_router(0, 0)
    assert state.registry.get_node_count() == 1
    assert not state.attack_engine.is_registered("host_1")
    assert state.visibility.visible_node_ids() == [router_id]

    for frame in range(1, 4):
        engine.step(frame * 100.0, 100.0)
    assert state.registry.get_node_count() == 1
    assert state.registry.get_router_host_count(router_id) == 0


def test_attack_kills_host_and_router_recovers():
    engine = SimulationEngine()
    router_id = engine.place_router(0, 0)
    state = engine.state

    # host max health is 55: 25 over the first half, then the full 50 at resolution
    assert engine.launch_attack(router_id, "host_2", 50, 1000)
    engine.step(500, 500)
    assert state.registry.get_node("host_2").health == pytest.approx(30.0)
    report = engine.step(1000, 500)
    assert "host_2" in report.removed_nodes
    assert state.attack_engine.get_active_attacks() == []
    assert engine.step(1500, 500).hosts_created == ["host_5"]


def test_prestige_clears_world_and_keeps_identity():
    engine = SimulationEngine()
    engine.place_router(0, 0)
    engine.step(1000, 1000)
    state = engine.state
    registry = state.registry

    assert engine.prestige()
    assert engine.state is state
    assert state.registry is registry
    assert registry.get_node_count() == 0
    assert state.topology.get_all_connections() == []
    assert state.progression.get_current_tier() == CIDRTier.CIDR_20
    assert state.progression.get_money() == 0
    assert state.progression.get_prestige_data().total_prestiges == 1

    # a /20 router holds more hosts than a /24 one
    router_id = engine.place_router(0, 0)
    assert state.registry.get_router_host_count(router_id) == 8

    assert engine.prestige(CIDRTier.CIDR_8)
    assert not engine.prestige()
    assert state.progression.get_current_tier() == CIDRTier.CIDR_8


def test_double_removal_is_a_no_op():
    engine = SimulationEngine()
    router_id = engine.place_router(0, 0)
    state = engine.state

    assert engine.remove_node("host_3")
    assert not engine.remove_node("host_3")
    assert "host_3" not in state.registry.get_node(router_id).connections
    assert len(state.topology.get_node_connections(router_id)) == 3
    assert not engine.remove_node("never-existed")


def test_link_rolls_back_when_out_of_range():
    engine = SimulationEngine()
    near = engine.place_node(NodeType.VPN, 0, 0, node_id="vpn-a")
    far = engine.place_node(NodeType.VPN, 500, 0, node_id="vpn-b")
    close = engine.place_node(NodeType.VPN, 150, 0, node_id="vpn-c")
    registry = engine.state.registry

    assert not engine.link_nodes(near, far)
    assert registry.get_node(near).connections == []
    assert registry.get_node(far).connections == []

    assert engine.link_nodes(near, close)
    assert not engine.link_nodes(close, near)
    assert engine.state.topology.number_of_connections() == 1

    assert engine.place_node(NodeType.VPN, 10, 10, node_id="vpn-a") is None


def test_apply_action_commands():
    engine = SimulationEngine()
    router_id = engine.place_router(0, 0)

    assert not engine.apply_action(PlayerAction("def_1", ActionType.UPGRADE_NODE, target_node=router_id))
    assert engine.apply_action(PlayerAction("def_1", ActionType.PLACE_HONEYPOT, position=(60, 0)))
    assert not engine.apply_action(PlayerAction("def_1", ActionType.NO_OP))
    assert not engine.apply_action(PlayerAction("def_1", ActionType.UPGRADE_CONNECTION,
                                                target_node=router_id, peer_node="ghost"))

    engine.state.progression.add_money(1000)
    assert engine.apply_action(PlayerAction("def_1", ActionType.UPGRADE_NODE, target_node=router_id))
    assert engine.apply_action(PlayerAction("def_1", ActionType.UPGRADE_CONNECTION,
                                            target_node=router_id, peer_node="host_1"))
    assert engine.state.topology.get_connection(router_id, "host_1").level == 2

    assert engine.apply_action(PlayerAction("def_1", ActionType.PLACE_ROUTER, position=(150, 0)))
    assert engine.apply_action(PlayerAction("def_1", ActionType.PRESTIGE))
    assert engine.state.registry.get_node_count() == 0


def test_malformed_commands_raise():
    with pytest.raises(InvalidActionError):
        PlayerAction("def_1", ActionType.UPGRADE_NODE)
    with pytest.raises(InvalidActionError):
        PlayerAction("def_1", ActionType.PLACE_ROUTER)
    with pytest.raises(InvalidActionError):
        PlayerAction("def_1", ActionType.UPGRADE_CONNECTION, target_node="a")
    with pytest.raises(InvalidActionError):
        PlayerAction("def_1", ActionType.PRESTIGE, target_node="a")
    with pytest.raises(InvalidActionError):
        AttackOrder("atk_1", source_node="a")
    with pytest.raises(InvalidActionError):
        AttackOrder("atk_1", source_node="a", target_node="b", duration=0)

    engine = SimulationEngine()
    assert not engine.apply_attack_order(AttackOrder("atk_1"))


def test_audit_log_records_lifecycle():
    logger = AuditLogger()
    engine = SimulationEngine(logger=logger)
    router_id = engine.place_router(0, 0)

    assert len(logger.get_events("node_created")) == 5
    engine.launch_attack(router_id, "host_1", 10_000, 100)
    engine.step(100, 100)

    assert logger.get_events("attack_started")[0].data["target"] == "host_1"
    assert len(logger.get_events("attack_resolved")) == 1
    assert logger.get_events("node_removed")[0].data["node_id"] == "host_1"
    tick = logger.get_events("tick_completed")[-1]
    assert tick.data["removed"] == ["host_1"]

    sequences = [r.sequence for r in logger.get_events()]
    assert sequences == sorted(sequences)
    with pytest.raises(TypeError):
        tick.data["tick"] = 99


def test_observations_by_role():
    engine = SimulationEngine()
    engine.place_router(0, 0)
    engine.step(1000, 1000)

    atk = engine.get_observation_by_id("atk_1")
    defender = engine.get_observation_by_id("def_1")
    assert "money" not in atk
    assert len(atk["nodes"]) == 5 and len(atk["edges"]) == 4
    assert defender["money"] == 40
    assert defender["tier"] == "/24"
    assert all(n["visible"] for n in defender["nodes"])
    assert "error" in engine.get_observation_by_id("observer")

    observations = engine.reset()
    assert set(observations) == {"atk", "def"}
    assert observations["def"]["nodes"] == []


def run_scripted(seed):
    engine = SimulationEngine()
    attacker = RandomAttacker("atk_1", CentralizedRNG(seed), attack_probability=0.5)
    engine.place_router(0, 0)
    engine.place_router(150, 0)
    engine.link_nodes("router_0", "router_5")
    time = 0.0
    for _ in range(60):
        engine.apply_attack_order(attacker.act(engine.get_observation_by_id("atk_1")))
        time += 50.0
        engine.step(time, 50.0)
    return engine.state.compute_state_hash()


def test_identical_inputs_give_identical_state():
    assert run_scripted(7) == run_scripted(7)
    assert len(run_scripted(7)) == 64


if __name__ == "__main__":
    test_router_placement_fills_host_ring()
    test_first_second_of_income()
    test_prestige_clears_world_and_keeps_identity()
    test_identical_inputs_give_identical_state()
    print("Environment verification SUCCESS")
