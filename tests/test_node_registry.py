"""
Node Registry: factories, derived stats, damage, adjacency and upgrades.
"""

import sys
import os
import math

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from graph.node import (
    NodeType,
    NodeData,
    NODE_BASE_MAX_HEALTH,
    NODE_RECORD_CLASSES,
    HostData,
    RouterData,
    HoneypotData,
)
from graph.node_registry import NodeRegistry
from progression.progression_state import ProgressionState
from utils.cidr_utils import CIDRTier


def make_registry():
    progression = ProgressionState()
    return NodeRegistry(progression), progression


def test_every_type_has_record_and_health():
    assert set(NODE_RECORD_CLASSES) == set(NodeType)
    assert set(NODE_BASE_MAX_HEALTH) == set(NodeType)
    for record_cls in NODE_RECORD_CLASSES.values():
        assert issubclass(record_cls, NodeData)


def test_max_health_formula_for_all_types():
    registry, _ = make_registry()
    for node_type in NodeType:
        for level in (1, 2, 5):
            node = registry.create_node(node_type, 0.0, 0.0, level=level)
            expected = NODE_BASE_MAX_HEALTH[node_type] * (1 + level * 0.1)
            assert node.max_health == expected
            assert node.health == node.max_health


def test_factories_assign_ids_and_variants():
    registry, _ = make_registry()
    host = registry.create_host(10, 20)
    router = registry.create_router(0, 0)
    honeypot = registry.create_honeypot(5, 5, node_id="hp-main")

    assert isinstance(host, HostData) and host.base_income == 10
    assert isinstance(router, RouterData)
    assert isinstance(honeypot, HoneypotData) and honeypot.threat_level == 0
    assert honeypot.node_id == "hp-main"
    assert len({host.node_id, router.node_id, honeypot.node_id}) == 3
    assert registry.get_node(host.node_id) is host

    # explicit id collision is rejected
    assert registry.create_host(0, 0, node_id="hp-main") is None

    assert [n.node_id for n in registry.get_nodes_by_type(NodeType.HOST)] == [host.node_id]
    assert registry.get_node_count() == 3


def test_add_connection_is_symmetric_and_unique():
    registry, _ = make_registry()
    a = registry.create_router(0, 0)
    b = registry.create_host(10, 0)

    assert registry.add_connection(a.node_id, b.node_id)
    assert not registry.add_connection(b.node_id, a.node_id)
    assert not registry.add_connection(a.node_id, "ghost")
    assert a.connections == [b.node_id]
    assert b.connections == [a.node_id]

    registry.remove_connection(a.node_id, b.node_id)
    registry.remove_connection(a.node_id, b.node_id)
    assert a.connections == [] and b.connections == []


def test_remove_node_unlinks_neighbours():
    registry, _ = make_registry()
    a = registry.create_router(0, 0)
    b = registry.create_host(10, 0)
    c = registry.create_host(0, 10)
    registry.add_connection(a.node_id, b.node_id)
    registry.add_connection(a.node_id, c.node_id)

    assert registry.remove_node(a.node_id)
    assert registry.get_node(a.node_id) is None
    assert a.node_id not in b.connections
    assert a.node_id not in c.connections
    assert not registry.remove_node(a.node_id)


def test_take_damage_floors_and_stays_dead():
    registry, _ = make_registry()
    router = registry.create_router(0, 0)

    assert not registry.take_damage(router.node_id, 10)
    assert router.health == pytest.approx(router.max_health - 10)

    assert not router.is_dead
    assert registry.take_damage(router.node_id, 10_000)
    assert router.is_dead
    assert router.health == 0
    # already dead: health stays clamped and the signal stays True
    assert registry.take_damage(router.node_id, 5)
    assert router.health == 0
    # registry never purges on its own
    assert registry.has_node(router.node_id)

    assert not registry.take_damage("ghost", 10)


def test_heal_caps_at_max():
    registry, _ = make_registry()
    host = registry.create_host(0, 0)
    registry.take_damage(host.node_id, 20)
    registry.heal(host.node_id, 5)
    assert host.health == pytest.approx(host.max_health - 15)
    registry.heal(host.node_id, 1000)
    assert host.health == host.max_health


def test_upgrade_costs():
    registry, _ = make_registry()
    host = registry.create_host(0, 0)
    router = registry.create_router(0, 0)
    honeypot = registry.create_honeypot(0, 0)
    tor = registry.create_node(NodeType.TOR, 0, 0)

    assert registry.get_upgrade_cost(host.node_id) == pytest.approx(75.0)
    assert registry.get_upgrade_cost(router.node_id) == 200
    assert registry.get_upgrade_cost(honeypot.node_id) == 600
    assert registry.get_upgrade_cost(tor.node_id) == 200
    assert registry.get_upgrade_cost("ghost") == math.inf


def test_upgrade_spends_money_and_fully_heals():
    registry, progression = make_registry()
    host = registry.create_host(0, 0)
    registry.take_damage(host.node_id, 30)

    assert not registry.upgrade(host.node_id)
    assert host.level == 1

    progression.add_money(1000)
    assert registry.upgrade(host.node_id)
    assert host.level == 2
    assert host.max_health == NODE_BASE_MAX_HEALTH[NodeType.HOST] * (1 + 2 * 0.1)
    assert host.health == host.max_health
    assert progression.get_money() == pytest.approx(925.0)

    assert not registry.upgrade("ghost")


def test_income_generation_interval():
    registry, progression = make_registry()
    host = registry.create_host(0, 0)
    router = registry.create_router(0, 0)

    assert registry.get_income(host.node_id) == 10
    assert registry.get_income(router.node_id) == 0

    assert registry.generate_income(host.node_id, 999) == 0
    assert registry.generate_income(host.node_id, 1000) == 10
    assert progression.get_money() == 10
    assert progression.get_total_accumulated() == 10
    assert registry.generate_income(host.node_id, 1500) == 0
    assert registry.generate_income(router.node_id, 5000) == 0


def test_router_slots_follow_tier_and_level():
    registry, progression = make_registry()
    router = registry.create_router(0, 0)
    assert registry.get_router_max_slots(router.node_id) == 4

    router_l2 = registry.create_router(0, 0, level=2)
    assert registry.get_router_max_slots(router_l2.node_id) == 5

    progression.set_tier(CIDRTier.CIDR_8)
    assert registry.get_router_max_slots(router.node_id) == 64
    progression.set_tier(CIDRTier.CIDR_30)
    assert registry.get_router_max_slots(router.node_id) == 1

    host = registry.create_host(0, 0)
    assert registry.get_router_max_slots(host.node_id) == 0


def test_router_host_count():
    registry, _ = make_registry()
    router = registry.create_router(0, 0)
    hosts = [registry.create_host(i, 0) for i in range(3)]
    honeypot = registry.create_honeypot(0, 5)
    for h in hosts:
        registry.add_connection(router.node_id, h.node_id)
    registry.add_connection(router.node_id, honeypot.node_id)

    assert registry.get_router_host_count(router.node_id) == 3
    assert registry.router_has_available_slots(router.node_id)
    registry.add_connection(router.node_id, registry.create_host(9, 9).node_id)
    assert not registry.router_has_available_slots(router.node_id)


def test_honeypot_radius_and_threat():
    registry, _ = make_registry()
    honeypot = registry.create_honeypot(0, 0)
    assert registry.get_honeypot_aggro_radius(honeypot.node_id) == pytest.approx(230.0)

    registry.add_honeypot_threat(honeypot.node_id, 5)
    registry.add_honeypot_threat(honeypot.node_id, 2.5)
    assert honeypot.threat_level == pytest.approx(7.5)
    registry.reduce_honeypot_threat(honeypot.node_id, 100)
    assert honeypot.threat_level == 0


def test_update_generates_income_and_decays_honeypots():
    registry, progression = make_registry()
    registry.create_host(0, 0)
    registry.create_host(5, 0)
    honeypot = registry.create_honeypot(0, 0)
    registry.add_honeypot_threat(honeypot.node_id, 5)

    generated = registry.update(1000, 1000)
    assert generated == 20
    assert progression.get_money() == 20
    assert honeypot.threat_level == pytest.approx(4.0)


if __name__ == "__main__":
    test_max_health_formula_for_all_types()
    test_take_damage_floors_and_stays_dead()
    test_upgrade_spends_money_and_fully_heals()
    print("Node registry verification SUCCESS")
