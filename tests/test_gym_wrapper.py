"""
Gymnasium wrapper: spaces, reset, reward and episode limits.
"""

import sys
import os

import numpy as np
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from agents.random_attacker import RandomAttacker
from core.environment import SimulationEngine
from encoding.action_encoder import ActionEncoder
from encoding.state_encoder import StateEncoder
from rl.gym_wrapper import NetworkDefenseEnv
from utils.rng import CentralizedRNG


def make_env(attack_probability=0.0, max_steps=200):
    state_encoder = StateEncoder()
    action_encoder = ActionEncoder()
    attacker = RandomAttacker("atk_1", CentralizedRNG(21), attack_probability=attack_probability)
    return NetworkDefenseEnv(SimulationEngine(), state_encoder, action_encoder, attacker, max_steps=max_steps)


def test_reset_seeds_one_router():
    env = make_env()
    obs, info = env.reset(seed=0)

    assert obs.shape == (420,)
    assert env.observation_space.shape == (420,)
    assert env.action_space.n == 98
    assert info["action_mask"].shape == (98,)
    assert env.base_env.state.registry.get_node_count() == 5


def test_no_op_step_rewards_income():
    env = make_env()
    env.reset()
    obs, reward, terminated, truncated, info = env.step(env.action_encoder.no_op_index)

    # ten 100ms frames: each host pays out once at t=1000
    assert reward == pytest.approx(0.4)
    assert not terminated and not truncated
    assert info["removed_nodes"] == []
    assert info["attacks_launched"] == 0
    assert not info["action_success"]
    assert isinstance(obs, np.ndarray)


def test_prestige_reseeds_the_world():
    env = make_env()
    env.reset()
    env.step(env.action_encoder.no_op_index)
    _, _, terminated, _, info = env.step(env.action_encoder.prestige_index)

    assert info["action_success"]
    assert not terminated
    registry = env.base_env.state.registry
    assert registry.get_node_count() == 9
    assert env.base_env.state.progression.get_prestige_data().total_prestiges == 1


def test_truncates_at_max_steps():
    env = make_env(attack_probability=0.5, max_steps=3)
    env.reset()
    truncated = False
    for _ in range(3):
        _, _, _, truncated, _ = env.step(env.action_encoder.no_op_index)
    assert truncated
    assert "nodes=" in env.render()


if __name__ == "__main__":
    test_reset_seeds_one_router()
    test_no_op_step_rewards_income()
    print("Gym wrapper verification SUCCESS")
