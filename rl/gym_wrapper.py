"""
Gym-Compatible Wrapper.

Responsibility boundaries:
- Conforms to the Gymnasium (gym.Env) API.
- Wraps SimulationEngine for single-agent defender control.
- Runs a fixed attacker policy internally, once per simulated frame.
- Integrates State and Action Encoders for array-based I/O.
"""

import gymnasium as gym
from gymnasium import spaces
import numpy as np
from typing import Dict, Any, Tuple, Optional

from agents.base_agent import BaseAgent
from core.environment import SimulationEngine
from encoding.action_encoder import ActionEncoder
from encoding.state_encoder import StateEncoder


class NetworkDefenseEnv(gym.Env):
    """
    Gymnasium environment where the agent plays the defender.
    One environment step applies one command, then advances `ticks_per_step`
    frames of `tick_ms` milliseconds each.
    """

    metadata = {"render_modes": ["ansi"]}

    def __init__(
        self,
        base_env: SimulationEngine,
        state_encoder: StateEncoder,
        action_encoder: ActionEncoder,
        attacker_policy: BaseAgent,
        max_steps: int = 200,
        ticks_per_step: int = 10,
        tick_ms: float = 100.0,
        defender_id: str = "def_1",
        attacker_id: str = "atk_1",
        start_position: Tuple[float, float] = (0.0, 0.0),
    ):
        super().__init__()
        self.base_env = base_env
        self.state_encoder = state_encoder
        self.action_encoder = action_encoder
        self.attacker_policy = attacker_policy
        self.max_steps = max_steps
        self.ticks_per_step = ticks_per_step
        self.tick_ms = tick_ms
        self.defender_id = defender_id
        self.attacker_id = attacker_id
        self.start_position = start_position

        self._step_count = 0
        self._time = 0.0

        self.observation_space = spaces.Box(
            low=-1.0,
            high=np.inf,
            shape=(self.state_encoder.observation_dim,),
            dtype=np.float32,
        )
        self.action_space = spaces.Discrete(self.action_encoder.action_dim)

    def _seed_world(self) -> None:
        """Every run (and every post-prestige world) starts from one router."""
        if self.base_env.state.registry.get_node_count() == 0:
            self.base_env.place_router(*self.start_position)

    def _encode(self) -> Tuple[np.ndarray, np.ndarray]:
        def_obs = self.base_env.get_observation_by_id(self.defender_id)
        return self.state_encoder.encode(def_obs), self.action_encoder.generate_action_mask(def_obs)

    def reset(self, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.base_env.reset()
        self._step_count = 0
        self._time = 0.0
        self._seed_world()

        encoded_state, action_mask = self._encode()
        return encoded_state, {"action_mask": action_mask}

    def step(self, action_index: int) -> Tuple[np.ndarray, float, bool, bool, Dict[str, Any]]:
        self._step_count += 1
        state = self.base_env.state

        # 1. Decode and apply the defender command
        def_obs = self.base_env.get_observation_by_id(self.defender_id)
        sorted_nodes = sorted(def_obs.get("nodes", []), key=lambda n: n["node_id"])
        action = self.action_encoder.decode_action(int(action_index), sorted_nodes, self.defender_id)
        action_success = self.base_env.apply_action(action)
        self._seed_world()

        # 2. Advance frames with the fixed attacker acting before each one
        accumulated_before = state.progression.get_total_accumulated()
        removed = []
        attacks_launched = 0
        for _ in range(self.ticks_per_step):
            atk_obs = self.base_env.get_observation_by_id(self.attacker_id)
            if self.base_env.apply_attack_order(self.attacker_policy.act(atk_obs)):
                attacks_launched += 1
            self._time += self.tick_ms
            report = self.base_env.step(self._time, self.tick_ms)
            removed.extend(report.removed_nodes)

        # 3. Reward: bandwidth earned minus nodes lost
        earned = max(0.0, state.progression.get_total_accumulated() - accumulated_before)
        reward = earned / 100.0 - float(len(removed))

        terminated = state.registry.get_node_count() == 0
        truncated = self._step_count >= self.max_steps

        encoded_state, action_mask = self._encode()
        info = {
            "action_mask": action_mask,
            "action_success": action_success,
            "removed_nodes": removed,
            "attacks_launched": attacks_launched,
            "threat": state.threat.get_threat_level(),
        }
        return encoded_state, float(reward), terminated, truncated, info

    def render(self):
        state = self.base_env.state
        return (f"Step {self._step_count} | nodes={state.registry.get_node_count()} "
                f"money={state.progression.get_money():.1f} threat={state.threat.get_threat_level():.1f}")
