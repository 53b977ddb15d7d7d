"""
Baseline Experiment Harness.

Responsibility boundaries:
- Runs multi-episode headless sessions of scripted defenders against the random attacker.
- Collects and prints economy and survival metrics per defender.
"""

import sys
import os
import statistics
from typing import Dict, Any

# Ensure we can import core modules
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from agents.base_agent import BaseAgent
from agents.greedy_defender import GreedyDefender
from agents.random_attacker import RandomAttacker
from agents.random_defender import RandomDefender
from core.environment import SimulationEngine
from utils.rng import CentralizedRNG


def run_episode(defender: BaseAgent, attacker: BaseAgent, frames: int = 1200,
                tick_ms: float = 50.0) -> Dict[str, Any]:
    engine = SimulationEngine()
    engine.place_router(0.0, 0.0)

    time = 0.0
    nodes_lost = 0
    for _ in range(frames):
        engine.apply_action(defender.act(engine.get_observation_by_id("def_1")))
        engine.apply_attack_order(attacker.act(engine.get_observation_by_id("atk_1")))
        time += tick_ms
        report = engine.step(time, tick_ms)
        nodes_lost += len(report.removed_nodes)

    state = engine.state
    return {
        "bandwidth": state.progression.get_total_accumulated(),
        "nodes_alive": state.registry.get_node_count(),
        "nodes_lost": nodes_lost,
        "final_threat": state.threat.get_threat_level(),
    }


def run_experiment(num_episodes: int = 20, seed: int = 999) -> Dict[str, Dict[str, float]]:
    rng = CentralizedRNG(seed=seed)
    defenders = {
        "greedy": lambda: GreedyDefender("def_greedy"),
        "random": lambda: RandomDefender("def_random", rng),
    }

    summary = {}
    for name, factory in defenders.items():
        print(f"Running {num_episodes} episodes: {name} defender vs random attacker")
        results = [
            run_episode(factory(), RandomAttacker("atk_random", rng, attack_probability=0.05))
            for _ in range(num_episodes)
        ]
        summary[name] = {
            key: statistics.mean(r[key] for r in results)
            for key in ("bandwidth", "nodes_alive", "nodes_lost", "final_threat")
        }
        print(f"  {summary[name]}")
    return summary


if __name__ == "__main__":
    run_experiment()
