import sys
import os

# Add project root to path for imports
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from agents.greedy_defender import GreedyDefender
from agents.random_attacker import RandomAttacker
from config.config import SimulationConfig
from core.environment import SimulationEngine
from utils.logger import AuditLogger
from utils.rng import CentralizedRNG


def main(frames: int = 600, tick_ms: float = 16.0) -> None:
    """
    Entry point: run a short headless session of one router, a random
    attacker and a greedy defender, and print a summary.
    """
    config = SimulationConfig()
    logger = AuditLogger()
    rng = CentralizedRNG(seed=config.seed)
    engine = SimulationEngine(config, logger)
    attacker = RandomAttacker("atk_1", rng, attack_probability=0.02)
    defender = GreedyDefender("def_1")

    engine.place_router(0.0, 0.0)
    time = 0.0
    for _ in range(frames):
        engine.apply_action(defender.act(engine.get_observation_by_id("def_1")))
        engine.apply_attack_order(attacker.act(engine.get_observation_by_id("atk_1")))
        time += tick_ms
        engine.step(time, tick_ms)

    obs = engine.get_observation_by_id("def_1")
    print(f"Frames: {frames} | Nodes: {len(obs['nodes'])} | Money: {obs['money']:.1f} | "
          f"Threat: {obs['threat_percentage'] * 100:.0f}% | Tier: {obs['tier']}")
    print(f"Attacks started: {len(logger.get_events('attack_started'))} | "
          f"redirected: {len(logger.get_events('attack_redirected'))} | "
          f"nodes lost: {len(logger.get_events('node_removed'))}")


if __name__ == "__main__":
    main()
