"""
Centralized Random Number Generator Utility.

The simulation core is deterministic; randomness only enters through
automated agents (attack scheduling, scripted defence). Those agents draw
from a single seeded instance so whole runs can be replayed.

Mutation constraints:
- The internal state is mutated only when drawing random numbers.
- The seed can only be set once during initialization.
"""

import random
from typing import Any, Optional, Sequence


class CentralizedRNG:
    """
    A centralized random number generator to enforce reproducibility.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._seed = seed
        self._rng_instance = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def random(self) -> float:
        """Draw a float in [0, 1)."""
        return self._rng_instance.random()

    def uniform(self, a: float, b: float) -> float:
        return self._rng_instance.uniform(a, b)

    def choice(self, seq: Sequence[Any]) -> Any:
        """Randomly choose an element from a non-empty sequence."""
        return self._rng_instance.choice(seq)
