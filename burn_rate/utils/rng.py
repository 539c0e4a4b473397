"""Injectable RNG wrapper for combat, scans, and AI decisions."""

import random


class GameRNG:
    """Wrapper around Python's random.Random.

    Every random draw in the engine goes through an instance of this class so
    callers can pin outcomes in tests. Games are unseeded by default.
    """

    def __init__(self, seed: int | None = None):
        """Initialize RNG.

        Args:
            seed: Integer seed, or None for an unseeded generator
        """
        self.seed = seed
        self.rng = random.Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return random integer in range [a, b], inclusive."""
        return self.rng.randint(a, b)

    def uniform(self, a: float, b: float) -> float:
        """Return random float in range [a, b].

        Args:
            a: Lower bound
            b: Upper bound

        Returns:
            Random float between a and b
        """
        return self.rng.uniform(a, b)

    def choice(self, seq):
        """Choose random element from non-empty sequence."""
        return self.rng.choice(seq)

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self.rng.random()

    def get_state(self):
        """Get the current state of the RNG.

        Returns:
            RNG state tuple that can be used with set_state
        """
        return self.rng.getstate()

    def set_state(self, state):
        """Restore the RNG to a state returned by get_state."""
        self.rng.setstate(state)
