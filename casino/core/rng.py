import random
import secrets
from typing import Optional, Sequence


class TrueRNG:
    """
    Random source backed by Python's `secrets` module.
    Cryptographically strong; used for live tables.
    """

    @staticmethod
    def random_int(min_val: int, max_val: int) -> int:
        """Returns a random integer in the range [min_val, max_val] (inclusive)."""
        if min_val > max_val:
            raise ValueError("min_val must be less than or equal to max_val")
        return min_val + secrets.randbelow(max_val - min_val + 1)

    @staticmethod
    def random_choice(options: Sequence):
        """Returns a random element from a non-empty sequence."""
        if not options:
            raise IndexError("Cannot choose from an empty sequence")
        return secrets.choice(options)


class SeededRNG:
    """
    Reproducible random source for simulations and replays.
    Same interface as TrueRNG.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._random = random.Random(seed)

    def random_int(self, min_val: int, max_val: int) -> int:
        if min_val > max_val:
            raise ValueError("min_val must be less than or equal to max_val")
        return self._random.randint(min_val, max_val)

    def random_choice(self, options: Sequence):
        if not options:
            raise IndexError("Cannot choose from an empty sequence")
        return self._random.choice(options)


def make_rng(seed: Optional[int] = None):
    """TrueRNG unless a seed is given."""
    if seed is None:
        return TrueRNG()
    return SeededRNG(seed)


rng = TrueRNG()
