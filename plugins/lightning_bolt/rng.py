"""
Random Source for Bolt Generation

Every random draw made while growing a bolt goes through one of these
objects, so a fixed seed reproduces the same bolt exactly. Anything with
the same two methods (value, range_int) can stand in for
BoltRandom, e.g. a scripted source in tests.

Integer ranges use game-engine semantics: the upper bound is exclusive,
and a collapsed range (hi <= lo) always returns lo.
"""

import numpy as np


class BoltRandom:
    """Seedable random stream backed by numpy's Generator."""

    def __init__(self, seed=None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def value(self):
        """Uniform float in [0, 1)."""
        return float(self._rng.random())

    def range_int(self, lo, hi):
        """Uniform integer in [lo, hi). Returns lo when hi <= lo."""
        if hi <= lo:
            return int(lo)
        return int(self._rng.integers(lo, hi))

