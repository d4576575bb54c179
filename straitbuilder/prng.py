"""Seeded pseudo-random draws.

Every random decision in the generators comes from here.  There is no
hidden state: a caller that needs several draws offsets its base seed
(``seed + 1``, ``seed + 2`` ...) so the same base seed always yields the
same sequence no matter what else the program has drawn.
"""

import math


def seeded_random(seed) -> float:
    """Return a float in [0, 1) that depends only on ``seed``."""
    x = math.sin(seed) * 10000.0
    r = x - math.floor(x)
    # float rounding can land on exactly 1.0 for tiny negative x
    return r if r < 1.0 else 0.0


def seeded_int(seed, lo: int, hi: int) -> int:
    """Integer draw in ``[lo, hi)``; returns ``lo`` when the range is empty."""
    if hi <= lo:
        return lo
    return lo + int(seeded_random(seed) * (hi - lo))


def seeded_choice(seed, options):
    """Pick one entry of a non-empty sequence."""
    return options[int(seeded_random(seed) * len(options))]


def chance(seed, probability: float) -> bool:
    """True with the given probability."""
    return seeded_random(seed) < probability


def cell_seed(seed: int, u: int, y: int, z: int) -> int:
    """Derive a per-cell seed for thinning tests (leaves, rocks, nets).

    Uses lateral ``u`` rather than world x so both shores thin the same
    cells.
    """
    return seed * 31 + u * 131 + y * 17 + z * 7919
