from __future__ import annotations

"""
Per-call random generators for team selection.

- get_rng(seed=None): a new, independent numpy Generator (seeded when provided).
- weighted_index(weights, rng): index drawn proportionally to integer weights.

No module-level generator exists: concurrent requests never share state.
"""

from typing import Optional, Sequence

import numpy as np


def get_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Return a fresh Generator; unseeded calls draw OS entropy."""
    return np.random.default_rng(seed)


def weighted_index(weights: Sequence[int], rng: np.random.Generator) -> int:
    """Pick an index with probability proportional to its weight.

    A uniform integer in ``[0, total)`` is drawn and the first index whose
    cumulative weight exceeds it wins.  When the total is not positive the
    pick is uniform.
    """
    n = len(weights)
    if n == 0:
        raise ValueError("weighted_index() needs at least one weight")
    cumulative = np.cumsum(np.asarray(weights, dtype=np.int64))
    total = int(cumulative[-1])
    if total <= 0:
        return int(rng.integers(n))
    roll = int(rng.integers(0, total))
    return int(np.searchsorted(cumulative, roll, side="right"))
