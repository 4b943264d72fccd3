from __future__ import annotations

"""
Diversity-aware team selection over scored candidates.

The selector repeatedly takes the current top ``SELECTION_POOL_SIZE``
candidates, removes the ones already ruled out by earlier picks, and
draws one of the rest with probability proportional to its score.  A
soft penalty lowers the weight of candidates whose primary type is
already on the team; the weight never drops below 1, so every eligible
candidate stays selectable.

Rules carried across picks:

- an entry key is picked at most once unless same-form duplicates are
  allowed;
- a species is picked at most once unless same-species picks are allowed;
- picking a mega or gmax form removes its base species from the rest of
  the draw.
"""

from collections import Counter
from typing import List, Optional, Set

import numpy as np
from loguru import logger

from .config import PRIMARY_TYPE_PENALTY, SELECTION_POOL_SIZE, TEAM_SIZE_MAX, TEAM_SIZE_MIN
from .mapping import to_team_member
from .models import Query, ScoredCandidate, TeamMember
from .random_util import get_rng, weighted_index


def clamp_team_size(size: Optional[int]) -> int:
    if size is None:
        return TEAM_SIZE_MAX
    return max(TEAM_SIZE_MIN, min(TEAM_SIZE_MAX, int(size)))


def diversity_weight(score: int, same_primary_picks: int) -> int:
    return max(1, score - PRIMARY_TYPE_PENALTY * same_primary_picks)


def select_team(
    scored: List[ScoredCandidate],
    query: Query,
    rng: Optional[np.random.Generator] = None,
) -> List[TeamMember]:
    """Pick up to ``clamp(query.team_size)`` members from ``scored``.

    ``scored`` must already be sorted by score descending.  The list is
    not mutated; picked candidates are removed from a private copy.
    """
    if rng is None:
        rng = get_rng()
    remaining = list(scored)
    team_size = clamp_team_size(query.team_size)

    picked_keys: Set[str] = set()
    picked_species: Set[str] = set()
    primary_type_picks: Counter = Counter()
    special_form_excluded: Set[str] = set()
    team: List[TeamMember] = []

    while len(team) < team_size:
        window = remaining[:min(SELECTION_POOL_SIZE, len(remaining))]
        pool = [
            s for s in window
            if (query.allow_same_form_duplicates or s.entry.key not in picked_keys)
            and (query.allow_same_species_multiple or s.entry.species_key not in picked_species)
            and s.entry.species_key not in special_form_excluded
        ]
        if not pool:
            logger.debug("Selection pool exhausted after {} picks", len(team))
            break

        weights = [
            diversity_weight(s.score, primary_type_picks[s.entry.primary_type.lower()])
            for s in pool
        ]
        chosen = pool[weighted_index(weights, rng)]
        entry = chosen.entry

        picked_keys.add(entry.key)
        picked_species.add(entry.species_key)
        primary_type_picks[entry.primary_type.lower()] += 1
        base_species = entry.form.base_species_key
        if base_species:
            special_form_excluded.add(base_species)

        team.append(to_team_member(chosen))

        if not query.allow_same_form_duplicates:
            remaining = [s for s in remaining if s is not chosen]

    logger.debug("Selected {} of {} requested members", len(team), team_size)
    return team
