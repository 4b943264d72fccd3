from __future__ import annotations

"""
End-to-end team generation: filter -> score -> select.

Interpretation is done separately (see :mod:`theme_team.interpret`) so the
caller can show what was understood even when nothing matches.
"""

from typing import Optional

import numpy as np
from loguru import logger

from .interpret import interpret
from .models import Catalog, InterpretedKeywords, Query, TeamResult
from .retrieval import filter_candidates
from .scoring import score_candidates
from .selection import select_team


def generate(
    query: Query,
    interpreted: InterpretedKeywords,
    catalog: Catalog,
    rng: Optional[np.random.Generator] = None,
) -> TeamResult:
    """Build a team for ``query`` from the interpreted theme keywords.

    No matching candidate is not an error: the result then carries an
    empty team next to the interpreted keywords.
    """
    candidates = filter_candidates(catalog.entries, query)
    scored = score_candidates(candidates, interpreted, catalog.tag_overrides)
    if not scored:
        logger.info("No candidates matched theme tokens {}", list(interpreted.raw_tokens))
        return TeamResult(interpreted=interpreted)

    team = select_team(scored, query, rng=rng)
    logger.info(
        "Generated team of {} from {} scored candidates: {}",
        len(team),
        len(scored),
        [m.key for m in team],
    )
    return TeamResult(interpreted=interpreted, team=tuple(team), scored=tuple(scored))


def generate_for_theme(
    query: Query,
    catalog: Catalog,
    rng: Optional[np.random.Generator] = None,
) -> TeamResult:
    """Interpret ``query.theme_text`` and generate in one call."""
    return generate(query, interpret(query.theme_text, catalog), catalog, rng=rng)
