from __future__ import annotations

"""
Mapping utilities for the theme team API.

This module converts domain values into their public projections: a
scored candidate into a :class:`~theme_team.models.TeamMember`, and a
full :class:`~theme_team.models.TeamResult` into the strict pydantic
response defined in :mod:`theme_team.config`.  All transformation logic
is encapsulated here to keep ``api.py`` and ``cli.py`` simple.
"""

from typing import List

from loguru import logger

from .config import (
    DEBUG_SCORED_LIMIT,
    DebugInfo,
    GenerateTeamResponse,
    InterpretedResponse,
    PokemonResult,
    ScoredDebugItem,
)
from .models import InterpretedKeywords, ScoredCandidate, TeamMember, TeamResult


def to_team_member(candidate: ScoredCandidate) -> TeamMember:
    entry = candidate.entry
    return TeamMember(
        key=entry.key,
        name=entry.display_name,
        art_url=entry.art_ref,
        types=tuple(entry.types),
        reasons=tuple(candidate.reasons),
    )


def to_interpreted_response(interpreted: InterpretedKeywords) -> InterpretedResponse:
    return InterpretedResponse(
        raw_tokens=list(interpreted.raw_tokens),
        expanded_tokens=list(interpreted.expanded_tokens),
        unknown_tokens=list(interpreted.unknown_tokens),
        groups={root: list(group) for root, group in interpreted.groups.items()},
    )


def to_api_item(member: TeamMember) -> PokemonResult:
    return PokemonResult(
        key=member.key,
        name=member.name,
        art_url=member.art_url,
        types=list(member.types),
        reasons=list(member.reasons),
    )


def map_result_to_response(result: TeamResult, debug: bool = False) -> GenerateTeamResponse:
    """Convert a :class:`TeamResult` into the full API response.

    With ``debug`` set, the top ``DEBUG_SCORED_LIMIT`` scored candidates
    are attached so the caller can see why the team looks the way it does.
    """
    items: List[PokemonResult] = [to_api_item(m) for m in result.team]
    debug_info = None
    if debug:
        debug_info = DebugInfo(
            scored=[
                ScoredDebugItem(key=s.entry.key, score=s.score, reasons=list(s.reasons))
                for s in result.scored[:DEBUG_SCORED_LIMIT]
            ]
        )
    logger.info("Mapped {} team members into API schema", len(items))
    return GenerateTeamResponse(
        interpreted=to_interpreted_response(result.interpreted),
        team=items,
        debug=debug_info,
    )
