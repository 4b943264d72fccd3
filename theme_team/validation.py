from __future__ import annotations

"""
Request validation and conversion of API/CLI requests into a
:class:`~theme_team.models.Query`.

The generation core assumes its query is already valid; everything that
can be wrong with user input is caught here.
"""

from typing import List

from .config import (
    TEAM_SIZE_DEFAULT,
    TEAM_SIZE_MAX,
    TEAM_SIZE_MIN,
    THEME_TEXT_MAX_CHARS,
    GenerateTeamRequest,
)
from .exceptions import QueryValidationError, ValidationIssue
from .models import EvolutionStage, Query

THEME_TEXT_REQUIRED = "Theme text is required."
THEME_TEXT_TOO_LONG = f"Theme text must be {THEME_TEXT_MAX_CHARS} characters or less."
TEAM_SIZE_INVALID = f"Team size must be between {TEAM_SIZE_MIN} and {TEAM_SIZE_MAX}."
TYPE_CONSTRAINTS_OVERLAP = "Include and exclude types overlap."


def validate_request(req: GenerateTeamRequest) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    raw_theme = req.theme_text or ""
    if not raw_theme.strip():
        issues.append(ValidationIssue("themeText", THEME_TEXT_REQUIRED))
    # Length counts surrounding whitespace too
    elif len(raw_theme) > THEME_TEXT_MAX_CHARS:
        issues.append(ValidationIssue("themeText", THEME_TEXT_TOO_LONG))

    size = TEAM_SIZE_DEFAULT if req.team_size is None else req.team_size
    if size < TEAM_SIZE_MIN or size > TEAM_SIZE_MAX:
        issues.append(ValidationIssue("teamSize", TEAM_SIZE_INVALID))

    include = set(req.include_types or [])
    exclude = set(req.exclude_types or [])
    if include & exclude:
        issues.append(ValidationIssue("includeTypes", TYPE_CONSTRAINTS_OVERLAP))
    return issues


def to_query(req: GenerateTeamRequest) -> Query:
    """Validate ``req`` and build the immutable :class:`Query`.

    Raises :class:`QueryValidationError` listing every problem found.
    """
    issues = validate_request(req)
    if issues:
        raise QueryValidationError(issues)
    return Query(
        theme_text=(req.theme_text or "").strip(),
        team_size=TEAM_SIZE_DEFAULT if req.team_size is None else req.team_size,
        evolution_stage=req.evolution_stage or EvolutionStage.ANY,
        generations=frozenset(req.generations or ()),
        exclude_legendaries=bool(req.exclude_legendaries),
        allow_forms=bool(req.allow_forms),
        allow_mega=bool(req.allow_mega),
        allow_gmax=bool(req.allow_gmax),
        allow_same_species_multiple=bool(req.allow_same_species_multiple),
        allow_same_form_duplicates=bool(req.allow_same_form_duplicates),
        include_types=frozenset(t.value for t in req.include_types or ()),
        exclude_types=frozenset(t.value for t in req.exclude_types or ()),
    )
