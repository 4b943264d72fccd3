from __future__ import annotations
"""
Configuration for the theme team recommender.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import EvolutionStage, PokemonType

# Paths
PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = Path(os.getenv("THEME_TEAM_DATA_DIR", str(PACKAGE_DIR / "data")))
POKEMON_FILENAME = "pokemon.json"
SYNONYMS_FILENAME = "synonyms.json"
TAG_OVERRIDES_FILENAME = "tag-overrides.json"

# Interpretation
MAX_THEME_TOKENS = 30
THEME_PUNCTUATION = ",.!?:;()\""
STOPWORDS = frozenset({
    "a", "an", "the", "and", "or", "to", "of", "for", "with", "in", "on", "at",
    "team", "pokemon", "pokémon", "make", "generate",
})

# Scoring weights per match category
TYPE_MATCH_WEIGHT = 2
CURATED_WEIGHT = 3
TEXT_DERIVED_WEIGHT = 2
DERIVED_WEIGHT = 1
MAX_REASONS = 6

# Selection
TEAM_SIZE_MIN = 1
TEAM_SIZE_MAX = 6
TEAM_SIZE_DEFAULT = 6
SELECTION_POOL_SIZE = 50
PRIMARY_TYPE_PENALTY = 2
DEBUG_SCORED_LIMIT = 25

# Request validation
THEME_TEXT_MAX_CHARS = 200

# HTTP
CORS_ORIGINS: List[str] = [
    o.strip()
    for o in os.getenv("THEME_TEAM_CORS_ORIGINS", "http://localhost:5173").split(",")
    if o.strip()
]

# Logging
LOG_LEVEL = os.getenv("THEME_TEAM_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("THEME_TEAM_LOG_FILE", "")
LOG_DIR = Path(os.getenv("THEME_TEAM_LOG_DIR", "logs"))


# Pydantic schemas
class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateTeamRequest(_CamelModel):
    theme_text: Optional[str] = None
    team_size: Optional[int] = None
    evolution_stage: Optional[EvolutionStage] = None
    generations: Optional[List[int]] = None
    exclude_legendaries: Optional[bool] = None
    allow_forms: Optional[bool] = None
    allow_mega: Optional[bool] = None
    allow_gmax: Optional[bool] = None
    allow_same_species_multiple: Optional[bool] = None
    allow_same_form_duplicates: Optional[bool] = None
    include_types: Optional[List[PokemonType]] = None
    exclude_types: Optional[List[PokemonType]] = None
    debug: bool = False

    @field_validator("evolution_stage", mode="before")
    @classmethod
    def stage_from_index(cls, v):
        # The web client sends the enum ordinal (0 = any, 1 = fullyEvolved, 2 = unevolved)
        if isinstance(v, int) and not isinstance(v, bool):
            stages = list(EvolutionStage)
            if 0 <= v < len(stages):
                return stages[v]
        return v

    @field_validator("include_types", "exclude_types", mode="before")
    @classmethod
    def lowercase_types(cls, v):
        if isinstance(v, list):
            return [t.strip().lower() if isinstance(t, str) else t for t in v]
        return v


class InterpretedResponse(_CamelModel):
    raw_tokens: List[str]
    expanded_tokens: List[str]
    unknown_tokens: List[str]
    groups: Dict[str, List[str]]


class PokemonResult(_CamelModel):
    key: str
    name: str
    art_url: str
    types: List[str]
    reasons: List[str]


class ScoredDebugItem(_CamelModel):
    key: str
    score: int = Field(ge=0)
    reasons: List[str]


class DebugInfo(_CamelModel):
    scored: List[ScoredDebugItem]


class GenerateTeamResponse(_CamelModel):
    interpreted: InterpretedResponse
    team: List[PokemonResult]
    debug: Optional[DebugInfo] = None


class ValidationErrorItem(_CamelModel):
    field: str
    message: str


class ErrorResponse(_CamelModel):
    error: str
    details: Optional[str] = None
    status_code: Optional[int] = None


class HealthResponse(BaseModel):
    status: str
