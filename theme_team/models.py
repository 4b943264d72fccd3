from __future__ import annotations

"""
Domain types shared by the interpretation, filtering, scoring and
selection stages.

Everything here is immutable: the catalog is loaded once at startup and
read concurrently by every request, and the per-request values
(:class:`InterpretedKeywords`, :class:`ScoredCandidate`,
:class:`TeamResult`) are built fresh and discarded after the response.
Tags are normalised once at ingestion (lowercased, ``namespace:`` prefix
removed) so that matching never has to re-strip them.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple


class EvolutionStage(str, Enum):
    ANY = "any"
    FULLY_EVOLVED = "fullyEvolved"
    UNEVOLVED = "unevolved"


class FormKind(str, Enum):
    BASE = "base"
    MEGA = "mega"
    GMAX = "gmax"
    REGIONAL = "regional"
    OTHER = "other"


class PokemonType(str, Enum):
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    GRASS = "grass"
    ELECTRIC = "electric"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"
    FAIRY = "fairy"


class TagTier(str, Enum):
    """Trust tier of a tag: derived < text-derived < curated."""

    DERIVED = "derived"
    TEXT_DERIVED = "textDerived"
    CURATED = "curated"


def strip_namespace(tag: str) -> str:
    """Convert ``type:ghost`` into ``ghost``; plain tags pass through."""
    idx = tag.find(":")
    return tag[idx + 1:] if idx >= 0 else tag


def normalize_tag(tag: str) -> str:
    return strip_namespace(str(tag).strip().lower()).strip()


def _normalized_set(tags: Iterable[str]) -> FrozenSet[str]:
    out = {normalize_tag(t) for t in tags}
    out.discard("")
    return frozenset(out)


@dataclass(frozen=True)
class Tags:
    derived: FrozenSet[str] = frozenset()
    text_derived: FrozenSet[str] = frozenset()
    curated: FrozenSet[str] = frozenset()

    @classmethod
    def from_raw(
        cls,
        derived: Iterable[str] = (),
        text_derived: Iterable[str] = (),
        curated: Iterable[str] = (),
    ) -> "Tags":
        return cls(
            derived=_normalized_set(derived),
            text_derived=_normalized_set(text_derived),
            curated=_normalized_set(curated),
        )

    def tier(self, tier: TagTier) -> FrozenSet[str]:
        if tier is TagTier.DERIVED:
            return self.derived
        if tier is TagTier.TEXT_DERIVED:
            return self.text_derived
        return self.curated

    def all(self) -> FrozenSet[str]:
        return self.derived | self.text_derived | self.curated


@dataclass(frozen=True)
class Flags:
    is_legendary: bool = False
    is_mythical: bool = False
    is_baby: bool = False


@dataclass(frozen=True)
class Evolution:
    chain_id: int = 0
    is_unevolved: bool = False
    is_fully_evolved: bool = False


@dataclass(frozen=True)
class Form:
    kind: FormKind = FormKind.BASE
    is_mega: bool = False
    is_gmax: bool = False
    mega_of_species_key: Optional[str] = None
    gmax_of_species_key: Optional[str] = None
    region: Optional[str] = None

    @property
    def base_species_key(self) -> Optional[str]:
        """Species key a mega/gmax form was derived from, if any."""
        if self.is_mega and self.mega_of_species_key:
            return self.mega_of_species_key
        if self.is_gmax and self.gmax_of_species_key:
            return self.gmax_of_species_key
        return None


@dataclass(frozen=True)
class CatalogEntry:
    key: str
    species_key: str
    generation: int
    types: Tuple[str, ...]
    display_name: str = ""
    art_ref: str = ""
    flags: Flags = field(default_factory=Flags)
    evolution: Evolution = field(default_factory=Evolution)
    form: Form = field(default_factory=Form)
    tags: Tags = field(default_factory=Tags)

    def __post_init__(self) -> None:
        if not self.types:
            raise ValueError(f"Catalog entry {self.key!r} has no types")
        if self.form.is_mega and self.form.is_gmax:
            raise ValueError(f"Catalog entry {self.key!r} cannot be both mega and gmax")

    @property
    def primary_type(self) -> str:
        return self.types[0]

    @property
    def secondary_type(self) -> Optional[str]:
        return self.types[1] if len(self.types) > 1 else None


@dataclass(frozen=True, eq=False)
class Catalog:
    """Read-only bundle of entries, synonym table and tag overrides."""

    entries: Tuple[CatalogEntry, ...]
    synonyms: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    tag_overrides: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "synonyms", MappingProxyType(dict(self.synonyms)))
        object.__setattr__(self, "tag_overrides", MappingProxyType(dict(self.tag_overrides)))

    @cached_property
    def vocabulary(self) -> FrozenSet[str]:
        """Every normalised tag, type label and synonym key in the catalog.

        Built on first access and memoised on the instance.
        """
        words = set()
        for entry in self.entries:
            words |= entry.tags.all()
            words.update(t.lower() for t in entry.types)
        words.update(k.lower() for k in self.synonyms)
        return frozenset(words)


@dataclass(frozen=True)
class InterpretedKeywords:
    raw_tokens: Tuple[str, ...] = ()
    expanded_tokens: Tuple[str, ...] = ()
    unknown_tokens: Tuple[str, ...] = ()
    groups: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", MappingProxyType(dict(self.groups)))


@dataclass(frozen=True)
class Query:
    theme_text: str = ""
    team_size: int = 6
    evolution_stage: EvolutionStage = EvolutionStage.ANY
    generations: FrozenSet[int] = frozenset()
    exclude_legendaries: bool = False
    allow_forms: bool = False
    allow_mega: bool = False
    allow_gmax: bool = False
    allow_same_species_multiple: bool = False
    allow_same_form_duplicates: bool = False
    include_types: FrozenSet[str] = frozenset()
    exclude_types: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class ScoredCandidate:
    entry: CatalogEntry
    score: int
    reasons: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TeamMember:
    key: str
    name: str
    art_url: str
    types: Tuple[str, ...]
    reasons: Tuple[str, ...]


@dataclass(frozen=True)
class TeamResult:
    interpreted: InterpretedKeywords
    team: Tuple[TeamMember, ...] = ()
    scored: Tuple[ScoredCandidate, ...] = ()
