from __future__ import annotations

"""
Loading of the static catalog, synonym table and tag-override table.

The three JSON files are produced offline and shipped alongside the
service.  This module validates their shape with pydantic, converts each
record into the immutable domain types from :mod:`theme_team.models`
and bundles them into a :class:`~theme_team.models.Catalog`.  Any
missing or malformed file raises :class:`CatalogLoadError`: the
recommender cannot run on a partial vocabulary, so callers treat this as
fatal at startup.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .config import DATA_DIR, POKEMON_FILENAME, SYNONYMS_FILENAME, TAG_OVERRIDES_FILENAME
from .exceptions import CatalogLoadError
from .models import (
    Catalog,
    CatalogEntry,
    Evolution,
    Flags,
    Form,
    FormKind,
    Tags,
)


# ---------------------------
# File schemas
# ---------------------------

class _FileModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class DexRecord(_FileModel):
    national: int = 0
    generation: int


class NamesRecord(_FileModel):
    default: str


class SpeciesRecord(_FileModel):
    key: str
    id: int = 0


class FormRecord(_FileModel):
    type: str = "base"
    is_regional: bool = False
    region: Optional[str] = None
    is_mega: bool = False
    mega_of_species_key: Optional[str] = None
    is_gmax: bool = False
    gmax_of_species_key: Optional[str] = None


class TypingRecord(_FileModel):
    types: List[str] = Field(min_length=1, max_length=2)
    primary: Optional[str] = None
    secondary: Optional[str] = None


class FlagsRecord(_FileModel):
    is_legendary: bool = False
    is_mythical: bool = False
    is_baby: bool = False


class EvolutionRecord(_FileModel):
    chain_id: int = 0
    is_unevolved: bool = False
    is_fully_evolved: bool = False


class ArtRecord(_FileModel):
    preferred: str = ""
    variants: Dict[str, Optional[str]] = Field(default_factory=dict)


class TagsRecord(_FileModel):
    derived: List[str] = Field(default_factory=list)
    text_derived: List[str] = Field(default_factory=list)
    curated: List[str] = Field(default_factory=list)


class PokemonRecord(_FileModel):
    key: str = Field(min_length=1)
    dex: DexRecord
    names: NamesRecord
    species: SpeciesRecord
    form: FormRecord = Field(default_factory=FormRecord)
    typing: TypingRecord
    flags: FlagsRecord = Field(default_factory=FlagsRecord)
    evolution: EvolutionRecord = Field(default_factory=EvolutionRecord)
    art: ArtRecord = Field(default_factory=ArtRecord)
    tags: TagsRecord = Field(default_factory=TagsRecord)


class PokemonFile(_FileModel):
    version: int = 1
    generated_at: Optional[str] = None
    pokemon: List[PokemonRecord]


class SynonymsFile(_FileModel):
    version: int = 1
    synonyms: Dict[str, List[str]]


class TagOverridesFile(_FileModel):
    version: int = 1
    overrides: Dict[str, List[str]]


# ---------------------------
# Record -> domain conversion
# ---------------------------

_FORM_KINDS = {k.value: k for k in FormKind}


def _form_kind(rec: FormRecord) -> FormKind:
    if rec.is_mega:
        return FormKind.MEGA
    if rec.is_gmax:
        return FormKind.GMAX
    kind = _FORM_KINDS.get(rec.type.strip().lower(), FormKind.OTHER)
    if kind is FormKind.BASE and rec.is_regional:
        return FormKind.REGIONAL
    return kind


def to_catalog_entry(rec: PokemonRecord) -> CatalogEntry:
    """Convert one validated file record into a :class:`CatalogEntry`."""
    return CatalogEntry(
        key=rec.key,
        species_key=rec.species.key,
        generation=rec.dex.generation,
        types=tuple(t.strip().lower() for t in rec.typing.types),
        display_name=rec.names.default,
        art_ref=rec.art.preferred,
        flags=Flags(
            is_legendary=rec.flags.is_legendary,
            is_mythical=rec.flags.is_mythical,
            is_baby=rec.flags.is_baby,
        ),
        evolution=Evolution(
            chain_id=rec.evolution.chain_id,
            is_unevolved=rec.evolution.is_unevolved,
            is_fully_evolved=rec.evolution.is_fully_evolved,
        ),
        form=Form(
            kind=_form_kind(rec.form),
            is_mega=rec.form.is_mega,
            is_gmax=rec.form.is_gmax,
            mega_of_species_key=rec.form.mega_of_species_key,
            gmax_of_species_key=rec.form.gmax_of_species_key,
            region=rec.form.region,
        ),
        tags=Tags.from_raw(
            derived=rec.tags.derived,
            text_derived=rec.tags.text_derived,
            curated=rec.tags.curated,
        ),
    )


def _normalize_table(table: Dict[str, List[str]]) -> Dict[str, Tuple[str, ...]]:
    """Lowercase keys and values; later duplicate keys extend earlier ones."""
    out: Dict[str, List[str]] = {}
    for key, values in table.items():
        k = key.strip().lower()
        if not k:
            continue
        bucket = out.setdefault(k, [])
        for v in values:
            v = str(v).strip().lower()
            if v and v not in bucket:
                bucket.append(v)
    return {k: tuple(v) for k, v in out.items()}


# ---------------------------
# File loading
# ---------------------------

M = TypeVar("M", bound=BaseModel)


def _load_json(path: Path, model: Type[M]) -> M:
    if not path.exists():
        raise CatalogLoadError("Missing required data file", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw: Any = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Failed to parse JSON file ({e})", path) from e
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise CatalogLoadError(
            f"Invalid schema ({e.error_count()} errors, first: {e.errors()[0]['msg']})", path
        ) from e


def load_catalog(data_dir: Optional[Path] = None) -> Catalog:
    """Load and validate ``pokemon.json``, ``synonyms.json`` and
    ``tag-overrides.json`` from ``data_dir`` (defaults to ``DATA_DIR``).
    """
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    pokemon_path = data_dir / POKEMON_FILENAME
    logger.info("Loading catalog from {}", data_dir)

    pokemon_file = _load_json(pokemon_path, PokemonFile)
    synonyms_file = _load_json(data_dir / SYNONYMS_FILENAME, SynonymsFile)
    overrides_file = _load_json(data_dir / TAG_OVERRIDES_FILENAME, TagOverridesFile)

    entries: List[CatalogEntry] = []
    seen_keys = set()
    for rec in pokemon_file.pokemon:
        if rec.key in seen_keys:
            raise CatalogLoadError(f"Duplicate catalog key {rec.key!r}", pokemon_path)
        seen_keys.add(rec.key)
        try:
            entries.append(to_catalog_entry(rec))
        except ValueError as e:
            raise CatalogLoadError(str(e), pokemon_path) from e

    catalog = Catalog(
        entries=tuple(entries),
        synonyms=_normalize_table(synonyms_file.synonyms),
        tag_overrides=_normalize_table(overrides_file.overrides),
    )
    logger.info(
        "Loaded catalog: {} entries, {} synonym keys, {} tag overrides",
        len(catalog.entries),
        len(catalog.synonyms),
        len(catalog.tag_overrides),
    )
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Process-wide catalog, loaded once from ``DATA_DIR``."""
    return load_catalog()


def reset_catalog_cache() -> None:
    get_catalog.cache_clear()


if __name__ == "__main__":
    cat = load_catalog()
    print(f"{len(cat.entries)} entries, vocabulary size {len(cat.vocabulary)}")
