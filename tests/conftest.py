from __future__ import annotations

"""
Shared fixtures: a six-entry mini catalog written to a temporary data
directory and loaded through the real loader, exactly as the service
loads its shipped files.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pytest

from theme_team.catalog import load_catalog
from theme_team.models import (
    CatalogEntry,
    Evolution,
    Flags,
    Form,
    FormKind,
    Query,
    ScoredCandidate,
    Tags,
)

SYNONYMS = {
    "version": 1,
    "synonyms": {
        "spooky": ["ghost", "haunted", "eerie"],
        "dog": ["canine", "hound", "wolf"],
        "cute": ["adorable", "sweet"],
    },
}

TAG_OVERRIDES = {
    "version": 1,
    "overrides": {
        "houndoom": ["dog", "canine", "spooky"],
        "lucario": ["dog", "canine", "aura"],
        "mimikyu": ["spooky", "cute"],
    },
}


def _pokemon(
    key: str,
    name: str,
    generation: int,
    types: List[str],
    species: Optional[str] = None,
    form_type: str = "base",
    is_mega: bool = False,
    mega_of: Optional[str] = None,
    legendary: bool = False,
    unevolved: bool = False,
    fully_evolved: bool = True,
    chain_id: int = 1,
    derived: Optional[List[str]] = None,
    text_derived: Optional[List[str]] = None,
    curated: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        "key": key,
        "dex": {"national": 0, "generation": generation},
        "names": {"default": name},
        "species": {"key": species or key, "id": 0},
        "form": {
            "type": form_type,
            "isRegional": False,
            "region": None,
            "isMega": is_mega,
            "megaOfSpeciesKey": mega_of,
            "isGmax": False,
            "gmaxOfSpeciesKey": None,
        },
        "typing": {"types": types, "primary": types[0], "secondary": types[1] if len(types) > 1 else None},
        "flags": {"isLegendary": legendary, "isMythical": False, "isBaby": False},
        "evolution": {"chainId": chain_id, "isUnevolved": unevolved, "isFullyEvolved": fully_evolved},
        "art": {"preferred": f"https://example/{key}.png", "variants": {}},
        "tags": {
            "derived": derived or [],
            "textDerived": text_derived or [],
            "curated": curated or [],
        },
        "search": {"aliases": []},
    }


POKEMON = {
    "version": 1,
    "generatedAt": "2026-02-03T00:00:00Z",
    "pokemon": [
        _pokemon(
            "gengar", "Gengar", 1, ["ghost", "poison"], chain_id=1,
            derived=["type:ghost", "type:poison", "gen:1", "fully-evolved"],
            text_derived=["spooky", "shadow"], curated=["spooky", "ghost"],
        ),
        _pokemon(
            "houndoom", "Houndoom", 2, ["dark", "fire"], chain_id=2,
            derived=["type:dark", "type:fire", "gen:2", "fully-evolved"],
            text_derived=["dog", "hellhound"], curated=["dog", "canine", "spooky"],
        ),
        _pokemon(
            "mimikyu", "Mimikyu", 7, ["ghost", "fairy"], chain_id=3,
            unevolved=True, fully_evolved=False,
            derived=["type:ghost", "type:fairy", "gen:7"],
            text_derived=["creepy", "costume"], curated=["spooky", "cute"],
        ),
        _pokemon(
            "lucario", "Lucario", 4, ["fighting", "steel"], chain_id=4,
            derived=["type:fighting", "type:steel", "gen:4", "fully-evolved"],
            text_derived=["aura"], curated=["dog", "aura"],
        ),
        _pokemon(
            "charizard-mega-x", "Mega Charizard X", 1, ["fire", "dragon"],
            species="charizard", form_type="mega", is_mega=True, mega_of="charizard", chain_id=5,
            derived=["type:fire", "type:dragon"], curated=["dragon"],
        ),
        _pokemon(
            "mewtwo", "Mewtwo", 1, ["psychic"], legendary=True, chain_id=6,
            derived=["type:psychic"], curated=["psychic"],
        ),
    ],
}


def write_dataset(
    data_dir: Path,
    pokemon: Optional[Dict[str, Any]] = None,
    synonyms: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Path:
    data_dir.mkdir(parents=True, exist_ok=True)
    files = {
        "pokemon.json": POKEMON if pokemon is None else pokemon,
        "synonyms.json": SYNONYMS if synonyms is None else synonyms,
        "tag-overrides.json": TAG_OVERRIDES if overrides is None else overrides,
    }
    for name, payload in files.items():
        (data_dir / name).write_text(json.dumps(payload), encoding="utf-8")
    return data_dir


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return write_dataset(tmp_path / "data")


@pytest.fixture
def catalog(data_dir: Path):
    return load_catalog(data_dir)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


def make_query(**overrides: Any) -> Query:
    """Query with permissive form toggles and legendaries allowed."""
    base = dict(
        theme_text="",
        team_size=6,
        exclude_legendaries=False,
        allow_forms=True,
        allow_mega=True,
        allow_gmax=True,
    )
    base.update(overrides)
    return Query(**base)


def make_entry(
    key: str,
    types=("normal",),
    species: Optional[str] = None,
    generation: int = 1,
    kind: FormKind = FormKind.BASE,
    base_of: Optional[str] = None,
    legendary: bool = False,
    mythical: bool = False,
    unevolved: bool = False,
    fully_evolved: bool = True,
    derived=(),
    text_derived=(),
    curated=(),
) -> CatalogEntry:
    return CatalogEntry(
        key=key,
        species_key=species or key,
        generation=generation,
        types=tuple(types),
        display_name=key.title(),
        art_ref=f"https://example/{key}.png",
        flags=Flags(is_legendary=legendary, is_mythical=mythical),
        evolution=Evolution(is_unevolved=unevolved, is_fully_evolved=fully_evolved),
        form=Form(
            kind=kind,
            is_mega=kind is FormKind.MEGA,
            is_gmax=kind is FormKind.GMAX,
            mega_of_species_key=base_of if kind is FormKind.MEGA else None,
            gmax_of_species_key=base_of if kind is FormKind.GMAX else None,
        ),
        tags=Tags.from_raw(derived=derived, text_derived=text_derived, curated=curated),
    )


def scored(entry: CatalogEntry, score: int, *reasons: str) -> ScoredCandidate:
    return ScoredCandidate(entry=entry, score=score, reasons=tuple(reasons))


class FixedRng:
    """Stand-in generator whose draws are fixed by the test."""

    def __init__(self, value=0, from_top: bool = False) -> None:
        self.value = value
        self.from_top = from_top
        self.calls = []

    def integers(self, low, high=None):
        self.calls.append((low, high))
        if self.from_top:
            upper = low if high is None else high
            return upper - 1
        return self.value
