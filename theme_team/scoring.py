from __future__ import annotations

"""
Relevance scoring of filtered candidates against interpreted keywords.

Each synonym group (a theme token plus its synonyms) is checked once per
match category, so a concept that happens to have several spellings in
the catalog is not counted several times.  Categories are independent:
a group that hits both a type label and a curated tag earns both
weights.

    type match        +2
    curated tag       +3
    text-derived tag  +2
    derived tag       +1

Tag overrides are folded into the curated tier at scoring time.  The
override keyed by the entry's own key wins; the species-level override
is only consulted when there is no entry-level one.
"""

from typing import FrozenSet, Iterable, List, Mapping, Optional, Sequence

from loguru import logger

from .config import (
    CURATED_WEIGHT,
    DERIVED_WEIGHT,
    MAX_REASONS,
    TEXT_DERIVED_WEIGHT,
    TYPE_MATCH_WEIGHT,
)
from .models import CatalogEntry, InterpretedKeywords, ScoredCandidate, TagTier, normalize_tag
from .normalize import dedup_preserve_order, loose_tokens


def override_tags(
    entry: CatalogEntry,
    tag_overrides: Mapping[str, Sequence[str]],
) -> Optional[Sequence[str]]:
    """Entry-level override if present, else species-level, else None."""
    found = tag_overrides.get(entry.key.lower())
    if found is None:
        found = tag_overrides.get(entry.species_key.lower())
    return found


def curated_with_overrides(
    entry: CatalogEntry,
    tag_overrides: Mapping[str, Sequence[str]],
) -> FrozenSet[str]:
    curated = set(entry.tags.curated)
    for raw in override_tags(entry, tag_overrides) or ():
        whole = normalize_tag(raw)
        if whole:
            curated.add(whole)
        curated.update(loose_tokens(whole))
    return frozenset(curated)


def _any_in(group: Iterable[str], tags: FrozenSet[str]) -> bool:
    return any(tok.lower() in tags for tok in group)


def score_entry(
    entry: CatalogEntry,
    interpreted: InterpretedKeywords,
    tag_overrides: Mapping[str, Sequence[str]],
) -> ScoredCandidate:
    """Score one candidate and collect up to ``MAX_REASONS`` reasons."""
    types = frozenset(t.lower() for t in entry.types)
    curated = curated_with_overrides(entry, tag_overrides)
    text_derived = entry.tags.tier(TagTier.TEXT_DERIVED)
    derived = entry.tags.tier(TagTier.DERIVED)

    score = 0
    type_reasons: List[str] = []
    curated_reasons: List[str] = []
    tag_reasons: List[str] = []

    for root, group in interpreted.groups.items():
        if _any_in(group, types):
            score += TYPE_MATCH_WEIGHT
            type_reasons.append(root)
        if _any_in(group, curated):
            score += CURATED_WEIGHT
            curated_reasons.append(root)
        if _any_in(group, text_derived):
            score += TEXT_DERIVED_WEIGHT
            tag_reasons.append(root)
        if _any_in(group, derived):
            score += DERIVED_WEIGHT
            tag_reasons.append(root)

    reasons = dedup_preserve_order(type_reasons + curated_reasons + tag_reasons)[:MAX_REASONS]
    return ScoredCandidate(entry=entry, score=score, reasons=tuple(reasons))


def score_candidates(
    candidates: Iterable[CatalogEntry],
    interpreted: InterpretedKeywords,
    tag_overrides: Mapping[str, Sequence[str]],
) -> List[ScoredCandidate]:
    """Score, drop zero-score candidates and sort by score descending.

    ``list.sort`` is stable, so equal scores keep catalog order.
    """
    scored = [
        s for s in (score_entry(e, interpreted, tag_overrides) for e in candidates)
        if s.score > 0
    ]
    scored.sort(key=lambda s: -s.score)
    logger.debug("Scored {} relevant candidates", len(scored))
    return scored
