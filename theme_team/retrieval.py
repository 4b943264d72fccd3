from __future__ import annotations

"""
Candidate retrieval: hard structural filters over the catalog.

Every check here is independent, so their order never changes the
resulting set.  :func:`filter_candidates` is a generator; the scorer
consumes it lazily and no intermediate list of the full catalog is
built.

Example::

    from theme_team.retrieval import filter_candidates
    for entry in filter_candidates(catalog.entries, query):
        ...
"""

from typing import FrozenSet, Iterable, Iterator

from .models import CatalogEntry, EvolutionStage, FormKind, Query


def _lower_set(values: Iterable[str]) -> FrozenSet[str]:
    return frozenset(str(v).lower() for v in values)


def _passes_form_rules(entry: CatalogEntry, query: Query) -> bool:
    form = entry.form
    if form.is_mega and not query.allow_mega:
        return False
    if form.is_gmax and not query.allow_gmax:
        return False
    # Regional and other alternate forms share the allow_forms toggle
    if not form.is_mega and not form.is_gmax and form.kind is not FormKind.BASE:
        return query.allow_forms
    return True


def passes_filters(
    entry: CatalogEntry,
    query: Query,
    include_types: FrozenSet[str] = frozenset(),
    exclude_types: FrozenSet[str] = frozenset(),
) -> bool:
    """Return True if ``entry`` survives every structural constraint.

    ``include_types`` / ``exclude_types`` are the query's type sets,
    lowercased once by the caller.
    """
    if query.generations and entry.generation not in query.generations:
        return False
    if query.exclude_legendaries and (entry.flags.is_legendary or entry.flags.is_mythical):
        return False
    if query.evolution_stage is EvolutionStage.FULLY_EVOLVED and not entry.evolution.is_fully_evolved:
        return False
    if query.evolution_stage is EvolutionStage.UNEVOLVED and not entry.evolution.is_unevolved:
        return False
    if not _passes_form_rules(entry, query):
        return False
    types = [t.lower() for t in entry.types]
    if include_types and not any(t in include_types for t in types):
        return False
    if exclude_types and any(t in exclude_types for t in types):
        return False
    return True


def filter_candidates(entries: Iterable[CatalogEntry], query: Query) -> Iterator[CatalogEntry]:
    """Yield the catalog entries eligible for ``query``, in catalog order."""
    include_types = _lower_set(query.include_types)
    exclude_types = _lower_set(query.exclude_types)
    for entry in entries:
        if passes_filters(entry, query, include_types, exclude_types):
            yield entry
