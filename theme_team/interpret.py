from __future__ import annotations

"""
Keyword interpretation: theme text -> structured query vocabulary.

The interpreter tokenizes the theme, drops stopwords, expands every
remaining token through the synonym table and flags tokens that the
catalog has never heard of, so the caller can explain an empty result.
It is a pure function of ``(theme_text, catalog)``.
"""

from typing import Dict, List, Mapping, Sequence, Tuple

from loguru import logger

from .models import Catalog, InterpretedKeywords
from .normalize import dedup_preserve_order, theme_tokens


def expand_with_synonyms(
    tokens: Sequence[str],
    synonyms: Mapping[str, Sequence[str]],
) -> Tuple[List[str], Dict[str, Tuple[str, ...]]]:
    """Build one equivalence group per token and their union.

    Each group is the token itself followed by its own synonym-table
    entry (the table is not assumed symmetric).  Returns
    ``(expanded_tokens, groups)``.
    """
    expanded: List[str] = []
    groups: Dict[str, Tuple[str, ...]] = {}
    for token in tokens:
        group = dedup_preserve_order([token, *synonyms.get(token.lower(), ())])
        groups[token] = tuple(group)
        expanded.extend(group)
    return dedup_preserve_order(expanded), groups


def find_unknown_tokens(tokens: Sequence[str], catalog: Catalog) -> List[str]:
    vocab = catalog.vocabulary
    return [t for t in tokens if t.lower() not in vocab]


def interpret(theme_text: str, catalog: Catalog) -> InterpretedKeywords:
    raw = theme_tokens(theme_text)
    if not raw:
        return InterpretedKeywords()

    expanded, groups = expand_with_synonyms(raw, catalog.synonyms)
    unknown = find_unknown_tokens(raw, catalog)
    logger.debug(
        "Interpreted theme: raw={} expanded={} unknown={}", raw, len(expanded), unknown
    )
    return InterpretedKeywords(
        raw_tokens=tuple(raw),
        expanded_tokens=tuple(expanded),
        unknown_tokens=tuple(unknown),
        groups=groups,
    )
