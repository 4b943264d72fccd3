from __future__ import annotations

"""
Text normalization utilities used across the theme team recommender.

These helpers turn free-text theme input into tokens (punctuation
stripping, whitespace splitting, stopword removal, case-insensitive
de-duplication) and split tag-override strings into loose pieces.
Keeping normalization logic centralized here ensures consistent
treatment of user themes and catalog vocabulary.
"""

import re
import unicodedata
from typing import Iterable, List

from .config import MAX_THEME_TOKENS, STOPWORDS, THEME_PUNCTUATION


# ---------------------------
# Basic helpers
# ---------------------------

def normalize_unicode(text: str) -> str:
    """
    Normalize weird unicode (fancy quotes, composed accents) into a
    stable form.  NFC keeps "pokémon" comparable with the stopword list.
    """
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def normalize_whitespace(text: str) -> str:
    """
    Collapse all whitespace runs into a single space and strip edges.
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def dedup_preserve_order(tokens: Iterable[str]) -> List[str]:
    """Case-insensitive de-duplication keeping the first spelling seen."""
    seen = set()
    out: List[str] = []
    for tok in tokens:
        key = tok.lower()
        if key not in seen:
            seen.add(key)
            out.append(tok)
    return out


# ---------------------------
# Tokenization
# ---------------------------

_PUNCT_TABLE = str.maketrans({ch: " " for ch in THEME_PUNCTUATION})

# Whitespace and punctuation both separate pieces
LOOSE_SPLIT_RE = re.compile(r"\W+")


def tokenize_theme(text: str, max_tokens: int = MAX_THEME_TOKENS) -> List[str]:
    """
    Lowercase, blank out the fixed punctuation set and split on
    whitespace.  Only the first ``max_tokens`` pieces are kept.
    """
    if not text or not text.strip():
        return []
    cleaned = normalize_unicode(text.strip().lower()).translate(_PUNCT_TABLE)
    tokens = [t for t in cleaned.split() if t]
    return tokens[:max_tokens]


def remove_stopwords(tokens: Iterable[str]) -> List[str]:
    return [t for t in tokens if t.lower() not in STOPWORDS]


def theme_tokens(text: str) -> List[str]:
    """
    Full pipeline for theme text: tokenize, drop stopwords, de-duplicate.
    """
    return dedup_preserve_order(remove_stopwords(tokenize_theme(text)))


def loose_tokens(text: str) -> List[str]:
    """
    Split an override string such as ``"ghost dog, spooky"`` into its
    lowercase pieces.  Empty pieces are dropped.
    """
    if not text:
        return []
    return [t for t in LOOSE_SPLIT_RE.split(text.lower()) if t]


# ---------------------------
# Debug / CLI usage
# ---------------------------

if __name__ == "__main__":
    sample = 'Make a "spooky" team of ghost dogs, please!!  (Pokémon)'
    print("RAW:", sample)
    print("TOKENS:", tokenize_theme(sample))
    print("THEME TOKENS:", theme_tokens(sample))
    print("LOOSE:", loose_tokens("ghost dog, spooky/eerie"))
