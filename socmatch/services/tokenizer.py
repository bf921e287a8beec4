"""
services/tokenizer.py
──────────────────────────────────────────────────────────────────────────────
Text normalisation shared by the index (build time) and the matcher (query
time).  Both sides MUST use these functions so keys line up.

Pure functions: no I/O, no state, deterministic.
"""
from __future__ import annotations

import re

# Scores are only comparable across deployments if this list is identical.
STOP_WORDS: frozenset[str] = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
    "her", "was", "one", "our", "out", "has", "have", "from", "with", "they",
    "been", "this", "that", "will", "each", "make", "like", "than", "them",
    "then", "its", "over", "such", "other", "into", "more", "some", "very",
    "when", "what", "also", "only", "just", "about", "which",
})

MIN_TOKEN_LENGTH = 3

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str) -> list[str]:
    """Normalise text into an ordered list of keyword tokens.

    Lower-cases, replaces anything outside ``[a-z0-9]`` and whitespace with a
    space, splits on whitespace, then drops short tokens and stop words.

    Examples:
        >>> tokenize("Registered Nurses (B.S.N.)")
        ['registered', 'nurses']
        >>> tokenize("Art and Design")
        ['art', 'design']
    """
    if not text:
        return []
    cleaned = _NON_ALNUM.sub(" ", text.lower())
    return [
        w for w in cleaned.split()
        if len(w) >= MIN_TOKEN_LENGTH and w not in STOP_WORDS
    ]


def bigrams(tokens: list[str]) -> list[str]:
    """Join each adjacent token pair with an underscore.

    >>> bigrams(["software", "developers", "computer"])
    ['software_developers', 'developers_computer']
    """
    return [f"{a}_{b}" for a, b in zip(tokens, tokens[1:])]
