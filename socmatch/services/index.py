"""
services/index.py
──────────────────────────────────────────────────────────────────────────────
Taxonomy Index: inverted keyword index over the SOC taxonomy.

Built ONCE at startup from the full entry collection, then shared read-only
by every match call.  No locking is needed because nothing mutates it after
build() returns.

Layout:
  postings : token | bigram  → tuple of codes (first-seen order, no duplicates)
  by_code  : code            → OccupationEntry

Posting lists are ordered tuples rather than sets so that score accumulation
(and therefore tie-breaking in the matcher) is identical across processes;
string hashing is randomised per interpreter.

Duplicate codes: last write wins in ``by_code``.  Every entry's text is still
indexed, and the entry count used for IDF includes duplicates.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Union

from pydantic import ValidationError

from socmatch.domain.exceptions import TaxonomyError
from socmatch.domain.models import OccupationEntry
from socmatch.services.tokenizer import bigrams, tokenize

logger = logging.getLogger(__name__)

EntryLike = Union[OccupationEntry, Mapping[str, Any]]


class TaxonomyIndex:
    """Immutable inverted index plus the canonical entry records.

    Construct with :meth:`build` (or :func:`build_index`); the constructor
    only wraps already-built structures.
    """

    def __init__(
        self,
        entries: tuple[OccupationEntry, ...],
        by_code: Mapping[str, OccupationEntry],
        postings: Mapping[str, tuple[str, ...]],
        title_tokens: tuple[tuple[str, ...], ...] | None = None,
    ) -> None:
        self._entries = entries
        if title_tokens is None:
            title_tokens = tuple(tuple(tokenize(e.title)) for e in entries)
        self._title_tokens = title_tokens
        self._by_code = MappingProxyType(dict(by_code))
        self._postings = MappingProxyType(dict(postings))

    # ── Build ──────────────────────────────────────────────────────────────

    @classmethod
    def build(cls, entries: Iterable[EntryLike]) -> "TaxonomyIndex":
        """Build the index in a single pass over the taxonomy.

        Args:
            entries: OccupationEntry objects or raw mappings (camelCase or
                     snake_case keys).

        Returns:
            A fully built, read-only TaxonomyIndex.

        Raises:
            TaxonomyError: If any entry is malformed (e.g. missing ``code``).
                           No partial index is ever returned.
        """
        validated: list[OccupationEntry] = []
        by_code: dict[str, OccupationEntry] = {}
        postings: dict[str, dict[str, None]] = {}
        title_tokens: list[tuple[str, ...]] = []
        duplicates = 0

        for position, raw in enumerate(entries):
            entry = _coerce_entry(raw, position)
            validated.append(entry)
            title_tokens.append(tuple(tokenize(entry.title)))

            if entry.code in by_code:
                duplicates += 1
            by_code[entry.code] = entry

            tokens = tokenize(entry.indexed_text)
            for key in [*tokens, *bigrams(tokens)]:
                postings.setdefault(key, {})[entry.code] = None

        if duplicates:
            logger.warning(
                "Taxonomy contains %d duplicate code(s) — later entries replace earlier ones",
                duplicates,
            )

        index = cls(
            entries=tuple(validated),
            by_code=by_code,
            postings={key: tuple(codes) for key, codes in postings.items()},
            title_tokens=tuple(title_tokens),
        )
        logger.info(
            "Taxonomy index built | entries=%d codes=%d keys=%d",
            index.entry_count,
            len(by_code),
            len(postings),
        )
        return index

    # ── Read-only accessors ────────────────────────────────────────────────

    @property
    def entries(self) -> tuple[OccupationEntry, ...]:
        """All entries in taxonomy order (duplicates included)."""
        return self._entries

    @property
    def title_tokens(self) -> tuple[tuple[str, ...], ...]:
        """Tokenized titles, aligned position-for-position with ``entries``."""
        return self._title_tokens

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def keys(self) -> Mapping[str, tuple[str, ...]]:
        return self._postings

    def lookup(self, key: str) -> tuple[str, ...]:
        """Codes whose text contains the token or bigram ``key`` (empty if none)."""
        return self._postings.get(key, ())

    def get(self, code: str) -> OccupationEntry | None:
        return self._by_code.get(code)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __len__(self) -> int:
        return len(self._entries)


def build_index(entries: Iterable[EntryLike]) -> TaxonomyIndex:
    """Module-level alias for :meth:`TaxonomyIndex.build`."""
    return TaxonomyIndex.build(entries)


def _coerce_entry(raw: EntryLike, position: int) -> OccupationEntry:
    if isinstance(raw, OccupationEntry):
        return raw
    try:
        return OccupationEntry.model_validate(raw)
    except ValidationError as exc:
        raise TaxonomyError(
            f"Malformed taxonomy entry at position {position}: {exc}"
        ) from exc
