"""
services/search.py
──────────────────────────────────────────────────────────────────────────────
Plain keyword lookup over the taxonomy (browse / autocomplete use case).

Unlike the matcher there is no scoring: an entry qualifies when every word of
the query is a substring of its ``code title major minor broad`` text.
Results keep taxonomy order.
"""
from __future__ import annotations

from socmatch.domain.models import OccupationEntry, SearchResponse
from socmatch.services.index import TaxonomyIndex

DEFAULT_SEARCH_LIMIT = 50


def search_occupations(
    index: TaxonomyIndex,
    query: str | None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> SearchResponse:
    """Find entries containing every word of ``query``.

    An empty query returns no results and ``total`` equal to the taxonomy
    size, so callers can display "N codes available".
    """
    q = (query or "").lower().strip()
    if not q:
        return SearchResponse(results=[], total=index.entry_count)

    words = q.split()
    results = [
        entry for entry in index.entries if _contains_all(entry, words)
    ][: max(limit, 0)]
    return SearchResponse(results=results, total=len(results), query=q)


def _contains_all(entry: OccupationEntry, words: list[str]) -> bool:
    haystack = (
        f"{entry.code} {entry.title} {entry.major_group} "
        f"{entry.minor_group} {entry.broad_group}"
    ).lower()
    return all(word in haystack for word in words)
