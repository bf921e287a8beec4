"""
services/matcher.py
──────────────────────────────────────────────────────────────────────────────
Query phase: score SOC codes for a program record against a TaxonomyIndex.

Composite relevance score for each code:

  unigram   Σ  ln(N / df(token))        for query tokens found in the index
  bigram    Σ  2 · ln(N / df(bigram))   for adjacent query-token pairs
  title     10 · hits / |title tokens|  for every entry whose title tokens
                                        occur as substrings of the query text

where N is the number of taxonomy entries and df the number of codes a key
maps to.  A key shared by every entry weighs 0; a key unique to one entry
weighs ln(N).  The title bonus dominates for near-exact title matches.

Ranking is score-descending with ties kept in first-scored order (Python's
sort is stable), so results are reproducible for identical inputs.

match_occupations() is a *pure function*: no I/O, no shared mutable state,
safe to call concurrently over one index.  match_and_merge() additionally
awaits the optional alternate ranker under a timeout; its failure is logged
and reported as ``external_matches=None``, never raised.
"""
from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from socmatch.domain.models import (
    ExternalMatch,
    MatchSource,
    MergedMatches,
    ProgramQuery,
    ScoredMatch,
)
from socmatch.ports.ranker_port import OccupationRankerPort
from socmatch.services.index import TaxonomyIndex
from socmatch.services.tokenizer import bigrams, tokenize

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 10
BIGRAM_WEIGHT = 2.0
TITLE_BONUS = 10.0
DEFAULT_RANK_TIMEOUT = 45.0

QueryLike = Union[ProgramQuery, Mapping[str, Any]]


# ── Public API ─────────────────────────────────────────────────────────────

def build_query_text(program: ProgramQuery) -> str:
    """Join the populated program fields (long name first) with single spaces."""
    return " ".join(value for value in program.query_fields() if value)


def score_codes(index: TaxonomyIndex, query_text: str) -> dict[str, float]:
    """Accumulate composite scores per code.

    Returns:
        Dict of code → raw score in first-scored order.  May contain zero
        scores (keys present in every entry).
    """
    scores: dict[str, float] = {}
    query_tokens = tokenize(query_text)

    _accumulate(scores, index, query_tokens, weight_factor=1.0)
    _accumulate(scores, index, bigrams(query_tokens), weight_factor=BIGRAM_WEIGHT)

    # Title containment runs over every entry, not only index hits.
    query_lower = query_text.lower()
    for entry, title_tokens in zip(index.entries, index.title_tokens):
        hits = sum(1 for token in title_tokens if token in query_lower)
        if hits:
            bonus = hits / len(title_tokens) * TITLE_BONUS
            scores[entry.code] = scores.get(entry.code, 0.0) + bonus

    return scores


def match_occupations(
    index: TaxonomyIndex,
    query: QueryLike,
    top_n: int = DEFAULT_TOP_N,
) -> list[ScoredMatch]:
    """Rank taxonomy entries for a program record.

    Args:
        index: Built TaxonomyIndex (read-only).
        query: ProgramQuery, or a mapping with its camelCase/snake_case fields.
        top_n: Maximum number of matches.  ``top_n <= 0`` returns ``[]``.

    Returns:
        Up to ``top_n`` ScoredMatch objects with a positive score, sorted by
        non-increasing ``relevance_score``.  Never padded.
    """
    if top_n <= 0:
        return []

    program = _coerce_query(query)
    query_text = build_query_text(program)
    scores = score_codes(index, query_text)

    ranked = sorted(
        (item for item in scores.items() if item[1] > 0),
        key=lambda item: item[1],
        reverse=True,
    )[:top_n]

    matches = [
        ScoredMatch(
            **index.get(code).model_dump(),
            relevance_score=round_score(score),
            source=MatchSource.LOCAL,
        )
        for code, score in ranked
    ]
    logger.debug(
        "match_occupations | query=%r tokens=%d scored=%d returned=%d",
        query_text[:80],
        len(tokenize(query_text)),
        len(scores),
        len(matches),
    )
    return matches


async def match_and_merge(
    index: TaxonomyIndex,
    query: QueryLike,
    top_n: int = DEFAULT_TOP_N,
    ranker: Optional[OccupationRankerPort] = None,
    timeout: float = DEFAULT_RANK_TIMEOUT,
) -> MergedMatches:
    """Local matches plus, when a ranker is supplied, its verified matches.

    The ranker is called once, and not at all when ``top_n <= 0``.  On
    timeout or any exception the failure is logged and ``external_matches``
    is None; local matches are unaffected.

    Args:
        index:   Built TaxonomyIndex.
        query:   Program record.
        top_n:   Maximum matches per source.
        ranker:  Optional OccupationRankerPort.
        timeout: Seconds to wait for the ranker.
    """
    program = _coerce_query(query)
    local_matches = match_occupations(index, program, top_n)

    external_matches = None
    if ranker is not None and top_n <= 0:
        external_matches = []
    elif ranker is not None:
        external_matches = await _rank_externally(index, program, top_n, ranker, timeout)

    return MergedMatches(
        local_matches=local_matches,
        external_matches=external_matches,
    )


def round_score(score: float) -> float:
    """Round half-up to two decimals (0.125 → 0.13)."""
    return math.floor(score * 100 + 0.5) / 100


# ── Private helpers ────────────────────────────────────────────────────────

def _accumulate(
    scores: dict[str, float],
    index: TaxonomyIndex,
    keys: Iterable[str],
    weight_factor: float,
) -> None:
    total = index.entry_count
    for key in keys:
        codes = index.lookup(key)
        if not codes:
            continue
        weight = math.log(total / len(codes)) * weight_factor
        for code in codes:
            scores[code] = scores.get(code, 0.0) + weight


async def _rank_externally(
    index: TaxonomyIndex,
    program: ProgramQuery,
    top_n: int,
    ranker: OccupationRankerPort,
    timeout: float,
) -> list[ScoredMatch] | None:
    """Call the ranker once and enrich its output from the local taxonomy."""
    try:
        raw = await asyncio.wait_for(ranker.rank(program, top_n), timeout)
        triples = [_coerce_external(item) for item in raw]
    except asyncio.TimeoutError:
        logger.warning(
            "Alternate ranker timed out after %.1fs — returning local matches only",
            timeout,
        )
        return None
    except Exception as exc:
        logger.warning(
            "Alternate ranker failed (%s: %s) — returning local matches only",
            type(exc).__name__,
            exc,
        )
        return None

    enriched = [_enrich(index, m) for m in triples[: max(top_n, 0)]]
    logger.debug(
        "Alternate ranker returned %d matches (%d verified)",
        len(enriched),
        sum(1 for m in enriched if m.verified),
    )
    return enriched


def _enrich(index: TaxonomyIndex, match: ExternalMatch) -> ScoredMatch:
    """Overlay local taxonomy fields when the code is known."""
    local = index.get(match.code)
    if local is not None:
        return ScoredMatch(
            **local.model_dump(),
            reason=match.reason,
            source=MatchSource.AI,
            verified=True,
        )
    return ScoredMatch(
        code=match.code,
        title=match.title,
        reason=match.reason,
        source=MatchSource.AI,
        verified=False,
    )


def _coerce_external(item: Any) -> ExternalMatch:
    if isinstance(item, ExternalMatch):
        return item
    if isinstance(item, Mapping):
        return ExternalMatch.model_validate(item)
    code, title, reason = item
    return ExternalMatch(code=code, title=title, reason=reason)


def _coerce_query(query: QueryLike) -> ProgramQuery:
    if isinstance(query, ProgramQuery):
        return query
    try:
        return ProgramQuery.model_validate(query or {})
    except ValidationError:
        logger.warning("Unusable query record %r — treating as empty", query)
        return ProgramQuery()
