"""
services/pipeline.py
──────────────────────────────────────────────────────────────────────────────
Pipeline orchestrator: wraps the built TaxonomyIndex and the optional
alternate ranker behind request/response objects.

This is the primary entry point for all interfaces (CLI, future HTTP layer).
It knows nothing about infrastructure — it only speaks in domain objects.

match():
  Local keyword matching always runs.  When the request sets ``use_ai`` and a
  ranker is wired, the ranker's matches are attached as ``ai_matches``;
  otherwise ``ai_matches`` is None.  A failing ranker never fails the call.

search() / all_occupations():
  Browse the taxonomy without scoring.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from socmatch.config.settings import Settings
from socmatch.domain.models import (
    MatchRequest,
    MatchResponse,
    ProgramSummary,
    SearchResponse,
)
from socmatch.ports.ranker_port import OccupationRankerPort
from socmatch.services.index import TaxonomyIndex
from socmatch.services.matcher import match_and_merge
from socmatch.services.search import search_occupations

logger = logging.getLogger(__name__)


class SOCMatchPipeline:
    """Program → SOC code matching service.

    Inject via services/container.py — do not instantiate directly in
    application code.  Safe to share across concurrent requests: the index
    is read-only and the pipeline holds no per-request state.

    Args:
        index:    Built TaxonomyIndex.
        ranker:   Optional OccupationRankerPort (None = AI matching disabled).
        settings: Shared application settings.
    """

    def __init__(
        self,
        index: TaxonomyIndex,
        ranker: Optional[OccupationRankerPort],
        settings: Settings,
    ) -> None:
        self._index = index
        self._ranker = ranker
        self._settings = settings

    # ── Public API ─────────────────────────────────────────────────────────

    @property
    def index(self) -> TaxonomyIndex:
        return self._index

    @property
    def ai_available(self) -> bool:
        return self._ranker is not None

    async def match(self, request: MatchRequest) -> MatchResponse:
        """Match a program record to SOC codes.

        Args:
            request: Validated MatchRequest (program, top_n, use_ai).

        Returns:
            MatchResponse with local matches and, if requested and
            available, AI matches.
        """
        program = request.program
        use_ai = request.use_ai and self.ai_available
        logger.info(
            "match | program=%r top_n=%d use_ai=%s",
            program.display_name[:80],
            request.top_n,
            use_ai,
        )

        merged = await match_and_merge(
            self._index,
            program,
            top_n=request.top_n,
            ranker=self._ranker if use_ai else None,
            timeout=self._settings.ai_rank_timeout,
        )

        return MatchResponse(
            program=ProgramSummary(
                name=program.display_name,
                code=program.code,
                cip_code=program.cip_code,
            ),
            local_matches=merged.local_matches,
            ai_matches=merged.external_matches,
            ai_available=self.ai_available,
            ai_model=self._ranker.model_name if use_ai else "",
            generated_at=datetime.now(tz=timezone.utc),
        )

    def search(self, query: str, limit: int | None = None) -> SearchResponse:
        """Keyword search over the taxonomy (every word must appear)."""
        if limit is None:
            limit = self._settings.search_limit
        return search_occupations(self._index, query, limit=limit)

    def all_occupations(self) -> SearchResponse:
        """Every taxonomy entry, in source order."""
        entries = list(self._index.entries)
        return SearchResponse(results=entries, total=len(entries))
