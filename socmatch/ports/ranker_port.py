"""
ports/ranker_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the alternate (non-lexical) ranking strategy.

The matcher treats any implementation as an optional side channel:
  • it may be absent (feature disabled) — pass ranker=None
  • it may fail or time out — the matcher logs and reports no AI matches
  • it never changes local keyword scoring

Current implementation: LLMOccupationRanker (services/ai_ranker.py) over any
LLMPort.  Tests use in-memory fakes (tests/conftest.py).
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from socmatch.domain.models import ExternalMatch, ProgramQuery


@runtime_checkable
class OccupationRankerPort(Protocol):
    """Contract for an asynchronous occupation ranking strategy."""

    @property
    def model_name(self) -> str:
        """Identifier of the underlying model or strategy."""
        ...

    async def rank(self, program: ProgramQuery, top_n: int) -> list[ExternalMatch]:
        """Return up to ``top_n`` occupation codes for a program, best first.

        Args:
            program: The program record being matched.
            top_n:   Number of codes requested.

        Returns:
            Ordered list of (code, title, reason) triples.  Codes are not
            guaranteed to exist in the local taxonomy.

        Raises:
            RankingError: On unusable output.  Any exception is tolerated by
                          the caller.
        """
        ...
