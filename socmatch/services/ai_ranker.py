"""
services/ai_ranker.py
──────────────────────────────────────────────────────────────────────────────
Alternate ranking strategy: ask an LLM for SOC codes directly.

Responsibilities:
  1. Build the prompt from the program record (via config/prompts.py).
  2. Call the LLMPort in a worker thread (adapters are blocking).
  3. Pull the first JSON array out of the reply and validate each item into
     an ExternalMatch.

Implements OccupationRankerPort.  It raises on unusable output instead of
returning an empty list: the matcher turns any failure into
``external_matches=None`` and keeps serving local results.

Codes are NOT checked against the taxonomy here — verification happens in
services/matcher.py, which owns the index.
"""
from __future__ import annotations

import asyncio
import json
import logging
import re

from pydantic import ValidationError

from socmatch.config.prompts import build_system_prompt, build_user_message
from socmatch.config.settings import Settings
from socmatch.domain.exceptions import RankingError
from socmatch.domain.models import ExternalMatch, ProgramQuery
from socmatch.ports.llm_port import LLMPort

logger = logging.getLogger(__name__)

# Greedy: from the first "[" to the last "]" so nested arrays survive.
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


class LLMOccupationRanker:
    """Rank SOC codes for a program using an LLM.

    Args:
        llm:      Any object satisfying LLMPort.
        settings: Shared application settings.
    """

    def __init__(self, llm: LLMPort, settings: Settings) -> None:
        self._llm = llm
        self._settings = settings
        logger.debug("LLMOccupationRanker init | model=%s", llm.model_name)

    # ── OccupationRankerPort implementation ────────────────────────────────

    @property
    def model_name(self) -> str:
        return self._llm.model_name

    async def rank(self, program: ProgramQuery, top_n: int) -> list[ExternalMatch]:
        """Ask the LLM for the ``top_n`` most relevant SOC codes.

        Raises:
            RankingError: If the LLM returns nothing or no parseable array.
        """
        system = build_system_prompt()
        user = build_user_message(program, top_n)

        raw = await asyncio.to_thread(self._llm.generate, system, user)
        if not raw:
            raise RankingError(f"{self.model_name} returned an empty response")
        return parse_response(raw)


# ── Pure function: response parsing ────────────────────────────────────────

def parse_response(raw: str) -> list[ExternalMatch]:
    """Extract ExternalMatch items from free-form LLM text.

    The model may wrap the array in prose or markdown fences; the first
    ``[...]`` span is used.  Malformed items are skipped.

    Raises:
        RankingError: No JSON array found, or it does not decode to a list.
    """
    text = raw or ""
    found = _JSON_ARRAY.search(text)
    if not found:
        raise RankingError(f"No JSON array in LLM response: {text[:200]!r}")
    try:
        items = json.loads(found.group(0))
    except json.JSONDecodeError as exc:
        raise RankingError(f"Invalid JSON in LLM response: {exc}") from exc
    if not isinstance(items, list):
        raise RankingError(f"Expected a JSON array, got {type(items).__name__}")

    matches: list[ExternalMatch] = []
    for item in items:
        try:
            matches.append(ExternalMatch.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed ranker item %s: %s", item, exc)
    return matches
