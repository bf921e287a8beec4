"""
services/container.py
──────────────────────────────────────────────────────────────────────────────
Dependency Injection container.

THIS IS THE ONLY FILE THAT NAMES CONCRETE ADAPTER CLASSES.

Wiring is driven by environment variables — no code changes are needed to
enable or disable features:

  TAXONOMY_PATH=...        → JSONTaxonomyAdapter source file
  OPENAI_API_KEY=sk-...    → LLMOccupationRanker(OpenAILLMAdapter) enabled
  OPENAI_API_KEY unset     → no ranker; AI matches are always None

Replace the taxonomy source:
  - from socmatch.adapters.json_taxonomy import JSONTaxonomyAdapter
  + from socmatch.adapters.csv_taxonomy import CSVTaxonomyAdapter

Startup:
  The index is built here, once.  A missing or malformed taxonomy raises
  TaxonomyError from get_pipeline(); the process should not serve without it.
  @lru_cache(maxsize=1) makes get_pipeline() return the same instance across
  calls; each worker process builds its own index.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from socmatch.adapters.json_taxonomy import JSONTaxonomyAdapter
from socmatch.config.settings import Settings, get_settings
from socmatch.ports.ranker_port import OccupationRankerPort
from socmatch.ports.taxonomy_port import TaxonomySourcePort
from socmatch.services.index import TaxonomyIndex
from socmatch.services.pipeline import SOCMatchPipeline

logger = logging.getLogger(__name__)


def _build_ranker(settings: Settings) -> Optional[OccupationRankerPort]:
    """Instantiate the AI ranker when an OpenAI key is configured."""
    if not settings.ai_available:
        logger.info("AI ranking disabled (OPENAI_API_KEY not set)")
        return None
    from socmatch.adapters.openai_llm import OpenAILLMAdapter
    from socmatch.services.ai_ranker import LLMOccupationRanker
    logger.info("AI ranking provider: OpenAI (%s)", settings.openai_llm_model)
    return LLMOccupationRanker(llm=OpenAILLMAdapter(settings), settings=settings)


def build_pipeline(
    settings: Settings,
    taxonomy: Optional[TaxonomySourcePort] = None,
    ranker: Optional[OccupationRankerPort] = None,
) -> SOCMatchPipeline:
    """Wire a pipeline from explicit parts; defaults come from settings.

    Raises:
        TaxonomyError: If the taxonomy cannot be loaded or indexed.
    """
    taxonomy = taxonomy or JSONTaxonomyAdapter(settings)
    if ranker is None:
        ranker = _build_ranker(settings)

    index = TaxonomyIndex.build(taxonomy.load())
    return SOCMatchPipeline(index=index, ranker=ranker, settings=settings)


@lru_cache(maxsize=1)
def get_pipeline() -> SOCMatchPipeline:
    """Build and return the fully wired SOCMatchPipeline singleton.

    Returns:
        Fully initialised SOCMatchPipeline ready for use.

    Raises:
        TaxonomyError: If the taxonomy is missing or malformed.
    """
    settings = get_settings()
    logger.info("Building SOCMatchPipeline | taxonomy=%s", settings.taxonomy_path)
    pipeline = build_pipeline(settings)
    logger.info(
        "SOCMatchPipeline ready | entries=%d ai_available=%s",
        pipeline.index.entry_count,
        pipeline.ai_available,
    )
    return pipeline
