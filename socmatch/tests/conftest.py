"""
tests/conftest.py
──────────────────────────────────────────────────────────────────────────────
Shared pytest fixtures and fake adapter implementations.

Fake adapters implement the Port Protocols via structural subtyping — they do
NOT inherit from any base class.  pytest uses them to test service logic
without any real OpenAI calls or taxonomy files.

Fixture hierarchy:
  soc_records    → raw camelCase taxonomy rows (as in soc_codes.json)
  index          → TaxonomyIndex built from soc_records
  fake_ranker    → implements OccupationRankerPort (canned triples)
  failing_ranker → raises on every call
  slow_ranker    → never finishes within the test timeout
  fake_llm       → implements LLMPort (pre-baked text reply)
  pipeline       → SOCMatchPipeline wired with index + fake_ranker
"""
from __future__ import annotations

import asyncio
import json

import pytest

from socmatch.config.settings import Settings
from socmatch.domain.exceptions import RankingError
from socmatch.domain.models import ExternalMatch, ProgramQuery
from socmatch.services.index import TaxonomyIndex
from socmatch.services.pipeline import SOCMatchPipeline


# ── Settings fixture ───────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def settings(tmp_path_factory) -> Settings:
    """Return a Settings instance with sane test defaults (AI disabled)."""
    return Settings(
        taxonomy_path=tmp_path_factory.mktemp("data") / "soc_codes.json",
        default_top_n=10,
        search_limit=50,
        openai_api_key="",
        openai_llm_model="gpt-test",
        llm_timeout=5,
        llm_retries=1,
        ai_rank_timeout=0.2,
    )


# ── Taxonomy fixture data ──────────────────────────────────────────────────

SOC_RECORDS: list[dict] = [
    {
        "code": "15-1252",
        "title": "Software Developers",
        "majorGroup": "Computer and Mathematical Occupations",
        "minorGroup": "Computer Occupations",
        "broadGroup": "Software and Web Developers, Programmers, and Testers",
    },
    {
        "code": "15-1211",
        "title": "Computer Systems Analysts",
        "majorGroup": "Computer and Mathematical Occupations",
        "minorGroup": "Computer Occupations",
        "broadGroup": "Computer and Information Analysts",
    },
    {
        "code": "15-2041",
        "title": "Statisticians",
        "majorGroup": "Computer and Mathematical Occupations",
        "minorGroup": "Mathematical Science Occupations",
        "broadGroup": "Statisticians",
    },
    {
        "code": "29-1141",
        "title": "Registered Nurses",
        "majorGroup": "Healthcare Practitioners and Technical Occupations",
        "minorGroup": "Healthcare Diagnosing or Treating Practitioners",
        "broadGroup": "Registered Nurses",
    },
    {
        "code": "29-1171",
        "title": "Nurse Practitioners",
        "majorGroup": "Healthcare Practitioners and Technical Occupations",
        "minorGroup": "Healthcare Diagnosing or Treating Practitioners",
        "broadGroup": "Nurse Practitioners",
    },
    {
        "code": "19-2031",
        "title": "Chemists",
        "majorGroup": "Life, Physical, and Social Science Occupations",
        "minorGroup": "Physical Scientists",
        "broadGroup": "Chemists and Materials Scientists",
    },
    {
        "code": "25-1021",
        "title": "Computer Science Teachers, Postsecondary",
        "majorGroup": "Educational Instruction and Library Occupations",
        "minorGroup": "Postsecondary Teachers",
        "broadGroup": "Postsecondary Teachers",
    },
    {
        "code": "27-1024",
        "title": "Graphic Designers",
        "majorGroup": "Arts, Design, Entertainment, Sports, and Media Occupations",
        "minorGroup": "Art and Design Workers",
        "broadGroup": "Designers",
    },
]

# Minimal two-entry taxonomy used by the ranking scenarios.
TWO_ENTRY_RECORDS: list[dict] = [
    {"code": "15-1252", "title": "Software Developers",
     "majorGroup": "Computer and Mathematical"},
    {"code": "29-1141", "title": "Registered Nurses", "majorGroup": "Healthcare"},
]


@pytest.fixture
def soc_records() -> list[dict]:
    return [dict(r) for r in SOC_RECORDS]


@pytest.fixture
def index(soc_records) -> TaxonomyIndex:
    return TaxonomyIndex.build(soc_records)


@pytest.fixture
def two_entry_index() -> TaxonomyIndex:
    return TaxonomyIndex.build(TWO_ENTRY_RECORDS)


# ── Fake rankers (OccupationRankerPort) ────────────────────────────────────

class FakeRanker:
    """Returns canned triples; one known code, one unknown."""

    model_name = "fake-ranker"

    RESPONSE = [
        ExternalMatch(code="29-1141", title="RN (model title)",
                      reason="Nursing programs lead to RN licensure."),
        ExternalMatch(code="29-9999", title="Invented Occupation",
                      reason="Not in the taxonomy."),
    ]

    def __init__(self) -> None:
        self.calls: list[tuple[ProgramQuery, int]] = []

    async def rank(self, program: ProgramQuery, top_n: int) -> list[ExternalMatch]:
        self.calls.append((program, top_n))
        return list(self.RESPONSE)


class FailingRanker:
    """Raises like a network or parse failure would."""

    model_name = "failing-ranker"

    async def rank(self, program: ProgramQuery, top_n: int) -> list[ExternalMatch]:
        raise RankingError("simulated upstream failure")


class SlowRanker:
    """Sleeps longer than any test timeout."""

    model_name = "slow-ranker"

    async def rank(self, program: ProgramQuery, top_n: int) -> list[ExternalMatch]:
        await asyncio.sleep(10)
        return []


# ── Fake LLM (LLMPort) ─────────────────────────────────────────────────────

class FakeLLM:
    """Returns a pre-baked reply wrapped in prose and a markdown fence."""

    model_name = "fake-llm"

    REPLY = "Here are the codes:\n```json\n" + json.dumps(
        [
            {"code": "15-1252", "title": "Software Developers",
             "reason": "Core career path for CS graduates."},
            {"code": "15-1211", "title": "Computer Systems Analysts",
             "reason": "Common alternative role."},
        ]
    ) + "\n```"

    def __init__(self, reply: str | None = REPLY) -> None:
        self._reply = reply
        self.prompts: list[tuple[str, str]] = []

    def generate(self, system_prompt: str, user_message: str) -> str | None:
        self.prompts.append((system_prompt, user_message))
        return self._reply


# ── pytest fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def fake_ranker():
    return FakeRanker()


@pytest.fixture
def failing_ranker():
    return FailingRanker()


@pytest.fixture
def slow_ranker():
    return SlowRanker()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def pipeline(index, fake_ranker, settings):
    return SOCMatchPipeline(index=index, ranker=fake_ranker, settings=settings)
