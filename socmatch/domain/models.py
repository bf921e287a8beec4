"""
domain/models.py
──────────────────────────────────────────────────────────────────────────────
Pure domain objects — Pydantic models with no imports from adapters or ports.

These models are the lingua franca of the entire system:
  • adapters produce and consume them
  • services orchestrate them
  • interfaces (CLI, future HTTP layer) serialise them

Field names are snake_case in Python and camelCase on the wire
(``majorGroup``, ``relevanceScore``, ``longName`` …) so the JSON produced by
``to_dict()`` matches the taxonomy and program files the data loaders read.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Base: accept both snake_case names and camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Enums ──────────────────────────────────────────────────────────────────────

class MatchSource(str, Enum):
    """Provenance of a ScoredMatch."""
    LOCAL = "local"   # inverted-index keyword scoring
    AI    = "ai"      # alternate ranking strategy (LLM)


# ── Taxonomy ───────────────────────────────────────────────────────────────────

class OccupationEntry(_CamelModel):
    """A canonical occupation record from the SOC taxonomy.

    Immutable once loaded.  Only ``code`` is required; missing group labels
    are normalised to empty strings.
    """

    model_config = ConfigDict(frozen=True)

    code:        str = Field(..., min_length=1)
    title:       str = ""
    major_group: str = ""
    minor_group: str = ""
    broad_group: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def coerce_code(cls, v: Any) -> Any:
        if v is None:
            return v
        return str(v).strip()

    @field_validator("title", "major_group", "minor_group", "broad_group", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def indexed_text(self) -> str:
        """Title and group labels, space-joined, as fed to the index."""
        return f"{self.title} {self.major_group} {self.minor_group} {self.broad_group}"


# ── Input ──────────────────────────────────────────────────────────────────────

class ProgramQuery(_CamelModel):
    """An academic program record to be matched.  Every field is optional."""

    name:               Optional[str] = None
    long_name:          Optional[str] = None
    code:               Optional[str] = None
    cip_code:           Optional[str] = None
    program_type:       Optional[str] = Field(None, alias="type")
    degree_designation: Optional[str] = None
    college:            Optional[str] = None
    level:              Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_str(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @property
    def display_name(self) -> str:
        return self.long_name or self.name or ""

    def query_fields(self) -> list[Optional[str]]:
        """Fields that make up the query text, in match order."""
        return [
            self.long_name,
            self.name,
            self.program_type,
            self.degree_designation,
            self.college,
            self.level,
        ]


class MatchRequest(_CamelModel):
    """Validated input to SOCMatchPipeline.match()."""

    program: ProgramQuery
    top_n:   int  = Field(10, le=100, description="Maximum number of matches per source")
    use_ai:  bool = Field(False, alias="useAI",
                          description="Also ask the alternate ranking strategy")


# ── Ranker output ──────────────────────────────────────────────────────────────

class ExternalMatch(_CamelModel):
    """A single (code, title, reason) triple from the alternate ranker."""

    code:   str = Field(..., min_length=1)
    title:  str = ""
    reason: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def coerce_code(cls, v: Any) -> Any:
        if v is None:
            return v
        return str(v).strip()

    @field_validator("title", "reason", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


# ── Matcher output ─────────────────────────────────────────────────────────────

class ScoredMatch(OccupationEntry):
    """An occupation entry ranked for a query.

    Local matches carry ``relevance_score``.  AI matches carry ``reason`` and
    ``verified`` (True when the code exists in the local taxonomy).
    """

    relevance_score: Optional[float] = None
    reason:          Optional[str]   = None
    source:          MatchSource     = MatchSource.LOCAL
    verified:        Optional[bool]  = None


class MergedMatches(_CamelModel):
    """Result of match_and_merge(): local results plus the optional AI side channel."""

    local_matches:    list[ScoredMatch]
    external_matches: Optional[list[ScoredMatch]] = None


# ── Pipeline output ────────────────────────────────────────────────────────────

class ProgramSummary(_CamelModel):
    name:     str = ""
    code:     Optional[str] = None
    cip_code: Optional[str] = None


class MatchResponse(_CamelModel):
    """Complete response from SOCMatchPipeline.match().

    This is the object serialised to JSON when serving via an API endpoint.
    """

    program:       ProgramSummary
    local_matches: list[ScoredMatch]
    ai_matches:    Optional[list[ScoredMatch]] = None
    ai_available:  bool = False
    ai_model:      str  = ""
    generated_at:  datetime = Field(
                       default_factory=lambda: datetime.now(timezone.utc)
                   )

    def to_dict(self) -> dict:
        """Serialise to a plain camelCase dict (JSON-safe)."""
        return self.model_dump(mode="json", by_alias=True)


class SearchResponse(_CamelModel):
    """Keyword search over the taxonomy."""

    results: list[OccupationEntry]
    total:   int
    query:   str = ""

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
