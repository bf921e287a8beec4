"""
config/settings.py
──────────────────────────────────────────────────────────────────────────────
Single source of truth for all tuneable parameters.

All values can be overridden via environment variables or a .env file placed
at the project root.  The frozen dataclass ensures settings are never mutated
at runtime.

To swap data or providers, change the relevant env var — no code edits required:
  TAXONOMY_PATH     → load a different SOC taxonomy file
  OPENAI_API_KEY    → enable the AI ranking strategy (blank = disabled)
  OPENAI_LLM_MODEL  → swap LLM model
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from socmatch.domain.exceptions import ConfigurationError

# Load .env from project root (two levels up from this file)
load_dotenv(Path(__file__).parent.parent.parent / ".env")


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key, str(default))
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from exc


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key, str(default))
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from exc


def _env_path(key: str, default: Path) -> Path:
    return Path(os.getenv(key, str(default)))


@dataclass(frozen=True)
class Settings:
    """Immutable application settings loaded from environment variables."""

    # ── Taxonomy ───────────────────────────────────────────────────────────
    taxonomy_path: Path = field(
        default_factory=lambda: _env_path(
            "TAXONOMY_PATH",
            Path(__file__).parent.parent.parent / "data" / "soc_codes.json",
        )
    )

    # ── Matching ───────────────────────────────────────────────────────────
    default_top_n: int = field(
        default_factory=lambda: _env_int("DEFAULT_TOP_N", 10)
    )
    search_limit: int = field(
        default_factory=lambda: _env_int("SEARCH_LIMIT", 50)
    )

    # ── OpenAI (alternate ranking strategy) ────────────────────────────────
    openai_api_key: str = field(
        default_factory=lambda: _env("OPENAI_API_KEY", "")
    )
    openai_llm_model: str = field(
        default_factory=lambda: _env("OPENAI_LLM_MODEL", "gpt-4o-mini")
    )
    llm_temperature: float = field(
        default_factory=lambda: _env_float("LLM_TEMPERATURE", 0.3)
    )
    llm_max_tokens: int = field(
        default_factory=lambda: _env_int("LLM_MAX_TOKENS", 1500)
    )

    # ── Timeouts (seconds) ─────────────────────────────────────────────────
    # llm_timeout bounds the HTTP request; ai_rank_timeout bounds the whole
    # awaited ranker call, after which local results are returned alone.
    llm_timeout: int       = field(default_factory=lambda: _env_int("LLM_TIMEOUT", 30))
    llm_retries: int       = field(default_factory=lambda: _env_int("LLM_RETRIES", 1))
    ai_rank_timeout: float = field(default_factory=lambda: _env_float("AI_RANK_TIMEOUT", 45.0))

    @property
    def ai_available(self) -> bool:
        """True when an OpenAI key is configured."""
        return bool(self.openai_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Returns a cached singleton Settings instance.

    Use this everywhere instead of instantiating Settings() directly —
    it guarantees a single object is shared across the entire process.
    """
    return Settings()
