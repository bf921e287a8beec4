"""
domain/exceptions.py
──────────────────────────────────────────────────────────────────────────────
Custom exception hierarchy.

All exceptions are rooted at SOCMatchError so callers can catch broadly
(except SOCMatchError) or narrowly (except TaxonomyError).

When adding an HTTP layer, map these to appropriate status codes:
  AuthenticationError → 401
  TaxonomyError       → 503 (the process should not have started)
  LLMError            → 502
  RankingError        → never surfaced; the matcher falls back to local results
  ValidationError     → 422 (Pydantic handles this automatically)
"""
from __future__ import annotations


class SOCMatchError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(SOCMatchError):
    """Raised when required configuration is missing or invalid."""


class AuthenticationError(SOCMatchError):
    """Raised when the LLM provider rejects or lacks credentials."""


class TaxonomyError(SOCMatchError):
    """Raised when the taxonomy cannot be loaded or an entry is malformed.

    Fatal at startup: no index is built from a partial taxonomy.
    """


class LLMError(SOCMatchError):
    """Raised when the LLM provider rejects a request."""


class RankingError(SOCMatchError):
    """Raised when the alternate ranking strategy returns unusable output."""
