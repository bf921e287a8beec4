"""
adapters/openai_llm.py
──────────────────────────────────────────────────────────────────────────────
Implements LLMPort using the OpenAI Chat Completions API over plain requests.

Behaviour per call:
  - one system message and one user message; model, temperature and
    max_tokens come from Settings
  - no JSON mode: the ranking prompt wants a bare JSON array and
    {"type": "json_object"} only admits objects
  - up to LLM_RETRIES attempts (default 1), doubling the pause between them;
    only network errors and HTTP 429 / 500 / 503 are retried

Outcomes:
  text        → stripped message content
  None        → transient failure outlasted the retries, or an empty reply
  raises      → AuthenticationError on 401, LLMError on any other rejection

Env vars:
  OPENAI_API_KEY     — required (sk-...)
  OPENAI_LLM_MODEL   — default: gpt-4o-mini
"""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

import requests

from socmatch.config.settings import Settings
from socmatch.domain.exceptions import AuthenticationError, LLMError

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
RETRYABLE_STATUS = frozenset({429, 500, 503})
INITIAL_BACKOFF = 2.0


class _Retry(Exception):
    """Internal signal: this attempt failed transiently."""


class OpenAILLMAdapter:
    """Blocking OpenAI chat client used by LLMOccupationRanker.

    Constructed by services/container.py only when ``OPENAI_API_KEY`` is set.
    """

    def __init__(self, settings: Settings) -> None:
        if not settings.openai_api_key:
            raise AuthenticationError(
                "OPENAI_API_KEY is not set; AI ranking needs an OpenAI key."
            )
        self._settings = settings
        self._headers = {
            "Authorization": f"Bearer {settings.openai_api_key}",
            "Content-Type": "application/json",
        }

    @property
    def model_name(self) -> str:
        return self._settings.openai_llm_model

    def generate(self, system_prompt: str, user_message: str) -> Optional[str]:
        """Run one chat completion and return the reply text.

        Raises:
            AuthenticationError: The key was rejected (HTTP 401).
            LLMError: The request was rejected for any other non-retryable
                reason (e.g. HTTP 400 for an unknown model).
        """
        body = {
            "model": self._settings.openai_llm_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "temperature": self._settings.llm_temperature,
            "max_tokens": self._settings.llm_max_tokens,
        }
        attempts = max(self._settings.llm_retries, 1)
        pause = INITIAL_BACKOFF

        for attempt in range(1, attempts + 1):
            try:
                return self._attempt(body)
            except _Retry as exc:
                logger.warning(
                    "OpenAI attempt %d/%d failed: %s", attempt, attempts, exc
                )
            if attempt < attempts:
                time.sleep(pause)
                pause *= 2

        logger.error(
            "OpenAI gave no usable reply after %d attempt(s) | model=%s",
            attempts,
            self.model_name,
        )
        return None

    # ── Private helpers ────────────────────────────────────────────────────

    def _attempt(self, body: dict[str, Any]) -> Optional[str]:
        try:
            resp = requests.post(
                CHAT_COMPLETIONS_URL,
                headers=self._headers,
                json=body,
                timeout=self._settings.llm_timeout,
            )
        except requests.RequestException as exc:
            raise _Retry(exc) from exc

        status = resp.status_code
        if status == 401:
            raise AuthenticationError("OpenAI rejected the API key (HTTP 401).")
        if status in RETRYABLE_STATUS:
            raise _Retry(f"HTTP {status}")
        if not resp.ok:
            raise LLMError(f"OpenAI HTTP {status}: {resp.text[:300]}")

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error("OpenAI replied with a non-JSON body: %s", exc)
            return None
        return _message_content(payload)


def _message_content(payload: Any) -> Optional[str]:
    """First choice's message content, stripped; None when absent or blank."""
    try:
        content = payload["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError) as exc:
        logger.warning("Unexpected OpenAI response shape: %s", exc)
        return None
    return content.strip() or None
