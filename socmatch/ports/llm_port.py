"""
ports/llm_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for LLM (large language model) providers.

Current implementation: OpenAILLMAdapter (OpenAI Chat Completions)
To swap to another provider: write an adapter implementing this Protocol,
then change ONE line in services/container.py.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMPort(Protocol):
    """Contract for a text-generating LLM provider."""

    @property
    def model_name(self) -> str:
        """Identifier of the underlying LLM."""
        ...

    def generate(
        self,
        system_prompt: str,
        user_message: str,
    ) -> str | None:
        """Send a prompt to the LLM and return its text response.

        Blocking call.  The caller is responsible for parsing the returned
        string (the ranking prompt asks for a JSON array).

        Args:
            system_prompt: System-level instruction.
            user_message:  User-turn content.

        Returns:
            Raw response text, or None if the call failed.

        Raises:
            AuthenticationError: If credentials are rejected.
            LLMError: If the provider rejects the request outright.
        """
        ...
