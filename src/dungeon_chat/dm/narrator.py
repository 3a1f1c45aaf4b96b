"""Narrator model client.

The turn engine only needs one capability from the language model: given
the prompt messages, return the narrator's text. ``Narrator`` is that
contract; ``OpenAINarrator`` implements it with the openai SDK against any
OpenAI-compatible endpoint (DeepSeek by default).

No retries happen here. A failed call surfaces as an ``AIControlError``
subclass and the player re-submits the action.
"""

from __future__ import annotations

from typing import Any, Protocol

import openai
from openai import OpenAI

from dungeon_chat.core.config import get_settings
from dungeon_chat.core.exceptions import (
    AIConnectionError,
    AIRateLimitError,
    AIResponseError,
    ConfigurationError,
)
from dungeon_chat.core.logging import get_logger


logger = get_logger(__name__)


class Narrator(Protocol):
    """Anything that turns prompt messages into narrator text."""

    def generate(self, messages: list[dict[str, str]]) -> str:
        """Return the raw narrator response for ``messages``."""
        ...


class OpenAINarrator:
    """Narrator backed by an OpenAI-compatible chat completions endpoint.

    Settings are read lazily from ``get_settings().llm`` for any argument
    left as None.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        timeout_seconds: float | None = None,
        client: Any = None,
    ) -> None:
        """Initialize the narrator.

        Args:
            api_key: Endpoint API key. If None, reads from settings.
            base_url: Endpoint base URL. If None, reads from settings.
            model: Chat model identifier. If None, reads from settings.
            temperature: Sampling temperature. If None, reads from settings.
            timeout_seconds: Request timeout. If None, reads from settings.
            client: Pre-built OpenAI client (tests inject a stub here).
        """
        llm = get_settings().llm
        self.base_url = base_url or llm.base_url
        self.model = model or llm.model
        self.temperature = llm.temperature if temperature is None else temperature
        self.timeout_seconds = timeout_seconds or llm.timeout_seconds
        self._api_key = api_key
        self._client: Any = client

    def _get_client(self) -> Any:
        """Get or create the OpenAI client."""
        if self._client is None:
            api_key = self._api_key
            if api_key is None:
                key = get_settings().llm.api_key
                if key:
                    api_key = key.get_secret_value()

            if not api_key:
                raise ConfigurationError(
                    "Narrator API key not configured",
                    config_key="llm.api_key",
                    details={"env_var": "DUNGEON_CHAT_LLM_API_KEY"},
                )

            self._client = OpenAI(
                api_key=api_key,
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                max_retries=0,
            )

        return self._client

    def generate(self, messages: list[dict[str, str]]) -> str:
        """Send one chat completion request and return the text.

        Args:
            messages: System prompt, history window and user utterance.

        Returns:
            The narrator's raw response.

        Raises:
            AIConnectionError: The endpoint is unreachable or timed out.
            AIRateLimitError: The provider rejected the call with 429.
            AIResponseError: Error status, or a response without content.
        """
        client = self._get_client()
        logger.debug("Calling narrator", model=self.model, messages=len(messages))

        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
            )
        except openai.APITimeoutError as exc:
            raise AIConnectionError(
                f"Narrator timed out after {self.timeout_seconds}s",
                model=self.model,
                provider=self.base_url,
            ) from exc
        except openai.APIConnectionError as exc:
            raise AIConnectionError(
                f"Narrator endpoint unreachable: {exc}",
                model=self.model,
                provider=self.base_url,
            ) from exc
        except openai.RateLimitError as exc:
            retry_after = exc.response.headers.get("retry-after")
            raise AIRateLimitError(
                "Narrator rate limit exceeded",
                retry_after_seconds=float(retry_after) if retry_after and retry_after.isdigit() else None,
                model=self.model,
                provider=self.base_url,
            ) from exc
        except openai.APIStatusError as exc:
            raise AIResponseError(
                f"Narrator returned HTTP {exc.status_code}",
                model=self.model,
                provider=self.base_url,
                details={"status_code": exc.status_code},
            ) from exc

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content or not content.strip():
            raise AIResponseError(
                "Narrator returned an empty response",
                model=self.model,
                provider=self.base_url,
            )

        return content


__all__ = [
    "Narrator",
    "OpenAINarrator",
]
