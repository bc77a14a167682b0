# tasks/ai_engine/llm_client.py
"""
Language Model Client
=====================

Thin wrapper around the OpenAI Chat Completions API used by the today plan
generator and the task suggester.

This module is a pure service with NO Django ORM dependencies.
It only knows how to send one system instruction plus one user payload and
hand back the raw text; prompt content and output validation belong to the
callers.

Design Principles:
------------------
1. Deferred configuration: a missing API key is a supported mode, not a crash
2. One attempt per call: no client-side retries, failures surface at once
3. Uniform failures: every transport/API problem becomes a ModelError

Lifecycle:
----------
One client is built per process from settings (get_llm_client) and reused by
every request. It carries no per-request state.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    OpenAI,
    RateLimitError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ModelUnavailableError(Exception):
    """Raised when the model is used but no credential/config is present."""

    pass


class ModelError(Exception):
    """Raised when a configured model call fails (network, API, empty output)."""

    def __init__(self, message: str, error_code: str = "UNEXPECTED_ERROR") -> None:
        super().__init__(message)
        self.error_code = error_code


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class LanguageModelClient:
    """
    Single request/response access to a chat model.

    The class uses DEFERRED INITIALIZATION - it will not raise errors during
    __init__ if the API key is missing. Instead, it tracks its availability
    state and complete() raises ModelUnavailableError, which callers route to
    their deterministic fallback.

    Attributes:
        model (str): The OpenAI model to use.
        timeout (float): Per-request timeout in seconds.
        client (OpenAI | None): Initialized client, or None if unavailable.
        is_configured (bool): Whether the client is ready for use.
        configuration_error (str | None): Description of configuration issue, if any.

    Example:
        >>> llm = LanguageModelClient()
        >>> if llm.is_configured:
        ...     text = llm.complete("Reply with JSON.", "payload")
    """

    DEFAULT_MODEL: str = "gpt-4o-mini"
    DEFAULT_TEMPERATURE: float = 0.3
    DEFAULT_MAX_TOKENS: int = 800
    DEFAULT_TIMEOUT: float = 15.0  # Seconds

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        **client_kwargs: Any,
    ) -> None:
        """
        Args:
            api_key: OpenAI API key. Falls back to settings.OPENAI_API_KEY.
            model: Model identifier. Falls back to settings.OPENAI_MODEL.
            timeout: Request timeout in seconds. Falls back to settings.OPENAI_TIMEOUT.
            **client_kwargs: Additional keyword arguments passed to the OpenAI client.
        """
        self.model: str = model or getattr(settings, "OPENAI_MODEL", None) or self.DEFAULT_MODEL
        self.timeout: float = timeout or getattr(settings, "OPENAI_TIMEOUT", None) or self.DEFAULT_TIMEOUT
        # A single attempt per call; the caller falls back instead of retrying
        client_kwargs.setdefault("max_retries", 0)
        self._client_kwargs: Dict[str, Any] = client_kwargs

        self.client: Optional[OpenAI] = None
        self.is_configured: bool = False
        self.configuration_error: Optional[str] = None

        self._configure(api_key)

    def _configure(self, api_key: Optional[str] = None) -> None:
        resolved_key = api_key or getattr(settings, "OPENAI_API_KEY", None) or ""
        if not resolved_key:
            self.configuration_error = (
                "OPENAI_API_KEY is not configured. "
                "Today plans and task suggestions will use the local fallback."
            )
            logger.warning(f"LanguageModelClient: {self.configuration_error}")
            return

        try:
            self.client = OpenAI(api_key=resolved_key, **self._client_kwargs)
            self.is_configured = True
            self.configuration_error = None
            logger.info(f"LanguageModelClient initialized with model={self.model}")
        except Exception as e:
            self.configuration_error = f"Failed to initialize OpenAI client: {str(e)}"
            logger.error(f"LanguageModelClient: {self.configuration_error}")
            self.client = None
            self.is_configured = False

    def complete(self, system_prompt: str, user_content: str) -> str:
        """
        Send one system instruction and one user message, return the reply text.

        Raises:
            ModelUnavailableError: no client is configured.
            ModelError: the call failed or returned no text.
        """
        if not self.is_configured or self.client is None:
            raise ModelUnavailableError(self.configuration_error or "Language model not available")

        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.DEFAULT_TEMPERATURE,
                max_tokens=self.DEFAULT_MAX_TOKENS,
                response_format={"type": "json_object"},
                timeout=self.timeout,
            )
        except AuthenticationError as e:
            logger.error(f"OpenAI authentication failed: {e}")
            raise ModelError("Invalid API key or authentication failed", "AUTH_ERROR") from e
        except RateLimitError as e:
            logger.warning(f"OpenAI rate limit exceeded: {e}")
            raise ModelError("API rate limit exceeded", "RATE_LIMIT") from e
        except APITimeoutError as e:
            logger.warning(f"OpenAI API timeout: {e}")
            raise ModelError("API request timed out", "TIMEOUT") from e
        except APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}")
            raise ModelError("Could not connect to OpenAI API", "CONNECTION_ERROR") from e
        except BadRequestError as e:
            logger.error(f"OpenAI bad request: {e}")
            raise ModelError("Invalid request to OpenAI API", "BAD_REQUEST") from e
        except APIStatusError as e:
            logger.error(f"OpenAI API status error: {e.status_code} - {e}")
            raise ModelError(f"OpenAI API error (status {e.status_code})", f"API_ERROR_{e.status_code}") from e
        except Exception as e:
            logger.exception(f"Unexpected error in LanguageModelClient: {e}")
            raise ModelError(f"Unexpected error: {type(e).__name__}", "UNEXPECTED_ERROR") from e

        try:
            content = response.choices[0].message.content or ""
        except (AttributeError, IndexError, TypeError) as e:
            raise ModelError("Malformed completion payload", "EMPTY_RESPONSE") from e

        logger.debug(f"LanguageModelClient: Raw response: {content[:200]}...")
        return content

    def health_check(self) -> Dict[str, Any]:
        """
        Report configuration state without contacting the API.
        """
        return {
            "is_configured": self.is_configured,
            "model": self.model,
            "timeout": self.timeout,
            "configuration_error": self.configuration_error,
        }


@functools.lru_cache(maxsize=1)
def get_llm_client() -> LanguageModelClient:
    """Process-wide client, built from settings on first use."""
    return LanguageModelClient()
