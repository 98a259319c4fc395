"""
OpenAI Service - LLM implementation using OpenAI API.

Provides plain text generation against any OpenAI-compatible endpoint
(OpenAI itself, or a local Ollama / vLLM server via ``base_url``).
"""
from typing import Dict, Any, Optional
import logging
import re
import requests

import openai
from openai import OpenAI
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity import RetryCallState
from core.llm.interfaces import LLMProvider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Retry helpers
# ---------------------------------------------------------------------------

RETRYABLE_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep, including Retry-After info."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    if isinstance(exc, openai.RateLimitError):
        logger.warning(
            "Rate limit hit (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )
    else:
        logger.warning(
            "Transient API error (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )


def _parse_reset_duration(value: str) -> float:
    """Parse an OpenAI reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    total = 0.0
    for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value):
        a = float(amount)
        if unit == "ms":
            total += a / 1000
        elif unit == "s":
            total += a
        elif unit == "m":
            total += a * 60
        else:  # h
            total += a * 3600
    return total


def _wait_from_rate_limit_headers(exc: openai.RateLimitError) -> float:
    """Extract the longest declared wait from rate-limit response headers.

    Reads (in priority order, taking the maximum):
      - ``retry-after``                standard HTTP, plain seconds
      - ``x-ratelimit-reset-requests`` OpenAI request-quota reset duration
      - ``x-ratelimit-reset-tokens``   OpenAI token-quota reset duration

    Returns 0.0 if no usable header is present.
    """
    try:
        headers = exc.response.headers
    except AttributeError:
        return 0.0

    candidates: list[float] = []

    retry_after = headers.get("retry-after", "")
    if retry_after:
        try:
            candidates.append(float(retry_after))
        except ValueError:
            pass

    for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
        parsed = _parse_reset_duration(headers.get(header, ""))
        if parsed > 0:
            candidates.append(parsed)

    return max(candidates) if candidates else 0.0


def _wait_respecting_retry_after(retry_state: RetryCallState) -> float:
    """Return how long tenacity should sleep before the next attempt.

    For ``RateLimitError``: honours server-declared timers via response headers.
    For all other retryable errors: falls back to capped exponential backoff.
    """
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        wait = _wait_from_rate_limit_headers(exc)
        if wait > 0:
            wait = min(wait, 120)  # safety cap at 2 min
            logger.info("Rate limit headers indicate %.1fs wait.", wait)
            return wait

    # Fallback: exponential backoff 2 → 4 → 8 … capped at 60s
    exp = wait_exponential(multiplier=1, min=2, max=60)
    return exp(retry_state)


def _llm_retry(**kwargs):
    """Return a tenacity @retry decorator for LLM API calls."""
    return retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        wait=_wait_respecting_retry_after,
        stop=stop_after_attempt(kwargs.pop('attempts', 5)),
        before_sleep=_log_retry,
        reraise=True,
        **kwargs,
    )


class OpenAIService(LLMProvider):
    """
    OpenAI LLM Service.

    Sends one prompt per call through the chat completions API and returns
    the completion text.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None
    ):
        client_kwargs = {}
        if api_key:
            client_kwargs['api_key'] = api_key
        if base_url:
            client_kwargs['base_url'] = base_url
        if timeout:
            client_kwargs['timeout'] = timeout

        self.client = OpenAI(**client_kwargs)

        self.model_config = model_config or {}
        self.generation_model = self.model_config.get('generation_model', 'gpt-4o-mini')
        self.temperature = self.model_config.get('temperature', 0.7)
        self.max_tokens = self.model_config.get('max_tokens', 400)

    @property
    def model_name(self) -> str:
        return self.generation_model

    @_llm_retry()
    def generate_text(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Generate a free-text completion for ``prompt``.

        Args:
            prompt: The user message.
            system_prompt: Optional system message sent before the prompt.

        Returns:
            The completion text, stripped of surrounding whitespace.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt.strip()})
        messages.append({"role": "user", "content": prompt})

        response = self.client.chat.completions.create(
            model=self.generation_model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        try:
            content = response.choices[0].message.content
        except (IndexError, AttributeError) as e:
            logger.error(f"Failed to read completion response: {e}")
            raise

        text = (content or "").strip()
        logger.debug(f"Generated {len(text)} characters with {self.generation_model}")
        return text

    def unload_model(self, model_name: Optional[str] = None) -> None:
        """Ask a local Ollama server to unload the model (no-op for hosted OpenAI)."""
        model_name = model_name or self.generation_model
        base_url = str(self.client.base_url)
        if "localhost" in base_url or "127.0.0.1" in base_url or "host.docker.internal" in base_url:
            try:
                base = base_url.rstrip('/').replace('/v1', '')
                url = f"{base}/api/generate"
                payload = {"model": model_name, "keep_alive": 0}
                logger.info(f"Unloading model: {model_name} via {url}")
                requests.post(url, json=payload, timeout=10)
            except requests.RequestException as e:
                logger.warning(f"Failed to unload model {model_name}: {e}")
