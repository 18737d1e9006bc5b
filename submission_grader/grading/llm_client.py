"""
LLM Client for the generative-text service.

Provides an async wrapper around the OpenAI SDK pointed at any
OpenAI-compatible chat completions endpoint.
Includes retry logic, an overall deadline per call, and error classification.
"""

import asyncio
import logging
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI, RateLimitError

from submission_grader.config import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Raised when an LLM API call fails."""

    def __init__(self, message: str, cause: Exception | None = None, retryable: bool = False):
        self.cause = cause
        self.retryable = retryable
        super().__init__(message)


class LLMClient:
    """
    Client for the generative-text service.

    Uses the async OpenAI SDK with a custom base URL.
    Implements retry logic with exponential backoff; the SDK's own retries
    are disabled so the deadline passed to `generate` covers every attempt.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the LLM client.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
        """
        self._settings = settings or get_settings()
        self._client = AsyncOpenAI(
            api_key=self._settings.llm_api_key,
            base_url=self._settings.llm_base_url,
            timeout=self._settings.llm_request_timeout,
            max_retries=0,
        )

        # Retry configuration
        self._max_retries = self._settings.llm_max_retries
        self._base_delay = 1.0  # seconds
        self._max_delay = 30.0  # seconds

    @property
    def model(self) -> str:
        """Model identifier sent with every request."""
        return self._settings.llm_model

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float | None = None,
        max_tokens: int = 4096,
        timeout: float | None = None,
        json_mode: bool = False,
    ) -> str:
        """
        Generate a response from the LLM.

        Args:
            system_prompt: System message defining the LLM's role.
            user_prompt: User message with the actual request.
            temperature: Override temperature (uses config default if None).
            max_tokens: Maximum tokens in response.
            timeout: Deadline in seconds for the whole call, retries included.
            json_mode: Ask the service to return a JSON object.

        Returns:
            The generated text response.

        Raises:
            LLMError: If generation fails, times out, or returns no content.
        """
        temp = temperature if temperature is not None else self._settings.llm_temperature

        messages: list[dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        extra: dict[str, Any] = {}
        if json_mode:
            extra["response_format"] = {"type": "json_object"}

        if timeout is None:
            return await self._call_with_retry(messages, temp, max_tokens, extra)

        try:
            return await asyncio.wait_for(
                self._call_with_retry(messages, temp, max_tokens, extra),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise LLMError(f"Request timed out after {timeout:g}s", cause=e, retryable=True) from e

    async def _call_with_retry(
        self,
        messages: list[dict[str, str]],
        temperature: float,
        max_tokens: int,
        extra: dict[str, Any],
    ) -> str:
        """
        Call the API with exponential backoff retry.

        Args:
            messages: Chat messages to send.
            temperature: Temperature setting.
            max_tokens: Maximum response tokens.
            extra: Additional request parameters.

        Returns:
            Generated text.

        Raises:
            LLMError: If all retries fail.
        """
        last_error: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                response = await self._client.chat.completions.create(
                    model=self._settings.llm_model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens,
                    **extra,
                )

            except RateLimitError as e:
                last_error = e
                if attempt < self._max_retries:
                    await self._backoff(attempt, e)
                    continue
                raise LLMError(
                    f"Rate limit exceeded after {self._max_retries} retries",
                    cause=e,
                    retryable=True,
                ) from e

            except APIConnectionError as e:
                last_error = e
                if attempt < self._max_retries:
                    await self._backoff(attempt, e)
                    continue
                raise LLMError(
                    f"Connection failed after {self._max_retries} retries",
                    cause=e,
                    retryable=True,
                ) from e

            except APIStatusError as e:
                # Don't retry on client errors (4xx except 429)
                if 400 <= e.status_code < 500 and e.status_code != 429:
                    raise LLMError(
                        f"API error: {e.message}",
                        cause=e,
                        retryable=False,
                    ) from e

                last_error = e
                if attempt < self._max_retries:
                    await self._backoff(attempt, e)
                    continue
                raise LLMError(
                    f"API error after {self._max_retries} retries: {e.message}",
                    cause=e,
                    retryable=True,
                ) from e

            except Exception as e:
                raise LLMError(f"Unexpected error: {e}", cause=e, retryable=False) from e

            # Extract content from response
            if response.choices and response.choices[0].message.content:
                return response.choices[0].message.content

            raise LLMError("Empty response from LLM")

        # Should not reach here, but just in case
        raise LLMError(f"Failed after {self._max_retries} retries", cause=last_error)

    async def _backoff(self, attempt: int, error: Exception) -> None:
        delay = self._calculate_delay(attempt)
        logger.debug("LLM call failed (%s), retrying in %.1fs", type(error).__name__, delay)
        await asyncio.sleep(delay)

    def _calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay for exponential backoff.

        Args:
            attempt: Current attempt number (0-indexed).

        Returns:
            Delay in seconds.
        """
        delay = self._base_delay * (2**attempt)
        return min(delay, self._max_delay)

    async def health_check(self) -> bool:
        """
        Check if the API is reachable.

        Returns:
            True if API is healthy, False otherwise.
        """
        try:
            response = await self._client.chat.completions.create(
                model=self._settings.llm_model,
                messages=[{"role": "user", "content": "ping"}],
                max_tokens=5,
            )
            return bool(response.choices)
        except Exception as e:
            logger.debug("Health check failed: %s", e)
            return False
