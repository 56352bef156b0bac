"""Anthropic Generation Client: one Messages API exchange per generation request.

Invariants:
    - Returns the completion text, or raises TransportError with a machine-readable
      failure_code: rate_limit | timeout | connection_error | server_error |
      overloaded | client_error | empty_response | unknown
    - max_retries=0 (default) means exactly one outbound call per generate()
    - With retries enabled: rate limits back off honouring Retry-After,
      transient errors (timeout, connection, 5xx, 529) back off exponentially;
      client errors (4xx except 429) never retry

Design Decisions:
    - Wrapper over raw SDK client: isolates retry and error mapping from the store
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - System prompt goes in the `system` parameter; the Messages API has no
      system-role message
"""

import asyncio
import random
import logging

import anthropic
from anthropic import (
    APIError,
    APIConnectionError,
    APIStatusError,
    RateLimitError,
    APITimeoutError,
    InternalServerError,
)

from insight.core.build_request import GenerationRequest
from insight.core.errors import TransportError, ErrorContext

logger = logging.getLogger(__name__)

# OverloadedError (HTTP 529) is not re-exported by every SDK release;
# detect it by status code instead of a private import.
_OVERLOADED_STATUS = 529


def _is_overloaded(e: APIError) -> bool:
    """Check if error is Anthropic 529 Overloaded."""
    return isinstance(e, APIStatusError) and e.status_code == _OVERLOADED_STATUS


def extract_text(response) -> str:
    """Concatenate the text blocks of a Messages API response."""
    parts = [
        block.text for block in (response.content or [])
        if getattr(block, "type", None) == "text" and block.text
    ]
    return "".join(parts)


class AnthropicGenerationClient:
    """Generation client backed by anthropic.AsyncAnthropic."""

    def __init__(
        self,
        api_key: str,
        max_retries: int = 0,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        timeout_seconds: int = 120,
        client=None,
    ):
        # SDK-level retries disabled: the retry policy is ours to configure
        self.client = client or anthropic.AsyncAnthropic(
            api_key=api_key, timeout=timeout_seconds, max_retries=0,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def generate(
        self, request: GenerationRequest, context: ErrorContext | None = None,
    ) -> str:
        """Send one request; return raw completion text or raise TransportError."""
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.messages.create(
                    model=request.model,
                    max_tokens=request.max_output_tokens,
                    temperature=request.temperature,
                    system=request.system_prompt,
                    messages=[{"role": "user", "content": request.user_prompt}],
                )
            except RateLimitError as e:
                await self._retry_or_raise(
                    e, "rate_limit", attempt, context,
                    retry_after_ms=_retry_after_ms(e),
                )
                continue
            except APITimeoutError as e:
                await self._retry_or_raise(e, "timeout", attempt, context)
                continue
            except APIConnectionError as e:
                await self._retry_or_raise(e, "connection_error", attempt, context)
                continue
            except APIError as e:
                if _is_overloaded(e):
                    await self._retry_or_raise(e, "overloaded", attempt, context)
                elif isinstance(e, InternalServerError):
                    await self._retry_or_raise(e, "server_error", attempt, context)
                else:
                    raise TransportError(str(e), "client_error", context=context)
                continue
            except Exception as e:
                logger.error(f"Unexpected Anthropic error: {e}", exc_info=True)
                raise TransportError(str(e), "unknown", context=context)

            self._log_success(response, attempt, request)
            text = extract_text(response)
            if not text.strip():
                raise TransportError(
                    "Empty response from AI", "empty_response", context=context,
                )
            return text
        # Unreachable: the last attempt either returns or raises
        raise TransportError("retries exhausted", "unknown", context=context)

    def _log_success(self, response, attempt: int, request: GenerationRequest) -> None:
        usage = getattr(response, "usage", None)
        logger.info(
            "Anthropic API success",
            extra={
                "attempt": attempt + 1,
                "model": request.model,
                "input_tokens": getattr(usage, "input_tokens", None),
                "output_tokens": getattr(usage, "output_tokens", None),
                "stop_reason": getattr(response, "stop_reason", None),
            },
        )

    async def _retry_or_raise(
        self, e: Exception, failure_code: str, attempt: int,
        context: ErrorContext | None, retry_after_ms: int | None = None,
    ) -> None:
        """Sleep before the next attempt, or raise once the budget is spent.

        A Retry-After hint replaces the computed backoff.
        """
        if attempt >= self.max_retries:
            raise TransportError(
                f"{e} (after {attempt + 1} attempt(s))", failure_code,
                retry_after_ms=retry_after_ms, context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"Generation call failed ({failure_code}), retry in {delay}ms",
            extra={"failure_code": failure_code, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311


def _retry_after_ms(error: RateLimitError) -> int | None:
    """Retry-After header in milliseconds, when the response carries one."""
    response = getattr(error, "response", None)
    if response is None:
        return None
    value = response.headers.get("retry-after")
    try:
        return int(float(value) * 1000) if value else None
    except ValueError:
        return None
