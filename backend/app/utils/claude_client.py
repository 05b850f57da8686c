"""
Claude Messages API client used by the AI assistant

Wraps AsyncAnthropic with explicit httpx timeouts and its own retry loop
(exponential back-off with jitter) for overloads, rate limits and network
failures. The SDK's built-in retries are disabled.
"""
import asyncio
import random
from typing import Any, Dict, List, Optional

import httpx
from anthropic import APIConnectionError, APIError, APIStatusError, APITimeoutError, AsyncAnthropic

from app.core.config import settings
from app.core.logging_config import logger

MAX_RETRIES = settings.CLAUDE_MAX_RETRIES
BASE_DELAY = settings.CLAUDE_RETRY_BASE_DELAY
MAX_DELAY = settings.CLAUDE_RETRY_MAX_DELAY
MAX_JITTER = 0.25

RETRYABLE_ERROR_TYPES = frozenset({"overloaded_error", "rate_limit_error", "api_error"})
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 529})
RETRYABLE_MESSAGE_HINTS = ("overload", "rate_limit", "529", "503", "capacity", "connection", "timeout", "network")

NETWORK_ERRORS = (APIConnectionError, APITimeoutError, httpx.TransportError)


class ClaudeClient:
    """Non-streaming chat completions against the Claude Messages API"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        options: Dict[str, Any] = {
            "api_key": api_key or settings.ANTHROPIC_API_KEY,
            "timeout": httpx.Timeout(
                float(settings.CLAUDE_REQUEST_TIMEOUT),
                connect=float(settings.CLAUDE_CONNECT_TIMEOUT),
            ),
            "max_retries": 0,
        }
        base_url = (base_url or settings.ANTHROPIC_BASE_URL).strip()
        if base_url:
            options["base_url"] = base_url

        self.async_client = AsyncAnthropic(**options)
        self.model = settings.CLAUDE_CHAT_MODEL
        logger.info(f"Claude client ready: model={self.model}, base_url={base_url or 'default'}")

    def _is_retryable_error(self, error: Exception) -> bool:
        if isinstance(error, NETWORK_ERRORS):
            return True
        if isinstance(error, APIStatusError):
            body = error.body if isinstance(error.body, dict) else {}
            error_type = (body.get("error") or {}).get("type")
            if error_type:
                return error_type in RETRYABLE_ERROR_TYPES
            return error.status_code in RETRYABLE_STATUS_CODES
        if isinstance(error, APIError):
            return False
        message = str(error).lower()
        return any(hint in message for hint in RETRYABLE_MESSAGE_HINTS)

    def _calculate_retry_delay(self, attempt: int) -> float:
        """BASE_DELAY * 2^attempt capped at MAX_DELAY, plus up to 25% jitter"""
        delay = min(BASE_DELAY * (2 ** attempt), MAX_DELAY)
        return delay * (1 + random.uniform(0, MAX_JITTER))

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        messages: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        """
        Send prior `messages` plus `prompt` as the final user turn.

        Returns the concatenated text of the reply with usage metadata:
        {content, model, input_tokens, output_tokens, total_tokens, stop_reason, id}
        """
        conversation = [*(messages or []), {"role": "user", "content": prompt}]
        request = {
            "model": self.model,
            "max_tokens": max_tokens or settings.CLAUDE_MAX_TOKENS,
            "temperature": settings.CLAUDE_TEMPERATURE if temperature is None else temperature,
            "system": system_prompt or "",
            "messages": conversation,
        }

        attempt = 0
        while True:
            try:
                response = await self.async_client.messages.create(**request)
                break
            except Exception as e:
                if attempt >= MAX_RETRIES or not self._is_retryable_error(e):
                    logger.error(
                        f"Claude request failed after {attempt + 1} attempt(s): {type(e).__name__}: {e}",
                        extra={"event_type": "claude_api_error", "error_type": type(e).__name__},
                    )
                    raise
                delay = self._calculate_retry_delay(attempt)
                attempt += 1
                logger.warning(
                    f"Claude request {type(e).__name__}, retry {attempt}/{MAX_RETRIES} in {delay:.1f}s",
                    extra={"event_type": "claude_api_retry", "retry_delay": delay},
                )
                await asyncio.sleep(delay)

        usage = response.usage
        result = {
            "content": "".join(
                block.text for block in response.content if getattr(block, "type", None) == "text"
            ),
            "model": self.model,
            "input_tokens": usage.input_tokens,
            "output_tokens": usage.output_tokens,
            "total_tokens": usage.input_tokens + usage.output_tokens,
            "stop_reason": response.stop_reason,
            "id": response.id,
        }
        logger.info(
            f"Claude reply {response.id}: {result['total_tokens']} tokens, stop={response.stop_reason}",
            extra={"event_type": "claude_api_call", "total_tokens": result["total_tokens"]},
        )
        return result


_claude_client: Optional[ClaudeClient] = None


def get_claude_client() -> ClaudeClient:
    """FastAPI dependency: the process-wide client, created on first use"""
    global _claude_client
    if _claude_client is None:
        _claude_client = ClaudeClient()
    return _claude_client
