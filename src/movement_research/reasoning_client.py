"""Anthropic AsyncClient wrapper for the reasoning service."""

from __future__ import annotations

import asyncio

import structlog
from anthropic import AsyncAnthropic
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from movement_research.config import Settings

logger = structlog.get_logger()


class ReasoningClient:
    """Send a prompt, get raw completion text back.

    Transport, auth and timeout failures are logged and returned as an empty
    string, which the stages then treat as an undecodable response.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def complete(self, prompt: str, system: str, temperature: float = 0.2) -> str:
        try:
            text = await self._call_with_retry(system, prompt, temperature)
            logger.info("reasoning_call", model=self.settings.REASONING_MODEL, chars=len(text))
            return text
        except asyncio.TimeoutError:
            logger.warning("reasoning_timeout", timeout=self.settings.REASONING_TIMEOUT_SECONDS)
            return ""
        except Exception as e:
            logger.warning("reasoning_error", error=str(e))
            return ""

    async def _call_with_retry(self, system: str, user: str, temperature: float) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.REASONING_MAX_ATTEMPTS)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        ):
            with attempt:
                return await self._call(system, user, temperature)
        return ""

    async def _call(self, system: str, user: str, temperature: float) -> str:
        """Low-level Anthropic API call, bounded by REASONING_TIMEOUT_SECONDS when set."""
        # SDK retries disabled; REASONING_MAX_ATTEMPTS is the only retry control
        client = AsyncAnthropic(api_key=self.settings.ANTHROPIC_API_KEY, max_retries=0)
        request = client.messages.create(
            model=self.settings.REASONING_MODEL,
            max_tokens=self.settings.REASONING_MAX_TOKENS,
            temperature=temperature,
            system=system,
            messages=[{"role": "user", "content": user}],
        )
        if self.settings.REASONING_TIMEOUT_SECONDS is not None:
            response = await asyncio.wait_for(request, timeout=self.settings.REASONING_TIMEOUT_SECONDS)
        else:
            response = await request
        return response.content[0].text
