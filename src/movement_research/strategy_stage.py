"""Strategy stage: turn the day's price/volume move into a search plan."""

from __future__ import annotations

import datetime

import structlog

from movement_research.config import PipelineDefaults, Settings
from movement_research.decoding import decode_or_default
from movement_research.models.ohlc import OHLC, PriceMovement
from movement_research.models.strategy import ResearchStrategy
from movement_research.prompt_builder import PromptBuilder
from movement_research.reasoning_client import ReasoningClient

logger = structlog.get_logger()

STRATEGY_SYSTEM_PROMPT = """You are a financial research agent investigating a single trading day.
Think like a detective: form concrete hypotheses about what moved the stock,
then plan a news search that could confirm or refute them.
Respond ONLY with a single JSON object matching the output_format."""


class StrategyStage:
    def __init__(
        self,
        reasoning: ReasoningClient,
        prompt_builder: PromptBuilder,
        settings: Settings,
        defaults: PipelineDefaults,
    ) -> None:
        self.reasoning = reasoning
        self.prompt_builder = prompt_builder
        self.settings = settings
        self.defaults = defaults

    async def formulate(
        self,
        symbol: str,
        date: datetime.date,
        ohlc: OHLC,
        movement: PriceMovement,
    ) -> ResearchStrategy:
        """Ask for a research plan. Falls back to the default strategy, never raises."""
        prompt = self.prompt_builder.build_strategy_prompt(symbol, date, ohlc, movement)
        text = await self.reasoning.complete(
            prompt,
            system=STRATEGY_SYSTEM_PROMPT,
            temperature=self.settings.STRATEGY_TEMPERATURE,
        )
        strategy = decode_or_default(text, ResearchStrategy, self.defaults.default_strategy, stage="strategy")
        logger.info(
            "strategy_ready",
            symbol=symbol,
            hypotheses=len(strategy.hypotheses),
            keywords=len(strategy.keywords),
            lookback_days=strategy.lookback_days,
            confidence=strategy.confidence,
        )
        return strategy
