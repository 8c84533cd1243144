"""Narrative analysis: one reasoning call that describes a trading day in prose."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from movement_research.config import PipelineDefaults, Settings
from movement_research.errors import ConfigurationError
from movement_research.models.narrative import NarrativeAnalysis
from movement_research.models.ohlc import PriceMovement
from movement_research.models.request import ResearchRequest
from movement_research.prompt_builder import PromptBuilder
from movement_research.reasoning_client import ReasoningClient

logger = structlog.get_logger()

NARRATIVE_SYSTEM_PROMPT = """You are a professional stock market analyst.
Write plain prose for a retail audience. Do not use JSON or markdown tables."""


class NarrativeAnalyst:
    """Companion to the research pipeline with no evidence search or scoring.

    A failed reasoning call yields an analysis with empty text rather than
    an error; only a missing reasoning credential is fatal.
    """

    def __init__(
        self,
        settings: Settings,
        defaults: PipelineDefaults | None = None,
        reasoning: ReasoningClient | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.settings = settings
        self.defaults = defaults or PipelineDefaults()
        self.reasoning = reasoning or ReasoningClient(settings)
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def analyze(self, request: ResearchRequest) -> NarrativeAnalysis:
        if not self.settings.ANTHROPIC_API_KEY:
            raise ConfigurationError("ANTHROPIC_API_KEY not configured")

        symbol, date, ohlc = request.symbol, request.date, request.ohlc
        movement = PriceMovement.from_ohlc(ohlc, self.defaults.reference_volume)

        prompt = self.prompt_builder.build_narrative_prompt(symbol, date, ohlc, movement)
        text = await self.reasoning.complete(
            prompt,
            system=NARRATIVE_SYSTEM_PROMPT,
            temperature=self.settings.NARRATIVE_TEMPERATURE,
        )
        analysis = NarrativeAnalysis(
            symbol=symbol,
            date=date,
            ohlc=ohlc,
            movement=movement,
            analysis=text.strip(),
            generated_at=datetime.now(timezone.utc),
        )
        if analysis.is_empty:
            logger.warning("narrative_empty", symbol=symbol, date=date.isoformat())
        else:
            logger.info("narrative_ready", symbol=symbol, date=date.isoformat(), chars=len(analysis.analysis))
        return analysis
