"""Causality stage: score each article as the cause of the observed move."""

from __future__ import annotations

import structlog

from movement_research.config import PipelineDefaults, Settings
from movement_research.decoding import decode_or_default
from movement_research.models.article import Article
from movement_research.models.causality import CausalityReport
from movement_research.models.ohlc import PriceMovement
from movement_research.models.strategy import ResearchStrategy
from movement_research.prompt_builder import PromptBuilder
from movement_research.reasoning_client import ReasoningClient

logger = structlog.get_logger()

CAUSALITY_SYSTEM_PROMPT = """You are a skeptical equity analyst.
Judge whether each news article could realistically have caused the observed price move.
Weigh timing, source credibility and the size of the move. Say so when nothing explains it.
Respond ONLY with a single JSON object matching the output_format."""


class CausalityStage:
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

    async def score(
        self,
        symbol: str,
        movement: PriceMovement,
        strategy: ResearchStrategy,
        articles: list[Article],
    ) -> CausalityReport:
        """Score the top-N articles. Falls back to the neutral default report, never raises."""
        candidates = articles[: self.defaults.causality_top_n]
        prompt = self.prompt_builder.build_causality_prompt(
            symbol,
            movement,
            strategy,
            candidates,
            summary_max_chars=self.defaults.summary_max_chars,
        )
        text = await self.reasoning.complete(
            prompt,
            system=CAUSALITY_SYSTEM_PROMPT,
            temperature=self.settings.ANALYSIS_TEMPERATURE,
        )
        report = decode_or_default(text, CausalityReport, self.defaults.default_causality, stage="causality")
        top = report.top_finding
        logger.info(
            "causality_scored",
            symbol=symbol,
            articles=len(candidates),
            findings=len(report.findings),
            overall_confidence=report.overall_confidence,
            top_score=top.causality_score if top else None,
        )
        return report
