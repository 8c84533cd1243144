"""Research pipeline: strategy -> retrieval -> causality -> (follow-up) -> report."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from movement_research.causality_stage import CausalityStage
from movement_research.config import PipelineDefaults, Settings
from movement_research.errors import ConfigurationError
from movement_research.evidence_retrieval import EvidenceRetrievalStage
from movement_research.follow_up_stage import FollowUpStage
from movement_research.models.ohlc import PriceMovement
from movement_research.models.report import (
    STATUS_HIGH_CONFIDENCE,
    STATUS_NEEDS_RESEARCH,
    ResearchReport,
)
from movement_research.models.request import ResearchRequest
from movement_research.news_client import AlphaVantageNewsClient
from movement_research.prompt_builder import PromptBuilder
from movement_research.reasoning_client import ReasoningClient
from movement_research.strategy_stage import StrategyStage

logger = structlog.get_logger()


class ResearchPipeline:
    """Single-pass research run per request.

    Each stage substitutes its own fallback on failure, so the coordinator
    always receives a complete, well-typed result and never retries.
    Instances hold no per-run state and can serve concurrent runs.
    """

    def __init__(
        self,
        settings: Settings,
        defaults: PipelineDefaults | None = None,
        reasoning: ReasoningClient | None = None,
        news_client: AlphaVantageNewsClient | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.settings = settings
        self.defaults = defaults or PipelineDefaults()
        reasoning = reasoning or ReasoningClient(settings)
        news_client = news_client or AlphaVantageNewsClient(settings)
        prompt_builder = prompt_builder or PromptBuilder()

        self.strategy_stage = StrategyStage(reasoning, prompt_builder, settings, self.defaults)
        self.retrieval_stage = EvidenceRetrievalStage(news_client, settings, self.defaults)
        self.causality_stage = CausalityStage(reasoning, prompt_builder, settings, self.defaults)
        self.follow_up_stage = FollowUpStage(reasoning, prompt_builder, settings, self.defaults)

    def check_configuration(self) -> None:
        if not self.settings.ANTHROPIC_API_KEY:
            raise ConfigurationError("ANTHROPIC_API_KEY not configured")

    def status_for(self, overall_confidence: int) -> str:
        if overall_confidence > self.defaults.high_confidence_threshold:
            return STATUS_HIGH_CONFIDENCE
        return STATUS_NEEDS_RESEARCH

    async def run(self, request: ResearchRequest) -> ResearchReport:
        self.check_configuration()

        symbol, date, ohlc = request.symbol, request.date, request.ohlc
        movement = PriceMovement.from_ohlc(ohlc, self.defaults.reference_volume)
        log = logger.bind(symbol=symbol, date=date.isoformat())
        log.info(
            "research_started",
            change_percent=round(movement.change_percent, 2),
            volume_ratio=round(movement.volume_ratio, 2),
            significance=movement.significance,
        )

        strategy = await self.strategy_stage.formulate(symbol, date, ohlc, movement)
        articles = await self.retrieval_stage.retrieve(symbol, date, ohlc, movement, strategy)
        causality = await self.causality_stage.score(symbol, movement, strategy, articles)
        follow_up = await self.follow_up_stage.evaluate(movement, causality)

        report = ResearchReport(
            symbol=symbol,
            date=date,
            movement=movement,
            strategy=strategy,
            articles=articles,
            causality=causality,
            follow_up=follow_up,
            status=self.status_for(causality.overall_confidence),
            generated_at=datetime.now(timezone.utc),
        )
        log.info(
            "research_complete",
            articles=report.articles_found,
            overall_confidence=causality.overall_confidence,
            follow_up=follow_up.kind,
            status=report.status,
        )
        return report
