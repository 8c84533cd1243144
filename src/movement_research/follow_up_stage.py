"""Follow-up stage: ask for more targeted research when causal confidence is low."""

from __future__ import annotations

import structlog

from movement_research.config import PipelineDefaults, Settings
from movement_research.decoding import decode_or_default
from movement_research.models.causality import CausalityReport
from movement_research.models.follow_up import (
    FollowUpOutcome,
    FollowUpRequest,
    FollowUpRequested,
    FollowUpSkipped,
)
from movement_research.models.ohlc import PriceMovement
from movement_research.prompt_builder import PromptBuilder
from movement_research.reasoning_client import ReasoningClient

logger = structlog.get_logger()

FOLLOW_UP_SYSTEM_PROMPT = """You are a research lead reviewing an inconclusive investigation.
Decide what additional evidence would explain the price move and where to look for it.
Be specific. Respond ONLY with a single JSON object matching the output_format."""


def needs_follow_up(causality: CausalityReport, threshold: int) -> bool:
    """Strict: confidence equal to the threshold does not trigger a follow-up."""
    return causality.overall_confidence < threshold


class FollowUpStage:
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

    async def evaluate(self, movement: PriceMovement, causality: CausalityReport) -> FollowUpOutcome:
        """Skip when confident; otherwise request a follow-up (default request on decode failure)."""
        if not needs_follow_up(causality, self.defaults.follow_up_threshold):
            logger.info("follow_up_skipped", overall_confidence=causality.overall_confidence)
            return FollowUpSkipped(overall_confidence=causality.overall_confidence)

        prompt = self.prompt_builder.build_follow_up_prompt(movement, causality)
        text = await self.reasoning.complete(
            prompt,
            system=FOLLOW_UP_SYSTEM_PROMPT,
            temperature=self.settings.ANALYSIS_TEMPERATURE,
        )
        request = decode_or_default(text, FollowUpRequest, self.defaults.default_follow_up, stage="follow_up")
        logger.info(
            "follow_up_requested",
            overall_confidence=causality.overall_confidence,
            queries=len(request.queries),
            sources=",".join(request.sources),
        )
        return FollowUpRequested(request=request)
