"""ResearchReport model and its JSON response shape."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict

from movement_research.models.article import Article
from movement_research.models.causality import CausalityReport
from movement_research.models.follow_up import FollowUpOutcome, FollowUpRequest, FollowUpRequested
from movement_research.models.ohlc import PriceMovement
from movement_research.models.strategy import ResearchStrategy

AGENT_NAME = "agentic-news-research"

STAGE_STRATEGY = "Research strategy determination"
STAGE_CAUSALITY = "Causality analysis"
STAGE_FOLLOW_UP = "Additional research request"

STATUS_HIGH_CONFIDENCE = "high-confidence"
STATUS_NEEDS_RESEARCH = "needs-more-research"


class ResearchReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    date: datetime.date
    movement: PriceMovement
    strategy: ResearchStrategy
    articles: list[Article]
    causality: CausalityReport
    follow_up: FollowUpOutcome
    status: str
    generated_at: datetime.datetime

    @property
    def articles_found(self) -> int:
        return len(self.articles)

    @property
    def follow_up_request(self) -> FollowUpRequest | None:
        if isinstance(self.follow_up, FollowUpRequested):
            return self.follow_up.request
        return None

    @property
    def decisions_made(self) -> list[str]:
        decisions = [STAGE_STRATEGY, STAGE_CAUSALITY]
        if self.follow_up_request is not None:
            decisions.append(STAGE_FOLLOW_UP)
        return decisions

    def to_response(self, raw_news_preview: int = 5) -> dict:
        """Serialize into the camelCase response object returned to the UI layer."""
        response = {
            "agent": AGENT_NAME,
            "symbol": self.symbol,
            "date": self.date.isoformat(),
            "priceMovement": self.movement.model_dump(mode="json", by_alias=True),
            "aiResearchStrategy": self.strategy.model_dump(mode="json", by_alias=True),
            "newsArticlesFound": self.articles_found,
            "aiCausalityAnalysis": self.causality.model_dump(mode="json", by_alias=True),
        }
        follow_up = self.follow_up_request
        if follow_up is not None:
            response["aiAdditionalResearchRequest"] = follow_up.model_dump(mode="json", by_alias=True)
        response["rawNewsData"] = [
            a.model_dump(mode="json", by_alias=True) for a in self.articles[:raw_news_preview]
        ]
        response["metadata"] = {
            "timestamp": self.generated_at.isoformat(),
            "aiDecisionsMade": self.decisions_made,
            "confidenceScore": self.causality.overall_confidence,
            "status": self.status,
        }
        return response
