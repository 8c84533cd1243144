"""Evidence retrieval stage: parameterize the news search from the research strategy."""

from __future__ import annotations

import datetime

import structlog

from movement_research.config import PipelineDefaults, Settings
from movement_research.models.article import Article
from movement_research.models.ohlc import OHLC, PriceMovement
from movement_research.models.strategy import ResearchStrategy
from movement_research.news_client import AlphaVantageNewsClient, NewsQuery
from movement_research.synthetic_evidence import build_technical_article

logger = structlog.get_logger()

EARNINGS_TOPICS = ("earnings", "financial_markets")
LARGE_MOVE_TOPICS = ("earnings", "financial_markets", "economy_macro")
MEDIUM_MOVE_TOPICS = ("financial_markets", "technology")


def select_topics(strategy: ResearchStrategy, movement: PriceMovement) -> tuple[str, ...]:
    """Topic filter for the news search; empty means no filter.

    Earnings/financial hypotheses take precedence over the magnitude rules.
    """
    text = strategy.hypothesis_text
    if "earnings" in text or "financial" in text:
        return EARNINGS_TOPICS
    magnitude = abs(movement.change_percent)
    if magnitude > 5:
        return LARGE_MOVE_TOPICS
    if magnitude > 2:
        return MEDIUM_MOVE_TOPICS
    return ()


def query_window(date: datetime.date, lookback_days: int) -> tuple[datetime.datetime, datetime.datetime]:
    """[date - lookback_days 00:00, date 23:59]."""
    start = datetime.datetime.combine(date - datetime.timedelta(days=lookback_days), datetime.time(0, 0))
    end = datetime.datetime.combine(date, datetime.time(23, 59))
    return start, end


class EvidenceRetrievalStage:
    def __init__(
        self,
        news_client: AlphaVantageNewsClient,
        settings: Settings,
        defaults: PipelineDefaults,
    ) -> None:
        self.news_client = news_client
        self.settings = settings
        self.defaults = defaults

    def build_query(
        self,
        symbol: str,
        date: datetime.date,
        strategy: ResearchStrategy,
        movement: PriceMovement,
    ) -> NewsQuery:
        time_from, time_to = query_window(date, strategy.lookback_days)
        return NewsQuery(
            symbol=symbol,
            time_from=time_from,
            time_to=time_to,
            topics=select_topics(strategy, movement),
            sort=self.settings.NEWS_SORT,
            limit=self.settings.NEWS_RESULT_LIMIT,
        )

    async def retrieve(
        self,
        symbol: str,
        date: datetime.date,
        ohlc: OHLC,
        movement: PriceMovement,
        strategy: ResearchStrategy,
    ) -> list[Article]:
        """Search news for the strategy window. Never returns an empty list."""
        query = self.build_query(symbol, date, strategy, movement)
        logger.info(
            "news_search_started",
            symbol=symbol,
            time_from=query.time_from.isoformat(),
            time_to=query.time_to.isoformat(),
            topics=",".join(query.topics) or "all",
            keywords=",".join(strategy.keywords),
        )
        articles = await self.news_client.search(query)
        if articles:
            return articles

        logger.warning("news_search_empty", symbol=symbol)
        return [
            build_technical_article(
                symbol,
                date,
                ohlc,
                movement,
                sentiment_magnitude=self.defaults.synthetic_sentiment_magnitude,
            )
        ]
