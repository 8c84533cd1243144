"""Alpha Vantage NEWS_SENTIMENT API wrapper."""

from __future__ import annotations

import math
from datetime import datetime

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from movement_research.config import Settings
from movement_research.models.article import Article, SymbolSentiment

logger = structlog.get_logger()

# Response keys Alpha Vantage uses for rate-limit and entitlement notices
NOTICE_KEYS = ("Information", "Note", "Error Message")


class NewsQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    time_from: datetime
    time_to: datetime
    topics: tuple[str, ...] = ()
    sort: str = "RELEVANCE"
    limit: int = 50


def format_av_time(moment: datetime) -> str:
    """Alpha Vantage time format: YYYYMMDDTHHMM."""
    return moment.strftime("%Y%m%dT%H%M")


def _to_float(value, default: float = 0.0) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def _symbol_entry(record: dict, symbol: str) -> dict | None:
    entries = record.get("ticker_sentiment")
    if not isinstance(entries, list):
        return None
    for entry in entries:
        if isinstance(entry, dict) and entry.get("ticker") == symbol:
            return entry
    return None


def normalize_record(record: dict, symbol: str) -> Article | None:
    """Map one raw feed item onto Article; None when title or summary is missing."""
    title = record.get("title")
    summary = record.get("summary")
    if not title or not summary:
        return None

    entry = _symbol_entry(record, symbol)
    symbol_sentiment = None
    if entry is not None:
        symbol_sentiment = SymbolSentiment(
            ticker=symbol,
            label=str(entry.get("ticker_sentiment_label", "")),
            score=_to_float(entry.get("ticker_sentiment_score")),
        )

    # Feed items only carry relevance per ticker; a top-level score wins when present
    raw_relevance = record.get("relevance_score")
    if raw_relevance is None and entry is not None:
        raw_relevance = entry.get("relevance_score")

    try:
        return Article(
            title=str(title),
            summary=str(summary),
            source=str(record.get("source", "")),
            published_at=str(record.get("time_published", "")),
            sentiment_label=str(record.get("overall_sentiment_label", "")),
            sentiment_score=_to_float(record.get("overall_sentiment_score")),
            relevance=max(0.0, _to_float(raw_relevance)),
            url=record.get("url") or None,
            symbol_sentiment=symbol_sentiment,
        )
    except ValidationError:
        logger.warning("news_record_invalid", title=str(title)[:80])
        return None


def normalize_feed(payload: dict, symbol: str) -> list[Article]:
    """Normalize a NEWS_SENTIMENT payload into articles sorted by relevance (descending)."""
    feed = payload.get("feed")
    if not isinstance(feed, list):
        return []
    articles = []
    for record in feed:
        if not isinstance(record, dict):
            continue
        article = normalize_record(record, symbol)
        if article is not None:
            articles.append(article)
    articles.sort(key=lambda a: a.relevance, reverse=True)
    return articles


class AlphaVantageNewsClient:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return bool(self.settings.ALPHA_VANTAGE_API_KEY)

    async def search(self, query: NewsQuery) -> list[Article]:
        """Query NEWS_SENTIMENT. Unreachable service, tier notices and bad payloads all yield []."""
        if not self.enabled:
            logger.info("news_search_skipped", reason="ALPHA_VANTAGE_API_KEY not set")
            return []

        try:
            payload = await self._get_with_retry(self.build_params(query))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("news_api_error", symbol=query.symbol, error=str(e))
            return []

        if not isinstance(payload, dict):
            logger.warning("news_api_error", symbol=query.symbol, error="payload is not an object")
            return []

        for key in NOTICE_KEYS:
            if key in payload:
                logger.warning("news_api_notice", symbol=query.symbol, notice=str(payload[key])[:200])
                return []

        articles = normalize_feed(payload, query.symbol)
        feed = payload.get("feed")
        raw_count = len(feed) if isinstance(feed, list) else 0
        logger.info(
            "news_search_complete",
            symbol=query.symbol,
            raw=raw_count,
            usable=len(articles),
            topics=",".join(query.topics) or "all",
        )
        return articles

    def build_params(self, query: NewsQuery) -> dict[str, str]:
        params = {
            "function": "NEWS_SENTIMENT",
            "tickers": query.symbol,
            "time_from": format_av_time(query.time_from),
            "time_to": format_av_time(query.time_to),
            "sort": query.sort,
            "limit": str(query.limit),
            "apikey": self.settings.ALPHA_VANTAGE_API_KEY,
        }
        if query.topics:
            params["topics"] = ",".join(query.topics)
        return params

    async def _get_with_retry(self, params: dict[str, str]):
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, self.settings.NEWS_MAX_ATTEMPTS)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await self._get(params)
        return None

    async def _get(self, params: dict[str, str]):
        """Low-level HTTP GET; raises on non-2xx."""
        async with httpx.AsyncClient() as http:
            response = await http.get(
                self.settings.ALPHA_VANTAGE_URL,
                params=params,
                timeout=self.settings.NEWS_HTTP_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            return response.json()
