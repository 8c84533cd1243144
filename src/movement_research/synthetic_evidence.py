"""Synthetic technical-observation article used when no news is retrievable."""

from __future__ import annotations

import datetime

import structlog

from movement_research.models.article import Article
from movement_research.models.ohlc import OHLC, PriceMovement

logger = structlog.get_logger()

SYNTHETIC_SOURCE = "Technical Analysis"


def build_technical_article(
    symbol: str,
    date: datetime.date,
    ohlc: OHLC,
    movement: PriceMovement,
    sentiment_magnitude: float = 0.6,
) -> Article:
    """Narrate the day's move itself as a single maximally relevant article.

    A flat day (changePercent == 0) is described as a decline.
    """
    up = movement.is_up
    article = Article(
        title=f"Technical Analysis: {symbol} {'Rally' if up else 'Decline'} of {abs(movement.change_percent):.2f}%",
        summary=(
            f"Strong {'upward' if up else 'downward'} movement with {movement.volume_ratio:.2f}x normal "
            f"trading volume suggests {'bullish' if up else 'bearish'} sentiment and potential news catalyst. "
            f"Price moved from {ohlc.open} to {ohlc.close} with range {ohlc.low}-{ohlc.high}."
        ),
        source=SYNTHETIC_SOURCE,
        published_at=date.isoformat(),
        sentiment_label="Bullish" if up else "Bearish",
        sentiment_score=sentiment_magnitude if up else -sentiment_magnitude,
        relevance=1.0,
    )
    logger.info("synthetic_evidence_used", symbol=symbol, title=article.title)
    return article
