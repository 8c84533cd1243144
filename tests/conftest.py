"""Shared fixtures for movement_research unit tests."""

from __future__ import annotations

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from movement_research.config import PipelineDefaults, Settings
from movement_research.models.article import Article, SymbolSentiment
from movement_research.models.ohlc import OHLC, PriceMovement


@pytest.fixture
def settings():
    return Settings(
        ANTHROPIC_API_KEY="test-key",
        ALPHA_VANTAGE_API_KEY="test-av-key",
        REASONING_MODEL="claude-sonnet-4-5",
    )


@pytest.fixture
def defaults():
    return PipelineDefaults()


@pytest.fixture
def trade_date():
    return date(2024, 10, 11)


@pytest.fixture
def ohlc():
    return OHLC(open=150.00, high=158.25, low=149.50, close=156.80, volume=85_000_000)


@pytest.fixture
def movement(ohlc, defaults):
    return PriceMovement.from_ohlc(ohlc, defaults.reference_volume)


@pytest.fixture
def sample_articles():
    return [
        Article(
            title="Apple beats quarterly earnings estimates",
            summary="Apple reported revenue of $94.9B, above consensus, driven by iPhone sales.",
            source="Reuters",
            published_at="20241010T213000",
            sentiment_label="Bullish",
            sentiment_score=0.42,
            relevance=0.91,
            url="https://example.com/apple-earnings",
            symbol_sentiment=SymbolSentiment(ticker="AAPL", label="Bullish", score=0.51),
        ),
        Article(
            title="Tech stocks rally on rate cut hopes",
            summary="Broad rally across large-cap technology names as yields fall.",
            source="Bloomberg",
            published_at="20241011T140000",
            sentiment_label="Somewhat-Bullish",
            sentiment_score=0.21,
            relevance=0.35,
        ),
    ]


@pytest.fixture
def strategy_json():
    return json.dumps({
        "researchHypotheses": ["Earnings beat", "Analyst upgrade", "Sector rotation"],
        "searchKeywords": ["earnings", "iPhone", "upgrade"],
        "timeframeDays": 2,
        "confidenceLevel": "high",
        "reasoning": "Large move on heavy volume right after the report.",
    })


@pytest.fixture
def causality_json():
    def _make(confidence: int = 82) -> str:
        return json.dumps({
            "causalAnalysis": [
                {
                    "articleTitle": "Apple beats quarterly earnings estimates",
                    "causalityScore": 88,
                    "reasoning": "Earnings surprise released the evening before the move.",
                    "timelineMatch": "perfect",
                    "marketImpactPotential": "market-moving",
                },
            ],
            "overallConfidence": confidence,
            "alternativeTheories": ["Options expiry flows"],
        })

    return _make


@pytest.fixture
def follow_up_json():
    return json.dumps({
        "needsMoreData": True,
        "specificQueries": ["AAPL 10-Q guidance", "AAPL analyst price target changes"],
        "reasoning": "Earnings explain direction but not magnitude.",
        "searchSources": ["sec-filings", "analyst-reports"],
    })


@pytest.fixture
def mock_reasoning():
    reasoning = MagicMock()
    reasoning.complete = AsyncMock(return_value="")
    return reasoning


@pytest.fixture
def mock_news():
    news = MagicMock()
    news.enabled = True
    news.search = AsyncMock(return_value=[])
    return news
