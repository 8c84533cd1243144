"""Unit tests for the synthetic technical-observation article."""

from __future__ import annotations

from datetime import date

import pytest

from movement_research.models.ohlc import OHLC, PriceMovement
from movement_research.synthetic_evidence import build_technical_article


class TestBuildTechnicalArticle:
    def test_rally(self, trade_date, ohlc, movement):
        article = build_technical_article("AAPL", trade_date, ohlc, movement)
        assert article.title == "Technical Analysis: AAPL Rally of 4.53%"
        assert "upward" in article.summary
        assert "1.70x normal trading volume" in article.summary
        assert "Price moved from 150.0 to 156.8 with range 149.5-158.25." in article.summary
        assert article.sentiment_label == "Bullish"
        assert article.sentiment_score == pytest.approx(0.6)
        assert article.relevance == 1.0
        assert article.published_at == "2024-10-11"
        assert article.symbol_sentiment is None

    def test_decline(self):
        ohlc = OHLC(open=50.0, high=50.0, low=45.0, close=46.0, volume=25_000_000)
        movement = PriceMovement.from_ohlc(ohlc, 50_000_000)
        article = build_technical_article("XYZ", date(2024, 5, 1), ohlc, movement)
        assert article.title == "Technical Analysis: XYZ Decline of 8.00%"
        assert "downward" in article.summary
        assert "bearish" in article.summary
        assert article.sentiment_label == "Bearish"
        assert article.sentiment_score == pytest.approx(-0.6)

    def test_flat_day_described_as_decline(self):
        ohlc = OHLC(open=10.0, high=10.2, low=9.9, close=10.0, volume=1_000)
        movement = PriceMovement.from_ohlc(ohlc, 50_000_000)
        article = build_technical_article("FLAT", date(2024, 5, 1), ohlc, movement)
        assert article.sentiment_label == "Bearish"
