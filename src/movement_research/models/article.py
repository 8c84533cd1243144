"""Article, SymbolSentiment Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SymbolSentiment(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ticker: str = ""
    label: str = Field(default="", alias="ticker_sentiment_label")
    score: float = Field(default=0.0, alias="ticker_sentiment_score")


class Article(BaseModel):
    """Canonical evidence unit, ranked by relevance."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    summary: str
    source: str = ""
    published_at: str = Field(default="", alias="publishedAt")
    sentiment_label: str = Field(default="", alias="sentiment")
    sentiment_score: float = Field(default=0.0, alias="sentimentScore")
    relevance: float = Field(default=0.0, ge=0, alias="relevanceScore")
    url: str | None = None
    symbol_sentiment: SymbolSentiment | None = Field(default=None, alias="tickerSentiment")
