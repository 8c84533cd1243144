"""Settings (pydantic-settings, loaded from env vars) and pipeline fallback defaults."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings

from movement_research.models.causality import CausalityReport
from movement_research.models.follow_up import FollowUpRequest
from movement_research.models.strategy import ResearchStrategy


class Settings(BaseSettings):
    # --- Anthropic ---
    ANTHROPIC_API_KEY: str = ""
    REASONING_MODEL: str = "claude-sonnet-4-5"
    REASONING_MAX_TOKENS: int = 2048
    STRATEGY_TEMPERATURE: float = 0.4
    ANALYSIS_TEMPERATURE: float = 0.2
    NARRATIVE_TEMPERATURE: float = 0.7
    REASONING_TIMEOUT_SECONDS: float | None = None
    REASONING_MAX_ATTEMPTS: int = 1

    # --- Alpha Vantage ---
    ALPHA_VANTAGE_API_KEY: str = ""
    ALPHA_VANTAGE_URL: str = "https://www.alphavantage.co/query"
    NEWS_RESULT_LIMIT: int = 50
    NEWS_SORT: str = "RELEVANCE"
    NEWS_HTTP_TIMEOUT_SECONDS: float = 30.0
    NEWS_MAX_ATTEMPTS: int = 1

    # --- Logging ---
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    model_config = {"env_prefix": "", "case_sensitive": True}

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


DEFAULT_STRATEGY = ResearchStrategy(
    hypotheses=["Earnings news", "Product announcement", "Market sentiment shift"],
    keywords=["earnings", "revenue", "announcement", "upgrade"],
    lookback_days=3,
    confidence="medium",
    reasoning="Using fallback strategy due to parsing error",
)

DEFAULT_CAUSALITY = CausalityReport(
    findings=[],
    overall_confidence=50,
    alternative_theories=["Technical trading patterns", "General market movement"],
)

DEFAULT_FOLLOW_UP = FollowUpRequest(
    needs_more_data=True,
    queries=["SEC filings", "Analyst reports"],
    reasoning="Low confidence requires additional data sources",
    sources=["sec-filings", "analyst-reports"],
)


class PipelineDefaults(BaseModel):
    """Thresholds and fallback values used by the research pipeline stages."""

    model_config = ConfigDict(frozen=True)

    # Rough average daily volume; volumeRatio = volume / reference_volume
    reference_volume: float = 50_000_000
    # Follow-up runs when overall confidence is strictly below this
    follow_up_threshold: int = 70
    # Report status is high-confidence when overall confidence is strictly above this
    high_confidence_threshold: int = 70
    synthetic_sentiment_magnitude: float = 0.6
    causality_top_n: int = 8
    summary_max_chars: int = 250
    raw_news_preview: int = 5

    default_strategy: ResearchStrategy = DEFAULT_STRATEGY
    default_causality: CausalityReport = DEFAULT_CAUSALITY
    default_follow_up: FollowUpRequest = DEFAULT_FOLLOW_UP
