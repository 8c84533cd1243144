"""ResearchStrategy Pydantic model."""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_LOOKBACK_DAYS = 365


class ResearchStrategy(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hypotheses: list[str] = Field(alias="researchHypotheses")
    keywords: list[str] = Field(alias="searchKeywords")
    lookback_days: int = Field(alias="timeframeDays")
    confidence: Literal["high", "medium", "low"] = Field(alias="confidenceLevel")
    reasoning: str = ""

    @field_validator("hypotheses", mode="after")
    @classmethod
    def _drop_blank_hypotheses(cls, v: list[str]) -> list[str]:
        return [item.strip() for item in v if item.strip()]

    @field_validator("keywords", mode="after")
    @classmethod
    def _require_keywords(cls, v: list[str]) -> list[str]:
        keywords = [item.strip() for item in v if item.strip()]
        if not keywords:
            raise ValueError("searchKeywords must not be empty")
        return keywords

    @field_validator("lookback_days", mode="before")
    @classmethod
    def _at_least_one_day(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float, str)):
            raise ValueError("timeframeDays must be a number")
        days = float(v)
        if not math.isfinite(days):
            raise ValueError("timeframeDays must be finite")
        return min(MAX_LOOKBACK_DAYS, max(1, round(days)))

    @field_validator("confidence", mode="before")
    @classmethod
    def _lower_confidence(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def hypothesis_text(self) -> str:
        return " ".join(self.hypotheses).lower()
