"""CausalFinding, CausalityReport Pydantic models."""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TimelineMatch = Literal["perfect", "good", "poor"]
ImpactPotential = Literal["market-moving", "moderate", "minimal"]


def clamp_score(v) -> int:
    """Coerce a 0-100 score from model output; rejects non-numeric values."""
    if isinstance(v, bool) or not isinstance(v, (int, float, str)):
        raise ValueError("score must be a number")
    score = float(v)
    if not math.isfinite(score):
        raise ValueError("score must be finite")
    return int(min(100, max(0, round(score))))


class CausalFinding(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    article_title: str = Field(default="", alias="articleTitle")
    causality_score: int = Field(default=0, alias="causalityScore")
    reasoning: str = ""
    timeline_match: TimelineMatch = Field(default="poor", alias="timelineMatch")
    impact_potential: ImpactPotential = Field(default="minimal", alias="marketImpactPotential")

    @field_validator("causality_score", mode="before")
    @classmethod
    def _clamp(cls, v):
        return clamp_score(v)

    @field_validator("timeline_match", mode="before")
    @classmethod
    def _known_timeline(cls, v):
        label = v.strip().lower() if isinstance(v, str) else v
        return label if label in ("perfect", "good", "poor") else "poor"

    @field_validator("impact_potential", mode="before")
    @classmethod
    def _known_impact(cls, v):
        label = v.strip().lower() if isinstance(v, str) else v
        return label if label in ("market-moving", "moderate", "minimal") else "minimal"


class CausalityReport(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    findings: list[CausalFinding] = Field(alias="causalAnalysis")
    overall_confidence: int = Field(alias="overallConfidence")
    alternative_theories: list[str] = Field(default=[], alias="alternativeTheories")

    @field_validator("overall_confidence", mode="before")
    @classmethod
    def _clamp(cls, v):
        return clamp_score(v)

    @property
    def top_finding(self) -> CausalFinding | None:
        if not self.findings:
            return None
        return max(self.findings, key=lambda f: f.causality_score)
