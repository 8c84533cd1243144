"""FollowUpRequest model and the requested/skipped follow-up outcome."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

SourceCategory = Literal["earnings", "sec-filings", "analyst-reports", "social-sentiment", "economic-data"]
SOURCE_CATEGORIES: tuple[str, ...] = (
    "earnings",
    "sec-filings",
    "analyst-reports",
    "social-sentiment",
    "economic-data",
)


class FollowUpRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    needs_more_data: bool = Field(alias="needsMoreData")
    queries: list[str] = Field(default=[], alias="specificQueries")
    reasoning: str
    sources: list[SourceCategory] = Field(default=[], alias="searchSources")

    @field_validator("sources", mode="before")
    @classmethod
    def _known_sources(cls, v):
        if not isinstance(v, list):
            raise ValueError("searchSources must be a list")
        known = []
        for item in v:
            label = item.strip().lower() if isinstance(item, str) else item
            if label in SOURCE_CATEGORIES and label not in known:
                known.append(label)
        return known


class FollowUpSkipped(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["skipped"] = "skipped"
    overall_confidence: int


class FollowUpRequested(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["requested"] = "requested"
    request: FollowUpRequest


FollowUpOutcome = Annotated[Union[FollowUpSkipped, FollowUpRequested], Field(discriminator="kind")]
