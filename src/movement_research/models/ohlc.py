"""OHLC input, PriceMovement Pydantic models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Significance = Literal["minor", "moderate", "major"]

MAJOR_MOVE_PCT = 3.0
MODERATE_MOVE_PCT = 1.0


class OHLC(BaseModel):
    model_config = ConfigDict(frozen=True)

    open: float = Field(gt=0)
    high: float
    low: float
    close: float
    volume: float = Field(ge=0)


def classify_significance(change_percent: float) -> Significance:
    """major above 3%, moderate above 1%, otherwise minor (boundaries exclusive)."""
    magnitude = abs(change_percent)
    if magnitude > MAJOR_MOVE_PCT:
        return "major"
    if magnitude > MODERATE_MOVE_PCT:
        return "moderate"
    return "minor"


class PriceMovement(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    change_percent: float = Field(alias="changePercent")
    volume_ratio: float = Field(ge=0, alias="volumeRatio")
    significance: Significance
    price_change: float = Field(default=0.0, alias="priceChange")
    day_range: float = Field(default=0.0, alias="dayRange")
    is_positive_day: bool = Field(default=True, alias="isPositiveDay")

    @classmethod
    def from_ohlc(cls, ohlc: OHLC, reference_volume: float) -> PriceMovement:
        change_percent = (ohlc.close - ohlc.open) / ohlc.open * 100
        return cls(
            change_percent=change_percent,
            volume_ratio=ohlc.volume / reference_volume,
            significance=classify_significance(change_percent),
            price_change=ohlc.close - ohlc.open,
            day_range=ohlc.high - ohlc.low,
            is_positive_day=ohlc.close >= ohlc.open,
        )

    @property
    def is_up(self) -> bool:
        return self.change_percent > 0

    @property
    def direction(self) -> str:
        return "up" if self.is_up else "down"
