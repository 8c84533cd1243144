"""NarrativeAnalysis model: single-call prose commentary on one trading day."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict

from movement_research.models.ohlc import OHLC, PriceMovement


class NarrativeAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    date: datetime.date
    ohlc: OHLC
    movement: PriceMovement
    analysis: str
    generated_at: datetime.datetime

    @property
    def is_empty(self) -> bool:
        return not self.analysis

    def to_response(self) -> dict:
        return {
            "symbol": self.symbol,
            "date": self.date.isoformat(),
            "analysis": self.analysis,
            "ohlcData": self.ohlc.model_dump(mode="json"),
            "metadata": {
                "priceChange": self.movement.price_change,
                "priceChangePercent": self.movement.change_percent,
                "dayRange": self.movement.day_range,
                "isPositiveDay": self.movement.is_positive_day,
                "generatedAt": self.generated_at.isoformat(),
            },
        }
