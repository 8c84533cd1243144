"""ResearchRequest Pydantic model (inbound payload)."""

from __future__ import annotations

import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from movement_research.models.ohlc import OHLC


class ResearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str = Field(min_length=1)
    date: datetime.date
    ohlc: OHLC = Field(validation_alias=AliasChoices("ohlc", "ohlcData"))

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, v):
        return v.strip().upper() if isinstance(v, str) else v
