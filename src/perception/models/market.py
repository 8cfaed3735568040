"""Market, Position, MarketSnapshot - read-only projections of ledger state."""

from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, Field


class MarketStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    SETTLED = "settled"


class Market(BaseModel):
    """Binary market as returned by the get_market view."""

    id: int = Field(..., ge=0)
    question: str = ""
    creator: str = ""
    resolve_ts: int = 0  # unix seconds
    total_yes_shares: int = Field(0, ge=0)
    total_no_shares: int = Field(0, ge=0)
    total_yes_volume: int = Field(0, ge=0)
    total_no_volume: int = Field(0, ge=0)
    settled: bool = False
    result: bool = False  # only meaningful when settled
    created_at: int = 0  # not returned by the view; 0 when unknown

    @property
    def outcome(self) -> bool | None:
        """Settled result, or None while the market is open."""
        return self.result if self.settled else None

    def status(self, now: float | None = None) -> MarketStatus:
        if self.settled:
            return MarketStatus.SETTLED
        now = time.time() if now is None else now
        if now > self.resolve_ts:
            return MarketStatus.EXPIRED
        return MarketStatus.ACTIVE


class Position(BaseModel):
    """A user's holdings in one market."""

    market_id: int = Field(..., ge=0)
    user: str
    yes_shares: int = Field(0, ge=0)
    no_shares: int = Field(0, ge=0)
    yes_cost: int = Field(0, ge=0)
    no_cost: int = Field(0, ge=0)
    agreement_percentage: int = Field(0, ge=0, le=100)
    prediction_side: bool = False  # True = YES


class MarketSnapshot(BaseModel):
    """One refresh of a market: entity plus price, published to cache subscribers."""

    market_id: int
    market: Market | None = None
    price: float = Field(0.5, ge=0, le=1, description="YES price in [0, 1]")
    degraded: bool = False  # market or price fell back to a default
    fetched_at: int = 0  # ms epoch
