"""Read-only contract queries normalized into typed entities.

Every query degrades instead of raising: a failed view call yields a safe
sentinel (None, 0, 0.5) so a UI refresh never blows up on a transient RPC
error. The ``*_result`` variants expose whether a value is genuine, absent on
the ledger, or a fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

import structlog

from perception.ledger.decode import decode_count, decode_market, decode_position, decode_price
from perception.ledger.rpc import LedgerRpc
from perception.models import Market, Position

log = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_PRICE = 0.5


class QueryState(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    state: QueryState
    value: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is QueryState.OK

    @property
    def degraded(self) -> bool:
        return self.state is QueryState.DEGRADED


class LedgerQueryClient:
    """View-function queries against the market module."""

    def __init__(self, rpc: LedgerRpc) -> None:
        self.rpc = rpc

    async def get_market_result(self, market_id: int) -> QueryResult[Market | None]:
        try:
            row = await self.rpc.view("get_market", [str(market_id)])
            market = decode_market(market_id, row)
        except Exception as e:
            log.warning("get_market_failed", market_id=market_id, error=str(e))
            return QueryResult(QueryState.DEGRADED, None, str(e))
        if market is None:
            return QueryResult(QueryState.NOT_FOUND, None)
        return QueryResult(QueryState.OK, market)

    async def get_market(self, market_id: int) -> Market | None:
        """Market by id, or None when absent or unreadable."""
        return (await self.get_market_result(market_id)).value

    async def get_markets_count_result(self) -> QueryResult[int]:
        try:
            row = await self.rpc.view("get_markets_count", [])
            count = decode_count(row)
        except Exception as e:
            log.warning("get_markets_count_failed", error=str(e))
            return QueryResult(QueryState.DEGRADED, 0, str(e))
        return QueryResult(QueryState.OK, count)

    async def get_markets_count(self) -> int:
        return (await self.get_markets_count_result()).value

    async def get_all_markets_result(self) -> QueryResult[list[Market]]:
        """
        Count, then one get_market per index in order. Sequential, so n round
        trips, bounded by the count. Failed or missing indices are skipped.
        """
        count_result = await self.get_markets_count_result()
        markets: list[Market] = []
        skipped: list[int] = []
        for market_id in range(count_result.value):
            result = await self.get_market_result(market_id)
            if result.value is not None:
                markets.append(result.value)
            elif result.degraded:
                skipped.append(market_id)
        if count_result.degraded:
            return QueryResult(QueryState.DEGRADED, markets, count_result.error)
        if skipped:
            log.info("get_all_markets_partial", count=count_result.value, skipped=skipped)
            return QueryResult(QueryState.DEGRADED, markets, f"skipped market ids {skipped}")
        return QueryResult(QueryState.OK, markets)

    async def get_all_markets(self) -> list[Market]:
        return (await self.get_all_markets_result()).value

    async def get_user_position_result(
        self, user: str, market_id: int
    ) -> QueryResult[Position | None]:
        try:
            row = await self.rpc.view("get_user_position", [user, str(market_id)])
            position = decode_position(user, market_id, row)
        except Exception as e:
            log.warning("get_user_position_failed", user=user, market_id=market_id, error=str(e))
            return QueryResult(QueryState.DEGRADED, None, str(e))
        if position is None:
            return QueryResult(QueryState.NOT_FOUND, None)
        return QueryResult(QueryState.OK, position)

    async def get_user_position(self, user: str, market_id: int) -> Position | None:
        return (await self.get_user_position_result(user, market_id)).value

    async def get_market_price_result(self, market_id: int) -> QueryResult[float]:
        try:
            row = await self.rpc.view("get_market_price", [str(market_id)])
            price = decode_price(row)
        except Exception as e:
            log.warning("get_market_price_failed", market_id=market_id, error=str(e))
            return QueryResult(QueryState.DEGRADED, DEFAULT_PRICE, str(e))
        return QueryResult(QueryState.OK, price)

    async def get_market_price(self, market_id: int) -> float:
        """YES price in [0, 1]; 0.5 when unknown."""
        return (await self.get_market_price_result(market_id)).value
