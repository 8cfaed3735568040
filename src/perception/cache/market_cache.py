"""Market refresh subscriptions - one timer task per subscribed market view."""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Awaitable, Callable

import structlog

from perception.ledger.queries import LedgerQueryClient
from perception.models import MarketSnapshot

log = structlog.get_logger(__name__)

SnapshotCallback = Callable[[MarketSnapshot], "Awaitable[Any] | Any"]


class MarketSubscription:
    """
    Refreshes one market immediately and then every `interval_sec`, publishing each
    MarketSnapshot to a single callback. Owns its task; nothing is shared with
    other subscriptions.
    """

    def __init__(
        self,
        queries: LedgerQueryClient,
        market_id: int,
        callback: SnapshotCallback,
        interval_sec: float,
        on_close: Callable[[MarketSubscription], None] | None = None,
    ) -> None:
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self.queries = queries
        self.market_id = market_id
        self.callback = callback
        self.interval_sec = interval_sec
        self.latest: MarketSnapshot | None = None
        self.refresh_count = 0
        self._on_close = on_close
        self._wake = asyncio.Event()
        self._task: asyncio.Task[None] | None = asyncio.create_task(
            self._run(), name=f"market-refresh-{market_id}"
        )

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> MarketSnapshot:
        """Fetch market and price once. Never raises on ledger errors."""
        market_result = await self.queries.get_market_result(self.market_id)
        price_result = await self.queries.get_market_price_result(self.market_id)
        snapshot = MarketSnapshot(
            market_id=self.market_id,
            market=market_result.value,
            price=price_result.value,
            degraded=market_result.degraded or price_result.degraded,
            fetched_at=int(time.time() * 1000),
        )
        self.latest = snapshot
        self.refresh_count += 1
        return snapshot

    async def _publish(self, snapshot: MarketSnapshot) -> None:
        try:
            result = self.callback(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            log.warning("subscriber_callback_error", market_id=self.market_id, error=str(e))

    async def _run(self) -> None:
        while True:
            self._wake.clear()
            snapshot = await self.refresh()
            await self._publish(snapshot)
            try:
                await asyncio.wait_for(self._wake.wait(), timeout=self.interval_sec)
            except TimeoutError:
                pass

    def invalidate(self) -> None:
        """Re-fetch now instead of waiting for the next tick (e.g. after a confirmed transaction)."""
        self._wake.set()

    def cancel(self) -> None:
        """Stop the timer. Use unsubscribe() from async code to also wait for it."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if self._on_close is not None:
            self._on_close(self)
            self._on_close = None

    async def unsubscribe(self) -> None:
        """Stop the timer and wait for it. Safe to call from inside the subscriber callback."""
        task = self._task
        self.cancel()
        log.debug("market_unsubscribed", market_id=self.market_id, refreshes=self.refresh_count)
        current = asyncio.current_task()
        if task is None or task is current:
            # called from our own callback: the pending cancel ends _run at its next await
            return
        try:
            await task
        except asyncio.CancelledError:
            if current is not None and current.cancelling():
                raise


class MarketStateCache:
    """Factory and registry for independent market subscriptions."""

    def __init__(self, queries: LedgerQueryClient, refresh_interval_sec: float = 10.0) -> None:
        self.queries = queries
        self.refresh_interval_sec = refresh_interval_sec
        self._subscriptions: set[MarketSubscription] = set()

    def subscribe(
        self,
        market_id: int,
        callback: SnapshotCallback,
        interval_sec: float | None = None,
    ) -> MarketSubscription:
        """Start refreshing `market_id`. Must be called from a running event loop."""
        sub = MarketSubscription(
            self.queries,
            market_id,
            callback,
            interval_sec or self.refresh_interval_sec,
            on_close=self._subscriptions.discard,
        )
        self._subscriptions.add(sub)
        log.debug("market_subscribed", market_id=market_id, interval_sec=sub.interval_sec)
        return sub

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def invalidate(self, market_id: int) -> None:
        for sub in list(self._subscriptions):
            if sub.market_id == market_id:
                sub.invalidate()

    async def close_all(self) -> None:
        for sub in list(self._subscriptions):
            await sub.unsubscribe()
