"""Markets subcommand: list, count, show, watch."""

from __future__ import annotations

import asyncio
import signal
import sys
import time
from datetime import datetime

import typer

from perception.cache import MarketStateCache
from perception.ledger import LedgerQueryClient, LedgerRpc
from perception.models import Market, MarketSnapshot

app = typer.Typer(help="Read markets from the contract")


def _format_ts(ts: int) -> str:
    return datetime.fromtimestamp(ts).strftime("%m/%d/%Y %I:%M %p")


def _market_line(market: Market, price: float) -> str:
    status = market.status(time.time()).value
    return (
        f"  #{market.id:<4} {status:<8} {price * 100:5.1f}% YES  "
        f"yes={market.total_yes_shares} no={market.total_no_shares}  {market.question[:60]}"
    )


@app.command("list")
def list_markets(ctx: typer.Context) -> None:
    """Fetch every market (one view call per market) with its price."""
    settings = ctx.obj["settings"]

    async def fetch() -> None:
        async with LedgerRpc(settings.ledger_config()) as rpc:
            queries = LedgerQueryClient(rpc)
            result = await queries.get_all_markets_result()
            for market in result.value:
                price = await queries.get_market_price(market.id)
                typer.echo(_market_line(market, price))
            typer.echo(f"Total: {len(result.value)} markets")
            if result.degraded:
                typer.echo(f"Warning: partial result ({result.error})", err=True)

    asyncio.run(fetch())


@app.command("count")
def count(ctx: typer.Context) -> None:
    """Number of markets in the registry."""
    settings = ctx.obj["settings"]

    async def fetch() -> int:
        async with LedgerRpc(settings.ledger_config()) as rpc:
            return await LedgerQueryClient(rpc).get_markets_count()

    typer.echo(asyncio.run(fetch()))


@app.command("show")
def show(ctx: typer.Context, market_id: int = typer.Argument(..., min=0)) -> None:
    """Show one market."""
    settings = ctx.obj["settings"]

    async def fetch() -> tuple[Market | None, float]:
        async with LedgerRpc(settings.ledger_config()) as rpc:
            queries = LedgerQueryClient(rpc)
            return await queries.get_market(market_id), await queries.get_market_price(market_id)

    market, price = asyncio.run(fetch())
    if market is None:
        typer.echo(f"Market {market_id} not found")
        raise typer.Exit(1)
    typer.echo(f"Question:  {market.question}")
    typer.echo(f"Creator:   {market.creator}")
    typer.echo(f"Resolves:  {_format_ts(market.resolve_ts)}")
    typer.echo(f"Status:    {market.status().value}")
    typer.echo(f"Price:     {price * 100:.1f}% YES")
    typer.echo(f"Shares:    yes={market.total_yes_shares} no={market.total_no_shares}")
    typer.echo(f"Volume:    yes={market.total_yes_volume} no={market.total_no_volume}")
    if market.outcome is not None:
        typer.echo(f"Result:    {'YES' if market.outcome else 'NO'}")


@app.command("watch")
def watch(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., min=0),
    interval: float = typer.Option(
        None, "--interval", "-i", help="Refresh interval in seconds (overrides config)"
    ),
) -> None:
    """Refresh a market periodically until Ctrl+C."""
    settings = ctx.obj["settings"]
    stop_event = asyncio.Event()

    def on_snapshot(snapshot: MarketSnapshot) -> None:
        stamp = datetime.fromtimestamp(snapshot.fetched_at / 1000).strftime("%H:%M:%S")
        if snapshot.market is None:
            typer.echo(f"[{stamp}] market {market_id} unavailable")
            return
        suffix = " (degraded)" if snapshot.degraded else ""
        typer.echo(f"[{stamp}]{_market_line(snapshot.market, snapshot.price)}{suffix}")

    async def run_watch() -> None:
        async with LedgerRpc(settings.ledger_config()) as rpc:
            cache = MarketStateCache(LedgerQueryClient(rpc), settings.refresh_interval_sec)
            sub = cache.subscribe(market_id, on_snapshot, interval)
            try:
                await stop_event.wait()
            finally:
                await sub.unsubscribe()

    loop = asyncio.new_event_loop()
    if sys.platform != "win32":
        loop.add_signal_handler(signal.SIGINT, stop_event.set)
        loop.add_signal_handler(signal.SIGTERM, stop_event.set)
    try:
        typer.echo(f"Watching market {market_id} (Ctrl+C to stop)...")
        loop.run_until_complete(run_watch())
    except KeyboardInterrupt:
        pass
    finally:
        loop.close()
    typer.echo("Stopped.")
