"""Positions subcommand: show."""

from __future__ import annotations

import asyncio

import typer

from perception.ledger import LedgerQueryClient, LedgerRpc

app = typer.Typer(help="Read user positions")


@app.command("show")
def show(
    ctx: typer.Context,
    user: str = typer.Argument(..., help="Account address"),
    market_id: int = typer.Argument(..., min=0),
) -> None:
    """Show a user's position in one market."""
    settings = ctx.obj["settings"]

    async def fetch():
        async with LedgerRpc(settings.ledger_config()) as rpc:
            return await LedgerQueryClient(rpc).get_user_position(user, market_id)

    position = asyncio.run(fetch())
    if position is None:
        typer.echo(f"No position for {user} in market {market_id}")
        raise typer.Exit(1)
    side = "YES" if position.prediction_side else "NO"
    typer.echo(f"Side:       {side} ({position.agreement_percentage}% expected agreement)")
    typer.echo(f"YES shares: {position.yes_shares} (cost {position.yes_cost})")
    typer.echo(f"NO shares:  {position.no_shares} (cost {position.no_cost})")
