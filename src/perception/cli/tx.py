"""Tx subcommand: build entry payloads for an external wallet, wait for confirmation."""

from __future__ import annotations

import asyncio
import json

import typer

from perception.errors import ConfigurationError, ConfirmationTimeoutError, InputValidationError
from perception.ledger import LedgerRpc
from perception.models import EntryFunctionPayload, TransactionStatus
from perception.transactions import ConfirmationPoller, TransactionBuilder
from perception.transactions.validation import (
    resolve_timestamp_from,
    validate_agreement_percentage,
    validate_amount,
    validate_market_id,
    validate_question,
    validate_resolve_timestamp,
)

app = typer.Typer(help="Transaction payloads and confirmation")
payload_app = typer.Typer(help="Print wallet payloads as JSON (signing is done by the wallet)")
app.add_typer(payload_app, name="payload")


def _emit(ctx: typer.Context, build) -> None:
    builder = TransactionBuilder(ctx.obj["settings"].ledger_config())
    try:
        payload: EntryFunctionPayload = build(builder)
    except (InputValidationError, ConfigurationError) as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(2)
    typer.echo(json.dumps(payload.to_wallet_payload(), indent=2))


@payload_app.command("create-market")
def create_market(
    ctx: typer.Context,
    question: str = typer.Argument(...),
    date: str = typer.Option(..., "--date", "-d", help="Resolution date YYYY-MM-DD (local)"),
    at: str = typer.Option(..., "--time", "-t", help="Resolution time HH:MM (local)"),
) -> None:
    """Create a binary market resolving at a future date/time."""

    def build(builder: TransactionBuilder) -> EntryFunctionPayload:
        q = validate_question(question)
        resolve_ts = validate_resolve_timestamp(resolve_timestamp_from(date, at))
        return builder.create_market(q, resolve_ts)

    _emit(ctx, build)


@payload_app.command("buy")
def buy(
    ctx: typer.Context,
    market_id: int = typer.Argument(...),
    amount: int = typer.Argument(...),
    side: str = typer.Option("yes", "--side", "-s", help="yes or no"),
    agreement: int = typer.Option(50, "--agreement", "-a", help="Expected % of people agreeing"),
) -> None:
    """Buy YES or NO shares."""
    side = side.lower()
    if side not in ("yes", "no"):
        typer.echo("Error: --side must be yes or no", err=True)
        raise typer.Exit(2)

    def build(builder: TransactionBuilder) -> EntryFunctionPayload:
        return builder.buy(
            validate_market_id(market_id),
            side == "yes",
            validate_amount(amount),
            validate_agreement_percentage(agreement),
        )

    _emit(ctx, build)


@payload_app.command("settle")
def settle(
    ctx: typer.Context,
    market_id: int = typer.Argument(...),
    result: str = typer.Option(..., "--result", "-r", help="Settled outcome: yes or no"),
) -> None:
    """Settle a market (admin only)."""
    result = result.lower()
    if result not in ("yes", "no"):
        typer.echo("Error: --result must be yes or no", err=True)
        raise typer.Exit(2)
    _emit(ctx, lambda b: b.settle_market(validate_market_id(market_id), result == "yes"))


@payload_app.command("initialize")
def initialize(ctx: typer.Context) -> None:
    """Initialize the market registry (admin only, one time)."""
    _emit(ctx, lambda b: b.initialize())


@app.command("wait")
def wait(
    ctx: typer.Context,
    tx_hash: str = typer.Argument(...),
    timeout: float = typer.Option(None, "--timeout", help="Seconds (overrides config)"),
) -> None:
    """Poll a submitted transaction until it is confirmed, failed or timed out."""
    settings = ctx.obj["settings"]

    async def run_wait():
        async with LedgerRpc(settings.ledger_config()) as rpc:
            poller = ConfirmationPoller(
                rpc,
                timeout_sec=timeout or settings.confirm_timeout_sec,
                interval_sec=settings.poll_interval_sec,
            )
            return await poller.wait_for_hash(tx_hash)

    try:
        handle = asyncio.run(run_wait())
    except ConfirmationTimeoutError as e:
        typer.echo(f"Submitted, unconfirmed: {e.message}")
        raise typer.Exit(3)
    detail = f" ({handle.vm_status})" if handle.vm_status else ""
    typer.echo(f"{handle.hash}: {handle.status.value}{detail}")
    if handle.status is TransactionStatus.FAILED:
        raise typer.Exit(1)
