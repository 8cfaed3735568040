"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from perception.config import get_settings
from perception.config.settings import configure_logging

app = typer.Typer(
    name="perception",
    help=(
        "Perception - query perception_market on the ledger, print entry payloads "
        "for a wallet to sign, and follow transactions to confirmation."
    ),
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
) -> None:
    """Resolve the config profile once; every subcommand builds its LedgerConfig from ctx.obj."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from perception.cli import markets, positions, tx  # noqa: E402

app.add_typer(markets.app, name="markets")
app.add_typer(positions.app, name="positions")
app.add_typer(tx.app, name="tx")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
