"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from predledger.config import get_settings
from predledger.config.settings import configure_logging

app = typer.Typer(
    name="predledger",
    help="Predledger - Pari-mutuel prediction market ledger: markets, bets, resolution, claims.",
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
    caller: str | None = typer.Option(
        None, "--caller", "-c", envvar="PREDLEDGER_CALLER", help="Authenticated caller identity"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile, "caller": caller}


# Subcommands registered from other modules
from predledger.cli import accounts, api_cmd, bets, ledger_cmd, markets  # noqa: E402

app.add_typer(ledger_cmd.app, name="ledger")
app.add_typer(markets.app, name="market")
app.add_typer(bets.app, name="bet")
app.add_typer(accounts.app, name="account")
app.add_typer(api_cmd.app, name="api")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
