"""CLI entry point for the Solana Token Details Tracker.

Usage:
    token-tracker <MINT_ADDRESS>
    token-tracker <MINT_ADDRESS> --output table --audit
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .core.config import TrackerConfig
from .core.exceptions import ConfigurationError
from .orchestrator import TokenDetailsAggregator
from .output.formatters import JSONFormatter, TableFormatter
from .resolution.address import is_valid_mint_address

app = typer.Typer(
    name="token-tracker",
    help="Solana Token Details Tracker",
    add_completion=False,
)

# Logs and status go to stderr; stdout carries only the report
console = Console(stderr=True)

NOT_FOUND_MESSAGE = "No details found for the provided token address."


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"Token Tracker v{__version__}")
        raise typer.Exit()


@app.command()
def track(
    address: Optional[str] = typer.Argument(None, help="Solana token mint address"),
    output: str = typer.Option(
        "json",
        "--output", "-o",
        help="Output format: json, table",
    ),
    audit: bool = typer.Option(
        False,
        "--audit", "-a",
        help="Include per-source status in output",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Path to a .env file with RPC_URL / BIRDEYE_API_KEY",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Fetch on-chain, metadata and market details for a token mint.

    Examples:
        token-tracker EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v
        token-tracker So11111111111111111111111111111111111111112 -o table
    """
    setup_logging(verbose)

    if not address:
        console.print("[red]Please provide a Solana token address as a command line argument.[/]")
        console.print("Usage: token-tracker <TOKEN_ADDRESS>")
        raise typer.Exit(1)

    if not is_valid_mint_address(address):
        console.print("[red]Invalid Solana token address format.[/]")
        raise typer.Exit(1)

    output_lower = output.lower()
    if output_lower not in ("json", "table"):
        console.print(f"[red]Invalid output format: {output}[/]")
        raise typer.Exit(1)

    try:
        config = TrackerConfig.load(env_file)
    except ConfigurationError as e:
        console.print(f"[red]{e.message}[/]")
        raise typer.Exit(1)

    result = asyncio.run(_run(address, config))

    if result is None:
        typer.echo(NOT_FOUND_MESSAGE)
        return

    if output_lower == "json":
        console.print("\n[bold]Token Details:[/]")
        typer.echo(JSONFormatter(include_sources=audit).format(result))
    else:
        typer.echo(TableFormatter(include_sources=audit).format(result))


async def _run(address: str, config: TrackerConfig):
    async with TokenDetailsAggregator(config) as aggregator:
        return await aggregator.get_token_details(address)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
