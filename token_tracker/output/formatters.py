"""Output formatters for token details.

Provides two output formats:
- JSON: Machine-readable, big integers and decimals as strings
- Table: Human-readable CLI output (rich)
"""

import io
import json
import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..calculator.amounts import format_amount
from ..core.models import TokenDetails
from ..core.types import StageStatus

logger = logging.getLogger(__name__)


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, result: TokenDetails) -> str:
        """Format the result as a string."""
        pass


class JSONFormatter(OutputFormatter):
    """Formats results as JSON."""

    def __init__(self, indent: int = 2, include_sources: bool = False):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation level
            include_sources: Include the per-source audit trail
        """
        self.indent = indent
        self.include_sources = include_sources

    def format(self, result: TokenDetails) -> str:
        """Format result as JSON string."""
        exclude = None if self.include_sources else {"sources"}
        data = result.model_dump(mode="json", exclude=exclude)
        return json.dumps(data, indent=self.indent)


def _usd(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"${format_amount(value)}"


class TableFormatter(OutputFormatter):
    """Formats results as human-readable tables for CLI output."""

    STATUS_STYLES = {
        StageStatus.OK: "green",
        StageStatus.EMPTY: "yellow",
        StageStatus.FAILED: "red",
        StageStatus.SKIPPED: "dim",
    }

    def __init__(self, width: int = 100, include_sources: bool = True):
        self.width = width
        self.include_sources = include_sources

    def _details_table(self, result: TokenDetails) -> Table:
        table = Table(title=escape(f"{result.name} ({result.symbol})"), show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value", overflow="fold")

        table.add_row("Address", result.address)
        table.add_row("Image", escape(result.image_url or "-"))
        table.add_row("Decimals", str(result.decimals))
        table.add_row("Total Supply", result.total_supply)
        table.add_row("Total Supply (raw)", str(result.total_supply_raw))
        table.add_row("Mint Authority", result.mint_authority or "revoked")
        table.add_row("Freeze Authority", result.freeze_authority or "revoked")
        table.add_row("Price", _usd(result.price))
        table.add_row("Market Cap", _usd(result.market_cap))
        table.add_row("Liquidity", _usd(result.liquidity_usd))
        table.add_row("Holders", f"{result.holders:,}" if result.holders is not None else "-")
        table.add_row("Volume 24h", _usd(result.volume_24h))
        return table

    def _sources_table(self, result: TokenDetails) -> Table:
        table = Table(title="Sources")
        table.add_column("Source")
        table.add_column("Action")
        table.add_column("Status")
        table.add_column("ms", justify="right")
        table.add_column("Error", overflow="fold")

        for entry in result.sources:
            style = self.STATUS_STYLES.get(entry.status, "")
            table.add_row(
                entry.source.value,
                entry.action,
                f"[{style}]{entry.status.value}[/]" if style else entry.status.value,
                str(entry.duration_ms) if entry.duration_ms is not None else "",
                escape(entry.error_message or ""),
            )
        return table

    def format(self, result: TokenDetails) -> str:
        """Format result as readable tables."""
        buffer = io.StringIO()
        console = Console(file=buffer, width=self.width, force_terminal=False)
        console.print(self._details_table(result))
        if self.include_sources and result.sources:
            console.print(self._sources_table(result))
        return buffer.getvalue()
