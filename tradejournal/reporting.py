"""
Read-only rendering of a decoded share payload to a rich console.
"""
from datetime import datetime
from typing import List, Optional, Union

from dateutil import parser as date_parser
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tradejournal.summary import best_bucket
from tradejournal.types import SharedSummaryPayload, SharedTrade, SharedTradesPayload

__all__ = [
    "render_shared_payload",
    "format_month_label",
    "format_day_label",
    "format_currency",
    "fx_note",
    "INVALID_LINK_MESSAGE",
]

INVALID_LINK_MESSAGE = "This share link is invalid or has been corrupted."


def format_month_label(value: Optional[str]) -> str:
    """'2024-02' -> 'February 2024'; unparseable input is returned as is."""
    if not value:
        return "Unknown month"
    try:
        return datetime.strptime(value[:7], "%Y-%m").strftime("%B %Y")
    except ValueError:
        return value


def format_day_label(value: Optional[str]) -> str:
    """'2024-02-10' -> 'Feb 10, 2024'; unparseable input is returned as is."""
    if not value:
        return "Unknown day"
    try:
        day = datetime.strptime(value[:10], "%Y-%m-%d")
    except ValueError:
        return value
    return f"{day:%b} {day.day}, {day.year}"


def format_timestamp(value: Optional[str]) -> str:
    if not value:
        return "Unknown timestamp"
    try:
        return date_parser.isoparse(value).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except (ValueError, OverflowError):
        return value


def format_currency(value: float) -> str:
    return f"{value:,.2f}"


def _signed(value: float) -> str:
    colour = "green" if value >= 0 else "red"
    return f"[{colour}]{format_currency(value)}[/{colour}]"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def fx_note(rate: Optional[float], fx_date: Optional[str], scope: str = "P/L") -> str:
    if not rate:
        return f"{scope} shown in USD. CAD trades converted using the latest rate."
    note = f"{scope} shown in USD. CAD trades converted at {rate:.3f} CAD/USD"
    return f"{note} (as of {fx_date})." if fx_date else f"{note}."


def _option_descriptor(trade: SharedTrade) -> str:
    if not trade.option_type or trade.strike_price is None:
        return ""
    descriptor = f"{trade.option_type} {trade.strike_price:.2f}"
    return f"{descriptor} {escape(trade.expiry_date)}" if trade.expiry_date else descriptor


def _render_header(payload: Union[SharedSummaryPayload, SharedTradesPayload], console: Console) -> None:
    if payload.kind == "summary":
        console.rule("[bold]Shared P/L Snapshot[/bold]")
        chips = [escape(format_month_label(payload.month)), _plural(payload.summary.trade_count, "trade")]
    else:
        console.rule("[bold]Shared Trades Snapshot[/bold]")
        chips = [escape(format_day_label(payload.date)), _plural(len(payload.trades), "trade")]
    if payload.env:
        chips.append(f"Env: {escape(payload.env)}")
    if payload.origin:
        chips.append(f"Ref: {escape(payload.origin)}")
    console.print(" | ".join(chips))
    console.print(f"Generated {escape(format_timestamp(payload.generated_at))}")


def _render_summary(payload: SharedSummaryPayload, console: Console) -> None:
    summary = payload.summary
    best = best_bucket(summary.daily)
    console.print(
        f"Total P/L ({escape(format_month_label(payload.month))}): {_signed(summary.total_pnl)} USD"
    )
    console.print(
        f"Best day: {escape(best.period)}: {format_currency(best.pnl)} USD" if best else "Best day: No trades"
    )
    console.print(escape(fx_note(summary.cad_to_usd_rate, summary.fx_date)))

    if not summary.daily:
        console.print("No trades recorded for this month.")
        return
    table = Table(title="Daily P/L")
    table.add_column("Day")
    table.add_column("Trades", justify="right")
    table.add_column("P/L (USD)", justify="right")
    for bucket in sorted(summary.daily, key=lambda b: b.period):
        table.add_row(escape(bucket.period), _plural(bucket.trades, "trade"), _signed(bucket.pnl))
    console.print(table)


def _trades_table(trades: List[SharedTrade]) -> Table:
    table = Table(title="Trades")
    for column in ("Symbol", "Type", "Side", "Qty", "Entry", "Exit", "Fees", "P/L", "Opened", "Closed", "Notes"):
        table.add_column(column)
    for trade in trades:
        symbol = escape(trade.symbol)
        descriptor = _option_descriptor(trade)
        if descriptor:
            symbol = f"{symbol}\n[dim]{descriptor}[/dim]"
        table.add_row(
            symbol,
            trade.asset_type,
            trade.direction,
            f"{trade.quantity:g}",
            format_currency(trade.entry_price),
            format_currency(trade.exit_price),
            format_currency(trade.fees),
            f"{_signed(trade.realized_pnl)} {trade.currency}",
            escape(trade.opened_at.replace("-", "/")),
            escape(trade.closed_at.replace("-", "/")),
            escape(trade.notes) if trade.notes else "-",
        )
    return table


def _render_trades(payload: SharedTradesPayload, console: Console) -> None:
    console.print(f"Total P/L ({escape(format_day_label(payload.date))}): {_signed(payload.total_pnl)} USD")
    console.print(f"Trades: {len(payload.trades)}")
    console.print(escape(fx_note(payload.cad_to_usd_rate, payload.fx_date, scope="Total P/L")))
    if not payload.trades:
        console.print("No trades recorded for this day.")
        return
    console.print(_trades_table(payload.trades))


def render_shared_payload(
    payload: Optional[Union[SharedSummaryPayload, SharedTradesPayload]],
    console: Console,
) -> bool:
    """
    Prints a decoded share payload.

    Returns False (after printing the invalid-link message) when `payload` is
    None, True otherwise.
    """
    if payload is None:
        console.print(f"[bold red]{INVALID_LINK_MESSAGE}[/bold red]")
        return False

    _render_header(payload, console)
    if payload.kind == "summary":
        _render_summary(payload, console)
    else:
        _render_trades(payload, console)
    return True
