"""Tests for rendering decoded share payloads to the console."""
import pytest
from rich.console import Console

from tradejournal.reporting import (
    INVALID_LINK_MESSAGE,
    format_currency,
    format_day_label,
    format_month_label,
    fx_note,
    render_shared_payload,
)
from tradejournal.types import PnlBucket, PnlSummary, SharedSummaryPayload, SharedTrade, SharedTradesPayload


def render(payload) -> tuple:
    console = Console(record=True, width=200)
    ok = render_shared_payload(payload, console)
    return ok, console.export_text()


@pytest.fixture
def summary_payload() -> SharedSummaryPayload:
    return SharedSummaryPayload(
        month="2024-02",
        summary=PnlSummary(
            total_pnl=1234.5,
            trade_count=3,
            daily=[
                PnlBucket(period="2024-02-14", pnl=-100, trades=1),
                PnlBucket(period="2024-02-02", pnl=1334.5, trades=2),
            ],
            monthly=[PnlBucket(period="2024-02", pnl=1234.5, trades=3)],
            cad_to_usd_rate=0.7412,
            fx_date="2024-02-01",
        ),
        generated_at="2024-02-20T10:00:00Z",
        env="dev",
        origin="http://localhost:5173",
    )


@pytest.fixture
def trades_payload() -> SharedTradesPayload:
    return SharedTradesPayload(
        date="2024-02-10",
        trades=[
            SharedTrade(
                symbol="SPY", currency="CAD", asset_type="OPTION", direction="SHORT", quantity=2,
                entry_price=3.1, exit_price=1.2, fees=1.3, realized_pnl=378.7,
                opened_at="2024-02-09", closed_at="2024-02-10",
                option_type="PUT", strike_price=480.5, expiry_date="2024-02-16",
            ),
            SharedTrade(
                symbol="AAPL", currency="USD", asset_type="STOCK", direction="LONG", quantity=10,
                entry_price=150.5, exit_price=145, fees=1, realized_pnl=-56,
                opened_at="2024-02-09", closed_at="2024-02-10", notes="[bold]stopped out[/bold]",
            ),
        ],
        total_pnl=224.24,
        generated_at="2024-02-10T20:00:00Z",
        cad_to_usd_rate=0.74,
    )


def test_format_labels() -> None:
    assert format_month_label("2024-02") == "February 2024"
    assert format_month_label("garbage") == "garbage"
    assert format_month_label(None) == "Unknown month"
    assert format_day_label("2024-02-10") == "Feb 10, 2024"
    assert format_day_label("2024-02-05T00:00:00Z") == "Feb 5, 2024"
    assert format_day_label("") == "Unknown day"
    assert format_currency(-1234.5) == "-1,234.50"


def test_fx_note() -> None:
    assert fx_note(0.7412, "2024-02-01") == "P/L shown in USD. CAD trades converted at 0.741 CAD/USD (as of 2024-02-01)."
    assert fx_note(0.75, None, scope="Total P/L") == "Total P/L shown in USD. CAD trades converted at 0.750 CAD/USD."
    assert fx_note(None, None) == "P/L shown in USD. CAD trades converted using the latest rate."


def test_render_invalid_payload() -> None:
    ok, text = render(None)
    assert ok is False
    assert INVALID_LINK_MESSAGE in text


def test_render_summary(summary_payload: SharedSummaryPayload) -> None:
    ok, text = render(summary_payload)

    assert ok is True
    assert "Shared P/L Snapshot" in text
    assert "February 2024 | 3 trades | Env: dev | Ref: http://localhost:5173" in text
    assert "Total P/L (February 2024): 1,234.50 USD" in text
    assert "Best day: 2024-02-02: 1,334.50 USD" in text
    assert "converted at 0.741 CAD/USD (as of 2024-02-01)" in text
    assert "Daily P/L" in text
    assert text.index("2024-02-02") < text.index("2024-02-14")


def test_render_empty_summary(summary_payload: SharedSummaryPayload) -> None:
    empty = summary_payload.model_copy(
        update={"summary": PnlSummary(total_pnl=0, trade_count=0), "env": None, "origin": None}
    )
    _, text = render(empty)
    assert "February 2024 | 0 trades" in text
    assert "Env:" not in text
    assert "Best day: No trades" in text
    assert "No trades recorded for this month." in text


def test_render_trades(trades_payload: SharedTradesPayload) -> None:
    ok, text = render(trades_payload)

    assert ok is True
    assert "Shared Trades Snapshot" in text
    assert "Feb 10, 2024 | 2 trades" in text
    assert "Total P/L (Feb 10, 2024): 224.24 USD" in text
    assert "PUT 480.50 2024-02-16" in text
    assert "378.70 CAD" in text
    assert "-56.00 USD" in text
    assert "2024/02/10" in text
    assert "Total P/L shown in USD. CAD trades converted at 0.740 CAD/USD." in text


def test_render_escapes_markup_from_the_link(trades_payload: SharedTradesPayload) -> None:
    _, text = render(trades_payload)
    assert "[bold]stopped out[/bold]" in text


def test_render_empty_trades(trades_payload: SharedTradesPayload) -> None:
    _, text = render(trades_payload.model_copy(update={"trades": [], "total_pnl": 0}))
    assert "No trades recorded for this day." in text
