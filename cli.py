"""
CLI entry point for trade journal share links.
"""
import json
import logging
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlsplit

import typer
from rich.console import Console

from tradejournal.config import Config, load_config
from tradejournal.links import build_share_url, detect_environment, extract_share_token
from tradejournal.reporting import render_shared_payload
from tradejournal.share.builders import build_share_payload, build_trades_share_payload
from tradejournal.share.transport import decode_share_token, encode_share_token
from tradejournal.summary import summarize_trades
from tradejournal.types import PnlSummary, Trade

# Console output goes to stderr; share URLs and JSON go to stdout.
app = typer.Typer(pretty_exceptions_show_locals=False, help="Build and read share links for the trade journal.")
console = Console(stderr=True)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."),
):
    """Build and read share links for the trade journal."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _load_config_or_exit(config_path: Optional[Path]) -> Config:
    """Helper to load config and exit on failure."""
    if config_path is None:
        return Config.default()
    try:
        return load_config(config_path)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        raise typer.Exit(code=1)


# impure
def _load_trades(path: Path) -> List[Trade]:
    """
    Reads a JSON list of trades as exported by the journal backend.
    #impure: Reads from the filesystem.
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON list of trades")
    return [Trade.model_validate(item) for item in raw]


# impure
def _load_summary(path: Path) -> PnlSummary:
    """
    Reads a P/L summary object as returned by the journal backend.
    #impure: Reads from the filesystem.
    """
    return PnlSummary.model_validate(json.loads(path.read_text(encoding="utf-8")))


def _share_context(config: Config, base_url: Optional[str], env: Optional[str]):
    origin = (base_url or config.share.base_url).rstrip("/")
    tag = detect_environment(urlsplit(origin).hostname or "", env or config.share.env, config.share.production)
    return origin, tag


def _emit_share_url(config: Config, origin: str, token: str) -> None:
    # Over-budget links are reported by build_share_url through logging.
    url = build_share_url(
        origin,
        token,
        path=config.share.path,
        param=config.share.query_param,
        max_length=config.share.max_url_length,
    )
    typer.echo(url)


@app.command(name="share-month")
def share_month(
    month: str = typer.Option(..., "--month", "-m", help="Month to share, YYYY-MM."),
    summary_path: Optional[Path] = typer.Option(
        None, "--summary", help="P/L summary JSON from the journal backend.", exists=True
    ),
    trades_path: Optional[Path] = typer.Option(
        None, "--trades", help="Trade list JSON; summarized locally.", exists=True
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to the YAML configuration file.", exists=True
    ),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Overrides share.base_url."),
    env: Optional[str] = typer.Option(None, "--env", help="Overrides the environment tag."),
    generated_at: Optional[str] = typer.Option(None, "--generated-at", help="Pin the generation timestamp."),
):
    """Print a share link for one month of P/L."""
    config = _load_config_or_exit(config_path)
    if (summary_path is None) == (trades_path is None):
        console.print("[bold red]Error:[/bold red] pass exactly one of --summary or --trades.")
        raise typer.Exit(code=1)

    try:
        if summary_path is not None:
            summary = _load_summary(summary_path)
        else:
            summary = summarize_trades(
                _load_trades(trades_path),
                cad_to_usd_rate=config.fx.cad_to_usd_rate,
                fx_date=config.fx.fx_date,
            )
    except ValueError as e:
        console.print(f"[bold red]Input Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    origin, tag = _share_context(config, base_url, env)
    payload = build_share_payload(month, summary, env=tag, origin=origin, generated_at=generated_at)
    console.print(
        f"Sharing {payload.month}: {payload.summary.trade_count} trades, "
        f"{len(payload.summary.daily)} days, total {payload.summary.total_pnl:,.2f} USD"
    )
    _emit_share_url(config, origin, encode_share_token(payload))


@app.command(name="share-day")
def share_day(
    date: str = typer.Option(..., "--date", "-d", help="Day to share, YYYY-MM-DD."),
    trades_path: Path = typer.Option(..., "--trades", help="Trade list JSON from the journal backend.", exists=True),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to the YAML configuration file.", exists=True
    ),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Overrides share.base_url."),
    env: Optional[str] = typer.Option(None, "--env", help="Overrides the environment tag."),
    generated_at: Optional[str] = typer.Option(None, "--generated-at", help="Pin the generation timestamp."),
):
    """Print a share link for the trades closed on one day."""
    config = _load_config_or_exit(config_path)
    try:
        trades = _load_trades(trades_path)
    except ValueError as e:
        console.print(f"[bold red]Input Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    origin, tag = _share_context(config, base_url, env)
    payload = build_trades_share_payload(
        date,
        trades,
        env=tag,
        origin=origin,
        generated_at=generated_at,
        cad_to_usd_rate=config.fx.cad_to_usd_rate,
        fx_date=config.fx.fx_date,
    )
    if not payload.trades:
        console.print(f"[yellow]No trades found for {payload.date}.[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"Sharing {payload.date}: {len(payload.trades)} trades, total {payload.total_pnl:,.2f} USD")
    _emit_share_url(config, origin, encode_share_token(payload))


@app.command()
def view(
    link: str = typer.Argument(..., help="A share URL or a bare share token."),
    as_json: bool = typer.Option(False, "--json", help="Print the decoded payload as JSON."),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to the YAML configuration file.", exists=True
    ),
):
    """Decode a share link and show its read-only snapshot."""
    config = _load_config_or_exit(config_path)
    token = extract_share_token(link, config.share.query_param) if "?" in link else link
    if not token:
        console.print("[bold red]No shared data found in the link.[/bold red]")
        raise typer.Exit(code=1)

    payload = decode_share_token(token)
    if as_json:
        if payload is None:
            console.print("[bold red]This share link is invalid or has been corrupted.[/bold red]")
            raise typer.Exit(code=1)
        typer.echo(payload.model_dump_json(by_alias=True, exclude_none=True, indent=2))
        return

    if not render_shared_payload(payload, Console()):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
