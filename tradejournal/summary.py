"""
Aggregation of closed trades into daily and monthly P/L buckets.

This is the summary the journal computes locally (for guests, or when the
backend summary is unavailable) before anything is shared.
"""
from datetime import date
from typing import Iterable, List, Optional

import pandas as pd

from tradejournal.share.coercion import round_money
from tradejournal.types import PnlBucket, PnlSummary, Trade

__all__ = ["summarize_trades", "best_bucket"]


def _buckets(frame: pd.DataFrame, key: str) -> List[PnlBucket]:
    """Groups `frame` by `key`, newest period first."""
    grouped = frame.groupby(key)["pnl_usd"].agg(["sum", "count"])
    grouped = grouped.sort_index(ascending=False)
    return [
        PnlBucket(period=str(period), pnl=round_money(row["sum"]), trades=int(row["count"]))
        for period, row in grouped.iterrows()
    ]


def summarize_trades(
    trades: Iterable[Trade],
    month: Optional[str] = None,
    cad_to_usd_rate: Optional[float] = None,
    fx_date: Optional[str] = None,
) -> PnlSummary:
    """
    Builds a P/L summary from closed trades.

    Args:
        trades: Closed trades in any order.
        month: Optional "YYYY-MM"; only trades closed in that month are counted.
        cad_to_usd_rate: Multiplier applied to CAD realized P/L. Defaults to 1.
        fx_date: Date the rate was observed. Defaults to today.

    Returns:
        A PnlSummary in USD with daily and monthly buckets sorted newest first.
    """
    rate = 1.0 if cad_to_usd_rate is None else cad_to_usd_rate
    rate_date = fx_date or date.today().isoformat()

    records = [
        {"closed_at": t.closed_at, "currency": t.currency, "realized_pnl": t.realized_pnl}
        for t in trades
        if month is None or t.closed_at.startswith(month)
    ]
    if not records:
        return PnlSummary(total_pnl=0.0, trade_count=0, cad_to_usd_rate=rate, fx_date=rate_date)

    df = pd.DataFrame(records)
    df["pnl_usd"] = df["realized_pnl"].where(df["currency"] != "CAD", df["realized_pnl"] * rate)
    df["day"] = df["closed_at"].str.slice(0, 10)
    df["month"] = df["closed_at"].str.slice(0, 7)

    return PnlSummary(
        total_pnl=round_money(df["pnl_usd"].sum()),
        trade_count=len(df),
        daily=_buckets(df, "day"),
        monthly=_buckets(df, "month"),
        cad_to_usd_rate=rate,
        fx_date=rate_date,
    )


def best_bucket(buckets: List[PnlBucket]) -> Optional[PnlBucket]:
    """The bucket with the highest P/L; the earliest listed wins ties."""
    if not buckets:
        return None
    best = buckets[0]
    for bucket in buckets[1:]:
        if bucket.pnl > best.pnl:
            best = bucket
    return best
