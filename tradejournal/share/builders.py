"""
Builders that cut a full summary or trade list down to the slice being shared.
"""
from typing import Iterable, List, Optional

from tradejournal.share.coercion import (
    finite_sum,
    normalize_notes,
    round_money,
    to_date_only,
    to_number,
    utc_timestamp,
)
from tradejournal.types import (
    PnlBucket,
    PnlSummary,
    SharedSummaryPayload,
    SharedTrade,
    SharedTradesPayload,
    Trade,
)

__all__ = [
    "build_share_payload",
    "build_trades_share_payload",
    "normalize_trade_for_share",
    "compute_trades_total",
]


def _filter_buckets_for_month(buckets: Iterable[PnlBucket], month: str) -> List[PnlBucket]:
    return [bucket for bucket in buckets if bucket.period.startswith(month)]


def normalize_trade_for_share(trade: Trade) -> SharedTrade:
    """Projects a stored trade onto the fields a share link carries."""
    is_option = trade.asset_type == "OPTION"
    return SharedTrade(
        symbol=trade.symbol,
        currency=trade.currency,
        asset_type=trade.asset_type,
        direction=trade.direction,
        quantity=to_number(trade.quantity),
        entry_price=to_number(trade.entry_price),
        exit_price=to_number(trade.exit_price),
        fees=to_number(trade.fees),
        realized_pnl=to_number(trade.realized_pnl),
        opened_at=to_date_only(trade.opened_at),
        closed_at=to_date_only(trade.closed_at),
        notes=normalize_notes(trade.notes),
        option_type=trade.option_type if is_option else None,
        strike_price=trade.strike_price if is_option else None,
        expiry_date=trade.expiry_date if is_option else None,
    )


def compute_trades_total(trades: Iterable[SharedTrade], cad_to_usd_rate: Optional[float] = None) -> float:
    """
    Sums realized P/L in USD, rounded to cents.

    CAD trades are multiplied by `cad_to_usd_rate` (1 when not given); USD
    trades are taken as is.
    """
    rate = 1.0 if cad_to_usd_rate is None else cad_to_usd_rate
    total = finite_sum(
        trade.realized_pnl * rate if trade.currency == "CAD" else trade.realized_pnl
        for trade in trades
    )
    return round_money(total)


def build_share_payload(
    month: str,
    summary: PnlSummary,
    *,
    env: Optional[str] = None,
    origin: Optional[str] = None,
    generated_at: Optional[str] = None,
) -> SharedSummaryPayload:
    """
    Restricts `summary` to a single month for sharing.

    Totals come from the month's monthly bucket when the summary has one,
    otherwise from the month's daily buckets.
    """
    month_key = month[:7]
    daily = _filter_buckets_for_month(summary.daily, month_key)
    monthly = _filter_buckets_for_month(summary.monthly, month_key)
    source = monthly if monthly else daily

    total_pnl = finite_sum(bucket.pnl for bucket in source)
    trade_count = sum(bucket.trades for bucket in source)

    return SharedSummaryPayload(
        month=month_key,
        summary=summary.model_copy(
            update={
                "total_pnl": round_money(total_pnl),
                "trade_count": trade_count,
                "daily": daily,
                "monthly": monthly,
            }
        ),
        generated_at=generated_at or utc_timestamp(),
        env=env,
        origin=origin,
    )


def build_trades_share_payload(
    date: str,
    trades: Iterable[Trade],
    *,
    env: Optional[str] = None,
    origin: Optional[str] = None,
    generated_at: Optional[str] = None,
    cad_to_usd_rate: Optional[float] = None,
    fx_date: Optional[str] = None,
) -> SharedTradesPayload:
    """Collects the trades closed on `date` for sharing."""
    date_key = date[:10]
    shared_trades = [
        normalize_trade_for_share(trade) for trade in trades if trade.closed_at.startswith(date_key)
    ]

    return SharedTradesPayload(
        date=date_key,
        trades=shared_trades,
        total_pnl=compute_trades_total(shared_trades, cad_to_usd_rate),
        generated_at=generated_at or utc_timestamp(),
        env=env,
        origin=origin,
        cad_to_usd_rate=cad_to_usd_rate,
        fx_date=fx_date,
    )
