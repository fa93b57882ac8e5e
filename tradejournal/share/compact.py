"""
Compaction of share payloads into the short-key, positional wire form.

Summary token:  {"m", "g", "e"?, "o"?, "s": [total, count, [[day, pnl, trades], ...], rate?, fx_date?]}
Trades token:   {"d", "g", "e"?, "o"?, "t": [trade_tuple, ...], "p", "r"?, "f"?}

Monthly buckets are not carried. Decoding synthesizes a single bucket for the
shared month from the token's total and count.
"""
from typing import Any, Dict, List, Optional, Union

from tradejournal.share.coercion import normalize_notes, round_count, round_money, to_date_only, to_number
from tradejournal.types import PnlBucket, SharedSummaryPayload, SharedTrade, SharedTradesPayload

__all__ = [
    "build_compact_summary_token",
    "build_compact_trades_token",
    "build_daily_tuple",
    "build_trade_tuple",
]

Number = Union[int, float]


def _wire_number(value: float) -> Number:
    """Integral floats go on the wire as JSON integers."""
    return int(value) if float(value).is_integer() else value


def _trim_trailing_none(values: List[Any]) -> List[Any]:
    while values and values[-1] is None:
        values.pop()
    return values


def _with_metadata(token: Dict[str, Any], env: Optional[str], origin: Optional[str]) -> Dict[str, Any]:
    if env is not None:
        token["e"] = env
    if origin is not None:
        token["o"] = origin
    return token


def _day_of_month(period: str) -> Optional[int]:
    digits = period[8:10]
    if not digits.isdigit():
        return None
    day = int(digits)
    return day if 1 <= day <= 31 else None


def build_daily_tuple(bucket: PnlBucket) -> Optional[List[Number]]:
    """[day, pnl, trades] for a daily bucket, or None if its period has no valid day."""
    day = _day_of_month(bucket.period)
    if day is None:
        return None
    return [day, _wire_number(round_money(bucket.pnl)), round_count(bucket.trades)]


def build_compact_summary_token(payload: SharedSummaryPayload) -> Dict[str, Any]:
    month_key = payload.month[:7]
    summary = payload.summary

    daily = []
    for bucket in summary.daily:
        if not bucket.period.startswith(month_key):
            continue
        compact = build_daily_tuple(bucket)
        if compact is not None:
            daily.append(compact)

    compact_summary: List[Any] = [
        _wire_number(round_money(summary.total_pnl)),
        round_count(summary.trade_count),
        daily,
    ]
    if summary.cad_to_usd_rate is not None or summary.fx_date is not None:
        rate = None if summary.cad_to_usd_rate is None else to_number(summary.cad_to_usd_rate, None)
        compact_summary.extend([rate, summary.fx_date])
        _trim_trailing_none(compact_summary)

    token: Dict[str, Any] = {"m": month_key, "g": payload.generated_at}
    _with_metadata(token, payload.env, payload.origin)
    token["s"] = compact_summary
    return token


def build_trade_tuple(trade: SharedTrade) -> List[Any]:
    is_option = trade.asset_type == "OPTION"
    strike = None
    if is_option and trade.strike_price is not None:
        strike = _wire_number(to_number(trade.strike_price))

    return _trim_trailing_none([
        trade.symbol,
        trade.asset_type,
        trade.direction,
        _wire_number(to_number(trade.quantity)),
        _wire_number(to_number(trade.entry_price)),
        _wire_number(to_number(trade.exit_price)),
        _wire_number(to_number(trade.fees)),
        _wire_number(to_number(trade.realized_pnl)),
        trade.currency,
        to_date_only(trade.opened_at),
        to_date_only(trade.closed_at),
        normalize_notes(trade.notes),
        trade.option_type if is_option and trade.option_type else None,
        strike,
        trade.expiry_date if is_option and trade.expiry_date else None,
    ])


def build_compact_trades_token(payload: SharedTradesPayload) -> Dict[str, Any]:
    token: Dict[str, Any] = {"d": payload.date[:10], "g": payload.generated_at}
    _with_metadata(token, payload.env, payload.origin)
    token["t"] = [build_trade_tuple(trade) for trade in payload.trades]
    token["p"] = _wire_number(round_money(payload.total_pnl))
    if payload.cad_to_usd_rate is not None:
        token["r"] = to_number(payload.cad_to_usd_rate)
    if payload.fx_date is not None:
        token["f"] = payload.fx_date
    return token
