"""
Expansion of compact wire tokens back into validated share payloads.

A malformed daily bucket is dropped and the rest of the month is kept. A
single malformed trade tuple rejects the whole token.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from tradejournal.share.builders import compute_trades_total
from tradejournal.share.coercion import (
    finite_sum,
    is_asset_type,
    is_currency,
    is_direction,
    is_option_type,
    normalize_notes,
    round_count,
    to_number,
    utc_timestamp,
)
from tradejournal.types import (
    PnlBucket,
    PnlSummary,
    SharedSummaryPayload,
    SharedTrade,
    SharedTradesPayload,
)

__all__ = [
    "expand_token",
    "decode_compact_summary_token",
    "decode_compact_trades_token",
    "decode_daily_tuple",
    "decode_trade_tuple",
]

log = logging.getLogger(__name__)

MIN_TRADE_TUPLE_LENGTH = 11


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _generated_at(value: Any) -> str:
    return value if isinstance(value, str) and value else utc_timestamp()


def _optional_number(value: Any) -> Optional[float]:
    return None if value is None else to_number(value)


def decode_daily_tuple(month: str, bucket: Any) -> Optional[PnlBucket]:
    """Rebuilds one daily bucket; None if the tuple is malformed."""
    if not isinstance(bucket, list) or len(bucket) < 3:
        return None
    day = to_number(bucket[0], None)
    if day is None or not 1 <= day <= 31:
        return None
    trades = round_count(to_number(bucket[2]))
    if trades < 0:
        return None
    return PnlBucket(period=f"{month}-{int(day):02d}", pnl=to_number(bucket[1]), trades=trades)


def decode_compact_summary_token(token: Dict[str, Any]) -> Optional[SharedSummaryPayload]:
    month = token.get("m")
    if not month or not isinstance(month, str):
        log.debug("Rejecting summary token without a month key")
        return None
    compact = token.get("s")
    if not isinstance(compact, list) or len(compact) < 3 or not isinstance(compact[2], list):
        log.debug("Rejecting summary token with malformed summary tuple")
        return None

    total_raw, count_raw, daily_raw = compact[0], compact[1], compact[2]
    rate_raw = compact[3] if len(compact) > 3 else None
    fx_date_raw = compact[4] if len(compact) > 4 else None

    daily: List[PnlBucket] = []
    for raw in daily_raw:
        bucket = decode_daily_tuple(month, raw)
        if bucket is None:
            log.debug(f"Dropping malformed daily bucket {raw!r}")
            continue
        daily.append(bucket)

    total_pnl = to_number(total_raw, finite_sum(bucket.pnl for bucket in daily))
    daily_count = sum(bucket.trades for bucket in daily)
    trade_count = round_count(to_number(count_raw, daily_count))
    if trade_count < 0:
        trade_count = daily_count

    summary = PnlSummary(
        total_pnl=total_pnl,
        trade_count=trade_count,
        daily=daily,
        monthly=[PnlBucket(period=month, pnl=total_pnl, trades=trade_count)],
        cad_to_usd_rate=_optional_number(rate_raw),
        fx_date=str(fx_date_raw) if fx_date_raw else None,
    )
    return SharedSummaryPayload(
        month=month,
        summary=summary,
        generated_at=_generated_at(token.get("g")),
        env=_optional_str(token.get("e")),
        origin=_optional_str(token.get("o")),
    )


def decode_trade_tuple(compact: Any) -> Optional[SharedTrade]:
    """Rebuilds one trade; None if any structural check fails."""
    if not isinstance(compact, list) or len(compact) < MIN_TRADE_TUPLE_LENGTH:
        return None
    padded = compact + [None] * (15 - len(compact))
    (
        symbol,
        asset_type,
        direction,
        quantity,
        entry_price,
        exit_price,
        fees,
        realized_pnl,
        currency,
        opened_at,
        closed_at,
        notes,
        option_type,
        strike_price,
        expiry_date,
    ) = padded[:15]

    if not isinstance(symbol, str) or not is_asset_type(asset_type) or not is_direction(direction):
        return None
    if not is_currency(currency) or not isinstance(opened_at, str) or not isinstance(closed_at, str):
        return None

    is_option = asset_type == "OPTION"
    return SharedTrade(
        symbol=symbol,
        currency=currency,
        asset_type=asset_type,
        direction=direction,
        quantity=to_number(quantity),
        entry_price=to_number(entry_price),
        exit_price=to_number(exit_price),
        fees=to_number(fees),
        realized_pnl=to_number(realized_pnl),
        opened_at=opened_at,
        closed_at=closed_at,
        notes=normalize_notes(notes) if isinstance(notes, str) else None,
        option_type=option_type if is_option and is_option_type(option_type) else None,
        strike_price=_optional_number(strike_price) if is_option else None,
        expiry_date=str(expiry_date) if is_option and expiry_date else None,
    )


def decode_compact_trades_token(token: Dict[str, Any]) -> Optional[SharedTradesPayload]:
    date = token.get("d")
    if not date or not isinstance(date, str):
        log.debug("Rejecting trades token without a date key")
        return None
    compact_trades = token.get("t")
    if not isinstance(compact_trades, list):
        log.debug("Rejecting trades token whose trade list is not a list")
        return None

    trades = []
    for index, compact in enumerate(compact_trades):
        trade = decode_trade_tuple(compact)
        if trade is None:
            log.debug(f"Rejecting trades token: trade tuple {index} is malformed")
            return None
        trades.append(trade)

    cad_to_usd_rate = _optional_number(token.get("r"))
    total_pnl = to_number(token.get("p"), compute_trades_total(trades, cad_to_usd_rate))
    fx_date = token.get("f")

    return SharedTradesPayload(
        date=date[:10],
        trades=trades,
        total_pnl=total_pnl,
        generated_at=_generated_at(token.get("g")),
        env=_optional_str(token.get("e")),
        origin=_optional_str(token.get("o")),
        cad_to_usd_rate=cad_to_usd_rate,
        fx_date=str(fx_date) if fx_date else None,
    )


def expand_token(token: Any) -> Optional[Union[SharedSummaryPayload, SharedTradesPayload]]:
    """
    Sniffs the shape of a parsed token and expands it.

    A "t" key marks a trades token and takes precedence over "s", which marks
    a summary token. Anything else is not a share token.
    """
    if not isinstance(token, dict):
        log.debug("Rejecting token that is not a JSON object")
        return None
    if "t" in token:
        return decode_compact_trades_token(token)
    if "s" in token:
        return decode_compact_summary_token(token)
    log.debug("Rejecting token with neither trades nor summary key")
    return None
