"""
Shared data structures for the trade journal.

Field names are snake_case in Python; every model also accepts and emits the
camelCase names used by the journal backend's JSON.
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "AssetType",
    "Currency",
    "Direction",
    "OptionType",
    "PnlBucket",
    "PnlSummary",
    "Trade",
    "SharedTrade",
    "SharedSummaryPayload",
    "SharedTradesPayload",
    "SharedPayload",
]

AssetType = Literal["STOCK", "OPTION"]
Direction = Literal["LONG", "SHORT"]
Currency = Literal["USD", "CAD"]
OptionType = Literal["CALL", "PUT"]


class JournalModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class PnlBucket(JournalModel):
    """Realized P/L and trade count for one calendar day or month."""

    period: str = Field(..., description="Day (YYYY-MM-DD) or month (YYYY-MM).")
    pnl: float = Field(..., description="Realized P/L in USD, may be negative.")
    trades: int = Field(..., ge=0, description="Number of trades closed in the period.")


class PnlSummary(JournalModel):
    total_pnl: float
    trade_count: int = Field(0, ge=0)
    daily: List[PnlBucket] = Field(default_factory=list)
    monthly: List[PnlBucket] = Field(default_factory=list)
    cad_to_usd_rate: Optional[float] = Field(None, description="CAD to USD multiplier.")
    fx_date: Optional[str] = Field(None, description="ISO date the FX rate was observed.")


class Trade(JournalModel):
    """
    A closed trade as stored by the journal backend.
    """

    id: str
    symbol: str
    currency: Currency = "USD"
    asset_type: AssetType
    direction: Direction
    quantity: float
    entry_price: float
    exit_price: float
    fees: float = 0.0
    option_type: Optional[OptionType] = None
    strike_price: Optional[float] = None
    expiry_date: Optional[str] = None
    opened_at: str
    closed_at: str
    realized_pnl: float
    notes: Optional[str] = None
    created_at: str
    updated_at: str


class SharedTrade(JournalModel):
    """
    A trade as shown to the viewer of a share link: no ids or audit timestamps.
    Option fields are None unless asset_type is OPTION.
    """

    symbol: str
    currency: Currency
    asset_type: AssetType
    direction: Direction
    quantity: float
    entry_price: float
    exit_price: float
    fees: float
    realized_pnl: float
    opened_at: str
    closed_at: str
    notes: Optional[str] = None
    option_type: Optional[OptionType] = None
    strike_price: Optional[float] = None
    expiry_date: Optional[str] = None


class SharedSummaryPayload(JournalModel):
    kind: Literal["summary"] = "summary"
    month: str
    summary: PnlSummary
    generated_at: str
    env: Optional[str] = None
    origin: Optional[str] = None


class SharedTradesPayload(JournalModel):
    kind: Literal["trades"] = "trades"
    date: str
    trades: List[SharedTrade] = Field(default_factory=list)
    total_pnl: float
    generated_at: str
    env: Optional[str] = None
    origin: Optional[str] = None
    cad_to_usd_rate: Optional[float] = None
    fx_date: Optional[str] = None


SharedPayload = Annotated[
    Union[SharedSummaryPayload, SharedTradesPayload], Field(discriminator="kind")
]
