"""
Base64URL transport for share tokens.

encode: payload -> compact token -> JSON -> UTF-8 -> Base64 -> URL-safe, unpadded
decode: the reverse, ending in a validated payload or None. decode never raises.
"""
import base64
import binascii
import json
import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from tradejournal.share.compact import build_compact_summary_token, build_compact_trades_token
from tradejournal.share.expand import expand_token
from tradejournal.types import SharedSummaryPayload, SharedTradesPayload

__all__ = ["encode_share_token", "decode_share_token", "to_base64url", "from_base64url"]

log = logging.getLogger(__name__)


def to_base64url(text: str) -> str:
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return encoded.replace("+", "-").replace("/", "_").rstrip("=")


def from_base64url(value: str) -> str:
    """
    Decodes unpadded Base64URL text.
    Raises ValueError on a bad alphabet, a bad length, or invalid UTF-8.
    """
    normalized = value.replace("-", "+").replace("_", "/")
    padded = normalized + "=" * (-len(normalized) % 4)
    raw = base64.b64decode(padded.encode("ascii"), validate=True)
    return raw.decode("utf-8")


def _to_json(token: Any) -> str:
    return json.dumps(token, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def encode_share_token(payload: Union[SharedSummaryPayload, SharedTradesPayload]) -> str:
    if payload.kind == "summary":
        token = build_compact_summary_token(payload)
    else:
        token = build_compact_trades_token(payload)
    return to_base64url(_to_json(token))


def decode_share_token(token: str) -> Optional[Union[SharedSummaryPayload, SharedTradesPayload]]:
    """
    Decodes a share token into a payload, or None if it cannot be displayed.
    """
    if not isinstance(token, str) or not token:
        return None
    try:
        parsed = json.loads(from_base64url(token))
        return expand_token(parsed)
    except ValidationError as e:
        log.debug(f"Share token produced an invalid payload: {e}")
        return None
    except (ValueError, binascii.Error, RecursionError) as e:
        log.debug(f"Share token could not be decoded: {e}")
        return None
