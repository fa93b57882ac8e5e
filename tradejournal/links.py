"""
Share URLs: building them, pulling the token back out, and tagging the
environment a link was generated in.
"""
import logging
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlsplit

__all__ = [
    "SHARE_QUERY_PARAM",
    "SHARE_PATH",
    "MAX_SHARE_URL_LENGTH",
    "build_share_url",
    "extract_share_token",
    "fits_url_budget",
    "detect_environment",
]

log = logging.getLogger(__name__)

SHARE_QUERY_PARAM = "data"
SHARE_PATH = "/share"
# SMS and iMessage start truncating links around this length.
MAX_SHARE_URL_LENGTH = 2000

_DEV_HOST_MARKERS = ("localhost", "127.0.0.1", "dev", "staging")


def fits_url_budget(url: str, limit: int = MAX_SHARE_URL_LENGTH) -> bool:
    return len(url) <= limit


def build_share_url(
    base_url: str,
    token: str,
    path: str = SHARE_PATH,
    param: str = SHARE_QUERY_PARAM,
    max_length: int = MAX_SHARE_URL_LENGTH,
) -> str:
    """
    Returns `<base_url><path>?<param>=<token>`.

    Links longer than `max_length` are still returned; a warning is logged so
    the caller can tell the user it may be cut off.
    """
    url = f"{base_url.rstrip('/')}{path}?{urlencode({param: token})}"
    if not fits_url_budget(url, max_length):
        log.warning(
            f"Share URL is {len(url)} characters, over the {max_length} character budget; "
            "some messaging apps cut longer links"
        )
    else:
        log.info(f"Built share URL of {len(url)} characters")
    return url


def extract_share_token(url: str, param: str = SHARE_QUERY_PARAM) -> Optional[str]:
    """Returns the token carried by a share URL, or None if it has none."""
    values = parse_qs(urlsplit(url).query).get(param)
    if not values or not values[0]:
        return None
    return values[0]


def detect_environment(host: str, configured: Optional[str] = None, production: bool = True) -> str:
    """
    Picks the env tag stamped onto a share link.

    An explicitly configured tag wins. Otherwise local, dev and staging hosts
    are "dev", and anything else follows `production`.
    """
    if configured:
        return str(configured)
    host = (host or "").lower()
    if any(marker in host for marker in _DEV_HOST_MARKERS):
        return "dev"
    return "prod" if production else "dev"
