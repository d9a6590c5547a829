"""
Small helpers shared across the SDK
"""

import time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union
from urllib.parse import urlsplit

from .constants import DEFAULT_DOMAIN, DEFAULT_FEATURE, DEFAULT_VERSION
from .errors import ConfigurationError

Number = Union[Decimal, float, int, str]


def base_api(
    subdomain: str = "",
    domain: str = DEFAULT_DOMAIN,
    feature: str = DEFAULT_FEATURE,
    version: str = DEFAULT_VERSION,
) -> str:
    """
    Build the platform API base URL

    With no subdomain, or when domain already carries a scheme, the parts are
    joined as is. Otherwise "https://<subdomain>.<domain>" is used.

    Examples:
        base_api("app") -> "https://app.nusabyte.com/api/v1"
        base_api(domain="https://example.org/") -> "https://example.org/api/v1"
    """
    domain = domain.rstrip("/")
    if not subdomain or domain.startswith(("https://", "http://")):
        return f"{domain}{feature}{version}"
    return f"https://{subdomain}.{domain}{feature}{version}"


def parse_server_url(server_url: str):
    """
    Split a server URL into (domain, origin)

    Raises:
        ConfigurationError: If the URL is not an absolute http(s) URL
    """
    parts = urlsplit(server_url or "")
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ConfigurationError.invalid("serverUrl", f"{server_url!r} is not an absolute http(s) URL")
    return parts.hostname, f"{parts.scheme}://{parts.netloc}"


def get_future_epoch_in_minutes(minutes: float, now: Optional[float] = None) -> int:
    """Unix epoch seconds `minutes` from now, floored"""
    now = time.time() if now is None else now
    return int(now + minutes * 60)


def object_to_query(params: Dict[str, Any]) -> Dict[str, str]:
    """Drop None values and stringify the rest for use as query parameters"""
    query = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a numeric value, None when it is not a finite number"""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def to_raw_amount(ui_amount: Number, decimals: int) -> int:
    """
    Convert a UI amount to integer smallest units, truncating extra precision

    Args:
        ui_amount: Amount in whole token units
        decimals: Token decimals

    Returns:
        Raw token amount
    """
    value = ui_amount if isinstance(ui_amount, Decimal) else Decimal(str(ui_amount))
    return int(value * (Decimal(10) ** decimals))
