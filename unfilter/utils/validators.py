from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from unfilter.services.rate_limit_service import FALLBACK_KEY


def is_valid_origin(value: str) -> bool:
    v = value.strip()
    if v == "*":
        return True
    try:
        parsed = urlparse(v)
        return parsed.scheme in {"http", "https"} and bool(parsed.netloc) and parsed.path in {"", "/"}
    except ValueError:
        return False


def client_identifier(headers: Mapping[str, str], peer: Optional[str] = None) -> str:
    # first hop of X-Forwarded-For is the original client behind the platform proxy
    forwarded = headers.get("x-forwarded-for") or ""
    first = forwarded.split(",")[0].strip()
    return first or (peer or "").strip() or FALLBACK_KEY


def mask_secret(value: Any) -> str:
    return "present" if value else "missing"
