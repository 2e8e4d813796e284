"""
CORS headers for the translate endpoint.

The configured origin is always sent back as-is; the requesting origin is
never reflected. Configure "*" for a permissive deployment.
"""
import logging
from typing import Dict

from unfilter.config import Settings
from unfilter.utils.validators import is_valid_origin

logger = logging.getLogger("cors")


def allowed_methods(settings: Settings) -> str:
    return "POST, GET, OPTIONS" if settings.debug_enabled else "POST, OPTIONS"


def cors_headers(settings: Settings) -> Dict[str, str]:
    origin = settings.allowed_origin
    if not is_valid_origin(origin):
        logger.warning(f"allowed_origin {origin!r} is not a valid origin; browsers will reject it")
    return {
        "Vary": "Origin",
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": allowed_methods(settings),
        "Access-Control-Allow-Headers": "Content-Type",
    }
