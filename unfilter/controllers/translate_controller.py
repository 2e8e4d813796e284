"""
/**
 * @file unfilter/controllers/translate_controller.py
 * @description 翻译控制器（HR 黑话 → 大白话）。
 */
"""

import logging
from typing import Any, Dict, Optional

import anyio
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from unfilter.config import Settings, load_settings
from unfilter.middleware.cors import cors_headers
from unfilter.services.errors import InternalError, RelayError
from unfilter.services.pipeline_service import get_pipeline
from unfilter.utils.validators import client_identifier, mask_secret

logger = logging.getLogger("translate_controller")

router = APIRouter()

TRANSLATE_PATH = "/api/translate"
METHOD_NOT_ALLOWED = {"error": "Method not allowed. Use POST."}
DEBUG_FLAGS = {"1", "true", "yes"}
NOT_ALLOWED_METHODS = ["HEAD", "PUT", "PATCH", "DELETE", "TRACE", "CONNECT"]


def _json(status_code: int, payload: Dict[str, Any], settings: Settings) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload, headers=cors_headers(settings))


def debug_report(settings: Settings) -> Dict[str, Any]:
    return {
        "ok": True,
        "env": {name: mask_secret(present) for name, present in settings.presence().items()},
        "model": settings.model,
        "tone": settings.tone,
        "allowed_origin": settings.allowed_origin,
        "rate_limit": {
            "enabled": settings.rate_limit_enabled,
            "per_window": settings.rate_limit_per_window,
            "window_seconds": settings.rate_limit_window_seconds,
        },
        "notes": [
            "Rate limiting is per process and resets when the process restarts.",
            "Airtable write failures are reported in `store` and never block a translation.",
            "POST {\"phrase\": \"...\"} to translate.",
        ],
    }


@router.options(TRANSLATE_PATH)
def translate_preflight():
    return Response(status_code=204, headers=cors_headers(load_settings()))


@router.get(TRANSLATE_PATH)
def translate_debug(debug: Optional[str] = None):
    settings = load_settings()
    if settings.debug_enabled and (debug or "").strip().lower() in DEBUG_FLAGS:
        return _json(200, debug_report(settings), settings)
    return _json(405, METHOD_NOT_ALLOWED, settings)


@router.api_route(TRANSLATE_PATH, methods=NOT_ALLOWED_METHODS)
def translate_method_not_allowed():
    return _json(405, METHOD_NOT_ALLOWED, load_settings())


@router.post(TRANSLATE_PATH)
async def translate(request: Request):
    pipeline = get_pipeline()
    settings = pipeline.settings
    peer = request.client.host if request.client else None
    client_id = client_identifier(request.headers, peer)
    try:
        body = await request.body()
        result = await anyio.to_thread.run_sync(lambda: pipeline.run(body, client_id=client_id))
    except RelayError as e:
        if e.status_code >= 500:
            logger.warning(f"Translation failed: {e.status_code} {e.error}")
        return _json(e.status_code, e.to_payload(), settings)
    except Exception as e:
        logger.exception("Translation crashed")
        return _json(500, InternalError(detail=str(e)).to_payload(), settings)
    return _json(200, result.to_payload(), settings)
