"""
/**
 * @file unfilter/services/pipeline_service.py
 * @description 翻译请求处理链路：配置检查 → 参数校验 → 限流 → 调用模型 → 写入记录 → 组装响应。
 */
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from unfilter.config import Settings, load_settings
from unfilter.models.translate_request_model import TranslateRequest, TranslateResponse
from unfilter.services.airtable_client_service import AirtableClient
from unfilter.services.errors import AdmissionRejected, ConfigurationError, ValidationError
from unfilter.services.openai_client_service import OpenAIClient
from unfilter.services.rate_limit_service import FixedWindowRateLimiter
from unfilter.services.record_service import RecordService
from unfilter.services.translation_service import translate_phrase


logger = logging.getLogger("translation_pipeline")


def parse_phrase(body: Any, max_length: int = 500) -> str:
    """
    Extract and validate ``phrase`` from a raw request body.

    ``body`` may be bytes/str (raw JSON) or an already decoded object.
    Raises ValidationError on unparseable bodies and missing, non-string,
    blank or oversized phrases.
    """
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError("Invalid JSON body")
    if isinstance(body, str):
        try:
            body = json.loads(body or "{}")
        except (ValueError, RecursionError):
            raise ValidationError("Invalid JSON body")
    if not isinstance(body, dict):
        raise ValidationError("Missing phrase")
    try:
        phrase = TranslateRequest(phrase=body.get("phrase")).phrase
    except PydanticValidationError:
        raise ValidationError("Missing phrase")
    if len(phrase) > max_length:
        raise ValidationError(f"Phrase too long (limit is {max_length} characters)")
    return phrase


class TranslationPipeline:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        openai_client: Optional[OpenAIClient] = None,
        record_service: Optional[RecordService] = None,
        rate_limiter: Optional[FixedWindowRateLimiter] = None,
    ):
        self._initial_settings = settings
        self._openai = openai_client or OpenAIClient(settings=settings)
        self._records = record_service or RecordService(AirtableClient(settings=settings))
        current = self.settings
        self._limiter = rate_limiter or FixedWindowRateLimiter(
            limit=current.rate_limit_per_window,
            window_seconds=current.rate_limit_window_seconds,
        )

    @property
    def settings(self) -> Settings:
        return self._initial_settings or load_settings()

    @property
    def rate_limiter(self) -> FixedWindowRateLimiter:
        return self._limiter

    def check_configuration(self) -> None:
        missing = self.settings.missing_required()
        if missing:
            raise ConfigurationError(f"Missing env vars: {', '.join(missing)}")

    def check_admission(self, client_id: Optional[str]) -> None:
        settings = self.settings
        if not settings.rate_limit_enabled:
            return
        self._limiter.reconfigure(settings.rate_limit_per_window, settings.rate_limit_window_seconds)
        if not self._limiter.admit(client_id):
            raise AdmissionRejected()

    def run(self, body: Any, client_id: Optional[str] = None) -> TranslateResponse:
        """
        Handle one POST body end to end.

        Raises a RelayError subclass for every terminal failure; a store
        failure is reported on the returned response instead.
        """
        settings = self.settings
        self.check_configuration()
        phrase = parse_phrase(body, max_length=settings.max_phrase_length)
        self.check_admission(client_id)

        model = settings.model
        start = time.time()
        translation = translate_phrase(phrase, model=model, tone=settings.tone, client=self._openai)
        provider_ms = int((time.time() - start) * 1000)

        store = self._records.add_record(phrase, translation, model, source=settings.record_source)
        logger.info(f"translated model={model} provider_ms={provider_ms} store_ok={store.ok}")
        return TranslateResponse(translation=translation, model=model, store=store)


_PIPELINE: Optional[TranslationPipeline] = None


def get_pipeline() -> TranslationPipeline:
    global _PIPELINE
    if _PIPELINE is None:
        _PIPELINE = TranslationPipeline()
    return _PIPELINE
