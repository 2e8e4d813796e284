from __future__ import annotations

import logging
import time
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from unfilter.models.record_models import TranslationRecord
from unfilter.models.translate_request_model import StoreOutcome
from unfilter.services.airtable_client_service import AirtableClient
from unfilter.services.errors import RelayError


logger = logging.getLogger("record_service")


class RecordService:
    """Best-effort writer of translation records. Failures come back as a StoreOutcome, never raised."""

    def __init__(self, client: Optional[AirtableClient] = None) -> None:
        self._client = client or AirtableClient()

    def add_record(self, phrase: str, translation: str, model: str, source: Optional[str] = None) -> StoreOutcome:
        try:
            record = TranslationRecord(
                phrase=phrase,
                translation=translation,
                model_name=model,
                source=source or self._client.settings.record_source,
            )
        except PydanticValidationError as e:
            logger.error(f"add_record rejected: {e}")
            return StoreOutcome(ok=False, detail="Record failed validation")

        start = time.time()
        try:
            self._client.create_record(record.to_fields())
        except RelayError as e:
            logger.warning(f"add_record failed: {e.error} status={getattr(e, 'status', None)}")
            return StoreOutcome(ok=False, detail=e.detail or e.error)
        logger.info(f"record written time_ms={int((time.time() - start) * 1000)}")
        return StoreOutcome(ok=True)
