"""
/**
 * @file unfilter/services/airtable_client_service.py
 * @description Airtable 记录写入封装。
 */
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from unfilter.config import Settings, load_settings
from unfilter.services.errors import ConfigurationError, StoreWriteError


logger = logging.getLogger("airtable_client")


class AirtableClient:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self._initial_settings = settings
        self._session = session or requests.Session()

    @property
    def settings(self) -> Settings:
        return self._initial_settings or load_settings()

    def _table_url(self) -> str:
        base_id = self.settings.resolve_airtable_base_id()
        table_id = self.settings.resolve_airtable_table_id()
        if not base_id or not table_id:
            raise ConfigurationError("Missing env vars: AIRTABLE_BASE_ID, AIRTABLE_TABLE_ID")
        return f"{self.settings.airtable_endpoint}/{base_id}/{table_id}"

    def _get_headers(self) -> Dict[str, str]:
        token = self.settings.resolve_airtable_token()
        if not token:
            raise ConfigurationError("Missing env vars: AIRTABLE_TOKEN")
        return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}

    def create_record(self, fields: Dict[str, Any]) -> None:
        """
        Append one row. Only the response status is consulted.

        Raises StoreWriteError on non-2xx, timeout or transport failure.
        """
        # CreatedAt is left to the table's "Created time" field
        payload = {"records": [{"fields": fields}], "typecast": False}
        url = self._table_url()
        headers = self._get_headers()
        timeout = self.settings.airtable_timeout
        try:
            response = self._session.post(url, headers=headers, json=payload, timeout=timeout)
        except requests.Timeout as e:
            raise StoreWriteError(body=f"Timed out after {timeout}s: {e}")
        except requests.RequestException as e:
            raise StoreWriteError(body=str(e))
        if not response.ok:
            raise StoreWriteError(status=response.status_code, body=response.text)
