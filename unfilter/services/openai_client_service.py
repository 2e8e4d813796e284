"""
/**
 * @file unfilter/services/openai_client_service.py
 * @description OpenAI Chat Completions 调用封装。
 */
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from unfilter.config import Settings, load_settings
from unfilter.services.errors import ConfigurationError, EmptyCompletionError, UpstreamError


logger = logging.getLogger("openai_client")


class OpenAIClient:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        # settings are fetched dynamically unless pinned, so hot reloads apply
        self._initial_settings = settings
        self._session = session or requests.Session()

    @property
    def settings(self) -> Settings:
        return self._initial_settings or load_settings()

    @property
    def api_key(self) -> Optional[str]:
        return self.settings.resolve_openai_key()

    def _get_headers(self) -> Dict[str, str]:
        key = self.api_key
        if not key:
            raise ConfigurationError("Missing env vars: OPENAI_API_KEY")
        return {"Authorization": f"Bearer {key}", "Content-Type": "application/json"}

    @staticmethod
    def _extract_first_content(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, dict):
            return None
        message = first.get("message")
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        if not isinstance(content, str):
            return None
        return content.strip() or None

    def chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Request a single completion and return its trimmed text.

        Raises UpstreamError for non-2xx answers, timeouts and transport
        failures, and EmptyCompletionError when the body has no usable text.
        """
        settings = self.settings
        model_name = model or settings.model
        payload = {
            "model": model_name,
            "messages": messages,
            "temperature": settings.temperature if temperature is None else temperature,
            "max_tokens": settings.max_tokens if max_tokens is None else max_tokens,
        }
        headers = self._get_headers()
        start = time.time()
        try:
            response = self._session.post(
                settings.openai_endpoint,
                headers=headers,
                json=payload,
                timeout=settings.openai_timeout,
            )
        except requests.Timeout as e:
            logger.warning(f"chat completion timed out after {settings.openai_timeout}s")
            raise UpstreamError(body=f"Timed out after {settings.openai_timeout}s: {e}")
        except requests.RequestException as e:
            logger.warning(f"chat completion transport error: {e}")
            raise UpstreamError(body=str(e))

        elapsed_ms = int((time.time() - start) * 1000)
        if not response.ok:
            logger.warning(f"chat completion failed status={response.status_code} time_ms={elapsed_ms}")
            raise UpstreamError(status=response.status_code, body=response.text)

        try:
            data = response.json()
        except ValueError:
            raise EmptyCompletionError(detail="Response body is not JSON")

        content = self._extract_first_content(data)
        if not content:
            raise EmptyCompletionError(detail="No completion text in response")
        logger.info(f"chat completion ok model={model_name} time_ms={elapsed_ms}")
        return content
