"""
/**
 * @file unfilter/services/__init__.py
 * @description 业务服务层导出。
 */
"""

from .airtable_client_service import AirtableClient
from .openai_client_service import OpenAIClient
from .pipeline_service import TranslationPipeline, get_pipeline, parse_phrase
from .rate_limit_service import FixedWindowRateLimiter
from .record_service import RecordService
from .translation_service import translate_phrase

__all__ = [
    "AirtableClient",
    "OpenAIClient",
    "TranslationPipeline",
    "get_pipeline",
    "parse_phrase",
    "FixedWindowRateLimiter",
    "RecordService",
    "translate_phrase",
]
