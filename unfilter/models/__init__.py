"""
/**
 * @file unfilter/models/__init__.py
 * @description 数据模型导出。
 */
"""

from .record_models import TranslationRecord
from .translate_request_model import StoreOutcome, TranslateRequest, TranslateResponse

__all__ = ["StoreOutcome", "TranslateRequest", "TranslateResponse", "TranslationRecord"]
