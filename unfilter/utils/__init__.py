"""
/**
 * @file unfilter/utils/__init__.py
 * @description 工具函数导出。
 */
"""

from .validators import client_identifier, is_valid_origin, mask_secret

__all__ = ["client_identifier", "is_valid_origin", "mask_secret"]
