"""
/**
 * @file unfilter/middleware/__init__.py
 * @description 中间件导出。
 */
"""

from .cors import allowed_methods, cors_headers

__all__ = ["allowed_methods", "cors_headers"]
