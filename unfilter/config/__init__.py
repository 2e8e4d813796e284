"""
/**
 * @file unfilter/config/__init__.py
 * @description 配置模块导出（含必填项清单与默认模型）。
 */
"""

from .settings import (
    CONFIG_LOCAL_PATH,
    CONFIG_PATH,
    DEFAULT_MODEL,
    REQUIRED_ENV,
    Settings,
    load_settings,
    reload_settings,
)

__all__ = [
    "CONFIG_LOCAL_PATH",
    "CONFIG_PATH",
    "DEFAULT_MODEL",
    "REQUIRED_ENV",
    "Settings",
    "load_settings",
    "reload_settings",
]
