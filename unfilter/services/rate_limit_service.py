"""
/**
 * @file unfilter/services/rate_limit_service.py
 * @description 进程内固定窗口限流（按客户端 IP，基于 limits）。
 * @note 仅为尽力而为的近似：不跨进程共享，冷启动即清空。
 */
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter as LimitsFixedWindow


logger = logging.getLogger("rate_limit")

FALLBACK_KEY = "unknown"


def _window(window_seconds: float) -> int:
    return max(1, int(round(window_seconds)))


class FixedWindowRateLimiter:
    """
    Fixed-window counter per client key, kept in process memory.

    A window opens on the first request from a key and lasts
    ``window_seconds``; within it at most ``limit`` requests are admitted.
    Once the window has elapsed the counter resets entirely. Requests
    without an identifier all share the ``FALLBACK_KEY`` bucket.
    """

    def __init__(self, limit: int = 5, window_seconds: float = 60.0, storage: Optional[MemoryStorage] = None):
        self._lock = threading.Lock()
        self._storage = storage or MemoryStorage()
        self._strategy = LimitsFixedWindow(self._storage)
        self.limit = limit
        self.window_seconds = float(_window(window_seconds))
        self._item = RateLimitItemPerSecond(limit, _window(window_seconds))

    def reconfigure(self, limit: int, window_seconds: float) -> None:
        window = _window(window_seconds)
        with self._lock:
            if (limit, float(window)) == (self.limit, self.window_seconds):
                return
            logger.info(f"rate limit policy changed to {limit}/{window}s")
            # the item is part of the storage key, so counters restart under a new policy
            self.limit = limit
            self.window_seconds = float(window)
            self._item = RateLimitItemPerSecond(limit, window)

    def admit(self, key: Optional[str]) -> bool:
        key = key or FALLBACK_KEY
        with self._lock:
            # every hit counts, rejected ones included
            admitted = self._strategy.hit(self._item, key)
        if not admitted:
            logger.info(f"rate limited key={key} limit={self.limit}/{int(self.window_seconds)}s")
        return admitted

    def reset(self) -> None:
        with self._lock:
            self._storage.reset()
