"""
/**
 * @file unfilter/config/settings.py
 * @description 配置加载与合并（config.json + config.local.json + 环境变量）。
 */
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.path.join(REPO_ROOT, "config.json")
CONFIG_LOCAL_PATH = os.path.join(REPO_ROOT, "config.local.json")
CONFIG_EXAMPLE_PATH = os.path.join(REPO_ROOT, "config.example.json")

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_ALLOWED_ORIGIN = "https://unfilter-the-hr.vercel.app"
DEFAULT_OPENAI_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_AIRTABLE_ENDPOINT = "https://api.airtable.com/v0"

# Environment variable names that must resolve before a translation is attempted.
REQUIRED_ENV = ("OPENAI_API_KEY", "AIRTABLE_TOKEN", "AIRTABLE_BASE_ID", "AIRTABLE_TABLE_ID")

logger = logging.getLogger("config_loader")


def _load_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            value = json.load(f)
            return value if isinstance(value, dict) else {}
    except FileNotFoundError:
        return {}


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge_dicts(base[key], value)
        else:
            base[key] = value
    return base


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str) and value.strip():
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return default


def _as_int(value: Any, default: int, minimum: int = 0) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return n if n >= minimum else default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        value = self.raw.get(name, {})
        return value if isinstance(value, dict) else {}

    @property
    def endpoints(self) -> Dict[str, str]:
        return self._section("endpoints")

    @property
    def models(self) -> Dict[str, str]:
        return self._section("models")

    @property
    def api_keys(self) -> Dict[str, str]:
        return self._section("api_keys")

    @property
    def airtable(self) -> Dict[str, Any]:
        return self._section("airtable")

    @property
    def prompts(self) -> Dict[str, str]:
        return self._section("prompts")

    @property
    def parameters(self) -> Dict[str, Any]:
        return self._section("parameters")

    @property
    def rate_limit(self) -> Dict[str, Any]:
        return self._section("rate_limit")

    @property
    def timeouts(self) -> Dict[str, Any]:
        return self._section("timeouts")

    # ---- provider / store ----

    @property
    def openai_endpoint(self) -> str:
        return self.endpoints.get("openai") or DEFAULT_OPENAI_ENDPOINT

    @property
    def airtable_endpoint(self) -> str:
        return (self.endpoints.get("airtable") or DEFAULT_AIRTABLE_ENDPOINT).rstrip("/")

    @property
    def model(self) -> str:
        return os.getenv("MODEL") or self.models.get("translate") or DEFAULT_MODEL

    @property
    def record_source(self) -> str:
        value = self.airtable.get("source")
        return value if isinstance(value, str) and value else "webapp"

    def resolve_openai_key(self) -> Optional[str]:
        value = self.api_keys.get("openai")
        return os.getenv("OPENAI_API_KEY") or (value if isinstance(value, str) and value else None)

    def resolve_airtable_token(self) -> Optional[str]:
        value = self.api_keys.get("airtable")
        return os.getenv("AIRTABLE_TOKEN") or (value if isinstance(value, str) and value else None)

    def resolve_airtable_base_id(self) -> Optional[str]:
        value = self.airtable.get("base_id")
        return os.getenv("AIRTABLE_BASE_ID") or (value if isinstance(value, str) and value else None)

    def resolve_airtable_table_id(self) -> Optional[str]:
        value = self.airtable.get("table_id")
        return os.getenv("AIRTABLE_TABLE_ID") or (value if isinstance(value, str) and value else None)

    def presence(self) -> Dict[str, bool]:
        """Which required values resolve, keyed by their environment variable name."""
        return {
            "OPENAI_API_KEY": bool(self.resolve_openai_key()),
            "AIRTABLE_TOKEN": bool(self.resolve_airtable_token()),
            "AIRTABLE_BASE_ID": bool(self.resolve_airtable_base_id()),
            "AIRTABLE_TABLE_ID": bool(self.resolve_airtable_table_id()),
        }

    def missing_required(self) -> List[str]:
        present = self.presence()
        return [name for name in REQUIRED_ENV if not present.get(name)]

    # ---- http surface ----

    @property
    def allowed_origin(self) -> str:
        cors = self._section("cors")
        value = cors.get("allowed_origin")
        return os.getenv("ALLOWED_ORIGIN") or (value if isinstance(value, str) and value else DEFAULT_ALLOWED_ORIGIN)

    @property
    def debug_enabled(self) -> bool:
        env = os.getenv("DEBUG_ENDPOINT")
        if env is not None and env.strip():
            return _as_bool(env, False)
        return _as_bool(self._section("debug").get("enabled"), False)

    @property
    def max_phrase_length(self) -> int:
        return _as_int(self.parameters.get("max_phrase_length"), 500, minimum=1)

    # ---- admission control ----

    @property
    def rate_limit_enabled(self) -> bool:
        return _as_bool(self.rate_limit.get("enabled"), True)

    @property
    def rate_limit_per_window(self) -> int:
        return _as_int(os.getenv("RATE_LIMIT_PER_MIN") or self.rate_limit.get("per_window"), 5, minimum=1)

    @property
    def rate_limit_window_seconds(self) -> float:
        value = _as_float(self.rate_limit.get("window_seconds"), 60.0)
        return value if value > 0 else 60.0

    # ---- completion parameters ----

    @property
    def tone(self) -> str:
        return (os.getenv("TONE") or self.prompts.get("tone") or "sarcastic").strip().lower()

    @property
    def custom_system_prompt(self) -> str:
        value = self.prompts.get("system")
        return value.strip() if isinstance(value, str) else ""

    @property
    def temperature(self) -> float:
        return _as_float(self.parameters.get("temperature"), 0.8)

    @property
    def max_tokens(self) -> int:
        return _as_int(self.parameters.get("max_tokens"), 80, minimum=1)

    @property
    def openai_timeout(self) -> float:
        value = _as_float(self.timeouts.get("openai"), 20.0)
        return value if value > 0 else 20.0

    @property
    def airtable_timeout(self) -> float:
        value = _as_float(self.timeouts.get("airtable"), 10.0)
        return value if value > 0 else 10.0


_CACHED_SETTINGS: Optional[Settings] = None
_LAST_LOAD_TIME = 0.0
_LAST_PATHS: tuple = ()
_CONFIG_HASH = ""
_SETTINGS_LOCK = threading.Lock()


def _deep_diff(d1: Dict[str, Any], d2: Dict[str, Any], path="") -> list:
    diffs = []
    for k in sorted(set(d1.keys()) | set(d2.keys())):
        p = f"{path}.{k}" if path else k
        if k not in d1:
            diffs.append(f"Added: {p}")
        elif k not in d2:
            diffs.append(f"Removed: {p}")
        elif isinstance(d1[k], dict) and isinstance(d2[k], dict):
            diffs.extend(_deep_diff(d1[k], d2[k], p))
        elif d1[k] != d2[k]:
            # values may be credentials, only the key path is logged
            diffs.append(f"Changed: {p}")
    return diffs


def reload_settings(
    base_path: str = CONFIG_PATH,
    local_path: str = CONFIG_LOCAL_PATH,
    example_path: str = CONFIG_EXAMPLE_PATH,
) -> Settings:
    global _CACHED_SETTINGS, _LAST_LOAD_TIME, _LAST_PATHS, _CONFIG_HASH

    paths = (base_path, local_path, example_path)
    with _SETTINGS_LOCK:
        now = time.time()
        # Debounce: 500ms, editors often emit several modify events per save
        if _CACHED_SETTINGS and paths == _LAST_PATHS and (now - _LAST_LOAD_TIME < 0.5):
            return _CACHED_SETTINGS

        try:
            base_cfg = _load_json(base_path)
            if not base_cfg.get("endpoints") and os.path.exists(example_path):
                base_cfg = _merge_dicts(_load_json(example_path), base_cfg)

            local_cfg = _load_json(local_path)
            merged = _merge_dicts(base_cfg, local_cfg)

            new_hash = hashlib.md5(json.dumps(merged, sort_keys=True).encode("utf-8")).hexdigest()
            _LAST_PATHS = paths

            if _CACHED_SETTINGS and new_hash == _CONFIG_HASH:
                _LAST_LOAD_TIME = now
                return _CACHED_SETTINGS

            is_reload = _CACHED_SETTINGS is not None
            if is_reload:
                diffs = _deep_diff(_CACHED_SETTINGS.raw, merged)
                if diffs:
                    logger.info(f"Config changes detected: {'; '.join(diffs)}")

            _CACHED_SETTINGS = Settings(raw=merged)
            _CONFIG_HASH = new_hash
            _LAST_LOAD_TIME = now

            if is_reload:
                logger.info("Configuration reloaded successfully.")

        except (OSError, ValueError) as e:
            logger.error(f"Failed to reload config: {e}. Keeping old config.")
            if not _CACHED_SETTINGS:
                logger.warning("Initializing with empty settings due to load failure.")
                _CACHED_SETTINGS = Settings(raw={})

    return _CACHED_SETTINGS


def load_settings() -> Settings:
    """
    Get current settings. Lazy loads on first call.
    Subsequent reloads are handled by the file watcher calling reload_settings().
    """
    if _CACHED_SETTINGS is None:
        return reload_settings()
    return _CACHED_SETTINGS
