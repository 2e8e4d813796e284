"""
/**
 * @file unfilter/main.py
 * @description FastAPI 应用入口（MVC：仅装配路由与配置热加载）。
 */
"""

import logging
import os

from fastapi import FastAPI
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from unfilter.config import CONFIG_LOCAL_PATH, CONFIG_PATH, load_settings, reload_settings
from unfilter.controllers import health_router, translate_router

app = FastAPI(title="unfilter-the-hr")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger("main")


class ConfigEventHandler(FileSystemEventHandler):
    """Handler for config file changes"""
    def on_modified(self, event):
        if event.is_directory:
            return
        # Watchdog returns absolute paths usually
        if event.src_path in (CONFIG_PATH, CONFIG_LOCAL_PATH):
            reload_settings()


_observer = None


@app.on_event("startup")
async def startup_event():
    global _observer
    settings = load_settings()
    missing = settings.missing_required()
    if missing:
        logger.warning(f"Missing configuration, POST /api/translate will answer 500: {', '.join(missing)}")
    try:
        _observer = Observer()
        config_dir = os.path.dirname(CONFIG_PATH)
        _observer.schedule(ConfigEventHandler(), config_dir, recursive=False)
        _observer.start()
        logger.info(f"Config watcher started on {config_dir}")
    except OSError as e:
        _observer = None
        logger.error(f"Failed to start config watcher: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    global _observer
    if _observer:
        _observer.stop()
        _observer.join()
        _observer = None


app.include_router(health_router)
app.include_router(translate_router)
