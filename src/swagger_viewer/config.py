"""Config store: the user's swagger.json and a watcher for changes to it."""

import json
import threading
from collections.abc import Callable
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

CONFIG_FILENAME = "swagger.json"

logger = structlog.get_logger(__name__)


class SwaggerConfig(BaseModel):
    """Contents of the config file. Only the document URL matters."""

    swagger_url: str | None = Field(default=None, alias="swaggerUrl")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def default_config_path() -> Path:
    return Path.home() / CONFIG_FILENAME


def read_config(path: Path | None = None) -> SwaggerConfig | None:
    """Read the config file.

    Returns None (and logs a warning) when the file is missing, unreadable,
    or not a JSON object. Never raises.
    """
    path = path or default_config_path()
    if not path.is_file():
        logger.warning("Config file not found", path=str(path))
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return SwaggerConfig.model_validate(data)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Error reading swagger config", path=str(path), error=str(e))
        return None


class ConfigFileHandler(FileSystemEventHandler):
    """Calls back with the re-read config whenever the watched file changes."""

    def __init__(self, path: Path, on_change: Callable[[SwaggerConfig | None], None]):
        super().__init__()
        self.path = path.resolve()
        self.on_change = on_change

    def _targets_config(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and Path(str(p)).resolve() == self.path for p in paths)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._dispatch_change(event)

    def on_created(self, event: FileSystemEvent) -> None:
        self._dispatch_change(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        # editors that save via rename-over land here
        self._dispatch_change(event)

    def _dispatch_change(self, event: FileSystemEvent) -> None:
        if not self._targets_config(event):
            return
        logger.info("Swagger config changed, updating", path=str(self.path), event_type=event.event_type)
        self.on_change(read_config(self.path))


class ConfigWatch:
    """Handle for a running config watcher. close() releases the observer."""

    def __init__(self, path: Path, on_change: Callable[[SwaggerConfig | None], None]):
        self.path = path
        self.handler = ConfigFileHandler(path, on_change)
        self._observer = Observer()
        self._lock = threading.Lock()
        self._closed = False

    def start(self) -> "ConfigWatch":
        # watchdog watches directories; the handler filters for our file
        self._observer.schedule(self.handler, str(self.path.resolve().parent), recursive=False)
        self._observer.start()
        logger.debug("Watching swagger config", path=str(self.path))
        return self

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join()
        logger.debug("Stopped watching swagger config", path=str(self.path))


def watch_config(path: Path, on_change: Callable[[SwaggerConfig | None], None]) -> ConfigWatch:
    """Start watching the config file. The caller owns the returned handle."""
    return ConfigWatch(path, on_change).start()
