"""Session state: the cached document, the config watcher and the four operations.

A SwaggerSession owns everything that used to be process-global, so several
independent sessions can coexist and each can be shut down cleanly.
"""

import asyncio
from pathlib import Path

import structlog

from swagger_viewer.config import ConfigWatch, SwaggerConfig, default_config_path, read_config, watch_config
from swagger_viewer.errors import DocumentUnavailableError, EndpointNotFoundError, MissingArgumentError
from swagger_viewer.fetcher import DEFAULT_TIMEOUT, fetch_document
from swagger_viewer.generator.code import CodeGenerator
from swagger_viewer.parser.swagger import find_endpoint
from swagger_viewer.search import list_endpoints, search_endpoints

logger = structlog.get_logger(__name__)


class SwaggerSession:
    """Holds one cached API document and exposes the tool operations on it.

    The operations return plain lists/dicts and raise SwaggerToolError
    subclasses; ToolDispatcher wraps them into response envelopes.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        swagger_url: str | None = None,
        watch: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.config_path = config_path or default_config_path()
        self.swagger_url = swagger_url
        self.watch_enabled = watch
        self.timeout = timeout
        self.document: dict | None = None
        self.code_generator = CodeGenerator()
        self._watch: ConfigWatch | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_loaded(self) -> bool:
        return self.document is not None

    async def initialize(self, swagger_url: str | None = None) -> dict:
        """Fetch the document and cache it.

        The URL comes from the argument, then the session default, then the
        config file.
        """
        url = swagger_url or self.swagger_url
        if not url:
            config = read_config(self.config_path)
            url = config.swagger_url if config else None
        if not url:
            raise MissingArgumentError("swaggerUrl is required")

        doc = await fetch_document(url, timeout=self.timeout)
        if doc is None:
            raise DocumentUnavailableError(url)

        self.document = doc
        self.swagger_url = url
        self._start_watch()
        return {"success": True, "cacheStatus": "loaded", "swaggerUrl": url}

    async def ensure_document(self) -> dict | None:
        """Initialize on first use; a failure leaves the slot empty."""
        if self.document is None:
            try:
                await self.initialize()
            except (MissingArgumentError, DocumentUnavailableError) as e:
                logger.warning("Swagger document unavailable", reason=e.message)
        return self.document

    async def search(self, query: str) -> list[dict]:
        if not query:
            raise MissingArgumentError("Query is required")
        doc = await self.ensure_document()
        return [r.model_dump(by_alias=True) for r in search_endpoints(doc, query)]

    async def generate_code(self, path: str, method: str, language: str = "javascript") -> dict:
        if not path or not method:
            raise MissingArgumentError("Path and method are required")
        doc = await self.ensure_document()
        endpoint = find_endpoint(doc, path, method)
        if endpoint is None:
            raise EndpointNotFoundError(path, method)
        return {"code": self.code_generator.generate(endpoint, language or "javascript")}

    async def get_all_endpoints(self) -> list[dict]:
        doc = await self.ensure_document()
        return [s.model_dump() for s in list_endpoints(doc)]

    async def reload(self, config: SwaggerConfig | None) -> None:
        """Re-fetch after a config change. A failed fetch keeps the old document."""
        if config is None or not config.swagger_url:
            logger.warning("Swagger config has no swaggerUrl, keeping cached document")
            return
        doc = await fetch_document(config.swagger_url, timeout=self.timeout)
        if doc is None:
            logger.warning("Reload failed, keeping cached document", url=config.swagger_url)
            return
        self.document = doc
        self.swagger_url = config.swagger_url
        logger.info("Swagger document reloaded", url=config.swagger_url)

    def _on_config_change(self, config: SwaggerConfig | None) -> None:
        # Runs on the watchdog thread; hand the reload to the event loop.
        if self._loop is None or self._loop.is_closed():
            return
        asyncio.run_coroutine_threadsafe(self.reload(config), self._loop)

    def _start_watch(self) -> None:
        if not self.watch_enabled or self._watch is not None:
            return
        self._loop = asyncio.get_running_loop()
        try:
            self._watch = watch_config(self.config_path, self._on_config_change)
        except OSError as e:
            logger.warning("Cannot watch swagger config", path=str(self.config_path), error=str(e))

    def close(self) -> None:
        if self._watch is not None:
            self._watch.close()
            self._watch = None
        self._loop = None
