"""Page server running in a background thread with uvicorn.

This module serves a Starlette application of pages from a separate daemon
thread with its own asyncio event loop, so an embedding program (a test
harness, a desktop shell, a larger service) keeps its own main thread.

Architecture:
    - Background thread: runs ``asyncio.run`` with a uvicorn server
    - HTTP transport: Starlette application built by ``create_app``
    - Page pipeline: synchronous, executed in Starlette's thread pool

Thread Safety:
    - ``start()`` and ``stop()`` are safe to call from any thread
    - Pages and registries are per request, nothing is shared between
      concurrent callbacks
"""

import asyncio
import logging
import threading
import time
from typing import Optional

import uvicorn
from starlette.applications import Starlette

from .config import Config

logger = logging.getLogger(__name__)


class PageServer:
    """Serves a page application in a background thread.

    Usage:
        >>> app = create_app({"/": DemoPage}, config)
        >>> server = PageServer(app, config)
        >>> server.start()
        >>> # Later, during shutdown:
        >>> server.stop()

    Attributes:
        _app: Starlette application to serve
        _config: Server configuration (HTTP host/port, log level)
        _thread: Background thread running the asyncio event loop
        _server: uvicorn server, set while the thread runs
    """

    def __init__(self, app: Starlette, config: Config) -> None:
        """Initialize page server.

        Args:
            app: Application to serve, usually from ``create_app``
            config: Server configuration
        """
        self._app = app
        self._config = config
        self._thread: Optional[threading.Thread] = None
        self._server: Optional[uvicorn.Server] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_started(self) -> bool:
        """True once uvicorn has bound its socket and accepts connections."""
        return self._server is not None and self._server.started

    def wait_started(self, timeout: float = 5.0) -> bool:
        """Block until the server accepts connections.

        Returns:
            False if the thread exited first (for instance, the port was
            taken) or the timeout elapsed.
        """
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if self.is_started:
                return True
            if not self.is_running:
                return False
            time.sleep(0.05)
        return self.is_started

    def start(self) -> None:
        """Start serving in a background thread.

        Creates and starts a daemon thread that runs the asyncio event loop.
        The daemon flag ensures the thread won't keep the process alive.

        Idempotency:
            If already running, this method is a no-op.
        """
        if self.is_running:
            return

        valid, error = self._config.is_valid()
        if not valid:
            raise ValueError(f"Invalid config: {error}")

        uvicorn_config = uvicorn.Config(
            self._app,
            host=self._config.http_host,
            port=self._config.http_port,
            log_level=self._config.log_level.lower(),
        )
        self._server = uvicorn.Server(uvicorn_config)
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        logger.info(
            "Page server starting on http://%s:%s/",
            self._config.http_host,
            self._config.http_port,
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Ask uvicorn to exit and wait for the thread to finish.

        Args:
            timeout: Seconds to wait for the background thread.

        Idempotency:
            Safe to call multiple times. If already stopped, this is a no-op.
        """
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Page server thread did not stop within %.1fs", timeout)
        self._thread = None
        self._server = None

    def _run(self) -> None:
        """Thread entry point - runs asyncio event loop."""
        asyncio.run(self._async_main())

    async def _async_main(self) -> None:
        # server.serve() blocks until should_exit is set
        assert self._server is not None
        await self._server.serve()
