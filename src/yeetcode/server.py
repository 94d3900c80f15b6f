"""
HTTP server lifecycle
- runs the uvicorn listener until a shutdown signal or a listener failure
- graceful shutdown is bounded; past the deadline the listener is force closed
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import Iterable, Optional, Protocol

import uvicorn
from fastapi import FastAPI

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT = 15.0
SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ListenerError(RuntimeError):
    """The listener stopped without being asked to."""


class ShutdownTimeout(RuntimeError):
    """Graceful shutdown missed its deadline and the listener was force closed."""


class Listener(Protocol):
    should_exit: bool
    force_exit: bool

    async def serve(self) -> None: ...


class Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to ServerLifecycle."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield


def build_server(app: FastAPI, host: str, port: int) -> Server:
    config = uvicorn.Config(app, host=host, port=port, log_config=None)
    return Server(config)


class ServerLifecycle:
    def __init__(
        self,
        server: Listener,
        shutdown_timeout: float = SHUTDOWN_TIMEOUT,
        signals: Iterable[signal.Signals] = SHUTDOWN_SIGNALS,
    ):
        self.server = server
        self.shutdown_timeout = shutdown_timeout
        self.signals = tuple(signals)
        self._stop: Optional[asyncio.Event] = None
        self._reason: Optional[str] = None

    def request_shutdown(self, reason: str = "requested") -> None:
        """Start the graceful shutdown sequence. Safe to call more than once."""
        if self._reason is None:
            self._reason = reason
        if self._stop is not None:
            self._stop.set()

    async def run(self) -> None:
        """Serve until shutdown; raises ListenerError or ShutdownTimeout on failure."""
        loop = asyncio.get_running_loop()
        self._stop = asyncio.Event()
        if self._reason is not None:
            self._stop.set()
        for sig in self.signals:
            loop.add_signal_handler(sig, self.request_shutdown, sig.name)

        try:
            listener = asyncio.create_task(self._listen())
            stopper = asyncio.create_task(self._stop.wait())
            done, _ = await asyncio.wait({listener, stopper}, return_when=asyncio.FIRST_COMPLETED)
            stopper.cancel()

            if listener in done and not self._stop.is_set():
                # Raises the listener's own error, if it had one.
                listener.result()
                raise ListenerError("http listener stopped unexpectedly")

            logger.info("shutting down gracefully reason=%s", self._reason)
            await self._shutdown(listener)
        finally:
            for sig in self.signals:
                loop.remove_signal_handler(sig)

    async def _listen(self) -> None:
        try:
            await self.server.serve()
        except SystemExit as exc:
            # uvicorn exits the process when it cannot bind.
            raise ListenerError(f"http listener failed to start (exit code {exc.code})") from exc
        except OSError as exc:
            raise ListenerError(f"http listener failed: {exc}") from exc

    async def _shutdown(self, listener: asyncio.Task) -> None:
        self.server.should_exit = True
        try:
            await asyncio.wait_for(asyncio.shield(listener), timeout=self.shutdown_timeout)
        except asyncio.TimeoutError:
            logger.error("shutting down forcefully after %.1fs", self.shutdown_timeout)
            self.server.force_exit = True
            listener.cancel()
            with contextlib.suppress(asyncio.CancelledError, ListenerError):
                await listener
            raise ShutdownTimeout(
                f"graceful shutdown exceeded {self.shutdown_timeout:.1f}s, listener force closed"
            ) from None
