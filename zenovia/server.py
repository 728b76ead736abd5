"""Process entry point and lifecycle supervision.

Anything that breaks process-wide invariants ends the process with exit code
1 so the external supervisor (systemd, Docker, PM2...) restarts it:

* an exception nobody retrieved from an asyncio task or callback closes the
  listener gracefully, then exits 1;
* an uncaught exception exits 1 immediately;
* SIGTERM / SIGINT close the listener, drain in-flight connections and
  exit 0.
"""
import asyncio
import os
import signal
import sys
import threading
from types import FrameType, TracebackType
from typing import Any, Dict, Optional, Type

import uvicorn

from zenovia.config import Settings, get_settings
from zenovia.main import create_app
from zenovia.utils.logger import logger


class SupervisedServer(uvicorn.Server):
    """uvicorn server that logs termination signals"""

    def handle_exit(self, sig: int, frame: Optional[FrameType]) -> None:
        if not self.should_exit:
            logger.info(f"{signal.Signals(sig).name} received")
            logger.info("Shutting down gracefully")
        super().handle_exit(sig, frame)
        # Handled by the graceful shutdown; uvicorn must not re-raise it
        self._captured_signals.clear()


class ProcessSupervisor:
    """Runs one server and turns fatal errors into an exit code"""

    def __init__(self, server: uvicorn.Server) -> None:
        self.server = server
        self.exit_code = 0

    def handle_loop_exception(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        """Event loop exception handler: log, close the listener, exit 1"""
        exc = context.get("exception")
        message = str(exc) if exc is not None else context.get("message", "unknown error")
        logger.error(f"Unhandled Rejection: {message}", exc_info=exc)
        self.exit_code = 1
        self.server.should_exit = True

    def handle_uncaught_exception(
        self,
        exc_type: Type[BaseException],
        exc: BaseException,
        tb: Optional[TracebackType],
    ) -> None:
        """``sys.excepthook``: log and exit 1 without waiting for the listener"""
        logger.critical(f"Uncaught Exception: {exc}", exc_info=(exc_type, exc, tb))
        logger.critical("Shutting down the server due to Uncaught Exception")
        os._exit(1)

    def _handle_thread_exception(self, args: threading.ExceptHookArgs) -> None:
        if args.exc_type is SystemExit:
            return
        self.handle_uncaught_exception(args.exc_type, args.exc_value, args.exc_traceback)

    def install_hooks(self) -> None:
        sys.excepthook = self.handle_uncaught_exception
        threading.excepthook = self._handle_thread_exception

    async def serve(self) -> int:
        asyncio.get_running_loop().set_exception_handler(self.handle_loop_exception)
        await self.server.serve()
        if self.exit_code == 0 and not self.server.started:
            # Startup failed, e.g. the database was unreachable
            self.exit_code = 1
        if self.exit_code == 0:
            logger.info("Process terminated!")
        return self.exit_code


def build_server(settings: Settings) -> SupervisedServer:
    config = uvicorn.Config(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        proxy_headers=settings.TRUST_PROXY_HEADERS,
        forwarded_allow_ips="*" if settings.TRUST_PROXY_HEADERS else None,
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT,
        lifespan="on",
        access_log=False,
        log_config=None,
    )
    return SupervisedServer(config)


def run(settings: Optional[Settings] = None) -> int:
    """Serve until shutdown; return the process exit code"""
    settings = settings or get_settings()
    supervisor = ProcessSupervisor(build_server(settings))
    supervisor.install_hooks()
    return asyncio.run(supervisor.serve())


def main() -> None:
    sys.exit(run())
