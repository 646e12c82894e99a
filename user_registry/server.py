import argparse
import dataclasses
import logging
import signal
import sys
import threading
from typing import Dict, List, Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.serving import make_server

from . import create_app
from .config import Settings
from .logging_config import setup_logging

logger = logging.getLogger("user-registry.server")

SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class GracefulHTTPServer:
    def __init__(self, app: Flask, host: str, port: int, threaded: bool = True, drain_timeout: float = 10.0):
        self._app = app
        self._host = host
        self._threaded = threaded
        self._drain_timeout = drain_timeout
        self._server = make_server(host, port, app, threaded=threaded)
        self._shutdown_initiated = threading.Event()

    @property
    def port(self) -> int:
        return self._server.server_port

    @property
    def url(self) -> str:
        host = "localhost" if self._host in ("0.0.0.0", "") else self._host
        return f"http://{host}:{self.port}"

    def serve(self, install_signal_handlers: bool = True) -> None:
        previous = self.install_signal_handlers() if install_signal_handlers else {}
        logger.info("Server is running on %s (threaded=%s)", self.url, self._threaded)
        try:
            self._server.serve_forever()
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)
        logger.info("Shutdown complete")

    def install_signal_handlers(self) -> Dict[int, object]:
        """Route SIGTERM/SIGINT to :meth:`request_shutdown`; returns the handlers replaced."""

        def handler(signum, frame):
            logger.info("Received signal %s", signal.Signals(signum).name)
            self.request_shutdown()

        previous = {}
        for sig in SHUTDOWN_SIGNALS:
            previous[sig] = signal.getsignal(sig)
            signal.signal(sig, handler)
        return previous

    def request_shutdown(self) -> Optional[threading.Thread]:
        """Drain in-flight requests in the background, then stop the listener."""
        if self._shutdown_initiated.is_set():
            logger.info("Shutdown already in progress")
            return None
        self._shutdown_initiated.set()

        tracker = self._app.extensions["request_tracker"]
        tracker.begin_drain()

        def drainer():
            result = tracker.wait_idle(self._drain_timeout)
            if result.drained:
                logger.info("All in-flight requests drained")
            else:
                logger.warning("Drain timeout reached with %d in-flight request(s)", result.remaining)
            self._server.shutdown()

        # shutdown() blocks until serve_forever() returns, so never call it on the serving thread
        t = threading.Thread(target=drainer, name="Drainer", daemon=True)
        t.start()
        return t

    def close(self) -> None:
        self._server.server_close()


def port_number(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range 0-65535: {port}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="user-registry", description="In-memory user registry HTTP service")
    parser.add_argument("--host", help="bind address (env HOST)")
    parser.add_argument("--port", type=port_number, help="listening port (env PORT)")
    parser.add_argument("--log-level", help="log level (env LOG_LEVEL)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = Settings.from_env()
    overrides = {
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level.upper() if args.log_level else None,
    }
    settings = dataclasses.replace(settings, **{k: v for k, v in overrides.items() if v is not None})

    setup_logging(settings.log_level)

    app = create_app(settings)
    try:
        # werkzeug itself exits with status 1 when bind() fails
        server = GracefulHTTPServer(
            app,
            settings.host,
            settings.port,
            threaded=settings.threaded,
            drain_timeout=settings.drain_timeout,
        )
    except (OSError, OverflowError) as e:
        logger.error("Could not start server on %s:%d: %s", settings.host, settings.port, e)
        return 1

    try:
        server.serve()
    except Exception as e:
        logger.exception("Server encountered an error: %s", e)
        return 1
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
