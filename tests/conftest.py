"""Shared pytest fixtures for user registry tests."""

import threading

import pytest

from user_registry import create_app
from user_registry.config import Settings
from user_registry.server import GracefulHTTPServer
from user_registry.store import UserStore


@pytest.fixture
def store() -> UserStore:
    return UserStore()


@pytest.fixture
def app(store):
    app = create_app(Settings(), store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def live_server(app):
    """Serve the app on an ephemeral port in a background thread."""
    server = GracefulHTTPServer(app, "127.0.0.1", 0, threaded=True, drain_timeout=2.0)
    thread = threading.Thread(target=server.serve, kwargs={"install_signal_handlers": False}, daemon=True)
    thread.start()
    yield server
    drainer = server.request_shutdown()
    if drainer is not None:
        drainer.join(timeout=5)
    thread.join(timeout=5)
    server.close()
