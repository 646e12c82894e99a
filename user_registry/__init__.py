import logging
from typing import Optional

from flask import Flask, g, request
from werkzeug.exceptions import HTTPException

from .config import Settings
from .routes import bp as users_bp, text_response
from .store import UserStore
from .tracking import RequestTracker

__version__ = "1.0.0"

logger = logging.getLogger("user-registry")


def create_app(settings: Optional[Settings] = None, store: Optional[UserStore] = None) -> Flask:
    settings = settings or Settings()
    tracker = RequestTracker()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    app.extensions["user_store"] = store if store is not None else UserStore()
    app.extensions["request_tracker"] = tracker

    @app.before_request
    def admit_request():
        # The root route is the health check and keeps answering while draining
        if request.path == "/":
            return None
        if not tracker.admit():
            return text_response("Server is shutting down", 503)
        g.admitted = True
        return None

    @app.after_request
    def log_request(response):
        logger.debug("%s %s -> %d", request.method, request.path, response.status_code)
        return response

    @app.teardown_request
    def release_request(_exc):
        if g.pop("admitted", False):
            tracker.release()

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return text_response(err.description or err.name, err.code or 500)

    @app.errorhandler(Exception)
    def handle_error(err):
        logger.exception("Unhandled exception during request: %s", err)
        return text_response("Internal Server Error", 500)

    app.register_blueprint(users_bp)

    return app


__all__ = ["Settings", "UserStore", "create_app", "__version__"]
