import logging
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Response, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from .store import UserRegistryError, UserStore

logger = logging.getLogger("user-registry")

bp = Blueprint("users", __name__)


def get_store() -> UserStore:
    return current_app.extensions["user_store"]


def text_response(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def _read_body() -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """Decode the request body into a dict, or return an error message.

    An empty body is treated as ``{}``.
    """
    if not request.get_data(cache=True).strip():
        return {}, None
    try:
        data = request.get_json(force=True, silent=False)
    except (BadRequest, RecursionError):
        # deeply nested arrays or objects overflow the json decoder
        return None, "Invalid JSON body"
    if not isinstance(data, dict):
        return None, "Request body must be a JSON object"
    return data, None


@bp.get("/")
def index():
    return text_response("Hello, World!")


@bp.get("/users")
def list_users():
    return jsonify({"users": get_store().list_users()}), 200


@bp.post("/users")
def register_user():
    data, error = _read_body()
    if error:
        logger.info("Rejected registration: %s", error)
        return text_response(error, 400)

    user_id = data.get("userId")
    if user_id and not isinstance(user_id, str):
        logger.info("Rejected registration: userId of type %s", type(user_id).__name__)
        return text_response("userId must be a string", 400)

    try:
        get_store().register(user_id)
    except UserRegistryError as e:
        logger.info("Rejected registration of %r: %s", user_id, e)
        return text_response(str(e), 400)

    logger.info("Registered user %r", user_id)
    return text_response("User registered successfully.", 201)
