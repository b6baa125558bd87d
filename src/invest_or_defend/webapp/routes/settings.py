"""Settings routes - threat actor and asset catalogs."""

from flask import Blueprint, jsonify, request

from ..extensions import get_game_service

bp = Blueprint("settings", __name__, url_prefix="/settings")


@bp.route("")
def index():
    """List all settings."""
    return jsonify(get_game_service().get_settings())


@bp.route("/<key>")
def view(key: str):
    """Get one setting."""
    return jsonify({"key": key, "value": get_game_service().get_setting(key)})


@bp.route("/<key>", methods=["PUT"])
def update(key: str):
    """Replace a setting; the body is the new list of entries."""
    value = get_game_service().update_setting(key, request.get_json(silent=True))
    return jsonify({"key": key, "value": value})
