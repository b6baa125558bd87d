"""Access to the objects the app factory attaches to the Flask app."""

from flask import current_app

from invest_or_defend.services import GameService

EXTENSION_KEY = "invest_or_defend"


def init_game_service(app, service: GameService) -> None:
    app.extensions[EXTENSION_KEY] = service


def get_game_service() -> GameService:
    """Get the game service of the current app."""
    return current_app.extensions[EXTENSION_KEY]
