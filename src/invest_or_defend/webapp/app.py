"""Flask application factory."""

import logging

from flask import Flask, jsonify
from pydantic import ValidationError

from invest_or_defend.errors import SimulationError
from invest_or_defend.services import GameService
from invest_or_defend.storage import StorageBackend, get_repository, seed_catalog

from .config import Config
from .extensions import init_game_service

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Translate simulation and validation errors into JSON responses."""

    @app.errorhandler(SimulationError)
    def handle_simulation_error(error: SimulationError):
        if error.status_code >= 500:
            logger.error(f"{type(error).__name__}: {error.message}")
        else:
            logger.info(f"{type(error).__name__}: {error.message}")
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        return jsonify({
            "message": "Invalid request",
            "errors": error.errors(include_url=False, include_context=False, include_input=False),
        }), 400


def create_app(config_class=Config):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    backend = StorageBackend(app.config["STORAGE_BACKEND"])
    if backend == StorageBackend.SQLITE and app.config["DATABASE_URI"] != ":memory:":
        # Ensure instance folder exists
        config_class.INSTANCE_PATH.mkdir(parents=True, exist_ok=True)

    repository = get_repository(backend, app.config["DATABASE_URI"])
    if app.config["SEED_CATALOG"]:
        seed_catalog(repository, app.config["CATALOG_PATH"])

    init_game_service(app, GameService(repository, random_seed=app.config["RANDOM_SEED"]))

    # Register blueprints
    from .routes import games, organisations, settings

    app.register_blueprint(games.bp)
    app.register_blueprint(organisations.bp)
    app.register_blueprint(settings.bp)

    register_error_handlers(app)

    logger.info(f"Created app with {backend.value} storage")
    return app


def main():
    """Entry point for `invest-or-defend-web` command."""
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    app.run(debug=True, host="0.0.0.0", port=5000)


if __name__ == "__main__":
    main()
