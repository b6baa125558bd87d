"""Game routes - creation, joining and turn simulation."""

from flask import Blueprint, jsonify, request

from ..extensions import get_game_service
from ..schemas import AddOrganisationRequest, CreateGameRequest, SimulateTurnRequest

bp = Blueprint("games", __name__, url_prefix="/games")


def _game_response(game):
    game_service = get_game_service()
    return {
        "game": game.model_dump(mode="json"),
        "organisations": [
            organisation.model_dump(mode="json")
            for organisation in game_service.get_organisations(game)
        ],
    }


@bp.route("/types")
def game_types():
    """List available game types."""
    return jsonify(get_game_service().get_game_types())


@bp.route("", methods=["POST"])
def create():
    """Create a game with its first organisation."""
    body = CreateGameRequest.model_validate(request.get_json(silent=True) or {})
    settings = body.settings.model_dump(exclude_none=True)

    game = get_game_service().create_game(settings, body.organisation_name)
    return jsonify(_game_response(game)), 201


@bp.route("/<game_id>")
def view(game_id: str):
    """Get a game and its organisations."""
    game = get_game_service().get_game(game_id)
    return jsonify(_game_response(game))


@bp.route("/<game_id>/organisations", methods=["POST"])
def add_organisation(game_id: str):
    """Add an organisation to a game that has not started."""
    body = AddOrganisationRequest.model_validate(request.get_json(silent=True) or {})

    game = get_game_service().add_organisation(game_id, body.name)
    return jsonify(_game_response(game)), 201


@bp.route("/simulate-turn", methods=["POST"])
def simulate_turn():
    """Simulate the current turn, or mark the organisation ready in competitive games."""
    body = SimulateTurnRequest.model_validate(request.get_json(silent=True) or {})

    game = get_game_service().simulate_turn(body.game_id, body.organisation_id)
    return jsonify(_game_response(game))
