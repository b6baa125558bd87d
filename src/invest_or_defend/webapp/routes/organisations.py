"""Organisation routes - state and control purchases."""

from flask import Blueprint, jsonify, request

from ..extensions import get_game_service
from ..schemas import PurchaseControlRequest

bp = Blueprint("organisations", __name__, url_prefix="/organisations")


@bp.route("/<organisation_id>")
def view(organisation_id: str):
    """Get an organisation with its controls, events and balances."""
    organisation = get_game_service().get_organisation(organisation_id)
    return jsonify(organisation.model_dump(mode="json"))


@bp.route("/<organisation_id>/new-controls")
def new_controls(organisation_id: str):
    """List controls the organisation can still implement."""
    controls = get_game_service().get_new_controls(organisation_id)
    return jsonify([control.model_dump(mode="json") for control in controls])


@bp.route("/<organisation_id>/controls", methods=["POST"])
def purchase_control(organisation_id: str):
    """Implement a control, debiting its cost."""
    body = PurchaseControlRequest.model_validate(request.get_json(silent=True) or {})

    organisation = get_game_service().purchase_control(organisation_id, body.control_id)
    return jsonify(organisation.model_dump(mode="json")), 201
