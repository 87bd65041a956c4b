"""Routes for the club blueprint."""

from __future__ import annotations

from typing import Any

from flask import jsonify

from racketdraw.auth.decorators import role_required
from racketdraw.constants import ROLE_ADMIN
from racketdraw.utils import raise_form_errors

from . import bp
from .forms import ClubForm
from .services import ClubService


def _serialize(club: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in club.items() if k not in ("createdAt", "updatedAt")}


@bp.route("/", methods=["GET"])
def list_clubs() -> Any:
    """List every club."""
    return jsonify([_serialize(c) for c in ClubService.list_clubs()])


@bp.route("/", methods=["POST"])
@role_required(ROLE_ADMIN)
def create_club() -> Any:
    """Register a club."""
    form = ClubForm()
    if not form.validate_on_submit():
        raise_form_errors(form)
    club_id = ClubService.create_club(form.data)
    return jsonify(_serialize(ClubService.get_club(club_id))), 201


@bp.route("/<string:club_id>", methods=["GET"])
def view_club(club_id: str) -> Any:
    """Return a club."""
    return jsonify(_serialize(ClubService.get_club(club_id)))


@bp.route("/<string:club_id>", methods=["PUT"])
@role_required(ROLE_ADMIN)
def edit_club(club_id: str) -> Any:
    """Update a club."""
    form = ClubForm()
    if not form.validate_on_submit():
        raise_form_errors(form)
    ClubService.update_club(club_id, form.data)
    return jsonify(_serialize(ClubService.get_club(club_id)))


@bp.route("/<string:club_id>", methods=["DELETE"])
@role_required(ROLE_ADMIN)
def delete_club(club_id: str) -> Any:
    """Delete a club that no tournament refers to."""
    ClubService.delete_club(club_id)
    return jsonify({"status": "success", "id": club_id})
