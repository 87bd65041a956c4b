"""Routes for the player blueprint."""

from __future__ import annotations

from typing import Any

from flask import g, jsonify, request

from racketdraw.auth.decorators import login_required, role_required
from racketdraw.constants import ROLE_ADMIN
from racketdraw.utils import raise_form_errors

from . import bp
from .forms import PlayerForm
from .services import PlayerService


def _serialize(player: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in player.items() if k not in ("createdAt", "updatedAt")}


@bp.route("/", methods=["GET"])
@login_required
def list_players() -> Any:
    """List players; admins may pass ``?inactive=1`` to include deactivated ones."""
    include_inactive = g.user.get("role") == ROLE_ADMIN and request.args.get(
        "inactive", ""
    ).lower() in ["true", "1", "t"]
    players = PlayerService.list_players(include_inactive=include_inactive)
    return jsonify([_serialize(p) for p in players])


@bp.route("/", methods=["POST"])
@role_required()
def create_player() -> Any:
    """Register a player."""
    form = PlayerForm()
    if not form.validate_on_submit():
        raise_form_errors(form)
    player_id = PlayerService.create_player(form.data)
    return jsonify(_serialize(PlayerService.get_player(player_id))), 201


@bp.route("/<string:player_id>", methods=["GET"])
@login_required
def view_player(player_id: str) -> Any:
    """Return a player with their match and achievement history."""
    return jsonify(_serialize(PlayerService.get_player(player_id)))


@bp.route("/<string:player_id>", methods=["PUT"])
@role_required()
def edit_player(player_id: str) -> Any:
    """Update a player's profile."""
    form = PlayerForm()
    if not form.validate_on_submit():
        raise_form_errors(form)
    PlayerService.update_player(player_id, form.data)
    return jsonify(_serialize(PlayerService.get_player(player_id)))


@bp.route("/<string:player_id>/deactivate", methods=["POST"])
@role_required()
def deactivate_player(player_id: str) -> Any:
    """Deactivate a player. Their history stays intact."""
    PlayerService.deactivate_player(player_id)
    return jsonify({"status": "success", "id": player_id})
