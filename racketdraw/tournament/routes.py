"""Routes for the tournament blueprint."""

from __future__ import annotations

import datetime
from typing import Any

from flask import current_app, g, jsonify, request, url_for
from google.api_core import exceptions as google_exceptions

from racketdraw.auth.decorators import login_required, role_required
from racketdraw.errors import ValidationError
from racketdraw.utils import EmailError, raise_form_errors

from . import bp
from .forms import (
    InviteForm,
    ResultForm,
    TournamentForm,
    parse_match_tiebreak,
    parse_participants,
    parse_scheduled_at,
    parse_sets,
)
from .models import ResultSubmission, Tournament, TournamentSubmission, TournamentType
from .services import TournamentService


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("The request body must be a JSON object.")
    return data


def _expected_version(data: dict[str, Any]) -> int | None:
    value = data.get("expectedVersion")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("expectedVersion must be a number.", field="expectedVersion")
    return value


def serialize_tournament(tournament: Tournament) -> dict[str, Any]:
    """Return the JSON form of a tournament, including its round names."""
    data = tournament.to_dict()
    data["id"] = tournament.id
    created_at = data.pop("createdAt", None)
    if isinstance(created_at, datetime.datetime):
        data["createdAt"] = created_at.isoformat()
    data["bracket"] = TournamentService.bracket_view(tournament)
    for section in ("groups", "rounds", "bracket"):
        for part in data[section]:
            for match in part["matches"]:
                if isinstance(match.get("scheduledAt"), datetime.datetime):
                    match["scheduledAt"] = match["scheduledAt"].isoformat()
    return data


@bp.route("/", methods=["GET"])
@login_required
def list_tournaments() -> Any:
    """List the tournaments visible to the user, optionally by status."""
    tournaments = TournamentService.list_tournaments(
        g.user, status=request.args.get("status")
    )
    return jsonify(
        [
            {
                "id": t.id,
                "name": t.name,
                "type": t.type.value,
                "status": t.status.value,
                "sport": t.config.sport,
                "category": t.config.category,
                "mode": t.config.mode,
                "clubId": t.config.club_id,
                "winner": t.winner,
                "runnerUp": t.runner_up,
            }
            for t in tournaments
        ]
    )


@bp.route("/", methods=["POST"])
@role_required()
def create_tournament() -> Any:
    """Create a tournament and its draw."""
    form = TournamentForm()
    if not form.validate_on_submit():
        raise_form_errors(form)

    data = _json_body()
    submission = TournamentSubmission(
        name=form.name.data,
        type=TournamentType(form.type.data),
        config=form.to_config(),
        participants=parse_participants(data.get("participants")),
        draft=bool(form.draft.data),
    )
    tournament = TournamentService.create_tournament(submission, g.user["uid"])
    return jsonify(serialize_tournament(tournament)), 201


@bp.route("/<string:tournament_id>", methods=["GET"])
def view_tournament(tournament_id: str) -> Any:
    """Return the full tournament. Drafts need their creator or an admin."""
    tournament = TournamentService.get_tournament(tournament_id, g.user)
    return jsonify(serialize_tournament(tournament))


@bp.route("/<string:tournament_id>/standings", methods=["GET"])
def view_standings(tournament_id: str) -> Any:
    """Return the group standings."""
    return jsonify(
        {
            "tournamentId": tournament_id,
            "groups": TournamentService.get_standings(tournament_id, g.user),
        }
    )


@bp.route("/<string:tournament_id>/bracket", methods=["GET"])
def view_bracket(tournament_id: str) -> Any:
    """Return the bracket rounds."""
    return jsonify(
        {
            "tournamentId": tournament_id,
            "rounds": TournamentService.get_bracket(tournament_id, g.user),
        }
    )


@bp.route("/<string:tournament_id>/publish", methods=["POST"])
@role_required()
def publish_tournament(tournament_id: str) -> Any:
    """Make a draft tournament visible to everyone."""
    tournament = TournamentService.publish_tournament(tournament_id)
    return jsonify(serialize_tournament(tournament))


@bp.route("/<string:tournament_id>/draw", methods=["POST"])
@role_required()
def regenerate_draw(tournament_id: str) -> Any:
    """Redraw groups or the first round before any result is recorded."""
    seeds = _json_body().get("seeds")
    if seeds is not None and not isinstance(seeds, list):
        raise ValidationError("Seeds must be a list of participant IDs.", field="seeds")
    tournament = TournamentService.regenerate_draw(tournament_id, seeds)
    return jsonify(serialize_tournament(tournament))


@bp.route(
    "/<string:tournament_id>/matches/<string:match_id>/result", methods=["PUT"]
)
@role_required()
def submit_result(tournament_id: str, match_id: str) -> Any:
    """Record the result of a match."""
    form = ResultForm()
    if not form.validate_on_submit():
        raise_form_errors(form)

    data = _json_body()
    submission = ResultSubmission(
        match_id=match_id,
        sets=parse_sets(data.get("sets")),
        winner=form.winner.data,
        match_tiebreak=parse_match_tiebreak(data.get("matchTiebreak")),
        runner_up=form.runnerUp.data or None,
        expected_version=_expected_version(data),
    )
    tournament = TournamentService.submit_match_result(tournament_id, submission)
    return jsonify(serialize_tournament(tournament))


@bp.route("/<string:tournament_id>/knockout", methods=["POST"])
@role_required()
def generate_knockout(tournament_id: str) -> Any:
    """Seed the knockout phase from the group standings."""
    tournament = TournamentService.request_knockout_generation(
        tournament_id, expected_version=_expected_version(_json_body())
    )
    return jsonify(serialize_tournament(tournament))


@bp.route("/<string:tournament_id>/rounds/advance", methods=["POST"])
@role_required()
def advance_round(tournament_id: str) -> Any:
    """Build the next bracket round from the winners."""
    tournament = TournamentService.request_round_advance(
        tournament_id, expected_version=_expected_version(_json_body())
    )
    return jsonify(serialize_tournament(tournament))


@bp.route("/<string:tournament_id>/finish", methods=["POST"])
@role_required()
def finish_tournament(tournament_id: str) -> Any:
    """Finish the tournament and record the podium."""
    tournament = TournamentService.finish_tournament(
        tournament_id, expected_version=_expected_version(_json_body())
    )
    if current_app.config.get("RESULTS_EMAIL_ENABLED"):
        try:
            TournamentService.send_results_email(tournament)
        except google_exceptions.GoogleAPICallError as e:
            current_app.logger.error(
                f"Could not send results for tournament {tournament.id}: {e}"
            )
    return jsonify(serialize_tournament(tournament))


@bp.route(
    "/<string:tournament_id>/groups/<string:group_id>/resolve-tie", methods=["POST"]
)
@role_required()
def resolve_group_tie(tournament_id: str, group_id: str) -> Any:
    """Break a tie for first place in a group by random draw."""
    tournament = TournamentService.resolve_group_tie(tournament_id, group_id)
    return jsonify(serialize_tournament(tournament))


@bp.route(
    "/<string:tournament_id>/matches/<string:match_id>/schedule", methods=["PUT"]
)
@role_required()
def schedule_match(tournament_id: str, match_id: str) -> Any:
    """Set or clear when a match is to be played."""
    data = _json_body()
    tournament = TournamentService.schedule_match(
        tournament_id,
        match_id,
        parse_scheduled_at(data.get("scheduledAt")),
        expected_version=_expected_version(data),
    )
    return jsonify(serialize_tournament(tournament))


@bp.route("/<string:tournament_id>/invite", methods=["POST"])
@role_required()
def invite(tournament_id: str) -> Any:
    """E-mail an invitation with a link to the tournament."""
    form = InviteForm()
    if not form.validate_on_submit():
        raise_form_errors(form)
    link = url_for(
        "tournament.view_tournament", tournament_id=tournament_id, _external=True
    )
    try:
        TournamentService.send_invitation(tournament_id, form.email.data, link, g.user)
    except EmailError as e:
        current_app.logger.error(f"Invitation to {tournament_id} failed: {e}")
        return (
            jsonify({"error": "email_failed", "message": "The invitation could not be sent."}),
            502,
        )
    return jsonify({"status": "success", "email": form.email.data})
