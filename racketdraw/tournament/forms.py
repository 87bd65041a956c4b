"""Forms for the tournament blueprint.

Requests are JSON; FlaskForm reads flat JSON bodies directly. Nested values
(participants, sets) are parsed by the helpers below.
"""

from __future__ import annotations

import datetime
from typing import Any, Optional as Opt

from flask_wtf import FlaskForm  # type: ignore
from wtforms import BooleanField, IntegerField, SelectField, StringField
from wtforms.validators import (
    AnyOf,
    DataRequired,
    Email,
    Length,
    NumberRange,
    Optional,
)

from racketdraw.constants import (
    ALLOWED_GAMES_PER_SET,
    ALLOWED_SETS_PER_MATCH,
    DEFAULT_ADVANCE_COUNT,
    DEFAULT_GROUP_COUNT,
    DEFAULT_MATCH_TIEBREAK_POINTS,
    DEFAULT_SET_TIEBREAK_POINTS,
    MAX_TIEBREAK_POINTS,
    MIN_TIEBREAK_POINTS,
    MODE_DOUBLES,
    MODE_SINGLES,
    SPORTS,
)
from racketdraw.core.ids import normalize_id
from racketdraw.errors import ValidationError

from .models import (
    MatchTiebreak,
    ParticipantEntry,
    SetScore,
    TournamentConfig,
    TournamentType,
)


class TournamentForm(FlaskForm):
    """Form for creating a tournament."""

    name = StringField(
        "Tournament Name", validators=[DataRequired(), Length(min=1, max=100)]
    )
    type = SelectField(
        "Tournament Format",
        choices=[
            (TournamentType.ROUND_ROBIN.value, "Round Robin"),
            (TournamentType.ELIMINATION.value, "Elimination"),
        ],
        validators=[DataRequired()],
    )
    sport = SelectField(
        "Sport", choices=[(s, s) for s in SPORTS], default=SPORTS[0]
    )
    category = StringField("Category", validators=[Optional(), Length(max=50)])
    mode = SelectField(
        "Competition Mode",
        choices=[(MODE_SINGLES, "Singles (1v1)"), (MODE_DOUBLES, "Doubles (2v2)")],
        default=MODE_SINGLES,
    )
    setsPerMatch = IntegerField(
        "Sets per Match",
        validators=[Optional(), AnyOf(ALLOWED_SETS_PER_MATCH)],
        default=2,
    )
    gamesPerSet = IntegerField(
        "Games per Set",
        validators=[Optional(), AnyOf(ALLOWED_GAMES_PER_SET)],
        default=6,
    )
    setTiebreakPoints = IntegerField(
        "Set Tiebreak Points",
        validators=[Optional(), NumberRange(MIN_TIEBREAK_POINTS, MAX_TIEBREAK_POINTS)],
        default=DEFAULT_SET_TIEBREAK_POINTS,
    )
    matchTiebreakPoints = IntegerField(
        "Match Tiebreak Points",
        validators=[Optional(), NumberRange(MIN_TIEBREAK_POINTS, MAX_TIEBREAK_POINTS)],
        default=DEFAULT_MATCH_TIEBREAK_POINTS,
    )
    groupCount = IntegerField(
        "Groups", validators=[Optional(), NumberRange(min=1)], default=DEFAULT_GROUP_COUNT
    )
    advanceCount = IntegerField(
        "Qualifiers per Group",
        validators=[Optional(), NumberRange(min=1)],
        default=DEFAULT_ADVANCE_COUNT,
    )
    clubId = StringField("Club", validators=[Optional()])
    draft = BooleanField("Save as Draft", default=False)

    def to_config(self) -> TournamentConfig:
        """Build the format settings, falling back to defaults for blanks."""

        def value(field: Any) -> Any:
            return field.data if field.data is not None else field.default

        return TournamentConfig(
            sport=self.sport.data or SPORTS[0],
            category=self.category.data or "",
            mode=self.mode.data or MODE_SINGLES,
            sets_per_match=value(self.setsPerMatch),
            games_per_set=value(self.gamesPerSet),
            set_tiebreak_points=value(self.setTiebreakPoints),
            match_tiebreak_points=value(self.matchTiebreakPoints),
            group_count=value(self.groupCount),
            advance_count=value(self.advanceCount),
            club_id=self.clubId.data or None,
        )


class ResultForm(FlaskForm):
    """Flat fields of a match result submission."""

    winner = StringField("Winner", validators=[DataRequired()])
    runnerUp = StringField("Runner-up", validators=[Optional()])
    expectedVersion = IntegerField("Expected Version", validators=[Optional()])


class InviteForm(FlaskForm):
    """Form for inviting someone to a tournament by e-mail."""

    email = StringField("Email", validators=[DataRequired(), Email()])


def _as_int(value: Any, field: str) -> Opt[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("Expected a whole number.", field=field)
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError("Expected a whole number.", field=field) from e
    if number < 0:
        raise ValidationError("Scores cannot be negative.", field=field)
    return number


def parse_participants(raw: Any) -> list[ParticipantEntry]:
    """Parse ``[{"playerIds": [...], "seed": bool}, ...]``."""
    if not isinstance(raw, list):
        raise ValidationError("Participants must be a list.", field="participants")
    entries = []
    for index, item in enumerate(raw):
        field = f"participants[{index}]"
        if not isinstance(item, dict):
            raise ValidationError("Each participant must be an object.", field=field)
        player_ids = item.get("playerIds")
        if not isinstance(player_ids, list):
            raise ValidationError("playerIds must be a list.", field=field)
        try:
            ids = [normalize_id(pid) for pid in player_ids]
        except ValueError as e:
            raise ValidationError(str(e), field=field) from e
        if any(pid is None for pid in ids):
            raise ValidationError("Player IDs cannot be empty.", field=field)
        entries.append(
            ParticipantEntry(
                player_ids=[pid for pid in ids if pid], seed=bool(item.get("seed"))
            )
        )
    return entries


def parse_sets(raw: Any) -> list[SetScore]:
    """Parse ``[{"gamesA": 6, "gamesB": 4, "tiebreakA": ..., ...}, ...]``."""
    if not isinstance(raw, list):
        raise ValidationError("Sets must be a list.", field="sets")
    sets = []
    for index, item in enumerate(raw):
        field = f"sets[{index}]"
        if not isinstance(item, dict):
            raise ValidationError("Each set must be an object.", field=field)
        games_a = _as_int(item.get("gamesA"), field)
        games_b = _as_int(item.get("gamesB"), field)
        if games_a is None or games_b is None:
            raise ValidationError("Both game counts are required.", field=field)
        tiebreak_a = _as_int(item.get("tiebreakA"), f"{field}.tiebreak")
        tiebreak_b = _as_int(item.get("tiebreakB"), f"{field}.tiebreak")
        # A 0-0 tiebreak means the clients left it blank.
        if not tiebreak_a and not tiebreak_b:
            tiebreak_a = tiebreak_b = None
        sets.append(SetScore(games_a, games_b, tiebreak_a, tiebreak_b))
    return sets


def parse_match_tiebreak(raw: Any) -> Opt[MatchTiebreak]:
    """Parse ``{"pointsA": 10, "pointsB": 8}``; all blank or zero means none."""
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValidationError("The match tiebreak must be an object.", field="matchTiebreak")
    points_a = _as_int(raw.get("pointsA"), "matchTiebreak")
    points_b = _as_int(raw.get("pointsB"), "matchTiebreak")
    if not points_a and not points_b:
        return None
    return MatchTiebreak(points_a or 0, points_b or 0)


def parse_scheduled_at(raw: Any) -> Opt[datetime.datetime]:
    """Parse an ISO 8601 date and time; null or blank clears the schedule."""
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise ValidationError("scheduledAt must be an ISO date and time.", field="scheduledAt")
    try:
        return datetime.datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(
            "scheduledAt must be an ISO date and time.", field="scheduledAt"
        ) from e
