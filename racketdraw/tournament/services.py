"""Service layer for tournament business logic.

``TournamentService`` owns the tournament lifecycle: setup, result
submission, knockout generation, round advancement and finishing. Every
mutating operation validates first and writes the whole aggregate through
``store.mutate_tournament``; a rejected operation leaves storage untouched.
"""

from __future__ import annotations

import datetime
import logging
import random
from typing import TYPE_CHECKING, Any, Optional, Sequence

from firebase_admin import firestore

from racketdraw.constants import (
    ALLOWED_GAMES_PER_SET,
    ALLOWED_SETS_PER_MATCH,
    MAX_SEEDS,
    MAX_TIEBREAK_POINTS,
    MIN_PARTICIPANTS,
    MIN_TIEBREAK_POINTS,
    MODE_DOUBLES,
    MODE_SINGLES,
    ROLE_ADMIN,
    SPORTS,
)
from racketdraw.club.services import ClubService
from racketdraw.core.ids import new_id
from racketdraw.errors import (
    IncompleteGroupStage,
    IncompleteResults,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    UnknownParticipant,
    UnknownPlayer,
    ValidationError,
    WinnerMismatch,
)
from racketdraw.player.models import display_name
from racketdraw.player.services import PlayerService
from racketdraw.utils import EmailError, send_email

from . import store
from .bracket import build_initial_bracket, build_knockout_from_groups
from .draw import build_groups
from .models import (
    BYE,
    Match,
    Participant,
    Result,
    ResultSubmission,
    Tournament,
    TournamentConfig,
    TournamentStatus,
    TournamentSubmission,
    TournamentType,
)
from .rounds import advance_round, get_round_name, is_final_round
from .scoring import SetValidation, determine_match_winner, is_split, validate_set
from .standings import compute_standings, draw_tie_winner, pooled_standings

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.transaction import Transaction

logger = logging.getLogger(__name__)

WINNER_POSITION = 1
RUNNER_UP_POSITION = 2


def _transition(tournament: Tournament, target: TournamentStatus) -> None:
    """Move the status forward; never backwards."""
    if target.rank < tournament.status.rank:
        raise InvalidStateError(
            f"Tournament status cannot go from {tournament.status.value} "
            f"back to {target.value}."
        )
    if target != tournament.status:
        logger.info(
            "Tournament %s: %s -> %s",
            tournament.id,
            tournament.status.value,
            target.value,
        )
    tournament.status = target


def _ensure_not_finished(tournament: Tournament) -> None:
    if tournament.status == TournamentStatus.FINISHED:
        raise InvalidStateError("The tournament is already finished.")


class TournamentService:
    """Handles business logic and data access for tournaments."""

    # ------------------------------------------------------------------ setup

    @staticmethod
    def validate_config(config: TournamentConfig) -> None:
        """Check format settings against the supported values."""
        if config.sport not in SPORTS:
            raise ValidationError(
                f"Sport must be one of {', '.join(SPORTS)}.", field="sport"
            )
        if config.mode not in (MODE_SINGLES, MODE_DOUBLES):
            raise ValidationError("Mode must be Singles or Doubles.", field="mode")
        if config.sets_per_match not in ALLOWED_SETS_PER_MATCH:
            raise ValidationError("Matches are played to 1 or 2 sets.", field="setsPerMatch")
        if config.games_per_set not in ALLOWED_GAMES_PER_SET:
            raise ValidationError("Sets are played to 4 or 6 games.", field="gamesPerSet")
        for name, value in (
            ("setTiebreakPoints", config.set_tiebreak_points),
            ("matchTiebreakPoints", config.match_tiebreak_points),
        ):
            if not MIN_TIEBREAK_POINTS <= value <= MAX_TIEBREAK_POINTS:
                raise ValidationError(
                    f"Tiebreaks are played to between {MIN_TIEBREAK_POINTS} "
                    f"and {MAX_TIEBREAK_POINTS} points.",
                    field=name,
                )
        if config.group_count < 1:
            raise ValidationError("There must be at least one group.", field="groupCount")
        if config.advance_count < 1:
            raise ValidationError(
                "At least one participant per group must advance.", field="advanceCount"
            )

    @staticmethod
    def _build_participants(
        submission: TournamentSubmission, db: Client
    ) -> list[Participant]:
        """Validate submitted entrants and give each an ID."""
        entries = submission.participants
        size = submission.config.players_per_participant
        if len(entries) < MIN_PARTICIPANTS:
            raise ValidationError(
                f"A tournament needs at least {MIN_PARTICIPANTS} participants.",
                field="participants",
            )

        seen: set[str] = set()
        for index, entry in enumerate(entries):
            if len(entry.player_ids) != size or len(set(entry.player_ids)) != size:
                raise ValidationError(
                    f"Each {submission.config.mode.lower()} participant needs "
                    f"{size} distinct player(s).",
                    field=f"participants[{index}]",
                )
            repeated = seen.intersection(entry.player_ids)
            if repeated:
                raise ValidationError(
                    f"Player {sorted(repeated)[0]} is entered more than once.",
                    field=f"participants[{index}]",
                )
            seen.update(entry.player_ids)

        if sum(1 for e in entries if e.seed) > MAX_SEEDS:
            raise ValidationError(
                f"At most {MAX_SEEDS} participants can be seeded.", field="participants"
            )

        missing = seen - PlayerService.find_players_by_ids(seen, db)
        if missing:
            raise UnknownPlayer(f"Unknown player(s): {', '.join(sorted(missing))}.")

        return [
            Participant(id=new_id(), player_ids=list(e.player_ids), seed=e.seed)
            for e in entries
        ]

    @staticmethod
    def _build_draw(tournament: Tournament, rng: random.Random | None = None) -> None:
        """(Re)generate the groups or the first bracket round."""
        ids = [p.id for p in tournament.participants]
        seeded = [p.id for p in tournament.participants if p.seed]
        if tournament.type == TournamentType.ROUND_ROBIN:
            tournament.groups = build_groups(
                ids, seeded, tournament.config.group_count, rng
            )
            for group in tournament.groups:
                group.standings = compute_standings(group)
            tournament.rounds = []
        else:
            tournament.groups = []
            tournament.rounds = [build_initial_bracket(ids, seeded, rng)]

    @staticmethod
    def create_tournament(
        submission: TournamentSubmission,
        creator_id: str,
        db: Client | None = None,
        rng: random.Random | None = None,
    ) -> Tournament:
        """Create a tournament with its draw and return it."""
        if db is None:
            db = firestore.client()
        if not submission.name or not submission.name.strip():
            raise ValidationError("Tournament name is required.", field="name")
        TournamentService.validate_config(submission.config)
        if submission.config.club_id:
            try:
                ClubService.get_club(submission.config.club_id, db)
            except NotFoundError as e:
                raise ValidationError("Unknown club.", field="clubId") from e

        tournament = Tournament(
            id="",
            name=submission.name.strip(),
            type=submission.type,
            config=submission.config,
            draft=submission.draft,
            creator_id=creator_id,
            participants=TournamentService._build_participants(submission, db),
        )
        TournamentService._build_draw(tournament, rng)
        store.add_tournament(db, tournament)
        logger.info(
            "Created %s tournament %s with %d participants",
            tournament.type.value,
            tournament.id,
            len(tournament.participants),
        )
        return tournament

    @staticmethod
    def regenerate_draw(
        tournament_id: str,
        seeded_ids: Optional[Sequence[str]] = None,
        db: Client | None = None,
        rng: random.Random | None = None,
    ) -> Tournament:
        """Rebuild the groups or first round, optionally with new seeds.

        Only allowed before any result has been recorded.
        """
        if db is None:
            db = firestore.client()

        def _apply(tournament: Tournament, transaction: Transaction) -> None:
            if tournament.status != TournamentStatus.PENDING or tournament.has_results:
                raise InvalidStateError(
                    "The draw cannot change once results are recorded."
                )
            if tournament.type == TournamentType.ROUND_ROBIN and tournament.rounds:
                raise InvalidStateError("The knockout phase has already been generated.")
            if seeded_ids is not None:
                seeds = set(seeded_ids)
                if len(seeds) > MAX_SEEDS:
                    raise ValidationError(
                        f"At most {MAX_SEEDS} participants can be seeded.", field="seeds"
                    )
                unknown = seeds - {p.id for p in tournament.participants}
                if unknown:
                    raise UnknownParticipant(
                        f"Unknown participant(s): {', '.join(sorted(unknown))}."
                    )
                for participant in tournament.participants:
                    participant.seed = participant.id in seeds
            TournamentService._build_draw(tournament, rng)

        return store.mutate_tournament(db, tournament_id, _apply)

    @staticmethod
    def publish_tournament(tournament_id: str, db: Client | None = None) -> Tournament:
        """Clear the draft flag so the tournament is visible to everyone."""
        if db is None:
            db = firestore.client()

        def _apply(tournament: Tournament, transaction: Transaction) -> bool:
            if not tournament.draft:
                return False
            tournament.draft = False
            return True

        return store.mutate_tournament(db, tournament_id, _apply)

    # ------------------------------------------------------------ read models

    @staticmethod
    def can_view(tournament: Tournament, user: Optional[dict[str, Any]]) -> bool:
        """Drafts are visible to admins and their creator only."""
        if not tournament.draft:
            return True
        if not user:
            return False
        return user.get("role") == ROLE_ADMIN or user.get("uid") == tournament.creator_id

    @staticmethod
    def get_tournament(
        tournament_id: str,
        user: Optional[dict[str, Any]] = None,
        db: Client | None = None,
    ) -> Tournament:
        """Fetch a tournament the user may see."""
        if db is None:
            db = firestore.client()
        tournament = store.load_tournament(db, tournament_id)
        if not TournamentService.can_view(tournament, user):
            raise PermissionDeniedError("This tournament is not published yet.")
        return tournament

    @staticmethod
    def list_tournaments(
        user: dict[str, Any],
        status: Optional[str] = None,
        db: Client | None = None,
    ) -> list[Tournament]:
        """Published tournaments; non-admins also skip others' pending ones."""
        if db is None:
            db = firestore.client()
        is_admin = user.get("role") == ROLE_ADMIN
        tournaments = []
        for tournament in store.stream_tournaments(db):
            if status and tournament.status.value != status:
                continue
            if (
                not is_admin
                and tournament.status == TournamentStatus.PENDING
                and tournament.creator_id != user.get("uid")
            ):
                continue
            tournaments.append(tournament)
        return tournaments

    @staticmethod
    def get_standings(
        tournament_id: str,
        user: Optional[dict[str, Any]] = None,
        db: Client | None = None,
    ) -> list[dict[str, Any]]:
        """Computed standings of every group of a visible tournament."""
        tournament = TournamentService.get_tournament(tournament_id, user, db)
        return TournamentService.standings_view(tournament)

    @staticmethod
    def get_bracket(
        tournament_id: str,
        user: Optional[dict[str, Any]] = None,
        db: Client | None = None,
    ) -> list[dict[str, Any]]:
        """Bracket rounds of a visible tournament."""
        tournament = TournamentService.get_tournament(tournament_id, user, db)
        return TournamentService.bracket_view(tournament)

    @staticmethod
    def standings_view(tournament: Tournament) -> list[dict[str, Any]]:
        """Per-group standings, computed from the current results."""
        return [
            {
                "groupId": group.id,
                "name": group.name,
                "complete": group.is_complete,
                "standings": [e.to_dict() for e in compute_standings(group)],
            }
            for group in tournament.groups
        ]

    @staticmethod
    def bracket_view(tournament: Tournament) -> list[dict[str, Any]]:
        """Bracket rounds with their display names."""
        return [
            {
                "number": rnd.number,
                "name": get_round_name(len(rnd.matches)),
                "complete": rnd.is_complete,
                "matches": [m.to_dict() for m in rnd.matches],
            }
            for rnd in tournament.rounds
        ]

    # ---------------------------------------------------------------- results

    @staticmethod
    def score_result(
        config: TournamentConfig, match: Match, submission: ResultSubmission
    ) -> Result:
        """Validate submitted sets and return the result with its computed winner.

        Raises:
            ValidationError: If a set, the match tiebreak or the winner is malformed.
            NoDecision: If the scores do not decide the match.
            WinnerMismatch: If the declared winner is not the computed one.
        """
        sets = submission.sets
        if not sets:
            raise ValidationError("At least one set is required.", field="sets")
        if len(sets) > config.sets_per_match:
            raise ValidationError(
                f"Matches are played to at most {config.sets_per_match} set(s).",
                field="sets",
            )

        for index, set_score in enumerate(sets):
            outcome = validate_set(
                set_score, config.games_per_set, config.set_tiebreak_points
            )
            score = f"{set_score.games_a}-{set_score.games_b}"
            if outcome == SetValidation.INVALID_SCORELINE:
                raise ValidationError(
                    f"Set {index + 1} has an invalid score {score}.",
                    field=f"sets[{index}]",
                )
            if outcome == SetValidation.MISSING_TIEBREAK:
                raise ValidationError(
                    f"Set {index + 1} is tied {score} and needs a tiebreak won by "
                    f"2 points, first to {config.set_tiebreak_points}.",
                    field=f"sets[{index}].tiebreak",
                )

        split = is_split(sets, config.sets_per_match)
        if submission.match_tiebreak is not None and not split:
            raise ValidationError(
                "A match tiebreak is only played at one set all.", field="matchTiebreak"
            )

        if submission.winner is None:
            raise ValidationError("The winner is required.", field="winner")

        winner = determine_match_winner(
            sets,
            match.slot_a,
            match.slot_b,
            config.sets_per_match,
            submission.match_tiebreak,
            config.match_tiebreak_points,
        )
        if submission.winner != winner:
            logger.warning(
                "Declared winner %s differs from computed winner %s for match %s",
                submission.winner,
                winner,
                match.id,
            )
            raise WinnerMismatch()

        return Result(
            sets=list(sets),
            match_tiebreak=submission.match_tiebreak if split else None,
            winner=winner,
        )

    @staticmethod
    def _check_players_exist(
        tournament: Tournament, match: Match, db: Client
    ) -> None:
        player_ids: set[str] = set()
        for slot in match.slots:
            participant = tournament.participant(slot)
            if participant is None:
                raise UnknownParticipant(
                    f"Match {match.id} references unknown participant {slot}."
                )
            player_ids.update(participant.player_ids)
        missing = player_ids - PlayerService.find_players_by_ids(player_ids, db)
        if missing:
            raise UnknownPlayer(f"Unknown player(s): {', '.join(sorted(missing))}.")

    @staticmethod
    def submit_match_result(
        tournament_id: str,
        submission: ResultSubmission,
        db: Client | None = None,
    ) -> Tournament:
        """Validate and store a match result.

        Recording the final with a runner-up stores the tournament's winner and
        runner-up, but finishing the tournament stays a separate action.
        Resubmitting the stored result changes nothing.
        """
        if db is None:
            db = firestore.client()

        def _apply(tournament: Tournament, transaction: Transaction) -> bool:
            _ensure_not_finished(tournament)
            match, group, rnd = tournament.find_match(submission.match_id)
            if match is None:
                raise NotFoundError("Match not found.")
            if match.has_bye:
                raise ValidationError(
                    "A match against a bye is decided automatically.", field="matchId"
                )

            TournamentService._check_players_exist(tournament, match, db)
            result = TournamentService.score_result(tournament.config, match, submission)

            is_final = (
                rnd is not None and rnd is tournament.rounds[-1] and is_final_round(rnd)
            )
            if submission.runner_up is not None:
                if not is_final:
                    raise ValidationError(
                        "A runner-up is only recorded for the final.", field="runnerUp"
                    )
                if submission.runner_up != match.opponent_of(result.winner):
                    raise ValidationError(
                        "The runner-up must be the losing finalist.", field="runnerUp"
                    )
                result.runner_up = submission.runner_up

            if result == match.result:
                return False

            if group is not None and tournament.rounds:
                raise InvalidStateError(
                    "Group results are locked once the knockout phase exists."
                )
            if rnd is not None and rnd is not tournament.rounds[-1]:
                raise InvalidStateError(
                    f"Round {rnd.number} is locked; a later round already exists."
                )

            match.result = result
            if group is not None:
                group.standings = compute_standings(group)
            if is_final:
                if result.runner_up:
                    tournament.winner = result.winner
                    tournament.runner_up = result.runner_up
                else:
                    tournament.winner = tournament.runner_up = None
            _transition(tournament, TournamentStatus.IN_PROGRESS)
            logger.info(
                "Recorded result of match %s in tournament %s", match.id, tournament.id
            )
            return True

        return store.mutate_tournament(
            db, tournament_id, _apply, submission.expected_version
        )

    @staticmethod
    def schedule_match(
        tournament_id: str,
        match_id: str,
        scheduled_at: Optional[datetime.datetime],
        db: Client | None = None,
        expected_version: int | None = None,
    ) -> Tournament:
        """Set or clear the date and time a match is to be played."""
        if db is None:
            db = firestore.client()

        def _apply(tournament: Tournament, transaction: Transaction) -> bool:
            _ensure_not_finished(tournament)
            match, _, _ = tournament.find_match(match_id)
            if match is None:
                raise NotFoundError("Match not found.")
            if match.has_bye:
                raise ValidationError(
                    "A match against a bye is never played.", field="matchId"
                )
            if match.is_decided:
                raise InvalidStateError("The match has already been played.")
            if match.scheduled_at == scheduled_at:
                return False
            match.scheduled_at = scheduled_at
            return True

        return store.mutate_tournament(db, tournament_id, _apply, expected_version)

    # ---------------------------------------------------------------- phases

    @staticmethod
    def request_knockout_generation(
        tournament_id: str,
        db: Client | None = None,
        rng: random.Random | None = None,
        expected_version: int | None = None,
    ) -> Tournament:
        """Build the first knockout round from the completed groups."""
        if db is None:
            db = firestore.client()

        def _apply(tournament: Tournament, transaction: Transaction) -> None:
            _ensure_not_finished(tournament)
            if tournament.type != TournamentType.ROUND_ROBIN:
                raise InvalidStateError(
                    "Only round robin tournaments have a knockout phase."
                )
            if tournament.rounds:
                raise InvalidStateError("The knockout phase has already been generated.")

            first_round = build_knockout_from_groups(
                tournament.groups, tournament.config.advance_count, rng
            )
            for group in tournament.groups:
                group.standings = compute_standings(group)
            tournament.rounds.append(first_round)
            _transition(tournament, TournamentStatus.IN_PROGRESS)
            logger.info(
                "Generated knockout phase for tournament %s with %d matches",
                tournament.id,
                len(first_round.matches),
            )

        return store.mutate_tournament(db, tournament_id, _apply, expected_version)

    @staticmethod
    def request_round_advance(
        tournament_id: str,
        db: Client | None = None,
        expected_version: int | None = None,
    ) -> Tournament:
        """Append the next bracket round built from the last round's winners."""
        if db is None:
            db = firestore.client()

        def _apply(tournament: Tournament, transaction: Transaction) -> None:
            _ensure_not_finished(tournament)
            if not tournament.rounds:
                raise InvalidStateError("There is no bracket round to advance.")
            next_round = advance_round(tournament.rounds[-1])
            if next_round is None:
                raise InvalidStateError(
                    "The final has been decided; finish the tournament instead."
                )
            tournament.rounds.append(next_round)
            _transition(tournament, TournamentStatus.IN_PROGRESS)
            logger.info(
                "Tournament %s advanced to round %d", tournament.id, next_round.number
            )

        return store.mutate_tournament(db, tournament_id, _apply, expected_version)

    @staticmethod
    def resolve_podium(tournament: Tournament) -> tuple[str, str]:
        """Return (winner, runner-up) participant IDs.

        Raises:
            IncompleteResults: If the results do not determine both yet.
        """
        if tournament.rounds:
            final = tournament.rounds[-1]
            if not is_final_round(final) or not final.matches[0].is_decided:
                raise IncompleteResults("The final has not been played yet.")
            match = final.matches[0]
            winner = match.winner
            runner_up = match.result.runner_up or match.opponent_of(winner)
            if runner_up == BYE:
                raise IncompleteResults("The final has no runner-up.")
            return winner, runner_up

        if tournament.type == TournamentType.ROUND_ROBIN and tournament.groups:
            if not all(group.is_complete for group in tournament.groups):
                raise IncompleteResults("Some group matches have no result yet.")
            ranking = pooled_standings(tournament.groups)
            if len(ranking) < MIN_PARTICIPANTS:
                raise IncompleteResults("Not enough participants to rank.")
            return ranking[0].participant_id, ranking[1].participant_id

        raise IncompleteResults("There are no matches to decide a winner.")

    @staticmethod
    def finish_tournament(
        tournament_id: str,
        db: Client | None = None,
        today: datetime.date | None = None,
        expected_version: int | None = None,
    ) -> Tournament:
        """Mark the tournament finished and record the podium on the players."""
        if db is None:
            db = firestore.client()
        date = (today or datetime.datetime.now(datetime.timezone.utc).date()).isoformat()

        def _apply(tournament: Tournament, transaction: Transaction) -> None:
            _ensure_not_finished(tournament)
            winner, runner_up = TournamentService.resolve_podium(tournament)
            tournament.winner = winner
            tournament.runner_up = runner_up
            _transition(tournament, TournamentStatus.FINISHED)

            for participant_id, position in (
                (winner, WINNER_POSITION),
                (runner_up, RUNNER_UP_POSITION),
            ):
                participant = tournament.participant(participant_id)
                if participant is None:
                    raise UnknownParticipant(
                        f"Podium participant {participant_id} is not entered."
                    )
                for player_id in participant.player_ids:
                    PlayerService.append_achievement(
                        transaction, db, player_id, tournament.id, position, date
                    )

        return store.mutate_tournament(db, tournament_id, _apply, expected_version)

    @staticmethod
    def resolve_group_tie(
        tournament_id: str,
        group_id: str,
        db: Client | None = None,
        rng: random.Random | None = None,
    ) -> Tournament:
        """Break a tie for first place in a group by random draw."""
        if db is None:
            db = firestore.client()

        def _apply(tournament: Tournament, transaction: Transaction) -> None:
            _ensure_not_finished(tournament)
            if tournament.type != TournamentType.ROUND_ROBIN:
                raise InvalidStateError("Only round robin groups can have ties.")
            if tournament.rounds:
                raise InvalidStateError(
                    "Group standings are locked once the knockout phase exists."
                )
            group = tournament.group(group_id)
            if group is None:
                raise NotFoundError("Group not found.")
            if not group.is_complete:
                raise IncompleteGroupStage(
                    f"Group {group.name} still has matches without a winner."
                )
            drawn = draw_tie_winner(group, rng)
            if drawn is None:
                raise InvalidStateError(f"There is no tie for first in {group.name}.")
            group.tiebreak_order = [drawn] + [
                pid for pid in group.tiebreak_order if pid != drawn
            ]
            group.standings = compute_standings(group)
            logger.info("Tie in %s of %s drawn for %s", group.name, tournament.id, drawn)

        return store.mutate_tournament(db, tournament_id, _apply)

    # ---------------------------------------------------------- notifications

    @staticmethod
    def podium_names(
        tournament: Tournament, db: Client | None = None
    ) -> dict[str, str]:
        """Display names of every participant, "A / B" for doubles pairs."""
        if db is None:
            db = firestore.client()
        players = PlayerService.get_players(
            [pid for p in tournament.participants for pid in p.player_ids], db
        )
        return {
            p.id: " / ".join(display_name(players.get(pid)) for pid in p.player_ids)
            for p in tournament.participants
        }

    @staticmethod
    def send_results_email(tournament: Tournament, db: Client | None = None) -> int:
        """E-mail the final results to every participating player with an address.

        Failures are logged and skipped. Returns the number of e-mails sent.
        """
        if db is None:
            db = firestore.client()
        if tournament.status != TournamentStatus.FINISHED:
            raise InvalidStateError("Results are sent once the tournament is finished.")

        names = TournamentService.podium_names(tournament, db)
        players = PlayerService.get_players(
            [pid for p in tournament.participants for pid in p.player_ids], db
        )
        sent = 0
        for player in players.values():
            email = player.get("email")
            if not email:
                continue
            try:
                send_email(
                    to=email,
                    subject=f"Results: {tournament.name}",
                    template="email/tournament_results.html",
                    player=player,
                    tournament=tournament,
                    winner=names.get(tournament.winner or "", ""),
                    runner_up=names.get(tournament.runner_up or "", ""),
                    standings=[
                        (names.get(e.participant_id, e.participant_id), e)
                        for e in pooled_standings(tournament.groups)
                    ],
                )
                sent += 1
            except EmailError as e:
                logger.error("Failed to send results to %s: %s", player["id"], e)
        logger.info("Sent %d result e-mail(s) for tournament %s", sent, tournament.id)
        return sent

    @staticmethod
    def send_invitation(
        tournament_id: str,
        email: str,
        link: str,
        user: Optional[dict[str, Any]] = None,
        db: Client | None = None,
    ) -> None:
        """E-mail an invitation with a link to the tournament.

        Raises:
            EmailError: If the e-mail cannot be sent.
        """
        tournament = TournamentService.get_tournament(tournament_id, user, db)
        _ensure_not_finished(tournament)
        send_email(
            to=email,
            subject=f"Invitation to {tournament.name}",
            template="email/tournament_invite.html",
            tournament=tournament,
            link=link,
        )
        logger.info("Sent invitation for tournament %s", tournament.id)
