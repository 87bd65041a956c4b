"""Data models for the tournament blueprint.

The whole tournament, including its groups, rounds and matches, is stored as a
single Firestore document. These dataclasses are the in-memory form of that
document; ``from_dict``/``to_dict`` are the only place the stored field names
appear.
"""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from racketdraw.constants import (
    DEFAULT_ADVANCE_COUNT,
    DEFAULT_GROUP_COUNT,
    DEFAULT_MATCH_TIEBREAK_POINTS,
    DEFAULT_SET_TIEBREAK_POINTS,
    MODE_DOUBLES,
    MODE_SINGLES,
)
from racketdraw.core.ids import normalize_id

BYE = "BYE"


class TournamentType(str, enum.Enum):
    """Supported tournament formats."""

    ROUND_ROBIN = "RoundRobin"
    ELIMINATION = "Elimination"


class TournamentStatus(str, enum.Enum):
    """Tournament status. Transitions only move forward."""

    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"

    @property
    def rank(self) -> int:
        """Position of the status in the lifecycle."""
        return list(TournamentStatus).index(self)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class SetScore:
    """Games won by each side in one set, plus tiebreak points on a tied set."""

    games_a: int
    games_b: int
    tiebreak_a: Optional[int] = None
    tiebreak_b: Optional[int] = None

    @property
    def has_tiebreak(self) -> bool:
        return self.tiebreak_a is not None and self.tiebreak_b is not None

    def winning_side(self) -> Optional[str]:
        """Return "a" or "b" for the side that took the set, None if undecided."""
        if self.games_a > self.games_b:
            return "a"
        if self.games_b > self.games_a:
            return "b"
        if self.has_tiebreak:
            if self.tiebreak_a > self.tiebreak_b:
                return "a"
            if self.tiebreak_b > self.tiebreak_a:
                return "b"
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"gamesA": self.games_a, "gamesB": self.games_b}
        if self.has_tiebreak:
            data["tiebreakA"] = self.tiebreak_a
            data["tiebreakB"] = self.tiebreak_b
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SetScore:
        return cls(
            games_a=int(data.get("gamesA", 0)),
            games_b=int(data.get("gamesB", 0)),
            tiebreak_a=_optional_int(data.get("tiebreakA")),
            tiebreak_b=_optional_int(data.get("tiebreakB")),
        )


@dataclass
class MatchTiebreak:
    """Points of the deciding tiebreak played instead of a third set."""

    points_a: int
    points_b: int

    def to_dict(self) -> dict[str, Any]:
        return {"pointsA": self.points_a, "pointsB": self.points_b}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional[MatchTiebreak]:
        if not data:
            return None
        points_a = _optional_int(data.get("pointsA"))
        points_b = _optional_int(data.get("pointsB"))
        if points_a is None and points_b is None:
            return None
        return cls(points_a=points_a or 0, points_b=points_b or 0)


@dataclass
class Result:
    """The recorded outcome of a match."""

    sets: list[SetScore] = field(default_factory=list)
    match_tiebreak: Optional[MatchTiebreak] = None
    winner: Optional[str] = None
    runner_up: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sets": [s.to_dict() for s in self.sets],
            "matchTiebreak": self.match_tiebreak.to_dict()
            if self.match_tiebreak
            else None,
            "winner": self.winner,
            "runnerUp": self.runner_up,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Result:
        data = data or {}
        return cls(
            sets=[SetScore.from_dict(s) for s in data.get("sets") or []],
            match_tiebreak=MatchTiebreak.from_dict(data.get("matchTiebreak")),
            winner=normalize_id(data.get("winner")),
            runner_up=normalize_id(data.get("runnerUp")),
        )


@dataclass
class Match:
    """A match between two slots; a slot holds a participant id or ``BYE``."""

    id: str
    slot_a: str
    slot_b: str
    result: Result = field(default_factory=Result)
    scheduled_at: Optional[datetime.datetime] = None

    @property
    def has_bye(self) -> bool:
        return BYE in (self.slot_a, self.slot_b)

    @property
    def winner(self) -> Optional[str]:
        return self.result.winner

    @property
    def is_decided(self) -> bool:
        return self.result.winner is not None

    @property
    def slots(self) -> tuple[str, str]:
        return (self.slot_a, self.slot_b)

    def opponent_of(self, participant_id: str) -> str:
        """Return the other slot of the match."""
        if participant_id == self.slot_a:
            return self.slot_b
        if participant_id == self.slot_b:
            return self.slot_a
        raise ValueError(f"{participant_id} does not play in match {self.id}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slotA": self.slot_a,
            "slotB": self.slot_b,
            "result": self.result.to_dict(),
            "scheduledAt": self.scheduled_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Match:
        scheduled_at = data.get("scheduledAt")
        if scheduled_at is not None and hasattr(scheduled_at, "to_datetime"):
            scheduled_at = scheduled_at.to_datetime()
        return cls(
            id=normalize_id(data.get("id")) or "",
            slot_a=normalize_id(data.get("slotA")) or BYE,
            slot_b=normalize_id(data.get("slotB")) or BYE,
            result=Result.from_dict(data.get("result")),
            scheduled_at=scheduled_at,
        )


@dataclass
class Participant:
    """A tournament entrant: one player, or a pair of players in doubles."""

    id: str
    player_ids: list[str]
    seed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "playerIds": list(self.player_ids), "seed": self.seed}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Participant:
        return cls(
            id=normalize_id(data.get("id")) or "",
            player_ids=[
                pid
                for pid in (normalize_id(p) for p in data.get("playerIds") or [])
                if pid
            ],
            seed=bool(data.get("seed", False)),
        )


@dataclass
class StandingEntry:
    """One participant's tally within a group."""

    participant_id: str
    wins: int = 0
    sets_won: int = 0
    games_won: int = 0

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.wins, self.sets_won, self.games_won)

    def to_dict(self) -> dict[str, Any]:
        return {
            "participantId": self.participant_id,
            "wins": self.wins,
            "setsWon": self.sets_won,
            "gamesWon": self.games_won,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StandingEntry:
        return cls(
            participant_id=normalize_id(data.get("participantId")) or "",
            wins=int(data.get("wins", 0)),
            sets_won=int(data.get("setsWon", 0)),
            games_won=int(data.get("gamesWon", 0)),
        )


@dataclass
class Group:
    """A round-robin pool."""

    id: str
    name: str
    participant_ids: list[str] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)
    standings: list[StandingEntry] = field(default_factory=list)
    tiebreak_order: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return all(m.is_decided for m in self.matches)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "participantIds": list(self.participant_ids),
            "matches": [m.to_dict() for m in self.matches],
            "standings": [s.to_dict() for s in self.standings],
            "tiebreakOrder": list(self.tiebreak_order),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Group:
        return cls(
            id=normalize_id(data.get("id")) or "",
            name=data.get("name", ""),
            participant_ids=[
                pid
                for pid in (normalize_id(p) for p in data.get("participantIds") or [])
                if pid
            ],
            matches=[Match.from_dict(m) for m in data.get("matches") or []],
            standings=[StandingEntry.from_dict(s) for s in data.get("standings") or []],
            tiebreak_order=[
                pid
                for pid in (normalize_id(p) for p in data.get("tiebreakOrder") or [])
                if pid
            ],
        )


@dataclass
class Round:
    """One layer of an elimination bracket."""

    number: int
    matches: list[Match] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return all(m.is_decided for m in self.matches)

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number, "matches": [m.to_dict() for m in self.matches]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Round:
        return cls(
            number=int(data.get("number", 1)),
            matches=[Match.from_dict(m) for m in data.get("matches") or []],
        )


@dataclass
class TournamentConfig:
    """Format settings of a tournament."""

    sport: str = "Tennis"
    category: str = ""
    mode: str = MODE_SINGLES
    sets_per_match: int = 2
    games_per_set: int = 6
    set_tiebreak_points: int = DEFAULT_SET_TIEBREAK_POINTS
    match_tiebreak_points: int = DEFAULT_MATCH_TIEBREAK_POINTS
    group_count: int = DEFAULT_GROUP_COUNT
    advance_count: int = DEFAULT_ADVANCE_COUNT
    club_id: Optional[str] = None

    @property
    def players_per_participant(self) -> int:
        return 2 if self.mode == MODE_DOUBLES else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "sport": self.sport,
            "category": self.category,
            "mode": self.mode,
            "setsPerMatch": self.sets_per_match,
            "gamesPerSet": self.games_per_set,
            "setTiebreakPoints": self.set_tiebreak_points,
            "matchTiebreakPoints": self.match_tiebreak_points,
            "groupCount": self.group_count,
            "advanceCount": self.advance_count,
            "clubId": self.club_id,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> TournamentConfig:
        data = data or {}
        defaults = cls()
        return cls(
            sport=data.get("sport", defaults.sport),
            category=data.get("category", defaults.category),
            mode=data.get("mode", defaults.mode),
            sets_per_match=int(data.get("setsPerMatch", defaults.sets_per_match)),
            games_per_set=int(data.get("gamesPerSet", defaults.games_per_set)),
            set_tiebreak_points=int(
                data.get("setTiebreakPoints", defaults.set_tiebreak_points)
            ),
            match_tiebreak_points=int(
                data.get("matchTiebreakPoints", defaults.match_tiebreak_points)
            ),
            group_count=int(data.get("groupCount", defaults.group_count)),
            advance_count=int(data.get("advanceCount", defaults.advance_count)),
            club_id=normalize_id(data.get("clubId")),
        )


@dataclass
class Tournament:
    """The tournament aggregate, the unit of every write."""

    id: str
    name: str
    type: TournamentType
    config: TournamentConfig = field(default_factory=TournamentConfig)
    status: TournamentStatus = TournamentStatus.PENDING
    draft: bool = False
    creator_id: Optional[str] = None
    participants: list[Participant] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    rounds: list[Round] = field(default_factory=list)
    winner: Optional[str] = None
    runner_up: Optional[str] = None
    version: int = 0
    created_at: Any = None

    def participant(self, participant_id: str) -> Optional[Participant]:
        for p in self.participants:
            if p.id == participant_id:
                return p
        return None

    def iter_matches(self) -> Iterator[Match]:
        for group in self.groups:
            yield from group.matches
        for rnd in self.rounds:
            yield from rnd.matches

    def find_match(
        self, match_id: str
    ) -> tuple[Optional[Match], Optional[Group], Optional[Round]]:
        """Locate a match in whichever group or round contains it."""
        for group in self.groups:
            for match in group.matches:
                if match.id == match_id:
                    return match, group, None
        for rnd in self.rounds:
            for match in rnd.matches:
                if match.id == match_id:
                    return match, None, rnd
        return None, None, None

    def group(self, group_id: str) -> Optional[Group]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    @property
    def has_results(self) -> bool:
        """True once any match outside a bye has been decided."""
        return any(m.is_decided and not m.has_bye for m in self.iter_matches())

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "config": self.config.to_dict(),
            "status": self.status.value,
            "draft": self.draft,
            "creatorId": self.creator_id,
            "participants": [p.to_dict() for p in self.participants],
            "participantPlayerIds": sorted(
                {pid for p in self.participants for pid in p.player_ids}
            ),
            "groups": [g.to_dict() for g in self.groups],
            "rounds": [r.to_dict() for r in self.rounds],
            "winner": self.winner,
            "runnerUp": self.runner_up,
            "version": self.version,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, tournament_id: str, data: dict[str, Any]) -> Tournament:
        return cls(
            id=tournament_id,
            name=data.get("name", ""),
            type=TournamentType(data.get("type", TournamentType.ROUND_ROBIN.value)),
            config=TournamentConfig.from_dict(data.get("config")),
            status=TournamentStatus(data.get("status", TournamentStatus.PENDING.value)),
            draft=bool(data.get("draft", False)),
            creator_id=normalize_id(data.get("creatorId")),
            participants=[Participant.from_dict(p) for p in data.get("participants") or []],
            groups=[Group.from_dict(g) for g in data.get("groups") or []],
            rounds=sorted(
                (Round.from_dict(r) for r in data.get("rounds") or []),
                key=lambda r: r.number,
            ),
            winner=normalize_id(data.get("winner")),
            runner_up=normalize_id(data.get("runnerUp")),
            version=int(data.get("version", 0)),
            created_at=data.get("createdAt"),
        )


@dataclass
class ParticipantEntry:
    """A participant as submitted at tournament creation."""

    player_ids: list[str]
    seed: bool = False


@dataclass
class TournamentSubmission:
    """Dataclass for a tournament creation request."""

    name: str
    type: TournamentType
    config: TournamentConfig
    participants: list[ParticipantEntry]
    draft: bool = False


@dataclass
class ResultSubmission:
    """Dataclass for a match result submission."""

    match_id: str
    sets: list[SetScore]
    winner: Optional[str]
    match_tiebreak: Optional[MatchTiebreak] = None
    runner_up: Optional[str] = None
    expected_version: Optional[int] = None
