"""Service layer for the player directory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, cast

from firebase_admin import firestore

from racketdraw.constants import PLAYERS_COLLECTION
from racketdraw.core.ids import normalize_id
from racketdraw.errors import DuplicateResourceError, NotFoundError
from racketdraw.utils import firestore_timeout

from .models import Player

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.transaction import Transaction

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "phone",
    "photo",
    "dominantHand",
    "racketBrand",
    "userId",
)


class PlayerService:
    """Handles business logic and data access for players."""

    @staticmethod
    def _clean(data: dict[str, Any]) -> dict[str, Any]:
        """Keep editable fields, normalizing blanks to None."""
        cleaned: dict[str, Any] = {}
        for key in EDITABLE_FIELDS:
            if key in data:
                value = data[key]
                cleaned[key] = value.strip() if isinstance(value, str) else value
                if cleaned[key] == "":
                    cleaned[key] = None
        if "userId" in cleaned:
            cleaned["userId"] = normalize_id(cleaned["userId"])
        return cleaned

    @staticmethod
    def _ensure_unique_email(
        db: Client, email: str, player_id: str | None = None
    ) -> None:
        query = db.collection(PLAYERS_COLLECTION).where(
            filter=firestore.FieldFilter("email", "==", email)
        )
        for doc in query.limit(2).stream(timeout=firestore_timeout()):
            if doc.id != player_id:
                raise DuplicateResourceError(
                    f"A player with e-mail {email} already exists."
                )

    @staticmethod
    def create_player(data: dict[str, Any], db: Client | None = None) -> str:
        """Create a player and return its ID."""
        if db is None:
            db = firestore.client()
        payload = PlayerService._clean(data)
        if payload.get("email"):
            PlayerService._ensure_unique_email(db, payload["email"])
        if not payload.get("dominantHand"):
            payload["dominantHand"] = "right"
        payload.update(
            {
                "active": True,
                "matches": [],
                "createdAt": firestore.SERVER_TIMESTAMP,
            }
        )
        _, ref = db.collection(PLAYERS_COLLECTION).add(payload)
        logger.info("Created player %s", ref.id)
        return str(ref.id)

    @staticmethod
    def get_player(player_id: str, db: Client | None = None) -> Player:
        """Fetch a player by ID."""
        if db is None:
            db = firestore.client()
        doc = cast(
            "DocumentSnapshot",
            db.collection(PLAYERS_COLLECTION)
            .document(player_id)
            .get(timeout=firestore_timeout()),
        )
        data = doc.to_dict() if doc.exists else None
        if not data:
            raise NotFoundError("Player not found.")
        data["id"] = doc.id
        return cast(Player, data)

    @staticmethod
    def list_players(
        include_inactive: bool = False, db: Client | None = None
    ) -> list[dict[str, Any]]:
        """List players sorted by family name, active ones only by default."""
        if db is None:
            db = firestore.client()
        query: Any = db.collection(PLAYERS_COLLECTION)
        if not include_inactive:
            query = query.where(filter=firestore.FieldFilter("active", "==", True))

        players = []
        for doc in query.stream(timeout=firestore_timeout()):
            data = doc.to_dict()
            if data:
                data["id"] = doc.id
                players.append(data)
        players.sort(
            key=lambda p: (
                (p.get("lastName") or "").lower(),
                (p.get("firstName") or "").lower(),
            )
        )
        return players

    @staticmethod
    def update_player(
        player_id: str, data: dict[str, Any], db: Client | None = None
    ) -> None:
        """Update profile fields of a player."""
        if db is None:
            db = firestore.client()
        PlayerService.get_player(player_id, db)
        update_data = PlayerService._clean(data)
        if not update_data:
            return
        if update_data.get("email"):
            PlayerService._ensure_unique_email(db, update_data["email"], player_id)
        update_data["updatedAt"] = firestore.SERVER_TIMESTAMP
        db.collection(PLAYERS_COLLECTION).document(player_id).update(update_data)

    @staticmethod
    def deactivate_player(player_id: str, db: Client | None = None) -> None:
        """Mark a player inactive. Players are never deleted."""
        if db is None:
            db = firestore.client()
        PlayerService.get_player(player_id, db)
        db.collection(PLAYERS_COLLECTION).document(player_id).update(
            {"active": False, "updatedAt": firestore.SERVER_TIMESTAMP}
        )
        logger.info("Deactivated player %s", player_id)

    @staticmethod
    def get_players(
        player_ids: Iterable[str], db: Client | None = None
    ) -> dict[str, dict[str, Any]]:
        """Fetch existing players by ID, keyed by ID."""
        if db is None:
            db = firestore.client()
        unique_ids = {pid for pid in player_ids if pid}
        if not unique_ids:
            return {}
        refs = [db.collection(PLAYERS_COLLECTION).document(pid) for pid in unique_ids]
        docs = cast(list[Any], db.get_all(refs, timeout=firestore_timeout()))
        return {
            doc.id: {**(doc.to_dict() or {}), "id": doc.id}
            for doc in docs
            if doc.exists
        }

    @staticmethod
    def find_players_by_ids(
        player_ids: Iterable[str], db: Client | None = None
    ) -> set[str]:
        """Return the subset of ``player_ids`` that exist."""
        return set(PlayerService.get_players(player_ids, db))

    @staticmethod
    def append_achievement(  # noqa: PLR0913
        writer: Transaction | Any,
        db: Client,
        player_id: str,
        tournament_id: str,
        position: int,
        date: str,
    ) -> None:
        """Queue an achievement entry onto a player's history.

        ``writer`` is the transaction or batch the tournament write belongs to.
        """
        entry = {
            "type": "achievement",
            "tournamentId": tournament_id,
            "position": position,
            "date": date,
        }
        ref = db.collection(PLAYERS_COLLECTION).document(player_id)
        writer.update(ref, {"matches": firestore.ArrayUnion([entry])})
