"""Service layer for clubs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from racketdraw.constants import CLUBS_COLLECTION, TOURNAMENTS_COLLECTION
from racketdraw.errors import InvalidStateError, NotFoundError
from racketdraw.utils import firestore_timeout

from .models import Club

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


class ClubService:
    """Handles business logic and data access for clubs."""

    @staticmethod
    def _clean(data: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": (data.get("name") or "").strip(),
            "address": (data.get("address") or "").strip(),
            "phone": (data.get("phone") or "").strip(),
        }

    @staticmethod
    def create_club(data: dict[str, Any], db: Client | None = None) -> str:
        """Create a club and return its ID."""
        if db is None:
            db = firestore.client()
        payload = ClubService._clean(data)
        payload["createdAt"] = firestore.SERVER_TIMESTAMP
        _, ref = db.collection(CLUBS_COLLECTION).add(payload)
        logger.info("Created club %s", ref.id)
        return str(ref.id)

    @staticmethod
    def get_club(club_id: str, db: Client | None = None) -> Club:
        """Fetch a club by ID."""
        if db is None:
            db = firestore.client()
        doc = cast(
            "DocumentSnapshot",
            db.collection(CLUBS_COLLECTION)
            .document(club_id)
            .get(timeout=firestore_timeout()),
        )
        data = doc.to_dict() if doc.exists else None
        if not data:
            raise NotFoundError("Club not found.")
        data["id"] = doc.id
        return cast(Club, data)

    @staticmethod
    def list_clubs(db: Client | None = None) -> list[dict[str, Any]]:
        """List clubs sorted by name."""
        if db is None:
            db = firestore.client()
        clubs = []
        for doc in db.collection(CLUBS_COLLECTION).stream(timeout=firestore_timeout()):
            data = doc.to_dict()
            if data:
                data["id"] = doc.id
                clubs.append(data)
        clubs.sort(key=lambda c: (c.get("name") or "").lower())
        return clubs

    @staticmethod
    def update_club(club_id: str, data: dict[str, Any], db: Client | None = None) -> None:
        """Replace a club's name, address and phone."""
        if db is None:
            db = firestore.client()
        ClubService.get_club(club_id, db)
        update_data = ClubService._clean(data)
        update_data["updatedAt"] = firestore.SERVER_TIMESTAMP
        db.collection(CLUBS_COLLECTION).document(club_id).update(update_data)

    @staticmethod
    def delete_club(club_id: str, db: Client | None = None) -> None:
        """Delete a club no tournament refers to."""
        if db is None:
            db = firestore.client()
        ClubService.get_club(club_id, db)
        query = db.collection(TOURNAMENTS_COLLECTION).where(
            filter=firestore.FieldFilter("config.clubId", "==", club_id)
        )
        if any(True for _ in query.limit(1).stream(timeout=firestore_timeout())):
            raise InvalidStateError(
                "The club cannot be deleted while tournaments refer to it."
            )
        db.collection(CLUBS_COLLECTION).document(club_id).delete()
        logger.info("Deleted club %s", club_id)
