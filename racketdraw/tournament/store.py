"""Firestore access for the tournament aggregate.

A tournament, with its groups, rounds and matches, is one document. Every
change goes through ``mutate_tournament``, which reads and writes the whole
document inside a Firestore transaction so concurrent writers cannot overwrite
each other.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, cast

from firebase_admin import firestore

from racketdraw.constants import TOURNAMENTS_COLLECTION
from racketdraw.errors import ConflictError, NotFoundError
from racketdraw.utils import firestore_timeout

from .models import Tournament

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

logger = logging.getLogger(__name__)

# Returns False when the tournament was left unchanged and nothing needs writing.
Mutation = Callable[[Tournament, "Transaction"], Optional[bool]]


def tournament_ref(db: Client, tournament_id: str) -> DocumentReference:
    """Return the document reference of a tournament."""
    return db.collection(TOURNAMENTS_COLLECTION).document(tournament_id)


def _from_snapshot(tournament_id: str, snapshot: Any) -> Tournament:
    data = snapshot.to_dict() if snapshot.exists else None
    if not data:
        raise NotFoundError("Tournament not found.")
    return Tournament.from_dict(tournament_id, data)


def load_tournament(db: Client, tournament_id: str) -> Tournament:
    """Read a tournament outside of any transaction."""
    snapshot = cast(
        "DocumentSnapshot",
        tournament_ref(db, tournament_id).get(timeout=firestore_timeout()),
    )
    return _from_snapshot(tournament_id, snapshot)


def add_tournament(db: Client, tournament: Tournament) -> str:
    """Store a new tournament and return its ID."""
    payload = tournament.to_dict()
    payload["createdAt"] = firestore.SERVER_TIMESTAMP
    _, ref = db.collection(TOURNAMENTS_COLLECTION).add(payload)
    tournament.id = str(ref.id)
    return tournament.id


def stream_tournaments(db: Client, include_drafts: bool = False) -> list[Tournament]:
    """Read every tournament, published ones only unless ``include_drafts``."""
    query: Any = db.collection(TOURNAMENTS_COLLECTION)
    if not include_drafts:
        query = query.where(filter=firestore.FieldFilter("draft", "==", False))
    tournaments = []
    for doc in query.stream(timeout=firestore_timeout()):
        data = doc.to_dict()
        if data:
            tournaments.append(Tournament.from_dict(doc.id, data))
    return tournaments


def mutate_tournament(
    db: Client,
    tournament_id: str,
    mutation: Mutation,
    expected_version: int | None = None,
) -> Tournament:
    """Apply ``mutation`` to a tournament as one atomic read-modify-write.

    Any exception raised by ``mutation`` aborts the transaction, so either the
    whole updated tournament is stored or nothing is.

    Raises:
        NotFoundError: If the tournament does not exist.
        ConflictError: If ``expected_version`` is given and is stale.
    """
    ref = tournament_ref(db, tournament_id)
    transaction = db.transaction()

    @firestore.transactional
    def _apply(transaction: Transaction) -> Tournament:
        snapshot = ref.get(transaction=transaction, timeout=firestore_timeout())
        tournament = _from_snapshot(tournament_id, snapshot)
        if expected_version is not None and tournament.version != expected_version:
            raise ConflictError(
                f"Tournament is at version {tournament.version}, "
                f"not {expected_version}. Reload and try again."
            )

        if mutation(tournament, transaction) is False:
            return tournament

        tournament.version += 1
        transaction.set(ref, tournament.to_dict())
        return tournament

    tournament = _apply(transaction)
    logger.debug("Tournament %s at version %s", tournament_id, tournament.version)
    return tournament
