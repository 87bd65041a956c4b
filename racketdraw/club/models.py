"""Data models for the club blueprint."""

from racketdraw.core.types import FirestoreDocument


class Club(FirestoreDocument, total=False):
    """A club document in Firestore."""

    name: str
    address: str
    phone: str
