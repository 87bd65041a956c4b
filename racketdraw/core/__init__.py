"""Core module for the racketdraw application."""

from .ids import new_id, normalize_id
from .types import FirestoreDocument

__all__ = ["FirestoreDocument", "new_id", "normalize_id"]
