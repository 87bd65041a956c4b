"""Identifier handling at the storage boundary.

Documents written by older clients store references in several shapes: a
plain string, a mapping with ``id``, ``_id`` or ``$oid``, or a Firestore
``DocumentReference``. Everything past this module works with plain strings.
"""

from __future__ import annotations

import uuid
from typing import Any


def normalize_id(value: Any) -> str | None:
    """Return ``value`` as a plain string identifier, or None when empty."""
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        for key in ("$oid", "_id", "id"):
            if key in value:
                return normalize_id(value[key])
        return None
    # DocumentReference and DocumentSnapshot both expose ``id``
    ref_id = getattr(value, "id", None)
    if isinstance(ref_id, str):
        return ref_id or None
    raise ValueError(f"Unsupported identifier: {value!r}")


def new_id() -> str:
    """Generate a new identifier for an embedded document."""
    return uuid.uuid4().hex
