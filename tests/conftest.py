"""Common utilities for tests."""

from __future__ import annotations

import unittest.mock
from typing import Any, Iterator, Optional

from mockfirestore import CollectionReference, MockFirestore, Query
from mockfirestore.document import DocumentReference


class MockArrayUnion:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockFieldFilter:
    def __init__(self, field_path: str, op_string: str, value: Any) -> None:
        self.field_path = field_path
        self.op_string = op_string
        self.value = value


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and equality."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:  # noqa: E501
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    def doc_ref_eq(self: Any, other: Any) -> bool:
        if not isinstance(other, DocumentReference):
            return False
        return self._path == other._path

    if not hasattr(DocumentReference, "_orig_eq"):
        DocumentReference._orig_eq = DocumentReference.__eq__
        DocumentReference.__eq__ = doc_ref_eq

    # Defining __eq__ leaves __hash__ as None; get_all() puts refs in a set.
    DocumentReference.__hash__ = lambda self: hash(tuple(self._path))

    # Accept the transaction and timeout arguments of the real client.
    if not hasattr(DocumentReference, "_orig_get"):
        DocumentReference._orig_get = DocumentReference.get

        def doc_ref_get(self: Any, transaction: Any = None, **kwargs: Any) -> Any:
            return self._orig_get()

        DocumentReference.get = doc_ref_get

    # Reads outside transactions pass a timeout.
    if not hasattr(CollectionReference, "_orig_stream"):
        CollectionReference._orig_stream = CollectionReference.stream

        def collection_stream(self: Any, transaction: Any = None, **kwargs: Any) -> Any:
            return self._orig_stream(transaction)

        CollectionReference.stream = collection_stream

    if not hasattr(Query, "_orig_stream"):
        Query._orig_stream = Query.stream

        def query_stream(self: Any, transaction: Any = None, **kwargs: Any) -> Any:
            return self._orig_stream(transaction)

        Query.stream = query_stream

    if not hasattr(MockFirestore, "_orig_get_all"):
        MockFirestore._orig_get_all = MockFirestore.get_all

        def get_all(
            self: Any,
            references: Any,
            field_paths: Any = None,
            transaction: Any = None,
            **kwargs: Any,
        ) -> Any:
            return self._orig_get_all(references, field_paths, transaction)

        MockFirestore.get_all = get_all

    if not hasattr(DocumentReference, "_orig_update"):
        DocumentReference._orig_update = DocumentReference.update

        def patched_update(self: Any, data: dict[str, Any]) -> Any:
            current_data = self.get().to_dict() or {}
            new_data = {}
            for k, v in data.items():
                if isinstance(v, MockArrayUnion):
                    existing = current_data.get(k, [])
                    if not isinstance(existing, list):
                        existing = []
                    # Simple append for mock, firestore does set union
                    merged = list(existing)
                    for item in v.values:
                        if item not in merged:
                            merged.append(item)
                    new_data[k] = merged
                else:
                    new_data[k] = v
            return self._orig_update(new_data)

        DocumentReference.update = patched_update


class FakeTransaction:
    """Applies transactional writes straight to the mock documents."""

    def __init__(self) -> None:
        self.sets: list[tuple[Any, Any]] = []
        self.updates: list[tuple[Any, Any]] = []

    def set(self, ref: Any, data: Any, merge: bool = False) -> None:
        self.sets.append((ref, data))
        ref.set(data)

    def update(self, ref: Any, data: Any) -> None:
        self.updates.append((ref, data))
        ref.update(data)


def make_firestore_module(db: MockFirestore) -> unittest.mock.MagicMock:
    """Build a stand-in for ``firebase_admin.firestore`` bound to ``db``."""
    module = unittest.mock.MagicMock()
    module.client.return_value = db
    module.FieldFilter = MockFieldFilter
    module.ArrayUnion = MockArrayUnion
    module.SERVER_TIMESTAMP = "2024-01-01T00:00:00"
    module.transactional = lambda func: func
    return module


def make_mock_db() -> tuple[MockFirestore, FakeTransaction]:
    """Return a MockFirestore whose transactions write through directly."""
    db = MockFirestore()
    transaction = FakeTransaction()
    db.transaction = unittest.mock.MagicMock(return_value=transaction)
    return db, transaction


def add_players(db: MockFirestore, count: int, prefix: str = "p") -> list[str]:
    """Create ``count`` active players and return their IDs."""
    ids = []
    for i in range(1, count + 1):
        player_id = f"{prefix}{i}"
        db.collection("players").document(player_id).set(
            {
                "firstName": f"Player{i}",
                "lastName": prefix.upper(),
                "email": f"{player_id}@example.com",
                "active": True,
                "matches": [],
            }
        )
        ids.append(player_id)
    return ids


FIRESTORE_MODULES = (
    "racketdraw.firestore",
    "racketdraw.auth.routes.firestore",
    "racketdraw.club.services.firestore",
    "racketdraw.player.services.firestore",
    "racketdraw.tournament.services.firestore",
    "racketdraw.tournament.store.firestore",
)
