# app/services/entity_store.py - Immutable, indexed snapshot of all entity collections
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, ValidationError

from app.schemas.entities import ENTITY_TYPES, EntityRecord

logger = logging.getLogger(__name__)

# Foreign keys indexed for each collection
INDEXED_FIELDS: Dict[str, Tuple[str, ...]] = {
    "users": ("school_id",),
    "schools": ("admin_id",),
    "classes": ("school_id", "teacher_id"),
    "students": ("school_id", "class_id", "parent_id"),
    "grades": ("student_id", "class_id"),
    "attendance": ("student_id", "class_id"),
    "messages": ("sender_id", "receiver_id"),
    "notifications": ("user_id",),
    "subscriptions": ("user_id", "school_id"),
    "bulletins": ("student_id", "class_id"),
}


def _coerce(kind: str, raw: Any) -> Optional[EntityRecord]:
    """Turn a raw snapshot item into a record, or None when it is invalid"""
    record_type = ENTITY_TYPES[kind]
    if isinstance(raw, record_type):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    try:
        if isinstance(raw, Mapping):
            return record_type.model_validate(raw)
        return record_type.model_validate(raw, from_attributes=True)
    except ValidationError as e:
        record_id = raw.get("id") if isinstance(raw, Mapping) else getattr(raw, "id", None)
        logger.warning(f"Skipping invalid {kind} record {record_id!r}: {e.error_count()} validation error(s)")
        return None


class EntityStore:
    """
    A consistent, read-only snapshot of every entity collection.

    Records keep the order in which the persistence layer supplied them.
    Lookups by id are O(1); lookups by foreign key go through indexes built
    once at construction. Missing ids give ``None`` or an empty tuple.
    """

    def __init__(self, collections: Mapping[str, Iterable[EntityRecord]], loaded: Iterable[str] = ()):
        by_id: Dict[str, Dict[str, EntityRecord]] = {}
        indexes: Dict[str, Dict[str, Dict[str, Tuple[EntityRecord, ...]]]] = {}

        for kind in ENTITY_TYPES:
            records: Dict[str, EntityRecord] = {}
            for record in collections.get(kind, ()):
                if record.id in records:
                    # Later duplicates win but keep the first position
                    logger.debug(f"Duplicate {kind} id {record.id!r} in snapshot")
                records[record.id] = record
            by_id[kind] = records

            kind_indexes: Dict[str, Dict[str, list]] = {field: {} for field in INDEXED_FIELDS[kind]}
            for record in records.values():
                for field, index in kind_indexes.items():
                    value = getattr(record, field, None)
                    if value is not None:
                        index.setdefault(value, []).append(record)
            indexes[kind] = {
                field: {value: tuple(items) for value, items in index.items()}
                for field, index in kind_indexes.items()
            }

        self._by_id = MappingProxyType({k: MappingProxyType(v) for k, v in by_id.items()})
        self._indexes = indexes
        self._loaded = frozenset(loaded)
        self._positions = {
            kind: {record_id: position for position, record_id in enumerate(records)}
            for kind, records in by_id.items()
        }

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Optional[Iterable[Any]]]) -> "EntityStore":
        """
        Build a store from a snapshot keyed by collection name.

        Items may be dicts (camelCase or snake_case), ORM rows or records.
        A collection that is absent or ``None`` counts as not loaded yet.
        """
        collections = {}
        loaded = []
        for kind, items in snapshot.items():
            if kind not in ENTITY_TYPES:
                logger.warning(f"Ignoring unknown snapshot collection: {kind}")
                continue
            if items is None:
                continue
            loaded.append(kind)
            collections[kind] = [r for r in (_coerce(kind, raw) for raw in items) if r is not None]
        return cls(collections, loaded=loaded)

    def merged(self, incremental: Mapping[str, Optional[Iterable[Any]]]) -> "EntityStore":
        """
        Return a new store with an incremental snapshot applied.

        Known ids are replaced in place, new ids are appended. This store is
        left untouched.
        """
        update = EntityStore.from_snapshot(incremental)
        collections = {}
        for kind in ENTITY_TYPES:
            records = dict(self._by_id[kind])
            records.update(update._by_id[kind])
            collections[kind] = list(records.values())
        return EntityStore(collections, loaded=self._loaded | update._loaded)

    def _check_kind(self, kind: str) -> None:
        if kind not in ENTITY_TYPES:
            raise KeyError(f"Unknown entity collection: {kind}")

    def is_loaded(self, kind: str) -> bool:
        """Whether the collaborator supplied this collection at all"""
        self._check_kind(kind)
        return kind in self._loaded

    def get(self, kind: str, record_id: Optional[str]):
        self._check_kind(kind)
        if record_id is None:
            return None
        return self._by_id[kind].get(record_id)

    def all(self, kind: str) -> Tuple[EntityRecord, ...]:
        self._check_kind(kind)
        return tuple(self._by_id[kind].values())

    def by_foreign_key(self, kind: str, field: str, value: Optional[str]) -> Tuple[EntityRecord, ...]:
        self._check_kind(kind)
        index = self._indexes[kind].get(field)
        if index is None:
            raise KeyError(f"{kind}.{field} is not indexed")
        if value is None:
            return ()
        return index.get(value, ())

    def in_store_order(self, kind: str, records: Iterable[EntityRecord]) -> Tuple[EntityRecord, ...]:
        """Deduplicate records and put them back in snapshot order"""
        self._check_kind(kind)
        positions = self._positions[kind]
        unique = {r.id: r for r in records if r.id in positions}
        return tuple(sorted(unique.values(), key=lambda r: positions[r.id]))

    def count(self, kind: str) -> int:
        self._check_kind(kind)
        return len(self._by_id[kind])

    def __repr__(self):
        sizes = ", ".join(f"{kind}={len(records)}" for kind, records in self._by_id.items() if records)
        return f"<EntityStore({sizes})>"
