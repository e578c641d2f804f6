# app/services/snapshot_loader.py - Build an entity store snapshot from the database
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models import (
    Attendance,
    Bulletin,
    Class,
    Grade,
    Message,
    Notification,
    School,
    Student,
    Subscription,
    User,
)
from app.services.entity_store import EntityStore

logger = logging.getLogger(__name__)

COLLECTION_MODELS = {
    "users": User,
    "schools": School,
    "classes": Class,
    "students": Student,
    "grades": Grade,
    "attendance": Attendance,
    "messages": Message,
    "notifications": Notification,
    "subscriptions": Subscription,
    "bulletins": Bulletin,
}


def _load_collection(db: Session, kind: str) -> List[dict]:
    model = COLLECTION_MODELS[kind]
    # Rows already in the session are refreshed so the snapshot matches the database
    stmt = select(model).order_by(model.created_at, model.id).execution_options(populate_existing=True)
    if model is Bulletin:
        stmt = stmt.options(selectinload(Bulletin.subject_grades))
    return [row.to_record() for row in db.execute(stmt).scalars().all()]


def load_snapshot(db: Session, collections: Optional[Iterable[str]] = None) -> EntityStore:
    """
    Read the requested collections (all by default) into a fresh store.

    Rows come back in creation order, which becomes the store's order.
    Collections not requested are left unloaded.
    """
    kinds = list(collections) if collections is not None else list(COLLECTION_MODELS)
    snapshot: Dict[str, List[dict]] = {}
    for kind in kinds:
        if kind not in COLLECTION_MODELS:
            raise KeyError(f"Unknown entity collection: {kind}")
        snapshot[kind] = _load_collection(db, kind)

    store = EntityStore.from_snapshot(snapshot)
    logger.debug(f"Loaded snapshot {store!r}")
    return store
