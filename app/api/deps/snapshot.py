# app/api/deps/snapshot.py - Per-request snapshot and scoped query access
from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.api.deps.auth import get_session
from app.schemas.session import UserSession
from app.services.entity_store import EntityStore
from app.services.scoped_queries import ScopedQueries
from app.services.snapshot_loader import load_snapshot


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    """A fresh snapshot for this request"""
    return load_snapshot(db)


def get_queries(
    store: EntityStore = Depends(get_store),
    session: UserSession = Depends(get_session),
) -> ScopedQueries:
    return ScopedQueries(store, session)
