# app/api/routers/access.py - Permission and subscription decisions for the client
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from app.core.config import settings
from app.core.db import get_db
from app.api.deps.auth import get_session
from app.models.base import now_ms
from app.schemas.access import PermissionsOut, SubscriptionGateOut
from app.schemas.session import UserSession
from app.services.permissions import is_educator, is_manager, permission_map
from app.services.snapshot_loader import load_snapshot
from app.services.subscription_gate import SubscriptionGate

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/permissions", response_model=PermissionsOut)
async def get_permissions(session: UserSession = Depends(get_session)):
    if not session.is_authenticated:
        return PermissionsOut(role=None, permissions={}, is_educator=False, is_manager=False)
    return PermissionsOut(
        role=session.role,
        permissions=permission_map(session.role),
        is_educator=is_educator(session.role),
        is_manager=is_manager(session.role),
    )


@router.get("/subscription-gate", response_model=SubscriptionGateOut)
async def get_subscription_gate(
    session: UserSession = Depends(get_session),
    db: Session = Depends(get_db),
):
    store = load_snapshot(db, collections=["subscriptions"])
    gate = SubscriptionGate(session, exempt_roles=settings.subscription_exempt_roles)
    state = gate.resolve_store(store, now_ms())
    return SubscriptionGateOut(state=state.value, redirect_to_upgrade=gate.redirect_to_upgrade)
