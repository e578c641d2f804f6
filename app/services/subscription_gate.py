# app/services/subscription_gate.py - Subscription entitlement, separate from role permissions
import enum
import logging
from typing import Iterable, Optional, Sequence, Union

from app.schemas.entities import Subscription
from app.schemas.session import UserSession
from app.services.entity_store import EntityStore
from app.services.permissions import Capability, RoleLike, UserRole, has_any_role, has_permission

logger = logging.getLogger(__name__)


class GateState(str, enum.Enum):
    UNKNOWN = "unknown"   # subscription data not loaded yet, render as loading
    DENIED = "denied"
    GRANTED = "granted"


def is_entitled(user_id: Optional[str], subscriptions: Iterable[Subscription], now: int) -> bool:
    """True iff the user holds an active subscription covering ``now``"""
    if not user_id:
        return False
    return any(
        s.user_id == user_id and s.active and s.start_date <= now <= s.end_date
        for s in subscriptions
    )


def evaluate_gate(
    session: UserSession,
    subscriptions: Optional[Iterable[Subscription]],
    now: int,
    exempt_roles: Sequence[RoleLike] = (),
) -> GateState:
    """
    Decide whether the caller may enter a subscription-protected area.

    ``subscriptions`` is None while the data has not resolved; that yields
    UNKNOWN rather than a premature decision either way.
    """
    if subscriptions is None:
        return GateState.UNKNOWN
    if not session.is_authenticated:
        return GateState.DENIED
    if has_any_role(session.role, exempt_roles):
        return GateState.GRANTED
    if is_entitled(session.user_id, subscriptions, now):
        return GateState.GRANTED
    return GateState.DENIED


def can_enter(session: UserSession, capability: Union[Capability, str], gate_state: GateState) -> bool:
    """Both the role permission and the entitlement must allow the path"""
    if not session.is_authenticated:
        return False
    return has_permission(session.role, capability) and gate_state is GateState.GRANTED


class SubscriptionGate:
    """
    Gate state for one user.

    Starts UNKNOWN and only moves when new subscription data arrives through
    ``resolve``.
    """

    def __init__(self, session: UserSession, exempt_roles: Sequence[RoleLike] = ()):
        self.session = session
        self.exempt_roles = tuple(UserRole.parse(r) or r for r in exempt_roles)
        self._state = GateState.UNKNOWN

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state is GateState.UNKNOWN

    @property
    def redirect_to_upgrade(self) -> bool:
        return self._state is GateState.DENIED

    def resolve(self, subscriptions: Optional[Iterable[Subscription]], now: int) -> GateState:
        if subscriptions is None:
            # Nothing new arrived
            return self._state
        previous = self._state
        self._state = evaluate_gate(self.session, subscriptions, now, self.exempt_roles)
        if previous is not self._state:
            logger.debug(f"Subscription gate for {self.session.user_id}: {previous.value} -> {self._state.value}")
        return self._state

    def resolve_store(self, store: EntityStore, now: int) -> GateState:
        """Resolve from a snapshot; a store without the subscriptions collection leaves the gate as is"""
        if not store.is_loaded("subscriptions"):
            return self.resolve(None, now)
        return self.resolve(store.by_foreign_key("subscriptions", "user_id", self.session.user_id), now)
