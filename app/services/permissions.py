# app/services/permissions.py - Role to capability resolution
"""
Role-intrinsic authorization.

Nothing here looks at records: whether a role *may* edit grades is decided
from the role alone. Which grades it may see is the scoped query layer's job.
"""
import enum
from typing import Dict, FrozenSet, Iterable, Optional, Union


class UserRole(str, enum.Enum):
    """Application user roles"""
    ADMIN = "admin"                # Manages every school
    SCHOOL_ADMIN = "schoolAdmin"   # Manages one school
    TEACHER = "teacher"            # Manages own classes
    PARENT = "parent"              # Follows own children

    @classmethod
    def parse(cls, value: Union["UserRole", str, None]) -> Optional["UserRole"]:
        """Return the matching role, or None for unknown/absent values"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Capability(str, enum.Enum):
    VIEW_STUDENTS = "viewStudents"
    EDIT_STUDENTS = "editStudents"
    VIEW_GRADES = "viewGrades"
    EDIT_GRADES = "editGrades"
    VIEW_ATTENDANCE = "viewAttendance"
    MANAGE_ATTENDANCE = "manageAttendance"
    VIEW_MESSAGES = "viewMessages"
    SEND_MESSAGES = "sendMessages"
    MANAGE_SCHOOLS = "manageSchools"
    MANAGE_USERS = "manageUsers"
    VIEW_REPORTS = "viewReports"
    EXPORT_DATA = "exportData"


_PARENT_CAPABILITIES = frozenset({
    Capability.VIEW_STUDENTS,
    Capability.VIEW_GRADES,
    Capability.VIEW_ATTENDANCE,
    Capability.VIEW_MESSAGES,
    Capability.SEND_MESSAGES,
})

_TEACHER_CAPABILITIES = _PARENT_CAPABILITIES | {
    Capability.EDIT_GRADES,
    Capability.MANAGE_ATTENDANCE,
    Capability.VIEW_REPORTS,
}

ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.ADMIN: frozenset(Capability),
    UserRole.SCHOOL_ADMIN: frozenset(Capability),
    UserRole.TEACHER: _TEACHER_CAPABILITIES,
    UserRole.PARENT: _PARENT_CAPABILITIES,
}

# Unknown roles never escalate
LEAST_PRIVILEGED_ROLE = UserRole.PARENT

RoleLike = Union[UserRole, str, None]


def effective_role(role: RoleLike) -> UserRole:
    """The role used for decisions: unknown or missing roles act as parents"""
    return UserRole.parse(role) or LEAST_PRIVILEGED_ROLE


def permissions_for(role: RoleLike) -> FrozenSet[Capability]:
    return ROLE_CAPABILITIES[effective_role(role)]


def has_permission(role: RoleLike, capability: Union[Capability, str]) -> bool:
    """Check if a role holds a capability; unknown capabilities are never held"""
    try:
        capability = Capability(capability)
    except ValueError:
        return False
    return capability in permissions_for(role)


def has_role(role: RoleLike, candidate: RoleLike) -> bool:
    """Exact role match. Unknown roles match nothing."""
    parsed = UserRole.parse(role)
    return parsed is not None and parsed == UserRole.parse(candidate)


def has_any_role(role: RoleLike, candidates: Iterable[RoleLike]) -> bool:
    return any(has_role(role, candidate) for candidate in candidates)


def is_educator(role: RoleLike) -> bool:
    return has_any_role(role, [UserRole.TEACHER, UserRole.SCHOOL_ADMIN])


def is_manager(role: RoleLike) -> bool:
    return has_any_role(role, [UserRole.ADMIN, UserRole.SCHOOL_ADMIN])


def permission_map(role: RoleLike) -> Dict[str, bool]:
    """Every capability with its decision, for clients that render menus"""
    granted = permissions_for(role)
    return {capability.value: capability in granted for capability in Capability}
