# app/services/scoped_queries.py - Entity queries filtered by who is asking
"""
Access-scoped reads over an entity store snapshot.

Every query is evaluated for one caller (``UserSession``). Records outside
the caller's scope are simply not returned: a list comes back shorter, a
lookup comes back ``None``. Nothing here raises to say "forbidden", so the
response never reveals whether an out-of-scope record exists.

Scoping by role:

* admin        - everything
* schoolAdmin  - records of the caller's own school
* teacher      - classes the caller teaches and the students in them
* parent       - the caller's own children

Unknown roles are scoped like parents. Anonymous sessions see nothing.
"""
import logging
from typing import List, Optional, Tuple

from app.schemas.entities import (
    Attendance,
    Bulletin,
    Grade,
    Message,
    Notification,
    School,
    SchoolClass,
    Student,
    User,
)
from app.schemas.session import UserSession
from app.services.conversations import ConversationSummary, aggregate_conversations, partner_of, thread_between
from app.services.entity_store import EntityStore
from app.services.permissions import UserRole, effective_role

logger = logging.getLogger(__name__)


class ScopedQueries:
    """Read-only queries for one caller over one snapshot"""

    def __init__(self, store: EntityStore, session: UserSession):
        self.store = store
        self.session = session
        self.user_id = session.user_id if session.is_authenticated else None
        self.role: Optional[UserRole] = effective_role(session.role) if self.user_id else None

    # ------------------------------------------------------------------
    # Scope predicates
    # ------------------------------------------------------------------

    def _own_school_id(self) -> Optional[str]:
        if self.session.school_id:
            return self.session.school_id
        user = self.store.get("users", self.user_id)
        return user.school_id if user else None

    def _class_of(self, student: Student) -> Optional[SchoolClass]:
        """The student's class, treating a cross-school reference as dangling"""
        school_class = self.store.get("classes", student.class_id)
        if school_class is None or school_class.school_id != student.school_id:
            return None
        return school_class

    def _can_see_school(self, school: School) -> bool:
        if self.role is UserRole.ADMIN:
            return True
        if self.role is UserRole.SCHOOL_ADMIN:
            return school.id == self._own_school_id()
        return False

    def _can_see_class(self, school_class: SchoolClass) -> bool:
        if self.role is UserRole.ADMIN:
            return True
        if self.role is UserRole.SCHOOL_ADMIN:
            own = self._own_school_id()
            return own is not None and school_class.school_id == own
        if self.role is UserRole.TEACHER:
            return school_class.teacher_id == self.user_id
        return False

    def _can_see_student(self, student: Student) -> bool:
        if self.role is UserRole.ADMIN:
            return True
        if self.role is UserRole.SCHOOL_ADMIN:
            own = self._own_school_id()
            return own is not None and student.school_id == own
        if self.role is UserRole.TEACHER:
            school_class = self._class_of(student)
            return school_class is not None and school_class.teacher_id == self.user_id
        if self.role is UserRole.PARENT:
            return student.parent_id == self.user_id
        return False

    def _can_read_mailbox(self, user_id: str) -> bool:
        if self.role in (UserRole.ADMIN, UserRole.SCHOOL_ADMIN):
            return True
        return user_id == self.user_id

    def _visible_student(self, student_id: Optional[str]) -> Optional[Student]:
        if self.role is None:
            return None
        student = self.store.get("students", student_id)
        if student is None or not self._can_see_student(student):
            return None
        return student

    def _visible_class(self, class_id: Optional[str]) -> Optional[SchoolClass]:
        if self.role is None:
            return None
        school_class = self.store.get("classes", class_id)
        if school_class is None or not self._can_see_class(school_class):
            return None
        return school_class

    # ------------------------------------------------------------------
    # Schools and classes
    # ------------------------------------------------------------------

    def list_schools(self) -> Tuple[School, ...]:
        if self.role is UserRole.ADMIN:
            return self.store.all("schools")
        if self.role is UserRole.SCHOOL_ADMIN:
            school = self.store.get("schools", self._own_school_id())
            return (school,) if school else ()
        return ()

    def get_school(self, school_id: str) -> Optional[School]:
        school = self.store.get("schools", school_id)
        if school is None or self.role is None or not self._can_see_school(school):
            return None
        return school

    def list_classes(self, school_id: Optional[str] = None) -> Tuple[SchoolClass, ...]:
        if self.role is UserRole.ADMIN:
            if school_id is None:
                return self.store.all("classes")
            return self.store.by_foreign_key("classes", "school_id", school_id)
        if self.role is UserRole.SCHOOL_ADMIN:
            own = self._own_school_id()
            if school_id is not None and school_id != own:
                return ()
            return self.store.by_foreign_key("classes", "school_id", own)
        if self.role is UserRole.TEACHER:
            classes = self.store.by_foreign_key("classes", "teacher_id", self.user_id)
            if school_id is not None:
                classes = tuple(c for c in classes if c.school_id == school_id)
            return classes
        return ()

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        return self._visible_class(class_id)

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    def list_students(self, class_id: str) -> Tuple[Student, ...]:
        school_class = self._visible_class(class_id)
        if school_class is None:
            return ()
        return tuple(
            s for s in self.store.by_foreign_key("students", "class_id", class_id)
            if s.school_id == school_class.school_id
        )

    def list_students_for_parent(self, parent_id: str) -> Tuple[Student, ...]:
        if self.role is None:
            return ()
        if self.role is UserRole.PARENT and parent_id != self.user_id:
            return ()
        return tuple(
            s for s in self.store.by_foreign_key("students", "parent_id", parent_id)
            if self._can_see_student(s)
        )

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._visible_student(student_id)

    # ------------------------------------------------------------------
    # Grades, attendance, bulletins
    # ------------------------------------------------------------------

    def list_grades(self, student_id: str) -> Tuple[Grade, ...]:
        if self._visible_student(student_id) is None:
            return ()
        return self.store.by_foreign_key("grades", "student_id", student_id)

    def list_grades_for_class(self, class_id: str) -> Tuple[Grade, ...]:
        if self._visible_class(class_id) is None:
            return ()
        return self.store.by_foreign_key("grades", "class_id", class_id)

    def list_attendance(self, student_id: str) -> Tuple[Attendance, ...]:
        if self._visible_student(student_id) is None:
            return ()
        return self.store.by_foreign_key("attendance", "student_id", student_id)

    def list_attendance_for_class(self, class_id: str, date: Optional[int] = None) -> Tuple[Attendance, ...]:
        if self._visible_class(class_id) is None:
            return ()
        records = self.store.by_foreign_key("attendance", "class_id", class_id)
        if date is not None:
            records = tuple(a for a in records if a.date == date)
        return records

    def list_bulletins(self, student_id: str) -> Tuple[Bulletin, ...]:
        if self._visible_student(student_id) is None:
            return ()
        return self.store.by_foreign_key("bulletins", "student_id", student_id)

    def get_bulletin(self, bulletin_id: str) -> Optional[Bulletin]:
        bulletin = self.store.get("bulletins", bulletin_id)
        if bulletin is None or self._visible_student(bulletin.student_id) is None:
            return None
        return bulletin

    # ------------------------------------------------------------------
    # Messages and notifications
    # ------------------------------------------------------------------

    def list_messages_for_user(self, user_id: str) -> Tuple[Message, ...]:
        if self.role is None or not self._can_read_mailbox(user_id):
            return ()
        return self.store.in_store_order(
            "messages",
            self.store.by_foreign_key("messages", "sender_id", user_id)
            + self.store.by_foreign_key("messages", "receiver_id", user_id),
        )

    def conversations(self) -> List[ConversationSummary]:
        """The caller's threads, most recent first"""
        if self.user_id is None:
            return []
        return aggregate_conversations(
            self.user_id,
            self.list_messages_for_user(self.user_id),
            resolve_user=lambda partner_id: self.store.get("users", partner_id),
        )

    def conversation_with(self, partner_id: str) -> List[Message]:
        if self.user_id is None:
            return []
        return thread_between(self.user_id, partner_id, self.list_messages_for_user(self.user_id))

    def list_notifications_for_user(self, user_id: str) -> Tuple[Notification, ...]:
        # Notifications are private to their owner, whatever the role
        if self.user_id is None or user_id != self.user_id:
            return ()
        return self.store.by_foreign_key("notifications", "user_id", user_id)

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        notification = self.store.get("notifications", notification_id)
        if notification is None or self.user_id is None or notification.user_id != self.user_id:
            return None
        return notification

    def unread_notification_count(self, user_id: str) -> int:
        return sum(1 for n in self.list_notifications_for_user(user_id) if not n.read)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def _is_contact(self, user: User) -> bool:
        """Someone the caller deals with through their school, classes or children"""
        if self.role is UserRole.ADMIN:
            return True
        if self.role in (UserRole.SCHOOL_ADMIN, UserRole.TEACHER):
            own = self._own_school_id()
            if own is not None and user.school_id == own:
                return True
            # Parents of students the caller can see
            return any(self._can_see_student(s) for s in self.store.by_foreign_key("students", "parent_id", user.id))
        for child in self.store.by_foreign_key("students", "parent_id", self.user_id):
            school_class = self._class_of(child)
            if school_class is not None and school_class.teacher_id == user.id:
                return True
            school = self.store.get("schools", child.school_id)
            if school is not None and school.admin_id == user.id:
                return True
        return False

    def get_user(self, user_id: str) -> Optional[User]:
        """
        Directory lookup. Callers see themselves, their contacts and anyone
        they have exchanged messages with:

        * admin        - everyone
        * schoolAdmin  - their school's staff and parents of its students
        * teacher      - colleagues and parents of the students they teach
        * parent       - their children's teachers and school admins
        """
        user = self.store.get("users", user_id)
        if user is None or self.role is None:
            return None
        if user.id == self.user_id or self._is_contact(user):
            return user
        for message in self.list_messages_for_user(self.user_id):
            if partner_of(message, self.user_id) == user.id:
                return user
        return None

    def can_message(self, user_id: str) -> bool:
        """Whether the caller may write to ``user_id``; missing and hidden users are refused alike"""
        return user_id != self.user_id and self.get_user(user_id) is not None
