# app/schemas/entities.py - Immutable entity records held by the entity store
from __future__ import annotations

import enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class SubscriptionPlan(str, enum.Enum):
    FREE = "free"
    STANDARD = "standard"
    PREMIUM = "premium"


class EntityRecord(BaseModel):
    """Base for snapshot records.

    Records come from the document store in camelCase (``schoolId``) and are
    accepted in snake_case too. They are frozen: a snapshot is never mutated,
    a new one is built instead.
    """

    id: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        frozen = True
        extra = "ignore"


class User(EntityRecord):
    # Role is kept as free text; unknown roles resolve to least privilege
    role: Optional[str] = None
    school_id: Optional[str] = None
    name: str = ""
    email: Optional[str] = None
    is_active: bool = True


class School(EntityRecord):
    name: str = ""
    admin_id: Optional[str] = None
    is_active: bool = True
    created_at: int = 0


class SchoolClass(EntityRecord):
    name: str = ""
    school_id: str
    teacher_id: Optional[str] = None
    schedule: str = ""
    created_at: int = 0


class Student(EntityRecord):
    name: str = ""
    school_id: str
    class_id: Optional[str] = None
    parent_id: str
    created_at: int = 0


class Grade(EntityRecord):
    student_id: str
    class_id: Optional[str] = None
    subject: str
    score: float
    max_score: float
    date: int
    created_at: int = 0

    @model_validator(mode="after")
    def validate_score_range(self):
        if self.score < 0 or self.score > self.max_score:
            raise ValueError(f"score {self.score} outside [0, {self.max_score}]")
        return self


class Attendance(EntityRecord):
    student_id: str
    class_id: Optional[str] = None
    date: int
    status: AttendanceStatus
    created_at: int = 0


class Message(EntityRecord):
    sender_id: str
    receiver_id: str
    content: str = ""
    read: bool = False
    created_at: int


class Notification(EntityRecord):
    user_id: str
    title: str = ""
    message: str = ""
    read: bool = False
    created_at: int


class Subscription(EntityRecord):
    user_id: str
    school_id: Optional[str] = None
    plan: SubscriptionPlan = SubscriptionPlan.FREE
    start_date: int
    end_date: int
    active: bool = False
    students_count: int = 0
    payment_status: Optional[str] = None


class SubjectGrade(BaseModel):
    subject: str
    coefficient: float = Field(default=1.0, ge=0)
    composition_grades: List[float] = Field(default_factory=list)
    subject_average: float = 0.0
    teacher_appreciation: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        frozen = True


class Bulletin(EntityRecord):
    student_id: str
    school_id: str
    class_id: Optional[str] = None
    period: str
    school_year: str = ""
    subject_grades: List[SubjectGrade] = Field(default_factory=list)
    general_average: float = 0.0
    class_rank: Optional[int] = None
    total_students: Optional[int] = None


# Snapshot collection name -> record type
ENTITY_TYPES = {
    "users": User,
    "schools": School,
    "classes": SchoolClass,
    "students": Student,
    "grades": Grade,
    "attendance": Attendance,
    "messages": Message,
    "notifications": Notification,
    "subscriptions": Subscription,
    "bulletins": Bulletin,
}
