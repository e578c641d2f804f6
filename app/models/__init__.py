# app/models/__init__.py - Import all models so SQLAlchemy can discover them

from app.models.base import Base

from app.models.user import User
from app.models.school import School
from app.models.class_model import Class
from app.models.student import Student
from app.models.academic import Grade, Attendance, Bulletin, BulletinSubjectGrade
from app.models.message import Message
from app.models.notification import Notification
from app.models.subscription import Subscription

__all__ = [
    "Base",
    "User",
    "School",
    "Class",
    "Student",
    "Grade",
    "Attendance",
    "Bulletin",
    "BulletinSubjectGrade",
    "Message",
    "Notification",
    "Subscription",
]
