# app/services/demo_seed.py - Demo dataset for local development
import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models import (
    Attendance,
    Class,
    Grade,
    Message,
    Notification,
    School,
    Student,
    Subscription,
    User,
)
from app.models.base import now_ms

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS


def build_demo_rows(now: int) -> List:
    """
    One admin, one school admin, one teacher and one parent with two children.

    Ids are short strings so the demo tokens are easy to type.
    """
    users = [
        User(id="1", name="Platform Admin", email="admin@example.com", role="admin"),
        User(id="2", name="School Admin", email="schooladmin@example.com", role="schoolAdmin", school_id="1"),
        User(id="3", name="Teacher", email="teacher@example.com", role="teacher", school_id="1"),
        User(id="4", name="Parent", email="parent@example.com", role="parent"),
    ]
    schools = [
        School(id="1", name="Central High School", address="123 Education St, City",
               phone="+1234567890", email="info@centralhigh.edu", admin_id="2", created_at=now),
        School(id="2", name="Westside Elementary", address="456 Learning Ave, Town",
               phone="+0987654321", email="contact@westside.edu", admin_id="2", created_at=now),
    ]
    classes = [
        Class(id="1", name="Mathematics - Grade 10", school_id="1", teacher_id="3",
              schedule="Mon, Wed, Fri 9:00 AM - 10:30 AM", created_at=now),
        Class(id="2", name="Science - Grade 10", school_id="1", teacher_id="3",
              schedule="Tue, Thu 10:45 AM - 12:15 PM", created_at=now),
        Class(id="3", name="History - Grade 10", school_id="1", teacher_id="3",
              schedule="Mon, Wed 1:00 PM - 2:30 PM", created_at=now),
    ]
    students = [
        Student(id="1", name="Alex Johnson", school_id="1", class_id="1", parent_id="4", created_at=now),
        Student(id="2", name="Sam Wilson", school_id="1", class_id="1", parent_id="4", created_at=now),
    ]
    grades = [
        Grade(id="1", student_id="1", class_id="1", subject="Mathematics", score=85, max_score=100,
              date=now - 7 * DAY_MS, created_at=now),
        Grade(id="2", student_id="1", class_id="2", subject="Science", score=92, max_score=100,
              date=now - 5 * DAY_MS, created_at=now),
        Grade(id="3", student_id="2", class_id="1", subject="Mathematics", score=78, max_score=100,
              date=now - 7 * DAY_MS, created_at=now),
    ]
    attendance = [
        Attendance(id="1", student_id="1", class_id="1", date=now - 3 * DAY_MS, status="present", created_at=now),
        Attendance(id="2", student_id="1", class_id="2", date=now - 2 * DAY_MS, status="present", created_at=now),
        Attendance(id="3", student_id="2", class_id="1", date=now - 3 * DAY_MS, status="absent", created_at=now),
    ]
    messages = [
        Message(id="1", sender_id="3", receiver_id="4", read=True, created_at=now - 2 * DAY_MS,
                content="Hello, I wanted to discuss Alex's progress in Mathematics class."),
        Message(id="2", sender_id="4", receiver_id="3", read=True, created_at=now - DAY_MS,
                content="Thank you for reaching out. When would be a good time to meet?"),
        Message(id="3", sender_id="3", receiver_id="4", read=False, created_at=now - 12 * HOUR_MS,
                content="How about tomorrow after school at 3:30 PM?"),
    ]
    notifications = [
        Notification(id="1", user_id="4", title="New Grade Posted", read=False, created_at=now - 6 * HOUR_MS,
                     message="A new grade has been posted for Mathematics class."),
        Notification(id="2", user_id="4", title="Upcoming Parent-Teacher Meeting", read=True,
                     created_at=now - 2 * DAY_MS,
                     message="Don't forget the parent-teacher meeting on Friday at 5 PM."),
    ]
    subscriptions = [
        Subscription(id="1", user_id="4", school_id="1", plan="standard", start_date=now - 30 * DAY_MS,
                     end_date=now + 335 * DAY_MS, active=True, students_count=2, payment_status="paid",
                     created_at=now),
    ]
    return users + schools + classes + students + grades + attendance + messages + notifications + subscriptions


def seed_demo_data(db: Session, now: int = None) -> int:
    """Insert the demo rows unless users already exist. Returns rows added."""
    existing = db.scalar(select(func.count()).select_from(User))
    if existing:
        logger.info(f"Skipping demo seed, {existing} users already present")
        return 0

    rows = build_demo_rows(now if now is not None else now_ms())
    db.add_all(rows)
    db.flush()
    logger.info(f"Seeded {len(rows)} demo rows")
    return len(rows)
