"""
Shared fixtures.

The snapshot below is shaped the way the document store delivers it
(camelCase keys, epoch-millisecond timestamps). Two schools:

* school "s1": school admin "u2", teacher "u3" (classes "c1", "c2"),
  parent "u4" with children "st1", "st2"
* school "s2": school admin "u7", teacher "u6" (class "c3"),
  parent "u5" with child "st3"

Student "st4" belongs to school "s1" but points at class "c3" of the
other school, and student "st5" points at a class that does not exist.
"""
import os

# Must be set before the application settings are imported
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from app.core.db import DatabaseManager, get_db
from app.core.security import create_access_token
from app.schemas.session import UserSession
from app.services.entity_store import EntityStore
from app.services.scoped_queries import ScopedQueries

DAY_MS = 24 * 60 * 60 * 1000
NOW = 1_700_000_000_000


def _snapshot():
    return {
        "users": [
            {"id": "u1", "name": "Platform Admin", "role": "admin"},
            {"id": "u2", "name": "Central Admin", "role": "schoolAdmin", "schoolId": "s1"},
            {"id": "u3", "name": "Ms. Rivera", "role": "teacher", "schoolId": "s1"},
            {"id": "u4", "name": "Pat Johnson", "role": "parent"},
            {"id": "u5", "name": "Kim Wilson", "role": "parent"},
            {"id": "u6", "name": "Mr. Osei", "role": "teacher", "schoolId": "s2"},
            {"id": "u7", "name": "Westside Admin", "role": "schoolAdmin", "schoolId": "s2"},
            {"id": "u9", "name": "Mystery", "role": "superuser"},
        ],
        "schools": [
            {"id": "s1", "name": "Central High School", "adminId": "u2", "isActive": True, "createdAt": 1},
            {"id": "s2", "name": "Westside Elementary", "adminId": "u7", "isActive": True, "createdAt": 2},
        ],
        "classes": [
            {"id": "c1", "name": "Mathematics", "schoolId": "s1", "teacherId": "u3", "createdAt": 1},
            {"id": "c2", "name": "Science", "schoolId": "s1", "teacherId": "u3", "createdAt": 2},
            {"id": "c3", "name": "History", "schoolId": "s2", "teacherId": "u6", "createdAt": 3},
        ],
        "students": [
            {"id": "st1", "name": "Alex", "schoolId": "s1", "classId": "c1", "parentId": "u4", "createdAt": 1},
            {"id": "st2", "name": "Sam", "schoolId": "s1", "classId": "c2", "parentId": "u4", "createdAt": 2},
            {"id": "st3", "name": "Jo", "schoolId": "s2", "classId": "c3", "parentId": "u5", "createdAt": 3},
            {"id": "st4", "name": "Lee", "schoolId": "s1", "classId": "c3", "parentId": "u5", "createdAt": 4},
            {"id": "st5", "name": "Max", "schoolId": "s1", "classId": "gone", "parentId": "u5", "createdAt": 5},
        ],
        "grades": [
            {"id": "g1", "studentId": "st1", "classId": "c1", "subject": "Mathematics",
             "score": 85, "maxScore": 100, "date": NOW - 7 * DAY_MS},
            {"id": "g2", "studentId": "st2", "classId": "c2", "subject": "Science",
             "score": 15, "maxScore": 20, "date": NOW - 5 * DAY_MS},
            {"id": "g3", "studentId": "st3", "classId": "c3", "subject": "History",
             "score": 12, "maxScore": 20, "date": NOW - 3 * DAY_MS},
        ],
        "attendance": [
            {"id": "a1", "studentId": "st1", "classId": "c1", "date": 1000, "status": "present"},
            {"id": "a2", "studentId": "st1", "classId": "c1", "date": 2000, "status": "late"},
            {"id": "a3", "studentId": "st3", "classId": "c3", "date": 1000, "status": "absent"},
        ],
        "messages": [
            {"id": "m1", "senderId": "u3", "receiverId": "u4", "content": "Hello", "read": True, "createdAt": 100},
            {"id": "m2", "senderId": "u4", "receiverId": "u3", "content": "Hi", "read": True, "createdAt": 200},
            {"id": "m3", "senderId": "u3", "receiverId": "u4", "content": "Tomorrow?", "read": False,
             "createdAt": 300},
            {"id": "m4", "senderId": "u6", "receiverId": "u5", "content": "Field trip", "read": False,
             "createdAt": 150},
        ],
        "notifications": [
            {"id": "n1", "userId": "u4", "title": "New Grade Posted", "read": False, "createdAt": 10},
            {"id": "n2", "userId": "u4", "title": "Meeting", "read": True, "createdAt": 20},
            {"id": "n3", "userId": "u5", "title": "Trip", "read": False, "createdAt": 30},
        ],
        "subscriptions": [
            {"id": "sub1", "userId": "u4", "schoolId": "s1", "plan": "standard", "startDate": NOW - 30 * DAY_MS,
             "endDate": NOW + 30 * DAY_MS, "active": True, "studentsCount": 2},
            {"id": "sub2", "userId": "u5", "schoolId": "s2", "plan": "premium", "startDate": 0,
             "endDate": NOW - 1, "active": True, "studentsCount": 1},
        ],
        "bulletins": [
            {
                "id": "b1", "studentId": "st1", "schoolId": "s1", "classId": "c1",
                "period": "Semestre 1", "schoolYear": "2024-2025",
                "subjectGrades": [
                    {"subject": "Mathematics", "coefficient": 4, "compositionGrades": [14, 16],
                     "subjectAverage": 15, "teacherAppreciation": "Good work"},
                    {"subject": "History", "coefficient": 2, "compositionGrades": [12],
                     "subjectAverage": 12, "teacherAppreciation": ""},
                ],
                "generalAverage": 14, "classRank": 3, "totalStudents": 28,
            },
            {
                "id": "b3", "studentId": "st3", "schoolId": "s2", "classId": "c3",
                "period": "Annuel", "schoolYear": "2024-2025", "subjectGrades": [], "generalAverage": 0,
            },
        ],
    }


@pytest.fixture
def snapshot():
    """Raw snapshot dict, fresh for each test"""
    return _snapshot()


@pytest.fixture
def store(snapshot):
    return EntityStore.from_snapshot(snapshot)


@pytest.fixture
def make_session():
    """Build a session from a user id in the sample snapshot"""
    roles = {user["id"]: user for user in _snapshot()["users"]}

    def _make(user_id=None, role=None, school_id=None):
        if user_id is None:
            return UserSession.anonymous()
        user = roles.get(user_id, {})
        return UserSession(
            user_id=user_id,
            role=role if role is not None else user.get("role"),
            school_id=school_id if school_id is not None else user.get("schoolId"),
        )

    return _make


@pytest.fixture
def queries_for(store, make_session):
    """Scoped queries for a user id (None for anonymous)"""
    def _queries(user_id=None, **kwargs):
        return ScopedQueries(store, make_session(user_id, **kwargs))
    return _queries


# ==============================================================
# Database and HTTP client
# ==============================================================

@pytest.fixture
def db_manager():
    """Fresh in-memory database per test"""
    manager = DatabaseManager("sqlite://")
    manager.create_all()
    yield manager
    manager.close()


@pytest.fixture
def db(db_manager):
    yield from db_manager.get_session()


@pytest.fixture
def seeded_db(db_manager):
    """Database holding the demo dataset"""
    from app.services.demo_seed import seed_demo_data

    with db_manager.transaction() as session:
        seed_demo_data(session)
    return db_manager


@pytest.fixture
def client(seeded_db):
    from app.main import app

    def _get_db():
        yield from seeded_db.get_session()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer headers for a demo user"""
    def _headers(user_id, role, school_id=None):
        token = create_access_token(user_id, role, school_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers
