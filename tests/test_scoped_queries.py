"""Tests for access-scoped queries."""

import pytest

from app.services.scoped_queries import ScopedQueries

ALL_USERS = ["u1", "u2", "u3", "u4", "u5", "u6", "u7", "u9"]


def ids(records):
    return [r.id for r in records]


class TestAnonymous:
    """Anonymous sessions see nothing."""

    def test_every_query_is_empty(self, queries_for):
        q = queries_for(None)
        assert q.list_schools() == ()
        assert q.list_classes() == ()
        assert q.list_students("c1") == ()
        assert q.list_students_for_parent("u4") == ()
        assert q.list_grades("st1") == ()
        assert q.list_attendance("st1") == ()
        assert q.list_messages_for_user("u4") == ()
        assert q.list_notifications_for_user("u4") == ()
        assert q.conversations() == []
        assert q.get_student("st1") is None
        assert q.get_school("s1") is None
        assert q.get_user("u4") is None


class TestAdmin:
    """Admins see every record."""

    def test_lists_everything(self, queries_for, store):
        q = queries_for("u1")
        assert ids(q.list_schools()) == ["s1", "s2"]
        assert ids(q.list_classes()) == ["c1", "c2", "c3"]
        assert ids(q.list_classes("s2")) == ["c3"]
        assert q.get_student("st3") is not None
        assert ids(q.list_grades("st3")) == ["g3"]
        assert ids(q.list_messages_for_user("u5")) == ["m4"]

    def test_notifications_stay_private(self, queries_for):
        assert queries_for("u1").list_notifications_for_user("u4") == ()


class TestSchoolAdmin:
    """School admins are confined to their own school."""

    def test_only_own_school(self, queries_for):
        q = queries_for("u2")
        assert ids(q.list_schools()) == ["s1"]
        assert q.get_school("s2") is None
        assert ids(q.list_classes()) == ["c1", "c2"]
        assert q.list_classes("s2") == ()
        assert q.get_class("c3") is None

    def test_school_from_user_record_when_session_lacks_it(self, store):
        from app.schemas.session import UserSession

        q = ScopedQueries(store, UserSession(user_id="u2", role="schoolAdmin"))
        assert ids(q.list_schools()) == ["s1"]

    def test_students_of_own_school(self, queries_for):
        q = queries_for("u2")
        assert q.get_student("st4") is not None
        assert q.get_student("st3") is None
        assert ids(q.list_students_for_parent("u5")) == ["st4", "st5"]

    def test_cannot_list_students_of_foreign_class(self, queries_for):
        assert queries_for("u2").list_students("c3") == ()

    @pytest.mark.parametrize("admin_id, school_id", [("u2", "s1"), ("u7", "s2")])
    def test_everything_returned_is_in_own_school(self, queries_for, store, admin_id, school_id):
        q = queries_for(admin_id)
        assert all(s.id == school_id for s in q.list_schools())
        classes = q.list_classes()
        assert all(c.school_id == school_id for c in classes)
        students = [s for c in classes for s in q.list_students(c.id)]
        students += [s for p in ("u4", "u5") for s in q.list_students_for_parent(p)]
        assert all(s.school_id == school_id for s in students)


class TestTeacher:
    """Teachers see the classes they teach and the students in them."""

    @pytest.mark.parametrize("teacher_id", ["u3", "u6"])
    def test_every_class_is_taught_by_caller(self, queries_for, teacher_id):
        classes = queries_for(teacher_id).list_classes()
        assert classes
        assert all(c.teacher_id == teacher_id for c in classes)

    def test_no_schools(self, queries_for):
        assert queries_for("u3").list_schools() == ()

    def test_students_in_own_class(self, queries_for):
        q = queries_for("u3")
        assert ids(q.list_students("c1")) == ["st1"]
        assert q.list_students("c3") == ()

    def test_grades_and_attendance_for_class(self, queries_for):
        q = queries_for("u3")
        assert ids(q.list_grades_for_class("c1")) == ["g1"]
        assert ids(q.list_attendance_for_class("c1")) == ["a1", "a2"]
        assert ids(q.list_attendance_for_class("c1", date=2000)) == ["a2"]
        assert q.list_grades_for_class("c3") == ()

    def test_cross_school_class_reference_is_dangling(self, queries_for):
        # st4 is in school s1 but points at class c3 of school s2
        q = queries_for("u6")
        assert q.get_student("st4") is None
        assert ids(q.list_students("c3")) == ["st3"]

    def test_list_students_for_parent_limited_to_own_classes(self, queries_for):
        assert ids(queries_for("u3").list_students_for_parent("u4")) == ["st1", "st2"]
        assert queries_for("u3").list_students_for_parent("u5") == ()


class TestParent:
    """Parents see their own children only."""

    @pytest.mark.parametrize("parent_id", ["u4", "u5"])
    def test_children_match_parent_id(self, queries_for, store, parent_id):
        listed = queries_for(parent_id).list_students_for_parent(parent_id)
        expected = [s.id for s in store.all("students") if s.parent_id == parent_id]
        assert ids(listed) == expected

    def test_other_parents_children_are_hidden(self, queries_for):
        q = queries_for("u4")
        assert q.list_students_for_parent("u5") == ()
        assert q.get_student("st3") is None
        assert q.list_grades("st3") == ()
        assert q.list_bulletins("st3") == ()

    def test_own_child_records(self, queries_for):
        q = queries_for("u4")
        assert ids(q.list_grades("st1")) == ["g1"]
        assert ids(q.list_attendance("st1")) == ["a1", "a2"]
        assert ids(q.list_bulletins("st1")) == ["b1"]
        assert q.get_bulletin("b1") is not None
        assert q.get_bulletin("b3") is None

    def test_dangling_class_does_not_hide_child(self, queries_for):
        assert queries_for("u5").get_student("st5") is not None

    def test_no_classes_or_schools(self, queries_for):
        q = queries_for("u4")
        assert q.list_classes() == ()
        assert q.list_schools() == ()
        assert q.list_students("c1") == ()


class TestUnknownRole:
    """Unknown roles are scoped like parents."""

    def test_behaves_like_parent(self, queries_for):
        q = queries_for("u9")
        assert q.list_schools() == ()
        assert q.list_classes() == ()
        assert q.get_student("st1") is None
        assert q.list_students_for_parent("u4") == ()


class TestMessagesAndNotifications:
    """Mailboxes and notifications."""

    def test_own_messages_in_store_order(self, queries_for):
        assert ids(queries_for("u4").list_messages_for_user("u4")) == ["m1", "m2", "m3"]

    def test_other_mailbox_is_hidden(self, queries_for):
        assert queries_for("u4").list_messages_for_user("u5") == ()
        assert queries_for("u3").list_messages_for_user("u4") == ()

    def test_conversation_with_partner(self, queries_for):
        assert ids(queries_for("u4").conversation_with("u3")) == ["m1", "m2", "m3"]
        assert queries_for("u4").conversation_with("u6") == []

    def test_notifications_and_unread_count(self, queries_for):
        q = queries_for("u4")
        assert ids(q.list_notifications_for_user("u4")) == ["n1", "n2"]
        assert q.unread_notification_count("u4") == 1
        assert q.list_notifications_for_user("u5") == ()
        assert q.unread_notification_count("u5") == 0

    def test_get_notification_owner_only(self, queries_for):
        assert queries_for("u4").get_notification("n1") is not None
        assert queries_for("u4").get_notification("n3") is None
        assert queries_for("u1").get_notification("n1") is None


class TestGetUser:
    """Directory lookups."""

    def test_self_and_partners(self, queries_for):
        q = queries_for("u4")
        assert q.get_user("u4").name == "Pat Johnson"
        assert q.get_user("u3").name == "Ms. Rivera"
        assert q.get_user("u6") is None

    def test_school_admin_sees_school_staff(self, queries_for):
        q = queries_for("u2")
        assert q.get_user("u3") is not None
        assert q.get_user("u6") is None

    def test_admin_sees_everyone(self, queries_for):
        q = queries_for("u1")
        assert all(q.get_user(user_id) is not None for user_id in ALL_USERS)

    def test_parent_sees_childrens_teachers_and_school_admin(self, queries_for):
        q = queries_for("u4")
        assert q.get_user("u2").name == "Central Admin"
        assert q.get_user("u1") is None
        assert q.get_user("u5") is None

    def test_teacher_sees_parents_of_taught_students(self, queries_for):
        q = queries_for("u6")
        assert q.get_user("u5") is not None
        assert q.get_user("u7") is not None
        assert q.get_user("u4") is None

    def test_school_admin_sees_parents_of_school_students(self, queries_for):
        assert queries_for("u2").get_user("u5") is not None
        assert queries_for("u7").get_user("u4") is None

    def test_unknown_role_sees_only_self(self, queries_for):
        q = queries_for("u9")
        assert [u for u in ALL_USERS if q.get_user(u) is not None] == ["u9"]


class TestCanMessage:
    """Who a caller may write to."""

    def test_parent(self, queries_for):
        q = queries_for("u4")
        assert q.can_message("u3")
        assert q.can_message("u2")
        assert not q.can_message("u6")
        assert not q.can_message("u1")

    def test_teacher(self, queries_for):
        q = queries_for("u3")
        assert q.can_message("u4")
        assert not q.can_message("u5")

    def test_not_self(self, queries_for):
        assert not queries_for("u1").can_message("u1")

    def test_hidden_and_missing_look_the_same(self, queries_for):
        q = queries_for("u4")
        assert q.can_message("u6") is False
        assert q.can_message("nobody") is False

    def test_anonymous(self, queries_for):
        assert not queries_for(None).can_message("u3")
