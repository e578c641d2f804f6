"""Tests for report card averages."""

import logging

import pytest

from app.schemas.entities import Bulletin, Grade, SubjectGrade
from app.services.bulletins import (
    bulletin_is_consistent,
    bulletin_report,
    general_average,
    grade_percentage,
    subject_average,
    summarize_grades,
)


class TestAverages:

    def test_grade_percentage(self):
        grade = Grade(id="g", student_id="s", subject="Maths", score=15, max_score=20, date=0)
        assert grade_percentage(grade) == pytest.approx(75.0)

    def test_subject_average(self):
        assert subject_average([12, 14, 16]) == pytest.approx(14.0)
        assert subject_average([]) == 0.0

    def test_general_average_is_weighted(self):
        subjects = [
            SubjectGrade(subject="Maths", coefficient=4, subject_average=15),
            SubjectGrade(subject="History", coefficient=2, subject_average=12),
        ]
        assert general_average(subjects) == pytest.approx(14.0)

    def test_general_average_without_coefficients(self):
        assert general_average([SubjectGrade(subject="Art", coefficient=0, subject_average=18)]) == 0.0
        assert general_average([]) == 0.0

    def test_negative_coefficient_rejected(self):
        with pytest.raises(ValueError):
            SubjectGrade(subject="Art", coefficient=-1)


class TestConsistency:

    def test_sample_bulletin_is_consistent(self, store):
        assert bulletin_is_consistent(store.get("bulletins", "b1"))

    def test_stale_average_detected(self):
        bulletin = Bulletin(
            id="b", student_id="s", school_id="x", period="Semestre 2",
            subject_grades=[SubjectGrade(subject="Maths", coefficient=1, subject_average=10)],
            general_average=11,
        )
        assert not bulletin_is_consistent(bulletin)


class TestBulletinReport:

    def test_consistent_bulletin(self, store):
        report = bulletin_report(store.get("bulletins", "b1"))
        assert report.id == "b1"
        assert report.general_average == 14
        assert report.weighted_average == pytest.approx(14.0)
        assert report.average_consistent is True
        assert [sg.subject for sg in report.subject_grades] == ["Mathematics", "History"]

    def test_stale_average_is_flagged(self, caplog):
        bulletin = Bulletin(
            id="b", student_id="s", school_id="x", period="Semestre 2",
            subject_grades=[SubjectGrade(subject="Maths", coefficient=1, subject_average=10)],
            general_average=11,
        )
        with caplog.at_level(logging.WARNING, logger="app.services.bulletins"):
            report = bulletin_report(bulletin)
        assert report.general_average == 11
        assert report.weighted_average == pytest.approx(10.0)
        assert report.average_consistent is False
        assert "Bulletin b" in caplog.text

    def test_serialized_in_camel_case(self, store):
        body = bulletin_report(store.get("bulletins", "b1")).model_dump(by_alias=True)
        assert body["averageConsistent"] is True
        assert body["subjectGrades"][0]["subjectAverage"] == 15


class TestSummarizeGrades:

    def test_groups_by_subject_in_first_seen_order(self):
        grades = [
            Grade(id="1", student_id="s", subject="Science", score=15, max_score=20, date=0),
            Grade(id="2", student_id="s", subject="Maths", score=50, max_score=100, date=0),
            Grade(id="3", student_id="s", subject="Science", score=10, max_score=20, date=0),
        ]
        summary = summarize_grades(grades)
        assert [(s.subject, s.grade_count) for s in summary] == [("Science", 2), ("Maths", 1)]
        assert summary[0].average_percentage == pytest.approx(62.5)
        assert summary[1].average_percentage == pytest.approx(50.0)

    def test_no_grades(self):
        assert summarize_grades([]) == []

    def test_scoped_grades(self, queries_for):
        summary = summarize_grades(queries_for("u4").list_grades("st2"))
        assert [s.subject for s in summary] == ["Science"]
        assert summary[0].average_percentage == pytest.approx(75.0)
        assert summarize_grades(queries_for("u4").list_grades("st3")) == []
