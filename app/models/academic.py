# app/models/academic.py - Grades, attendance and report cards
from __future__ import annotations

from sqlalchemy import BigInteger, CheckConstraint, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, new_id, now_ms


class Grade(Base):
    __tablename__ = "grades"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("students.id"), nullable=False, index=True)
    class_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("classes.id"), index=True)
    subject: Mapped[str] = mapped_column(String(64), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    max_score: Mapped[float] = mapped_column(Float, nullable=False, default=100)
    date: Mapped[int] = mapped_column(BigInteger, nullable=False)

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    __table_args__ = (
        CheckConstraint("score >= 0 AND score <= max_score", name="ck_grade_score_range"),
    )


class Attendance(Base):
    __tablename__ = "attendance"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("students.id"), nullable=False, index=True)
    class_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("classes.id"), index=True)
    date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)  # present|absent|late

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    __table_args__ = (
        CheckConstraint("status IN ('present','absent','late')", name="ck_attendance_status"),
    )


class Bulletin(Base):
    __tablename__ = "bulletins"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("students.id"), nullable=False, index=True)
    school_id: Mapped[str] = mapped_column(String(36), ForeignKey("schools.id"), nullable=False, index=True)
    class_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("classes.id"), index=True)
    period: Mapped[str] = mapped_column(String(32), nullable=False)  # Semestre 1 | Semestre 2 | Annuel
    school_year: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    general_average: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    class_rank: Mapped[int | None] = mapped_column(Integer)
    total_students: Mapped[int | None] = mapped_column(Integer)

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)

    # Relationships
    subject_grades: Mapped[list["BulletinSubjectGrade"]] = relationship(
        "BulletinSubjectGrade",
        back_populates="bulletin",
        cascade="all, delete-orphan",
        order_by="BulletinSubjectGrade.position",
    )

    def to_record(self):
        record = super().to_record()
        record["subject_grades"] = [sg.to_record() for sg in self.subject_grades]
        return record


class BulletinSubjectGrade(Base):
    __tablename__ = "bulletin_subject_grades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bulletin_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("bulletins.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    subject: Mapped[str] = mapped_column(String(64), nullable=False)
    coefficient: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    subject_average: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    teacher_appreciation: Mapped[str] = mapped_column(Text, nullable=False, default="")

    bulletin: Mapped["Bulletin"] = relationship("Bulletin", back_populates="subject_grades")
