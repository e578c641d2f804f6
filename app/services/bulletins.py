# app/services/bulletins.py - Report card averages
import logging
from typing import Dict, Iterable, List, Sequence

from app.schemas.bulletin import BulletinReport, SubjectSummary
from app.schemas.entities import Bulletin, Grade, SubjectGrade

logger = logging.getLogger(__name__)


def grade_percentage(grade: Grade) -> float:
    if grade.max_score <= 0:
        return 0.0
    return grade.score / grade.max_score * 100


def subject_average(scores: Sequence[float]) -> float:
    """Plain mean of composition grades, 0 when there are none"""
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def general_average(subject_grades: Iterable[SubjectGrade]) -> float:
    """Coefficient-weighted mean of subject averages"""
    total_points = 0.0
    total_coefficients = 0.0
    for subject in subject_grades:
        total_points += subject.subject_average * subject.coefficient
        total_coefficients += subject.coefficient
    return total_points / total_coefficients if total_coefficients > 0 else 0.0


def bulletin_is_consistent(bulletin: Bulletin, tolerance: float = 0.01) -> bool:
    """Whether the stored general average matches its subject grades"""
    return abs(bulletin.general_average - general_average(bulletin.subject_grades)) <= tolerance


def bulletin_report(bulletin: Bulletin) -> BulletinReport:
    """
    Attach the recomputed weighted average to a bulletin.

    The stored ``general_average`` is served unchanged; a mismatch is flagged
    through ``average_consistent`` and logged.
    """
    consistent = bulletin_is_consistent(bulletin)
    if not consistent:
        logger.warning(
            f"Bulletin {bulletin.id}: stored general average {bulletin.general_average} "
            f"does not match subject grades ({general_average(bulletin.subject_grades):.2f})"
        )
    return BulletinReport(
        **bulletin.model_dump(),
        weighted_average=general_average(bulletin.subject_grades),
        average_consistent=consistent,
    )


def summarize_grades(grades: Iterable[Grade]) -> List[SubjectSummary]:
    """Mean percentage per subject, subjects in the order first graded"""
    by_subject: Dict[str, List[float]] = {}
    for grade in grades:
        by_subject.setdefault(grade.subject, []).append(grade_percentage(grade))
    return [
        SubjectSummary(subject=subject, grade_count=len(scores), average_percentage=subject_average(scores))
        for subject, scores in by_subject.items()
    ]
