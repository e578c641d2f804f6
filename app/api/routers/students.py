# app/api/routers/students.py - Student records scoped to the caller
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List
import logging

from app.api.deps.snapshot import get_queries
from app.schemas.bulletin import BulletinReport, SubjectSummary
from app.schemas.entities import Attendance, Grade, Student
from app.services.bulletins import bulletin_report, summarize_grades
from app.services.scoped_queries import ScopedQueries

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[Student])
async def list_students_for_parent(
    parent_id: str = Query(..., alias="parentId"),
    queries: ScopedQueries = Depends(get_queries),
):
    """Children of one parent, as far as the caller may see them"""
    return list(queries.list_students_for_parent(parent_id))


@router.get("/bulletins/{bulletin_id}", response_model=BulletinReport)
async def get_bulletin(bulletin_id: str, queries: ScopedQueries = Depends(get_queries)):
    bulletin = queries.get_bulletin(bulletin_id)
    if bulletin is None:
        logger.debug(f"Bulletin {bulletin_id} not visible to caller")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bulletin not found")
    return bulletin_report(bulletin)


@router.get("/{student_id}", response_model=Student)
async def get_student(student_id: str, queries: ScopedQueries = Depends(get_queries)):
    student = queries.get_student(student_id)
    if student is None:
        logger.debug(f"Student {student_id} not visible to caller")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


@router.get("/{student_id}/grades", response_model=List[Grade])
async def list_student_grades(student_id: str, queries: ScopedQueries = Depends(get_queries)):
    return list(queries.list_grades(student_id))


@router.get("/{student_id}/grades/summary", response_model=List[SubjectSummary])
async def summarize_student_grades(student_id: str, queries: ScopedQueries = Depends(get_queries)):
    """Average percentage per subject over the grades the caller may see"""
    return summarize_grades(queries.list_grades(student_id))


@router.get("/{student_id}/attendance", response_model=List[Attendance])
async def list_student_attendance(student_id: str, queries: ScopedQueries = Depends(get_queries)):
    return list(queries.list_attendance(student_id))


@router.get("/{student_id}/bulletins", response_model=List[BulletinReport])
async def list_student_bulletins(student_id: str, queries: ScopedQueries = Depends(get_queries)):
    return [bulletin_report(b) for b in queries.list_bulletins(student_id)]
