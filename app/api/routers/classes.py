# app/api/routers/classes.py - Class routes scoped to the caller
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
import logging

from app.api.deps.snapshot import get_queries
from app.schemas.entities import Attendance, Grade, SchoolClass, Student
from app.services.scoped_queries import ScopedQueries

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[SchoolClass])
async def list_classes(
    school_id: Optional[str] = Query(None, alias="schoolId"),
    queries: ScopedQueries = Depends(get_queries),
):
    return list(queries.list_classes(school_id))


@router.get("/{class_id}", response_model=SchoolClass)
async def get_class(class_id: str, queries: ScopedQueries = Depends(get_queries)):
    school_class = queries.get_class(class_id)
    if school_class is None:
        logger.debug(f"Class {class_id} not visible to caller")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return school_class


@router.get("/{class_id}/students", response_model=List[Student])
async def list_class_students(class_id: str, queries: ScopedQueries = Depends(get_queries)):
    return list(queries.list_students(class_id))


@router.get("/{class_id}/grades", response_model=List[Grade])
async def list_class_grades(class_id: str, queries: ScopedQueries = Depends(get_queries)):
    return list(queries.list_grades_for_class(class_id))


@router.get("/{class_id}/attendance", response_model=List[Attendance])
async def list_class_attendance(
    class_id: str,
    date: Optional[int] = Query(None, description="Epoch milliseconds of the class day"),
    queries: ScopedQueries = Depends(get_queries),
):
    return list(queries.list_attendance_for_class(class_id, date))
