# app/api/routers/schools.py - School routes scoped to the caller
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from app.api.deps.snapshot import get_queries
from app.schemas.entities import School, SchoolClass
from app.services.scoped_queries import ScopedQueries

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[School])
async def list_schools(queries: ScopedQueries = Depends(get_queries)):
    """Schools visible to the caller: all for admins, their own for school admins"""
    return list(queries.list_schools())


@router.get("/{school_id}", response_model=School)
async def get_school(school_id: str, queries: ScopedQueries = Depends(get_queries)):
    school = queries.get_school(school_id)
    if school is None:
        logger.debug(f"School {school_id} not visible to caller")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="School not found")
    return school


@router.get("/{school_id}/classes", response_model=List[SchoolClass])
async def list_school_classes(school_id: str, queries: ScopedQueries = Depends(get_queries)):
    return list(queries.list_classes(school_id))
