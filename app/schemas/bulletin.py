# app/schemas/bulletin.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from app.schemas.entities import Bulletin


class BulletinReport(Bulletin):
    """A bulletin as served, with its average recomputed from the subject grades"""
    weighted_average: float
    average_consistent: bool


class SubjectSummary(BaseModel):
    subject: str
    grade_count: int
    average_percentage: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True
