# app/models/base.py - Declarative base shared by all persistence models
import time
import uuid
from typing import Any, Dict

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    """Current time as integer epoch milliseconds"""
    return int(time.time() * 1000)


class Base(DeclarativeBase):

    def to_record(self) -> Dict[str, Any]:
        """Column values keyed by attribute name, ready for the entity store"""
        mapper = inspect(self).mapper
        return {attr.key: getattr(self, attr.key) for attr in mapper.column_attrs}
