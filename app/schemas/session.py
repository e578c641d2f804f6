# app/schemas/session.py - Explicit caller identity passed into every core call
from typing import Optional

from pydantic import BaseModel


class UserSession(BaseModel):
    """Who is asking. Valid for one request; never stored globally."""

    user_id: Optional[str] = None
    role: Optional[str] = None
    school_id: Optional[str] = None

    class Config:
        frozen = True

    @classmethod
    def anonymous(cls) -> "UserSession":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)
