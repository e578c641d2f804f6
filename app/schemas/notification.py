from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import List

from app.schemas.entities import Notification


class NotificationList(BaseModel):
    notifications: List[Notification]
    unread_count: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class NotificationReadOut(BaseModel):
    id: str
    read: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True
