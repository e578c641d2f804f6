# app/schemas/message.py
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class MessageCreate(BaseModel):
    receiver_id: str = Field(..., min_length=1)
    content: str = Field(..., max_length=2000)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError("Message content cannot be empty")
        return v.strip()


class ConversationReadOut(BaseModel):
    partner_id: str
    marked: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True
