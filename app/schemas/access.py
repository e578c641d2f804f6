# app/schemas/access.py - Permission and entitlement decisions sent to the client
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Dict, Optional


class PermissionsOut(BaseModel):
    """Role decisions the client uses to show or hide screens"""
    role: Optional[str]
    permissions: Dict[str, bool]
    is_educator: bool
    is_manager: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SubscriptionGateOut(BaseModel):
    state: str  # unknown | denied | granted
    redirect_to_upgrade: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True
