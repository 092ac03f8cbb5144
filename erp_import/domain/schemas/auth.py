"""Pydantic schemas for user provisioning."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CreateUserRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    email_confirm: bool = True
    roles: List[str] = []
    display_name: Optional[str] = None


class CreatedUserRead(BaseModel):
    id: str
    email: str
    created_at: Optional[datetime] = None
    roles: List[str] = []

    model_config = {"from_attributes": True}
