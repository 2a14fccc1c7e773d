"""User administration schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from catalogo.models.user import UserRole


class UserUpsert(BaseModel):
    """Create the account if the email is new, otherwise update its role."""
    email: EmailStr
    role: UserRole = UserRole.STORE
    password: str | None = Field(None, min_length=6)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
