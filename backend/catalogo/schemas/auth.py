"""Auth request/response schemas."""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from catalogo.models.user import UserRole


# ── Login ──────────────────────────────────────────
class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    role: UserRole


# ── Current User ───────────────────────────────────
class CurrentUser(BaseModel):
    id: UUID
    email: str
    role: UserRole
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
