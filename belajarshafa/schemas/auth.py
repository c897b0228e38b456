# belajarshafa/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field, field_validator

from belajarshafa.models.enums import Role
from belajarshafa.schemas.user import UserPublic


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)
    role: Role = Role.MENTEE

    @field_validator("role")
    @classmethod
    def self_service_role(cls, v: Role) -> Role:
        # managers and admins are appointed, never self-registered
        if v not in (Role.MENTOR, Role.MENTEE):
            raise ValueError("role must be MENTOR or MENTEE")
        return v
