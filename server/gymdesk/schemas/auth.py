from typing import Literal

from pydantic import BaseModel, EmailStr, Field

RoleName = Literal["Admin", "Staff"]


class LoginRequest(BaseModel):
    tenant_id: int
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=120)
    email: EmailStr
    phone: str | None = Field(None, max_length=32)
    password: str = Field(..., min_length=8, max_length=128)
    roles: list[RoleName] = Field(default_factory=lambda: ["Staff"], min_length=1)


class UserOut(BaseModel):
    id: int
    tenant_id: int
    full_name: str
    email: EmailStr
    phone: str | None = None
    is_active: bool
    roles: list[str] = Field(default_factory=list, validation_alias="role_names")

    class Config:
        from_attributes = True


class WhoAmIResponse(BaseModel):
    id: int
    tenant_id: int
    user: EmailStr
    full_name: str
    roles: list[str]
