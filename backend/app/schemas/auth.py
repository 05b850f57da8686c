"""Request and response bodies for /auth"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

PASSWORD_MIN_LENGTH = 8


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    name: Optional[str] = Field(None, max_length=255, description="Display name")


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Public view of an account; never includes the password hash"""

    id: str
    email: str
    name: Optional[str] = None
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    message: str
    user_id: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
