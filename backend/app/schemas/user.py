from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime


class ProfileUser(BaseModel):
    id: str
    name: Optional[str] = None
    email: str

    class Config:
        from_attributes = True


class ProfileLayout(BaseModel):
    id: str
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileTemplate(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    user: ProfileUser
    layouts: List[ProfileLayout] = []
    templates: List[ProfileTemplate] = []


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None


class ProfileUpdateResponse(BaseModel):
    name: Optional[str] = None
    email: str


class PasswordUpdate(BaseModel):
    password: str = Field(..., min_length=8)
