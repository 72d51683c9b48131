"""Identities: admins and employees."""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class User(Document):
    """Credential record; the role alone decides what the user may do."""

    email: Indexed(EmailStr, unique=True)
    hashed_password: str
    role: UserRole = UserRole.USER
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_pic: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email

    class Settings:
        name = "users"
        use_state_management = True


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=20)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=20)
    profile_pic: str = ""
    role: UserRole = UserRole.USER


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=20)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=20)
    profile_pic: Optional[str] = None
    role: Optional[UserRole] = None


class UserOut(BaseModel):
    id: str
    email: str
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_pic: str = ""
    created_at: datetime
    updated_at: datetime


def user_out(user: User) -> UserOut:
    return UserOut(
        id=str(user.id),
        email=user.email,
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_pic=user.profile_pic,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
