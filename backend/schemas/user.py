from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from schemas.common import ORMBase, reject_null


class RoleOut(ORMBase):
    id: int
    name: str
    description: Optional[str] = None


# Compact user representation embedded in carts, reviews and orders
class UserBrief(ORMBase):
    id: int
    name: str
    email: str


# Output schema for user profile details
class UserOut(UserBrief):
    address: Optional[str] = None
    profile_image: Optional[str] = None
    roles: List[RoleOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Admin-side user creation
class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    address: Optional[str] = None
    profile_image: Optional[str] = None


# Schema for partial user updates
class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    address: Optional[str] = None
    profile_image: Optional[str] = None

    @field_validator("name", "email", "password", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)


# Schema for administrative role updates; the role set is replaced
class RolesUpdate(BaseModel):
    roles: List[str] = Field(min_length=1)


# Schema for user registration requests
class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    password_confirmation: str
    address: Optional[str] = None
    profile_image: Optional[str] = None


# Schema for user authentication credentials
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# Token plus the authenticated user, returned by register and login
class AuthResponse(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"


class UserEnvelope(BaseModel):
    user: UserOut


class TokenCheck(BaseModel):
    valid: bool
    user: UserOut


class RolesEnvelope(BaseModel):
    roles: List[RoleOut]


class UserRolesUpdated(BaseModel):
    message: str
    user: UserOut
