"""Pydantic schemas for authentication, defining the structure for request and response data."""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
import datetime

from .models import Role


class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="User password")
    role: Role = Field(Role.BUYER, description="Either 'buyer' or 'farmer'")
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    id: str = Field(..., description="Public unique identifier for the user (KSUID)")
    name: str
    email: EmailStr
    role: Role
    token: str = Field(..., description="Bearer token for the Authorization header")


class UserProfile(BaseModel):
    id: str = Field(..., validation_alias="public_id", description="Public unique identifier for the user (KSUID)")
    name: str
    email: EmailStr
    role: Role
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime.datetime = Field(..., description="Timestamp of when the user was created")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        protected_namespaces=(),
    )


class TokenData(BaseModel):
    sub: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
