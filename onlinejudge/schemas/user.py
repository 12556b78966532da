"""
User-related Pydantic schemas.
"""

from typing import Optional
from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering a new user."""
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None


class UserLogin(BaseModel):
    username: str
    password: str


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    username: str
    name: Optional[str]
    email: Optional[str]
    authority: int

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Schema for login response."""
    access_token: str
    token_type: str = "bearer"
    user_id: int
    user_authority: int
