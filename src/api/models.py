"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from domain.model.user import User


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    email: EmailStr
    password: str
    name: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    """Public view of a user.

    Password, refresh token hashes, the internal id and roles are not
    part of this model.
    """
    name: str
    email: str
    phone: Optional[str] = None
    total_amount: float = Field(0, description="Sum of all order totals")
    order_count: int = Field(0, description="Number of orders placed")
    last_order_date: Optional[datetime] = None
    last_order: Optional[str] = Field(None, description="ID of the most recent order")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(
            name=user.name,
            email=user.email,
            phone=user.phone,
            total_amount=user.total_amount,
            order_count=user.order_count,
            last_order_date=user.last_order_date,
            last_order=user.last_order,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(CamelModel):
    """Response model for registration and login."""
    success: bool = True
    user: UserResponse
    access_token: str
    refresh_token: str


class UploadResponse(CamelModel):
    """Response model for an accepted upload."""
    file_name: str = Field(..., description="Public path of the stored file")
    original_name: str = Field(..., description="File name as sent by the client")


class CsrfTokenResponse(CamelModel):
    csrf_token: str
