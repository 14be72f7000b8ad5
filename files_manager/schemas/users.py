"""Pydantic schemas for user and session endpoints."""

from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    """Request model for user registration. Missing fields are reported by the service."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Response model for a user."""
    id: str
    email: str


class ConnectResponse(BaseModel):
    """Response model for login."""
    token: str
