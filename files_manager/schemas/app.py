"""Pydantic schemas for service status endpoints."""

from pydantic import BaseModel


class StatusResponse(BaseModel):
    """Response model for store connectivity."""
    redis: bool
    db: bool


class StatsResponse(BaseModel):
    """Response model for entity counts."""
    users: int
    files: int
