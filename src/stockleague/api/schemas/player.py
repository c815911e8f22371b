"""Pydantic schemas for player endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlayerCreate(BaseModel):
    """Request schema for registering a player."""

    name: str = Field(..., min_length=1, max_length=255, description="Unique player name")
    password: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Initial password; the league default is used when omitted",
    )


class PasswordChange(BaseModel):
    """Request schema for changing a password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request schema for checking a player's credentials."""

    name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PlayerResponse(BaseModel):
    """Response schema for a single player."""

    model_config = {"from_attributes": True}

    player_id: str
    name: str
    created_at: Optional[datetime] = None


class PlayerListResponse(BaseModel):
    """Response schema for listing players."""

    players: list[PlayerResponse]
    count: int
