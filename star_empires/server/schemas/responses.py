"""Pydantic response schemas for API endpoints."""

from pydantic import BaseModel, Field


class GameStateResponse(BaseModel):
    """Response containing current game state."""

    gameId: str  # noqa: N815
    turn: int
    status: str
    winner: str | None
    state: dict
    events: list[dict] = Field(default_factory=list)


class CreateGameResponse(BaseModel):
    """Response after creating a new game."""

    gameId: str  # noqa: N815
    humanFaction: str | None  # noqa: N815
    seed: int
    mapSize: str  # noqa: N815
    difficulty: str
    state: dict


class CommandResponse(BaseModel):
    """Response after a build, cancel or fleet command."""

    accepted: bool
    errors: list[str] = Field(default_factory=list)


class TurnResponse(BaseModel):
    """Response after advancing a turn or answering a decision."""

    accepted: bool
    turn: int | None = None
    status: str | None = None
    events: list[dict] = Field(default_factory=list)
    pendingBattle: dict | None = None  # noqa: N815
    winner: str | None = None
    errors: list[str] = Field(default_factory=list)


class ScoreResponse(BaseModel):
    """Per-faction scores."""

    gameId: str  # noqa: N815
    turn: int
    scores: dict[str, int]
