"""Pydantic request schemas for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class CreateGameRequest(BaseModel):
    """Request to create a new game."""

    humanFaction: Literal["player", "enemy"] | None = Field(  # noqa: N815
        default="player", description="Faction directed by the client; null for AI vs AI"
    )
    seed: int | None = Field(default=None, description="Optional map layout seed")
    mapSize: Literal["compact", "standard", "vast"] = Field(  # noqa: N815
        default="compact", description="Map size: 'compact', 'standard' or 'vast'"
    )
    difficulty: Literal["easy", "medium", "hard"] = Field(
        default="medium", description="Difficulty of the automated opponent"
    )


class BuildRequest(BaseModel):
    """Queue a ship at a planet."""

    planetId: int = Field(ge=0, description="Planet that builds the ship")  # noqa: N815
    kind: str = Field(description="Ship kind: scout, colonizer, frigate or battleship")


class SendFleetRequest(BaseModel):
    """Send ships from one planet to another."""

    sourceId: int = Field(ge=0, description="Planet the ships are stationed at")  # noqa: N815
    shipIds: list[str] = Field(description="IDs of the ships to send")  # noqa: N815
    destinationId: int = Field(ge=0, description="Target planet")  # noqa: N815


class BattleDecisionRequest(BaseModel):
    """Answer to a pending battle."""

    decision: Literal["fight", "withdraw"]


class RetreatRequest(BaseModel):
    """Destination for ships waiting after a withdrawal."""

    planetId: int = Field(ge=0, description="Friendly planet to retreat to")  # noqa: N815
