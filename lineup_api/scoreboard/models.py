from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ScoreUpdate(BaseModel):
    """Wire shape the control panel publishes and the display renders."""

    model_config = ConfigDict(extra="ignore")

    team1Name: str = "Team 1"
    team2Name: str = "Team 2"
    team1Score: int = Field(0, ge=0)
    team2Score: int = Field(0, ge=0)
    team1Color: str = "blue"
    team2Color: str = "green"
    team1Sets: int = Field(0, ge=0)
    team2Sets: int = Field(0, ge=0)


class ScoreState(ScoreUpdate):
    lastScorer: Optional[Literal["team1", "team2"]] = None


def next_state(prev: Optional[ScoreState], update: ScoreUpdate) -> ScoreState:
    """Attach lastScorer by comparing against the previous scores."""
    last = prev.lastScorer if prev is not None else None
    p1 = prev.team1Score if prev is not None else 0
    p2 = prev.team2Score if prev is not None else 0
    if update.team1Score > p1:
        last = "team1"
    elif update.team2Score > p2:
        last = "team2"
    return ScoreState(**update.model_dump(), lastScorer=last)
