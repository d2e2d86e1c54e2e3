from .hub import ScoreHub, UPDATE_EVENT
from .models import ScoreState, ScoreUpdate, next_state

__all__ = [
    "ScoreHub",
    "UPDATE_EVENT",
    "ScoreState",
    "ScoreUpdate",
    "next_state",
]
