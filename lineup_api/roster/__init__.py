from .models import (
    RosterValidationError,
    Team,
    TeamNotFoundError,
    TeamPlayer,
    fill_slots,
)
from .store import MemoryRosterStore, RosterStore

__all__ = [
    "RosterValidationError",
    "Team",
    "TeamNotFoundError",
    "TeamPlayer",
    "fill_slots",
    "MemoryRosterStore",
    "RosterStore",
]
