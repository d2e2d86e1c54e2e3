from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence


class RosterValidationError(ValueError):
    pass


class TeamNotFoundError(KeyError):
    pass


def new_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


def _clean_name(s: Optional[str], what: str) -> str:
    v = (s or "").strip()
    if not v:
        raise RosterValidationError(f"Please enter a {what} name")
    return v


@dataclass(frozen=True)
class TeamPlayer:
    id: str
    name: str
    jersey_number: Optional[str] = None

    @staticmethod
    def create(name: str, jersey_number: Optional[str] = None, *, id: Optional[str] = None) -> "TeamPlayer":
        jersey = (jersey_number or "").strip() or None
        return TeamPlayer(id=id or new_id(), name=_clean_name(name, "player"), jersey_number=jersey)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TeamPlayer":
        return TeamPlayer.create(
            str(d.get("name", "")),
            d.get("jerseyNumber"),
            id=(str(d["id"]) if d.get("id") else None),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.jersey_number:
            out["jerseyNumber"] = self.jersey_number
        return out


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    players: List[TeamPlayer] = field(default_factory=list)
    created_at: int = 0  # epoch ms

    @staticmethod
    def create(name: str, players: Sequence[TeamPlayer] = ()) -> "Team":
        return Team(id=new_id(), name=_clean_name(name, "team"), players=list(players), created_at=now_ms())

    def renamed(self, name: Optional[str] = None, players: Optional[Sequence[TeamPlayer]] = None) -> "Team":
        return replace(
            self,
            name=self.name if name is None else _clean_name(name, "team"),
            players=self.players if players is None else list(players),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "players": [p.to_dict() for p in self.players],
            "createdAt": self.created_at,
        }


def fill_slots(current: Sequence[str], names: Sequence[str]) -> List[str]:
    """Partial fill: slot i takes names[i] if present, else keeps its current label."""
    return [names[i] if i < len(names) else cur for i, cur in enumerate(current)]
