from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from .models import Team, TeamNotFoundError, TeamPlayer


class RosterStore(ABC):
    """Persistence for team rosters. The OCR pipeline never touches this."""

    async def start(self) -> None:
        return None

    async def close(self) -> None:
        return None

    @abstractmethod
    async def list_teams(self) -> List[Team]:
        ...

    @abstractmethod
    async def get_team(self, team_id: str) -> Team:
        ...

    @abstractmethod
    async def save_team(self, team: Team) -> Team:
        ...

    @abstractmethod
    async def delete_team(self, team_id: str) -> None:
        ...

    @abstractmethod
    async def get_active_team_id(self) -> Optional[str]:
        ...

    @abstractmethod
    async def set_active_team_id(self, team_id: Optional[str]) -> None:
        ...

    async def create_team(self, name: str, players: Sequence[TeamPlayer] = ()) -> Team:
        team = await self.save_team(Team.create(name, players))
        # a freshly saved team becomes the one being edited
        await self.set_active_team_id(team.id)
        return team

    async def update_team(
        self,
        team_id: str,
        *,
        name: Optional[str] = None,
        players: Optional[Sequence[TeamPlayer]] = None,
    ) -> Team:
        team = await self.get_team(team_id)
        return await self.save_team(team.renamed(name=name, players=players))

    async def remove_team(self, team_id: str) -> Optional[str]:
        """Delete a team; if it was active, fall back to the first remaining team. Returns the active id."""
        await self.get_team(team_id)
        await self.delete_team(team_id)
        active = await self.get_active_team_id()
        if active in (None, team_id):
            remaining = await self.list_teams()
            active = remaining[0].id if remaining else None
            await self.set_active_team_id(active)
        return active

    async def activate(self, team_id: str) -> Team:
        team = await self.get_team(team_id)
        await self.set_active_team_id(team.id)
        return team


class MemoryRosterStore(RosterStore):
    """Default store when DATABASE_URL is unset. Lost on restart."""

    def __init__(self) -> None:
        self._teams: Dict[str, Team] = {}
        self._active: Optional[str] = None

    async def list_teams(self) -> List[Team]:
        # insertion order == creation order
        return list(self._teams.values())

    async def get_team(self, team_id: str) -> Team:
        try:
            return self._teams[team_id]
        except KeyError:
            raise TeamNotFoundError(team_id) from None

    async def save_team(self, team: Team) -> Team:
        self._teams[team.id] = team
        return team

    async def delete_team(self, team_id: str) -> None:
        self._teams.pop(team_id, None)

    async def get_active_team_id(self) -> Optional[str]:
        return self._active

    async def set_active_team_id(self, team_id: Optional[str]) -> None:
        self._active = team_id
