from __future__ import annotations

import json
from typing import List, Optional

import asyncpg

from roster.models import Team, TeamNotFoundError, TeamPlayer
from roster.store import RosterStore


# -----------------------------
# Schema
# -----------------------------
_CREATE_TEAMS_TABLE = """
CREATE TABLE IF NOT EXISTS teams (
  id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  players JSONB NOT NULL DEFAULT '[]'::jsonb,
  created_at BIGINT NOT NULL,
  seq BIGSERIAL
);
"""

# Single-row settings table; the app only tracks one "active" team.
_CREATE_ROSTER_STATE_TABLE = """
CREATE TABLE IF NOT EXISTS roster_state (
  singleton BOOLEAN PRIMARY KEY DEFAULT TRUE CHECK (singleton),
  active_team_id TEXT
);
"""

_CREATE_TEAMS_SEQ_IDX = "CREATE INDEX IF NOT EXISTS teams_seq_idx ON teams (seq);"


# -----------------------------
# Helpers
# -----------------------------
def _players_to_json(players: List[TeamPlayer]) -> str:
    return json.dumps([p.to_dict() for p in players], ensure_ascii=False)


def _players_from_json(raw) -> List[TeamPlayer]:
    if raw is None:
        return []
    data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    return [TeamPlayer.from_dict(d) for d in data or []]


def _team_from_row(row) -> Team:
    return Team(
        id=str(row["id"]),
        name=str(row["name"]),
        players=_players_from_json(row["players"]),
        created_at=int(row["created_at"] or 0),
    )


class Db(RosterStore):
    """PostgreSQL roster store (asyncpg). Used when DATABASE_URL is set."""

    def __init__(self, dsn: str) -> None:
        self._dsn = (dsn or "").strip()
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def pool(self) -> Optional[asyncpg.Pool]:
        return self._pool

    async def start(self) -> None:
        if not self._dsn:
            return

        self._pool = await asyncpg.create_pool(dsn=self._dsn, min_size=1, max_size=5)

        async with self._pool.acquire() as conn:
            await conn.execute(_CREATE_TEAMS_TABLE)
            await conn.execute(_CREATE_ROSTER_STATE_TABLE)
            await conn.execute(_CREATE_TEAMS_SEQ_IDX)
            await conn.execute(
                "INSERT INTO roster_state (singleton, active_team_id) VALUES (TRUE, NULL) ON CONFLICT DO NOTHING;"
            )

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    def _require_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB not started")
        return self._pool

    async def list_teams(self) -> List[Team]:
        pool = self._require_pool()
        async with pool.acquire() as conn:
            rows = await conn.fetch("SELECT id, name, players, created_at FROM teams ORDER BY seq;")
        return [_team_from_row(r) for r in rows]

    async def get_team(self, team_id: str) -> Team:
        pool = self._require_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT id, name, players, created_at FROM teams WHERE id = $1 LIMIT 1;", team_id
            )
        if row is None:
            raise TeamNotFoundError(team_id)
        return _team_from_row(row)

    async def save_team(self, team: Team) -> Team:
        pool = self._require_pool()
        sql = """
INSERT INTO teams (id, name, players, created_at)
VALUES ($1, $2, $3::jsonb, $4)
ON CONFLICT (id) DO UPDATE SET
  name = EXCLUDED.name,
  players = EXCLUDED.players;
"""
        async with pool.acquire() as conn:
            await conn.execute(sql, team.id, team.name, _players_to_json(team.players), int(team.created_at))
        return team

    async def delete_team(self, team_id: str) -> None:
        pool = self._require_pool()
        async with pool.acquire() as conn:
            await conn.execute("DELETE FROM teams WHERE id = $1;", team_id)

    async def get_active_team_id(self) -> Optional[str]:
        pool = self._require_pool()
        async with pool.acquire() as conn:
            v = await conn.fetchval("SELECT active_team_id FROM roster_state WHERE singleton;")
        return None if v is None else str(v)

    async def set_active_team_id(self, team_id: Optional[str]) -> None:
        pool = self._require_pool()
        async with pool.acquire() as conn:
            await conn.execute("UPDATE roster_state SET active_team_id = $1 WHERE singleton;", team_id)
