import json

import pytest

from db import Db, _players_from_json, _players_to_json, _team_from_row
from roster import TeamPlayer


def test_players_json_roundtrip_keeps_thai():
    players = [TeamPlayer.create("สมชาย ใจดี", "9", id="p1"), TeamPlayer.create("Anna", id="p2")]
    raw = _players_to_json(players)
    assert "สมชาย" in raw
    assert _players_from_json(raw) == players


def test_players_from_json_accepts_decoded_and_null():
    assert _players_from_json(None) == []
    assert _players_from_json([{"id": "p1", "name": "Anna"}]) == [TeamPlayer.create("Anna", id="p1")]


def test_team_from_row():
    row = {
        "id": "t1",
        "name": "Tigers",
        "players": json.dumps([{"id": "p1", "name": "Anna", "jerseyNumber": "7"}]),
        "created_at": 1700000000000,
    }
    team = _team_from_row(row)
    assert team.id == "t1"
    assert team.created_at == 1700000000000
    assert team.to_dict()["players"] == [{"id": "p1", "name": "Anna", "jerseyNumber": "7"}]


def test_queries_before_start_fail_loudly():
    import asyncio

    db = Db("")
    asyncio.run(db.start())  # empty dsn is a no-op
    assert db.pool is None
    with pytest.raises(RuntimeError, match="DB not started"):
        asyncio.run(db.list_teams())
