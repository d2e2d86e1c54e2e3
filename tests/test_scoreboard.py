import asyncio

import pytest
from pydantic import ValidationError

from scoreboard import ScoreHub, ScoreUpdate
from scoreboard.hub import UPDATE_EVENT
from scoreboard.models import next_state


class FakeSocket:
    def __init__(self, broken: bool = False) -> None:
        self.sent = []
        self.broken = broken

    async def send_json(self, data):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(data)


def test_defaults_and_extra_fields():
    u = ScoreUpdate.model_validate({"team1Score": 3, "whatever": True})
    assert u.team1Name == "Team 1" and u.team2Color == "green"
    assert u.team1Score == 3 and u.team2Score == 0


def test_negative_scores_rejected():
    with pytest.raises(ValidationError):
        ScoreUpdate(team1Score=-1)


def test_last_scorer_tracks_which_side_went_up():
    s1 = next_state(None, ScoreUpdate(team1Score=1))
    assert s1.lastScorer == "team1"
    s2 = next_state(s1, ScoreUpdate(team1Score=1, team2Score=1))
    assert s2.lastScorer == "team2"
    # a correction downwards keeps the previous scorer
    s3 = next_state(s2, ScoreUpdate(team1Score=1, team2Score=0))
    assert s3.lastScorer == "team2"


def test_first_state_without_points_has_no_scorer():
    assert next_state(None, ScoreUpdate()).lastScorer is None


def test_publish_fans_out_and_drops_dead_sockets():
    hub = ScoreHub()
    a, b, dead = FakeSocket(), FakeSocket(), FakeSocket(broken=True)

    async def go():
        for ws in (a, b, dead):
            await hub.subscribe(ws)
        return await hub.publish(ScoreUpdate(team1Score=5))

    state = asyncio.run(go())
    assert state.team1Score == 5
    assert a.sent == b.sent == [{"event": UPDATE_EVENT, "data": state.model_dump()}]
    assert hub.subscriber_count == 2


def test_late_subscriber_gets_current_state():
    hub = ScoreHub()
    late = FakeSocket()

    async def go():
        await hub.publish(ScoreUpdate(team2Score=2, team2Name="Lions"))
        await hub.subscribe(late)

    asyncio.run(go())
    assert len(late.sent) == 1
    assert late.sent[0]["data"]["team2Name"] == "Lions"
    assert late.sent[0]["data"]["lastScorer"] == "team2"


def test_subscriber_before_first_publish_gets_nothing():
    hub = ScoreHub()
    ws = FakeSocket()
    asyncio.run(hub.subscribe(ws))
    assert ws.sent == []
    hub.unsubscribe(ws)
    assert hub.subscriber_count == 0


class SlowSocket(FakeSocket):
    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()

    async def send_json(self, data):
        await self.release.wait()
        self.sent.append(data)


def test_slow_subscriber_does_not_block_other_publishes():
    hub = ScoreHub()
    slow, fast = SlowSocket(), FakeSocket()

    async def go():
        await hub.subscribe(slow)
        await hub.subscribe(fast)
        first = asyncio.create_task(hub.publish(ScoreUpdate(team1Score=1)))
        await asyncio.sleep(0)
        second = asyncio.create_task(hub.publish(ScoreUpdate(team1Score=1, team2Score=1)))
        for _ in range(5):
            await asyncio.sleep(0)

        # both updates were applied and reached the fast display while the slow one hangs
        assert hub.state.team2Score == 1
        assert [m["data"]["team2Score"] for m in fast.sent] == [0, 1]
        assert not first.done() and not second.done()

        slow.release.set()
        await asyncio.gather(first, second)

    asyncio.run(go())
    assert len(slow.sent) == 2
    assert hub.subscriber_count == 2
