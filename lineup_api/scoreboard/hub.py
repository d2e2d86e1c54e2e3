from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Set

from starlette.websockets import WebSocket

from .models import ScoreState, ScoreUpdate, next_state

logger = logging.getLogger("lineup.score")

UPDATE_EVENT = "update-score"


def update_message(state: ScoreState) -> Dict[str, Any]:
    return {"event": UPDATE_EVENT, "data": state.model_dump()}


class ScoreHub:
    """
    Fan-out of score updates from the control panel to every scoreboard display.
    Keeps the last state so a display that (re)connects mid-match is in sync.
    """

    def __init__(self) -> None:
        self._subscribers: Set[WebSocket] = set()
        self._state: Optional[ScoreState] = None
        self._lock = asyncio.Lock()

    @property
    def state(self) -> Optional[ScoreState]:
        return self._state

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def reset(self) -> None:
        self._subscribers.clear()
        self._state = None
        self._lock = asyncio.Lock()

    async def subscribe(self, ws: WebSocket) -> None:
        self._subscribers.add(ws)
        if self._state is not None:
            await ws.send_json(update_message(self._state))
        logger.info("score subscriber joined (%d total)", len(self._subscribers))

    def unsubscribe(self, ws: WebSocket) -> None:
        self._subscribers.discard(ws)
        logger.info("score subscriber left (%d total)", len(self._subscribers))

    async def publish(self, update: ScoreUpdate) -> ScoreState:
        async with self._lock:
            state = self._state = next_state(self._state, update)
            targets = list(self._subscribers)

        # fan out without holding the lock
        msg = update_message(state)
        results = await asyncio.gather(*(ws.send_json(msg) for ws in targets), return_exceptions=True)
        for ws, res in zip(targets, results):
            if isinstance(res, Exception):
                logger.warning("dropping score subscriber: %s", res)
                self._subscribers.discard(ws)
        logger.debug("score published to %d subscribers: %s", len(self._subscribers), msg["data"])
        return state
