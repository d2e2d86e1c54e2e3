# api_main.py
# FastAPI service for the volleyball lineup / scoreboard app
# - Roster screenshot -> player names (OCR)
# - Team roster CRUD (memory or Postgres)
# - Score push/subscribe channel for the public scoreboard display

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import (
    Body,
    FastAPI,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    UploadFile,
    WebSocket,
    WebSocketDisconnect,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from config import Settings
from db import Db
from ocr import NoNamesFoundError, OcrEngineError, PreprocessError, extract_names
from roster import (
    MemoryRosterStore,
    RosterStore,
    RosterValidationError,
    TeamNotFoundError,
    TeamPlayer,
    fill_slots,
)
from scoreboard import ScoreHub, ScoreUpdate

# ---------- environment ----------
SETTINGS = Settings.from_env()

logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("lineup")

NO_NAMES_MESSAGE = (
    "Could not detect names. Try: higher-res screenshot, less compression, "
    "or ensure Thai traineddata is loaded."
)

# Swapped for Db at startup when DATABASE_URL is set.
ROSTER: RosterStore = MemoryRosterStore()
SCORES = ScoreHub()


# ---------- models ----------
class PlayerIn(BaseModel):
    id: Optional[str] = None
    name: str
    jerseyNumber: Optional[str] = None


class TeamIn(BaseModel):
    name: str
    players: List[PlayerIn] = []


class TeamPatch(BaseModel):
    name: Optional[str] = None
    players: Optional[List[PlayerIn]] = None


class ActiveTeamIn(BaseModel):
    teamId: str


# ---------- app ----------
@asynccontextmanager
async def lifespan(_app: FastAPI):
    global ROSTER
    if SETTINGS.database_url:
        store = Db(SETTINGS.database_url)
        await store.start()
        ROSTER = store
        logger.info("roster store: postgres")
    else:
        logger.info("roster store: memory (set DATABASE_URL to persist)")
    try:
        yield
    finally:
        await ROSTER.close()


app = FastAPI(title="Volley Lineup API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in SETTINGS.cors_allow_origins.split(",") if o.strip()],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TeamNotFoundError)
async def _team_not_found(_request: Request, exc: TeamNotFoundError):
    return JSONResponse(status_code=404, content={"detail": f"Team not found: {exc.args[0] if exc.args else ''}"})


@app.exception_handler(RosterValidationError)
async def _roster_invalid(_request: Request, exc: RosterValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ---------- utils ----------
async def _read_image_from_request(
    request: Request, file: UploadFile | None, image: UploadFile | None
) -> bytes:
    up = file or image
    if up is not None:
        ct = (up.content_type or "").lower()
        if not ct.startswith("image/"):
            raise HTTPException(status_code=400, detail="Uploaded part must be an image (png, jpeg, webp).")
        return await up.read()

    # allow raw image bytes
    ct = (request.headers.get("content-type") or "").lower()
    if not ct.startswith("image/"):
        raise HTTPException(
            status_code=422,
            detail="No file provided. Send multipart field 'file' or 'image', or raw image bytes with Content-Type: image/*.",
        )
    return await request.body()


def _parse_current(raw: Optional[str]) -> Optional[List[str]]:
    if raw is None or not raw.strip():
        return None
    try:
        v = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=422, detail="'current' must be a JSON array of strings")
    if not isinstance(v, list):
        raise HTTPException(status_code=422, detail="'current' must be a JSON array of strings")
    return ["" if x is None else str(x) for x in v]


def _players(items: List[PlayerIn]) -> List[TeamPlayer]:
    return [TeamPlayer.create(p.name, p.jerseyNumber, id=p.id) for p in items]


# ---------- routes ----------
@app.get("/")
async def root():
    return {"service": "volley-lineup-api", "env": SETTINGS.environment, "ok": True}


@app.get("/healthz")
async def healthz():
    return {"ok": True, "env": SETTINGS.environment}


# Lineup OCR (aliases for the roster page and quick experiments)
@app.post("/lineup/extract-names")
@app.post("/api/lineup/extract-names")
@app.post("/ocr/names")
async def lineup_extract_names(
    request: Request,
    file: UploadFile | None = File(None),
    image: UploadFile | None = File(None),
    current: Optional[str] = Form(None),
    slots: Optional[int] = Query(None, ge=1, le=50),
):
    data = await _read_image_from_request(request, file, image)
    current_slots = _parse_current(current)
    max_count = slots or (len(current_slots) if current_slots else SETTINGS.default_slots)

    try:
        names = await run_in_threadpool(
            extract_names,
            data,
            max_count,
            tuning=SETTINGS.ocr,
            engine_hint=SETTINGS.ocr_engine,
        )
    except PreprocessError as e:
        raise HTTPException(status_code=400, detail=f"Invalid image: {e.message}")
    except OcrEngineError as e:
        logger.error("OCR engine failure: %s", e)
        raise HTTPException(
            status_code=502,
            detail="OCR failed. If Thai names don't work, you may be missing tha.traineddata.",
        )
    except NoNamesFoundError:
        raise HTTPException(status_code=422, detail=NO_NAMES_MESSAGE)

    res: Dict[str, Any] = {"ok": True, "names": names, "count": len(names)}
    if current_slots is not None:
        res["slots"] = fill_slots(current_slots, names)
    return res


# Teams
@app.get("/teams")
async def list_teams():
    teams = await ROSTER.list_teams()
    return {"teams": [t.to_dict() for t in teams], "activeTeamId": await ROSTER.get_active_team_id()}


@app.post("/teams", status_code=201)
async def create_team(payload: TeamIn = Body(...)):
    team = await ROSTER.create_team(payload.name, _players(payload.players))
    return team.to_dict()


@app.get("/teams/active")
async def get_active_team():
    active = await ROSTER.get_active_team_id()
    team = await ROSTER.get_team(active) if active else None
    return {"activeTeamId": active, "team": team.to_dict() if team else None}


@app.put("/teams/active")
async def set_active_team(payload: ActiveTeamIn = Body(...)):
    team = await ROSTER.activate(payload.teamId)
    return {"activeTeamId": team.id, "team": team.to_dict()}


@app.get("/teams/{team_id}")
async def get_team(team_id: str):
    team = await ROSTER.get_team(team_id)
    return team.to_dict()


@app.put("/teams/{team_id}")
async def update_team(team_id: str, payload: TeamPatch = Body(...)):
    players = None if payload.players is None else _players(payload.players)
    team = await ROSTER.update_team(team_id, name=payload.name, players=players)
    return team.to_dict()


@app.delete("/teams/{team_id}")
async def delete_team(team_id: str):
    active = await ROSTER.remove_team(team_id)
    return {"ok": True, "activeTeamId": active}


# Score channel
@app.get("/score")
async def get_score():
    if SCORES.state is None:
        raise HTTPException(status_code=404, detail="No score published yet")
    return SCORES.state.model_dump()


@app.post("/score")
async def post_score(payload: ScoreUpdate = Body(...)):
    state = await SCORES.publish(payload)
    return state.model_dump()


@app.websocket("/ws/score")
async def ws_score(ws: WebSocket):
    await ws.accept()
    await SCORES.subscribe(ws)
    try:
        while True:
            frame = await ws.receive()
            if frame["type"] == "websocket.disconnect":
                break
            try:
                # displays may send JSON as text or binary frames
                raw = frame.get("text")
                if raw is None:
                    raw = (frame.get("bytes") or b"").decode("utf-8")
                msg = json.loads(raw)
                # accept either the bare payload or {"event": "update-score", "data": {...}}
                if isinstance(msg, dict) and isinstance(msg.get("data"), dict):
                    msg = msg["data"]
                update = ScoreUpdate.model_validate(msg)
            except ValueError as e:
                # ValidationError, JSONDecodeError and UnicodeDecodeError are all ValueErrors
                detail = e.errors(include_url=False, include_context=False) if isinstance(e, ValidationError) else str(e)
                await ws.send_json({"event": "error", "detail": detail})
                continue
            await SCORES.publish(update)
    except WebSocketDisconnect:
        pass
    finally:
        SCORES.unsubscribe(ws)


# ---------- uvicorn entry ----------
if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    uvicorn.run("api_main:app", host="0.0.0.0", port=port, reload=False)
