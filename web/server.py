#!/usr/bin/env python3
"""
Scavenger Web Server

JSON API over the Scavenger engine for a browser client. Each session owns
an in-memory account and runner; all sessions share one run-statistics
store. At most settings.max_sessions are kept; the least recently used
session is dropped to make room.

Handlers are plain functions so FastAPI runs them in its threadpool; stats
file writes never block the event loop.

Usage:
    uv run python web/server.py

Then POST http://localhost:8080/api/sessions
"""

import logging
import os
import sys
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from packages.scavenger.config import ScavengerSettings, configure_logging, load_settings
from packages.scavenger.content.difficulty import parse_difficulty
from packages.scavenger.game import GamePhase, ScavengerRunner, TileView
from packages.scavenger.services.ledger import PlayerAccount
from packages.scavenger.services.stats import RunStatsStore

logger = logging.getLogger("scavenger.web")


# ============================================================================
# REQUEST MODELS
# ============================================================================

class StartRequest(BaseModel):
    difficulty: str
    seed: Optional[str] = None


class MoveRequest(BaseModel):
    x: int
    y: int


# ============================================================================
# SESSIONS
# ============================================================================

@dataclass
class Session:
    id: str
    account: PlayerAccount
    runner: ScavengerRunner
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


def tile_payload(view: TileView) -> Dict[str, Any]:
    """Tile view for clients; never-revealed tiles give nothing away."""
    data = view.to_dict()
    if not view.revealed:
        data["type"] = "unknown"
        data["locked"] = False
        data["collected"] = False
    if not view.visible:
        data["isEnemy"] = False
    return data


def session_payload(session: Session) -> Dict[str, Any]:
    runner = session.runner
    return {
        "session_id": session.id,
        "phase": runner.phase.value,
        "account": {
            "energy": session.account.energy,
            "gamecoin_balance": session.account.gamecoin_balance,
        },
        "run": runner.get_run_statistics(),
        "tiles": [[tile_payload(v) for v in row] for row in runner.get_tile_views()],
        "adjacent": [[p.x, p.y] for p in runner.get_adjacent_moves()],
        "loot": [
            {"type": item.type.value, "name": item.name, "value": item.value,
             "rarity": item.rarity}
            for item in (runner.run_state.collected_loot if runner.run_state else [])
        ],
    }


def create_app(settings: Optional[ScavengerSettings] = None,
               stats: Optional[RunStatsStore] = None) -> FastAPI:
    """Build the API app. Tests pass an in-memory stats store."""
    settings = settings or load_settings()
    if stats is None:
        stats = RunStatsStore.open(settings.stats_path)
    max_sessions = max(1, settings.max_sessions)

    app = FastAPI(title="Scavenger")
    # Least recently used first
    sessions: "OrderedDict[str, Session]" = OrderedDict()
    sessions_lock = threading.Lock()

    def get_session(session_id: str) -> Session:
        with sessions_lock:
            session = sessions.get(session_id)
            if session is None:
                raise HTTPException(status_code=404, detail="Unknown session")
            sessions.move_to_end(session_id)
            return session

    @app.post("/api/sessions")
    def create_session():
        session_id = uuid.uuid4().hex
        account = PlayerAccount(energy=settings.starting_energy)
        runner = ScavengerRunner(account, stats)
        with sessions_lock:
            while len(sessions) >= max_sessions:
                dropped, _ = sessions.popitem(last=False)
                logger.info("Session %s dropped (limit %d)", dropped, max_sessions)
            sessions[session_id] = Session(id=session_id, account=account, runner=runner)
        logger.info("Session %s created", session_id)
        return {"session_id": session_id}

    @app.get("/api/sessions/{session_id}")
    def get_state(session_id: str):
        session = get_session(session_id)
        with session.lock:
            return session_payload(session)

    @app.delete("/api/sessions/{session_id}")
    def delete_session(session_id: str):
        with sessions_lock:
            if sessions.pop(session_id, None) is None:
                raise HTTPException(status_code=404, detail="Unknown session")
        logger.info("Session %s deleted", session_id)
        return {"deleted": True}

    @app.post("/api/sessions/{session_id}/start")
    def start_run(session_id: str, request: StartRequest):
        session = get_session(session_id)
        try:
            difficulty = parse_difficulty(request.difficulty)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown difficulty: {request.difficulty}")

        with session.lock:
            if session.runner.phase != GamePhase.SELECT:
                raise HTTPException(status_code=409, detail="Run already in progress")

            if request.seed:
                # Seeded runs get a fresh runner so the map is reproducible
                session.runner = ScavengerRunner(session.account, stats, seed=request.seed)

            if not session.runner.start_run(difficulty):
                raise HTTPException(status_code=409, detail="Not enough energy")
            return session_payload(session)

    @app.post("/api/sessions/{session_id}/move")
    def move(session_id: str, request: MoveRequest):
        session = get_session(session_id)
        with session.lock:
            accepted = session.runner.move_player((request.x, request.y))
            return {"accepted": accepted, "state": session_payload(session)}

    @app.post("/api/sessions/{session_id}/abandon")
    def abandon(session_id: str):
        session = get_session(session_id)
        with session.lock:
            accepted = session.runner.abandon_run()
            return {"accepted": accepted, "state": session_payload(session)}

    @app.post("/api/sessions/{session_id}/cleanup")
    def cleanup(session_id: str):
        session = get_session(session_id)
        with session.lock:
            accepted = session.runner.cleanup()
            return {"accepted": accepted, "state": session_payload(session)}

    @app.get("/api/stats")
    def get_stats():
        return stats.to_dict()

    return app


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Starting Scavenger server on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
