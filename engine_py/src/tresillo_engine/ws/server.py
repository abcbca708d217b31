"""
FastAPI WebSocket server for the Tresillo game.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import partial
from typing import Optional

import orjson
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..connections import WebSocketConnection
from ..constants import MODES
from ..errors import ErrorCode
from ..lobby import Lobby
from ..persistence import HandStore
from ..registry import RoomRegistry
from ..rules import RuleConfig
from .events import create_error_event, parse_inbound_event

logger = logging.getLogger(__name__)

DEFAULT_ROOM_ID = "default"


def create_app(
    rules: Optional[RuleConfig] = None,
    store: Optional[HandStore] = None,
    lobby: Optional[Lobby] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        rules: Rule configuration for every room
        store: Hand result store; a disabled-by-default one is made if omitted
        lobby: Matchmaking queue; likewise optional
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store or HandStore()
        app.state.lobby = lobby or Lobby()
        await app.state.store.connect()
        await app.state.lobby.connect()
        app.state.registry = RoomRegistry(rules=rules, listeners=[app.state.store.record_event])
        app.state.registry.ensure(DEFAULT_ROOM_ID)
        logger.info("Tresillo server started")
        try:
            yield
        finally:
            logger.info("Shutting down, closing rooms")
            await app.state.registry.close_all()
            await app.state.store.close()
            await app.state.lobby.close()

    app = FastAPI(title="Tresillo Game Engine", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        registry: RoomRegistry = app.state.registry
        return {
            "status": "healthy",
            "rooms": len(registry),
            "connections": registry.connection_count(),
        }

    @app.get("/healthz")
    async def healthz():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.post("/queue/{mode}")
    async def join_queue(mode: str, client_id: str):
        """Queue a client for a table of ``mode``."""
        if mode not in MODES:
            raise HTTPException(status_code=400, detail=f"Unknown mode: {mode}")
        return await app.state.lobby.join_queue(client_id, mode)

    @app.websocket("/ws")
    async def websocket_default(websocket: WebSocket):
        await serve_connection(websocket, DEFAULT_ROOM_ID)

    @app.websocket("/ws/{room_id}")
    async def websocket_room(websocket: WebSocket, room_id: str):
        await serve_connection(websocket, room_id)

    return app


async def serve_connection(websocket: WebSocket, room_id: str) -> None:
    """
    Run one client: attach it to the room, feed its messages into the room
    mailbox and detach it when the socket goes away.
    """
    registry: RoomRegistry = websocket.app.state.registry
    await websocket.accept()
    actor = registry.ensure(room_id)
    conn = WebSocketConnection()
    writer = asyncio.create_task(conn.pump(websocket))
    resume_id = websocket.query_params.get("resume")
    await actor.submit(partial(actor.room.attach, conn, resume_id))
    logger.info(f"WebSocket connection accepted for room {room_id}")

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = orjson.loads(raw)
            except orjson.JSONDecodeError:
                conn.deliver(create_error_event(ErrorCode.INVALID_JSON.value, "Failed to parse message"))
                continue
            try:
                event = parse_inbound_event(data)
            except ValueError as e:
                conn.deliver(create_error_event(ErrorCode.INVALID_MESSAGE.value, str(e)))
                continue
            actor.post(partial(actor.room.handle, conn, event.to_message()))
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {conn.id}")
    except Exception as e:
        logger.error(f"WebSocket error for {conn.id}: {e}")
    finally:
        if actor.running:
            try:
                await actor.submit(partial(actor.room.detach, conn))
            except RuntimeError as e:
                logger.info(f"Detach skipped for {conn.id}: {e}")
        conn.close()
        await asyncio.gather(writer, return_exceptions=True)
        if room_id != DEFAULT_ROOM_ID:
            await registry.release_if_idle(room_id)


app = create_app()
