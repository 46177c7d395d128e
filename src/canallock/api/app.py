"""Quart application for the lock simulator."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from quart import Quart
from quart_cors import cors

from ..config import load_config
from ..core.events import Event, EventType
from ..core.session import SimulationSession
from .routes import config, lock, simulation, state
from .websocket import WebSocketManager

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Application state container."""

    session: Optional[SimulationSession] = None
    ws_manager: WebSocketManager = field(default_factory=WebSocketManager)
    _broadcast_task: Optional[asyncio.Task] = None
    _shutdown_event: asyncio.Event = field(default_factory=asyncio.Event)


# Global app state
app_state = AppState()


async def _event_handler(event: Event) -> None:
    """Push session events and fresh snapshots to WebSocket clients."""
    session = app_state.session
    if session is None:
        return

    if event.type == EventType.TICK:
        # Frames are pushed at the broadcast cadence, not per frame
        return

    if event.type == EventType.ERROR:
        await app_state.ws_manager.broadcast_error(
            message=event.data.get("message", "Unknown error"),
            error_type=event.data.get("error_type"),
        )
        return

    await app_state.ws_manager.broadcast_event(event.to_dict())
    await app_state.ws_manager.broadcast_snapshot(session.snapshot().to_dict())


async def _broadcast_loop() -> None:
    """Background task pushing snapshots while the simulation runs."""
    session = app_state.session
    if session is None:
        return

    logger.info("Snapshot broadcasting started")
    while not app_state._shutdown_event.is_set():
        if session.is_running and app_state.ws_manager.connection_count:
            try:
                await app_state.ws_manager.broadcast_snapshot(
                    session.snapshot().to_dict()
                )
            except Exception as e:
                logger.error("Snapshot broadcast error: %s", e)

        try:
            await asyncio.wait_for(
                app_state._shutdown_event.wait(),
                timeout=session.config.broadcast_interval,
            )
            break  # Shutdown requested
        except asyncio.TimeoutError:
            pass  # Normal timeout, continue broadcasting

    logger.info("Snapshot broadcasting stopped")


async def _startup() -> None:
    """Create the session and background tasks."""
    app_state._shutdown_event = asyncio.Event()
    logger.info("Starting lock simulator API")

    cfg = load_config()
    app_state.session = SimulationSession(cfg)
    app_state.session.add_listener(_event_handler)

    app_state._broadcast_task = asyncio.create_task(
        _broadcast_loop(),
        name="snapshot-broadcast",
    )
    logger.info("Lock simulator API started")


async def _shutdown() -> None:
    """Clean up all background tasks."""
    logger.info("Shutting down lock simulator API")
    app_state._shutdown_event.set()

    if app_state.session is not None:
        await app_state.session.pause()

    if app_state._broadcast_task is not None:
        app_state._broadcast_task.cancel()
        try:
            await asyncio.wait_for(app_state._broadcast_task, timeout=2.0)
        except (asyncio.CancelledError, asyncio.TimeoutError):
            pass
        app_state._broadcast_task = None

    logger.info("Lock simulator API shutdown complete")


def create_app() -> Quart:
    """Create and configure the Quart application."""
    app = Quart(__name__)

    # CORS for the frontend dev servers
    app = cors(
        app,
        allow_origin=[
            "http://localhost:5173",  # Vite dev server
            "http://localhost:3000",  # Alternative dev port
            "http://127.0.0.1:5173",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
    )

    app.before_serving(_startup)
    app.after_serving(_shutdown)

    app.register_blueprint(state.bp, url_prefix="/api/state")
    app.register_blueprint(lock.bp, url_prefix="/api/lock")
    app.register_blueprint(simulation.bp, url_prefix="/api/simulation")
    app.register_blueprint(config.bp, url_prefix="/api/config")

    @app.route("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "session_ready": app_state.session is not None,
            "simulation_running": (
                app_state.session is not None and app_state.session.is_running
            ),
            "websocket_connections": app_state.ws_manager.connection_count,
        }

    return app


# Create the app instance
app = create_app()
