"""Snapshot API routes."""

from __future__ import annotations

from quart import Blueprint, websocket

from ...core.states import LockSide
from . import get_app_state, require_session

bp = Blueprint("state", __name__)


@bp.route("/")
async def get_snapshot():
    """Get the current lock snapshot."""
    session = require_session()
    data = session.snapshot().to_dict()
    data["equalization_baseline"] = {
        side.value: session.equalization_baseline(side) for side in LockSide
    }
    return data


@bp.websocket("/ws")
async def websocket_endpoint():
    """WebSocket endpoint for real-time snapshots."""
    state = get_app_state()
    connection = websocket._get_current_object()
    await state.ws_manager.connect(connection)
    try:
        if state.session is not None:
            await connection.send(state.ws_manager.encode(
                "snapshot", state.session.snapshot().to_dict()
            ))
        while True:
            # Keep connection alive; clients only listen
            await websocket.receive()
    finally:
        await state.ws_manager.disconnect(connection)
