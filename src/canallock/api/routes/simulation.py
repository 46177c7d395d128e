"""Simulation control API routes."""

from __future__ import annotations

from dataclasses import asdict

from quart import Blueprint

from ..schemas import SimulationStatus
from . import get_json_body, number_field, require_session

bp = Blueprint("simulation", __name__)


def _status() -> dict:
    session = require_session()
    return asdict(SimulationStatus(
        is_running=session.is_running,
        elapsed_time=session.clock.elapsed,
        time_scale=session.clock.time_scale,
    ))


@bp.route("/")
async def get_status():
    """Get simulation clock status."""
    return _status()


@bp.route("/start", methods=["POST"])
async def start_simulation():
    """Start advancing the simulation."""
    session = require_session()
    await session.start()
    return _status()


@bp.route("/pause", methods=["POST"])
async def pause_simulation():
    """Pause the simulation, keeping all state."""
    session = require_session()
    await session.pause()
    return _status()


@bp.route("/reset", methods=["POST"])
async def reset_simulation():
    """Pause and restore the initial state."""
    session = require_session()
    await session.reset()
    return _status()


@bp.route("/speed")
async def get_speed():
    """Get the time-acceleration multiplier."""
    session = require_session()
    return {"multiplier": session.clock.time_scale}


@bp.route("/speed", methods=["POST"])
async def set_speed():
    """Set the time-acceleration multiplier.

    - 1 = realtime
    - 10 = 10x faster (default)
    - 100 = maximum
    """
    session = require_session()
    data = await get_json_body()
    multiplier = await session.set_time_scale(number_field(data, "multiplier"))
    return {
        "multiplier": multiplier,
        "message": f"Speed set to {multiplier:.0f}x",
    }
