"""Configuration API routes."""

from __future__ import annotations

from dataclasses import asdict

from quart import Blueprint

from ..schemas import ConfigResponse
from . import require_session

bp = Blueprint("config", __name__)


@bp.route("/")
async def get_config():
    """Get physical constants and initial conditions."""
    config = require_session().config
    return asdict(ConfigResponse(
        constants=asdict(config.constants),
        initial=asdict(config.initial),
        frame_interval=config.frame_interval,
        broadcast_interval=config.broadcast_interval,
    ))
