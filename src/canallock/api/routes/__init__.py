"""API route blueprints and shared request helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from quart import abort, request

if TYPE_CHECKING:
    from ...core.session import SimulationSession
    from ..app import AppState


def get_app_state() -> "AppState":
    """Get app state - injected at runtime."""
    from ..app import app_state
    return app_state


def require_session() -> "SimulationSession":
    """Return the active session or abort with 503."""
    session = get_app_state().session
    if session is None:
        abort(503, description="Simulation session not initialized")
    return session


async def get_json_body() -> dict[str, Any]:
    """Return the JSON object body, or abort with 400."""
    data = await request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")
    return data


def number_field(
    data: dict[str, Any],
    key: str,
    required: bool = True,
) -> Optional[float]:
    """Read a numeric field from a request body.

    Aborts with 400 when the field is missing (and required) or is not a
    number. Booleans are not numbers here.
    """
    value = data.get(key)
    if value is None:
        if required:
            abort(400, description=f"Missing field: {key}")
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        abort(400, description=f"Field {key} must be a number")
    return float(value)
