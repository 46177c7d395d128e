"""Lock control API routes: valves, gates and the ship."""

from __future__ import annotations

from dataclasses import asdict

from quart import Blueprint, abort

from ...core.procedure import OPERATING_PROCEDURE, PROCEDURE_NOTE
from ...core.states import LockSide, ShipMove
from ...exceptions import ConfigurationError
from ..schemas import BasinUpdate, ShipMoveCommand, ShipUpdate, ValveCommand
from . import get_json_body, number_field, require_session

bp = Blueprint("lock", __name__)


def _parse_side(side: str) -> LockSide:
    try:
        return LockSide(side.lower())
    except ValueError:
        valid = [s.value for s in LockSide]
        abort(400, description=f"Invalid side: {side}. Valid sides: {valid}")


@bp.route("/valves/<side>", methods=["POST"])
async def set_valve(side: str):
    """Set a valve opening in percent (clamped to 0-100)."""
    session = require_session()
    lock_side = _parse_side(side)
    data = await get_json_body()
    command = ValveCommand(opening=number_field(data, "opening"))

    applied = await session.set_valve(lock_side, command.opening)
    return {"valve": lock_side.value, "opening": applied}


@bp.route("/gates/<side>/toggle", methods=["POST"])
async def toggle_gate(side: str):
    """Open a closed gate or close an open one."""
    session = require_session()
    lock_side = _parse_side(side)

    new_state = await session.toggle_gate(lock_side)
    return {"gate": lock_side.value, "state": new_state.value}


@bp.route("/ship/move", methods=["POST"])
async def move_ship():
    """Request a ship move.

    A move that is not adjacent to the ship or whose gate is closed is
    ignored and reported with ``moved: false``.
    """
    session = require_session()
    data = await get_json_body()
    command = ShipMoveCommand(direction=str(data.get("direction", "")))

    try:
        move = ShipMove.parse(command.direction)
    except ValueError:
        valid = [m.value for m in ShipMove]
        abort(400, description=f"Invalid direction: {command.direction}. Valid: {valid}")

    moved = await session.move_ship(move)
    return {
        "moved": moved,
        "ship_position": session.ship.position.value,
        "baseline_chamber_level": session.chamber.baseline_level,
        "displayed_chamber_level": session.displayed_chamber_level(),
    }


@bp.route("/ship", methods=["POST"])
async def update_ship():
    """Update ship displacement and/or footprint (clamped to their ranges)."""
    session = require_session()
    data = await get_json_body()
    update = ShipUpdate(
        displacement=number_field(data, "displacement", required=False),
        area=number_field(data, "area", required=False),
    )

    if update.displacement is not None:
        await session.set_ship_displacement(update.displacement)
    if update.area is not None:
        try:
            await session.set_ship_area(update.area)
        except ConfigurationError as e:
            abort(400, description=str(e))

    return asdict(ShipUpdate(
        displacement=session.ship.displacement_volume,
        area=session.ship.footprint_area,
    ))


@bp.route("/basins", methods=["POST"])
async def update_basins():
    """Change the basin levels (clamped to the chamber height)."""
    session = require_session()
    data = await get_json_body()
    update = BasinUpdate(
        upper=number_field(data, "upper", required=False),
        lower=number_field(data, "lower", required=False),
    )

    basins = await session.set_basin_levels(upper=update.upper, lower=update.lower)
    return asdict(BasinUpdate(upper=basins.upper, lower=basins.lower))


@bp.route("/procedure")
async def get_procedure():
    """Get the operating procedure for a downbound lockage."""
    return {"steps": list(OPERATING_PROCEDURE), "note": PROCEDURE_NOTE}
