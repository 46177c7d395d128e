"""Core lock state, transition rules and events."""

from .events import Event, EventType
from .lock_state import BasinLevels, ChamberState, ShipState
from .states import GateState, LockSide, ShipMove, ShipPosition

__all__ = [
    "Event",
    "EventType",
    "BasinLevels",
    "ChamberState",
    "ShipState",
    "GateState",
    "LockSide",
    "ShipMove",
    "ShipPosition",
]
