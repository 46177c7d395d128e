"""Event system for the lock simulation."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Optional


class EventType(Enum):
    """Types of events emitted by the simulation session."""

    # Simulation lifecycle
    SIMULATION_STARTED = auto()
    SIMULATION_PAUSED = auto()
    SIMULATION_RESET = auto()
    TICK = auto()

    # Operator actions
    SHIP_MOVED = auto()
    SHIP_CHANGED = auto()
    GATE_TOGGLED = auto()
    VALVE_CHANGED = auto()
    TIME_SCALE_CHANGED = auto()
    BASIN_LEVELS_CHANGED = auto()

    # Errors
    ERROR = auto()


@dataclass
class Event:
    """Event data structure for the event system.

    Events are emitted by the session and consumed by listeners such as the
    WebSocket manager.

    Attributes:
        type: The type of event.
        timestamp: When the event occurred.
        data: Optional dictionary of event-specific data.
        source: Optional identifier for the event source.
    """

    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)
    data: Optional[dict[str, Any]] = None
    source: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "type": self.type.name,
            "timestamp": self.timestamp.isoformat(),
            "data": self.data,
            "source": self.source,
        }


def ship_moved_event(from_position: str, to_position: str) -> Event:
    """Create a SHIP_MOVED event.

    Args:
        from_position: Position the ship left.
        to_position: Position the ship entered.

    Returns:
        Ship moved event.
    """
    return Event(
        type=EventType.SHIP_MOVED,
        data={"from": from_position, "to": to_position},
        source="controller",
    )


def gate_toggled_event(gate: str, state: str) -> Event:
    """Create a GATE_TOGGLED event."""
    return Event(
        type=EventType.GATE_TOGGLED,
        data={"gate": gate, "state": state},
        source="controller",
    )


def valve_changed_event(valve: str, opening: float) -> Event:
    """Create a VALVE_CHANGED event."""
    return Event(
        type=EventType.VALVE_CHANGED,
        data={"valve": valve, "opening": opening},
        source="controller",
    )


def tick_event(dt: float, elapsed: float, baseline_level: float) -> Event:
    """Create a TICK event.

    Args:
        dt: Virtual seconds integrated this frame.
        elapsed: Total elapsed virtual seconds.
        baseline_level: Baseline chamber level after the step.

    Returns:
        Tick event.
    """
    return Event(
        type=EventType.TICK,
        data={"dt": dt, "elapsed": elapsed, "baseline_level": baseline_level},
        source="ticker",
    )


def error_event(
    message: str,
    error_type: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> Event:
    """Create an ERROR event.

    Args:
        message: Human-readable error message.
        error_type: Optional error classification.
        details: Optional additional error details.

    Returns:
        Error event.
    """
    data: dict[str, Any] = {"message": message}
    if error_type:
        data["error_type"] = error_type
    if details:
        data["details"] = details
    return Event(
        type=EventType.ERROR,
        data=data,
        source="system",
    )
