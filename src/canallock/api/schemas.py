"""Data classes for API request/response schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class ValveCommand:
    """Command to set a valve opening."""

    opening: float  # percent, 0-100


@dataclass
class ShipMoveCommand:
    """Command to move the ship."""

    direction: str  # "to_chamber", "to_lower", "to_upper"


@dataclass
class ShipUpdate:
    """Ship parameter update request."""

    displacement: Optional[float] = None  # m³, 30000-100000
    area: Optional[float] = None  # m², 3000-10000


@dataclass
class BasinUpdate:
    """Basin level update request."""

    upper: Optional[float] = None
    lower: Optional[float] = None


@dataclass
class SimulationStatus:
    """Simulation clock status."""

    is_running: bool
    elapsed_time: float
    time_scale: float


@dataclass
class ConfigResponse:
    """Physical constants and initial conditions."""

    constants: dict[str, float]
    initial: dict[str, float]
    frame_interval: float
    broadcast_interval: float


@dataclass
class WebSocketMessage:
    """WebSocket message format."""

    type: str  # "snapshot", "event", "error"
    data: dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)
