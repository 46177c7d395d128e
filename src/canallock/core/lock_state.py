"""Mutable state of the lock, owned by the simulation session."""

from __future__ import annotations

from dataclasses import dataclass, field

from .states import GateState, LockSide, ShipPosition


@dataclass
class BasinLevels:
    """Water levels of the two fixed basins in meters."""

    upper: float = 26.0
    lower: float = 10.0


@dataclass
class ChamberState:
    """Chamber water and its control inputs.

    Attributes:
        baseline_level: Chamber level from water alone, excluding any ship's
            displaced volume. This is the integrated state variable.
        valves: Opening of each valve in percent (0-100).
        gates: State of each gate.
    """

    baseline_level: float = 10.0
    valves: dict[LockSide, float] = field(
        default_factory=lambda: {LockSide.UPPER: 0.0, LockSide.LOWER: 0.0}
    )
    gates: dict[LockSide, GateState] = field(
        default_factory=lambda: {
            LockSide.UPPER: GateState.CLOSED,
            LockSide.LOWER: GateState.CLOSED,
        }
    )

    @property
    def upper_valve(self) -> float:
        return self.valves[LockSide.UPPER]

    @property
    def lower_valve(self) -> float:
        return self.valves[LockSide.LOWER]

    @property
    def upper_gate(self) -> GateState:
        return self.gates[LockSide.UPPER]

    @property
    def lower_gate(self) -> GateState:
        return self.gates[LockSide.LOWER]


@dataclass
class ShipState:
    """The single ship using the lock.

    Attributes:
        position: Discrete ship location.
        displacement_volume: Displaced volume in m³ (loaded weight equivalent).
        footprint_area: Horizontal cross-section in m².
    """

    position: ShipPosition = ShipPosition.UPPER
    displacement_volume: float = 70000.0
    footprint_area: float = 6000.0
