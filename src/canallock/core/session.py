"""Simulation session: the single owner of all lock state."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from ..config import InitialConditions, LockConfig, validate_config
from ..exceptions import ConfigurationError
from ..simulator import ship_model
from ..simulator.clock import SimulationClock, SimulationTicker
from ..simulator.gate_force import GateForceReading, compute_force
from ..simulator.level_integrator import LevelIntegrator
from .controller import LockController
from .events import (
    Event,
    EventType,
    error_event,
    gate_toggled_event,
    ship_moved_event,
    tick_event,
    valve_changed_event,
)
from .lock_state import BasinLevels, ChamberState, ShipState
from .states import GateState, LockSide, ShipMove, ShipPosition

logger = logging.getLogger(__name__)

# Type alias for event listeners
EventListener = Callable[[Event], Awaitable[None]]


@dataclass(frozen=True)
class LockSnapshot:
    """Read-only view of the simulation for presentation.

    Every derived value is recomputed when the snapshot is taken.
    """

    baseline_chamber_level: float
    displayed_chamber_level: float
    upper_level: float
    lower_level: float
    ship_position: ShipPosition
    ship_displacement: float
    ship_area: float
    ship_level_rise: float
    ship_area_ratio: float
    effective_chamber_area: float
    upper_valve: float
    lower_valve: float
    upper_gate: GateState
    lower_gate: GateState
    upper_gate_force: GateForceReading
    lower_gate_force: GateForceReading
    allowed_moves: frozenset[ShipMove]
    elapsed_time: float
    time_scale: float
    is_running: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "baseline_chamber_level": self.baseline_chamber_level,
            "displayed_chamber_level": self.displayed_chamber_level,
            "upper_level": self.upper_level,
            "lower_level": self.lower_level,
            "ship_position": self.ship_position.value,
            "ship_displacement": self.ship_displacement,
            "ship_area": self.ship_area,
            "ship_level_rise": self.ship_level_rise,
            "ship_area_ratio": self.ship_area_ratio,
            "effective_chamber_area": self.effective_chamber_area,
            "upper_valve": self.upper_valve,
            "lower_valve": self.lower_valve,
            "upper_gate": self.upper_gate.value,
            "lower_gate": self.lower_gate.value,
            "upper_gate_force": _force_dict(self.upper_gate_force),
            "lower_gate_force": _force_dict(self.lower_gate_force),
            "allowed_moves": sorted(move.value for move in self.allowed_moves),
            "elapsed_time": self.elapsed_time,
            "time_scale": self.time_scale,
            "is_running": self.is_running,
        }


def _force_dict(reading: GateForceReading) -> dict[str, float]:
    return {
        "pressure": reading.pressure_kpa,
        "force": reading.force_kn,
        "head_difference": reading.head_difference,
    }


class SimulationSession:
    """Aggregate owning basin, chamber, ship and time state.

    Every operator command and every simulation frame goes through this
    object on the event loop thread, so no locking is needed. Commands whose
    preconditions fail change nothing.

    Example:
        session = SimulationSession(config)
        await session.toggle_upper_gate()
        await session.move_ship("to_chamber")
        await session.start()
    """

    def __init__(
        self,
        config: Optional[LockConfig] = None,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the session in its default state.

        Args:
            config: Configuration. Uses built-in defaults if None.
            time_source: Wall clock in seconds, monotonic.

        Raises:
            ConfigurationError: If the configuration is not physical.
        """
        self.config = config or LockConfig()
        validate_config(self.config)
        self.constants = self.config.constants
        initial = self.config.initial

        self.basins = BasinLevels()
        self.chamber = ChamberState()
        self.ship = ShipState()
        self._apply_initial(initial)

        self.clock = SimulationClock(initial.time_scale, time_source=time_source)
        self.integrator = LevelIntegrator(
            self.chamber, self.ship, self.basins, self.constants
        )
        self.controller = LockController(self.chamber, self.ship, self.constants)
        self._ticker = SimulationTicker(
            self.clock, self._on_frame, self.config.frame_interval
        )
        self._listeners: list[EventListener] = []

    def _apply_initial(self, initial: InitialConditions) -> None:
        """Overwrite all lock state with the initial conditions."""
        self.basins.upper = initial.upper_level
        self.basins.lower = initial.lower_level
        self.chamber.baseline_level = initial.chamber_level
        for side in LockSide:
            self.chamber.valves[side] = 0.0
            self.chamber.gates[side] = GateState.CLOSED
        self.ship.position = ShipPosition.UPPER
        self.ship.displacement_volume = initial.ship_displacement
        self.ship.footprint_area = initial.ship_area

    # Events

    def add_listener(self, listener: EventListener) -> None:
        """Add an async event listener."""
        self._listeners.append(listener)

    def remove_listener(self, listener: EventListener) -> None:
        """Remove a previously added listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _emit_event(self, event: Event) -> None:
        """Emit event to all listeners."""
        for listener in self._listeners:
            try:
                await listener(event)
            except Exception as e:
                logger.error("Event listener error: %s", e)

    # Simulation lifecycle

    @property
    def is_running(self) -> bool:
        """Whether the simulation is advancing."""
        return self.clock.is_running

    async def _on_frame(self, dt: float) -> None:
        """Integrate one frame of virtual time."""
        try:
            baseline = self.integrator.advance(dt)
        except ConfigurationError as e:
            logger.error("Integration failed: %s", e)
            await self._emit_event(error_event(str(e), error_type="configuration"))
            await self.pause()
            return
        await self._emit_event(tick_event(dt, self.clock.elapsed, baseline))

    async def step(self) -> float:
        """Run one frame immediately, outside the ticker.

        Returns:
            Virtual seconds integrated (0.0 while paused).
        """
        dt = self.clock.tick()
        await self._on_frame(dt)
        return dt

    async def start(self) -> None:
        """Start advancing the simulation."""
        if self._ticker.is_active:
            return
        self._ticker.start()
        logger.info("Simulation started (x%.0f)", self.clock.time_scale)
        await self._emit_event(Event(type=EventType.SIMULATION_STARTED, source="session"))

    async def pause(self) -> None:
        """Stop advancing the simulation, keeping all state."""
        was_running = self.is_running
        await self._ticker.stop()
        if was_running:
            logger.info("Simulation paused at %.1f s", self.clock.elapsed)
            await self._emit_event(
                Event(type=EventType.SIMULATION_PAUSED, source="session")
            )

    async def reset(self) -> None:
        """Pause and restore the configured initial state."""
        await self._ticker.stop()
        initial = self.config.initial
        self._apply_initial(initial)
        self.clock.reset(initial.time_scale)
        logger.info("Simulation reset")
        await self._emit_event(Event(type=EventType.SIMULATION_RESET, source="session"))

    async def set_time_scale(self, multiplier: float) -> float:
        """Set the time-acceleration multiplier, clamped to 1-100."""
        self.clock.time_scale = multiplier
        await self._emit_event(Event(
            type=EventType.TIME_SCALE_CHANGED,
            data={"time_scale": self.clock.time_scale},
            source="session",
        ))
        return self.clock.time_scale

    # Operator commands

    async def set_valve(self, side: LockSide, opening: float) -> float:
        """Set a valve opening in percent."""
        applied = self.controller.set_valve(side, opening)
        await self._emit_event(valve_changed_event(side.value, applied))
        return applied

    async def set_upper_valve(self, opening: float) -> float:
        return await self.set_valve(LockSide.UPPER, opening)

    async def set_lower_valve(self, opening: float) -> float:
        return await self.set_valve(LockSide.LOWER, opening)

    async def toggle_gate(self, side: LockSide) -> GateState:
        """Open a closed gate or close an open one."""
        state = self.controller.toggle_gate(side)
        await self._emit_event(gate_toggled_event(side.value, state.value))
        return state

    async def toggle_upper_gate(self) -> GateState:
        return await self.toggle_gate(LockSide.UPPER)

    async def toggle_lower_gate(self) -> GateState:
        return await self.toggle_gate(LockSide.LOWER)

    async def move_ship(self, direction: Union[ShipMove, str]) -> bool:
        """Request a ship move.

        Args:
            direction: A ShipMove or its name (``to_chamber``, ``toLower``...).

        Returns:
            True if the ship moved. Unknown, non-adjacent or gate-blocked
            requests return False and change nothing.
        """
        if isinstance(direction, str):
            try:
                direction = ShipMove.parse(direction)
            except ValueError:
                logger.debug("Ignoring unknown ship move %r", direction)
                return False

        previous = self.ship.position
        if not self.controller.move_ship(direction):
            return False
        await self._emit_event(
            ship_moved_event(previous.value, self.ship.position.value)
        )
        return True

    async def set_ship_displacement(self, volume: float) -> float:
        """Set the ship's displaced volume in m³ (30000-100000)."""
        applied = self.controller.set_ship_displacement(volume)
        await self._emit_event(Event(
            type=EventType.SHIP_CHANGED,
            data={"displacement": applied},
            source="controller",
        ))
        return applied

    async def set_ship_area(self, area: float) -> float:
        """Set the ship's footprint in m² (3000-10000)."""
        applied = self.controller.set_ship_area(area)
        await self._emit_event(Event(
            type=EventType.SHIP_CHANGED,
            data={"area": applied},
            source="controller",
        ))
        return applied

    async def set_basin_levels(
        self,
        upper: Optional[float] = None,
        lower: Optional[float] = None,
    ) -> BasinLevels:
        """Change the fixed basin levels, clamped to the chamber height."""
        height = self.constants.chamber_height
        if upper is not None:
            self.basins.upper = max(0.0, min(height, float(upper)))
        if lower is not None:
            self.basins.lower = max(0.0, min(height, float(lower)))
        await self._emit_event(Event(
            type=EventType.BASIN_LEVELS_CHANGED,
            data={"upper": self.basins.upper, "lower": self.basins.lower},
            source="session",
        ))
        return self.basins

    # Derived values

    def ship_level_rise(self) -> float:
        """Current rise of the chamber level caused by the ship."""
        return ship_model.water_level_rise(
            self.ship.position,
            self.ship.displacement_volume,
            self.ship.footprint_area,
            self.constants.chamber_area,
        )

    def displayed_chamber_level(self) -> float:
        """Chamber level including the ship's displacement."""
        return self.chamber.baseline_level + self.ship_level_rise()

    def effective_chamber_area(self) -> float:
        """Open water area of the chamber."""
        return ship_model.effective_chamber_area(
            self.ship.position,
            self.ship.footprint_area,
            self.constants.chamber_area,
        )

    def gate_force(self, side: LockSide) -> GateForceReading:
        """Hydrostatic load on a gate, from the displayed chamber level."""
        basin = self.basins.upper if side is LockSide.UPPER else self.basins.lower
        return compute_force(
            basin,
            self.displayed_chamber_level(),
            gate_area=self.constants.gate_area,
            fluid_density=self.constants.fluid_density,
            gravity=self.constants.gravity,
        )

    def equalization_baseline(self, side: LockSide) -> float:
        """Baseline level at which the chamber matches a basin's level."""
        basin = self.basins.upper if side is LockSide.UPPER else self.basins.lower
        return self.controller.equalization_baseline(basin)

    def snapshot(self) -> LockSnapshot:
        """Take a read-only snapshot for presentation."""
        return LockSnapshot(
            baseline_chamber_level=self.chamber.baseline_level,
            displayed_chamber_level=self.displayed_chamber_level(),
            upper_level=self.basins.upper,
            lower_level=self.basins.lower,
            ship_position=self.ship.position,
            ship_displacement=self.ship.displacement_volume,
            ship_area=self.ship.footprint_area,
            ship_level_rise=self.ship_level_rise(),
            ship_area_ratio=self.ship.footprint_area / self.constants.chamber_area * 100,
            effective_chamber_area=self.effective_chamber_area(),
            upper_valve=self.chamber.upper_valve,
            lower_valve=self.chamber.lower_valve,
            upper_gate=self.chamber.upper_gate,
            lower_gate=self.chamber.lower_gate,
            upper_gate_force=self.gate_force(LockSide.UPPER),
            lower_gate_force=self.gate_force(LockSide.LOWER),
            allowed_moves=self.controller.allowed_moves(),
            elapsed_time=self.clock.elapsed,
            time_scale=self.clock.time_scale,
            is_running=self.is_running,
        )
