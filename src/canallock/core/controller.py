"""Discrete operator actions on the lock."""

from __future__ import annotations

import logging

from ..exceptions import ConfigurationError
from ..simulator import ship_model
from ..simulator.constants import DEFAULT_CONSTANTS, PhysicalConstants
from .lock_state import ChamberState, ShipState
from .states import (
    GateState,
    LockSide,
    ShipMove,
    ShipPosition,
    get_allowed_moves,
    get_transition,
)

logger = logging.getLogger(__name__)

# Operator input ranges (inclusive)
VALVE_RANGE: tuple[float, float] = (0.0, 100.0)
DISPLACEMENT_RANGE: tuple[float, float] = (30000.0, 100000.0)
SHIP_AREA_RANGE: tuple[float, float] = (3000.0, 10000.0)


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, float(value)))


class LockController:
    """Validates and applies operator actions to the lock state.

    Ship moves are only checked against gate state: a move needs the gate
    between the two positions to be OPEN. Whether the water levels on both
    sides match is the operator's responsibility. Rejected moves leave all
    state unchanged and are reported only through the return value.

    When the ship enters the chamber its displaced volume would raise the
    displayed level, so the baseline drops by the same amount and the
    displayed level stays continuous. Leaving reverses this.
    """

    def __init__(
        self,
        chamber: ChamberState,
        ship: ShipState,
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ) -> None:
        self.chamber = chamber
        self.ship = ship
        self.constants = constants

    def ship_rise(self) -> float:
        """Rise the ship causes once inside the chamber, wherever it is now."""
        return ship_model.displacement_rise(
            self.ship.displacement_volume,
            self.ship.footprint_area,
            self.constants.chamber_area,
        )

    def allowed_moves(self) -> frozenset[ShipMove]:
        """Moves whose preconditions currently hold."""
        return get_allowed_moves(self.ship.position, self.chamber.gates)

    def move_ship(self, move: ShipMove) -> bool:
        """Move the ship to an adjacent position.

        Args:
            move: Requested move.

        Returns:
            True if the ship moved, False if the request was ignored.
        """
        transition = get_transition(self.ship.position, move)
        if transition is None:
            logger.debug(
                "Ignoring ship move %s from %s: not adjacent",
                move.value,
                self.ship.position.value,
            )
            return False
        if self.chamber.gates[transition.gate] is not GateState.OPEN:
            logger.debug(
                "Ignoring ship move %s: %s gate is closed",
                move.value,
                transition.gate.value,
            )
            return False

        rise = self.ship_rise()
        if transition.enters_chamber:
            self.chamber.baseline_level = max(0.0, self.chamber.baseline_level - rise)
        else:
            self.chamber.baseline_level = min(
                self.constants.chamber_height,
                self.chamber.baseline_level + rise,
            )

        previous = self.ship.position
        self.ship.position = transition.target
        logger.info(
            "Ship moved %s -> %s (baseline %.3f m)",
            previous.value,
            transition.target.value,
            self.chamber.baseline_level,
        )
        return True

    def toggle_gate(self, side: LockSide) -> GateState:
        """Flip a gate between OPEN and CLOSED.

        Gate state moves no water; it only decides which ship moves are
        admissible.

        Returns:
            The new gate state.
        """
        self.chamber.gates[side] = self.chamber.gates[side].toggled()
        logger.debug("%s gate %s", side.value, self.chamber.gates[side].value)
        return self.chamber.gates[side]

    def set_valve(self, side: LockSide, opening: float) -> float:
        """Set a valve opening, clamped to 0-100 %.

        Takes effect on the next integration step.

        Returns:
            The applied opening.
        """
        self.chamber.valves[side] = _clamp(opening, VALVE_RANGE)
        logger.debug("%s valve set to %.1f%%", side.value, self.chamber.valves[side])
        return self.chamber.valves[side]

    def set_ship_displacement(self, volume: float) -> float:
        """Set the ship's displaced volume, clamped to 30000-100000 m³."""
        self.ship.displacement_volume = _clamp(volume, DISPLACEMENT_RANGE)
        logger.debug("Ship displacement set to %.0f m³", self.ship.displacement_volume)
        return self.ship.displacement_volume

    def set_ship_area(self, area: float) -> float:
        """Set the ship's footprint, clamped to 3000-10000 m².

        Raises:
            ConfigurationError: If the clamped footprint does not fit in the
                chamber. State is unchanged in that case.
        """
        clamped = _clamp(area, SHIP_AREA_RANGE)
        if clamped >= self.constants.chamber_area:
            raise ConfigurationError(
                f"Ship footprint {clamped} m² does not fit in chamber "
                f"of {self.constants.chamber_area} m²"
            )
        self.ship.footprint_area = clamped
        logger.debug("Ship area set to %.0f m²", self.ship.footprint_area)
        return self.ship.footprint_area

    def equalization_baseline(self, target_level: float) -> float:
        """Baseline level at which the displayed level equals ``target_level``.

        With the ship in the chamber the baseline must sit below the target
        by the ship's rise; otherwise the two are equal.
        """
        if self.ship.position != ShipPosition.CHAMBER:
            return target_level
        return target_level - self.ship_rise()
