"""Chamber water level integration."""

from __future__ import annotations

import logging

from ..core.lock_state import BasinLevels, ChamberState, ShipState
from ..core.states import LockSide
from . import ship_model
from .constants import DEFAULT_CONSTANTS, PhysicalConstants

logger = logging.getLogger(__name__)


class LevelIntegrator:
    """Integrates the chamber baseline level forward in virtual time.

    Each valve passes ``opening/100 * max_valve_flow`` m³/s while the
    displayed chamber level has not yet reached the basin on its side. The
    resulting level change is spread over the open water area (reduced by
    the ship's footprint when it is in the chamber) and clamped to the gap
    left to that basin's level, so a valve stops contributing once the
    chamber is equalized with it.

    Both valves act within the same step when both are open; the two
    contributions are computed from the level at the start of the step.
    Gate state does not affect flow.
    """

    def __init__(
        self,
        chamber: ChamberState,
        ship: ShipState,
        basins: BasinLevels,
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ) -> None:
        self.chamber = chamber
        self.ship = ship
        self.basins = basins
        self.constants = constants

    def _flow_rate(self, side: LockSide) -> float:
        """Flow through a valve in m³/s."""
        return (self.chamber.valves[side] / 100) * self.constants.max_valve_flow

    def advance(self, dt: float) -> float:
        """Advance the chamber level by ``dt`` virtual seconds.

        Args:
            dt: Virtual time step in seconds. Non-positive steps are no-ops.

        Returns:
            The new baseline level in meters.
        """
        if dt <= 0:
            return self.chamber.baseline_level

        effective_area = ship_model.effective_chamber_area(
            self.ship.position,
            self.ship.footprint_area,
            self.constants.chamber_area,
        )
        ship_rise = ship_model.water_level_rise(
            self.ship.position,
            self.ship.displacement_volume,
            self.ship.footprint_area,
            self.constants.chamber_area,
        )
        actual_level = self.chamber.baseline_level + ship_rise
        baseline = self.chamber.baseline_level

        # Filling from the upper basin
        if self.chamber.upper_valve > 0 and actual_level < self.basins.upper:
            level_change = self._flow_rate(LockSide.UPPER) * dt / effective_area
            baseline += min(level_change, self.basins.upper - actual_level)

        # Draining to the lower basin
        if self.chamber.lower_valve > 0 and actual_level > self.basins.lower:
            level_change = self._flow_rate(LockSide.LOWER) * dt / effective_area
            baseline -= min(level_change, actual_level - self.basins.lower)

        self.chamber.baseline_level = max(
            0.0, min(self.constants.chamber_height, baseline)
        )
        return self.chamber.baseline_level
