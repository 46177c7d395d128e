"""Hydrostatic load on a gate between two water bodies."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import DEFAULT_CONSTANTS


@dataclass(frozen=True)
class GateForceReading:
    """Average pressure and total force acting on a gate."""

    pressure_kpa: float
    force_kn: float
    head_difference: float


def compute_force(
    level_a: float,
    level_b: float,
    gate_area: float = DEFAULT_CONSTANTS.gate_area,
    fluid_density: float = DEFAULT_CONSTANTS.fluid_density,
    gravity: float = DEFAULT_CONSTANTS.gravity,
) -> GateForceReading:
    """Compute the hydrostatic load from the level difference across a gate.

    Hydrostatic pressure grows linearly from zero at the lower surface to
    ``rho * g * dh`` at the bottom of the head difference, so the gate is
    loaded by the average ``rho * g * dh / 2`` acting over its whole area.
    Pressure in kPa times area in m² is reported directly as kN.

    The result only depends on ``|level_a - level_b|``, so the argument
    order does not matter.

    Args:
        level_a: Water level on one side in meters.
        level_b: Water level on the other side in meters.
        gate_area: Gate area in m².
        fluid_density: Fluid density in kg/m³.
        gravity: Gravitational acceleration in m/s².

    Returns:
        Pressure in kPa, force in kN and the head difference in meters.
    """
    head_difference = abs(level_a - level_b)
    avg_depth = head_difference / 2
    pressure = fluid_density * gravity * avg_depth / 1000
    force = pressure * gate_area
    return GateForceReading(
        pressure_kpa=pressure,
        force_kn=force,
        head_difference=head_difference,
    )
