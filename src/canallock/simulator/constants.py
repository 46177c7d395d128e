"""Fixed physical parameters of the lock."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicalConstants:
    """Physical parameters of the lock.

    Units follow the simplified metric model: densities in kg/m³,
    gravity in m/s², areas in m², heights in m and flows in m³/s.
    """

    fluid_density: float = 1000.0
    gravity: float = 9.81
    gate_area: float = 50.0  # Wetted area of each gate leaf
    chamber_area: float = 33500.0  # Horizontal footprint of the chamber
    chamber_height: float = 30.0  # Chamber wall height
    max_valve_flow: float = 100.0  # Flow at 100% valve opening


DEFAULT_CONSTANTS = PhysicalConstants()
