"""Physics of the lock chamber."""

from .clock import SimulationClock, SimulationTicker
from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .gate_force import GateForceReading, compute_force
from .level_integrator import LevelIntegrator

__all__ = [
    "SimulationClock",
    "SimulationTicker",
    "DEFAULT_CONSTANTS",
    "PhysicalConstants",
    "GateForceReading",
    "compute_force",
    "LevelIntegrator",
]
