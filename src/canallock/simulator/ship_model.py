"""Ship displacement model.

A ship floating in the chamber displaces its own volume of water. Because
the chamber walls are vertical, that volume spreads over the open water
surface left around the hull, raising the level by
``displacement / (chamber_area - ship_area)``. Outside the chamber the ship
has no effect on the chamber level.
"""

from __future__ import annotations

from ..core.states import ShipPosition
from ..exceptions import ConfigurationError


def _check_fits(footprint_area: float, chamber_area: float) -> None:
    if footprint_area >= chamber_area:
        raise ConfigurationError(
            f"Ship footprint {footprint_area} m² does not fit in chamber "
            f"of {chamber_area} m²"
        )


def effective_chamber_area(
    position: ShipPosition,
    footprint_area: float,
    chamber_area: float,
) -> float:
    """Open water area of the chamber.

    Args:
        position: Where the ship currently is.
        footprint_area: Horizontal cross-section of the ship in m².
        chamber_area: Horizontal footprint of the chamber in m².

    Returns:
        ``chamber_area - footprint_area`` with the ship in the chamber,
        otherwise ``chamber_area``.

    Raises:
        ConfigurationError: If the ship is in the chamber and does not fit.
    """
    if position != ShipPosition.CHAMBER:
        return chamber_area
    _check_fits(footprint_area, chamber_area)
    return chamber_area - footprint_area


def displacement_rise(
    displacement_volume: float,
    footprint_area: float,
    chamber_area: float,
) -> float:
    """Level rise a floating ship would cause inside the chamber.

    Raises:
        ConfigurationError: If the ship does not fit in the chamber.
    """
    _check_fits(footprint_area, chamber_area)
    return displacement_volume / (chamber_area - footprint_area)


def water_level_rise(
    position: ShipPosition,
    displacement_volume: float,
    footprint_area: float,
    chamber_area: float,
) -> float:
    """Chamber level rise caused by the ship at its current position.

    Returns:
        Rise in meters, 0.0 unless the ship is in the chamber.
    """
    if position != ShipPosition.CHAMBER:
        return 0.0
    return displacement_rise(displacement_volume, footprint_area, chamber_area)


def displayed_chamber_level(
    baseline_level: float,
    position: ShipPosition,
    displacement_volume: float,
    footprint_area: float,
    chamber_area: float,
) -> float:
    """Physically observed chamber level, including the ship's displacement."""
    return baseline_level + water_level_rise(
        position, displacement_volume, footprint_area, chamber_area
    )
