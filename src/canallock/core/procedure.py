"""Operating procedure for a downbound lockage."""

OPERATING_PROCEDURE: tuple[str, ...] = (
    "Start with the ship in the upper basin.",
    "Open the upper gate and move the ship into the chamber.",
    "Close the upper gate.",
    "Use the lower valve to lower the chamber level.",
    "Bring the displayed chamber level, which includes the ship, to the "
    "lower basin level.",
    "Open the lower gate once the head difference, and with it the gate "
    "force, is zero.",
    "Move the ship to the lower basin.",
)

PROCEDURE_NOTE = (
    "With a ship in the chamber its displaced volume adds to the water, so "
    "the baseline level must sit below the target by the ship's rise. "
    "For a 2.1 m rise and a 10 m target the baseline must reach 7.9 m."
)
