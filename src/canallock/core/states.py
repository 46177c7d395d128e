"""Ship positions, gate states and ship transition rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ShipPosition(Enum):
    """Discrete location of the ship.

    The ship travels UPPER <-> CHAMBER <-> LOWER; it never skips the chamber.
    """

    UPPER = "upper"
    CHAMBER = "chamber"
    LOWER = "lower"


class GateState(Enum):
    """State of a single gate leaf."""

    OPEN = "open"
    CLOSED = "closed"

    def toggled(self) -> GateState:
        """Return the opposite state."""
        return GateState.CLOSED if self is GateState.OPEN else GateState.OPEN


class LockSide(Enum):
    """Side of the chamber a gate or valve sits on."""

    UPPER = "upper"
    LOWER = "lower"


class ShipMove(Enum):
    """Operator requests to move the ship."""

    TO_CHAMBER = "to_chamber"
    TO_LOWER = "to_lower"
    TO_UPPER = "to_upper"

    @classmethod
    def parse(cls, value: str) -> ShipMove:
        """Parse a move name.

        Accepts ``to_chamber``, ``TO_CHAMBER`` and the camel-case
        ``toChamber`` spellings.

        Raises:
            ValueError: If the value names no move.
        """
        normalized = value.strip()
        for move in cls:
            camel = move.value.replace("_", "")
            if normalized.lower() in (move.value, camel):
                return move
        raise ValueError(f"Unknown ship move: {value}")


@dataclass(frozen=True)
class ShipTransition:
    """A single admissible ship move.

    Attributes:
        target: Position the ship ends up in.
        gate: Gate that must be OPEN for the move.
        enters_chamber: True if the ship enters the chamber (baseline drops
            by the ship's rise), False if it leaves (baseline rises).
    """

    target: ShipPosition
    gate: LockSide
    enters_chamber: bool


# Ship transition table, keyed by (current position, requested move).
# Moves not listed here are rejected.
TRANSITIONS: dict[tuple[ShipPosition, ShipMove], ShipTransition] = {
    (ShipPosition.UPPER, ShipMove.TO_CHAMBER): ShipTransition(
        target=ShipPosition.CHAMBER,
        gate=LockSide.UPPER,
        enters_chamber=True,
    ),
    (ShipPosition.LOWER, ShipMove.TO_CHAMBER): ShipTransition(
        target=ShipPosition.CHAMBER,
        gate=LockSide.LOWER,
        enters_chamber=True,
    ),
    (ShipPosition.CHAMBER, ShipMove.TO_LOWER): ShipTransition(
        target=ShipPosition.LOWER,
        gate=LockSide.LOWER,
        enters_chamber=False,
    ),
    (ShipPosition.CHAMBER, ShipMove.TO_UPPER): ShipTransition(
        target=ShipPosition.UPPER,
        gate=LockSide.UPPER,
        enters_chamber=False,
    ),
}


def get_transition(
    position: ShipPosition,
    move: ShipMove,
) -> Optional[ShipTransition]:
    """Look up the transition for a move from a position.

    Args:
        position: Current ship position.
        move: Requested move.

    Returns:
        The transition, or None if the move is not adjacent to the position.
    """
    return TRANSITIONS.get((position, move))


def can_move(
    position: ShipPosition,
    move: ShipMove,
    gates: dict[LockSide, GateState],
) -> bool:
    """Check whether a ship move is currently admissible.

    Only gate state is checked. Matching water levels across the gate is
    left to the operator.

    Args:
        position: Current ship position.
        move: Requested move.
        gates: Current state of each gate.

    Returns:
        True if the move exists and its gate is open.
    """
    transition = get_transition(position, move)
    if transition is None:
        return False
    return gates[transition.gate] is GateState.OPEN


def get_allowed_moves(
    position: ShipPosition,
    gates: dict[LockSide, GateState],
) -> frozenset[ShipMove]:
    """Get the moves admissible from a position with the given gates."""
    return frozenset(move for move in ShipMove if can_move(position, move, gates))
