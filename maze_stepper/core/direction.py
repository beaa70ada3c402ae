from enum import IntEnum
from typing import NamedTuple, Optional


class Dimensions(NamedTuple):
    width: int
    height: int

    @property
    def size(self) -> int:
        return self.width * self.height


class Direction(IntEnum):
    # One bit per wall so a cell's four walls pack into a nibble.
    # Declared clockwise; next()/prev() rely on this order.
    NORTH = 0b0001
    EAST  = 0b0010
    SOUTH = 0b0100
    WEST  = 0b1000

    def next(self) -> "Direction":
        """Clockwise neighbour of this direction (a right turn)."""
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 1) % 4]

    def prev(self) -> "Direction":
        """Counter-clockwise neighbour of this direction (a left turn)."""
        return _CLOCKWISE[(_CLOCKWISE.index(self) - 1) % 4]

    def opposite(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 2) % 4]

    def neighbour(self, dimensions: Dimensions, cell: int) -> Optional[int]:
        """
        Index of the cell adjacent to `cell` in this direction,
        or None if that would leave the grid.
        """
        width = dimensions.width
        if self is Direction.NORTH:
            return cell - width if cell >= width else None
        if self is Direction.EAST:
            return cell + 1 if (cell + 1) % width != 0 else None
        if self is Direction.SOUTH:
            return cell + width if cell + width < dimensions.size else None
        # WEST
        return cell - 1 if cell % width != 0 else None

    @staticmethod
    def between(dimensions: Dimensions, from_cell: int, to_cell: int) -> Optional["Direction"]:
        """
        Direction leading from `from_cell` to `to_cell`, or None when the
        two cells are not 4-adjacent.
        """
        for direction in _BETWEEN_ORDER:
            if direction.neighbour(dimensions, from_cell) == to_cell:
                return direction
        return None


_CLOCKWISE = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)

# At most one relation can match, the order only fixes evaluation.
_BETWEEN_ORDER = (Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST)

# Neighbour enumeration order used by every algorithm.
DIRECTIONS = _CLOCKWISE
