from array import array
from typing import Iterator, Optional, Tuple

from maze_stepper.core.direction import DIRECTIONS, Dimensions, Direction
from maze_stepper.core.errors import MazeInvariantError


class Grid:
    # Wall bits (one per Direction)
    NORTH = Direction.NORTH
    EAST  = Direction.EAST
    SOUTH = Direction.SOUTH
    WEST  = Direction.WEST

    # All walls present by default (N|E|S|W) = 15
    ALL_WALLS = NORTH | EAST | SOUTH | WEST

    # Solution flags
    FROM   = 0b001
    TO     = 0b010
    RESULT = 0b100

    # Sentinel for "no walk" / "no previous cell" in the int arrays
    NONE = -1

    __slots__ = ('dimensions', 'walls', 'walks', 'previous', 'flags')

    def __init__(self, width: int, height: int):
        self.dimensions = Dimensions(width, height)
        self.reset()

    def reset(self):
        """Fully walled grid with no walk tags and no solution metadata."""
        size = self.size
        # 'B' (unsigned char) -> 1 byte per cell for walls and flags,
        # 'i' for walk ids and back-pointers which can exceed 255.
        self.walls = array('B', [self.ALL_WALLS] * size)
        self.walks = array('i', [self.NONE] * size)
        self.previous = array('i', [self.NONE] * size)
        self.flags = array('B', [0] * size)

    @property
    def width(self) -> int:
        return self.dimensions.width

    @property
    def height(self) -> int:
        return self.dimensions.height

    @property
    def size(self) -> int:
        return self.dimensions.size

    def get_index(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def coords(self, idx: int) -> Tuple[int, int]:
        return idx % self.width, idx // self.width

    # Walls

    def has_wall(self, idx: int, direction: Direction) -> bool:
        return (self.walls[idx] & direction) != 0

    def carve(self, idx: int, direction: Direction) -> Optional[int]:
        """
        Removes the wall of cell `idx` in `direction` and the OPPOSITE wall
        of the neighbour. Returns the neighbour index, or None (and changes
        nothing) when the direction points off the grid.
        """
        neighbour = direction.neighbour(self.dimensions, idx)
        if neighbour is None:
            return None  # Cannot carve into void
        self.walls[idx] &= ~direction & 0xFF
        self.walls[neighbour] &= ~direction.opposite() & 0xFF
        return neighbour

    def carve_between(self, a: int, b: int):
        direction = Direction.between(self.dimensions, a, b)
        if direction is None:
            raise MazeInvariantError(f"Cells {a} and {b} are not neighbours")
        self.carve(a, direction)

    def neighbours(self, idx: int) -> Iterator[Tuple[int, Direction]]:
        """
        Yields (neighbour, direction) for all in-grid neighbours.
        Does NOT check walls (that's for pathfinding).
        """
        for direction in DIRECTIONS:
            neighbour = direction.neighbour(self.dimensions, idx)
            if neighbour is not None:
                yield neighbour, direction

    def open_neighbours(self, idx: int) -> Iterator[Tuple[int, Direction]]:
        """Yields (neighbour, direction) for neighbours NOT blocked by a wall."""
        walls = self.walls[idx]
        for direction in DIRECTIONS:
            if not (walls & direction):
                neighbour = direction.neighbour(self.dimensions, idx)
                if neighbour is not None:
                    yield neighbour, direction

    # Generation walk tags

    def walk_of(self, idx: int) -> Optional[int]:
        walk = self.walks[idx]
        return None if walk == self.NONE else walk

    def is_tagged(self, idx: int) -> bool:
        return self.walks[idx] != self.NONE

    def set_walk(self, idx: int, walk: int):
        self.walks[idx] = walk

    def clear_walk(self, idx: int):
        self.walks[idx] = self.NONE

    # Solution metadata

    def previous_of(self, idx: int) -> Optional[int]:
        prev = self.previous[idx]
        return None if prev == self.NONE else prev

    def set_previous(self, idx: int, prev: int):
        self.previous[idx] = prev

    def is_from(self, idx: int) -> bool:
        return (self.flags[idx] & self.FROM) != 0

    def is_to(self, idx: int) -> bool:
        return (self.flags[idx] & self.TO) != 0

    def is_result(self, idx: int) -> bool:
        return (self.flags[idx] & self.RESULT) != 0

    def set_result(self, idx: int):
        self.flags[idx] |= self.RESULT

    def set_endpoints(self, from_cell: int, to_cell: int):
        self.flags[from_cell] |= self.FROM
        self.flags[to_cell] |= self.TO

    def clear_solution(self):
        """Drops back-pointers and flags; walls and walk tags are kept."""
        size = self.size
        self.previous = array('i', [self.NONE] * size)
        self.flags = array('B', [0] * size)
