import heapq
import logging
from typing import Callable, List, NamedTuple, Optional, Set, Tuple

from maze_stepper.core.direction import Dimensions, Direction
from maze_stepper.core.errors import MazeInvariantError
from maze_stepper.core.geometry import manhattan_distance
from maze_stepper.core.grid import Grid
from maze_stepper.algo.base import Solver

logger = logging.getLogger(__name__)

Heuristic = Callable[[Dimensions, int, int], int]


def zero_heuristic(dimensions: Dimensions, cell: int, goal: int) -> int:
    """ Turns A* into Dijkstra's algorithm. """
    return 0


class AStar(Solver):
    """
    A* search over wall-free edges, one fringe expansion per step.

    The fringe is a heap of (distance + heuristic, cell), so equal priorities
    pop in ascending cell order. With `zero_heuristic` this is exactly
    Dijkstra's algorithm.
    """
    def __init__(self, heuristic: Heuristic = manhattan_distance, seed: int = None, rng=None):
        super().__init__(seed, rng)
        self.heuristic = heuristic
        self.expanded = 0
        self.reset()

    def reset(self):
        self.initialised = False
        # Shortest distance so far for each cell (None = unknown)
        self.distances: List[Optional[int]] = []
        self.closed: Set[int] = set()
        self.fringe: List[Tuple[int, int]] = []

    def step(self, dimensions: Dimensions, grid: Grid, from_cell: int, to_cell: int) -> bool:
        if not self.initialised:
            logger.info(f"solve using A* search algorithm ({getattr(self.heuristic, '__name__', 'heuristic')})")
            self.begin()
            self.expanded = 0
            self.distances = [None] * dimensions.size
            self.distances[from_cell] = 0
            heapq.heappush(self.fringe, (self.heuristic(dimensions, from_cell, to_cell), from_cell))
            self.initialised = True
            return True

        if not self.fringe:
            raise MazeInvariantError(f"Fringe exhausted before reaching cell {to_cell}; maze is disconnected")

        _, cell = heapq.heappop(self.fringe)
        self.expanded += 1

        if cell == to_cell:
            self.reconstruct_path(grid, from_cell, to_cell)
            self.reset()
            return False

        # Housekeeping: stale duplicates of this cell are never needed again
        if any(entry[1] == cell for entry in self.fringe):
            self.fringe = [entry for entry in self.fringe if entry[1] != cell]
            heapq.heapify(self.fringe)
        self.closed.add(cell)

        distance = self.distances[cell] + 1
        for neighbour, _ in grid.open_neighbours(cell):
            if neighbour == from_cell or neighbour in self.closed:
                continue
            known = self.distances[neighbour]
            if known is None or distance < known:
                self.distances[neighbour] = distance
                grid.set_previous(neighbour, cell)
                priority = distance + self.heuristic(dimensions, neighbour, to_cell)
                heapq.heappush(self.fringe, (priority, neighbour))

        self.step_count += 1
        return True


class RandomizedDFSSolver(Solver):
    """
    Depth first search choosing a random open neighbour at each branch.
    Finds *a* path; in a perfect maze that is the only one.
    """
    def __init__(self, seed: int = None, rng=None):
        super().__init__(seed, rng)
        self.reset()

    def reset(self):
        self.initialised = False
        self.stack: List[int] = []

    def step(self, dimensions: Dimensions, grid: Grid, from_cell: int, to_cell: int) -> bool:
        if not self.initialised:
            logger.info("solve using randomised depth first search algorithm")
            self.begin()
            self.stack.append(from_cell)
            self.initialised = True
            return True

        # Backtrack within a single step until we can descend
        while self.stack:
            cell = self.stack.pop()
            if cell == to_cell:
                self.reconstruct_path(grid, from_cell, to_cell)
                self.reset()
                return False

            neighbours = [
                n for n, _ in grid.open_neighbours(cell)
                if n != from_cell and grid.previous_of(n) is None
            ]
            if neighbours:
                neighbour = self.choose(neighbours)
                grid.set_previous(neighbour, cell)
                self.stack.append(cell)
                self.stack.append(neighbour)
                self.step_count += 1
                return True

        raise MazeInvariantError(f"Search exhausted before reaching cell {to_cell}; maze is disconnected")


class TurnRule(NamedTuple):
    """ Wall-follower handedness: first rotation, then the scan rotation. """
    name: str
    initial: Callable[[Direction], Direction]
    subsequent: Callable[[Direction], Direction]


RIGHT_HAND = TurnRule("right", Direction.next, Direction.prev)
LEFT_HAND = TurnRule("left", Direction.prev, Direction.next)

TURN_RULES = {rule.name: rule for rule in (LEFT_HAND, RIGHT_HAND)}


class WallFollower(Solver):
    START_FACING = Direction.NORTH

    def __init__(self, rule="left", seed: int = None, rng=None):
        super().__init__(seed, rng)
        if isinstance(rule, TurnRule):
            self.rule = rule
        elif rule in TURN_RULES:
            self.rule = TURN_RULES[rule]
        else:
            raise ValueError(f"Unknown wall follower rule: {rule!r}")
        self.reset()

    def reset(self):
        # (cell, facing); None before the run has started
        self.position: Optional[Tuple[int, Direction]] = None

    def step(self, dimensions: Dimensions, grid: Grid, from_cell: int, to_cell: int) -> bool:
        if self.position is None:
            logger.info(f"solve using wall follower search algorithm ({self.rule.name} hand)")
            self.begin()
            self.position = (from_cell, self.START_FACING)
            return True

        # Moves back through visited cells do not end the step
        for _ in range(4 * dimensions.size + 1):
            cell, facing = self.position
            if cell == to_cell:
                self.reconstruct_path(grid, from_cell, to_cell)
                self.reset()
                return False

            direction = self.rule.initial(facing)
            for _ in range(4):
                if not grid.has_wall(cell, direction):
                    break
                direction = self.rule.subsequent(direction)
            else:
                raise MazeInvariantError(f"Cell {cell} is walled in")

            neighbour = direction.neighbour(dimensions, cell)
            if neighbour is None:
                raise MazeInvariantError(f"Cell {cell} has an opening off the grid")
            self.position = (neighbour, direction)

            if neighbour != from_cell and grid.previous_of(neighbour) is None:
                grid.set_previous(neighbour, cell)
                self.step_count += 1
                return True

        raise MazeInvariantError(f"Wall follower circled without reaching cell {to_cell}")
