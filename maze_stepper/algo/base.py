import logging
import random
from abc import ABC, abstractmethod
from typing import Iterator, List

from maze_stepper.core.direction import Dimensions
from maze_stepper.core.errors import MazeInvariantError
from maze_stepper.core.grid import Grid

logger = logging.getLogger(__name__)


class Algorithm(ABC):
    """
    Shared scaffolding for resumable algorithms: injected randomness and a
    per-run step counter. Subclasses keep their progress state on `self`
    between calls and never hold on to the grid.
    """
    def __init__(self, seed: int = None, rng: random.Random = None):
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.step_count = 0

    def choose(self, items):
        """Uniform draw from a non-empty sequence."""
        return items[self.rng.randrange(len(items))]

    @abstractmethod
    def reset(self):
        """Drop all progress state; the next step starts a new run."""
        pass


class Generator(Algorithm):
    @abstractmethod
    def step(self, dimensions: Dimensions, grid: Grid) -> bool:
        """
        Advance maze construction by one step. Returns True while work remains.
        The call that finishes resets the algorithm and returns False.
        """
        pass

    def run(self, dimensions: Dimensions, grid: Grid) -> Iterator[str]:
        """
        Yields a status string per step.
        The actual grid modifications happen in-place on `grid`.
        """
        while self.step(dimensions, grid):
            yield f"Carving... Steps: {self.step_count}"
        yield "Done"

    def run_all(self, dimensions: Dimensions, grid: Grid):
        """Helper to run the generator to completion."""
        for _ in self.run(dimensions, grid):
            pass


class Solver(Algorithm):
    def __init__(self, seed: int = None, rng: random.Random = None):
        super().__init__(seed, rng)
        self.path: List[int] = []

    @abstractmethod
    def step(self, dimensions: Dimensions, grid: Grid, from_cell: int, to_cell: int) -> bool:
        """
        Advance pathfinding by one step toward `to_cell`. Returns True while
        work remains; on completion the path is flagged and False returned.
        """
        pass

    def run(self, dimensions: Dimensions, grid: Grid, from_cell: int, to_cell: int) -> Iterator[str]:
        while self.step(dimensions, grid, from_cell, to_cell):
            yield f"Steps: {self.step_count}"
        yield "Solved"

    def run_all(self, dimensions: Dimensions, grid: Grid, from_cell: int, to_cell: int):
        for _ in self.run(dimensions, grid, from_cell, to_cell):
            pass

    def begin(self):
        """Bookkeeping shared by every solver's first call."""
        self.path = []
        self.step_count = 0

    def reconstruct_path(self, grid: Grid, from_cell: int, to_cell: int):
        """
        Walks back-pointers from `to_cell` to `from_cell`, flagging RESULT on
        every cell but `from_cell`, and stores the route in `self.path`.
        """
        path = [to_cell]
        curr = to_cell
        while curr != from_cell:
            grid.set_result(curr)
            prev = grid.previous_of(curr)
            if prev is None:
                raise MazeInvariantError(f"Cell {curr} has no previous cell on the way back to {from_cell}")
            curr = prev
            path.append(curr)
            if len(path) > grid.size:
                raise MazeInvariantError("Back-pointers form a cycle")
        path.reverse()
        self.path = path
        logger.info(f"solve is complete (path length {len(path) - 1}, steps {self.step_count})")
