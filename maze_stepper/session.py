import logging
import random
from enum import Enum
from typing import List, Optional, Tuple

from maze_stepper.core.errors import MazeConfigError
from maze_stepper.core.grid import Grid
from maze_stepper.algo.base import Solver
from maze_stepper.algo.registry import (
    GENERATOR_KEYS, SOLVER_KEYS, create_generator, create_solver, display_name,
)

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 20
DEFAULT_HEIGHT = 20
MIN_DIMENSION = 2
DEFAULT_GENERATOR = "wilson"
DEFAULT_SOLVER = "astar"


class Phase(Enum):
    GENERATE = "generate"
    SOLVE = "solve"
    COMPLETE = "complete"


def clamp_dimension(value: int, axis: str) -> int:
    if value < MIN_DIMENSION:
        logger.warning(f"Maze {axis} {value} is too small, using {MIN_DIMENSION}")
        return MIN_DIMENSION
    return value


def check_endpoints(cells: List[int], width: int, height: int):
    """Every cell inside a width x height maze, and a start/end pair distinct."""
    for cell in cells:
        if not 0 <= cell < width * height:
            raise MazeConfigError(f"Cell {cell} is outside the {width}x{height} maze")
    if len(cells) == 2 and cells[0] == cells[1]:
        raise MazeConfigError("Start and end cells must differ")


class MazeSession:
    """
    Owns the grid, the endpoints and the selected algorithms, and advances
    whichever phase is active by one step per tick.
    """
    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT,
                 generator: str = DEFAULT_GENERATOR, solver: str = DEFAULT_SOLVER,
                 seed: int = None, from_cell: int = None, to_cell: int = None):
        self.rng = random.Random(seed)
        self.generator_name = generator
        self.solver_name = solver
        # Endpoints requested up front; used instead of random ones after generation
        self.requested_from = from_cell
        self.requested_to = to_cell
        self.from_cell = 0
        self.to_cell = 0
        self.ticks = 0
        self.solver = create_solver(solver, self.rng)
        self.generate(width, height, generator)

    @property
    def dimensions(self):
        return self.grid.dimensions

    @property
    def path(self) -> List[int]:
        return self.solver.path

    @property
    def is_complete(self) -> bool:
        return self.phase is Phase.COMPLETE

    @property
    def generator_label(self) -> str:
        return display_name(self.generator_name, GENERATOR_KEYS)

    @property
    def solver_label(self) -> str:
        return display_name(self.solver_name, SOLVER_KEYS)

    def generate(self, width: int = None, height: int = None, generator: str = None):
        """Fresh fully walled grid and a fresh generator."""
        name = self.generator_name if generator is None else generator
        width = clamp_dimension(width if width is not None else self.grid.width, "width")
        height = clamp_dimension(height if height is not None else self.grid.height, "height")
        new_generator = create_generator(name, self.rng)
        self._check_requested(width, height)

        self.generator_name = name
        self.generator = new_generator
        self.grid = Grid(width, height)
        self.phase = Phase.GENERATE
        self.has_maze = False
        self.ticks = 0
        logger.info(f"Generating {width}x{height} maze with {self.generator_label}")

    def solve(self, solver: str = None, new_locations: bool = False,
              from_cell: int = None, to_cell: int = None):
        """
        Clears all solution metadata and restarts solving, on the same
        endpoints unless new ones are given or requested.

        Nothing changes if the solver name or an endpoint is rejected.
        """
        if not self.has_maze:
            raise MazeConfigError("Cannot solve before a maze has been generated")
        name = self.solver_name if solver is None else solver
        new_solver = create_solver(name, self.rng)

        if from_cell is not None or to_cell is not None:
            endpoints = self._validate_endpoints(from_cell, to_cell)
        elif new_locations:
            endpoints = self.random_endpoints()
        else:
            endpoints = (self.from_cell, self.to_cell)

        self.solver_name = name
        self.from_cell, self.to_cell = endpoints
        self.grid.clear_solution()
        self._begin_solve(new_solver)

    def tick(self) -> bool:
        """
        One step of the active phase. Returns False once everything is
        complete (nothing left to redraw).
        """
        if self.phase is Phase.GENERATE:
            if not self.generator.step(self.dimensions, self.grid):
                self.has_maze = True
                self.from_cell, self.to_cell = self.initial_endpoints()
                self._begin_solve()
            self.ticks += 1
            return True

        if self.phase is Phase.SOLVE:
            if not self.solver.step(self.dimensions, self.grid, self.from_cell, self.to_cell):
                self.phase = Phase.COMPLETE
                logger.info(f"Solved {self.from_cell} -> {self.to_cell} with {self.solver_label}: "
                            f"{len(self.path) - 1} moves")
            self.ticks += 1
            return True

        return False

    def run_to_completion(self) -> int:
        """Ticks until COMPLETE. Returns the number of ticks used."""
        ticks = 0
        while self.tick():
            ticks += 1
        return ticks

    def initial_endpoints(self) -> Tuple[int, int]:
        if self.requested_from is None and self.requested_to is None:
            return self.random_endpoints()
        from_cell, to_cell = self.random_endpoints()
        if self.requested_from is not None:
            from_cell = self.requested_from
        if self.requested_to is not None:
            to_cell = self.requested_to
        while to_cell == from_cell and self.requested_to is None:
            to_cell = self.rng.randrange(self.grid.size)
        while to_cell == from_cell and self.requested_from is None:
            from_cell = self.rng.randrange(self.grid.size)
        return self._validate_endpoints(from_cell, to_cell)

    def random_endpoints(self) -> Tuple[int, int]:
        size = self.grid.size
        from_cell = self.rng.randrange(size)
        to_cell = self.rng.randrange(size)
        while to_cell == from_cell:
            to_cell = self.rng.randrange(size)
        return from_cell, to_cell

    def _check_requested(self, width: int, height: int):
        requested = [cell for cell in (self.requested_from, self.requested_to) if cell is not None]
        check_endpoints(requested, width, height)

    def _validate_endpoints(self, from_cell: Optional[int], to_cell: Optional[int]) -> Tuple[int, int]:
        from_cell = self.from_cell if from_cell is None else from_cell
        to_cell = self.to_cell if to_cell is None else to_cell
        check_endpoints([from_cell, to_cell], self.grid.width, self.grid.height)
        return from_cell, to_cell

    def _begin_solve(self, solver: Solver = None):
        self.grid.set_endpoints(self.from_cell, self.to_cell)
        self.solver = create_solver(self.solver_name, self.rng) if solver is None else solver
        self.phase = Phase.SOLVE
        logger.info(f"Solving {self.from_cell} -> {self.to_cell} with {self.solver_label}")
