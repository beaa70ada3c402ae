import logging
from typing import List

from maze_stepper.core.direction import Dimensions
from maze_stepper.core.grid import Grid
from maze_stepper.algo.base import Generator

logger = logging.getLogger(__name__)


class RandomizedDFS(Generator):
    """
    Recursive backtracker with the call stack replaced by an explicit stack,
    so each step carves at most one passage.
    """
    WALK = 0

    def __init__(self, seed: int = None, rng=None):
        super().__init__(seed, rng)
        self.reset()

    def reset(self):
        self.initialised = False
        # Stack of cell indexes
        self.stack: List[int] = []

    def step(self, dimensions: Dimensions, grid: Grid) -> bool:
        if not self.initialised:
            logger.info("create using randomised depth first search algorithm")
            start = self.rng.randrange(dimensions.size)
            grid.set_walk(start, self.WALK)
            self.stack.append(start)
            self.initialised = True
            self.step_count = 0
            return True

        # Backtrack within a single step until something can be carved
        while self.stack:
            cell = self.stack.pop()
            neighbours = [n for n, _ in grid.neighbours(cell) if not grid.is_tagged(n)]
            if neighbours:
                neighbour = self.choose(neighbours)
                grid.set_walk(neighbour, self.WALK)
                grid.carve_between(cell, neighbour)
                self.stack.append(cell)
                self.stack.append(neighbour)
                self.step_count += 1
                return True

        logger.info(f"create is complete ({self.step_count} passages)")
        self.reset()
        return False
