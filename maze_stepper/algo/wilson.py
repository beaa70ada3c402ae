import logging
from typing import List, Optional

from maze_stepper.core.direction import Dimensions
from maze_stepper.core.grid import Grid
from maze_stepper.algo.base import Generator

logger = logging.getLogger(__name__)


class Wilson(Generator):
    """
    Wilson's algorithm: loop-erased random walks from untagged cells until
    they hit the tree, producing a uniform spanning tree.

    Each cell's walk tag records which walk claimed it. Walk 0 is the seed
    cell; a walk is committed (its walls carved) as soon as it touches a cell
    of any earlier walk.
    """

    def __init__(self, seed: int = None, rng=None):
        super().__init__(seed, rng)
        self.reset()

    def reset(self):
        # Current walk id; None before the run has started
        self.walk: Optional[int] = None
        # Cells of the current walk, head last; empty between walks
        self.stack: List[int] = []
        # Every index below the cursor is permanently tagged
        self.cursor = 0

    def step(self, dimensions: Dimensions, grid: Grid) -> bool:
        if self.walk is None:
            logger.info("create using Wilson's algorithm")
            seed_cell = self.rng.randrange(dimensions.size)
            grid.set_walk(seed_cell, 0)
            self.walk = 1
            self.step_count = 0
            return True

        if not self.stack:
            start = self._next_untagged(grid)
            if start is None:
                logger.info(f"create is complete ({self.walk - 1} walks)")
                self.reset()
                return False
            grid.set_walk(start, self.walk)
            self.stack.append(start)
            self.step_count += 1
            return True

        head = self.stack[-1]
        # Walls are ignored; untagged territory has no passages yet
        neighbour = self.choose([n for n, _ in grid.neighbours(head)])
        neighbour_walk = grid.walk_of(neighbour)

        if neighbour_walk is None:
            grid.set_walk(neighbour, self.walk)
            self.stack.append(neighbour)
        elif neighbour_walk == self.walk:
            # Loop erasure
            while self.stack[-1] != neighbour:
                grid.clear_walk(self.stack.pop())
        else:
            logger.debug(f"walk {self.walk} is complete")
            self.walk += 1
            while self.stack:
                last = self.stack.pop()
                grid.carve_between(last, neighbour)
                neighbour = last

        self.step_count += 1
        return True

    def _next_untagged(self, grid: Grid) -> Optional[int]:
        while self.cursor < grid.size:
            if not grid.is_tagged(self.cursor):
                return self.cursor
            self.cursor += 1
        return None
