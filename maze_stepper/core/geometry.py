from typing import Tuple
from maze_stepper.core.direction import Dimensions


def row_and_col(dimensions: Dimensions, idx: int) -> Tuple[int, int]:
    return idx // dimensions.width, idx % dimensions.width


def manhattan_distance(dimensions: Dimensions, a: int, b: int) -> int:
    """Taxicab distance between two cells, ignoring walls."""
    row_a, col_a = row_and_col(dimensions, a)
    row_b, col_b = row_and_col(dimensions, b)
    return abs(row_a - row_b) + abs(col_a - col_b)
