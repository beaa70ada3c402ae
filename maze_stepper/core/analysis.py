from collections import deque
from typing import Dict, List, Optional

from maze_stepper.core.direction import Direction
from maze_stepper.core.grid import Grid


class MazeAnalyzer:
    @staticmethod
    def count_passages(grid: Grid) -> int:
        """Number of removed walls. Each passage is counted once (from its N/W side)."""
        passages = 0
        for idx in range(grid.size):
            # South and East of every cell cover each inner edge exactly once
            if not grid.has_wall(idx, Direction.SOUTH) and Direction.SOUTH.neighbour(grid.dimensions, idx) is not None:
                passages += 1
            if not grid.has_wall(idx, Direction.EAST) and Direction.EAST.neighbour(grid.dimensions, idx) is not None:
                passages += 1
        return passages

    @staticmethod
    def is_spanning_tree(grid: Grid) -> bool:
        """
        True when the wall-free edges connect every cell with exactly
        size - 1 edges and no cycle (a perfect maze).
        """
        parent = list(range(grid.size))

        def find(i):
            while parent[i] != i:
                parent[i] = parent[parent[i]]
                i = parent[i]
            return i

        edges = 0
        for idx in range(grid.size):
            for neighbour, direction in grid.open_neighbours(idx):
                if direction not in (Direction.SOUTH, Direction.EAST):
                    continue
                root_a, root_b = find(idx), find(neighbour)
                if root_a == root_b:
                    return False  # cycle
                parent[root_a] = root_b
                edges += 1

        return edges == grid.size - 1

    @staticmethod
    def tree_path(grid: Grid, start: int, end: int) -> Optional[List[int]]:
        """Path [start, ..., end] over wall-free edges (BFS), or None if unreachable."""
        parents: Dict[int, int] = {start: start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            if current == end:
                break
            for neighbour, _ in grid.open_neighbours(current):
                if neighbour not in parents:
                    parents[neighbour] = current
                    queue.append(neighbour)

        if end not in parents:
            return None

        path = [end]
        while path[-1] != start:
            path.append(parents[path[-1]])
        path.reverse()
        return path

    @staticmethod
    def calculate_stats(grid: Grid):
        dead_ends = 0
        intersections = 0  # 3 or 4 exits
        corridors = 0  # 2 exits

        for idx in range(grid.size):
            exits = sum(1 for _ in grid.open_neighbours(idx))
            if exits == 1: dead_ends += 1
            elif exits == 2: corridors += 1
            elif exits >= 3: intersections += 1

        total = grid.size
        return {
            "dead_ends": dead_ends,
            "corridors": corridors,
            "intersections": intersections,
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0
        }
