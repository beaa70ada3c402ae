import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.analysis import MazeAnalyzer
from maze_stepper.core.direction import Direction
from maze_stepper.core.grid import Grid
from maze_stepper.algo.dfs import RandomizedDFS


class TestAnalysis(unittest.TestCase):
    def test_walled_grid(self):
        grid = Grid(3, 3)
        self.assertEqual(MazeAnalyzer.count_passages(grid), 0)
        self.assertFalse(MazeAnalyzer.is_spanning_tree(grid))
        self.assertIsNone(MazeAnalyzer.tree_path(grid, 0, 8))

    def test_cycle_detected(self):
        grid = Grid(2, 2)
        grid.carve(0, Direction.EAST)
        grid.carve(1, Direction.SOUTH)
        grid.carve(3, Direction.WEST)
        self.assertTrue(MazeAnalyzer.is_spanning_tree(grid))
        grid.carve(2, Direction.NORTH)
        self.assertEqual(MazeAnalyzer.count_passages(grid), 4)
        self.assertFalse(MazeAnalyzer.is_spanning_tree(grid))

    def test_tree_path(self):
        grid = Grid(3, 1)
        grid.carve(0, Direction.EAST)
        grid.carve(1, Direction.EAST)
        self.assertEqual(MazeAnalyzer.tree_path(grid, 0, 2), [0, 1, 2])
        self.assertEqual(MazeAnalyzer.tree_path(grid, 2, 0), [2, 1, 0])
        self.assertEqual(MazeAnalyzer.tree_path(grid, 1, 1), [1])

    def test_stats(self):
        w, h = 20, 20
        grid = Grid(w, h)
        RandomizedDFS(seed=42).run_all(grid.dimensions, grid)

        stats = MazeAnalyzer.calculate_stats(grid)
        self.assertGreater(stats["dead_ends"], 0)
        self.assertEqual(stats["dead_ends"] + stats["corridors"] + stats["intersections"], w * h)
        self.assertGreater(stats["dead_end_percent"], 0)


if __name__ == '__main__':
    unittest.main()
