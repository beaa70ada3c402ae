import unittest
import sys
import os
import random

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.analysis import MazeAnalyzer
from maze_stepper.core.direction import Direction
from maze_stepper.core.errors import MazeInvariantError
from maze_stepper.core.geometry import manhattan_distance
from maze_stepper.core.grid import Grid
from maze_stepper.algo.dfs import RandomizedDFS
from maze_stepper.algo.wilson import Wilson
from maze_stepper.algo.solvers import (
    AStar, RandomizedDFSSolver, WallFollower, RIGHT_HAND, zero_heuristic,
)


def all_solvers(seed=0):
    return [
        AStar(manhattan_distance),
        AStar(zero_heuristic),
        RandomizedDFSSolver(seed=seed),
        WallFollower("left"),
        WallFollower("right"),
    ]


def solve(solver, grid, from_cell, to_cell):
    grid.clear_solution()
    grid.set_endpoints(from_cell, to_cell)
    solver.run_all(grid.dimensions, grid, from_cell, to_cell)
    return solver.path


class TestSolvers(unittest.TestCase):
    def create_simple_maze(self):
        # 5x5 maze, single corridor
        # 0 -> 5 -> 10 -> 11 -> 12 -> 13 -> 14 -> 19 -> 24
        grid = Grid(5, 5)
        grid.carve(0, Direction.SOUTH)   # to 5
        grid.carve(5, Direction.SOUTH)   # to 10
        grid.carve(10, Direction.EAST)   # to 11
        grid.carve(11, Direction.EAST)   # to 12
        grid.carve(12, Direction.EAST)   # to 13
        grid.carve(13, Direction.EAST)   # to 14
        grid.carve(14, Direction.SOUTH)  # to 19
        grid.carve(19, Direction.SOUTH)  # to 24
        return grid

    def generated_maze(self, cls, w, h, seed):
        grid = Grid(w, h)
        cls(seed=seed).run_all(grid.dimensions, grid)
        return grid

    def test_simple_corridor(self):
        expected = [0, 5, 10, 11, 12, 13, 14, 19, 24]
        for solver in all_solvers():
            with self.subTest(solver=type(solver).__name__):
                grid = self.create_simple_maze()
                path = solve(solver, grid, 0, 24)
                self.assertEqual(path, expected)

    def test_all_solvers_agree(self):
        rng = random.Random(2024)
        for cls in (RandomizedDFS, Wilson):
            for seed in range(4):
                grid = self.generated_maze(cls, 12, 9, seed)
                from_cell, to_cell = rng.sample(range(grid.size), 2)
                expected = MazeAnalyzer.tree_path(grid, from_cell, to_cell)
                for solver in all_solvers(seed):
                    with self.subTest(gen=cls.__name__, seed=seed, solver=type(solver).__name__):
                        self.assertEqual(solve(solver, grid, from_cell, to_cell), expected)

    def test_astar_matches_dijkstra(self):
        grid = self.generated_maze(Wilson, 20, 20, 3)
        astar = AStar(manhattan_distance)
        dijkstra = AStar(zero_heuristic)
        path_a = solve(astar, grid, 0, grid.size - 1)
        path_d = solve(dijkstra, grid, 0, grid.size - 1)
        self.assertEqual(len(path_a), len(path_d))
        # Manhattan distance is consistent, so A* never expands more
        self.assertLessEqual(astar.expanded, dijkstra.expanded)

    def test_three_by_three_scenario(self):
        grid = self.generated_maze(RandomizedDFS, 3, 3, 17)
        solver = AStar(zero_heuristic)
        path = solve(solver, grid, 0, 8)

        tree_path = MazeAnalyzer.tree_path(grid, 0, 8)
        self.assertEqual(len(path) - 1, len(tree_path) - 1)
        self.assertEqual(path[0], 0)
        self.assertEqual(path[-1], 8)
        # RESULT marks every path cell after the start, and nothing else
        flagged = {i for i in range(grid.size) if grid.is_result(i)}
        self.assertEqual(flagged, set(path[1:]))
        for a, b in zip(path, path[1:]):
            self.assertEqual(grid.previous_of(b), a)

    def test_walls_read_only(self):
        grid = self.generated_maze(Wilson, 10, 10, 9)
        walls = grid.walls.tobytes()
        walks = grid.walks.tobytes()
        for solver in all_solvers():
            solve(solver, grid, 3, 96)
            self.assertEqual(grid.walls.tobytes(), walls)
            self.assertEqual(grid.walks.tobytes(), walks)

    def test_start_never_gets_previous(self):
        grid = self.generated_maze(RandomizedDFS, 10, 10, 4)
        for solver in all_solvers():
            solve(solver, grid, 55, 0)
            self.assertIsNone(grid.previous_of(55), type(solver).__name__)

    def test_lifecycle(self):
        grid = self.generated_maze(RandomizedDFS, 6, 6, 2)
        for solver in all_solvers():
            with self.subTest(solver=type(solver).__name__):
                grid.clear_solution()
                # First call only initialises
                self.assertTrue(solver.step(grid.dimensions, grid, 0, 35))
                self.assertTrue(all(grid.previous_of(i) is None for i in range(grid.size)))
                while solver.step(grid.dimensions, grid, 0, 35):
                    pass
                first = list(solver.path)

                # After returning False the next call starts a fresh run
                grid.clear_solution()
                self.assertTrue(solver.step(grid.dimensions, grid, 0, 35))
                solver.run_all(grid.dimensions, grid, 0, 35)
                self.assertEqual(solver.path, first)

    def test_wall_follower_rules(self):
        self.assertIs(WallFollower(RIGHT_HAND).rule, RIGHT_HAND)
        self.assertEqual(WallFollower("left").rule.initial(Direction.NORTH), Direction.WEST)
        self.assertEqual(WallFollower("right").rule.initial(Direction.NORTH), Direction.EAST)
        with self.assertRaises(ValueError):
            WallFollower("up")

    def test_disconnected_maze_raises(self):
        for solver in all_solvers():
            with self.subTest(solver=type(solver).__name__):
                grid = Grid(5, 5)  # All walls
                with self.assertRaises(MazeInvariantError):
                    solve(solver, grid, 0, 24)

    def test_unreachable_target_raises(self):
        # 0 - 1 | 2
        for solver in all_solvers():
            with self.subTest(solver=type(solver).__name__):
                grid = Grid(3, 1)
                grid.carve(0, Direction.EAST)
                with self.assertRaises(MazeInvariantError):
                    solve(solver, grid, 0, 2)

    def create_ring(self):
        # 2x2 loop: 0 - 1
        #           |   |
        #           2 - 3
        grid = Grid(2, 2)
        grid.carve(0, Direction.EAST)
        grid.carve(1, Direction.SOUTH)
        grid.carve(3, Direction.WEST)
        grid.carve(2, Direction.NORTH)
        return grid

    def expansion_order(self, solver, grid, from_cell, to_cell):
        grid.clear_solution()
        grid.set_endpoints(from_cell, to_cell)
        order = []
        self.assertTrue(solver.step(grid.dimensions, grid, from_cell, to_cell))
        while solver.step(grid.dimensions, grid, from_cell, to_cell):
            order.extend(sorted(solver.closed - set(order)))
            self.assertFalse(any(cell in solver.closed for _, cell in solver.fringe))
        return order

    def test_astar_ties_pop_lowest_index(self):
        grid = self.create_ring()
        solver = AStar(zero_heuristic)
        # 1 and 2 are both one move from 0; 1 is expanded first and wins 3
        self.assertEqual(self.expansion_order(solver, grid, 0, 3), [0, 1, 2])
        self.assertEqual(solver.path, [0, 1, 3])
        self.assertEqual(grid.previous_of(3), 1)
        self.assertEqual(solver.expanded, 4)

        self.assertEqual(self.expansion_order(solver, grid, 3, 0), [3, 1, 2])
        self.assertEqual(solver.path, [3, 1, 0])

    def test_astar_drops_stale_fringe_entries(self):
        # 0 - 1 - 2
        # |       |
        # 3 - 4 - 5
        #     |
        #     7
        grid = Grid(3, 3)
        grid.carve(0, Direction.EAST)
        grid.carve(1, Direction.EAST)
        grid.carve(2, Direction.SOUTH)
        grid.carve(5, Direction.WEST)
        grid.carve(0, Direction.SOUTH)
        grid.carve(3, Direction.EAST)
        grid.carve(4, Direction.SOUTH)

        def detour(dimensions, cell, goal):
            # Makes the long way round look cheaper than cell 3 at first
            return 3 if cell == 3 else 0

        solver = AStar(detour)
        grid.set_endpoints(0, 7)
        # Initialise, then expand 0, 1, 2, 5 and 3
        for _ in range(6):
            self.assertTrue(solver.step(grid.dimensions, grid, 0, 7))
        # Reached 4 the long way (distance 4) then through 3 (distance 2)
        self.assertEqual(sorted(solver.fringe), [(2, 4), (4, 4)])
        self.assertEqual(grid.previous_of(4), 3)

        self.assertTrue(solver.step(grid.dimensions, grid, 0, 7))
        self.assertEqual(solver.fringe, [(3, 7)])
        self.assertIn(4, solver.closed)

        self.assertFalse(solver.step(grid.dimensions, grid, 0, 7))
        self.assertEqual(solver.path, [0, 3, 4, 7])
        self.assertEqual(solver.fringe, [])


if __name__ == '__main__':
    unittest.main()
