import random
from typing import Callable, Dict

from maze_stepper.core.errors import MazeConfigError
from maze_stepper.core.geometry import manhattan_distance
from maze_stepper.algo.base import Generator, Solver
from maze_stepper.algo.dfs import RandomizedDFS
from maze_stepper.algo.wilson import Wilson
from maze_stepper.algo.solvers import AStar, RandomizedDFSSolver, WallFollower, zero_heuristic

# ==========================================
# ALGORITHM REGISTRIES
# Display name -> constructor taking the shared random source.
# Short keys are what the CLI accepts.
# ==========================================
GENERATORS: Dict[str, Callable[[random.Random], Generator]] = {
    "Randomised depth first search algorithm": lambda rng: RandomizedDFS(rng=rng),
    "Wilson's algorithm": lambda rng: Wilson(rng=rng),
}

SOLVERS: Dict[str, Callable[[random.Random], Solver]] = {
    "A* algorithm (using Taxicab distance heuristic)": lambda rng: AStar(manhattan_distance, rng=rng),
    "Dijkstra's algorithm (A* algorithm without heuristic)": lambda rng: AStar(zero_heuristic, rng=rng),
    "Randomised depth first search algorithm": lambda rng: RandomizedDFSSolver(rng=rng),
    "Wall follower (left turn)": lambda rng: WallFollower("left", rng=rng),
    "Wall follower (right turn)": lambda rng: WallFollower("right", rng=rng),
}

GENERATOR_KEYS = {
    "dfs": "Randomised depth first search algorithm",
    "wilson": "Wilson's algorithm",
}

SOLVER_KEYS = {
    "astar": "A* algorithm (using Taxicab distance heuristic)",
    "dijkstra": "Dijkstra's algorithm (A* algorithm without heuristic)",
    "dfs_solve": "Randomised depth first search algorithm",
    "left": "Wall follower (left turn)",
    "right": "Wall follower (right turn)",
}


def _lookup(name: str, registry: Dict[str, Callable], keys: Dict[str, str], kind: str) -> Callable:
    display = keys.get(name, name)
    if display not in registry:
        known = ", ".join(sorted(keys))
        raise MazeConfigError(f"Unknown {kind} {name!r} (expected one of: {known})")
    return registry[display]


def display_name(name: str, keys: Dict[str, str]) -> str:
    return keys.get(name, name)


def create_generator(name: str, rng: random.Random = None) -> Generator:
    return _lookup(name, GENERATORS, GENERATOR_KEYS, "generator")(rng or random.Random())


def create_solver(name: str, rng: random.Random = None) -> Solver:
    return _lookup(name, SOLVERS, SOLVER_KEYS, "solver")(rng or random.Random())
