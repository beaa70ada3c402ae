import argparse
import logging
import os
import sys
import time

# Ensure project root is in path so we can import 'maze_stepper' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.algo.registry import GENERATOR_KEYS, SOLVER_KEYS, create_solver
from maze_stepper.core.analysis import MazeAnalyzer
from maze_stepper.core.errors import MazeConfigError, MazeInvariantError
from maze_stepper.session import (
    DEFAULT_GENERATOR, DEFAULT_HEIGHT, DEFAULT_SOLVER, DEFAULT_WIDTH, MazeSession,
)


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Stepper: step-by-step maze generation and solving")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run Command
    run_parser = subparsers.add_parser("run", help="Generate a maze and solve it")
    run_parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Maze Width")
    run_parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="Maze Height")
    run_parser.add_argument("--generator", type=str, default=DEFAULT_GENERATOR, choices=sorted(GENERATOR_KEYS), help="Generation Algorithm")
    run_parser.add_argument("--solver", type=str, default=DEFAULT_SOLVER, choices=sorted(SOLVER_KEYS), help="Solver algorithm")
    run_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    run_parser.add_argument("--from", dest="from_cell", type=int, default=None, help="Start cell index (random if omitted)")
    run_parser.add_argument("--to", dest="to_cell", type=int, default=None, help="End cell index (random if omitted)")
    run_parser.add_argument("--visual", action="store_true", help="Show visualization")
    run_parser.add_argument("--record", action="store_true", help="Record video (implies --visual)")
    run_parser.add_argument("--steps-per-frame", type=int, default=1, help="Algorithm steps per rendered frame")
    run_parser.add_argument("--fps", type=int, default=60, help="Frame rate cap")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Run every solver on the same maze")
    bench_parser.add_argument("--width", type=int, default=100, help="Maze Width")
    bench_parser.add_argument("--height", type=int, default=100, help="Maze Height")
    bench_parser.add_argument("--generator", type=str, default=DEFAULT_GENERATOR, choices=sorted(GENERATOR_KEYS), help="Generation Algorithm")
    bench_parser.add_argument("--seed", type=int, default=None, help="Random Seed")

    # List Command
    subparsers.add_parser("list", help="List available algorithms")

    return parser


def generate_headless(session: MazeSession) -> int:
    ticks = 0
    while not session.has_maze:
        session.tick()
        ticks += 1
    return ticks


def command_run(args, logger) -> int:
    session = MazeSession(args.width, args.height, args.generator, args.solver, seed=args.seed,
                          from_cell=args.from_cell, to_cell=args.to_cell)

    if args.visual or args.record:
        logger.info("Visual mode enabled - Opening window...")
        from maze_stepper.viz.renderer import Renderer
        renderer = Renderer(session, steps_per_frame=args.steps_per_frame, fps=args.fps, record=args.record)
        renderer.init_window()
        renderer.run_loop()
        return 0

    t0 = time.time()
    gen_ticks = generate_headless(session)
    logger.info(f"Generation complete in {gen_ticks} steps ({time.time() - t0:.4f}s)")

    t0 = time.time()
    solve_ticks = session.run_to_completion()
    logger.info(f"Solve complete in {solve_ticks} steps ({time.time() - t0:.4f}s)")

    stats = MazeAnalyzer.calculate_stats(session.grid)
    print(f"Maze: {session.grid.width}x{session.grid.height} ({session.generator_label})")
    print(f"Perfect: {MazeAnalyzer.is_spanning_tree(session.grid)}")
    print(f"Dead ends: {stats['dead_ends']} ({stats['dead_end_percent']:.1f}%)")
    print(f"Solver: {session.solver_label}")
    print(f"From {session.from_cell} to {session.to_cell}: {len(session.path) - 1} moves, {solve_ticks} steps")
    return 0


def command_benchmark(args, logger) -> int:
    session = MazeSession(args.width, args.height, args.generator, DEFAULT_SOLVER, seed=args.seed)
    generate_headless(session)
    grid = session.grid
    from_cell, to_cell = 0, grid.size - 1
    logger.info(f"Benchmarking solvers on {grid.width}x{grid.height} from {from_cell} to {to_cell}")

    print(f"\n{'ALGORITHM':<12} | {'TIME (s)':<10} | {'STEPS':<10} | {'EXPLORED':<10} | {'PATH LEN':<10}")
    print("-" * 64)

    for key in sorted(SOLVER_KEYS):
        grid.clear_solution()
        grid.set_endpoints(from_cell, to_cell)
        solver = create_solver(key, session.rng)

        t_start = time.time()
        solver.run_all(grid.dimensions, grid, from_cell, to_cell)
        duration = time.time() - t_start

        explored = sum(1 for idx in range(grid.size) if grid.previous_of(idx) is not None)
        print(f"{key:<12} | {duration:<10.4f} | {solver.step_count:<10} | {explored:<10} | {len(solver.path) - 1:<10}")
    return 0


def command_list() -> int:
    print("Generators:")
    for key, name in sorted(GENERATOR_KEYS.items()):
        print(f"  {key:<10} {name}")
    print("Solvers:")
    for key, name in sorted(SOLVER_KEYS.items()):
        print(f"  {key:<10} {name}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("maze_stepper")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    try:
        if args.command == "run":
            return command_run(args, logger)
        if args.command == "benchmark":
            return command_benchmark(args, logger)
        return command_list()
    except MazeConfigError as e:
        logger.error(str(e))
        return 2
    except MazeInvariantError:
        logger.exception("Maze invariant violated")
        return 1


if __name__ == "__main__":
    sys.exit(main())
