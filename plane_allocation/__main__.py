"""Command line entry point: python -m plane_allocation"""

import argparse
import logging
import sys
from . import config
from .analyzer import AllocationAnalyzer
from .problem import ProblemDefinition
from .strategies import SSIAllocation, NearestAllocation, MILPAllocation
from .visibility import OmniscientVisibility, RangeVisibility
from .world import World

logger = logging.getLogger("plane_allocation")

STRATEGIES = ("ssi", "nearest", "milp")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_strategy(name: str, persistent_routes: bool):
    """
    Create the strategy registered under a command line name.

    Args:
        name: One of STRATEGIES
        persistent_routes: Keep SSI routes between allocation passes
    """
    if name == "ssi":
        return SSIAllocation(persistent_routes=persistent_routes)
    if name == "nearest":
        return NearestAllocation()
    return MILPAllocation()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the command line interface."""
    parser = argparse.ArgumentParser(
        prog="plane_allocation",
        description="Allocate tasks to planes with a sequential single-item auction"
    )
    parser.add_argument("--problem", help="JSON problem definition (random problem if omitted)")
    parser.add_argument("--planes", type=int, default=5, help="planes in a random problem")
    parser.add_argument("--tasks", type=int, default=20, help="tasks in a random problem")
    parser.add_argument("--seed", type=int, default=None, help="seed for the random problem")
    parser.add_argument("--strategy", choices=STRATEGIES + ("all",), default="ssi")
    parser.add_argument("--visibility", choices=("omniscient", "range"), default="omniscient")
    parser.add_argument("--range", type=float, default=None, dest="comm_range",
                        help="communication range override for range visibility")
    parser.add_argument("--ticks", type=int, default=0,
                        help="simulate this many ticks (0 runs a single allocation pass)")
    parser.add_argument("--persistent-routes", action="store_true", default=config.PERSISTENT_ROUTES,
                        help="keep routes between allocation passes")
    parser.add_argument("--export", help="write the comparison to this JSON file")
    parser.add_argument("--plot", help="save a plot of the routes to this file")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING",
                        type=str.upper, help="logging verbosity")
    return parser


def main(argv=None) -> int:
    """
    Run the command line interface.

    Args:
        argv: Arguments to parse (None reads sys.argv)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    config.configure_logging(args.log_level)

    if args.problem:
        try:
            problem = ProblemDefinition.load(args.problem)
        except (OSError, ValueError) as e:
            logger.error("Cannot load problem: %s", e)
            return 1
    else:
        problem = ProblemDefinition.generate_random_problem(args.planes, args.tasks, seed=args.seed)
    print(f"Loaded {problem}")

    names = STRATEGIES if args.strategy == "all" else (args.strategy,)
    analyzer = AllocationAnalyzer()

    for name in names:
        if args.visibility == "range":
            visibility = RangeVisibility(args.comm_range)
        else:
            visibility = OmniscientVisibility()
        world = World(build_strategy(name, args.persistent_routes), visibility)
        world.init(problem)

        if args.ticks > 0:
            stats = world.run(ticks=args.ticks)
            print(f"{world.strategy.get_name()}: {stats}")
        else:
            world.allocate()
        if world.last_result is not None:
            analyzer.add_result(world.last_result)

    analyzer.print_comparison()
    if args.export:
        analyzer.export_to_json(args.export)
    if args.plot:
        analyzer.visualize(save_path=args.plot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
