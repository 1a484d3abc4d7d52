"""
Run a grid navigation scenario from text files.

Usage:
    python run_simulation.py land.txt edges.txt objectives.txt output.txt
    python run_simulation.py land.txt edges.txt objectives.txt output.txt --verbose
"""
import argparse
import logging
import sys

from src.runtime import RuntimeConfig, SimulationRuntime, write_output
from src.world import load_scenario


def main():
    parser = argparse.ArgumentParser(description="Simulate an agent navigating a grid under fog-of-war")
    parser.add_argument("land", help="Land file (dimensions and cell types)")
    parser.add_argument("edges", help="Edge file (symmetric edge weights)")
    parser.add_argument("objectives", help="Objectives file (radius, start, objectives)")
    parser.add_argument("output", help="Output file for the movement log")
    parser.add_argument("--max-replans", type=int, default=None,
                        help="Give up on an objective after this many replans")
    parser.add_argument("--no-initial-reveal", action="store_true",
                        help="Skip the obstacle scan around the start before the first plan")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log planning and decision details to stderr")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        scenario = load_scenario(args.land, args.edges, args.objectives)
    except (OSError, ValueError) as e:
        print(f"Could not load scenario: {e}", file=sys.stderr)
        sys.exit(2)

    config = RuntimeConfig(
        reveal_at_start=not args.no_initial_reveal,
        max_replans_per_objective=args.max_replans,
    )
    result = SimulationRuntime(scenario, config=config).run()
    write_output(result, args.output)

    if args.verbose:
        print(f"Objectives reached: {result.objectives_reached}/{result.total_objectives}")
        print(f"Steps: {result.steps}, replans: {result.replans}")

    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
