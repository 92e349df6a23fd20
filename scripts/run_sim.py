import argparse
import logging
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.append(str(Path(__file__).parent.parent))

from src.homestead.core.sim import Simulation, step, AUTOSAVE_EVERY
from src.homestead.io.save_load import load_from_json, save_to_json
from src.homestead.reports.ticker import generate_tick_report


def main():
    parser = argparse.ArgumentParser(description="Run the Homestead simulation.")
    parser.add_argument("--seed", type=int, default=42, help="World seed for a new game.")
    parser.add_argument("--load", type=str, help="Path to a JSON save to continue from.")
    parser.add_argument(
        "--ticks", type=int, default=12, help="Number of ticks to simulate."
    )
    parser.add_argument(
        "--build",
        action="append",
        default=[],
        metavar="TYPE:X:Y",
        help="Build a structure before the first tick, e.g. house:3:4. May be repeated.",
    )
    parser.add_argument("--tax", type=float, help="Income tax rate in [0, 1].")
    parser.add_argument("--save", type=str, help="Save path; also autosaves every 30 ticks.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.load:
        sim = load_from_json(args.load)
        print(f"Loaded game from '{args.load}' with seed {sim.seed} at tick {sim.game_state.time}.")
    else:
        sim = Simulation.new(args.seed)
        print(f"Created new world with seed {sim.seed}.")

    if args.tax is not None:
        sim.game_state.set_income_tax_rate(args.tax)

    for order in args.build:
        try:
            structure_type, x, y = order.split(":")
            tile = sim.world.get(int(x), int(y))
        except ValueError:
            parser.error(f"Invalid --build value '{order}', expected TYPE:X:Y")
        result = sim.economy.build(tile, structure_type)
        if result.success:
            print(f"Built {structure_type} at ({x}, {y}).")
        else:
            print(f"Could not build {structure_type} at ({x}, {y}): {result.reason}")

    for _ in range(args.ticks):
        report = step(sim)
        print(generate_tick_report(report.log, tick=report.tick))
        if args.save and sim.game_state.time % AUTOSAVE_EVERY == 0:
            save_to_json(sim, args.save)

    if args.save:
        save_to_json(sim, args.save)
        print(f"Game saved to {args.save}")

if __name__ == "__main__":
    main()
