import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.append(str(Path(__file__).parent.parent))

from src.homestead.core.sim import Simulation
from src.homestead.io.save_load import save_to_json


def main():
    parser = argparse.ArgumentParser(description="Generate a Homestead world and write it as a new save.")
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for world generation.",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=33,
        help="Width of the square region around the origin to pre-generate.",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="world_generated.json",
        help="Output path for the generated save file.",
    )
    args = parser.parse_args()

    sim = Simulation.new(args.seed)
    tiles = sim.world.get_region(0, 0, args.size)
    forests = sum(1 for tile in tiles if tile.is_forest)
    water = sum(1 for tile in tiles if tile.is_water)

    save_to_json(sim, args.out)
    print(f"Generated {len(tiles)} tiles ({forests} forest, {water} water) saved to '{args.out}'.")


if __name__ == "__main__":
    main()
