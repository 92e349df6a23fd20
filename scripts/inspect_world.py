import argparse
import sys
from pathlib import Path
import json

# Add the project root to the Python path
sys.path.append(str(Path(__file__).parent.parent))

from src.homestead.core.sim import Simulation
from src.homestead.io.save_load import load_from_json, tile_to_dict
from src.homestead.world.generator import altitude_map

# Coarse glyphs from deep water to peaks
ALTITUDE_GLYPHS = [(-5, "~"), (0, "-"), (5, "."), (10, ","), (15, "^")]
PEAK_GLYPH = "A"


def glyph_for(altitude: int, is_forest: bool = False) -> str:
    if is_forest:
        return "T"
    for upper, glyph in ALTITUDE_GLYPHS:
        if altitude < upper:
            return glyph
    return PEAK_GLYPH


def main():
    parser = argparse.ArgumentParser(description="Inspect the terrain of a Homestead world.")
    parser.add_argument("--seed", type=int, default=42, help="World seed.")
    parser.add_argument(
        "--from-json",
        type=str,
        help="Path to a JSON save to load from instead of generating a fresh world.",
    )
    parser.add_argument("--x", type=int, default=0, help="Center x coordinate.")
    parser.add_argument("--y", type=int, default=0, help="Center y coordinate.")
    parser.add_argument("--size", type=int, default=21, help="Width and height of the map window.")
    parser.add_argument("--tile", action="store_true", help="Print the full record of the center tile.")
    args = parser.parse_args()

    if args.from_json:
        sim = load_from_json(args.from_json)
        print(f"Loaded state from JSON file: {args.from_json}")
    else:
        sim = Simulation.new(args.seed)
        print(f"Generated world with seed {sim.seed}")

    if args.from_json:
        tiles = sim.world.get_region(args.x, args.y, args.size)
        rows = [
            "".join(
                (tile.structure.type.value[0].upper() if tile.structure else glyph_for(tile.altitude, tile.is_forest))
                for tile in tiles[row * args.size:(row + 1) * args.size]
            )
            for row in range(args.size)
        ]
    else:
        # Altitude only; avoids populating a tile store for a quick look
        altitudes = altitude_map(sim.world.noise, args.x, args.y, args.size)
        rows = ["".join(glyph_for(int(a)) for a in row) for row in altitudes]

    print("\n".join(rows))

    if args.tile:
        tile = sim.world.get(args.x, args.y)
        info = tile_to_dict(tile)
        info["structure"] = tile.structure.type.value if tile.structure else None
        print(f"\n--- Tile ({args.x}, {args.y}) ---")
        print(json.dumps(info, indent=2))


if __name__ == "__main__":
    main()
