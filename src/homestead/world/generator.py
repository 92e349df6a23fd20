import math

import numpy as np

from ..core.rng import get_seeded_rng, to_int32
from .model import Resources, Tile
from .noise import NoiseField

ALTITUDE_NOISE_SCALE = 0.1
ALTITUDE_AMPLITUDE = 30
ALTITUDE_OFFSET = -10

FOREST_NOISE_SCALE = 0.05
FOREST_NOISE_THRESHOLD = 0.3
FOREST_DRAW_THRESHOLD = 0.6
FOREST_MIN_ALTITUDE = -3 # exclusive

# Large odd primes, one pair per derived stream, to decorrelate the axes
RESOURCE_PRIMES = (73856093, 19349663)
FOREST_PRIMES = (83492791, 39916801)


def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, halves toward +infinity."""
    return math.floor(value + 0.5)


def tile_seed(seed: int, x: int, y: int, primes) -> int:
    """Mixes the world seed with a coordinate into a tile-local 32-bit seed."""
    px, py = primes
    return to_int32(seed + x * px) ^ to_int32(y * py)


def altitude_at(field: NoiseField, x: int, y: int) -> int:
    raw = field.sample(x * ALTITUDE_NOISE_SCALE, y * ALTITUDE_NOISE_SCALE)
    return round_half_up(raw * ALTITUDE_AMPLITUDE + ALTITUDE_OFFSET)


def generate_resources(seed: int, x: int, y: int, altitude: int) -> Resources:
    rng = get_seeded_rng(tile_seed(seed, x, y, RESOURCE_PRIMES))
    resources = Resources()

    # Stone is everywhere
    resources.stone = rng.next_int(50, 150)

    if abs(altitude) < 5:
        resources.iron = rng.next_int(20, 80)
    elif abs(altitude) < 10:
        resources.iron = rng.next_int(5, 30)

    # Uranium is rare
    if abs(altitude) < 3:
        resources.uranium = rng.next_int(1, 10)
    elif abs(altitude) < 8:
        resources.uranium = rng.next_int(0, 5)

    return resources


def generate_forest(seed: int, field: NoiseField, x: int, y: int, altitude: int):
    """Returns (is_forest, forest_health) for a tile."""
    if altitude <= FOREST_MIN_ALTITUDE:
        return False, 0
    rng = get_seeded_rng(tile_seed(seed, x, y, FOREST_PRIMES))
    forest_noise = field.sample(x * FOREST_NOISE_SCALE, y * FOREST_NOISE_SCALE)
    if forest_noise > FOREST_NOISE_THRESHOLD and rng.next() > FOREST_DRAW_THRESHOLD:
        return True, rng.next_int(70, 100)
    return False, 0


def generate_tile(seed: int, field: NoiseField, x: int, y: int) -> Tile:
    """
    Generates the terrain for a single coordinate.

    The result depends only on (seed, x, y); `field` must be the noise field
    built from the same seed.
    """
    altitude = altitude_at(field, x, y)
    is_forest, forest_health = generate_forest(seed, field, x, y, altitude)
    return Tile(
        x=x,
        y=y,
        altitude=altitude,
        resources=generate_resources(seed, x, y, altitude),
        is_forest=is_forest,
        forest_health=forest_health,
    )


def altitude_map(field: NoiseField, center_x: int, center_y: int, size: int) -> np.ndarray:
    """
    Altitudes of a size x size window without touching any tile store.

    Rows run top to bottom (y), columns left to right (x), matching the order
    of `World.get_region`.
    """
    half = size // 2
    xs = np.arange(center_x - half, center_x - half + size)
    ys = np.arange(center_y - half, center_y - half + size)
    grid_x, grid_y = np.meshgrid(xs * ALTITUDE_NOISE_SCALE, ys * ALTITUDE_NOISE_SCALE)
    raw = field.sample_grid(grid_x, grid_y)
    return np.floor(raw * ALTITUDE_AMPLITUDE + ALTITUDE_OFFSET + 0.5).astype(np.int64)
