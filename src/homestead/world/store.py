from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..economy.structures import structure_registry, type_name
from .generator import generate_tile
from .model import Tile
from .noise import NoiseField

logger = logging.getLogger(__name__)


@dataclass
class CanBuildResult:
    can_build: bool
    reason: Optional[str] = None


class World:
    """
    Sparse, lazily generated tile grid.

    Tiles are created the first time a coordinate is read and are kept for the
    lifetime of the world. Generation only fills the cache; it never touches
    economic state.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self.noise = NoiseField(seed)
        self._tiles: Dict[Tuple[int, int], Tile] = {}

    def get(self, x: int, y: int) -> Tile:
        key = (x, y)
        tile = self._tiles.get(key)
        if tile is None:
            tile = generate_tile(self.seed, self.noise, x, y)
            logger.debug("Generated tile (%d, %d) altitude=%d", x, y, tile.altitude)
            self._tiles[key] = tile
        return tile

    def get_region(self, center_x: int, center_y: int, size: int = 9) -> List[Tile]:
        """Returns a size x size block of tiles, row-major from the top-left corner."""
        half = size // 2
        return [
            self.get(center_x - half + dx, center_y - half + dy)
            for dy in range(size)
            for dx in range(size)
        ]

    def put(self, tile: Tile):
        """Stores an already-built tile verbatim (used when rehydrating a save)."""
        self._tiles[tile.coord] = tile

    def generated_tiles(self) -> List[Tile]:
        return list(self._tiles.values())

    def __contains__(self, coord: Tuple[int, int]) -> bool:
        return coord in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles.values())

    def neighbors(self, tile: Tile) -> List[Tile]:
        return [
            self.get(tile.x - 1, tile.y),
            self.get(tile.x + 1, tile.y),
            self.get(tile.x, tile.y - 1),
            self.get(tile.x, tile.y + 1),
        ]

    def can_build(self, tile: Tile, structure_type: str) -> CanBuildResult:
        """Checks terrain eligibility only; costs and occupancy are the economy's concern."""
        if tile.is_water:
            return CanBuildResult(False, "Cannot build on water")

        if tile.is_forest:
            return CanBuildResult(False, "Cannot build on forest")

        max_diff = structure_registry.max_altitude_diff(structure_type)
        for neighbor in self.neighbors(tile):
            if abs(neighbor.altitude - tile.altitude) > max_diff:
                return CanBuildResult(False, f"Terrain too steep for {type_name(structure_type)}")

        return CanBuildResult(True)
