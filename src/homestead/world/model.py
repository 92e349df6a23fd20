from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..economy.structures import Structure # Forward reference


@dataclass
class Resources:
    stone: float = 0
    iron: float = 0
    uranium: float = 0

    def as_dict(self):
        return {"stone": self.stone, "iron": self.iron, "uranium": self.uranium}


@dataclass
class Tile:
    x: int
    y: int
    altitude: int = 0
    resources: Resources = field(default_factory=Resources)
    is_forest: bool = False
    forest_health: float = 0.0 # 0-100, only meaningful while is_forest

    # Back-reference for queries; the Economy owns the structure
    structure: Optional["Structure"] = field(default=None, repr=False, compare=False)

    @property
    def coord(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_water(self) -> bool:
        return self.altitude < 0
