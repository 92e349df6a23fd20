from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Tuple

from ..core.log import AuditLog
from ..core.state import GameState
from ..world.model import Tile
from ..world.store import World
from .consumption import consume_food, grow_population, resolve_starvation
from .production import produce_lumber, produce_mines
from .structures import (
    Structure,
    StructureRegistry,
    StructureType,
    parse_structure_type,
    structure_registry,
    type_name,
)
from .taxation import collect_farm_income

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    success: bool
    structure: Optional[Structure] = None
    reason: Optional[str] = None


class Economy:
    """
    Owns every placed structure and advances the economic state.

    Tiles only hold a back-reference to their structure; building and
    demolishing always go through this class so both sides stay in sync.
    """

    def __init__(self, game_state: GameState, world: World, registry: StructureRegistry = structure_registry):
        self.game_state = game_state
        self.world = world
        self.registry = registry
        self.structures: Dict[Tuple[int, int], Structure] = {}

    def build(self, tile: Tile, structure_type) -> BuildResult:
        state = self.game_state
        structure_def = self.registry.find(structure_type)
        if structure_def is None:
            return BuildResult(False, reason=f"Unknown structure type '{type_name(structure_type)}'")

        # First failing check wins
        cost = structure_def.cost
        if state.money < cost.money:
            return BuildResult(False, reason="Not enough money")
        if state.wood < cost.wood:
            return BuildResult(False, reason="Not enough wood")
        if state.food < cost.food:
            return BuildResult(False, reason="Not enough food")

        build_check = self.world.can_build(tile, structure_def.id)
        if not build_check.can_build:
            return BuildResult(False, reason=build_check.reason)

        if tile.structure is not None or tile.coord in self.structures:
            return BuildResult(False, reason="Tile already occupied")

        state.money -= cost.money
        state.wood -= cost.wood
        state.food -= cost.food

        structure = Structure(
            type=structure_def.id,
            x=tile.x,
            y=tile.y,
            level=1,
            data=structure_def.new_data(),
        )
        self.place(structure, tile)

        state.add_message(f"Built {structure.type.value} at ({tile.x}, {tile.y})", "info")
        logger.info("Built %s at (%d, %d)", structure.type.value, tile.x, tile.y)
        return BuildResult(True, structure=structure)

    def place(self, structure: Structure, tile: Optional[Tile] = None):
        """Registers a structure and links its tile, without costs or checks."""
        tile = tile or self.world.get(structure.x, structure.y)
        tile.structure = structure
        self.structures[structure.coord] = structure

    def destroy(self, x: int, y: int) -> bool:
        structure = self.structures.pop((x, y), None)
        if structure is None:
            return False
        tile = self.world.get(x, y)
        tile.structure = None
        logger.info("Demolished %s at (%d, %d)", structure.type.value, x, y)
        return True

    def structure_at(self, x: int, y: int) -> Optional[Structure]:
        return self.structures.get((x, y))

    def list_structures(self) -> List[Structure]:
        return list(self.structures.values())

    def structures_of_type(self, structure_type) -> List[Structure]:
        structure_type = parse_structure_type(structure_type)
        return [s for s in self.structures.values() if s.type == structure_type]

    def housing_capacity(self) -> int:
        return sum(house.data.capacity for house in self.structures_of_type(StructureType.HOUSE))

    def tick(self, log: Optional[AuditLog] = None) -> AuditLog:
        """
        Advances all structures and the economic state by one step.

        Stages run in a fixed order because later ones read what earlier
        ones wrote (growth needs the post-starvation food stock, and so on).
        """
        log = log if log is not None else AuditLog()

        # 1. farm income and bankruptcy
        collect_farm_income(self, log)
        # 2. food consumption
        consume_food(self.game_state, log)
        # 3. starvation
        resolve_starvation(self.game_state, log)
        # 4. population growth
        grow_population(self, log)
        # 5. lumber
        produce_lumber(self, log)
        # 6. mining
        produce_mines(self, log)

        return log
