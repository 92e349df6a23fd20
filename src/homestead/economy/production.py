from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, TYPE_CHECKING

from ..core.log import AuditLog
from ..world.model import Resources, Tile
from ..world.store import World
from .structures import ResourceLevel, Structure, StructureType

if TYPE_CHECKING:
    from .engine import Economy

logger = logging.getLogger(__name__)

LUMBER_RADIUS = 8
LUMBER_WOOD_PER_LEVEL = 0.5
FOREST_DAMAGE_PER_TICK = 0.1

MINE_RADIUS = 4
MINE_UPGRADE_THRESHOLD = 100


@dataclass
class MineTier:
    rate: float # max units extracted per tick
    wood_factor: float # wood gained per unit extracted
    next_level: Optional[ResourceLevel] = None


MINE_TIERS: Dict[ResourceLevel, MineTier] = {
    ResourceLevel.STONE: MineTier(rate=1.0, wood_factor=0.5, next_level=ResourceLevel.IRON),
    ResourceLevel.IRON: MineTier(rate=0.5, wood_factor=1.0, next_level=ResourceLevel.URANIUM),
    ResourceLevel.URANIUM: MineTier(rate=0.2, wood_factor=2.0),
}


def count_forest(world: World, x: int, y: int, radius: int = LUMBER_RADIUS) -> int:
    count = 0
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            tile = world.get(x + dx, y + dy)
            if tile.is_forest and tile.forest_health > 0:
                count += 1
    return count


def damage_forest(world: World, x: int, y: int, radius: int = LUMBER_RADIUS) -> List[Tile]:
    """
    Cuts every living forest tile in range by FOREST_DAMAGE_PER_TICK.

    Tiles are visited column by column; when a tile is cut down the rest of
    that column is spared this tick. Returns the tiles that stopped being
    forest.
    """
    cleared = []
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            tile = world.get(x + dx, y + dy)
            if tile.is_forest and tile.forest_health > 0:
                tile.forest_health -= FOREST_DAMAGE_PER_TICK
                if tile.forest_health <= 0:
                    tile.is_forest = False
                    cleared.append(tile)
                    break
    return cleared


def produce_lumber(economy: "Economy", log: AuditLog) -> float:
    state = economy.game_state
    world = economy.world
    total_wood = 0.0

    for lumber in economy.structures_of_type(StructureType.LUMBER):
        if count_forest(world, lumber.x, lumber.y) == 0:
            continue

        wood = LUMBER_WOOD_PER_LEVEL * lumber.level
        state.wood += wood
        total_wood += wood

        for tile in damage_forest(world, lumber.x, lumber.y):
            logger.info("Forest at (%d, %d) was cut down", tile.x, tile.y)
            log.add_entry(
                "economy.production.forest_cleared",
                state.time,
                coord=tile.coord,
                reason=f"Forest at ({tile.x}, {tile.y}) was cut down.",
            )

    if total_wood:
        log.add_entry(
            "economy.production.lumber",
            state.time,
            delta=total_wood,
            reason=f"Lumber yards produced {total_wood:.2f} wood.",
        )
    return total_wood


def resources_in_range(world: World, x: int, y: int, radius: int = MINE_RADIUS) -> Resources:
    """Sums the deposits around a coordinate. Deposits are read, never depleted."""
    available = Resources()
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            tile = world.get(x + dx, y + dy)
            available.stone += tile.resources.stone
            available.iron += tile.resources.iron
            available.uranium += tile.resources.uranium
    return available


def tick_mine(economy: "Economy", mine: Structure, log: AuditLog) -> float:
    state = economy.game_state
    level = mine.data.resource_level
    tier = MINE_TIERS[level]

    available = getattr(resources_in_range(economy.world, mine.x, mine.y), level.value)
    if available <= 0:
        return 0.0

    mined = min(tier.rate, available)
    wood = mined * tier.wood_factor
    state.wood += wood

    if tier.next_level is not None:
        mine.data.extracted_amount += mined
        if mine.data.extracted_amount >= MINE_UPGRADE_THRESHOLD:
            mine.data.resource_level = tier.next_level
            mine.data.extracted_amount = 0.0
            state.add_message(f"Mine upgraded to {tier.next_level.value} extraction", "success")
            logger.info("Mine at (%d, %d) upgraded to %s", mine.x, mine.y, tier.next_level.value)
            log.add_entry(
                "economy.production.mine_upgrade",
                state.time,
                coord=mine.coord,
                reason=f"Mine at ({mine.x}, {mine.y}) upgraded to {tier.next_level.value} extraction.",
                details={"old_level": level.value, "new_level": tier.next_level.value},
            )
    return wood


def produce_mines(economy: "Economy", log: AuditLog) -> float:
    total_wood = 0.0
    for mine in economy.structures_of_type(StructureType.MINE):
        total_wood += tick_mine(economy, mine, log)

    if total_wood:
        log.add_entry(
            "economy.production.mining",
            economy.game_state.time,
            delta=total_wood,
            reason=f"Mines produced {total_wood:.2f} wood.",
        )
    return total_wood
