import json
import logging
from typing import Dict, Any, List

from ..core.sim import Simulation
from ..core.state import GameState
from ..economy.engine import Economy
from ..economy.structures import (
    FarmData,
    HouseData,
    LumberData,
    MineData,
    ResourceLevel,
    Structure,
    StructureType,
    parse_structure_type,
)
from ..world.model import Resources, Tile
from ..world.store import World

logger = logging.getLogger(__name__)


class SaveSchemaError(ValueError):
    """Raised when persisted state is missing fields or holds impossible values."""
    pass


# --- World ---

def tile_to_dict(tile: Tile) -> Dict[str, Any]:
    return {
        "x": tile.x,
        "y": tile.y,
        "altitude": tile.altitude,
        "resources": tile.resources.as_dict(),
        "isForest": tile.is_forest,
        "forestHealth": tile.forest_health,
    }


def tile_from_dict(data: Dict[str, Any]) -> Tile:
    try:
        res_data = data.get("resources", {})
        tile = Tile(
            x=int(data["x"]),
            y=int(data["y"]),
            altitude=int(data["altitude"]),
            resources=Resources(
                stone=float(res_data.get("stone", 0)),
                iron=float(res_data.get("iron", 0)),
                uranium=float(res_data.get("uranium", 0)),
            ),
            is_forest=bool(data.get("isForest", False)),
            forest_health=float(data.get("forestHealth", 0)),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise SaveSchemaError(f"Malformed tile entry {data!r}: {e}") from e

    for name, amount in tile.resources.as_dict().items():
        if amount < 0:
            raise SaveSchemaError(f"Tile ({tile.x}, {tile.y}) has negative {name}.")
    if tile.is_forest and not 0 < tile.forest_health <= 100:
        raise SaveSchemaError(f"Forest tile ({tile.x}, {tile.y}) has health {tile.forest_health} outside (0, 100].")
    return tile


def world_to_dict(world: World) -> Dict[str, Any]:
    return {
        "seed": world.seed,
        "tiles": [tile_to_dict(tile) for tile in world.generated_tiles()],
    }


def world_from_dict(data: Dict[str, Any]) -> World:
    """Rebuilds a world; persisted tiles are stored as-is, never regenerated."""
    if data.get("seed") is None:
        raise SaveSchemaError("Missing 'seed' in world data.")
    world = World(int(data["seed"]))
    for t_data in data.get("tiles", []):
        tile = tile_from_dict(t_data)
        if tile.coord in world:
            raise SaveSchemaError(f"Duplicate tile ({tile.x}, {tile.y}) in world data.")
        world.put(tile)
    return world


# --- Game state ---

def game_state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "money": state.money,
        "food": state.food,
        "wood": state.wood,
        "population": state.population,
        "employed": state.employed,
        "incomeTaxRate": state.income_tax_rate,
        "time": state.time,
    }


def game_state_from_dict(data: Dict[str, Any]) -> GameState:
    defaults = GameState()
    try:
        state = GameState(
            money=float(data.get("money", defaults.money)),
            food=float(data.get("food", defaults.food)),
            wood=float(data.get("wood", defaults.wood)),
            population=int(data.get("population", defaults.population)),
            employed=int(data.get("employed", defaults.employed)),
            income_tax_rate=float(data.get("incomeTaxRate", defaults.income_tax_rate)),
            time=int(data.get("time", defaults.time)),
        )
    except (TypeError, ValueError) as e:
        raise SaveSchemaError(f"Malformed game state {data!r}: {e}") from e

    for name in ("population", "employed", "time"):
        if getattr(state, name) < 0:
            raise SaveSchemaError(f"Game state '{name}' cannot be negative.")
    if not 0.0 <= state.income_tax_rate <= 1.0:
        raise SaveSchemaError(f"Income tax rate {state.income_tax_rate} is outside [0, 1].")
    return state


# --- Economy ---

def structure_data_to_dict(structure: Structure) -> Dict[str, Any]:
    data = structure.data
    if structure.type == StructureType.HOUSE:
        return {"residents": data.residents, "capacity": data.capacity}
    if structure.type == StructureType.FARM:
        return {"foodPerTick": data.food_per_tick}
    if structure.type == StructureType.MINE:
        return {"resourceLevel": data.resource_level.value, "extractedAmount": data.extracted_amount}
    return {"woodPerTick": data.wood_per_tick}


def structure_data_from_dict(structure_type: StructureType, data: Dict[str, Any]):
    if structure_type == StructureType.MINE:
        level = data.get("resourceLevel", ResourceLevel.STONE.value)
        try:
            resource_level = ResourceLevel(level)
        except ValueError as e:
            raise SaveSchemaError(f"Unknown mine resource level '{level}'.") from e

    try:
        if structure_type == StructureType.HOUSE:
            defaults = HouseData()
            return HouseData(
                residents=int(data.get("residents", defaults.residents)),
                capacity=int(data.get("capacity", defaults.capacity)),
            )
        if structure_type == StructureType.FARM:
            return FarmData(food_per_tick=float(data.get("foodPerTick", FarmData().food_per_tick)))
        if structure_type == StructureType.MINE:
            # Older saves named the counter after the first tier
            extracted = data.get("extractedAmount", data.get("extractedStone", 0.0))
            return MineData(resource_level=resource_level, extracted_amount=float(extracted))
        return LumberData(wood_per_tick=float(data.get("woodPerTick", LumberData().wood_per_tick)))
    except (TypeError, ValueError) as e:
        raise SaveSchemaError(f"Malformed {structure_type.value} data {data!r}: {e}") from e


def economy_to_dict(economy: Economy) -> Dict[str, Any]:
    return {
        "structures": [
            {
                "type": structure.type.value,
                "x": structure.x,
                "y": structure.y,
                "level": structure.level,
                "data": structure_data_to_dict(structure),
            }
            for structure in economy.list_structures()
        ]
    }


def economy_from_dict(data: Dict[str, Any], game_state: GameState, world: World) -> Economy:
    """Rebuilds the economy around an existing state and world, relinking tile back-references."""
    economy = Economy(game_state, world)
    for s_data in data.get("structures", []):
        structure_type = parse_structure_type(s_data.get("type"))
        if structure_type is None:
            raise SaveSchemaError(f"Unknown structure type '{s_data.get('type')}'.")
        level = s_data.get("level", 1)
        if not isinstance(level, int) or level < 1:
            raise SaveSchemaError(f"Structure level must be a positive integer, got {level!r}.")
        try:
            x, y = int(s_data["x"]), int(s_data["y"])
        except (KeyError, TypeError, ValueError) as e:
            raise SaveSchemaError(f"Structure entry {s_data!r} has no valid coordinates.") from e
        if (x, y) in economy.structures:
            raise SaveSchemaError(f"Two structures share tile ({x}, {y}).")

        structure = Structure(
            type=structure_type,
            x=x,
            y=y,
            level=level,
            data=structure_data_from_dict(structure_type, s_data.get("data", {})),
        )
        economy.place(structure)
    return economy


# --- Whole simulation ---

def to_dict(sim: Simulation) -> Dict[str, Any]:
    """Converts a Simulation to a dictionary for serialization."""
    return {
        "seed": sim.seed,
        "time": sim.game_state.time,
        "gameState": game_state_to_dict(sim.game_state),
        "world": world_to_dict(sim.world),
        "economy": economy_to_dict(sim.economy),
    }


def from_dict(data: Dict[str, Any]) -> Simulation:
    """Creates a Simulation from a dictionary."""
    world_data = data.get("world")
    if world_data is None:
        if data.get("seed") is None:
            raise SaveSchemaError("Missing 'seed' in save data.")
        world_data = {"seed": data["seed"], "tiles": []}

    world = world_from_dict(world_data)
    game_state = game_state_from_dict(data.get("gameState", {}))
    economy = economy_from_dict(data.get("economy", {}), game_state, world)
    return Simulation(world=world, game_state=game_state, economy=economy)


def save_to_json(sim: Simulation, path: str):
    """Saves the simulation to a JSON file."""
    with open(path, 'w') as f:
        json.dump(to_dict(sim), f, indent=2)


def load_from_json(path: str) -> Simulation:
    """Loads a simulation from a JSON file."""
    with open(path, 'r') as f:
        data = json.load(f)
    sim = from_dict(data)
    sim.game_state.add_message("Game loaded", "success")
    logger.info("Loaded save from %s (seed %d, tick %d)", path, sim.seed, sim.game_state.time)
    return sim


def summarize_structures(sim: Simulation) -> List[Dict[str, Any]]:
    return economy_to_dict(sim.economy)["structures"]
