from dataclasses import dataclass, field
from enum import Enum
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import yaml

logger = logging.getLogger(__name__)

DEFAULT_STRUCTURES_PATH = Path(__file__).parent.parent / "data" / "structures.yaml"
DEFAULT_MAX_ALTITUDE_DIFF = 1


class StructureConfigError(ValueError):
    """Raised when the structure catalogue is malformed or a type is unknown."""
    pass


class StructureType(str, Enum):
    HOUSE = "house"
    FARM = "farm"
    MINE = "mine"
    LUMBER = "lumber"


class ResourceLevel(str, Enum):
    STONE = "stone"
    IRON = "iron"
    URANIUM = "uranium"


@dataclass
class HouseData:
    residents: int = 0
    capacity: int = 5


@dataclass
class FarmData:
    food_per_tick: float = 0.5 # computed every tick, not yet added to the food stock


@dataclass
class MineData:
    resource_level: ResourceLevel = ResourceLevel.STONE
    extracted_amount: float = 0.0

    def __post_init__(self):
        self.resource_level = ResourceLevel(self.resource_level)


@dataclass
class LumberData:
    wood_per_tick: float = 0.5


StructureData = Union[HouseData, FarmData, MineData, LumberData]

PAYLOAD_TYPES = {
    StructureType.HOUSE: HouseData,
    StructureType.FARM: FarmData,
    StructureType.MINE: MineData,
    StructureType.LUMBER: LumberData,
}


@dataclass
class Structure:
    type: StructureType
    x: int
    y: int
    level: int = 1
    data: StructureData = None

    def __post_init__(self):
        if self.data is None:
            self.data = PAYLOAD_TYPES[self.type]()

    @property
    def coord(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass
class Cost:
    money: float = 0.0
    wood: float = 0.0
    food: float = 0.0


@dataclass
class StructureDef:
    id: StructureType
    name: str
    cost: Cost = field(default_factory=Cost)
    max_altitude_diff: int = DEFAULT_MAX_ALTITUDE_DIFF
    defaults: Dict[str, Any] = field(default_factory=dict)

    def new_data(self) -> StructureData:
        return PAYLOAD_TYPES[self.id](**self.defaults)


def parse_structure_type(value) -> Optional[StructureType]:
    """Returns the StructureType for a name or enum member, or None if unknown."""
    try:
        return StructureType(value)
    except ValueError:
        return None


def type_name(value) -> str:
    return value.value if isinstance(value, Enum) else str(value)


class StructureRegistry:
    def __init__(self):
        self._structures: Dict[StructureType, StructureDef] = {}

    def load_from_yaml(self, path: Path):
        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        if data is None:
            raise StructureConfigError(f"YAML file '{path}' is empty or malformed.")

        for s_data in data:
            structure_type = parse_structure_type(s_data.get('id'))
            if structure_type is None:
                raise StructureConfigError(f"Unknown structure type '{s_data.get('id')}' in '{path}'.")
            cost_data = s_data.get('cost', {})
            structure_def = StructureDef(
                id=structure_type,
                name=s_data.get('name', structure_type.value.capitalize()),
                cost=Cost(
                    money=cost_data.get('money', 0.0),
                    wood=cost_data.get('wood', 0.0),
                    food=cost_data.get('food', 0.0),
                ),
                max_altitude_diff=s_data.get('max_altitude_diff', DEFAULT_MAX_ALTITUDE_DIFF),
                defaults=dict(s_data.get('defaults', {})),
            )
            try:
                structure_def.new_data()
            except (TypeError, ValueError) as e:
                raise StructureConfigError(f"Invalid defaults for '{structure_type.value}': {e}") from e
            self._structures[structure_type] = structure_def
        logger.debug("Loaded %d structure definitions from %s", len(data), path)

    def load_default(self):
        self.load_from_yaml(DEFAULT_STRUCTURES_PATH)

    def _ensure_loaded(self):
        if not self._structures:
            self.load_default()

    def get(self, structure_type) -> StructureDef:
        self._ensure_loaded()
        parsed = parse_structure_type(structure_type)
        if parsed is None or parsed not in self._structures:
            raise StructureConfigError(f"Structure type '{type_name(structure_type)}' not found.")
        return self._structures[parsed]

    def find(self, structure_type) -> Optional[StructureDef]:
        self._ensure_loaded()
        parsed = parse_structure_type(structure_type)
        return self._structures.get(parsed) if parsed is not None else None

    def max_altitude_diff(self, structure_type) -> int:
        structure_def = self.find(structure_type)
        return structure_def.max_altitude_diff if structure_def else DEFAULT_MAX_ALTITUDE_DIFF

    def all_structures(self) -> List[StructureDef]:
        self._ensure_loaded()
        return list(self._structures.values())

# Global registry instance
structure_registry = StructureRegistry()
