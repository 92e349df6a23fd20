import pytest

from src.homestead.core.sim import Simulation
from src.homestead.economy.structures import structure_registry
from src.homestead.world.model import Resources, Tile


@pytest.fixture(autouse=True)
def setup_registries():
    # Ensure the structure catalogue is loaded before tests
    if not structure_registry._structures:
        structure_registry.load_default()


@pytest.fixture
def sim() -> Simulation:
    return Simulation.new(seed=42)


@pytest.fixture
def paint():
    """
    Overwrites a square of tiles with fixed terrain so tests do not depend on
    what the generator happens to put there.
    """
    def _paint(world, center_x, center_y, radius, altitude=5, is_forest=False, forest_health=0.0,
               stone=100, iron=0, uranium=0):
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                world.put(Tile(
                    x=center_x + dx,
                    y=center_y + dy,
                    altitude=altitude,
                    resources=Resources(stone=stone, iron=iron, uranium=uranium),
                    is_forest=is_forest,
                    forest_health=forest_health,
                ))
    return _paint
