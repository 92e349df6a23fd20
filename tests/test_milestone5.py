import json

import pytest

from src.homestead.core.sim import Simulation, run
from src.homestead.economy.structures import ResourceLevel
from src.homestead.io.save_load import (
    SaveSchemaError,
    economy_from_dict,
    from_dict,
    game_state_from_dict,
    load_from_json,
    save_to_json,
    to_dict,
    world_from_dict,
)


def _populated_sim(paint) -> Simulation:
    sim = Simulation.new(seed=7)
    paint(sim.world, 0, 0, 9)
    paint(sim.world, 4, 4, 0, is_forest=True, forest_health=60)
    state = sim.game_state
    state.money, state.wood, state.food = 5_000, 5_000, 300
    assert sim.economy.build(sim.world.get(0, 0), "house").success
    assert sim.economy.build(sim.world.get(2, 0), "lumber").success
    assert sim.economy.build(sim.world.get(-2, 0), "mine").success
    assert sim.economy.build(sim.world.get(0, 2), "farm").success
    run(sim, 12)
    return sim


def test_round_trip_preserves_every_field(paint):
    sim = _populated_sim(paint)
    data = to_dict(sim)

    restored = from_dict(json.loads(json.dumps(data)))

    assert to_dict(restored) == data
    assert restored.seed == sim.seed
    assert restored.game_state == sim.game_state
    assert restored.world.generated_tiles() == sim.world.generated_tiles()
    assert [s.coord for s in restored.economy.list_structures()] == [s.coord for s in sim.economy.list_structures()]


def test_round_trip_relinks_tile_back_references(paint):
    restored = from_dict(to_dict(_populated_sim(paint)))
    for structure in restored.economy.list_structures():
        assert restored.world.get(structure.x, structure.y).structure is structure


def test_round_trip_continues_identically(paint):
    sim = _populated_sim(paint)
    restored = from_dict(to_dict(sim))

    run(sim, 40)
    run(restored, 40)

    assert to_dict(restored) == to_dict(sim)


def test_persisted_tiles_are_not_regenerated(paint):
    sim = _populated_sim(paint)
    forest = sim.world.get(4, 4)
    assert forest.forest_health < 60

    restored = from_dict(to_dict(sim))
    assert restored.world.get(4, 4).forest_health == forest.forest_health
    assert restored.world.get(9, 9).altitude == 5 # painted, not the generated value


def test_save_and_load_json_file(paint, tmp_path):
    sim = _populated_sim(paint)
    path = tmp_path / "save.json"
    save_to_json(sim, str(path))

    loaded = load_from_json(str(path))

    assert to_dict(loaded) == to_dict(sim)
    assert loaded.game_state.recent_messages()[-1].text == "Game loaded"


def test_save_uses_documented_keys(paint):
    data = to_dict(_populated_sim(paint))
    assert set(data) == {"seed", "time", "gameState", "world", "economy"}
    assert set(data["gameState"]) == {"money", "food", "wood", "population", "employed", "incomeTaxRate", "time"}
    tile = data["world"]["tiles"][0]
    assert set(tile) == {"x", "y", "altitude", "resources", "isForest", "forestHealth"}
    mine = [s for s in data["economy"]["structures"] if s["type"] == "mine"][0]
    assert set(mine["data"]) == {"resourceLevel", "extractedAmount"}


def test_legacy_mine_counter_key_is_accepted():
    world = world_from_dict({"seed": 1, "tiles": []})
    state = game_state_from_dict({})
    economy = economy_from_dict(
        {"structures": [{"type": "mine", "x": 0, "y": 0, "level": 1,
                         "data": {"resourceLevel": "iron", "extractedStone": 42}}]},
        state,
        world,
    )
    mine = economy.structure_at(0, 0)
    assert mine.data.resource_level == ResourceLevel.IRON
    assert mine.data.extracted_amount == 42


def test_game_state_defaults_fill_missing_fields():
    state = game_state_from_dict({"money": 12})
    assert state.money == 12
    assert state.food == 50
    assert state.income_tax_rate == 0.1


def test_numeric_strings_are_coerced():
    state = game_state_from_dict({"population": "12", "money": "40.5"})
    assert state.population == 12
    assert state.money == 40.5

    economy = economy_from_dict(
        {"structures": [{"type": "house", "x": 0, "y": 0, "data": {"capacity": "7"}}]},
        state,
        world_from_dict({"seed": 1, "tiles": []}),
    )
    assert economy.housing_capacity() == 7


@pytest.mark.parametrize("structures", [
    [{"type": "castle", "x": 0, "y": 0, "level": 1, "data": {}}],
    [{"type": "house", "x": 0, "y": 0, "level": 0, "data": {}}],
    [{"type": "mine", "x": 0, "y": 0, "level": 1, "data": {"resourceLevel": "gold"}}],
    [{"type": "house", "x": 0, "y": 0}, {"type": "farm", "x": 0, "y": 0}],
    [{"type": "house", "y": 0}],
    [{"type": "house", "x": 0, "y": 0, "level": 1, "data": {"capacity": "many"}}],
    [{"type": "farm", "x": 0, "y": 0, "level": 1, "data": {"foodPerTick": "x"}}],
    [{"type": "mine", "x": 0, "y": 0, "level": 1, "data": {"extractedAmount": None}}],
])
def test_invalid_structures_are_rejected(structures):
    with pytest.raises(SaveSchemaError):
        from_dict({"seed": 1, "economy": {"structures": structures}})


@pytest.mark.parametrize("game_state", [
    {"population": -1},
    {"employed": -3},
    {"incomeTaxRate": 1.5},
    {"time": -1},
    {"population": None},
    {"incomeTaxRate": None},
    {"money": "plenty"},
])
def test_invalid_game_state_is_rejected(game_state):
    with pytest.raises(SaveSchemaError):
        from_dict({"seed": 1, "gameState": game_state})


@pytest.mark.parametrize("tile", [
    {"x": 0, "y": 0, "altitude": 3, "resources": {"stone": -1}},
    {"x": 0, "y": 0, "altitude": 3, "isForest": True, "forestHealth": 0},
    {"x": 0, "y": 0, "altitude": 3, "isForest": True, "forestHealth": 120},
    {"x": 0, "altitude": 3},
    {"x": 0, "y": 0, "altitude": 3, "resources": {"stone": "lots"}},
    {"x": 0, "y": 0, "altitude": 3, "isForest": True, "forestHealth": None},
])
def test_invalid_tiles_are_rejected(tile):
    with pytest.raises(SaveSchemaError):
        world_from_dict({"seed": 1, "tiles": [tile]})


def test_duplicate_tiles_are_rejected():
    tile = {"x": 0, "y": 0, "altitude": 3}
    with pytest.raises(SaveSchemaError):
        world_from_dict({"seed": 1, "tiles": [tile, dict(tile)]})


def test_missing_seed_is_rejected():
    with pytest.raises(SaveSchemaError):
        from_dict({"gameState": {}})
