import importlib

from src.homestead.world.model import Resources, Tile


def _reset_visualizer_state(monkeypatch):
    monkeypatch.setenv("HOMESTEAD_SEED", "42")
    monkeypatch.delenv("HOMESTEAD_SAVE", raising=False)
    vis = importlib.import_module("visualizer.app")
    if vis.sim_controller is not None:
        vis.sim_controller.pause()
        vis.sim_controller.stop()
    vis.sim_controller = None
    return vis


def _flatten(vis, x, y):
    world = vis.sim_controller.get_sim().world
    for dx in range(-1, 2):
        for dy in range(-1, 2):
            world.put(Tile(x=x + dx, y=y + dy, altitude=4, resources=Resources(stone=60)))


def test_sim_state_endpoint(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    resp = client.get("/sim/state")
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["seed"] == 42
    assert payload["money"] == 500
    assert payload["time"] == "0:00:00"
    assert "meta" in payload
    assert payload["meta"]["tick"] == 0


def test_world_region_endpoint(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    resp = client.get("/world/region?cx=3&cy=4&size=3")
    assert resp.status_code == 200
    tiles = resp.get_json()["tiles"]
    assert [(t["x"], t["y"]) for t in tiles][:3] == [(2, 3), (3, 3), (4, 3)]
    assert all(t["structure"] is None for t in tiles)

    assert client.get("/world/region?size=1000").status_code == 400
    assert client.get("/world/region?cx=abc").status_code == 400


def test_heightmap_endpoint(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    resp = client.get("/world/heightmap?cx=0&cy=0&size=5")
    assert resp.status_code == 200
    altitudes = resp.get_json()["altitudes"]
    assert len(altitudes) == 5
    assert all(len(row) == 5 for row in altitudes)
    assert altitudes[2][2] == -10


def test_build_and_destroy_endpoints(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    client.get("/sim/state")
    _flatten(vis, 10, 10)

    resp = client.post("/economy/build", json={"x": 10, "y": 10, "type": "house"})
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True

    again = client.post("/economy/build", json={"x": 10, "y": 10, "type": "farm"})
    assert again.get_json() == {"success": False, "reason": "Tile already occupied"}

    structures = client.get("/economy/structures").get_json()["structures"]
    assert structures == [{"type": "house", "x": 10, "y": 10, "level": 1,
                           "data": {"residents": 0, "capacity": 5}}]

    destroy = client.post("/economy/destroy", json={"x": 10, "y": 10})
    assert destroy.get_json() == {"removed": True}
    assert client.get("/economy/structures").get_json()["structures"] == []

    assert client.post("/economy/build", json={"x": 1}).status_code == 400


def test_non_numeric_coordinates_are_rejected(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    resp = client.post("/economy/build", json={"x": "a", "y": 0, "type": "house"})
    assert resp.status_code == 400
    assert client.post("/economy/build", json={"x": None, "y": 0, "type": "house"}).status_code == 400
    assert client.post("/economy/destroy", json={"x": 0, "y": "b"}).status_code == 400
    assert client.get("/economy/structures").get_json()["structures"] == []


def test_tax_endpoint_clamps(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    resp = client.post("/economy/tax", json={"rate": 1.7})
    assert resp.get_json()["income_tax_rate"] == 1.0
    resp = client.post("/economy/tax", json={"rate": 0.3})
    assert resp.get_json()["income_tax_rate"] == 0.3


def test_sim_step(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    step_resp = client.post("/sim/step", json={"steps": 2})
    assert step_resp.status_code == 200
    step_payload = step_resp.get_json()
    assert step_payload["steps"] == 2
    assert step_payload["tick"] == 2


def test_sim_play_pause(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    play_resp = client.post("/sim/play")
    assert play_resp.status_code == 200
    play_payload = play_resp.get_json()
    assert play_payload["status"] == "playing"

    pause_resp = client.post("/sim/pause")
    assert pause_resp.status_code == 200
    pause_payload = pause_resp.get_json()
    assert pause_payload["status"] == "paused"


def test_save_without_path_is_rejected(monkeypatch):
    vis = _reset_visualizer_state(monkeypatch)
    client = vis.app.test_client()
    assert client.post("/sim/save").status_code == 400


def test_save_and_resume_from_env_path(monkeypatch, tmp_path):
    vis = _reset_visualizer_state(monkeypatch)
    save_path = tmp_path / "game.json"
    monkeypatch.setenv("HOMESTEAD_SAVE", str(save_path))
    client = vis.app.test_client()
    client.post("/sim/step", json={"steps": 3})
    assert client.post("/sim/save").get_json() == {"status": "saved"}

    vis = _reset_visualizer_state(monkeypatch)
    monkeypatch.setenv("HOMESTEAD_SAVE", str(save_path))
    client = vis.app.test_client()
    payload = client.get("/sim/state").get_json()
    assert payload["meta"]["tick"] == 3
    assert payload["messages"][-1]["text"] == "Game loaded"
