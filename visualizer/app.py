import logging
import os
import sys
import threading
import time
from pathlib import Path

# Add the project root to the Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from flask import Flask, jsonify, request

from src.homestead.core.sim import AUTOSAVE_EVERY, Simulation, step
from src.homestead.io.save_load import load_from_json, save_to_json, summarize_structures, tile_to_dict
from src.homestead.reports.ticker import stats_summary
from src.homestead.world.generator import altitude_map

logger = logging.getLogger(__name__)

app = Flask(__name__)

DEFAULT_SEED = 42
MAX_REGION_SIZE = 65

sim_controller = None


class SimulationController:
    def __init__(self, sim: Simulation, tick_interval_s: float = 1.0, save_path: str = None):
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._thread = None
        self._running = False
        self._tick_interval_s = tick_interval_s
        self._save_path = save_path
        self._sim = sim

    def get_sim(self) -> Simulation:
        with self._lock:
            return self._sim

    def lock(self):
        return self._lock

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def tick_count(self) -> int:
        with self._lock:
            return self._sim.game_state.time

    def play(self):
        with self._lock:
            self._running = True
            if self._thread is None or not self._thread.is_alive():
                self._thread = threading.Thread(target=self._run_loop, daemon=True)
                self._thread.start()

    def pause(self):
        with self._lock:
            self._running = False

    def step_once(self):
        with self._lock:
            self._step()

    def save(self) -> bool:
        with self._lock:
            if not self._save_path:
                return False
            save_to_json(self._sim, self._save_path)
            return True

    def stop(self):
        self._stop_event.set()

    def _step(self):
        try:
            step(self._sim)
            if self._save_path and self._sim.game_state.time % AUTOSAVE_EVERY == 0:
                save_to_json(self._sim, self._save_path)
        except Exception:
            self._running = False
            logger.exception("Simulation step failed at tick %d", self._sim.game_state.time)

    def _run_loop(self):
        while not self._stop_event.is_set():
            with self._lock:
                if self._running:
                    self._step()
            time.sleep(self._tick_interval_s)


def _initialize_controller():
    global sim_controller

    save_path = os.environ.get("HOMESTEAD_SAVE")
    if save_path and Path(save_path).exists():
        sim = load_from_json(save_path)
    else:
        sim = Simulation.new(int(os.environ.get("HOMESTEAD_SEED", DEFAULT_SEED)))
    sim_controller = SimulationController(sim, save_path=save_path)


def _int_arg(name: str, default: int) -> int:
    value = request.args.get(name, default)
    return int(value)


@app.before_request
def before_first_request():
    if sim_controller is None:
        _initialize_controller()


@app.route('/sim/state')
def sim_state():
    with sim_controller.lock():
        sim = sim_controller.get_sim()
        payload = stats_summary(sim.game_state, sim.economy)
        payload["seed"] = sim.seed
    payload["meta"] = {
        "running": sim_controller.is_running(),
        "tick": sim_controller.tick_count(),
    }
    return jsonify(payload)


@app.route('/world/region')
def world_region():
    try:
        cx = _int_arg("cx", 0)
        cy = _int_arg("cy", 0)
        size = _int_arg("size", 9)
    except ValueError:
        return jsonify({"error": "cx, cy and size must be integers"}), 400
    if not 1 <= size <= MAX_REGION_SIZE:
        return jsonify({"error": f"size must be between 1 and {MAX_REGION_SIZE}"}), 400

    with sim_controller.lock():
        tiles = sim_controller.get_sim().world.get_region(cx, cy, size)
        payload = []
        for tile in tiles:
            tile_data = tile_to_dict(tile)
            tile_data["structure"] = tile.structure.type.value if tile.structure else None
            payload.append(tile_data)
    return jsonify({"cx": cx, "cy": cy, "size": size, "tiles": payload})


@app.route('/world/heightmap')
def world_heightmap():
    try:
        cx = _int_arg("cx", 0)
        cy = _int_arg("cy", 0)
        size = _int_arg("size", 33)
    except ValueError:
        return jsonify({"error": "cx, cy and size must be integers"}), 400
    if not 1 <= size <= MAX_REGION_SIZE:
        return jsonify({"error": f"size must be between 1 and {MAX_REGION_SIZE}"}), 400

    noise = sim_controller.get_sim().world.noise
    return jsonify({"cx": cx, "cy": cy, "size": size, "altitudes": altitude_map(noise, cx, cy, size).tolist()})


@app.route('/economy/structures')
def economy_structures():
    with sim_controller.lock():
        structures = summarize_structures(sim_controller.get_sim())
    return jsonify({"structures": structures})


@app.route('/economy/build', methods=['POST'])
def economy_build():
    data = request.get_json(silent=True) or {}
    if "x" not in data or "y" not in data or "type" not in data:
        return jsonify({"error": "Missing x, y or type"}), 400
    try:
        x, y = int(data["x"]), int(data["y"])
    except (TypeError, ValueError):
        return jsonify({"error": "x and y must be integers"}), 400

    with sim_controller.lock():
        sim = sim_controller.get_sim()
        tile = sim.world.get(x, y)
        result = sim.economy.build(tile, data["type"])
        if not result.success:
            sim.game_state.add_message(result.reason, "error")
            return jsonify({"success": False, "reason": result.reason}), 200
        structure = result.structure
    return jsonify({
        "success": True,
        "structure": {"type": structure.type.value, "x": structure.x, "y": structure.y, "level": structure.level},
    })


@app.route('/economy/destroy', methods=['POST'])
def economy_destroy():
    data = request.get_json(silent=True) or {}
    if "x" not in data or "y" not in data:
        return jsonify({"error": "Missing x or y"}), 400
    try:
        x, y = int(data["x"]), int(data["y"])
    except (TypeError, ValueError):
        return jsonify({"error": "x and y must be integers"}), 400

    with sim_controller.lock():
        removed = sim_controller.get_sim().economy.destroy(x, y)
    return jsonify({"removed": removed})


@app.route('/economy/tax', methods=['POST'])
def economy_tax():
    data = request.get_json(silent=True) or {}
    if "rate" not in data:
        return jsonify({"error": "Missing rate"}), 400

    with sim_controller.lock():
        state = sim_controller.get_sim().game_state
        state.set_income_tax_rate(float(data["rate"]))
        rate = state.income_tax_rate
    return jsonify({"income_tax_rate": rate})


@app.route('/sim/play', methods=['POST'])
def sim_play():
    sim_controller.play()
    return jsonify({"status": "playing"})


@app.route('/sim/pause', methods=['POST'])
def sim_pause():
    sim_controller.pause()
    return jsonify({"status": "paused"})


@app.route('/sim/step', methods=['POST'])
def sim_step():
    data = request.get_json(silent=True) or {}
    steps = int(data.get("steps", 1))
    steps = max(1, steps)
    for _ in range(steps):
        sim_controller.step_once()
    return jsonify({"status": "stepped", "steps": steps, "tick": sim_controller.tick_count()})


@app.route('/sim/save', methods=['POST'])
def sim_save():
    if not sim_controller.save():
        return jsonify({"error": "No save path configured"}), 400
    return jsonify({"status": "saved"})


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
