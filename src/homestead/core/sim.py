from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import List, Optional

from .log import AuditLog
from .state import GameState
from ..economy.engine import Economy
from ..world.store import World

logger = logging.getLogger(__name__)

AUTOSAVE_EVERY = 30


@dataclass
class TickReport:
    tick: int
    log: AuditLog


@dataclass
class Simulation:
    """Everything one running game owns; passed explicitly to every operation."""
    world: World
    game_state: GameState
    economy: Economy

    @classmethod
    def new(cls, seed: int, game_state: Optional[GameState] = None) -> "Simulation":
        world = World(seed)
        game_state = game_state or GameState()
        return cls(world=world, game_state=game_state, economy=Economy(game_state, world))

    @property
    def seed(self) -> int:
        return self.world.seed


def step(sim: Simulation) -> TickReport:
    """
    Advances the simulation by one tick.

    The clock moves first so that messages raised during the tick carry the
    new time.
    """
    log = AuditLog()
    state = sim.game_state

    state.time += 1
    sim.economy.tick(log)
    log.add_entry(
        "sim.tick",
        state.time,
        reason=f"money={state.money:.2f} food={state.food:.2f} wood={state.wood:.2f} population={state.population}",
    )

    return TickReport(tick=state.time, log=log)


def run(sim: Simulation, ticks: int, autosave_path: Optional[str] = None, autosave_every: int = AUTOSAVE_EVERY) -> List[TickReport]:
    """Steps `ticks` times, writing a save every `autosave_every` ticks of game time when a path is given."""
    reports = []
    for _ in range(ticks):
        report = step(sim)
        reports.append(report)
        if autosave_path and autosave_every > 0 and sim.game_state.time % autosave_every == 0:
            from ..io.save_load import save_to_json
            save_to_json(sim, autosave_path)
            logger.info("Autosaved at tick %d to %s", sim.game_state.time, autosave_path)
    return reports
