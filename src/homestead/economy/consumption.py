from __future__ import annotations
import logging
import math
from typing import TYPE_CHECKING

from ..core.log import AuditLog
from ..core.state import GameState

if TYPE_CHECKING:
    from .engine import Economy

logger = logging.getLogger(__name__)

FOOD_PER_CAPITA = 0.5
FOOD_DEFICIT_PER_LEAVER = 5
MAX_GROWTH_PER_TICK = 2
GROWTH_FOOD_THRESHOLD = 50


def consume_food(state: GameState, log: AuditLog) -> float:
    """Population eats; food may go negative until starvation is resolved."""
    consumption = state.population * FOOD_PER_CAPITA
    state.food -= consumption
    if consumption:
        log.add_entry(
            "economy.consumption.food",
            state.time,
            delta=-consumption,
            reason=f"Population of {state.population} ate {consumption:.2f} food.",
        )
    return consumption


def resolve_starvation(state: GameState, log: AuditLog) -> int:
    """
    Settles a negative food stock: one resident leaves per started block of
    missing food, and the stock is reset to zero.
    """
    if state.food >= 0:
        return 0

    leavers = math.ceil(-state.food / FOOD_DEFICIT_PER_LEAVER)
    state.population -= min(leavers, state.population)
    state.food = 0.0

    if leavers > 0:
        state.add_message(f"{leavers} people left due to hunger", "warning")
        logger.warning("%d people left due to hunger at tick %d", leavers, state.time)
        log.add_entry(
            "economy.consumption.starvation",
            state.time,
            delta=-leavers,
            reason=f"{leavers} people left due to hunger.",
            details={"population": state.population},
        )
    return leavers


def grow_population(economy: "Economy", log: AuditLog) -> int:
    # Growth fills housing only; `employed` is left alone
    state = economy.game_state
    capacity = economy.housing_capacity()

    if state.population < capacity and state.food > GROWTH_FOOD_THRESHOLD:
        newcomers = min(MAX_GROWTH_PER_TICK, capacity - state.population)
        state.population += newcomers
        log.add_entry(
            "economy.consumption.growth",
            state.time,
            delta=newcomers,
            reason=f"{newcomers} people moved in.",
            details={"population": state.population, "capacity": capacity},
        )
        return newcomers
    return 0
