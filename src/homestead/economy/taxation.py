from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..core.log import AuditLog
from .structures import StructureType

if TYPE_CHECKING:
    from .engine import Economy

logger = logging.getLogger(__name__)

FARM_GROSS_INCOME = 10.0
FARM_BASE_FOOD_PER_TICK = 1.0
FARM_FOOD_PER_LEVEL = 0.5


def farm_net_income(income_tax_rate: float) -> float:
    tax = FARM_GROSS_INCOME * income_tax_rate
    return FARM_GROSS_INCOME - tax


def collect_farm_income(economy: "Economy", log: AuditLog) -> float:
    """
    Farms pay their after-tax income into the treasury.

    A farm whose net income is not positive goes bankrupt and is demolished
    before it earns anything this tick.
    """
    state = economy.game_state
    farm_income = 0.0

    for farm in economy.structures_of_type(StructureType.FARM):
        net_income = farm_net_income(state.income_tax_rate)

        if net_income <= 0:
            economy.destroy(farm.x, farm.y)
            state.add_message("Farm went bankrupt due to high taxes", "warning")
            logger.warning("Farm at (%d, %d) went bankrupt (tax rate %.2f)", farm.x, farm.y, state.income_tax_rate)
            log.add_entry(
                "economy.farm.bankrupt",
                state.time,
                coord=farm.coord,
                reason=f"Farm at ({farm.x}, {farm.y}) went bankrupt due to high taxes.",
                details={"income_tax_rate": state.income_tax_rate},
            )
            continue

        farm_income += net_income
        # Stored for display; the food stock does not receive it yet
        farm.data.food_per_tick = FARM_BASE_FOOD_PER_TICK + FARM_FOOD_PER_LEVEL * (farm.level - 1)

    state.money += farm_income
    if farm_income:
        log.add_entry(
            "economy.farm.income",
            state.time,
            delta=farm_income,
            reason=f"Farms paid {farm_income:.2f} after tax.",
        )
    return farm_income
