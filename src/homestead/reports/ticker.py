from collections import Counter
from typing import Any, Dict

from ..core.log import AuditLog
from ..core.state import GameState
from ..economy.engine import Economy

LOW_FOOD_THRESHOLD = 20
LOW_MONEY_THRESHOLD = 50
HIGH_UNEMPLOYMENT_THRESHOLD = 10


def format_time(seconds: int) -> str:
    """Formats elapsed ticks as H:MM:SS."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours}:{minutes:02d}:{secs:02d}"


def generate_tick_report(log: AuditLog, tick: int) -> str:
    """
    Generates a concise report from an AuditLog.
    """
    lines = [f"== Tick {tick} ({format_time(tick)}) =="]
    for entry in log.entries:
        reason = entry.reason or ""
        if reason:
            lines.append(f"[{entry.type}] {reason}")
        else:
            lines.append(f"[{entry.type}]")
    return "\n".join(lines) + "\n"


def stats_summary(state: GameState, economy: Economy) -> Dict[str, Any]:
    """Figures shown on the stats panel."""
    counts = Counter(structure.type.value for structure in economy.list_structures())
    warnings = []
    if state.food < LOW_FOOD_THRESHOLD:
        warnings.append("Food running low!")
    if state.money < LOW_MONEY_THRESHOLD:
        warnings.append("Money running low!")
    if state.unemployed > HIGH_UNEMPLOYMENT_THRESHOLD:
        warnings.append("High unemployment!")

    return {
        "time": format_time(state.time),
        "money": state.money,
        "food": state.food,
        "wood": state.wood,
        "population": state.population,
        "employed": state.employed,
        "unemployed": state.unemployed,
        "income_tax_rate": state.income_tax_rate,
        "housing_capacity": economy.housing_capacity(),
        "structures": dict(counts),
        "warnings": warnings,
        "messages": [
            {"text": m.text, "severity": m.severity.value, "time": m.time}
            for m in state.recent_messages()
        ],
    }
