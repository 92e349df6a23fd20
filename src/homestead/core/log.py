from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

Coord = Tuple[int, int]


@dataclass
class AuditEntry:
    """One recorded change during a tick, e.g. ``economy.farm.income``."""

    type: str
    tick: int
    coord: Optional[Coord] = None
    delta: float = 0.0
    reason: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AuditLog:
    entries: List[AuditEntry] = field(default_factory=list)

    def add_entry(self, type: str, tick: int, coord: Optional[Coord] = None,
                  delta: float = 0.0, reason: Optional[str] = None,
                  details: Optional[Dict[str, Any]] = None) -> AuditEntry:
        entry = AuditEntry(type, tick, coord, delta, reason, dict(details or {}))
        self.entries.append(entry)
        return entry

    def of_type(self, type: str) -> List[AuditEntry]:
        return [entry for entry in self.entries if entry.type == type]

    def __iter__(self) -> Iterator[AuditEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
