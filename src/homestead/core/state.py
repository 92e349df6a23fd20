from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List

MAX_MESSAGES = 10


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Message:
    text: str
    severity: Severity
    time: int


@dataclass
class GameState:
    money: float = 500.0
    food: float = 50.0
    wood: float = 100.0
    population: int = 0
    employed: int = 0
    income_tax_rate: float = 0.1
    time: int = 0 # elapsed ticks

    # UI-facing log, the most recent MAX_MESSAGES entries
    messages: Deque[Message] = field(default_factory=lambda: deque(maxlen=MAX_MESSAGES), repr=False, compare=False)

    def add_message(self, text: str, severity="info"):
        self.messages.append(Message(text=text, severity=Severity(severity), time=self.time))

    def recent_messages(self) -> List[Message]:
        return list(self.messages)

    def set_income_tax_rate(self, rate: float):
        """Sets the income tax rate, clamped to [0, 1]."""
        self.income_tax_rate = min(1.0, max(0.0, float(rate)))

    @property
    def unemployed(self) -> int:
        return self.population - self.employed
