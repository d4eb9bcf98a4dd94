"""
DailyRecord — one calendar day of one person's score table.

A record "has a total" iff its total score differs from
UNINITIALIZED_SCORE. That is the only signal that the person actually
filled the day in; placeholder rows for future days carry a date but no
total.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from functools import total_ordering

UNINITIALIZED_SCORE: float = 0.0

SCORE_CATEGORIES = (
    "sport",
    "professional_growth",
    "health",
    "spiritual_growth",
    "foreign_language",
    "personal_dev",
)


@total_ordering
@dataclass(frozen=True)
class Percentage:
    value: int = 0

    def __lt__(self, other: "Percentage") -> bool:
        if not isinstance(other, Percentage):
            return NotImplemented
        return self.value < other.value

    def __str__(self) -> str:
        return f"{self.value}%"


@dataclass(frozen=True)
class Scores:
    sport: float = UNINITIALIZED_SCORE
    professional_growth: float = UNINITIALIZED_SCORE
    health: float = UNINITIALIZED_SCORE
    spiritual_growth: float = UNINITIALIZED_SCORE
    foreign_language: float = UNINITIALIZED_SCORE
    personal_dev: float = UNINITIALIZED_SCORE

    @classmethod
    def from_sequence(cls, values) -> "Scores":
        return cls(*values)

    def as_tuple(self) -> tuple[float, ...]:
        return tuple(getattr(self, name) for name in SCORE_CATEGORIES)

    def sum(self) -> float:
        # Informational only: the sheet's own total column is authoritative.
        return sum(self.as_tuple())


@dataclass(frozen=True)
class DailyRecord:
    date: date = date.min
    scores: Scores = field(default_factory=Scores)
    total_score: float = UNINITIALIZED_SCORE
    percent: Percentage = field(default_factory=Percentage)

    @property
    def has_total(self) -> bool:
        return self.total_score != UNINITIALIZED_SCORE
