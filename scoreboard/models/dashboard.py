"""
Dashboard — the Snapshot published by the shared cache.

`tables is None` means no ingestion has succeeded yet. Once populated the
value is never mutated; a refresh builds a new Dashboard and the cache swaps
the reference.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from scoreboard.models.person import Person
from scoreboard.models.record import DailyRecord
from scoreboard.models.score_table import ScoreTable


@dataclass(frozen=True)
class Dashboard:
    tables: Optional[tuple[ScoreTable, ...]] = None

    @classmethod
    def from_tables(cls, tables: Iterable[ScoreTable]) -> "Dashboard":
        return cls(tables=tuple(tables))

    @property
    def is_initialized(self) -> bool:
        return self.tables is not None

    def participants(self) -> Optional[tuple[Person, ...]]:
        if self.tables is None:
            return None
        return tuple(t.person for t in self.tables)

    def find_table(self, person: Person) -> Optional[ScoreTable]:
        for table in self.tables or ():
            if table.person == person:
                return table
        return None

    def person_by_name(self, name: str) -> Optional[Person]:
        for table in self.tables or ():
            if table.person.name == name:
                return table.person
        return None

    def last_filled_record(self, person: Person) -> Optional[DailyRecord]:
        table = self.find_table(person)
        return table.last_filled_record() if table else None

    def record_on_date(self, person: Person, day: date) -> Optional[DailyRecord]:
        table = self.find_table(person)
        return table.filled_by_date(day) if table else None
