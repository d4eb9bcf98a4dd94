from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from scoreboard.models.person import Person
from scoreboard.models.record import DailyRecord


@dataclass(frozen=True)
class ScoreTable:
    """One person's block of the monthly sheet, rows in sheet order."""

    person: Person
    records: tuple[DailyRecord, ...] = ()

    @classmethod
    def build(cls, person: Person, records: Iterable[DailyRecord]) -> "ScoreTable":
        return cls(person=person, records=tuple(records))

    def __len__(self) -> int:
        return len(self.records)

    def last_record(self) -> Optional[DailyRecord]:
        return self.records[-1] if self.records else None

    def last_filled_record(self) -> Optional[DailyRecord]:
        for record in reversed(self.records):
            if record.has_total:
                return record
        return None

    def by_date(self, day: date) -> Optional[DailyRecord]:
        for record in reversed(self.records):
            if record.date == day:
                return record
        return None

    def filled_by_date(self, day: date) -> Optional[DailyRecord]:
        record = self.by_date(day)
        if record is not None and record.has_total:
            return record
        return None
