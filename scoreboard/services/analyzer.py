"""
Read-only queries over one Dashboard snapshot.

Public API
----------
DashboardAnalyzer(dashboard).participants()              → tuple[Person, ...]
DashboardAnalyzer(dashboard).require_person(name)        → Person
DashboardAnalyzer(dashboard).last_filled_record(person)  → DailyRecord | None
DashboardAnalyzer(dashboard).record_on_date(person, day) → DailyRecord | None
DashboardAnalyzer(dashboard).summary(day)                → list[(Person, DailyRecord)]
DashboardAnalyzer(dashboard).digest(day)                 → list[(Person, DailyRecord | None)]
current_snapshot(cache)                                  → Dashboard
format_digest(digest, day)                               → str
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from scoreboard.core.errors import EmptyParticipantsError, PersonNotFoundError
from scoreboard.models import DailyRecord, Dashboard, Person, ScoreTable
from scoreboard.services.cache import SnapshotCache

SummaryEntry = tuple[Person, DailyRecord]
DigestEntry = tuple[Person, Optional[DailyRecord]]


class DashboardAnalyzer:
    def __init__(self, dashboard: Dashboard):
        self.dashboard = dashboard

    def participants(self) -> tuple[Person, ...]:
        return self.dashboard.participants() or ()

    def participants_names(self) -> list[str]:
        return [p.name for p in self.participants()]

    def person_by_name(self, name: str) -> Optional[Person]:
        return self.dashboard.person_by_name(name)

    def require_person(self, name: str) -> Person:
        person = self.person_by_name(name)
        if person is None:
            raise PersonNotFoundError(name)
        return person

    def find_table(self, person: Person) -> Optional[ScoreTable]:
        return self.dashboard.find_table(person)

    def last_filled_record(self, person: Person) -> Optional[DailyRecord]:
        return self.dashboard.last_filled_record(person)

    def record_on_date(self, person: Person, day: date) -> Optional[DailyRecord]:
        return self.dashboard.record_on_date(person, day)

    def summary(self, day: date) -> list[SummaryEntry]:
        """Participants who filled `day` in, in table order."""
        participants = self.participants()
        if not participants:
            raise EmptyParticipantsError()
        entries: list[SummaryEntry] = []
        for person in participants:
            record = self.record_on_date(person, day)
            if record is not None:
                entries.append((person, record))
        return entries

    def digest(self, day: date) -> list[DigestEntry]:
        """Every participant with their filled record on `day`, or None."""
        return [(person, self.record_on_date(person, day)) for person in self.participants()]


async def current_snapshot(cache: SnapshotCache) -> Dashboard:
    return await cache.read()


def format_digest(digest: list[DigestEntry], day: date) -> str:
    """Plain-text "filled today?" digest, one line per participant."""
    header = f"{day.strftime('%d.%m.%Y')}:"
    if not any(record is not None for _, record in digest):
        return f"{header} nobody has filled in the table yet"
    lines = [header]
    for person, record in digest:
        if record is None:
            lines.append(f"- {person.name}: not filled")
        else:
            lines.append(f"+ {person.name}: {record.percent}")
    return "\n".join(lines)
