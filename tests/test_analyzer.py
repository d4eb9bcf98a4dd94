"""
Tests for the domain models and the read-only analyzer over a snapshot.
"""
from datetime import date

import pytest

from scoreboard.core.errors import EmptyParticipantsError, PersonNotFoundError
from scoreboard.models import DailyRecord, Dashboard, Percentage, Person, ScoreTable, Scores
from scoreboard.services.analyzer import DashboardAnalyzer, current_snapshot, format_digest
from scoreboard.services.cache import SnapshotCache

from helpers import make_dashboard, make_record

MAR_1 = date(2024, 3, 1)
MAR_2 = date(2024, 3, 2)
MAR_3 = date(2024, 3, 3)


def _placeholder(day: date) -> DailyRecord:
    return DailyRecord(date=day)


class TestModels:
    def test_person_identity_follows_name(self):
        assert Person("Alice") == Person("Alice")
        assert Person("Alice").id == Person("Alice").id
        assert Person("Alice") != Person("Bob")
        assert str(Person("Alice")) == "Alice"

    def test_record_defaults(self):
        record = DailyRecord()
        assert record.date == date.min
        assert record.scores.as_tuple() == (0.0,) * 6
        assert not record.has_total
        assert str(record.percent) == "0%"

    def test_total_is_not_derived_from_scores(self):
        record = DailyRecord(date=MAR_1, scores=Scores(1, 1, 1, 1, 1, 1), total_score=10.0)
        assert record.scores.sum() == 6.0
        assert record.total_score == 10.0

    def test_percentage_ordering(self):
        assert Percentage(40) < Percentage(60)
        assert max(Percentage(10), Percentage(90)) == Percentage(90)

    def test_score_table_queries(self):
        table = ScoreTable.build(
            Person("Alice"),
            [make_record(MAR_1), make_record(MAR_2, total=7.0), _placeholder(MAR_3)],
        )
        assert len(table) == 3
        assert table.last_record().date == MAR_3
        assert table.last_filled_record().date == MAR_2
        assert table.by_date(MAR_3) is not None
        assert table.filled_by_date(MAR_3) is None
        assert table.filled_by_date(MAR_1).total_score == 15.0

    def test_empty_score_table(self):
        table = ScoreTable.build(Person("Alice"), [])
        assert table.last_record() is None
        assert table.last_filled_record() is None

    def test_uninitialized_dashboard(self):
        dashboard = Dashboard()
        assert not dashboard.is_initialized
        assert dashboard.participants() is None
        assert dashboard.person_by_name("Alice") is None


class TestAnalyzer:
    @pytest.fixture()
    def analyzer(self):
        return DashboardAnalyzer(make_dashboard(
            ("Alice", [make_record(MAR_1), make_record(MAR_2)]),
            ("Bob", [make_record(MAR_1), _placeholder(MAR_2)]),
            ("Carol", [_placeholder(MAR_1), _placeholder(MAR_2)]),
        ))

    def test_participants_in_table_order(self, analyzer):
        assert analyzer.participants_names() == ["Alice", "Bob", "Carol"]

    def test_summary_lists_only_filled(self, analyzer):
        entries = analyzer.summary(MAR_2)
        assert len(entries) == 1
        person, record = entries[0]
        assert person == Person("Alice")
        assert record.date == MAR_2

    def test_summary_day_nobody_filled(self, analyzer):
        assert analyzer.summary(MAR_3) == []

    def test_summary_without_participants(self):
        with pytest.raises(EmptyParticipantsError):
            DashboardAnalyzer(make_dashboard()).summary(MAR_1)
        with pytest.raises(EmptyParticipantsError):
            DashboardAnalyzer(Dashboard()).summary(MAR_1)

    def test_last_filled_record(self, analyzer):
        assert analyzer.last_filled_record(Person("Bob")).date == MAR_1
        assert analyzer.last_filled_record(Person("Carol")) is None
        assert analyzer.last_filled_record(Person("Zed")) is None

    def test_record_on_date(self, analyzer):
        assert analyzer.record_on_date(Person("Alice"), MAR_2) is not None
        assert analyzer.record_on_date(Person("Bob"), MAR_2) is None

    def test_require_person(self, analyzer):
        assert analyzer.require_person("Bob") == Person("Bob")
        with pytest.raises(PersonNotFoundError) as exc_info:
            analyzer.require_person("Zed")
        assert exc_info.value.details == {"name": "Zed"}

    def test_digest(self, analyzer):
        digest = analyzer.digest(MAR_1)
        assert [(p.name, r is not None) for p, r in digest] == [
            ("Alice", True),
            ("Bob", True),
            ("Carol", False),
        ]


class TestFormatDigest:
    def test_mixed(self):
        digest = [(Person("Alice"), make_record(MAR_1, percent=75)), (Person("Bob"), None)]
        assert format_digest(digest, MAR_1) == "01.03.2024:\n+ Alice: 75%\n- Bob: not filled"

    def test_nobody_filled(self):
        digest = [(Person("Alice"), None), (Person("Bob"), None)]
        assert format_digest(digest, MAR_1) == "01.03.2024: nobody has filled in the table yet"


class TestCurrentSnapshot:
    @pytest.mark.asyncio
    async def test_returns_the_published_snapshot(self):
        first = make_dashboard(("Alice", [make_record(MAR_1)]))
        cache = SnapshotCache(initial=first)
        assert await current_snapshot(cache) is first

        second = make_dashboard(("Bob", []))
        await cache.replace(second)
        snapshot = await current_snapshot(cache)
        assert snapshot is second
        assert DashboardAnalyzer(snapshot).participants_names() == ["Bob"]

    @pytest.mark.asyncio
    async def test_uninitialized(self):
        snapshot = await current_snapshot(SnapshotCache())
        assert not snapshot.is_initialized
