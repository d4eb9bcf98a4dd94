from .person import Person
from .record import DailyRecord, Percentage, Scores, UNINITIALIZED_SCORE
from .score_table import ScoreTable
from .dashboard import Dashboard

__all__ = [
    "Person",
    "DailyRecord",
    "Percentage",
    "Scores",
    "UNINITIALIZED_SCORE",
    "ScoreTable",
    "Dashboard",
]
