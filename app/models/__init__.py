"""Models module - Pydantic data models"""

from .comparison import Comparison, ComparisonType
from .diff import (
    ChangeKind,
    DiffLine,
    DiffResult,
    DiffSummary,
    FileDiff,
    LineType,
    RepositoryInfo,
)
from .review import Comment, CommentStats, Review, ReviewStatus
from .todo import Todo, TodoStats

__all__ = [
    # Diff models
    "ChangeKind",
    "DiffLine",
    "DiffResult",
    "DiffSummary",
    "FileDiff",
    "LineType",
    "RepositoryInfo",
    # Comparison
    "Comparison",
    "ComparisonType",
    # Review models
    "Comment",
    "CommentStats",
    "Review",
    "ReviewStatus",
    # Todo models
    "Todo",
    "TodoStats",
]
