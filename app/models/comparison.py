"""What a diff compares: staged, unstaged, two refs or a commit range."""

from enum import Enum
from typing import List, Optional

from app.core.exceptions import MalformedComparisonError
from app.models.diff import WireModel


class ComparisonType(str, Enum):
    STAGED = "staged"
    UNSTAGED = "unstaged"
    REFS = "refs"
    COMMITS = "commits"


class Comparison(WireModel):
    """
    A comparison request.

    ``base``/``head`` are only used by ``refs``; ``commits`` lists shas oldest
    first and is only used by ``commits``. Construction does not validate the
    combination, :meth:`validate_spec` does.
    """

    type: ComparisonType
    base: Optional[str] = None
    head: Optional[str] = None
    commits: List[str] = []

    @classmethod
    def staged(cls) -> "Comparison":
        return cls(type=ComparisonType.STAGED)

    @classmethod
    def unstaged(cls) -> "Comparison":
        return cls(type=ComparisonType.UNSTAGED)

    @classmethod
    def refs(cls, base: str, head: str) -> "Comparison":
        return cls(type=ComparisonType.REFS, base=base, head=head)

    @classmethod
    def commit_range(cls, shas: List[str]) -> "Comparison":
        return cls(type=ComparisonType.COMMITS, commits=list(shas))

    def validate_spec(self) -> None:
        """
        Reject malformed comparisons.

        Raises:
            MalformedComparisonError: If required refs are missing or blank,
                or fields belonging to another comparison type are set
        """
        if self.type is ComparisonType.REFS:
            if not (self.base and self.base.strip()):
                raise MalformedComparisonError("refs comparison needs a base ref")
            if not (self.head and self.head.strip()):
                raise MalformedComparisonError("refs comparison needs a head ref")
            if self.commits:
                raise MalformedComparisonError("refs comparison takes no commit list")
        elif self.type is ComparisonType.COMMITS:
            if not self.commits:
                raise MalformedComparisonError("commit list is empty")
            if any(not sha or not sha.strip() for sha in self.commits):
                raise MalformedComparisonError("commit list contains a blank sha")
            if self.base or self.head:
                raise MalformedComparisonError("commits comparison takes no base/head")
        elif self.base or self.head or self.commits:
            raise MalformedComparisonError(
                f"{self.type.value} comparison takes no refs or commits"
            )

    def describe(self) -> str:
        if self.type is ComparisonType.REFS:
            return f"{self.base}..{self.head}"
        if self.type is ComparisonType.COMMITS:
            return ",".join(self.commits)
        return self.type.value
