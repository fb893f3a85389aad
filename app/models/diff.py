"""
Diff data models.

These models are rebuilt for every request and never mutated afterwards. They
serialize with camelCase keys (``oldLineNumber``, ``changeKind``...), which is
the wire shape the API returns.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Immutable model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class LineType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


class ChangeKind(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


class DiffLine(WireModel):
    """One line of a file diff with its position on each side."""

    type: LineType
    content: str
    old_line_number: Optional[int] = None
    new_line_number: Optional[int] = None

    @model_validator(mode="after")
    def _check_numbering(self) -> "DiffLine":
        if self.type is LineType.ADDED and self.old_line_number is not None:
            raise ValueError("added lines have no old line number")
        if self.type is LineType.REMOVED and self.new_line_number is not None:
            raise ValueError("removed lines have no new line number")
        if self.type is LineType.CONTEXT and (
            self.old_line_number is None or self.new_line_number is None
        ):
            raise ValueError("context lines need both line numbers")
        return self

    @property
    def anchor_line_number(self) -> int:
        """Line number comments attach to: new side, or old side for removals."""
        if self.type is LineType.REMOVED:
            return self.old_line_number
        return self.new_line_number


class FileDiff(WireModel):
    """
    Diff of a single file.

    ``additions`` and ``deletions`` must agree with ``lines``; use
    :meth:`with_lines` to build a populated diff from a skeleton.
    """

    path: str
    old_path: Optional[str] = None
    change_kind: ChangeKind
    is_binary: bool = False
    lines: List[DiffLine] = []
    additions: int = 0
    deletions: int = 0
    error: Optional[str] = None
    # exactly one side ends with a newline; invisible in lines
    eol_changed: bool = False

    @model_validator(mode="after")
    def _check_counts(self) -> "FileDiff":
        added = sum(1 for line in self.lines if line.type is LineType.ADDED)
        removed = sum(1 for line in self.lines if line.type is LineType.REMOVED)
        if self.additions != added or self.deletions != removed:
            raise ValueError(
                f"{self.path}: counts ({self.additions}/{self.deletions}) "
                f"do not match lines ({added}/{removed})"
            )
        if (self.is_binary or self.error) and self.lines:
            raise ValueError(f"{self.path}: binary or errored files carry no lines")
        return self

    def with_lines(self, lines: List[DiffLine], eol_changed: bool = False) -> "FileDiff":
        """Return a copy holding ``lines`` and matching counts."""
        return FileDiff(
            path=self.path,
            old_path=self.old_path,
            change_kind=self.change_kind,
            lines=lines,
            eol_changed=eol_changed,
            additions=sum(1 for line in lines if line.type is LineType.ADDED),
            deletions=sum(1 for line in lines if line.type is LineType.REMOVED),
        )

    def as_binary(self) -> "FileDiff":
        return self.model_copy(
            update={"is_binary": True, "lines": [], "additions": 0, "deletions": 0, "eol_changed": False}
        )

    def as_error(self, message: str) -> "FileDiff":
        return self.model_copy(
            update={
                "error": message,
                "is_binary": False,
                "lines": [],
                "additions": 0,
                "deletions": 0,
                "eol_changed": False,
            }
        )


class DiffSummary(WireModel):
    total_files: int = 0
    total_additions: int = 0
    total_deletions: int = 0

    @classmethod
    def from_files(cls, files: List[FileDiff]) -> "DiffSummary":
        """Sum-reduce a file list. Errored files count only toward total_files."""
        healthy = [f for f in files if f.error is None]
        return cls(
            total_files=len(files),
            total_additions=sum(f.additions for f in healthy),
            total_deletions=sum(f.deletions for f in healthy),
        )


class RepositoryInfo(WireModel):
    name: str
    branch: Optional[str] = None
    path: str
    remote_url: Optional[str] = None


class DiffResult(WireModel):
    files: List[FileDiff]
    summary: DiffSummary
    repository: RepositoryInfo

    @model_validator(mode="after")
    def _check_summary(self) -> "DiffResult":
        if self.summary != DiffSummary.from_files(self.files):
            raise ValueError("summary does not match files")
        return self

    def file(self, path: str) -> Optional[FileDiff]:
        for file_diff in self.files:
            if file_diff.path == path:
                return file_diff
        return None
