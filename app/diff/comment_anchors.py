"""
Joins stored comments onto the lines of a freshly computed diff.

A comment is anchored by ``(file_path, line_number, line_type)``. The line
number is the new-side number for added and context lines and the old-side
number for removed lines. Comments whose anchor is gone from the current diff
are left out of the map; they are not an error.
"""

from typing import Dict, Iterable, List, NamedTuple, Set

from app.models.diff import DiffResult, LineType
from app.models.review import Comment


class LineKey(NamedTuple):
    file_path: str
    line_number: int
    line_type: LineType


def line_key_to_str(key: LineKey) -> str:
    return f"{key.file_path}:{key.line_number}:{key.line_type.value}"


def diff_line_keys(diff_result: DiffResult) -> Set[LineKey]:
    """Every anchor the current diff can host."""
    keys: Set[LineKey] = set()
    for file_diff in diff_result.files:
        for line in file_diff.lines:
            keys.add(LineKey(file_diff.path, line.anchor_line_number, line.type))
    return keys


def comment_key(comment: Comment) -> LineKey | None:
    if comment.line_number is None or comment.line_type is None:
        return None
    return LineKey(comment.file_path, comment.line_number, comment.line_type)


def attach_comments(
    diff_result: DiffResult, comments: Iterable[Comment]
) -> Dict[LineKey, List[Comment]]:
    """
    Group comments by the diff line they are anchored to.

    Args:
        diff_result: The current diff
        comments: Stored comments, in any order

    Returns:
        Dict[LineKey, List[Comment]]: Comments per line, oldest first
    """
    available = diff_line_keys(diff_result)
    attached: Dict[LineKey, List[Comment]] = {}
    for comment in sorted(comments, key=lambda c: (c.created_at, c.id)):
        key = comment_key(comment)
        if key is not None and key in available:
            attached.setdefault(key, []).append(comment)
    return attached


def orphaned_comments(
    diff_result: DiffResult, comments: Iterable[Comment]
) -> List[Comment]:
    """Line comments whose anchor no longer exists in ``diff_result``."""
    available = diff_line_keys(diff_result)
    return [
        comment
        for comment in sorted(comments, key=lambda c: (c.created_at, c.id))
        if (key := comment_key(comment)) is not None and key not in available
    ]
