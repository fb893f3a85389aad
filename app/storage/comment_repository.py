"""Data access for review comments."""

import sqlite3
import uuid
from datetime import datetime
from typing import List, Optional

from app.core.exceptions import CommentNotFoundError, ReviewNotFoundError
from app.models.diff import LineType
from app.models.review import Comment, CommentStats
from app.storage.review_repository import utc_now


def row_to_comment(row: sqlite3.Row) -> Comment:
    return Comment(
        id=row["id"],
        review_id=row["review_id"],
        file_path=row["file_path"],
        line_number=row["line_number"],
        line_type=LineType(row["line_type"]) if row["line_type"] else None,
        content=row["content"],
        suggestion=row["suggestion"],
        resolved=bool(row["resolved"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class CommentRepository:
    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def find_by_id(self, comment_id: str) -> Optional[Comment]:
        row = self._conn.execute("SELECT * FROM comments WHERE id = ?", (comment_id,)).fetchone()
        return row_to_comment(row) if row else None

    def get(self, comment_id: str) -> Comment:
        comment = self.find_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundError(comment_id)
        return comment

    def find_by_review(self, review_id: str) -> List[Comment]:
        rows = self._conn.execute(
            "SELECT * FROM comments WHERE review_id = ? ORDER BY created_at, rowid",
            (review_id,),
        ).fetchall()
        return [row_to_comment(row) for row in rows]

    def find_by_file(self, review_id: str, file_path: str) -> List[Comment]:
        rows = self._conn.execute(
            """
            SELECT * FROM comments WHERE review_id = ? AND file_path = ?
            ORDER BY line_number, created_at, rowid
            """,
            (review_id, file_path),
        ).fetchall()
        return [row_to_comment(row) for row in rows]

    def create(
        self,
        review_id: str,
        file_path: str,
        content: str,
        line_number: Optional[int] = None,
        line_type: Optional[LineType] = None,
        suggestion: Optional[str] = None,
    ) -> Comment:
        """
        Add a comment to a review.

        A comment without ``line_number`` is a file-level comment.

        Raises:
            ReviewNotFoundError: If the review does not exist
        """
        exists = self._conn.execute("SELECT 1 FROM reviews WHERE id = ?", (review_id,)).fetchone()
        if exists is None:
            raise ReviewNotFoundError(review_id)

        comment_id = uuid.uuid4().hex
        now = utc_now()
        self._conn.execute(
            """
            INSERT INTO comments (id, review_id, file_path, line_number, line_type,
                                  content, suggestion, resolved, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
            """,
            (
                comment_id,
                review_id,
                file_path,
                line_number,
                line_type.value if line_type else None,
                content,
                suggestion,
                now,
                now,
            ),
        )
        self._conn.commit()
        return self.get(comment_id)

    def update(
        self,
        comment_id: str,
        content: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> Comment:
        cursor = self._conn.execute(
            """
            UPDATE comments
            SET content = COALESCE(?, content),
                suggestion = COALESCE(?, suggestion),
                updated_at = ?
            WHERE id = ?
            """,
            (content, suggestion, utc_now(), comment_id),
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise CommentNotFoundError(comment_id)
        return self.get(comment_id)

    def set_resolved(self, comment_id: str, resolved: bool) -> Comment:
        cursor = self._conn.execute(
            "UPDATE comments SET resolved = ?, updated_at = ? WHERE id = ?",
            (int(resolved), utc_now(), comment_id),
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise CommentNotFoundError(comment_id)
        return self.get(comment_id)

    def delete(self, comment_id: str) -> bool:
        cursor = self._conn.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
        self._conn.commit()
        return cursor.rowcount > 0

    def stats(self, review_id: str) -> CommentStats:
        row = self._conn.execute(
            """
            SELECT COUNT(*) AS total,
                   COALESCE(SUM(resolved), 0) AS resolved,
                   COALESCE(SUM(CASE WHEN suggestion IS NOT NULL THEN 1 ELSE 0 END), 0)
                       AS with_suggestions
            FROM comments WHERE review_id = ?
            """,
            (review_id,),
        ).fetchone()
        return CommentStats(
            total=row["total"],
            resolved=row["resolved"],
            unresolved=row["total"] - row["resolved"],
            with_suggestions=row["with_suggestions"],
        )
