"""Data access for reviews."""

import sqlite3
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from app.core.exceptions import ReviewNotFoundError
from app.models.comparison import Comparison, ComparisonType
from app.models.review import Review, ReviewStatus


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def row_to_review(row: sqlite3.Row) -> Review:
    return Review(
        id=row["id"],
        repository_path=row["repository_path"],
        source_type=ComparisonType(row["source_type"]),
        base_ref=row["base_ref"],
        source_ref=row["source_ref"],
        status=ReviewStatus(row["status"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _refs_for(comparison: Comparison) -> Tuple[Optional[str], Optional[str]]:
    if comparison.type is ComparisonType.REFS:
        return comparison.base, comparison.head
    if comparison.type is ComparisonType.COMMITS:
        return None, ",".join(comparison.commits)
    return None, None


class ReviewRepository:
    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def find_by_id(self, review_id: str) -> Optional[Review]:
        row = self._conn.execute("SELECT * FROM reviews WHERE id = ?", (review_id,)).fetchone()
        return row_to_review(row) if row else None

    def get(self, review_id: str) -> Review:
        """Like :meth:`find_by_id` but raises ReviewNotFoundError."""
        review = self.find_by_id(review_id)
        if review is None:
            raise ReviewNotFoundError(review_id)
        return review

    def find_all(
        self,
        status: Optional[ReviewStatus] = None,
        source_type: Optional[ComparisonType] = None,
        repository_path: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Review], int]:
        conditions: List[str] = []
        params: List[str] = []
        if status:
            conditions.append("status = ?")
            params.append(status.value)
        if source_type:
            conditions.append("source_type = ?")
            params.append(source_type.value)
        if repository_path:
            conditions.append("repository_path = ?")
            params.append(repository_path)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        total = self._conn.execute(f"SELECT COUNT(*) FROM reviews {where}", params).fetchone()[0]
        rows = self._conn.execute(
            f"SELECT * FROM reviews {where} ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
            [*params, page_size, (page - 1) * page_size],
        ).fetchall()
        return [row_to_review(row) for row in rows], total

    def create(self, repository_path: str, comparison: Comparison) -> Review:
        review_id = uuid.uuid4().hex
        base_ref, source_ref = _refs_for(comparison)
        now = utc_now()
        self._conn.execute(
            """
            INSERT INTO reviews (id, repository_path, source_type, base_ref, source_ref,
                                 status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                review_id,
                repository_path,
                comparison.type.value,
                base_ref,
                source_ref,
                ReviewStatus.IN_PROGRESS.value,
                now,
                now,
            ),
        )
        self._conn.commit()
        return self.get(review_id)

    def update_status(self, review_id: str, status: ReviewStatus) -> Review:
        cursor = self._conn.execute(
            "UPDATE reviews SET status = ?, updated_at = ? WHERE id = ?",
            (status.value, utc_now(), review_id),
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise ReviewNotFoundError(review_id)
        return self.get(review_id)

    def delete(self, review_id: str) -> bool:
        cursor = self._conn.execute("DELETE FROM reviews WHERE id = ?", (review_id,))
        self._conn.commit()
        return cursor.rowcount > 0

    def count_all(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM reviews").fetchone()[0]
