"""Data access for todos."""

import sqlite3
import uuid
from datetime import datetime
from typing import List, Optional

from app.core.exceptions import ReviewNotFoundError, TodoNotFoundError
from app.models.todo import Todo, TodoStats
from app.storage.review_repository import utc_now

# Pending first, newest first within each group
_ORDER = "ORDER BY completed ASC, created_at DESC, rowid DESC"


def row_to_todo(row: sqlite3.Row) -> Todo:
    return Todo(
        id=row["id"],
        content=row["content"],
        completed=bool(row["completed"]),
        review_id=row["review_id"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class TodoRepository:
    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def find_by_id(self, todo_id: str) -> Optional[Todo]:
        row = self._conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
        return row_to_todo(row) if row else None

    def get(self, todo_id: str) -> Todo:
        todo = self.find_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    def find_all(
        self, review_id: Optional[str] = None, completed: Optional[bool] = None
    ) -> List[Todo]:
        """Todos, optionally narrowed to one review and/or one completion state."""
        clauses = []
        params: list = []
        if review_id is not None:
            clauses.append("review_id = ?")
            params.append(review_id)
        if completed is not None:
            clauses.append("completed = ?")
            params.append(int(completed))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        rows = self._conn.execute(f"SELECT * FROM todos {where} {_ORDER}", params).fetchall()
        return [row_to_todo(row) for row in rows]

    def find_by_review(self, review_id: str) -> List[Todo]:
        return self.find_all(review_id=review_id)

    def find_by_completed(self, completed: bool) -> List[Todo]:
        return self.find_all(completed=completed)

    def create(self, content: str, review_id: Optional[str] = None) -> Todo:
        """
        Add a pending todo, global or scoped to a review.

        Raises:
            ReviewNotFoundError: If ``review_id`` is given and does not exist
        """
        if review_id is not None:
            exists = self._conn.execute(
                "SELECT 1 FROM reviews WHERE id = ?", (review_id,)
            ).fetchone()
            if exists is None:
                raise ReviewNotFoundError(review_id)

        todo_id = uuid.uuid4().hex
        now = utc_now()
        self._conn.execute(
            """
            INSERT INTO todos (id, content, completed, review_id, created_at, updated_at)
            VALUES (?, ?, 0, ?, ?, ?)
            """,
            (todo_id, content, review_id, now, now),
        )
        self._conn.commit()
        return self.get(todo_id)

    def update(
        self,
        todo_id: str,
        content: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Todo:
        cursor = self._conn.execute(
            """
            UPDATE todos
            SET content = COALESCE(?, content),
                completed = COALESCE(?, completed),
                updated_at = ?
            WHERE id = ?
            """,
            (content, None if completed is None else int(completed), utc_now(), todo_id),
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise TodoNotFoundError(todo_id)
        return self.get(todo_id)

    def toggle(self, todo_id: str) -> Todo:
        cursor = self._conn.execute(
            """
            UPDATE todos
            SET completed = CASE WHEN completed = 0 THEN 1 ELSE 0 END,
                updated_at = ?
            WHERE id = ?
            """,
            (utc_now(), todo_id),
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise TodoNotFoundError(todo_id)
        return self.get(todo_id)

    def delete(self, todo_id: str) -> bool:
        cursor = self._conn.execute("DELETE FROM todos WHERE id = ?", (todo_id,))
        self._conn.commit()
        return cursor.rowcount > 0

    def delete_completed(self) -> int:
        cursor = self._conn.execute("DELETE FROM todos WHERE completed = 1")
        self._conn.commit()
        return cursor.rowcount

    def delete_by_review(self, review_id: str) -> int:
        cursor = self._conn.execute("DELETE FROM todos WHERE review_id = ?", (review_id,))
        self._conn.commit()
        return cursor.rowcount

    def stats(self) -> TodoStats:
        row = self._conn.execute(
            """
            SELECT COUNT(*) AS total, COALESCE(SUM(completed), 0) AS completed
            FROM todos
            """
        ).fetchone()
        return TodoStats(
            total=row["total"],
            completed=row["completed"],
            pending=row["total"] - row["completed"],
        )
