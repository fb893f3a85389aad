"""Tests for the SQLite review, comment and todo repositories."""

import pytest

from app.core.exceptions import CommentNotFoundError, ReviewNotFoundError, TodoNotFoundError
from app.models.comparison import Comparison, ComparisonType
from app.models.diff import LineType
from app.models.review import ReviewStatus
from app.storage.comment_repository import CommentRepository
from app.storage.database import open_database
from app.storage.review_repository import ReviewRepository
from app.storage.todo_repository import TodoRepository


@pytest.fixture
def conn():
    connection = open_database(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def reviews(conn):
    return ReviewRepository(conn)


@pytest.fixture
def comments(conn):
    return CommentRepository(conn)


@pytest.fixture
def todos(conn):
    return TodoRepository(conn)


class TestOpenDatabase:
    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "reviews.db"
        connection = open_database(str(db_path))
        connection.close()
        assert db_path.exists()

    def test_reopening_keeps_data(self, tmp_path):
        db_path = str(tmp_path / "reviews.db")
        first = open_database(db_path)
        ReviewRepository(first).create("/repo", Comparison.staged())
        first.close()

        second = open_database(db_path)
        assert ReviewRepository(second).count_all() == 1
        second.close()

    def test_store_inside_a_repository_ignores_itself(self, tmp_path):
        db_path = tmp_path / ".code-review" / "reviews.db"
        open_database(str(db_path), ignore_in_git=True).close()
        assert (db_path.parent / ".gitignore").read_text(encoding="utf-8") == "*\n"

    def test_explicit_location_is_left_alone(self, tmp_path):
        db_path = tmp_path / "elsewhere" / "reviews.db"
        open_database(str(db_path)).close()
        assert not (db_path.parent / ".gitignore").exists()


class TestReviewRepository:
    def test_create_and_get(self, reviews):
        review = reviews.create("/repo", Comparison.refs("main", "feature"))
        loaded = reviews.get(review.id)
        assert loaded == review
        assert loaded.source_type is ComparisonType.REFS
        assert (loaded.base_ref, loaded.source_ref) == ("main", "feature")
        assert loaded.status is ReviewStatus.IN_PROGRESS

    def test_comparison_round_trip(self, reviews):
        review = reviews.create("/repo", Comparison.commit_range(["aaa", "bbb"]))
        assert reviews.get(review.id).comparison() == Comparison.commit_range(["aaa", "bbb"])

    def test_missing_review(self, reviews):
        assert reviews.find_by_id("nope") is None
        with pytest.raises(ReviewNotFoundError):
            reviews.get("nope")

    def test_update_status(self, reviews):
        review = reviews.create("/repo", Comparison.staged())
        updated = reviews.update_status(review.id, ReviewStatus.APPROVED)
        assert updated.status is ReviewStatus.APPROVED
        with pytest.raises(ReviewNotFoundError):
            reviews.update_status("nope", ReviewStatus.APPROVED)

    def test_find_all_filters_and_pages(self, reviews):
        for _ in range(3):
            reviews.create("/repo", Comparison.staged())
        unstaged = reviews.create("/repo", Comparison.unstaged())

        data, total = reviews.find_all(source_type=ComparisonType.UNSTAGED)
        assert total == 1 and [r.id for r in data] == [unstaged.id]

        page, total = reviews.find_all(page=2, page_size=3)
        assert total == 4 and len(page) == 1

    def test_delete_cascades_to_comments(self, reviews, comments):
        review = reviews.create("/repo", Comparison.staged())
        note = comments.create(review.id, "a.py", "hi", 1, LineType.ADDED)
        assert reviews.delete(review.id) is True
        assert comments.find_by_id(note.id) is None
        assert reviews.delete(review.id) is False


class TestCommentRepository:
    def test_create_line_comment(self, reviews, comments):
        review = reviews.create("/repo", Comparison.staged())
        note = comments.create(
            review.id, "a.py", "Use a constant", 4, LineType.REMOVED, suggestion="MAX = 3"
        )
        loaded = comments.get(note.id)
        assert loaded.line_number == 4
        assert loaded.line_type is LineType.REMOVED
        assert loaded.suggestion == "MAX = 3"
        assert loaded.resolved is False

    def test_create_needs_review(self, comments):
        with pytest.raises(ReviewNotFoundError):
            comments.create("missing", "a.py", "hi")

    def test_file_level_comment(self, reviews, comments):
        review = reviews.create("/repo", Comparison.staged())
        note = comments.create(review.id, "a.py", "Split this file")
        assert note.line_number is None and note.line_type is None

    def test_find_by_review_and_file(self, reviews, comments):
        review = reviews.create("/repo", Comparison.staged())
        first = comments.create(review.id, "a.py", "one", 1, LineType.ADDED)
        second = comments.create(review.id, "b.py", "two", 1, LineType.ADDED)
        assert [c.id for c in comments.find_by_review(review.id)] == [first.id, second.id]
        assert [c.id for c in comments.find_by_file(review.id, "b.py")] == [second.id]

    def test_update_keeps_unset_fields(self, reviews, comments):
        review = reviews.create("/repo", Comparison.staged())
        note = comments.create(review.id, "a.py", "old", 1, LineType.ADDED, suggestion="s")
        updated = comments.update(note.id, content="new")
        assert (updated.content, updated.suggestion) == ("new", "s")
        with pytest.raises(CommentNotFoundError):
            comments.update("nope", content="x")

    def test_resolve_and_stats(self, reviews, comments):
        review = reviews.create("/repo", Comparison.staged())
        a = comments.create(review.id, "a.py", "one", 1, LineType.ADDED, suggestion="fix")
        comments.create(review.id, "a.py", "two", 2, LineType.ADDED)
        comments.set_resolved(a.id, True)

        stats = comments.stats(review.id)
        assert (stats.total, stats.resolved, stats.unresolved, stats.with_suggestions) == (
            2,
            1,
            1,
            1,
        )
        assert comments.set_resolved(a.id, False).resolved is False

    def test_stats_for_empty_review(self, comments):
        stats = comments.stats("nothing")
        assert stats.total == 0 and stats.resolved == 0


class TestTodoRepository:
    def test_create_and_get(self, todos):
        todo = todos.create("Write the changelog")
        loaded = todos.get(todo.id)
        assert loaded == todo
        assert loaded.completed is False and loaded.review_id is None

    def test_missing_todo(self, todos):
        assert todos.find_by_id("nope") is None
        with pytest.raises(TodoNotFoundError):
            todos.get("nope")
        with pytest.raises(TodoNotFoundError):
            todos.toggle("nope")
        assert todos.delete("nope") is False

    def test_create_for_unknown_review(self, todos):
        with pytest.raises(ReviewNotFoundError):
            todos.create("x", review_id="missing")

    def test_pending_listed_first_then_newest(self, todos):
        first = todos.create("first")
        second = todos.create("second")
        third = todos.create("third")
        todos.toggle(third.id)

        assert [t.id for t in todos.find_all()] == [second.id, first.id, third.id]
        assert [t.id for t in todos.find_by_completed(True)] == [third.id]
        assert [t.id for t in todos.find_by_completed(False)] == [second.id, first.id]

    def test_toggle_flips_both_ways(self, todos):
        todo = todos.create("flip")
        assert todos.toggle(todo.id).completed is True
        assert todos.toggle(todo.id).completed is False

    def test_update_keeps_unset_fields(self, todos):
        todo = todos.create("old")
        updated = todos.update(todo.id, completed=True)
        assert (updated.content, updated.completed) == ("old", True)
        updated = todos.update(todo.id, content="new")
        assert (updated.content, updated.completed) == ("new", True)
        with pytest.raises(TodoNotFoundError):
            todos.update("nope", content="x")

    def test_review_scope_and_bulk_deletes(self, reviews, todos):
        review = reviews.create("/repo", Comparison.staged())
        scoped = todos.create("scoped", review_id=review.id)
        done = todos.create("done")
        todos.create("pending")
        todos.toggle(done.id)

        assert [t.id for t in todos.find_by_review(review.id)] == [scoped.id]
        assert [t.id for t in todos.find_all(review_id=review.id, completed=True)] == []

        assert todos.delete_completed() == 1
        assert todos.delete_by_review(review.id) == 1
        assert [t.content for t in todos.find_all()] == ["pending"]

    def test_review_delete_cascades_to_todos(self, reviews, todos):
        review = reviews.create("/repo", Comparison.staged())
        todo = todos.create("scoped", review_id=review.id)
        reviews.delete(review.id)
        assert todos.find_by_id(todo.id) is None

    def test_stats(self, todos):
        assert todos.stats().total == 0
        a = todos.create("a")
        todos.create("b")
        todos.toggle(a.id)
        stats = todos.stats()
        assert (stats.total, stats.completed, stats.pending) == (2, 1, 1)
