"""
Dependency injection module for FastAPI.

This module provides dependencies that can be injected into route functions
using FastAPI's dependency injection system. Each request gets its own git
service and database connection; tests replace them through
``app.dependency_overrides``.
"""

import sqlite3
from typing import Iterator

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.services.diff_service import DiffService
from app.services.git_service import GitService
from app.storage.comment_repository import CommentRepository
from app.storage.database import open_database
from app.storage.review_repository import ReviewRepository
from app.storage.todo_repository import TodoRepository

__all__ = [
    "get_comment_repository",
    "get_db_connection",
    "get_diff_service",
    "get_git_service",
    "get_review_repository",
    "get_todo_repository",
    "get_settings",
]


def get_git_service(settings: Settings = Depends(get_settings)) -> GitService:
    return GitService(settings.REPOSITORY_PATH)


def get_diff_service(git_service: GitService = Depends(get_git_service)) -> DiffService:
    return DiffService(git_service)


def get_db_connection(settings: Settings = Depends(get_settings)) -> Iterator[sqlite3.Connection]:
    conn = open_database(settings.database_path, ignore_in_git=settings.DB_PATH is None)
    try:
        yield conn
    finally:
        conn.close()


def get_review_repository(
    conn: sqlite3.Connection = Depends(get_db_connection),
) -> ReviewRepository:
    return ReviewRepository(conn)


def get_comment_repository(
    conn: sqlite3.Connection = Depends(get_db_connection),
) -> CommentRepository:
    return CommentRepository(conn)


def get_todo_repository(
    conn: sqlite3.Connection = Depends(get_db_connection),
) -> TodoRepository:
    return TodoRepository(conn)
