"""
Todo endpoints.

Todos are reminders kept while reviewing. They are global unless created
with a ``reviewId``, and go away with their review.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_todo_repository
from app.core.exceptions import TodoNotFoundError
from app.core.logging_config import get_logger
from app.models.todo import CreateTodoRequest, DeletedCount, Todo, TodoStats, UpdateTodoRequest
from app.storage.todo_repository import TodoRepository

router = APIRouter()
logger = get_logger(__name__)


@router.get("/todos", response_model=List[Todo])
def list_todos(
    review_id: Optional[str] = Query(default=None, alias="reviewId"),
    completed: Optional[bool] = None,
    todos: TodoRepository = Depends(get_todo_repository),
):
    """Pending todos first, newest first."""
    return todos.find_all(review_id=review_id, completed=completed)


@router.get("/todos/stats", response_model=TodoStats)
def todo_stats(todos: TodoRepository = Depends(get_todo_repository)):
    return todos.stats()


@router.post("/todos", response_model=Todo, status_code=201)
def add_todo(body: CreateTodoRequest, todos: TodoRepository = Depends(get_todo_repository)):
    todo = todos.create(body.content, review_id=body.review_id)
    logger.debug(f"Todo {todo.id} added")
    return todo


@router.delete("/todos/completed", response_model=DeletedCount)
def clear_completed(todos: TodoRepository = Depends(get_todo_repository)):
    deleted = todos.delete_completed()
    logger.info(f"Cleared {deleted} completed todos")
    return DeletedCount(deleted=deleted)


@router.delete("/reviews/{review_id}/todos", response_model=DeletedCount)
def clear_review_todos(review_id: str, todos: TodoRepository = Depends(get_todo_repository)):
    return DeletedCount(deleted=todos.delete_by_review(review_id))


@router.get("/todos/{todo_id}", response_model=Todo)
def get_todo(todo_id: str, todos: TodoRepository = Depends(get_todo_repository)):
    return todos.get(todo_id)


@router.patch("/todos/{todo_id}", response_model=Todo)
def update_todo(
    todo_id: str,
    body: UpdateTodoRequest,
    todos: TodoRepository = Depends(get_todo_repository),
):
    return todos.update(todo_id, content=body.content, completed=body.completed)


@router.post("/todos/{todo_id}/toggle", response_model=Todo)
def toggle_todo(todo_id: str, todos: TodoRepository = Depends(get_todo_repository)):
    return todos.toggle(todo_id)


@router.delete("/todos/{todo_id}")
def delete_todo(todo_id: str, todos: TodoRepository = Depends(get_todo_repository)):
    if not todos.delete(todo_id):
        raise TodoNotFoundError(todo_id)
    return {"success": True}
