"""Todo models: reminders kept while reviewing, optionally tied to a review."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.diff import WireModel
from app.models.review import RequestModel


class Todo(WireModel):
    id: str
    content: str
    completed: bool = False
    review_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TodoStats(WireModel):
    total: int = 0
    completed: int = 0
    pending: int = 0


class CreateTodoRequest(RequestModel):
    content: str = Field(min_length=1)
    review_id: Optional[str] = None


class UpdateTodoRequest(RequestModel):
    content: Optional[str] = Field(default=None, min_length=1)
    completed: Optional[bool] = None


class DeletedCount(WireModel):
    deleted: int

