from .comment_repository import CommentRepository
from .database import open_database
from .review_repository import ReviewRepository
from .todo_repository import TodoRepository

__all__ = ["CommentRepository", "ReviewRepository", "TodoRepository", "open_database"]
