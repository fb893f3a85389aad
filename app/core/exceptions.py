"""
Custom exceptions module.

This module contains custom exceptions for different layers of the application
to improve error handling, reporting, and debugging. Every exception carries the
HTTP status code the API layer answers with.
"""

from typing import Optional


class CodeReviewerException(Exception):
    """Base exception class for all application-specific exceptions."""

    def __init__(
        self,
        message: str = "An error occurred in the Code Reviewer application",
        status_code: int = 500,
    ):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


# Git Service Exceptions
class GitServiceException(CodeReviewerException):
    """Base exception for git access operations."""

    def __init__(
        self, message: str = "Git operation failed", status_code: int = 500
    ):
        super().__init__(message, status_code)


class RefResolutionError(GitServiceException):
    """Raised when a ref cannot be resolved. Fatal for the whole diff."""

    def __init__(self, ref: str, path: Optional[str] = None, reason: str = ""):
        self.ref = ref
        self.path = path
        message = f"Failed to resolve ref '{ref}'"
        if path:
            message += f" for {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message, status_code=404)


class RepositoryNotFoundError(RefResolutionError):
    """Raised when the configured path is not inside a git repository."""

    def __init__(self, repository_path: str, reason: str = ""):
        self.repository_path = repository_path
        super().__init__("HEAD", reason=reason or "not a git repository")
        self.message = f"No git repository found at {repository_path}"
        self.args = (self.message,)


class BlobReadError(GitServiceException):
    """Raised when one file's content cannot be read at a resolvable ref."""

    def __init__(self, ref: str, path: str, reason: str):
        self.ref = ref
        self.path = path
        self.reason = reason
        message = f"Failed to read {path} at {ref}: {reason}"
        super().__init__(message, status_code=500)


class FileNotFoundAtRefError(GitServiceException):
    """Raised when a path does not exist at the requested ref."""

    def __init__(self, ref: str, path: str):
        self.ref = ref
        self.path = path
        super().__init__(f"{path} does not exist at {ref}", status_code=404)


# Diff Exceptions
class MalformedComparisonError(CodeReviewerException):
    """Raised when a comparison is invalid, before any git call is made."""

    def __init__(self, details: str):
        message = f"Invalid comparison: {details}"
        super().__init__(message, status_code=400)


# Store Exceptions
class StoreException(CodeReviewerException):
    """Base exception for review store operations."""

    def __init__(
        self, message: str = "Review store operation failed", status_code: int = 500
    ):
        super().__init__(message, status_code)


class ReviewNotFoundError(StoreException):
    """Raised when a review id does not exist."""

    def __init__(self, review_id: str):
        self.review_id = review_id
        super().__init__(f"Review not found: {review_id}", status_code=404)


class CommentNotFoundError(StoreException):
    """Raised when a comment id does not exist."""

    def __init__(self, comment_id: str):
        self.comment_id = comment_id
        super().__init__(f"Comment not found: {comment_id}", status_code=404)


class TodoNotFoundError(StoreException):
    """Raised when a todo id does not exist."""

    def __init__(self, todo_id: str):
        self.todo_id = todo_id
        super().__init__(f"Todo not found: {todo_id}", status_code=404)
