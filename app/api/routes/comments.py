"""
Comment endpoints.

Comments belong to a review and may be anchored to a diff line
(``filePath`` + ``lineNumber`` + ``lineType``) or to a whole file.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_comment_repository
from app.core.exceptions import CommentNotFoundError
from app.core.logging_config import get_logger
from app.models.review import Comment, CommentStats, CreateCommentRequest, UpdateCommentRequest
from app.storage.comment_repository import CommentRepository

router = APIRouter()
logger = get_logger(__name__)


@router.get("/reviews/{review_id}/comments", response_model=List[Comment])
def list_comments(
    review_id: str,
    file_path: Optional[str] = Query(default=None, alias="filePath"),
    comments: CommentRepository = Depends(get_comment_repository),
):
    """All comments of a review, optionally for one file."""
    if file_path:
        return comments.find_by_file(review_id, file_path)
    return comments.find_by_review(review_id)


@router.get("/reviews/{review_id}/comments/stats", response_model=CommentStats)
def comment_stats(review_id: str, comments: CommentRepository = Depends(get_comment_repository)):
    return comments.stats(review_id)


@router.post("/reviews/{review_id}/comments", response_model=Comment, status_code=201)
def add_comment(
    review_id: str,
    body: CreateCommentRequest,
    comments: CommentRepository = Depends(get_comment_repository),
):
    comment = comments.create(
        review_id,
        file_path=body.file_path,
        content=body.content,
        line_number=body.line_number,
        line_type=body.line_type,
        suggestion=body.suggestion,
    )
    logger.debug(f"Comment {comment.id} added to review {review_id} on {body.file_path}")
    return comment


@router.get("/comments/{comment_id}", response_model=Comment)
def get_comment(comment_id: str, comments: CommentRepository = Depends(get_comment_repository)):
    return comments.get(comment_id)


@router.patch("/comments/{comment_id}", response_model=Comment)
def update_comment(
    comment_id: str,
    body: UpdateCommentRequest,
    comments: CommentRepository = Depends(get_comment_repository),
):
    return comments.update(comment_id, content=body.content, suggestion=body.suggestion)


@router.delete("/comments/{comment_id}")
def delete_comment(comment_id: str, comments: CommentRepository = Depends(get_comment_repository)):
    if not comments.delete(comment_id):
        raise CommentNotFoundError(comment_id)
    return {"success": True}


@router.post("/comments/{comment_id}/resolve", response_model=Comment)
def resolve_comment(comment_id: str, comments: CommentRepository = Depends(get_comment_repository)):
    return comments.set_resolved(comment_id, True)


@router.post("/comments/{comment_id}/unresolve", response_model=Comment)
def unresolve_comment(comment_id: str, comments: CommentRepository = Depends(get_comment_repository)):
    return comments.set_resolved(comment_id, False)
