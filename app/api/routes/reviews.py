"""
Review endpoints.

A review records which comparison is under review; its diff is recomputed on
every read and the stored comments are joined onto the fresh lines.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_comment_repository, get_diff_service, get_review_repository
from app.core.exceptions import ReviewNotFoundError
from app.core.logging_config import get_logger
from app.diff.comment_anchors import attach_comments, line_key_to_str, orphaned_comments
from app.models.comparison import ComparisonType
from app.models.review import (
    CreateReviewRequest,
    Review,
    ReviewDiff,
    ReviewList,
    ReviewStatus,
    UpdateReviewRequest,
)
from app.services.diff_service import DiffService
from app.storage.comment_repository import CommentRepository
from app.storage.review_repository import ReviewRepository

router = APIRouter()
logger = get_logger(__name__)


@router.post("", response_model=Review, status_code=201)
def create_review(
    body: CreateReviewRequest,
    diff_service: DiffService = Depends(get_diff_service),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    """
    Open a review on a comparison.

    The comparison is resolved once so that reviews on unknown refs are
    rejected up front.
    """
    comparison = body.comparison()
    diff_service.resolve_target(comparison)
    repository_path = diff_service.repository_path()
    review = reviews.create(repository_path, comparison)
    logger.info(f"Created review {review.id} on {comparison.describe()}")
    return review


@router.get("", response_model=ReviewList)
def list_reviews(
    status: Optional[ReviewStatus] = None,
    source_type: Optional[ComparisonType] = Query(default=None, alias="sourceType"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    data, total = reviews.find_all(
        status=status, source_type=source_type, page=page, page_size=page_size
    )
    return ReviewList(data=data, total=total, page=page, page_size=page_size)


@router.get("/{review_id}", response_model=Review)
def get_review(review_id: str, reviews: ReviewRepository = Depends(get_review_repository)):
    return reviews.get(review_id)


@router.patch("/{review_id}", response_model=Review)
def update_review(
    review_id: str,
    body: UpdateReviewRequest,
    reviews: ReviewRepository = Depends(get_review_repository),
):
    return reviews.update_status(review_id, body.status)


@router.delete("/{review_id}")
def delete_review(review_id: str, reviews: ReviewRepository = Depends(get_review_repository)):
    if not reviews.delete(review_id):
        raise ReviewNotFoundError(review_id)
    return {"success": True}


@router.get("/{review_id}/diff", response_model=ReviewDiff)
def review_diff(
    review_id: str,
    diff_service: DiffService = Depends(get_diff_service),
    reviews: ReviewRepository = Depends(get_review_repository),
    comments: CommentRepository = Depends(get_comment_repository),
):
    """The review's diff as of now, with comments attached per line."""
    review = reviews.get(review_id)
    diff_result = diff_service.compute_diff(review.comparison())
    stored = comments.find_by_review(review_id)

    by_line = attach_comments(diff_result, stored)
    orphans = orphaned_comments(diff_result, stored)
    if orphans:
        logger.debug(f"Review {review_id}: {len(orphans)} comments lost their anchor")

    return ReviewDiff(
        review=review,
        diff=diff_result,
        comments_by_line={line_key_to_str(key): value for key, value in by_line.items()},
        file_comments=[c for c in stored if c.line_number is None],
        orphaned_comment_ids=[c.id for c in orphans],
    )
