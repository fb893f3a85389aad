"""Review and comment models, plus the request bodies the API accepts."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.models.comparison import Comparison, ComparisonType
from app.models.diff import DiffResult, LineType, WireModel


class ReviewStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    APPROVED = "approved"
    CHANGES_REQUESTED = "changes_requested"


class Review(WireModel):
    id: str
    repository_path: str
    source_type: ComparisonType
    base_ref: Optional[str] = None
    source_ref: Optional[str] = None
    status: ReviewStatus = ReviewStatus.IN_PROGRESS
    created_at: datetime
    updated_at: datetime

    def comparison(self) -> Comparison:
        """Rebuild the comparison this review was opened on."""
        if self.source_type is ComparisonType.REFS:
            return Comparison.refs(self.base_ref or "", self.source_ref or "")
        if self.source_type is ComparisonType.COMMITS:
            shas = [s for s in (self.source_ref or "").split(",") if s]
            return Comparison.commit_range(shas)
        return Comparison(type=self.source_type)


class Comment(WireModel):
    id: str
    review_id: str
    file_path: str
    line_number: Optional[int] = None
    line_type: Optional[LineType] = None
    content: str
    suggestion: Optional[str] = None
    resolved: bool = False
    created_at: datetime
    updated_at: datetime


class CommentStats(WireModel):
    total: int = 0
    resolved: int = 0
    unresolved: int = 0
    with_suggestions: int = 0


class RequestModel(BaseModel):
    """Mutable request body accepting camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateReviewRequest(RequestModel):
    source_type: ComparisonType
    base_ref: Optional[str] = None
    source_ref: Optional[str] = None
    commits: List[str] = []

    def comparison(self) -> Comparison:
        if self.source_type is ComparisonType.REFS:
            return Comparison.refs(self.base_ref or "", self.source_ref or "")
        if self.source_type is ComparisonType.COMMITS:
            return Comparison.commit_range(self.commits)
        return Comparison(type=self.source_type)


class UpdateReviewRequest(RequestModel):
    status: ReviewStatus


class CreateCommentRequest(RequestModel):
    file_path: str = Field(min_length=1)
    line_number: Optional[int] = Field(default=None, ge=1)
    line_type: Optional[LineType] = None
    content: str = Field(min_length=1)
    suggestion: Optional[str] = None

    @model_validator(mode="after")
    def _anchor_is_complete(self) -> "CreateCommentRequest":
        if (self.line_number is None) != (self.line_type is None):
            raise ValueError("lineNumber and lineType must be given together")
        return self


class UpdateCommentRequest(RequestModel):
    content: Optional[str] = Field(default=None, min_length=1)
    suggestion: Optional[str] = None


class ReviewList(WireModel):
    data: List[Review]
    total: int
    page: int
    page_size: int


class ReviewDiff(WireModel):
    """A review's current diff with its comments joined onto the lines."""

    review: Review
    diff: DiffResult
    comments_by_line: Dict[str, List[Comment]]
    file_comments: List[Comment]
    orphaned_comment_ids: List[str]
