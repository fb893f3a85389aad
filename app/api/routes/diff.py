"""
Diff endpoints.

Each endpoint recomputes the diff from the repository on every call. The
handlers are plain functions so FastAPI runs the blocking git work in its
threadpool.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_diff_service
from app.models.comparison import Comparison, ComparisonType
from app.models.diff import DiffResult
from app.services.diff_service import DiffService

router = APIRouter()


@router.get("/staged", response_model=DiffResult)
def staged_diff(diff_service: DiffService = Depends(get_diff_service)):
    """Index against HEAD."""
    return diff_service.compute_diff(Comparison.staged())


@router.get("/unstaged", response_model=DiffResult)
def unstaged_diff(diff_service: DiffService = Depends(get_diff_service)):
    """Working tree (including untracked files) against the index."""
    return diff_service.compute_diff(Comparison.unstaged())


@router.get("/refs", response_model=DiffResult)
def refs_diff(
    base: Optional[str] = Query(default=None),
    head: Optional[str] = Query(default=None),
    diff_service: DiffService = Depends(get_diff_service),
):
    return diff_service.compute_diff(Comparison(type=ComparisonType.REFS, base=base, head=head))


@router.get("/commits", response_model=DiffResult)
def commits_diff(
    sha: List[str] = Query(default=[]),
    diff_service: DiffService = Depends(get_diff_service),
):
    """Combined change of the given commits, listed oldest first."""
    return diff_service.compute_diff(Comparison.commit_range(sha))
