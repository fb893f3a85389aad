"""
Git repository endpoints.

Read-only views of the repository: info, branches, commits, staged-change
check, file listing and file content at a ref.
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_git_service
from app.core.config import Settings, get_settings
from app.core.exceptions import FileNotFoundAtRefError
from app.diff.blob_resolver import BlobResolver
from app.models.diff import RepositoryInfo
from app.services.git_service import GitService

router = APIRouter()


@router.get("/info", response_model=RepositoryInfo)
def repository_info(git: GitService = Depends(get_git_service)):
    """Name, branch, path and remote of the repository."""
    return git.repository_info()


@router.get("/branches")
def list_branches(git: GitService = Depends(get_git_service)):
    return [asdict(branch) for branch in git.list_branches()]


@router.get("/commits")
def list_commits(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    git: GitService = Depends(get_git_service),
    settings: Settings = Depends(get_settings),
):
    commits = git.list_commits(limit or settings.DEFAULT_COMMIT_LIMIT)
    return [
        {
            "sha": c.sha,
            "shortSha": c.short_sha,
            "message": c.message,
            "author": c.author,
            "date": c.date,
        }
        for c in commits
    ]


@router.get("/staged")
def staged_status(git: GitService = Depends(get_git_service)):
    return {"hasStagedChanges": git.has_staged_changes()}


@router.get("/tree/{ref:path}")
def file_tree(ref: str, git: GitService = Depends(get_git_service)):
    """All files at ``ref``."""
    files = git.list_files(git.resolve_ref(ref))
    return {"ref": ref, "files": files}


@router.get("/file/{file_path:path}")
def file_content(
    file_path: str,
    ref: str = Query(default="HEAD"),
    git: GitService = Depends(get_git_service),
):
    """
    Content of one file at ``ref``.

    Binary files are reported with ``isBinary`` and no content.
    """
    sha = git.resolve_ref(ref)
    blob = BlobResolver(git).resolve(sha, file_path)
    if not blob.exists:
        raise FileNotFoundAtRefError(ref, file_path)
    return {
        "path": file_path,
        "ref": ref,
        "content": blob.content,
        "isBinary": blob.is_binary,
    }
