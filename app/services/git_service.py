"""Git service module.

This module wraps GitPython for everything the review server reads from the
repository: changed-path listings, blob contents at a ref, the index or the
working tree, and repository metadata. It never writes to the index or the
working tree.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import BadName, BadObject

from app.core.exceptions import (
    BlobReadError,
    MalformedComparisonError,
    RefResolutionError,
    RepositoryNotFoundError,
)
from app.core.logging_config import get_logger
from app.diff.file_classifier import ChangedPath
from app.models.diff import RepositoryInfo

logger = get_logger(__name__)

# Pseudo-refs for the two states that are not commits
INDEX_REF = ":index"
WORKTREE_REF = ":worktree"

# Git's well-known empty tree, used as the base of root commits and unborn branches
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


@dataclass(frozen=True)
class DiffTarget:
    """The two resolved sides of a comparison."""

    old_ref: str
    new_ref: str


@dataclass(frozen=True)
class BranchInfo:
    name: str
    current: bool
    commit: str


@dataclass(frozen=True)
class CommitInfo:
    sha: str
    short_sha: str
    message: str
    author: str
    date: str


def parse_name_status(output: str) -> List[ChangedPath]:
    """
    Parse ``git diff --name-status -z`` output.

    Records are NUL separated: ``STATUS\\0PATH`` or, for renames and copies,
    ``R087\\0OLD\\0NEW``.
    """
    tokens = output.split("\0")
    entries: List[ChangedPath] = []
    i = 0
    while i < len(tokens):
        status = tokens[i].strip()
        if not status:
            i += 1
            continue
        if status[0] in "RC":
            if i + 2 >= len(tokens):
                logger.warning(f"Truncated rename record in diff output: {status}")
                break
            similarity = int(status[1:]) if status[1:].isdigit() else None
            entries.append(
                ChangedPath(
                    status=status,
                    old_path=tokens[i + 1],
                    path=tokens[i + 2],
                    similarity=similarity,
                )
            )
            i += 3
        else:
            if i + 1 >= len(tokens):
                logger.warning(f"Truncated record in diff output: {status}")
                break
            entries.append(ChangedPath(status=status, path=tokens[i + 1]))
            i += 2
    return entries


class GitService:
    """Read-only access to one local repository."""

    def __init__(self, repository_path: str):
        try:
            self._repo = Repo(repository_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryNotFoundError(repository_path, str(e)) from e
        if self._repo.bare:
            raise RepositoryNotFoundError(repository_path, "bare repositories have no working tree")

    # Ref resolution

    def has_head(self) -> bool:
        """False on an unborn branch (no commits yet)."""
        try:
            self._repo.head.commit
        except ValueError:
            return False
        return True

    def resolve_ref(self, ref: str) -> str:
        """
        Resolve ``ref`` to a commit sha.

        Raises:
            RefResolutionError: If ``ref`` names no commit
        """
        if ref == EMPTY_TREE_SHA:
            return ref
        try:
            return self._repo.commit(ref).hexsha
        except (BadName, BadObject, ValueError, IndexError, GitCommandError) as e:
            raise RefResolutionError(ref, reason=str(e)) from e

    def parent_of(self, sha: str) -> str:
        """First parent of ``sha``, or the empty tree for a root commit."""
        commit = self._repo.commit(sha)
        if not commit.parents:
            return EMPTY_TREE_SHA
        return commit.parents[0].hexsha

    def order_commits(self, shas: List[str]) -> List[str]:
        """
        Order resolved commit shas oldest first.

        Callers may list a range in any order, typically newest first as
        picked from the log. Duplicates are dropped.

        Raises:
            MalformedComparisonError: If the commits are not on one line of history
        """
        unique = list(dict.fromkeys(shas))
        ancestors = {
            sha: sum(1 for other in unique if other != sha and self._repo.is_ancestor(other, sha))
            for sha in unique
        }
        ordered = sorted(unique, key=lambda sha: ancestors[sha])
        for older, newer in zip(ordered, ordered[1:]):
            if not self._repo.is_ancestor(older, newer):
                raise MalformedComparisonError(
                    f"commits {older[:7]} and {newer[:7]} are not on one line of history"
                )
        return ordered

    def _tree(self, ref: str):
        if ref == EMPTY_TREE_SHA:
            return None
        try:
            return self._repo.commit(ref).tree
        except (BadName, BadObject, ValueError, IndexError, GitCommandError) as e:
            raise RefResolutionError(ref, reason=str(e)) from e

    # Changed paths

    def list_changed_paths(self, target: DiffTarget) -> List[ChangedPath]:
        """
        List paths that differ between the two sides of ``target``.

        Untracked files count as added when the new side is the working tree.
        """
        args = ["--name-status", "-M", "-z", "--no-color"]
        if target.new_ref == INDEX_REF:
            args = ["--cached", *args, target.old_ref]
        elif target.new_ref == WORKTREE_REF:
            if target.old_ref != INDEX_REF:
                args.append(target.old_ref)
        else:
            args.extend([target.old_ref, target.new_ref])

        try:
            output = self._repo.git.diff(*args)
        except GitCommandError as e:
            raise RefResolutionError(
                f"{target.old_ref}..{target.new_ref}", reason=e.stderr.strip() if e.stderr else str(e)
            ) from e

        entries = parse_name_status(output)
        if target.new_ref == WORKTREE_REF:
            entries.extend(ChangedPath(status="A", path=p) for p in self.untracked_files())
        logger.debug(
            f"{len(entries)} changed paths between {target.old_ref} and {target.new_ref}"
        )
        return entries

    def untracked_files(self) -> List[str]:
        output = self._repo.git.ls_files("--others", "--exclude-standard", "-z")
        return [p for p in output.split("\0") if p]

    # Blob access

    def read_blob(self, ref: str, path: str) -> Optional[bytes]:
        """
        Read ``path`` at ``ref``. Returns None when the file does not exist there.

        ``ref`` may also be :data:`INDEX_REF` or :data:`WORKTREE_REF`.

        Raises:
            RefResolutionError: If ``ref`` cannot be resolved
            BlobReadError: If the file exists but cannot be read
        """
        if ref == WORKTREE_REF:
            return self._read_worktree(path)
        if ref == INDEX_REF:
            return self._read_index(path)

        tree = self._tree(ref)
        if tree is None:
            return None
        try:
            item = tree / path
        except KeyError:
            return None
        if item.type != "blob":
            raise BlobReadError(ref, path, f"not a regular file ({item.type})")
        try:
            return item.data_stream.read()
        except (ValueError, OSError) as e:
            raise BlobReadError(ref, path, str(e)) from e

    def _read_index(self, path: str) -> Optional[bytes]:
        entry = self._repo.index.entries.get((path, 0))
        if entry is None:
            return None
        try:
            return self._repo.odb.stream(entry.binsha).read()
        except (BadObject, ValueError, OSError) as e:
            raise BlobReadError(INDEX_REF, path, str(e)) from e

    def _read_worktree(self, path: str) -> Optional[bytes]:
        full_path = Path(self.repository_root()) / path
        if not full_path.exists() and not full_path.is_symlink():
            return None
        if full_path.is_symlink():
            return os.readlink(full_path).encode("utf-8")
        if full_path.is_dir():
            raise BlobReadError(WORKTREE_REF, path, "is a directory")
        try:
            return full_path.read_bytes()
        except OSError as e:
            raise BlobReadError(WORKTREE_REF, path, str(e)) from e

    # Repository metadata

    def repository_root(self) -> str:
        return str(self._repo.working_tree_dir)

    def current_branch(self) -> Optional[str]:
        """Branch name, or None when HEAD is detached."""
        if self._repo.head.is_detached:
            return None
        return self._repo.active_branch.name

    def remote_url(self) -> Optional[str]:
        try:
            return self._repo.remotes.origin.url
        except (AttributeError, IndexError, ValueError):
            return None

    def repository_info(self) -> RepositoryInfo:
        root = self.repository_root()
        return RepositoryInfo(
            name=os.path.basename(root.rstrip(os.sep)),
            branch=self.current_branch(),
            path=root,
            remote_url=self.remote_url(),
        )

    def list_branches(self) -> List[BranchInfo]:
        current = self.current_branch()
        return [
            BranchInfo(name=head.name, current=head.name == current, commit=head.commit.hexsha)
            for head in sorted(self._repo.heads, key=lambda h: h.name)
        ]

    def list_commits(self, limit: int = 20) -> List[CommitInfo]:
        if not self.has_head():
            return []
        return [
            CommitInfo(
                sha=commit.hexsha,
                short_sha=commit.hexsha[:7],
                message=commit.message.strip(),
                author=commit.author.name,
                date=commit.committed_datetime.isoformat(),
            )
            for commit in self._repo.iter_commits("HEAD", max_count=limit)
        ]

    def has_staged_changes(self) -> bool:
        base = "HEAD" if self.has_head() else EMPTY_TREE_SHA
        return bool(self.list_changed_paths(DiffTarget(base, INDEX_REF)))

    def list_files(self, ref: str) -> List[str]:
        """All blob paths at ``ref``, sorted."""
        tree = self._tree(ref)
        if tree is None:
            return []
        return sorted(item.path for item in tree.traverse() if item.type == "blob")
