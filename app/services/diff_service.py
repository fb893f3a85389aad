"""Diff service module.

This module assembles a full :class:`DiffResult` for a comparison: it resolves
the comparison to two refs, lists and classifies the changed files, reads both
versions of each file and runs the line differ on them. Every call rebuilds the
result from scratch.
"""

from app.core.exceptions import BlobReadError
from app.core.logging_config import get_logger
from app.diff.blob_resolver import ABSENT, Blob, BlobResolver
from app.diff.file_classifier import classify
from app.diff.line_differ import diff, trailing_newline_changed
from app.models.comparison import Comparison, ComparisonType
from app.models.diff import ChangeKind, DiffResult, DiffSummary, FileDiff
from app.services.git_service import (
    EMPTY_TREE_SHA,
    INDEX_REF,
    WORKTREE_REF,
    DiffTarget,
    GitService,
)

logger = get_logger(__name__)


class DiffService:
    """Computes diffs for one repository."""

    def __init__(self, git_service: GitService):
        self._git = git_service
        self._blobs = BlobResolver(git_service)

    def repository_path(self) -> str:
        return self._git.repository_root()

    def resolve_target(self, comparison: Comparison) -> DiffTarget:
        """
        Map a comparison onto the (old, new) refs to diff.

        Raises:
            MalformedComparisonError: If the comparison is invalid
            RefResolutionError: If any ref in it cannot be resolved
        """
        comparison.validate_spec()

        match comparison.type:
            case ComparisonType.STAGED:
                base = "HEAD" if self._git.has_head() else EMPTY_TREE_SHA
                return DiffTarget(old_ref=base, new_ref=INDEX_REF)
            case ComparisonType.UNSTAGED:
                return DiffTarget(old_ref=INDEX_REF, new_ref=WORKTREE_REF)
            case ComparisonType.REFS:
                return DiffTarget(
                    old_ref=self._git.resolve_ref(comparison.base.strip()),
                    new_ref=self._git.resolve_ref(comparison.head.strip()),
                )
            case ComparisonType.COMMITS:
                shas = self._git.order_commits(
                    [self._git.resolve_ref(sha.strip()) for sha in comparison.commits]
                )
                return DiffTarget(old_ref=self._git.parent_of(shas[0]), new_ref=shas[-1])

    def compute_diff(self, comparison: Comparison) -> DiffResult:
        """
        Compute the diff for ``comparison``.

        Per-file read failures are embedded as error markers; anything that
        makes the whole comparison meaningless raises instead.

        Args:
            comparison: What to compare

        Returns:
            DiffResult: Files sorted by path with summary and repository info

        Raises:
            MalformedComparisonError: If the comparison is invalid
            RefResolutionError: If a ref cannot be resolved
        """
        target = self.resolve_target(comparison)
        logger.debug(
            f"Computing {comparison.describe()} diff: {target.old_ref} -> {target.new_ref}"
        )

        skeletons = classify(self._git.list_changed_paths(target))
        files = [self._populate(skeleton, target) for skeleton in skeletons]
        files.sort(key=lambda f: f.path)

        result = DiffResult(
            files=files,
            summary=DiffSummary.from_files(files),
            repository=self._git.repository_info(),
        )
        logger.info(
            f"Diff {comparison.describe()}: {result.summary.total_files} files, "
            f"+{result.summary.total_additions} -{result.summary.total_deletions}"
        )
        return result

    def _populate(self, skeleton: FileDiff, target: DiffTarget) -> FileDiff:
        try:
            old_blob, new_blob = self._read_pair(skeleton, target)
        except BlobReadError as e:
            logger.warning(
                f"Could not diff {skeleton.path}: {e.message}",
                extra={"file_path": skeleton.path, "ref": e.ref},
            )
            return skeleton.as_error(e.message)

        if old_blob.is_binary or new_blob.is_binary:
            return skeleton.as_binary()
        return skeleton.with_lines(
            diff(old_blob.content, new_blob.content),
            eol_changed=trailing_newline_changed(old_blob.content, new_blob.content),
        )

    def _read_pair(self, skeleton: FileDiff, target: DiffTarget) -> tuple[Blob, Blob]:
        old_path = skeleton.old_path or skeleton.path
        old_blob = (
            ABSENT
            if skeleton.change_kind is ChangeKind.ADDED
            else self._blobs.resolve(target.old_ref, old_path)
        )
        new_blob = (
            ABSENT
            if skeleton.change_kind is ChangeKind.DELETED
            else self._blobs.resolve(target.new_ref, skeleton.path)
        )
        return old_blob, new_blob
