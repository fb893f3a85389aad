"""
Change classification for the paths git reports.

Git's ``--name-status`` letters are mapped onto the four change kinds the diff
exposes. Rename candidates are resolved deterministically: for one new path
the highest similarity wins and an exact tie goes to the smallest old path.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from app.models.diff import ChangeKind, FileDiff


@dataclass(frozen=True)
class ChangedPath:
    """One entry of ``git diff --name-status``."""

    status: str
    path: str
    old_path: Optional[str] = None
    similarity: Optional[int] = None

    @property
    def is_rename(self) -> bool:
        return self.status.startswith("R") and self.old_path is not None


_KIND_BY_STATUS = {
    "A": ChangeKind.ADDED,
    "C": ChangeKind.ADDED,
    "D": ChangeKind.DELETED,
}


def _rename_rank(candidate: ChangedPath):
    return (-(candidate.similarity or 0), candidate.old_path)


def classify(changed_paths: List[ChangedPath]) -> List[FileDiff]:
    """
    Build FileDiff skeletons (no lines yet) for the changed paths.

    Args:
        changed_paths: Entries reported by the git service

    Returns:
        List[FileDiff]: One skeleton per path, sorted by path
    """
    renames: Dict[str, List[ChangedPath]] = {}
    others: Dict[str, ChangedPath] = {}
    for entry in changed_paths:
        if entry.is_rename:
            renames.setdefault(entry.path, []).append(entry)
        else:
            others.setdefault(entry.path, entry)

    skeletons: Dict[str, FileDiff] = {}
    consumed: Set[str] = set()
    losing_old_paths: Set[str] = set()

    # Strongest pairs claim their old paths first
    best_per_path = [sorted(candidates, key=_rename_rank) for candidates in renames.values()]
    best_per_path.sort(key=lambda ordered: (_rename_rank(ordered[0]), ordered[0].path))

    for ordered in best_per_path:
        chosen = next((c for c in ordered if c.old_path not in consumed), None)
        for candidate in ordered:
            if candidate is not chosen:
                losing_old_paths.add(candidate.old_path)
        if chosen is None:
            skeletons[ordered[0].path] = FileDiff(
                path=ordered[0].path, change_kind=ChangeKind.ADDED
            )
            continue
        consumed.add(chosen.old_path)
        skeletons[chosen.path] = FileDiff(
            path=chosen.path,
            old_path=chosen.old_path,
            change_kind=ChangeKind.RENAMED,
        )

    for path, entry in others.items():
        if path in skeletons:
            continue
        kind = _KIND_BY_STATUS.get(entry.status[:1], ChangeKind.MODIFIED)
        skeletons[path] = FileDiff(path=path, change_kind=kind)

    for old_path in losing_old_paths - consumed:
        if old_path not in skeletons:
            skeletons[old_path] = FileDiff(path=old_path, change_kind=ChangeKind.DELETED)

    return [skeletons[path] for path in sorted(skeletons)]
