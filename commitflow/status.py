#!/usr/bin/env python3

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Set, Tuple

from .repo import Repository

__all__ = [
    "RepoStatus",
    "inspect",
    "parse_porcelain_status",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepoStatus:
    """Snapshot of pending changes, taken once per run."""

    working_tree_files: FrozenSet[str] = field(default_factory=frozenset)
    staged_files: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def has_working_tree_changes(self) -> bool:
        return bool(self.working_tree_files)

    @property
    def has_staged_changes(self) -> bool:
        return bool(self.staged_files)

    @property
    def has_pending_changes(self) -> bool:
        return self.has_working_tree_changes or self.has_staged_changes

    def after_unshelve(self) -> "RepoStatus":
        """Describe the tree after ``git stash pop``.

        A plain pop does not restore the index, so every staged path comes
        back as a working-tree change.
        """
        return RepoStatus(
            working_tree_files=self.working_tree_files | self.staged_files,
            staged_files=frozenset(),
        )


def parse_porcelain_status(output: str) -> Tuple[FrozenSet[str], FrozenSet[str]]:
    """Split ``git status --porcelain=v1 -z`` output into changed paths.

    Each entry is ``XY <path>``: ``X`` is the index column and ``Y`` the
    working tree column. Renames and copies are followed by their source
    path as a separate entry, which is skipped.

    Returns:
        A tuple of (working tree paths, staged paths)
    """
    working_tree: Set[str] = set()
    staged: Set[str] = set()

    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        index_code, worktree_code, path = entry[0], entry[1], entry[3:]
        if index_code.strip():
            staged.add(path)
        if worktree_code.strip():
            working_tree.add(path)
        if index_code in "RC":
            i += 1

    return frozenset(working_tree), frozenset(staged)


async def inspect(repo: Repository) -> RepoStatus:
    working_tree, staged = parse_porcelain_status(await repo.status())
    log.debug(
        f"Status of {repo.path}: {len(working_tree)} working tree, {len(staged)} staged"
    )
    return RepoStatus(working_tree_files=working_tree, staged_files=staged)
