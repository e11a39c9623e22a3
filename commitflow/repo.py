#!/usr/bin/env python3

"""Git primitives bound to a single working copy.

A :class:`Repository` is constructed once per run and handed to every
component, so tests can point the workflow at a temporary repository or
replace the handle with a double.
"""

import logging
import os
from typing import List, Optional, Sequence, Tuple

from .shell import run_command

__all__ = [
    "Repository",
    "is_git_directory",
]

log = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


def is_git_directory(path: str) -> bool:
    """Check whether ``path`` itself holds git metadata.

    Unlike ``git rev-parse`` this does not walk up to parent directories;
    ``.git`` may be a directory or the file a linked worktree uses.
    """
    return os.path.exists(os.path.join(path, ".git"))


class Repository:
    """Handle on the working copy at ``path`` and its ``remote``."""

    def __init__(self, path: str, remote: str = DEFAULT_REMOTE) -> None:
        self.path = os.path.abspath(path)
        self.remote = remote

    def __repr__(self) -> str:
        return f"Repository({self.path!r}, remote={self.remote!r})"

    def remote_ref(self, branch: str) -> str:
        return f"{self.remote}/{branch}"

    async def git(self, *args: str, check: bool = True):
        return await run_command(["git", *args], cwd=self.path, check=check)

    async def current_branch(self) -> str:
        """Return the checked out branch name.

        Raises:
            ValueError: If HEAD is detached
            RuntimeError: If git fails
        """
        result = await self.git("branch", "--show-current")
        branch = result.stdout.strip()
        if not branch:
            raise ValueError(f"Not on a branch in {self.path}")
        return branch

    async def status(self) -> str:
        """Return the raw ``git status --porcelain=v1 -z`` output."""
        result = await self.git("status", "--porcelain=v1", "-z")
        return result.stdout

    async def fetch(self, branch: str) -> None:
        await self.git("fetch", self.remote, branch)

    async def diff_changed_files(self, ref_a: str, ref_b: str) -> List[str]:
        """List the paths whose content differs between two refs."""
        result = await self.git("diff", "--name-only", ref_a, ref_b)
        return [line for line in result.stdout.splitlines() if line.strip()]

    async def commits_behind(self, branch: str) -> int:
        """Count commits on the remote branch that ``branch`` does not have."""
        result = await self.git(
            "rev-list", "--count", f"{branch}..{self.remote_ref(branch)}"
        )
        return int(result.stdout.strip() or 0)

    async def stash_ref(self) -> str:
        result = await self.git("rev-parse", "-q", "--verify", "refs/stash", check=False)
        return result.stdout.strip()

    async def stash_save(self) -> bool:
        """Stash local changes, untracked files included.

        Returns:
            True if a new stash entry was created. Git creates none when
            there is nothing to save, and an older entry must not be
            mistaken for ours.
        """
        before = await self.stash_ref()
        await self.git("stash", "push", "--include-untracked")
        return await self.stash_ref() != before

    async def pull(self, branch: str) -> None:
        await self.git("pull", "--no-rebase", "--no-edit", self.remote, branch)

    async def stash_pop(self) -> Tuple[int, str]:
        """Restore the most recent stash entry.

        A conflicting pop exits non-zero, so the caller gets the exit code
        together with stdout and stderr joined, and decides what it means.
        """
        result = await self.git("stash", "pop", check=False)
        text = "\n".join(part for part in (result.stdout, result.stderr) if part)
        return result.returncode, text

    async def add_all(self) -> None:
        await self.git("add", "-A")

    async def commit(self, message: str, files: Optional[Sequence[str]] = None) -> None:
        args = ["commit", "-m", message]
        if files:
            args += ["--", *files]
        await self.git(*args)

    async def push(self, branch: str) -> None:
        await self.git("push", self.remote, branch)

    async def head_commit_hash(self, short: bool = True) -> str:
        cmd = ["rev-parse"]
        if short:
            cmd.append("--short")
        cmd.append("HEAD")
        result = await self.git(*cmd)
        return result.stdout.strip()
