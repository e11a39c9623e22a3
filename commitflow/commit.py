#!/usr/bin/env python3

import logging
import textwrap
from typing import Optional, Sequence

from . import output
from .repo import Repository
from .status import RepoStatus

__all__ = ["commit", "push", "normalize_message"]

log = logging.getLogger(__name__)


def normalize_message(message: str) -> str:
    """Strip common leading indentation and surrounding blank lines."""
    return textwrap.dedent(message).strip("\n")


async def commit(
    repo: Repository,
    status: RepoStatus,
    message: str,
    files: Optional[Sequence[str]] = None,
) -> str:
    """Stage and commit pending changes.

    The whole working tree is staged when the status has working tree
    changes. With ``files`` the commit is limited to those paths, otherwise
    everything staged is committed.

    Args:
        repo: The repository handle
        status: The snapshot that decides whether to stage
        message: The commit message
        files: Optional paths to restrict the commit to

    Returns:
        The short hash of the new commit

    Raises:
        RuntimeError: If git fails to stage or commit
    """
    if status.has_working_tree_changes:
        await repo.add_all()

    message = normalize_message(message)
    log.debug(f"Committing {list(files) if files else 'all staged changes'}")
    await repo.commit(message, files)

    commit_hash = await repo.head_commit_hash()
    output.success(f"Committed {commit_hash}: {message}")
    return commit_hash


async def push(repo: Repository, branch: str) -> None:
    """Push ``branch`` to the repository's remote. Failures are not retried."""
    await repo.push(branch)
    output.success(f"Pushed {branch} to {repo.remote_ref(branch)}")
