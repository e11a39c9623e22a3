#!/usr/bin/env python3

"""Bring the local branch level with its remote before committing.

The cycle is fetch, compare, then stash, pull and pop the stash when the
remote has moved. A conflicting pop is reported and left for the user:
conflict markers stay in the files and the stash entry is kept.
"""

import enum
import logging
from typing import Callable, Optional

from .repo import Repository
from .status import RepoStatus

__all__ = [
    "CONFLICT_MARKER",
    "ConflictDetector",
    "SyncOutcome",
    "detect_conflict",
    "reconcile",
]

log = logging.getLogger(__name__)

CONFLICT_MARKER = "CONFLICT"

ConflictDetector = Callable[[str], bool]


class SyncOutcome(enum.Enum):
    UP_TO_DATE = "up-to-date"
    UPDATED = "updated"
    CONFLICT = "conflict"
    FETCH_UNAVAILABLE = "fetch-unavailable"


def detect_conflict(result: str) -> bool:
    """Return True if stash pop output reports a merge conflict."""
    return CONFLICT_MARKER in result


async def reconcile(
    repo: Repository,
    branch: str,
    status: Optional[RepoStatus] = None,
    detect_conflict: ConflictDetector = detect_conflict,
) -> SyncOutcome:
    """Reconcile ``branch`` with its counterpart on the repository's remote.

    Local changes, untracked files included, are stashed around the pull
    only when the remote has commits the branch lacks. Only a stash entry
    created here is popped; older entries are left alone.

    Args:
        repo: The repository handle
        branch: The local branch to reconcile
        status: Snapshot of local changes; when it shows none, the remote
            changes are pulled without the stash cycle
        detect_conflict: Strategy deciding whether stash pop output is a conflict

    Returns:
        The sync outcome. A failed fetch is returned as FETCH_UNAVAILABLE
        rather than raised; the caller decides whether to go on.

    Raises:
        RuntimeError: If diff, stash, pull or a non-conflicting stash pop fails
    """
    remote_ref = repo.remote_ref(branch)
    try:
        await repo.fetch(branch)
    except RuntimeError as e:
        log.warning(f"Could not fetch {remote_ref}, skipping sync: {e}")
        return SyncOutcome.FETCH_UNAVAILABLE

    changed = await repo.diff_changed_files(branch, remote_ref)
    if not changed:
        log.info(f"{branch} has no differences with {remote_ref}")
        return SyncOutcome.UP_TO_DATE

    log.info(f"{len(changed)} file(s) differ between {branch} and {remote_ref}")

    # differences from unpushed local commits alone leave nothing to pull
    if await repo.commits_behind(branch) == 0:
        log.info(f"{branch} is not behind {remote_ref}")
        return SyncOutcome.UP_TO_DATE

    if status is not None and not status.has_pending_changes:
        await repo.pull(branch)
        return SyncOutcome.UP_TO_DATE

    stashed = await repo.stash_save()
    await repo.pull(branch)
    if not stashed:
        return SyncOutcome.UPDATED
    returncode, result = await repo.stash_pop()

    if detect_conflict(result):
        log.warning(f"Restoring local changes on {branch} conflicted:\n{result}")
        return SyncOutcome.CONFLICT
    if returncode != 0:
        raise RuntimeError(
            f"git stash pop failed with exit code {returncode}:\n{result}"
        )
    return SyncOutcome.UPDATED
