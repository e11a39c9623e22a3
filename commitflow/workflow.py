#!/usr/bin/env python3

"""The commit workflow: check, sync, prompt, commit, push.

Each step is awaited before the next starts and none is retried. The run
ends either in DONE or in ABORTED with a reason; backend failures are not
caught here and propagate to the caller as RuntimeError.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from . import output
from .commit import commit, push
from .message import CommitAnswer, CommitCatalog, build_prompt, compose
from .repo import Repository
from .status import inspect
from .sync import ConflictDetector, SyncOutcome, detect_conflict, reconcile

__all__ = [
    "ABORT_CONFLICT",
    "ABORT_FETCH_UNAVAILABLE",
    "ABORT_NO_PENDING_CHANGES",
    "WorkflowResult",
    "WorkflowState",
    "run_workflow",
]

log = logging.getLogger(__name__)

ABORT_NO_PENDING_CHANGES = "no-pending-changes"
ABORT_CONFLICT = "conflict"
ABORT_FETCH_UNAVAILABLE = "fetch-unavailable"

AnswerCollector = Callable[..., CommitAnswer]


class WorkflowState(enum.Enum):
    START = "start"
    STATUS_CHECKED = "status-checked"
    SYNC_CHECKED = "sync-checked"
    PROMPTED = "prompted"
    COMMITTED = "committed"
    PUSHED = "pushed"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class WorkflowResult:
    states: List[WorkflowState] = field(default_factory=lambda: [WorkflowState.START])
    abort_reason: Optional[str] = None
    sync_outcome: Optional[SyncOutcome] = None
    commit_message: Optional[str] = None
    commit_hash: Optional[str] = None

    @property
    def state(self) -> WorkflowState:
        return self.states[-1]

    @property
    def exit_code(self) -> int:
        return 1 if self.state is WorkflowState.ABORTED else 0

    def advance(self, state: WorkflowState) -> None:
        if state in self.states:
            raise RuntimeError(f"Workflow state {state.value} entered twice")
        self.states.append(state)

    def abort(self, reason: str) -> "WorkflowResult":
        self.abort_reason = reason
        self.advance(WorkflowState.ABORTED)
        return self


async def run_workflow(
    repo: Repository,
    catalog: CommitCatalog,
    collect_answer: AnswerCollector,
    files: Optional[Sequence[str]] = None,
    on_fetch_unavailable: str = "continue",
    conflict_detector: ConflictDetector = detect_conflict,
) -> WorkflowResult:
    """Run one commit workflow against ``repo``.

    Args:
        repo: The repository handle
        catalog: The commit types offered in the prompt
        collect_answer: Called with the prompt spec; returns the user's answer
        files: Optional paths to restrict the commit to
        on_fetch_unavailable: ``"continue"`` or ``"abort"`` when the remote
            branch cannot be fetched
        conflict_detector: Strategy used to spot a conflicting stash pop

    Returns:
        The result, whose ``exit_code`` is 0 for DONE and 1 for ABORTED

    Raises:
        RuntimeError: If a git command fails
    """
    result = WorkflowResult()

    status = await inspect(repo)
    result.advance(WorkflowState.STATUS_CHECKED)
    if not status.has_pending_changes:
        output.warn("Nothing to commit: the working tree and the index are clean")
        return result.abort(ABORT_NO_PENDING_CHANGES)

    branch = await repo.current_branch()
    outcome = await reconcile(repo, branch, status, detect_conflict=conflict_detector)
    result.sync_outcome = outcome
    result.advance(WorkflowState.SYNC_CHECKED)

    if outcome is SyncOutcome.CONFLICT:
        output.warn(
            "Your local changes conflict with the remote. Resolve the conflicts "
            "(the stash entry is kept), then commit again."
        )
        return result.abort(ABORT_CONFLICT)
    if outcome is SyncOutcome.FETCH_UNAVAILABLE:
        if on_fetch_unavailable == "abort":
            output.warn(
                f"Could not fetch {repo.remote_ref(branch)}; not committing."
            )
            return result.abort(ABORT_FETCH_UNAVAILABLE)
        output.warn(
            f"Could not fetch {repo.remote_ref(branch)}; committing without syncing."
        )
    elif outcome is SyncOutcome.UPDATED:
        output.success(f"Updated {branch} from {repo.remote_ref(branch)}")
        status = status.after_unshelve()
    else:
        output.info(f"{branch} is up to date with {repo.remote_ref(branch)}")

    answer = collect_answer(build_prompt(catalog))
    result.advance(WorkflowState.PROMPTED)
    message = compose(answer, catalog)
    result.commit_message = message

    result.commit_hash = await commit(repo, status, message, files)
    result.advance(WorkflowState.COMMITTED)

    await push(repo, branch)
    result.advance(WorkflowState.PUSHED)
    result.advance(WorkflowState.DONE)
    log.info(f"Workflow finished: {result.commit_hash} pushed to {repo.remote_ref(branch)}")
    return result
