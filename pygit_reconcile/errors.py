"""Error hierarchy for reconciliation runs.

Every error is terminal for the current run. The CLI prints the message and
any hint lines, then exits with status 1.
"""

from __future__ import annotations

from pygit_reconcile.models import ReconciliationOutcome


class SyncError(Exception):
    """Base class for all fatal reconciliation errors."""

    outcome = ReconciliationOutcome.OPERATION_FAILED

    def __init__(self, message: str, hints: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.hints = hints or []
        # Set when restoring the auto-stash also failed while handling this error
        self.stash_error: StashRestoreError | None = None

    def to_dict(self) -> dict:
        """Serialize to a plain dict for JSON output."""
        return {
            'error': self.message,
            'type': type(self).__name__,
            'outcome': self.outcome.name,
            'hints': list(self.hints),
            'stash_error': self.stash_error.message if self.stash_error else None,
        }


class NotARepositoryError(SyncError):
    """Raised when the working directory is not inside a git working copy."""


class DetachedHeadError(SyncError):
    """Raised when HEAD is not on a branch, so there is nothing to reconcile."""


class NetworkOrFetchError(SyncError):
    """Raised when fetching from the remote fails."""


class DivergenceError(SyncError):
    """Raised when ahead/behind counts cannot be computed for the branch."""


class PushRejectedError(SyncError):
    """Raised when the remote refuses a push."""


class PullFailedError(SyncError):
    """Raised when integrating remote commits fails."""

    outcome = ReconciliationOutcome.CONFLICT_DETECTED


class RebaseConflictError(PullFailedError):
    """Raised when replaying local commits onto the remote tip stops on a conflict."""


class MergeConflictError(PullFailedError):
    """Raised when a merge fails or leaves unmerged paths behind."""

    def __init__(self, message: str, hints: list[str] | None = None,
                 conflicted_paths: list[str] | None = None):
        super().__init__(message, hints)
        self.conflicted_paths = conflicted_paths or []


class StashSaveError(SyncError):
    """Raised when local changes could not be stashed before reconciling."""


class StashRestoreError(SyncError):
    """Raised when the auto-stash could not be popped back onto the working tree."""

    def __init__(self, message: str, hints: list[str] | None = None, label: str | None = None):
        super().__init__(message, hints)
        self.label = label


class UnknownOptionError(SyncError):
    """Raised for unrecognized command-line arguments."""
