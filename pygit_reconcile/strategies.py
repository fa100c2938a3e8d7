"""Reconciliation strategies: one class per divergence path."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pygit_reconcile.errors import (
    MergeConflictError,
    PushRejectedError,
    RebaseConflictError,
)
from pygit_reconcile.models import (
    DivergenceStatus,
    PullMode,
    ReconciliationOutcome,
    SyncContext,
    SyncOptions,
    SyncPath,
)
from pygit_reconcile.protocols import OutputHandler, VersionControlBackend

REBASE_HINTS = [
    "Resolve the conflicts, then run 'git rebase --continue'",
    "Or run 'git rebase --abort' to cancel the rebase",
    "Then run git-reconcile again.",
]

MERGE_HINTS = [
    "Resolve the conflicts, then run: git add . && git commit",
    "Then run git-reconcile again.",
]


class ReconcileStrategy(ABC):
    """Abstract strategy for reconciling one divergence path."""

    path: SyncPath
    requires_stash = True

    def __init__(self, backend: VersionControlBackend, output: OutputHandler, options: SyncOptions):
        """Initialize with a backend, output handler, and run options."""
        self.backend = backend
        self.output = output
        self.options = options

    def can_handle(self, status: DivergenceStatus) -> bool:
        """Return True if this strategy applies to the given divergence."""
        return status.path is self.path

    @abstractmethod
    def reconcile(self, context: SyncContext, status: DivergenceStatus) -> ReconciliationOutcome:
        """Perform the reconciliation. Raises a SyncError subclass on failure."""
        pass

    def _pull_mode(self) -> PullMode:
        return PullMode.REBASE if self.options.rebase else PullMode.MERGE

    def _push(self, context: SyncContext, force: bool = False) -> None:
        """Push the branch, raising PushRejectedError if the remote refuses."""
        result = self.backend.push(context.remote_name, context.branch, force=force)
        if not result.success:
            self.output.error(f"\u2717 Push failed: {result.reason}", indent=1)
            raise PushRejectedError(
                f"Push of {context.branch} to {context.remote_name} was rejected: {result.reason}",
                ["The remote may have moved on; run git-reconcile again."],
            )


class UpToDateStrategy(ReconcileStrategy):
    """Strategy for branches with nothing to push or pull."""

    path = SyncPath.UP_TO_DATE
    requires_stash = False

    def reconcile(self, context: SyncContext, status: DivergenceStatus) -> ReconciliationOutcome:
        """No-op."""
        self.output.success("\u2713 Already up to date! No synchronization needed.")
        return ReconciliationOutcome.UP_TO_DATE


class LocalOnlyStrategy(ReconcileStrategy):
    """Strategy for branches with unpushed commits and nothing to pull."""

    path = SyncPath.LOCAL_ONLY

    def reconcile(self, context: SyncContext, status: DivergenceStatus) -> ReconciliationOutcome:
        """Push local commits, forcing only when explicitly requested."""
        self.output.info(f"Only local changes found. Pushing {status.ahead} commit(s)...")
        if self.options.force:
            self.output.warning("\u26a0 Force pushing: this overwrites remote history!", indent=1)

        if self.options.dry_run:
            action = "force push" if self.options.force else "push"
            self.output.info(f"[DRY RUN] Would {action} {context.branch} to {context.remote_name}", indent=1)
            return ReconciliationOutcome.PUSHED

        self._push(context, force=self.options.force)
        self.output.success("\u2713 Successfully pushed local changes!", indent=1)
        return ReconciliationOutcome.PUSHED


class RemoteOnlyStrategy(ReconcileStrategy):
    """Strategy for branches that are behind remote."""

    path = SyncPath.REMOTE_ONLY

    def reconcile(self, context: SyncContext, status: DivergenceStatus) -> ReconciliationOutcome:
        """Pull remote commits with rebase or merge semantics."""
        mode = self._pull_mode()
        self.output.info(f"Only remote changes found. Pulling {status.behind} commit(s)...")

        if self.options.dry_run:
            action = "pull --rebase" if mode is PullMode.REBASE else "pull"
            self.output.info(f"[DRY RUN] Would {action} from {context.remote_ref}", indent=1)
            return ReconciliationOutcome.PULLED

        result = self.backend.pull(context.remote_name, context.branch, mode)
        if not result.success:
            self.output.error(f"\u2717 Pull failed: {result.reason}", indent=1)
            if mode is PullMode.REBASE:
                raise RebaseConflictError(f"Rebase onto {context.remote_ref} failed: {result.reason}", REBASE_HINTS)
            raise MergeConflictError(f"Pull from {context.remote_ref} failed: {result.reason}", MERGE_HINTS)

        self.output.success("\u2713 Successfully pulled remote changes!", indent=1)
        return ReconciliationOutcome.PULLED


class DivergedBranchStrategy(ReconcileStrategy):
    """Strategy for diverged branches (ahead and behind remote)."""

    path = SyncPath.DIVERGED

    def reconcile(self, context: SyncContext, status: DivergenceStatus) -> ReconciliationOutcome:
        """Integrate remote commits by rebase or merge, then push the result."""
        if self._pull_mode() is PullMode.REBASE:
            return self._rebase_and_push(context, status)
        return self._merge_and_push(context, status)

    def _rebase_and_push(self, context: SyncContext, status: DivergenceStatus) -> ReconciliationOutcome:
        self.output.info("Both local and remote changes found. Rebasing...")

        if self.options.dry_run:
            self.output.info(
                f"[DRY RUN] Would replay {status.ahead} commit(s) onto {context.remote_ref} and push",
                indent=1,
            )
            return ReconciliationOutcome.REBASED_AND_PUSHED

        result = self.backend.pull(context.remote_name, context.branch, PullMode.REBASE)
        if not result.success:
            self.output.error("\u2717 Rebase failed! Please resolve conflicts manually.", indent=1)
            raise RebaseConflictError(f"Rebase onto {context.remote_ref} failed: {result.reason}", REBASE_HINTS)
        self.output.success("\u2713 Successfully rebased remote changes!", indent=1)

        self.output.info("Pushing rebased changes...", indent=1)
        self._push(context)
        self.output.success("\u2713 Successfully pushed rebased changes!", indent=1)
        return ReconciliationOutcome.REBASED_AND_PUSHED

    def _merge_and_push(self, context: SyncContext, status: DivergenceStatus) -> ReconciliationOutcome:
        self.output.info("Both local and remote changes found. Merging...")

        if self.options.dry_run:
            self.output.info(f"[DRY RUN] Would merge {context.remote_ref} and push", indent=1)
            return ReconciliationOutcome.MERGED_AND_PUSHED

        result = self.backend.pull(context.remote_name, context.branch, PullMode.MERGE, no_edit=True)
        if not result.success:
            self.output.error("\u2717 Merge failed! Please resolve conflicts manually.", indent=1)
            raise MergeConflictError(f"Merge of {context.remote_ref} failed: {result.reason}", MERGE_HINTS)

        # A pull can exit cleanly and still leave unmerged paths behind
        conflicted = [entry.path for entry in self.backend.status_porcelain() if entry.is_conflict]
        if conflicted:
            self.output.error("\u2717 Merge conflicts detected!", indent=1)
            raise MergeConflictError(
                f"Merge of {context.remote_ref} left {len(conflicted)} conflicted path(s): "
                + ", ".join(conflicted),
                MERGE_HINTS,
                conflicted_paths=conflicted,
            )
        self.output.success("\u2713 Successfully merged remote changes!", indent=1)

        self.output.info("Pushing merged changes...", indent=1)
        self._push(context)
        self.output.success("\u2713 Successfully pushed merged changes!", indent=1)
        return ReconciliationOutcome.MERGED_AND_PUSHED
