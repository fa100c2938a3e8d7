"""Synchronizer: reconciles the current branch with its remote counterpart."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from datetime import datetime

from pygit_reconcile.errors import (
    DetachedHeadError,
    NetworkOrFetchError,
    NotARepositoryError,
    PushRejectedError,
    StashRestoreError,
    StashSaveError,
    SyncError,
)
from pygit_reconcile.models import (
    DivergenceStatus,
    ReconciliationOutcome,
    StashState,
    SyncContext,
    SyncOptions,
    SyncPath,
    SyncReport,
)
from pygit_reconcile.output import SECTION_WIDTH
from pygit_reconcile.protocols import OutputHandler, VersionControlBackend
from pygit_reconcile.strategies import (
    DivergedBranchStrategy,
    LocalOnlyStrategy,
    ReconcileStrategy,
    RemoteOnlyStrategy,
    UpToDateStrategy,
)


class Synchronizer:
    """Responsible for reconciling the checked-out branch of one working copy"""

    def __init__(
        self,
        backend: VersionControlBackend,
        output: OutputHandler,
        options: SyncOptions
    ):
        """Create a synchronizer for the working copy behind backend."""
        self.backend = backend
        self.output = output
        self.options = options
        self._logger = logging.getLogger(__name__)
        self._stash_label: str | None = None

        self.strategies: list[ReconcileStrategy] = [
            UpToDateStrategy(backend, output, options),
            LocalOnlyStrategy(backend, output, options),
            RemoteOnlyStrategy(backend, output, options),
            DivergedBranchStrategy(backend, output, options),
        ]

    def synchronize(self) -> SyncReport:
        """Fetch, classify divergence, and run the matching reconciliation."""
        context = self._resolve_context()
        self.output.debug(f"Remote: {context.remote_name}, pull mode: {'rebase' if self.options.rebase else 'merge'}")
        self.output.info(f"Starting git synchronization on branch: {context.branch}")

        self._fetch(context)

        if not self.backend.remote_branch_exists(context.remote_name, context.branch):
            return self._publish(context)

        status = self.divergence(context)
        self.output.info(
            f"Local branch is {status.ahead} commits ahead and {status.behind} commits behind remote"
        )
        strategy = self._select_strategy(status)
        self._logger.debug("Divergence %s -> %s", status, type(strategy).__name__)
        self.output.debug(f"{status.path.name} path, using {type(strategy).__name__}")

        if not strategy.requires_stash:
            outcome = strategy.reconcile(context, status)
            return self._report(context, status.path, outcome, status, StashState.NONE)

        with self.auto_stash(context) as stash_state:
            outcome = strategy.reconcile(context, status)
        return self._report(context, status.path, outcome, status, stash_state)

    def divergence(self, context: SyncContext) -> DivergenceStatus:
        """Count commits only on the local side (ahead) and only on the remote side (behind)."""
        return DivergenceStatus(
            ahead=self.backend.count_commits(f"{context.remote_ref}..HEAD"),
            behind=self.backend.count_commits(f"HEAD..{context.remote_ref}"),
        )

    @contextlib.contextmanager
    def auto_stash(self, context: SyncContext) -> Iterator[StashState]:
        """Stash local edits for the duration of the block and restore them exactly once.

        If the block raises, the stash is restored before the error propagates.
        A restore failure on that path is reported and attached to the original
        error rather than replacing it.
        """
        state = self.stash_if_dirty(context)
        try:
            yield state
        except BaseException as exc:
            try:
                self.restore_stash(state)
            except StashRestoreError as restore_error:
                self._logger.warning("Stash restore failed after %s: %s", type(exc).__name__, restore_error)
                if isinstance(exc, SyncError):
                    exc.stash_error = restore_error
            raise
        self.restore_stash(state)

    def stash_if_dirty(self, context: SyncContext) -> StashState:
        """Stash uncommitted and untracked changes, if there are any."""
        self._stash_label = None
        if not (self.backend.working_tree_dirty() or self.backend.untracked_files_exist()):
            return StashState.NONE

        self.output.warning("Found uncommitted changes or untracked files. Stashing them...")
        if self.options.dry_run:
            self.output.info("[DRY RUN] Would stash local changes and restore them afterwards", indent=1)
            return StashState.NONE

        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        label = f"auto-stash {timestamp} {context.branch}"
        result = self.backend.stash_push(label)
        if not result.success:
            self.output.error(f"\u2717 Failed to stash: {result.reason}", indent=1)
            raise StashSaveError(
                f"Could not stash local changes: {result.reason}",
                ["Commit or stash your changes manually, then run git-reconcile again."],
            )

        self._stash_label = label
        self.output.debug(f"Stash label: {label}")
        self.output.success(f"\u2713 Stashed changes: {label}", indent=1)
        return StashState.STASHED

    def restore_stash(self, state: StashState) -> None:
        """Pop the auto-stash back onto the working tree. No-op if nothing was stashed."""
        if state is StashState.NONE:
            return

        self.output.info("Restoring stashed changes...")
        result = self.backend.stash_pop()
        if result.success:
            self.output.success("\u2713 Stashed changes restored.", indent=1)
            return

        self._show_stash_conflict_help()
        raise StashRestoreError(
            f"Could not restore stashed changes ({self._stash_label}): {result.reason}",
            [
                "Your changes are still saved in the stash list.",
                "Inspect them with: git stash show -p stash@{0}",
                "Resolve conflicts after: git stash apply stash@{0}",
                "Then drop the entry with: git stash drop stash@{0}",
            ],
            label=self._stash_label,
        )

    def _resolve_context(self) -> SyncContext:
        if not self.backend.is_repository():
            raise NotARepositoryError(
                "Not a git repository! Please run this command from within a git repository."
            )
        branch = self.backend.current_branch()
        if not branch:
            raise DetachedHeadError(
                "HEAD is detached; check out a branch before synchronizing.",
                ["git switch <branch>"],
            )
        return SyncContext(branch=branch, remote_name=self.options.remote_name, options=self.options)

    def _fetch(self, context: SyncContext) -> None:
        if self.options.dry_run:
            self.output.info("[DRY RUN] Fetching remote (read-only) to analyze branch...", indent=1)
        else:
            self.output.info("Fetching latest changes from remote...")
        result = self.backend.fetch(context.remote_name)
        if not result.success:
            self.output.error(f"\u2717 Fetch failed: {result.reason}", indent=1)
            raise NetworkOrFetchError(f"Could not fetch from {context.remote_name}: {result.reason}")

    def _publish(self, context: SyncContext) -> SyncReport:
        """Push a branch with no remote counterpart and set its upstream."""
        self.output.warning(
            f"Remote branch {context.remote_ref} doesn't exist. Pushing current branch..."
        )
        if self.options.dry_run:
            self.output.info(f"[DRY RUN] Would push {context.branch} with upstream tracking", indent=1)
        else:
            result = self.backend.push(context.remote_name, context.branch, set_upstream=True)
            if not result.success:
                self.output.error(f"\u2717 Push failed: {result.reason}", indent=1)
                raise PushRejectedError(f"Could not publish {context.branch}: {result.reason}")
            self.output.success("\u2713 Branch pushed to remote successfully!", indent=1)
        return self._report(context, SyncPath.PUBLISH, ReconciliationOutcome.PUSHED, None, StashState.NONE)

    def _select_strategy(self, status: DivergenceStatus) -> ReconcileStrategy:
        for strategy in self.strategies:
            if strategy.can_handle(status):
                return strategy
        raise LookupError(f"No strategy handles divergence {status}")

    def _report(
        self,
        context: SyncContext,
        path: SyncPath,
        outcome: ReconciliationOutcome,
        status: DivergenceStatus | None,
        stash_state: StashState
    ) -> SyncReport:
        return SyncReport(
            branch=context.branch,
            remote_name=context.remote_name,
            path=path,
            outcome=outcome,
            divergence=status,
            stash_state=stash_state,
            stash_label=self._stash_label if stash_state is StashState.STASHED else None,
            dry_run=self.options.dry_run,
        )

    def _show_stash_conflict_help(self):
        """Print a banner after a failed stash pop."""
        self.output.error("")
        self.output.error("\u26a0\u26a0\u26a0 STASH CONFLICT DETECTED \u26a0\u26a0\u26a0")
        self.output.info("\u2501" * SECTION_WIDTH)
        self.output.info("The reconciliation ran but your stashed changes could not be reapplied.")
        self.output.info(f"  cd '{self.backend.path}'")
        self.output.info("\u2501" * SECTION_WIDTH)
