"""SummaryReporter: banners and the final outcome report."""

from __future__ import annotations

from pygit_reconcile.errors import SyncError
from pygit_reconcile.models import ReconciliationOutcome, StashState, SyncReport
from pygit_reconcile.protocols import OutputHandler

OUTCOME_MESSAGES = {
    ReconciliationOutcome.UP_TO_DATE: "Already up to date",
    ReconciliationOutcome.PUSHED: "Local commits pushed to remote",
    ReconciliationOutcome.PULLED: "Remote commits pulled",
    ReconciliationOutcome.REBASED_AND_PUSHED: "Rebased onto remote and pushed",
    ReconciliationOutcome.MERGED_AND_PUSHED: "Merged remote changes and pushed",
    ReconciliationOutcome.CONFLICT_DETECTED: "Conflicts need manual resolution",
    ReconciliationOutcome.OPERATION_FAILED: "Synchronization failed",
}


class SummaryReporter:
    """Generates and displays summary reports"""

    def __init__(self, output: OutputHandler):
        """Create a reporter that writes to the given output handler."""
        self.output = output

    def print_header(self):
        """Print the opening banner."""
        self.output.section("Git Synchronization")
        self.output.info("")

    def print_summary(self, report: SyncReport):
        """Print the outcome of a completed run."""
        self.output.info("")
        target = f"{report.branch} \u2192 {report.remote_name}/{report.branch}"
        self.output.success(f"\u2713 {OUTCOME_MESSAGES[report.outcome]} ({target})")
        if report.divergence is not None:
            self.output.info(f"Before sync: {report.divergence}", indent=1)
        if report.stash_state is StashState.STASHED:
            self.output.info(f"Local changes were stashed and restored ({report.stash_label})", indent=1)
        if report.dry_run:
            self.output.info("")
            self.output.info("\U0001f50d This was a DRY RUN - nothing was changed")
        self.output.info("")
        self.output.section("Synchronization Complete")

    def print_failure(self, error: SyncError):
        """Print a fatal error with its remediation hints."""
        self.output.info("")
        self.output.error(f"\u2717 {error.message}")
        for hint in error.hints:
            self.output.info(hint, indent=1)
        if error.stash_error is not None:
            self.output.error(f"\u26a0 {error.stash_error.message}")
            for hint in error.stash_error.hints:
                self.output.info(hint, indent=1)
        self.output.info("")
        self.output.section(OUTCOME_MESSAGES[error.outcome])
