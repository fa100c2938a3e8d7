"""Domain models: enums, dataclasses, and configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any

CONFLICT_CODES = frozenset({'UU', 'AA', 'DD', 'AU', 'UA', 'DU', 'UD'})


class SyncPath(Enum):
    """Relationship between the local branch and its remote counterpart"""
    PUBLISH = auto()
    UP_TO_DATE = auto()
    LOCAL_ONLY = auto()
    REMOTE_ONLY = auto()
    DIVERGED = auto()


class StashState(Enum):
    """Whether an auto-stash was created for this run"""
    NONE = auto()
    STASHED = auto()


class ReconciliationOutcome(Enum):
    """Terminal result of one run"""
    UP_TO_DATE = auto()
    PUSHED = auto()
    PULLED = auto()
    REBASED_AND_PUSHED = auto()
    MERGED_AND_PUSHED = auto()
    CONFLICT_DETECTED = auto()
    OPERATION_FAILED = auto()


class PullMode(Enum):
    """How remote commits are integrated by a pull"""
    MERGE = auto()
    REBASE = auto()


class OperationType(Enum):
    """Types of git operations"""
    FETCH = auto()
    PUSH = auto()
    REBASE = auto()
    MERGE = auto()
    STASH = auto()


@dataclass(frozen=True)
class SyncOptions:
    """Configuration for a single reconciliation run"""
    force: bool = False
    rebase: bool = False
    remote_name: str = 'origin'
    dry_run: bool = False
    verbose: bool = False
    json_output: bool = False


@dataclass(frozen=True)
class SyncContext:
    """Branch, remote and options resolved at the start of a run"""
    branch: str
    remote_name: str
    options: SyncOptions = field(default_factory=SyncOptions)

    @property
    def remote_ref(self) -> str:
        """Remote-tracking ref for the branch (e.g. 'origin/main')."""
        return f"{self.remote_name}/{self.branch}"


@dataclass(frozen=True)
class DivergenceStatus:
    """Commit counts of the local branch relative to its remote counterpart"""
    ahead: int = 0
    behind: int = 0

    def __post_init__(self):
        if self.ahead < 0 or self.behind < 0:
            raise ValueError(f"Commit counts must be non-negative, got ahead={self.ahead}, behind={self.behind}")

    @property
    def path(self) -> SyncPath:
        """Classify the divergence into the reconciliation path to take."""
        if self.ahead == 0 and self.behind == 0:
            return SyncPath.UP_TO_DATE
        if self.behind == 0:
            return SyncPath.LOCAL_ONLY
        if self.ahead == 0:
            return SyncPath.REMOTE_ONLY
        return SyncPath.DIVERGED

    def __str__(self) -> str:
        return f"{self.ahead} ahead, {self.behind} behind"


@dataclass(frozen=True)
class OperationResult:
    """Result of a single git operation"""
    success: bool
    operation: OperationType
    message: str
    error: Exception | None = None

    @property
    def reason(self) -> str:
        """Most specific diagnostic available: git's stderr, the error, or the message."""
        if self.error is None:
            return self.message
        stderr = getattr(self.error, 'stderr', None)
        if isinstance(stderr, str) and stderr.strip():
            # GitCommandError wraps stderr as "\n  stderr: '...'"
            return stderr.strip().removeprefix("stderr:").strip().strip("'").strip()
        return str(self.error) or self.message


@dataclass(frozen=True)
class StatusEntry:
    """One line of `git status --porcelain`"""
    code: str
    path: str

    @property
    def is_conflict(self) -> bool:
        """True for unmerged paths (both modified, both added, both deleted...)."""
        return self.code in CONFLICT_CODES

    @classmethod
    def parse(cls, line: str) -> StatusEntry:
        """Parse a porcelain v1 line such as 'UU src/app.py'."""
        return cls(code=line[:2], path=line[3:])


@dataclass(frozen=True)
class SyncReport:
    """Immutable record of a completed run"""
    branch: str
    remote_name: str
    path: SyncPath
    outcome: ReconciliationOutcome
    divergence: DivergenceStatus | None = None
    stash_state: StashState = StashState.NONE
    stash_label: str | None = None
    dry_run: bool = False
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            'branch': self.branch,
            'remote': self.remote_name,
            'path': self.path.name,
            'outcome': self.outcome.name,
            'ahead': self.divergence.ahead if self.divergence else None,
            'behind': self.divergence.behind if self.divergence else None,
            'stashed': self.stash_state is StashState.STASHED,
            'stash_label': self.stash_label,
            'dry_run': self.dry_run,
            'timestamp': self.timestamp.isoformat(),
        }
