"""
pygit-reconcile: Git Branch Reconciliation Tool

Synchronizes the checked-out branch of a git working copy with its remote
counterpart, pushing, pulling, merging, or rebasing as needed while keeping
uncommitted work safe in an auto-stash.
"""

from colorama import init as colorama_init

colorama_init(autoreset=True)

__version__ = "1.0.0"

# Re-export public API so `from pygit_reconcile import X` keeps working.
from pygit_reconcile.cli import main  # noqa: E402
from pygit_reconcile.config import create_argument_parser, load_config_file  # noqa: E402
from pygit_reconcile.errors import (  # noqa: E402
    DetachedHeadError,
    DivergenceError,
    MergeConflictError,
    NetworkOrFetchError,
    NotARepositoryError,
    PullFailedError,
    PushRejectedError,
    RebaseConflictError,
    StashRestoreError,
    StashSaveError,
    SyncError,
    UnknownOptionError,
)
from pygit_reconcile.models import (  # noqa: E402
    DivergenceStatus,
    OperationResult,
    OperationType,
    PullMode,
    ReconciliationOutcome,
    StashState,
    StatusEntry,
    SyncContext,
    SyncOptions,
    SyncPath,
    SyncReport,
)
from pygit_reconcile.output import (  # noqa: E402
    SECTION_WIDTH,
    BufferedOutputHandler,
    ConsoleOutputHandler,
    NullOutputHandler,
)
from pygit_reconcile.protocols import OutputHandler, VersionControlBackend  # noqa: E402
from pygit_reconcile.reporter import SummaryReporter  # noqa: E402
from pygit_reconcile.repository import GitPythonBackend  # noqa: E402
from pygit_reconcile.strategies import (  # noqa: E402
    DivergedBranchStrategy,
    LocalOnlyStrategy,
    ReconcileStrategy,
    RemoteOnlyStrategy,
    UpToDateStrategy,
)
from pygit_reconcile.synchronizer import Synchronizer  # noqa: E402

__all__ = [
    "__version__",
    # Models
    "DivergenceStatus",
    "OperationResult",
    "OperationType",
    "PullMode",
    "ReconciliationOutcome",
    "StashState",
    "StatusEntry",
    "SyncContext",
    "SyncOptions",
    "SyncPath",
    "SyncReport",
    # Errors
    "DetachedHeadError",
    "DivergenceError",
    "MergeConflictError",
    "NetworkOrFetchError",
    "NotARepositoryError",
    "PullFailedError",
    "PushRejectedError",
    "RebaseConflictError",
    "StashRestoreError",
    "StashSaveError",
    "SyncError",
    "UnknownOptionError",
    # Protocols
    "OutputHandler",
    "VersionControlBackend",
    # Implementations
    "GitPythonBackend",
    "BufferedOutputHandler",
    "ConsoleOutputHandler",
    "NullOutputHandler",
    "SECTION_WIDTH",
    # Strategies
    "DivergedBranchStrategy",
    "LocalOnlyStrategy",
    "ReconcileStrategy",
    "RemoteOnlyStrategy",
    "UpToDateStrategy",
    # Services
    "Synchronizer",
    "SummaryReporter",
    # Config / CLI
    "create_argument_parser",
    "load_config_file",
    "main",
]
