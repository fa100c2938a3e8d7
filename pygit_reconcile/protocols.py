"""Protocols for dependency injection."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pygit_reconcile.models import OperationResult, PullMode, StatusEntry


class VersionControlBackend(Protocol):
    """Protocol for the git operations the synchronizer consumes.

    Mutating operations report failure through ``OperationResult`` instead of
    raising, so callers decide which error kind a failure maps to.
    """

    def is_repository(self) -> bool: ...
    def current_branch(self) -> str: ...
    def fetch(self, remote: str) -> OperationResult: ...
    def remote_branch_exists(self, remote: str, branch: str) -> bool: ...
    def count_commits(self, range_expr: str) -> int: ...
    def push(self, remote: str, branch: str, set_upstream: bool = False,
             force: bool = False) -> OperationResult: ...
    def pull(self, remote: str, branch: str, mode: PullMode,
             no_edit: bool = False) -> OperationResult: ...
    def working_tree_dirty(self) -> bool: ...
    def untracked_files_exist(self) -> bool: ...
    def stash_push(self, label: str) -> OperationResult: ...
    def stash_pop(self) -> OperationResult: ...
    def status_porcelain(self) -> list[StatusEntry]: ...

    @property
    def path(self) -> Path: ...


class OutputHandler(Protocol):
    """Protocol for handling output"""

    def info(self, message: str, indent: int = 0) -> None: ...
    def success(self, message: str, indent: int = 0) -> None: ...
    def warning(self, message: str, indent: int = 0) -> None: ...
    def error(self, message: str, indent: int = 0) -> None: ...
    def section(self, title: str) -> None: ...
    def debug(self, message: str) -> None: ...
