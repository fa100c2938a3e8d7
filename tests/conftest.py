"""Shared fixtures: an in-memory stand-in for the git backend."""

from pathlib import Path

import pytest

from pygit_reconcile import OperationResult, OperationType, PullMode, StatusEntry


class FakeBackend:
    """Fake backend that simulates a working copy and its remote.

    Successful pushes and pulls update the ahead/behind counts the way git
    would, so a second run observes the reconciled state.
    """

    def __init__(self, *, ahead: int = 0, behind: int = 0, dirty: bool = False,
                 untracked: bool = False, remote_exists: bool = True, branch: str = "main"):
        self._path = Path("/tmp/fake-repo")
        self.repository = True
        self.branch = branch
        self.remote_exists = remote_exists
        self.ahead = ahead
        self.behind = behind
        self.dirty = dirty
        self.untracked = untracked
        self.fetch_success = True
        self.push_success = True
        self.pull_success = True
        self.stash_push_success = True
        self.stash_pop_success = True
        self.status_entries: list[StatusEntry] = []
        self.stash: list[tuple[str, bool, bool]] = []
        self.calls: list[tuple] = []

    @property
    def path(self) -> Path:
        return self._path

    def is_repository(self) -> bool:
        self.calls.append(("is_repository",))
        return self.repository

    def current_branch(self) -> str:
        self.calls.append(("current_branch",))
        return self.branch

    def fetch(self, remote: str) -> OperationResult:
        self.calls.append(("fetch", remote))
        if self.fetch_success:
            return OperationResult(True, OperationType.FETCH, "Fetched")
        return OperationResult(False, OperationType.FETCH, "Fetch failed")

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        self.calls.append(("remote_branch_exists", remote, branch))
        return self.remote_exists

    def count_commits(self, range_expr: str) -> int:
        self.calls.append(("count_commits", range_expr))
        return self.ahead if range_expr.endswith("..HEAD") else self.behind

    def push(self, remote: str, branch: str, set_upstream: bool = False,
             force: bool = False) -> OperationResult:
        self.calls.append(("push", remote, branch, set_upstream, force))
        if not self.push_success:
            return OperationResult(False, OperationType.PUSH, "Push failed")
        if self.behind and not force:
            return OperationResult(False, OperationType.PUSH, "non-fast-forward")
        self.remote_exists = True
        self.ahead = self.behind = 0
        return OperationResult(True, OperationType.PUSH, "Pushed")

    def pull(self, remote: str, branch: str, mode: PullMode,
             no_edit: bool = False) -> OperationResult:
        self.calls.append(("pull", remote, branch, mode, no_edit))
        op = OperationType.REBASE if mode is PullMode.REBASE else OperationType.MERGE
        if not self.pull_success:
            return OperationResult(False, op, "Pull failed")
        if mode is PullMode.MERGE and self.ahead:
            self.ahead += 1  # merge commit
        self.behind = 0
        return OperationResult(True, op, "Pulled")

    def working_tree_dirty(self) -> bool:
        return self.dirty

    def untracked_files_exist(self) -> bool:
        return self.untracked

    def stash_push(self, label: str) -> OperationResult:
        self.calls.append(("stash_push", label))
        if not self.stash_push_success:
            return OperationResult(False, OperationType.STASH, "Stash failed")
        self.stash.append((label, self.dirty, self.untracked))
        self.dirty = self.untracked = False
        return OperationResult(True, OperationType.STASH, "Stashed")

    def stash_pop(self) -> OperationResult:
        self.calls.append(("stash_pop",))
        if not self.stash_pop_success:
            return OperationResult(False, OperationType.STASH, "Pop failed")
        _label, self.dirty, self.untracked = self.stash.pop()
        return OperationResult(True, OperationType.STASH, "Popped")

    def status_porcelain(self) -> list[StatusEntry]:
        self.calls.append(("status_porcelain",))
        return list(self.status_entries)

    def close(self) -> None:
        pass

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def make_backend():
    """Factory fixture: make_backend(ahead=2, behind=1, dirty=True)."""
    return FakeBackend
