"""Concrete GitPython-based backend implementation."""

from __future__ import annotations

import logging
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from pygit_reconcile.errors import DivergenceError
from pygit_reconcile.models import (
    OperationResult,
    OperationType,
    PullMode,
    StatusEntry,
)


class GitPythonBackend:
    """Concrete implementation using GitPython"""

    def __init__(self, repo_path: Path):
        """Open the working copy containing repo_path, if there is one."""
        self._path = repo_path
        self._repo: Repo | None = None
        self._logger = logging.getLogger(__name__)
        try:
            self._repo = Repo(repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            self._logger.debug("No git working copy at %s", repo_path)
            return
        if self._repo.working_tree_dir is not None:
            self._path = Path(self._repo.working_tree_dir)

    def close(self) -> None:
        """Release underlying git resources."""
        if self._repo is not None:
            self._repo.close()

    @property
    def path(self) -> Path:
        """Root of the working copy (or the path given, outside a repository)."""
        return self._path

    def is_repository(self) -> bool:
        """Return True if a non-bare working copy was found."""
        return self._repo is not None and not self._repo.bare

    def current_branch(self) -> str:
        """Name of the checked-out branch, or '' if HEAD is detached."""
        if self._repo.head.is_detached:
            return ''
        return self._repo.active_branch.name

    def fetch(self, remote: str) -> OperationResult:
        """Fetch all refs from a remote."""
        self._logger.debug("git fetch %s", remote)
        try:
            self._repo.git.fetch(remote)
            return OperationResult(True, OperationType.FETCH, f"Fetched from {remote}")
        except GitCommandError as e:
            return OperationResult(False, OperationType.FETCH, "Fetch failed", e)

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        """Return True if refs/remotes/<remote>/<branch> exists locally."""
        try:
            self._repo.git.show_ref('--verify', '--quiet', f'refs/remotes/{remote}/{branch}')
            return True
        except GitCommandError:
            return False

    def count_commits(self, range_expr: str) -> int:
        """Count commits in a revision range such as 'origin/main..HEAD'.

        Raises DivergenceError if git cannot resolve either end of the range,
        e.g. on a branch with no commits yet.
        """
        try:
            count = int(self._repo.git.rev_list('--count', range_expr))
        except (GitCommandError, ValueError) as e:
            self._logger.debug("git rev-list --count %s failed: %s", range_expr, e)
            raise DivergenceError(
                f"Could not count commits in {range_expr}",
                ["Make sure the current branch has at least one commit."],
            ) from e
        self._logger.debug("git rev-list --count %s -> %d", range_expr, count)
        return count

    def push(self, remote: str, branch: str, set_upstream: bool = False,
             force: bool = False) -> OperationResult:
        """Push a branch, optionally setting upstream tracking or forcing."""
        args = [remote, branch]
        if set_upstream:
            args.insert(0, '--set-upstream')
        if force:
            args.append('--force')
        self._logger.debug("git push %s", ' '.join(args))
        try:
            self._repo.git.push(*args)
            return OperationResult(True, OperationType.PUSH, f"Pushed {branch} to {remote}")
        except GitCommandError as e:
            return OperationResult(False, OperationType.PUSH, "Push failed", e)

    def pull(self, remote: str, branch: str, mode: PullMode,
             no_edit: bool = False) -> OperationResult:
        """Pull from remote/branch with merge or rebase semantics.

        A failed pull is left in place (conflicted merge or stopped rebase) so
        the user can continue or abort it.
        """
        op_type = OperationType.REBASE if mode is PullMode.REBASE else OperationType.MERGE
        args = ['--rebase'] if mode is PullMode.REBASE else ['--no-rebase']
        if no_edit:
            args.append('--no-edit')
        args += [remote, branch]
        self._logger.debug("git pull %s", ' '.join(args))
        try:
            self._repo.git.pull(*args)
            return OperationResult(True, op_type, f"Pulled from {remote}/{branch}")
        except GitCommandError as e:
            return OperationResult(False, op_type, "Pull failed", e)

    def working_tree_dirty(self) -> bool:
        """Return True if tracked files differ from HEAD (staged or not)."""
        return self._repo.is_dirty(index=True, working_tree=True, untracked_files=False)

    def untracked_files_exist(self) -> bool:
        """Return True if there are untracked, non-ignored files."""
        return bool(self._repo.untracked_files)

    def stash_push(self, label: str) -> OperationResult:
        """Stage everything, including untracked files, and stash it under label."""
        try:
            self._repo.git.add('-A')
            self._repo.git.stash('push', '-m', label)
            return OperationResult(True, OperationType.STASH, f"Stashed changes: {label}")
        except GitCommandError as e:
            return OperationResult(False, OperationType.STASH, "Stash failed", e)

    def stash_pop(self) -> OperationResult:
        """Pop the most recent stash entry and apply it."""
        try:
            self._repo.git.stash('pop')
            return OperationResult(True, OperationType.STASH, "Popped stash")
        except GitCommandError as e:
            return OperationResult(False, OperationType.STASH, "Stash pop failed", e)

    def status_porcelain(self) -> list[StatusEntry]:
        """Return working tree status entries from `git status --porcelain -z`."""
        fields = self._repo.git.status('--porcelain', '-z').split('\0')
        entries = []
        skip_next = False
        for item in fields:
            if skip_next:
                skip_next = False
                continue
            if len(item) < 4:
                continue
            entry = StatusEntry.parse(item)
            # Renames and copies carry the original path as an extra field
            if entry.code[0] in 'RC':
                skip_next = True
            entries.append(entry)
        return entries
