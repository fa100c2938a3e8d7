"""Tests for reconciliation strategy classes."""

import pytest

from pygit_reconcile import (
    DivergedBranchStrategy,
    DivergenceStatus,
    LocalOnlyStrategy,
    MergeConflictError,
    NullOutputHandler,
    PullMode,
    PushRejectedError,
    RebaseConflictError,
    ReconciliationOutcome,
    RemoteOnlyStrategy,
    StatusEntry,
    SyncContext,
    SyncOptions,
    UpToDateStrategy,
)

ALL_STATES = [DivergenceStatus(0, 0), DivergenceStatus(2, 0), DivergenceStatus(0, 2), DivergenceStatus(2, 2)]


def _make(cls, backend, **options):
    opts = SyncOptions(**options)
    context = SyncContext(branch="main", remote_name="origin", options=opts)
    return cls(backend, NullOutputHandler(), opts), context


class TestCanHandle:
    @pytest.mark.parametrize("cls, handled", [
        (UpToDateStrategy, DivergenceStatus(0, 0)),
        (LocalOnlyStrategy, DivergenceStatus(2, 0)),
        (RemoteOnlyStrategy, DivergenceStatus(0, 2)),
        (DivergedBranchStrategy, DivergenceStatus(2, 2)),
    ])
    def test_exactly_one_state(self, make_backend, cls, handled):
        strategy, _ = _make(cls, make_backend())
        assert [s for s in ALL_STATES if strategy.can_handle(s)] == [handled]

    def test_only_up_to_date_skips_stash(self, make_backend):
        backend = make_backend()
        for cls in (LocalOnlyStrategy, RemoteOnlyStrategy, DivergedBranchStrategy):
            strategy, _ = _make(cls, backend)
            assert strategy.requires_stash is True
        strategy, _ = _make(UpToDateStrategy, backend)
        assert strategy.requires_stash is False


class TestUpToDateStrategy:
    def test_no_backend_calls(self, make_backend):
        backend = make_backend()
        strategy, context = _make(UpToDateStrategy, backend)
        outcome = strategy.reconcile(context, DivergenceStatus(0, 0))
        assert outcome is ReconciliationOutcome.UP_TO_DATE
        assert backend.calls == []


class TestLocalOnlyStrategy:
    def test_push(self, make_backend):
        backend = make_backend(ahead=2)
        strategy, context = _make(LocalOnlyStrategy, backend)
        assert strategy.reconcile(context, DivergenceStatus(2, 0)) is ReconciliationOutcome.PUSHED
        assert backend.calls == [("push", "origin", "main", False, False)]

    def test_force_push(self, make_backend):
        backend = make_backend(ahead=2)
        strategy, context = _make(LocalOnlyStrategy, backend, force=True)
        strategy.reconcile(context, DivergenceStatus(2, 0))
        assert backend.calls == [("push", "origin", "main", False, True)]

    def test_rejected(self, make_backend):
        backend = make_backend(ahead=2)
        backend.push_success = False
        strategy, context = _make(LocalOnlyStrategy, backend)
        with pytest.raises(PushRejectedError) as excinfo:
            strategy.reconcile(context, DivergenceStatus(2, 0))
        assert "Push failed" in excinfo.value.message


class TestRemoteOnlyStrategy:
    @pytest.mark.parametrize("rebase, mode", [(False, PullMode.MERGE), (True, PullMode.REBASE)])
    def test_pull_mode(self, make_backend, rebase, mode):
        backend = make_backend(behind=3)
        strategy, context = _make(RemoteOnlyStrategy, backend, rebase=rebase)
        assert strategy.reconcile(context, DivergenceStatus(0, 3)) is ReconciliationOutcome.PULLED
        assert backend.calls == [("pull", "origin", "main", mode, False)]


class TestDivergedBranchStrategy:
    def test_merge_checks_status_before_push(self, make_backend):
        backend = make_backend(ahead=1, behind=1)
        strategy, context = _make(DivergedBranchStrategy, backend)
        outcome = strategy.reconcile(context, DivergenceStatus(1, 1))
        assert outcome is ReconciliationOutcome.MERGED_AND_PUSHED
        assert backend.call_names() == ["pull", "status_porcelain", "push"]

    def test_rebase_does_not_check_status(self, make_backend):
        backend = make_backend(ahead=1, behind=1)
        strategy, context = _make(DivergedBranchStrategy, backend, rebase=True)
        outcome = strategy.reconcile(context, DivergenceStatus(1, 1))
        assert outcome is ReconciliationOutcome.REBASED_AND_PUSHED
        assert backend.call_names() == ["pull", "push"]

    def test_rebase_conflict(self, make_backend):
        backend = make_backend(ahead=1, behind=1)
        backend.pull_success = False
        strategy, context = _make(DivergedBranchStrategy, backend, rebase=True)
        with pytest.raises(RebaseConflictError):
            strategy.reconcile(context, DivergenceStatus(1, 1))

    def test_merge_conflict_lists_all_unmerged_paths(self, make_backend):
        backend = make_backend(ahead=1, behind=1)
        backend.status_entries = [
            StatusEntry("UU", "a.txt"),
            StatusEntry("M ", "b.txt"),
            StatusEntry("AA", "c.txt"),
            StatusEntry("DD", "d.txt"),
        ]
        strategy, context = _make(DivergedBranchStrategy, backend)
        with pytest.raises(MergeConflictError) as excinfo:
            strategy.reconcile(context, DivergenceStatus(1, 1))
        assert excinfo.value.conflicted_paths == ["a.txt", "c.txt", "d.txt"]
        assert "3 conflicted path(s)" in excinfo.value.message
