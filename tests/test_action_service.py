"""
Tests for ActionExecutor: keepers are never touched, failures are recorded
and execution continues.
"""
import os
from unittest import mock

import pytest

from dupefindr.core import ActionPlanner, ActionKind, ActionOutcome, DuplicateGroup, FileEntry
from dupefindr.core.errors import ActionError
from dupefindr.services.action_service import ActionExecutor
from dupefindr.services.file_service import FileService


def group_of(*paths, size=10):
    entries = tuple(FileEntry(path=str(p), size=size, order=i) for i, p in enumerate(paths))
    return DuplicateGroup(size=size, digest=b"d", entries=entries)


@pytest.fixture
def group(abc_tree, temp_dir):
    (temp_dir / "d.txt").write_bytes(b"X" * 10)
    return group_of(abc_tree["a"], abc_tree["b"], temp_dir / "d.txt")


class TestActionExecutor:
    """Test plan execution."""

    def test_find_reports_without_touching_files(self, group):
        plan = ActionPlanner().plan(group, ActionKind.FIND)

        with mock.patch.object(FileService, "delete") as mock_delete:
            results = ActionExecutor().execute(plan)

        mock_delete.assert_not_called()
        assert [r.outcome for r in results] == [
            ActionOutcome.KEPT, ActionOutcome.FOUND, ActionOutcome.FOUND
        ]
        assert [r.describe() for r in results] == ["kept", "duplicate", "duplicate"]

    def test_delete_trashes_duplicates_only(self, group):
        plan = ActionPlanner().plan(group, ActionKind.DELETE)

        with mock.patch.object(FileService, "delete") as mock_delete:
            results = ActionExecutor().execute(plan)

        deleted = [c.args[0] for c in mock_delete.call_args_list]
        assert deleted == plan.duplicate_paths
        assert plan.keeper not in deleted
        assert [r.describe() for r in results] == ["kept", "deleted", "deleted"]

    def test_dry_run_never_calls_file_service(self, group):
        plan = ActionPlanner().plan(group, ActionKind.DELETE, dry_run=True)

        with mock.patch.object(FileService, "delete") as mock_delete:
            results = ActionExecutor().execute(plan)

        mock_delete.assert_not_called()
        assert [r.describe() for r in results] == ["kept", "would delete", "would delete"]
        assert all(os.path.exists(p) for p in group.paths)

    def test_failure_recorded_and_execution_continues(self, group):
        plan = ActionPlanner().plan(group, ActionKind.DELETE)
        first_target = plan.duplicate_paths[0]

        def flaky_delete(path):
            if path == first_target:
                raise ActionError(path, "Permission denied")

        with mock.patch.object(FileService, "delete", side_effect=flaky_delete) as mock_delete:
            results = ActionExecutor().execute(plan)

        assert mock_delete.call_count == 2
        assert [r.outcome for r in results] == [
            ActionOutcome.KEPT, ActionOutcome.FAILED, ActionOutcome.EXECUTED
        ]
        assert results[1].describe() == "failed: Permission denied"

    def test_removal_refused_when_keeper_missing(self, group, abc_tree):
        plan = ActionPlanner().plan(group, ActionKind.DELETE)
        abc_tree["a"].unlink()

        with mock.patch.object(FileService, "delete") as mock_delete:
            results = ActionExecutor().execute(plan)

        mock_delete.assert_not_called()
        assert all(r.outcome is ActionOutcome.FAILED for r in results[1:])
        assert "Keeper is missing" in results[1].reason

    def test_move_real_files(self, group, tmp_path):
        destination = tmp_path / "moved"
        plan = ActionPlanner(destination=str(destination)).plan(group, ActionKind.MOVE)

        results = ActionExecutor().execute(plan)

        assert os.path.exists(plan.keeper)
        assert sorted(os.listdir(destination)) == ["b.txt", "d.txt"]
        assert all(not os.path.exists(p) for p in plan.duplicate_paths)
        assert [r.describe() for r in results] == ["kept", "moved", "moved"]

    def test_copy_real_files(self, group, tmp_path):
        destination = tmp_path / "copies"
        plan = ActionPlanner(destination=str(destination)).plan(group, ActionKind.COPY)

        ActionExecutor().execute(plan)

        assert all(os.path.exists(p) for p in group.paths)
        assert sorted(os.listdir(destination)) == ["b.txt", "d.txt"]

    def test_execute_all_keeps_plan_order(self, abc_tree, temp_dir):
        (temp_dir / "x1").write_bytes(b"Z" * 4)
        (temp_dir / "x2").write_bytes(b"Z" * 4)
        planner = ActionPlanner()
        plans = planner.plan_all(
            [group_of(abc_tree["a"], abc_tree["b"]), group_of(temp_dir / "x1", temp_dir / "x2", size=4)],
            ActionKind.FIND,
        )

        results = ActionExecutor().execute_all(plans)

        assert [os.path.basename(r.source) for r in results] == ["a.txt", "b.txt", "x1", "x2"]
