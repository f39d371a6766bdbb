"""
Tests for ActionPlanner: keeper selection, targets and destination naming.
"""
import os

import pytest

from dupefindr.core import (
    ActionPlanner, ActionKind, KeepPolicy, DuplicateGroup, FileEntry, ConfigError,
)


def make_group(*specs, size=10, digest=b"d"):
    """specs: (path, mtime) tuples in discovery order."""
    entries = tuple(
        FileEntry(path=path, size=size, mtime=mtime, order=i)
        for i, (path, mtime) in enumerate(specs)
    )
    return DuplicateGroup(size=size, digest=digest, entries=entries)


@pytest.fixture
def group():
    return make_group(("/data/b/photo.jpg", 200.0), ("/data/a/long_name.jpg", 100.0), ("/x.jpg", 300.0))


class TestKeeperSelection:
    """Exactly one keeper per group, chosen deterministically."""

    def test_first_policy_keeps_first_discovered(self, group):
        plan = ActionPlanner().plan(group, ActionKind.FIND)
        assert plan.keeper == "/data/b/photo.jpg"

    def test_newest_policy(self, group):
        assert ActionPlanner(keep=KeepPolicy.NEWEST).select_keeper(group).path == "/x.jpg"

    def test_oldest_policy(self, group):
        assert ActionPlanner(keep=KeepPolicy.OLDEST).select_keeper(group).path == "/data/a/long_name.jpg"

    def test_shortest_path_policy(self, group):
        assert ActionPlanner(keep=KeepPolicy.SHORTEST_PATH).select_keeper(group).path == "/x.jpg"

    def test_ties_fall_back_to_discovery_order(self):
        tied = make_group(("/p/one", 5.0), ("/p/two", 5.0))
        assert ActionPlanner(keep=KeepPolicy.NEWEST).select_keeper(tied).path == "/p/one"
        assert ActionPlanner(keep=KeepPolicy.OLDEST).select_keeper(tied).path == "/p/one"
        assert ActionPlanner(keep=KeepPolicy.SHORTEST_PATH).select_keeper(tied).path == "/p/one"


class TestPlanTargets:
    def test_find_plan_has_no_targets(self, group):
        plan = ActionPlanner().plan(group, ActionKind.FIND)
        assert plan.targets == ()
        assert plan.action is ActionKind.FIND

    def test_delete_targets_every_non_keeper(self, group):
        plan = ActionPlanner().plan(group, ActionKind.DELETE)

        assert plan.duplicate_paths == ["/data/a/long_name.jpg", "/x.jpg"]
        assert plan.keeper not in plan.duplicate_paths
        assert all(t.destination is None for t in plan.targets)

    def test_keeper_excluded_under_other_policies(self, group):
        plan = ActionPlanner(keep=KeepPolicy.NEWEST).plan(group, ActionKind.DELETE)
        assert plan.keeper == "/x.jpg"
        assert plan.duplicate_paths == ["/data/b/photo.jpg", "/data/a/long_name.jpg"]

    def test_move_targets_land_in_destination(self, group, tmp_path):
        planner = ActionPlanner(destination=str(tmp_path))
        plan = planner.plan(group, ActionKind.MOVE)

        assert [t.destination for t in plan.targets] == [
            os.path.join(str(tmp_path), "long_name.jpg"),
            os.path.join(str(tmp_path), "x.jpg"),
        ]

    def test_name_collisions_get_numeric_suffix(self, tmp_path):
        planner = ActionPlanner(destination=str(tmp_path))
        first = make_group(("/a/keep.jpg", 0), ("/b/photo.jpg", 0), ("/c/photo.jpg", 0))
        second = make_group(("/d/keep2.jpg", 0), ("/e/photo.jpg", 0), digest=b"other", size=20)

        plans = planner.plan_all([first, second], ActionKind.COPY)

        names = [os.path.basename(t.destination) for p in plans for t in p.targets]
        assert names == ["photo.jpg", "photo-00001.jpg", "photo-00002.jpg"]

    def test_move_without_destination_is_config_error(self, group):
        with pytest.raises(ConfigError):
            ActionPlanner().plan(group, ActionKind.MOVE)

    def test_dry_run_plan_has_same_targets(self, group, tmp_path):
        real = ActionPlanner(destination=str(tmp_path)).plan(group, ActionKind.MOVE)
        dry = ActionPlanner(destination=str(tmp_path)).plan(group, ActionKind.MOVE, dry_run=True)

        assert dry.dry_run is True
        assert dry.targets == real.targets
        assert dry.keeper == real.keeper

    def test_overlapping_groups_rejected(self, group):
        planner = ActionPlanner()
        planner.plan(group, ActionKind.DELETE)
        with pytest.raises(ValueError, match="already belongs"):
            planner.plan(group, ActionKind.DELETE)


class TestChosenKeeper:
    def test_chosen_keeper_overrides_policy(self, group):
        plan = ActionPlanner().plan(group, ActionKind.DELETE, keeper="/x.jpg")

        assert plan.keeper == "/x.jpg"
        assert plan.duplicate_paths == ["/data/b/photo.jpg", "/data/a/long_name.jpg"]

    def test_keeper_outside_group_rejected(self, group):
        with pytest.raises(ValueError, match="not part of the group"):
            ActionPlanner().plan(group, ActionKind.DELETE, keeper="/elsewhere.jpg")
