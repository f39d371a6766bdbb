"""
Tests for the CSV audit report.
"""
import csv

from dupefindr.core import ActionPlanner, ActionKind, DuplicateGroup, FileEntry
from dupefindr.services.action_service import ActionExecutor
from dupefindr.services.report_service import ReportService, CSV_FIELDS


def group_of(*paths, size=10, digest=b"\x01\x02"):
    entries = tuple(FileEntry(path=p, size=size, order=i) for i, p in enumerate(paths))
    return DuplicateGroup(size=size, digest=digest, entries=entries)


class TestReportService:
    def test_rows_before_execution_are_planned(self):
        plans = ActionPlanner().plan_all([group_of("/a", "/b")], ActionKind.DELETE, dry_run=True)
        rows = ReportService.build_rows(plans, [])

        assert [(r["status"], r["outcome"]) for r in rows] == [("kept", "kept"), ("duplicate", "planned")]
        assert rows[0]["digest"] == "0102"
        assert rows[0]["group"] == 1

    def test_rows_after_dry_run(self):
        plans = ActionPlanner().plan_all([group_of("/a", "/b")], ActionKind.DELETE, dry_run=True)
        results = ActionExecutor().execute_all(plans)
        rows = ReportService.build_rows(plans, results)

        assert [r["outcome"] for r in rows] == ["kept", "would delete"]

    def test_destination_column_for_move(self, tmp_path):
        planner = ActionPlanner(destination=str(tmp_path))
        plans = planner.plan_all([group_of("/x/a.jpg", "/y/a.jpg")], ActionKind.MOVE, dry_run=True)
        rows = ReportService.build_rows(plans, [])

        assert rows[0]["destination"] == ""
        assert rows[1]["destination"] == str(tmp_path / "a.jpg")

    def test_write_csv(self, tmp_path):
        plans = ActionPlanner().plan_all(
            [group_of("/a", "/b", "/c"), group_of("/d", "/e", size=20, digest=b"\xff")],
            ActionKind.FIND,
        )
        results = ActionExecutor().execute_all(plans)
        output = tmp_path / "report.csv"

        count = ReportService.write_csv(str(output), plans, results)

        with open(output, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            assert reader.fieldnames == CSV_FIELDS
            rows = list(reader)
        assert count == len(rows) == 5
        assert [r["group"] for r in rows] == ["1", "1", "1", "2", "2"]
        assert [r["outcome"] for r in rows] == ["kept", "duplicate", "duplicate", "kept", "duplicate"]
        assert rows[3]["digest"] == "ff"
