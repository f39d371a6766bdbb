"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
CSV audit report: one row per file of every duplicate group.
"""
import csv
import logging
from typing import Dict, List, Optional

from dupefindr.core.models import ActionPlan, ActionResult

logger = logging.getLogger(__name__)

CSV_FIELDS = ["group", "size", "digest", "status", "source", "destination", "outcome", "reason"]


class ReportService:
    @staticmethod
    def build_rows(plans: List[ActionPlan], results: List[ActionResult]) -> List[Dict[str, object]]:
        """
        Rows follow plan order, then group order inside a plan.
        Files without a recorded result (no action executed yet) are reported as planned.
        """
        by_source = {r.source: r for r in results}
        rows = []
        for group_id, plan in enumerate(plans, 1):
            destinations = {t.source: t.destination for t in plan.targets}
            for path in plan.group.paths:
                result: Optional[ActionResult] = by_source.get(path)
                is_keeper = path == plan.keeper
                rows.append({
                    "group": group_id,
                    "size": plan.group.size,
                    "digest": plan.group.digest_hex,
                    "status": "kept" if is_keeper else "duplicate",
                    "source": path,
                    "destination": destinations.get(path) or "",
                    "outcome": result.describe() if result else ("kept" if is_keeper else "planned"),
                    "reason": result.reason if result else "",
                })
        return rows

    @classmethod
    def write_csv(cls, output_path: str, plans: List[ActionPlan], results: List[ActionResult]) -> int:
        """Writes the report and returns the number of data rows."""
        rows = cls.build_rows(plans, results)
        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            writer.writerows(rows)
        logger.info(f"Wrote {len(rows)} report rows to {output_path}")
        return len(rows)
