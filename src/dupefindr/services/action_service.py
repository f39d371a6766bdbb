"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/action_service.py
Executes action plans one group at a time.

The keeper is never touched, only duplicates are moved/copied/deleted, and
removals are refused when the keeper has disappeared, so a group can never
end up with zero copies. A failure on one file is recorded and execution
continues with the rest of the group and the following groups.
"""
import os
import logging
from typing import List, Optional

from dupefindr.core.errors import ActionError
from dupefindr.core.models import ActionKind, ActionOutcome, ActionPlan, ActionResult, PlannedAction
from dupefindr.services.file_service import FileService

logger = logging.getLogger(__name__)


class ActionExecutor:
    def __init__(self, file_service: Optional[FileService] = None):
        self.file_service = file_service or FileService()

    def execute(self, plan: ActionPlan) -> List[ActionResult]:
        """
        Applies one plan. Returns one result per file of the group, keeper first.
        A dry-run plan only reports what would happen.
        """
        results = [ActionResult(source=plan.keeper, action=plan.action, outcome=ActionOutcome.KEPT)]

        if plan.action is ActionKind.FIND:
            results.extend(
                ActionResult(source=path, action=plan.action, outcome=ActionOutcome.FOUND)
                for path in plan.group.paths if path != plan.keeper
            )
            return results

        for target in plan.targets:
            if plan.dry_run:
                results.append(self._result(plan, target, ActionOutcome.PLANNED))
                logger.info(f"[dry-run] would {plan.action.value} {target.source}")
                continue

            try:
                self._apply(plan, target)
            except ActionError as e:
                logger.warning(f"Failed to {plan.action.value} {target.source}: {e.reason}")
                results.append(self._result(plan, target, ActionOutcome.FAILED, e.reason))
                continue
            results.append(self._result(plan, target, ActionOutcome.EXECUTED))

        return results

    def execute_all(self, plans: List[ActionPlan]) -> List[ActionResult]:
        results = []
        for plan in plans:
            results.extend(self.execute(plan))
        return results

    def _apply(self, plan: ActionPlan, target: PlannedAction) -> None:
        if plan.action is ActionKind.COPY:
            self.file_service.copy(target.source, target.destination)
            return

        if not os.path.isfile(plan.keeper):
            raise ActionError(target.source, f"Keeper is missing: {plan.keeper}")
        if plan.action is ActionKind.MOVE:
            self.file_service.move(target.source, target.destination)
        else:
            self.file_service.delete(target.source)

    @staticmethod
    def _result(
        plan: ActionPlan,
        target: PlannedAction,
        outcome: ActionOutcome,
        reason: str = ""
    ) -> ActionResult:
        return ActionResult(
            source=target.source,
            action=plan.action,
            outcome=outcome,
            destination=target.destination,
            reason=reason,
        )
