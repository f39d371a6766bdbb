"""
Unified command orchestrator for a scan and its optional action.
This is the SINGLE source of truth for the workflow. The CLI only parses
arguments, renders progress and prints results.

Each DeduplicationCommand owns its own progress counters, and every call to
scan() builds a fresh walker, hash pool and planner, so nothing is shared
between runs.
"""
import logging
from typing import List, Optional, Callable

from dupefindr.core.deduplicator import DeduplicatorImpl
from dupefindr.core.errors import GroupSkipped, RunEscaped, ScanCancelled
from dupefindr.core.filters import FileFilter
from dupefindr.core.hash_pool import HashWorkerPool
from dupefindr.core.hasher import HasherImpl, get_algorithm
from dupefindr.core.models import ActionPlan, ActionResult, ScanParams, ScanProgress, ScanResult, Stage
from dupefindr.core.planner import ActionPlanner
from dupefindr.core.scanner import FileScannerImpl
from dupefindr.services.action_service import ActionExecutor

logger = logging.getLogger(__name__)


class DeduplicationCommand:
    """
    Orchestrates the workflow:
    1. Walk the root directory with the configured filter
    2. Detect duplicate groups (size → parallel hash → aggregate)
    3. Plan the requested action for every group
    4. Apply the plans (or report them, in dry-run mode)

    Usage:
        command = DeduplicationCommand()
        result = command.scan(params, stopped_flag=interrupted)
        # poll command.progress.snapshot() from another thread meanwhile
        command.apply(result)
    """

    def __init__(self, executor: Optional[ActionExecutor] = None):
        self.progress = ScanProgress()
        self._executor = executor or ActionExecutor()

    def scan(
            self,
            params: ScanParams,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> ScanResult:
        """
        Runs detection and planning. Touches nothing on disk.

        Raises:
            ConfigError: If the root directory is missing or not a directory
            ScanCancelled: If stopped_flag returns True before detection completes
        """
        scanner = FileScannerImpl(
            root_dir=params.root_dir,
            recursive=params.recursive,
            file_filter=FileFilter.from_params(params),
            progress=self.progress,
        )
        entries = scanner.scan(stopped_flag=stopped_flag)

        pool = HashWorkerPool(
            hasher=HasherImpl(get_algorithm(params.hash_algorithm), chunk_size=params.chunk_size),
            max_workers=params.max_workers,
            progress=self.progress,
        )
        detection = DeduplicatorImpl(pool=pool, progress=self.progress).find_duplicates(
            entries, stopped_flag=stopped_flag
        )
        # the barrier has passed, but a late stop still means no plan
        if stopped_flag and stopped_flag():
            raise ScanCancelled("Scan cancelled before planning")

        planner = ActionPlanner(destination=params.destination, keep=params.keep)
        plans = planner.plan_all(detection.groups, params.action, dry_run=params.dry_run)

        return ScanResult(
            groups=detection.groups,
            plans=plans,
            params=params,
            errors=list(scanner.errors) + detection.errors,
            stats=detection.stats,
            files_scanned=len(entries),
        )

    def apply(self, result: ScanResult) -> List[ActionResult]:
        """
        Executes (or, for dry-run plans, reports) every plan in order.
        Per-file failures are recorded in the results, never raised.
        """
        self.progress.set_stage(Stage.DONE)
        result.results = self._executor.execute_all(result.plans)
        failed = len(result.failed)
        if failed:
            logger.warning(f"{failed} file action(s) failed")
        return result.results

    def apply_interactively(
            self,
            result: ScanResult,
            choose_keeper: Callable[[ActionPlan], str]
    ) -> List[ActionResult]:
        """
        Asks `choose_keeper` for the keeper of every group, then executes that
        group before moving on to the next one.

        choose_keeper may raise GroupSkipped to leave a group untouched, or
        RunEscaped to stop; groups after the escape are not executed.
        `result.plans` is replaced by the plans that were actually executed.
        """
        self.progress.set_stage(Stage.DONE)
        planner = ActionPlanner(destination=result.params.destination, keep=result.params.keep)
        executed_plans: List[ActionPlan] = []
        results: List[ActionResult] = []

        for plan in result.plans:
            try:
                keeper = choose_keeper(plan)
            except GroupSkipped:
                logger.info(f"Skipped group of {plan.keeper}")
                continue
            except RunEscaped:
                logger.info("Interactive run stopped by user")
                break
            chosen = planner.plan(plan.group, plan.action, dry_run=plan.dry_run, keeper=keeper)
            executed_plans.append(chosen)
            results.extend(self._executor.execute(chosen))

        result.plans = executed_plans
        result.results = results
        return results

    def execute(
            self,
            params: ScanParams,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> ScanResult:
        """Scan, then apply. Actions only run once detection has fully completed."""
        result = self.scan(params, stopped_flag=stopped_flag)
        self.apply(result)
        return result
