"""
Orchestrator

Main driver for a pre-commit run: resolves hooks, filters files,
dispatches checks and collects results in hook order.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ..config.models import CheckDefinition, CheckKind, ExclusionRules, PipelineConfig
from .capabilities import CommandRunner, FileSystem
from .checks import CheckExecutor, build_executors
from .filters import PathLike, filter_paths, normalize_path
from .models import CheckResult, CheckStatus, Report, compute_overall
from .registry import CheckRegistry

logger = logging.getLogger(__name__)

PlannedHook = Tuple[int, str, Optional[CheckDefinition]]


class Orchestrator:
    """
    Runs hooks against a file set.

    Checks run one at a time in hook order unless concurrent mode is
    requested. In concurrent mode, consecutive parallel-safe checks share a
    thread pool while every other check runs alone, in order, so a check
    consuming an earlier check's output still sees it. Results are always
    reported in hook order.
    """

    def __init__(
        self,
        registry: CheckRegistry,
        executors: Mapping[CheckKind, CheckExecutor],
        exclusions: Optional[ExclusionRules] = None,
        max_workers: int = 4,
    ):
        """
        Initialize the orchestrator.

        Args:
            registry: Check definitions by name
            executors: Executor for each check kind
            exclusions: Global exclusion rules
            max_workers: Thread pool size for concurrent mode
        """
        self.registry = registry
        self.executors = dict(executors)
        self.exclusions = exclusions or ExclusionRules()
        self.max_workers = max(1, max_workers)

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        runner: CommandRunner,
        filesystem: FileSystem,
        supplied_coverage: Optional[float] = None,
    ) -> "Orchestrator":
        return cls(
            registry=CheckRegistry.from_config(config),
            executors=build_executors(runner, filesystem, supplied_coverage),
            exclusions=config.exclusions,
            max_workers=config.reporting.max_workers,
        )

    def plan(self, hooks: Iterable[str]) -> List[PlannedHook]:
        """Resolve every hook; unresolved hooks carry None."""
        return [(i, name, self.registry.resolve(name)) for i, name in enumerate(hooks)]

    def files_for(self, definition: CheckDefinition, files: Iterable[PathLike]) -> Set[str]:
        """Apply global and per-check exclusions for one check."""
        if definition.use_exclusions:
            rules = self.exclusions.merged(definition.exclusion_overrides)
        else:
            rules = definition.exclusion_overrides
        return filter_paths(files, rules, include=definition.include)

    def run(
        self,
        hooks: Iterable[str],
        files: Iterable[PathLike],
        fail_fast: bool = False,
        concurrent: bool = False,
    ) -> Report:
        """
        Run hooks in order and build a report.

        Args:
            hooks: Check names, in execution order
            files: Candidate paths
            fail_fast: Stop at the first failed or errored check
            concurrent: Run parallel-safe checks on a thread pool

        Returns:
            Report with one result per executed hook
        """
        started_at = datetime.now()
        planned = self.plan(hooks)
        candidates = {normalize_path(f) for f in files}

        logger.info(
            "Running %d hook(s) on %d file(s) (fail_fast=%s, concurrent=%s)",
            len(planned), len(candidates), fail_fast, concurrent,
        )

        if concurrent and len(planned) > 1:
            results = self._run_concurrent(planned, candidates, fail_fast)
        else:
            results = self._run_sequential(planned, candidates, fail_fast)

        return Report(
            results=results,
            started_at=started_at,
            finished_at=datetime.now(),
            overall=compute_overall(results),
        )

    def _run_hook(self, name: str, definition: Optional[CheckDefinition], files: Set[str]) -> CheckResult:
        """Run one hook; never raises."""
        if definition is None:
            reason = self.registry.explain_unresolved(name)
            logger.warning("Skipping hook '%s': %s", name, reason)
            return CheckResult(name=name, status=CheckStatus.SKIPPED, messages=[reason])

        executor = self.executors.get(definition.kind)
        if executor is None:
            return CheckResult(
                name=name,
                status=CheckStatus.ERRORED,
                messages=[f"No executor available for check kind '{definition.kind.value}'"],
            )

        selected = self.files_for(definition, files)
        logger.debug("Check '%s' selected %d of %d file(s)", name, len(selected), len(files))
        return executor.run(definition, selected)

    def _run_sequential(self, planned: List[PlannedHook], files: Set[str], fail_fast: bool) -> List[CheckResult]:
        results = []
        for _index, name, definition in planned:
            result = self._run_hook(name, definition, files)
            results.append(result)
            if fail_fast and result.failed:
                logger.info("Fail-fast: stopping after '%s'", name)
                break
        return results

    def _batches(self, planned: List[PlannedHook]) -> List[List[PlannedHook]]:
        """Group consecutive parallel-safe hooks; everything else runs alone."""
        batches: List[List[PlannedHook]] = []
        current: List[PlannedHook] = []

        for hook in planned:
            definition = hook[2]
            if definition is None or definition.parallel_safe:
                current.append(hook)
                continue
            if current:
                batches.append(current)
                current = []
            batches.append([hook])

        if current:
            batches.append(current)
        return batches

    def _run_concurrent(self, planned: List[PlannedHook], files: Set[str], fail_fast: bool) -> List[CheckResult]:
        slots: List[Optional[CheckResult]] = [None] * len(planned)
        stop_at: Optional[int] = None

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="commitgate") as pool:
            for batch in self._batches(planned):
                if len(batch) == 1:
                    index, name, definition = batch[0]
                    slots[index] = self._run_hook(name, definition, files)
                    failed_at = index if fail_fast and slots[index].failed else None
                else:
                    failed_at = self._run_batch(pool, batch, files, fail_fast, slots)

                if failed_at is not None:
                    stop_at = failed_at
                    logger.info("Fail-fast: stopping after '%s'", planned[failed_at][1])
                    break

        kept = slots if stop_at is None else slots[:stop_at + 1]
        return [r for r in kept if r is not None]

    def _run_batch(
        self,
        pool: ThreadPoolExecutor,
        batch: List[PlannedHook],
        files: Set[str],
        fail_fast: bool,
        slots: List[Optional[CheckResult]],
    ) -> Optional[int]:
        """
        Run a batch on the pool, writing each result into its hook slot.

        Returns:
            Position of the earliest failure when fail_fast is set, else None
        """
        futures: Dict[Future, int] = {
            pool.submit(self._run_hook, name, definition, files): index
            for index, name, definition in batch
        }
        first_failure: Optional[int] = None

        for future in as_completed(futures):
            if future.cancelled():
                continue
            index = futures[future]
            result = future.result()
            slots[index] = result

            if fail_fast and result.failed and (first_failure is None or index < first_failure):
                first_failure = index
                for other, other_index in futures.items():
                    if other_index > index:
                        other.cancel()

        return first_failure
