"""Binding resolved checks to host stages and running them."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from hostdoctor.checks.base import Check, FileCheck, file_extension, stage_for
from hostdoctor.core.exceptions import SkippedChecksError
from hostdoctor.core.host import HostBootstrap
from hostdoctor.core.results import ResultCollector
from hostdoctor.core.schema import CheckState, HostContext, Stage, Status
from hostdoctor.core.walk import walk_tree

log = logging.getLogger(__name__)


def stage_of(check: Any) -> Stage:
    return stage_for(check)


class Scheduler:
    """Runs each check once, at the host stage it declares.

    Checks sharing a stage run together in resolution order. A check that
    raises is recorded as an ``error`` result; its siblings keep running.
    """

    def __init__(
        self,
        checks: dict[str, Check],
        collector: ResultCollector | None = None,
    ) -> None:
        self._checks = dict(checks)
        self._collector = collector if collector is not None else ResultCollector(order=self._checks)
        self._states = {name: CheckState.PENDING for name in self._checks}
        self._by_stage: dict[Stage, list[str]] = {}
        for name, check in self._checks.items():
            self._by_stage.setdefault(stage_of(check), []).append(name)
        self._fired: set[Stage] = set()

    @property
    def collector(self) -> ResultCollector:
        return self._collector

    @property
    def states(self) -> dict[str, CheckState]:
        return dict(self._states)

    def stages_needed(self) -> list[Stage]:
        return sorted(self._by_stage, key=lambda s: s.order)

    def file_checks(self) -> dict[str, FileCheck]:
        return {n: c for n, c in self._checks.items() if isinstance(c, FileCheck)}

    def attach(self, host: HostBootstrap) -> None:
        """Run immediate checks now and hook one handler per later stage."""
        for stage in self.stages_needed():
            if stage is Stage.IMMEDIATE:
                self.run_stage(stage, HostContext(root=host.root))
            else:
                host.on_stage(stage, partial(self.run_stage, stage))

    def run_stage(self, stage: Stage, context: HostContext) -> None:
        if stage in self._fired:
            log.warning("Stage %s fired more than once; ignoring", stage.value)
            return
        self._fired.add(stage)
        names = self._by_stage.get(stage, [])
        log.debug("Running %d check(s) at %s", len(names), stage.value)

        if stage is Stage.PRE_HOST_INIT:
            file_checks = {n: c for n, c in self.file_checks().items() if n in names}
            if file_checks:
                self._scan(file_checks, context)

        for name in names:
            if self._states[name] is CheckState.COMPLETED:
                continue
            self._run_check(name, context)

    def _scan(self, file_checks: dict[str, FileCheck], context: HostContext) -> None:
        """Walk the host root once, feeding each file to the checks that want it."""
        dispatch: dict[str, list[str]] = {}
        for name, check in file_checks.items():
            self._states[name] = CheckState.RUNNING
            for ext in check.extensions:
                dispatch.setdefault(ext, []).append(name)
        log.debug("Scanning %s for extensions: %s", context.root, ", ".join(sorted(dispatch)))

        visited = 0
        for entry in walk_tree(context.root):
            # regular files only; a symlink counts when its target is one
            if entry.is_dir or not entry.path.is_file():
                continue
            visited += 1
            for name in dispatch.get(file_extension(entry.path), ()):
                if self._states[name] is not CheckState.RUNNING:
                    continue
                try:
                    file_checks[name].check_file(entry.path)
                except Exception as e:
                    self._fail(name, e, f"while checking {entry.path}")
        log.debug("Scanned %d file(s) under %s", visited, context.root)

    def _run_check(self, name: str, context: HostContext) -> None:
        check = self._checks[name]
        self._states[name] = CheckState.RUNNING
        try:
            check.run(context)
        except Exception as e:
            self._fail(name, e)
            return
        if not check.has_result:
            self._collector.record(name, Status.ERROR, "Check did not report a status.")
        else:
            self._collector.record(name, check.status, check.message or "")
        self._states[name] = CheckState.COMPLETED

    def _fail(self, name: str, exc: Exception, where: str = "") -> None:
        suffix = f" {where}" if where else ""
        log.warning("Check %s raised %s%s", name, type(exc).__name__, suffix)
        log.debug("Check %s failure", name, exc_info=exc)
        self._collector.record(name, Status.ERROR, f"Check failed{suffix}: {type(exc).__name__}: {exc}")
        self._states[name] = CheckState.COMPLETED

    def finish(self, reason: str = "") -> ResultCollector:
        """Close the run; checks whose stage never fired are marked skipped.

        Raises SkippedChecksError (with the partial results) if any were.
        """
        skipped = [n for n, s in self._states.items() if s is CheckState.PENDING]
        for name in skipped:
            self._states[name] = CheckState.SKIPPED
        if skipped:
            unreached = [s for s in self.stages_needed() if s not in self._fired and s is not Stage.IMMEDIATE]
            raise SkippedChecksError(skipped, unreached, self._collector, reason=reason)
        return self._collector
