"""Top-level diagnose and list operations used by the CLI."""

from __future__ import annotations

import logging
from typing import Iterable

from hostdoctor.core.exceptions import DoctorError, HostBootError
from hostdoctor.core.host import HostBootstrap
from hostdoctor.core.registry import CheckRegistry
from hostdoctor.core.results import ResultCollector
from hostdoctor.core.scheduler import Scheduler

log = logging.getLogger(__name__)


def diagnose(
    registry: CheckRegistry,
    names: Iterable[str],
    host: HostBootstrap,
    *,
    run_all: bool = False,
) -> ResultCollector:
    """Resolve the requested checks, run them through the host bootstrap.

    Nothing runs (and the host is never booted) when no checks are named
    without ``run_all`` or when a name is unknown.
    """
    names = list(names)
    if not names and not run_all:
        raise DoctorError("Please specify one or more checks, or use --all.")

    checks = registry.resolve(names)
    scheduler = Scheduler(checks)
    scheduler.attach(host)
    log.debug("Booting host at %s", host.root)
    try:
        host.boot()
    except HostBootError as e:
        log.warning("Host bootstrap aborted: %s", e)
        return scheduler.finish(reason=str(e))
    return scheduler.finish()


def describe_checks(registry: CheckRegistry) -> list[dict[str, str]]:
    """One row per registered check, for listing."""
    return [
        {
            "name": d.name,
            "description": d.documentation,
            "stage": d.stage.value,
        }
        for d in registry.list_all()
    ]
