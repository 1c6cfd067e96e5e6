"""Writable directories plugin for hostdoctor.

Registers "writable-dirs": after the host is initialized, checks that the
directories listed in the host setting ``writable_dirs`` exist and are
writable.
"""

from __future__ import annotations

import os

from hostdoctor.checks.base import Check
from hostdoctor.core.registry import CheckRegistry
from hostdoctor.core.schema import HostContext, Stage, Status


class WritableDirs(Check):
    """Check that host directories which must be writable are."""

    description = "Check that the directories listed in the host's writable_dirs setting are writable."
    stage = Stage.POST_HOST_INIT
    setting: str = "writable_dirs"

    def run(self, context: HostContext) -> None:
        dirs = context.settings.get(self.setting) or []
        if not dirs:
            self.set_result(Status.SUCCESS, f"No directories listed in '{self.setting}'.")
            return
        bad = []
        for rel in dirs:
            path = context.root / rel
            if not path.is_dir() or not os.access(path, os.W_OK):
                bad.append(str(rel))
        if bad:
            self.set_result(Status.ERROR, f"Not writable: {', '.join(bad)}.")
        else:
            self.set_result(Status.SUCCESS, f"{len(dirs)} director{'y is' if len(dirs) == 1 else 'ies are'} writable.")


def register(registry: CheckRegistry) -> None:
    registry.register("writable-dirs", WritableDirs)
