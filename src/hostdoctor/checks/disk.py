"""Disk space check: runs before the host is touched."""

from __future__ import annotations

import shutil

from hostdoctor.checks.base import Check
from hostdoctor.core.schema import HostContext, Status

_MB = 1024 * 1024


class DiskSpace(Check):
    """Check that the filesystem holding the host root has free space."""

    description = "Check that the filesystem holding the host root has enough free space."
    warning_mb: int = 1024
    error_mb: int = 100

    def run(self, context: HostContext) -> None:
        usage = shutil.disk_usage(context.root)
        free_mb = usage.free // _MB
        if free_mb < int(self.error_mb):
            self.set_result(Status.ERROR, f"Only {free_mb} MB free (below {self.error_mb} MB).")
        elif free_mb < int(self.warning_mb):
            self.set_result(Status.WARNING, f"{free_mb} MB free (below {self.warning_mb} MB).")
        else:
            self.set_result(Status.SUCCESS, f"{free_mb} MB free.")
