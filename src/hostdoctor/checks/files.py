"""File checks fed by the pre-init tree walk."""

from __future__ import annotations

import re
from pathlib import Path

from hostdoctor.checks.base import FileCheck
from hostdoctor.core.schema import HostContext, Status

_MB = 1024 * 1024


class FileContains(FileCheck):
    """Check files for content matching a regular expression."""

    description = "Check for files whose contents match a regular expression."
    extension: str = "php"
    regex: str = ""
    status_on_match: str = "error"

    def __init__(self, **options: object) -> None:
        super().__init__(**options)
        self._pattern = re.compile(self.regex) if self.regex else None
        self._matches: list[Path] = []

    def check_file(self, path: Path) -> None:
        if self._pattern is None:
            return
        text = path.read_text(encoding="utf-8", errors="replace")
        if self._pattern.search(text):
            self._matches.append(path)

    def run(self, context: HostContext) -> None:
        if self._pattern is None:
            self.set_result(Status.ERROR, "No regex configured.")
            return
        exts = "|".join(sorted(self.extensions))
        if not self._matches:
            self.set_result(Status.SUCCESS, f"All '{exts}' files passed check for '{self.regex}'.")
            return
        count = len(self._matches)
        noun = "file" if count == 1 else "files"
        shown = ", ".join(_relative(p, context.root) for p in self._matches[:5])
        more = f" (+{count - 5} more)" if count > 5 else ""
        self.set_result(
            Status(self.status_on_match),
            f"{count} '{exts}' {noun} failed check for '{self.regex}': {shown}{more}.",
        )


class FileEval(FileContains):
    """Check for eval() of base64-decoded payloads in PHP files."""

    description = "Check for files that eval() a base64_decode() payload."
    regex: str = r"eval\(.*base64_decode\(.*"


class FileSize(FileCheck):
    """Check for files larger than a threshold."""

    description = "Check for files that have grown larger than a threshold."
    extension: str = "log"
    threshold_mb: float = 10

    def __init__(self, **options: object) -> None:
        super().__init__(**options)
        self._oversized: list[tuple[Path, int]] = []

    def check_file(self, path: Path) -> None:
        size = path.stat().st_size
        if size > float(self.threshold_mb) * _MB:
            self._oversized.append((path, size))

    def run(self, context: HostContext) -> None:
        if not self._oversized:
            self.set_result(Status.SUCCESS, f"No files larger than {self.threshold_mb} MB.")
            return
        largest, size = max(self._oversized, key=lambda item: item[1])
        self.set_result(
            Status.WARNING,
            f"{len(self._oversized)} file(s) larger than {self.threshold_mb} MB; "
            f"largest is {_relative(largest, context.root)} ({size // _MB} MB).",
        )


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)
