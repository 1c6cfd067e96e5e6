"""Checks against the host's loaded settings and initialized state."""

from __future__ import annotations

from typing import Any

from hostdoctor.checks.base import Check
from hostdoctor.core.schema import HostContext, Stage, Status


class SettingsPresent(Check):
    """Check that the host settings loaded and contain the required keys."""

    description = "Check that the host configuration loaded and defines the required keys."
    stage = Stage.CONFIG_LOADED
    required: list = []

    def run(self, context: HostContext) -> None:
        if not context.settings_loaded:
            self.set_result(Status.WARNING, "No host settings file was found.")
            return
        missing = [k for k in self.required if k not in context.settings]
        if missing:
            self.set_result(Status.ERROR, f"Missing host setting(s): {', '.join(missing)}.")
            return
        self.set_result(Status.SUCCESS, f"Host settings loaded ({len(context.settings)} key(s)).")


class SettingValue(Check):
    """Check the value of a host setting once the host is initialized."""

    description = "Check that a host setting has an expected value."
    stage = Stage.POST_HOST_INIT
    key: str = ""
    expected: Any = None
    falsy: bool = False
    truthy: bool = False
    status_on_mismatch: str = "error"

    def run(self, context: HostContext) -> None:
        if not self.key:
            self.set_result(Status.ERROR, "No setting key configured.")
            return
        if self.key not in context.settings:
            if self.falsy:
                self.set_result(Status.SUCCESS, f"Setting '{self.key}' is not defined.")
            else:
                self.set_result(Status(self.status_on_mismatch), f"Setting '{self.key}' is not defined.")
            return
        actual = context.settings[self.key]
        if self.falsy:
            ok, want = not actual, "falsy"
        elif self.truthy:
            ok, want = bool(actual), "truthy"
        else:
            ok, want = actual == self.expected, repr(self.expected)
        if ok:
            self.set_result(Status.SUCCESS, f"Setting '{self.key}' is {want}.")
        else:
            self.set_result(
                Status(self.status_on_mismatch),
                f"Setting '{self.key}' is {actual!r} but expected {want}.",
            )


class HostInventory(Check):
    """Report what the host found during full initialization."""

    description = "Report what the host discovered during full initialization."
    stage = Stage.POST_HOST_INIT
    min_entries: int = 1

    def run(self, context: HostContext) -> None:
        if not context.initialized:
            self.set_result(Status.ERROR, "Host is not initialized.")
            return
        entries = int(context.inventory.get("entries", 0))
        if entries < int(self.min_entries):
            self.set_result(Status.WARNING, f"Host root has {entries} top-level entries.")
            return
        summary = ", ".join(f"{k}: {v}" for k, v in sorted(context.inventory.items()))
        self.set_result(Status.SUCCESS, f"Host initialized ({summary}).")
