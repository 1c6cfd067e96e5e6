"""Custom exception hierarchy for hostdoctor."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hostdoctor.core.results import ResultCollector
    from hostdoctor.core.schema import Stage


class DoctorError(Exception):
    """Base exception for hostdoctor."""

    pass


class ConfigError(DoctorError):
    """Raised when a check configuration file is missing or malformed."""

    pass


class RegistryError(DoctorError):
    """Raised when a check is not found or registration fails."""

    pass


class UnknownCheckError(RegistryError):
    """Raised when one or more requested check names are not registered."""

    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        super().__init__(self.message)

    @property
    def message(self) -> str:
        label = "Invalid checks" if len(self.names) > 1 else "Invalid check"
        return f"{label}: {', '.join(self.names)}."


class NoChecksError(RegistryError):
    """Raised when all checks are requested but none are registered."""

    pass


class PluginLoadError(DoctorError):
    """Raised when a plugin or check reference fails to load."""

    pass


class CheckError(DoctorError):
    """Raised when a check breaks its result contract."""

    pass


class FileSystemError(DoctorError):
    """Raised when the host file tree cannot be walked to completion."""

    pass


class HostBootError(DoctorError):
    """Raised when the host bootstrap aborts before reaching its last stage."""

    pass


class FormatError(DoctorError):
    """Raised for an unknown output format or field."""

    pass


class SkippedChecksError(DoctorError):
    """Raised when the host never fired the stage some checks were waiting on.

    Carries the partial results so callers can still show what did run.
    """

    def __init__(
        self,
        skipped: list[str],
        stages: list[Stage],
        collector: ResultCollector,
        reason: str = "",
    ) -> None:
        self.skipped = list(skipped)
        self.reason = reason
        self.stages = list(stages)
        self.collector = collector
        noun = "check" if len(self.skipped) == 1 else "checks"
        reached = ", ".join(s.value for s in self.stages)
        super().__init__(
            f"{len(self.skipped)} {noun} skipped ({', '.join(self.skipped)}): "
            f"host never reached {reached}."
            + (f" {reason}" if reason else "")
        )
