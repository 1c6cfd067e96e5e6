"""Base classes for checks: a plain Check and a file-scanning FileCheck."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

from hostdoctor.core.exceptions import CheckError, ConfigError
from hostdoctor.core.schema import HostContext, Stage, Status


def file_extension(path: Path | str) -> str:
    """Return the text after the last dot of the file name, or ''."""
    name = Path(path).name
    if "." not in name:
        return ""
    return name.rpartition(".")[2]


def parse_extensions(value: Any) -> frozenset[str]:
    """Extensions from ``"php|inc"`` or a list such as ``["php", "inc"]``."""
    if isinstance(value, str):
        parts = value.split("|")
    elif isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        parts = list(value)
    else:
        raise ConfigError(
            f"Option 'extension' must be a string like 'php|inc' or a list of strings, got {value!r}"
        )
    return frozenset(p.strip() for p in parts if p.strip())


def option_names(cls: type) -> set[str]:
    """Public, non-callable class attributes a check accepts as options."""
    names: set[str] = set()
    for klass in cls.__mro__:
        for key, value in vars(klass).items():
            if key.startswith("_") or key in _RESERVED:
                continue
            if callable(value) or isinstance(value, (property, classmethod, staticmethod)):
                continue
            names.add(key)
    return names


def validate_options(cls: type, options: dict[str, Any]) -> None:
    """Raise ConfigError if an option is not declared by the check class, or has a bad value."""
    allowed = option_names(cls)
    unknown = sorted(k for k in options if k not in allowed)
    if unknown:
        raise ConfigError(
            f"Unknown option(s) for {cls.__name__}: {', '.join(unknown)}. "
            f"Allowed: {', '.join(sorted(allowed)) or 'none'}."
        )
    check_values = getattr(cls, "check_option_values", None)
    if check_values is not None:
        check_values(options)


class Check(ABC):
    """A named probe that reports one status and message per run.

    Subclasses set ``description`` and, when they need the host to be partly
    or fully bootstrapped, ``stage``. Any other public class attribute can be
    overridden through constructor options (and therefore from config files).
    """

    description: ClassVar[str] = ""
    stage: ClassVar[Stage | None] = None

    def __init__(self, **options: Any) -> None:
        validate_options(type(self), options)
        for key, value in options.items():
            setattr(self, key, value)
        self.name = ""
        self._status: Status | None = None
        self._message: str | None = None

    @abstractmethod
    def run(self, context: HostContext) -> None:
        """Inspect the host and call ``set_result`` exactly once."""
        ...

    def set_result(self, status: Status | str, message: str) -> None:
        if self._status is not None:
            raise CheckError(f"Check '{self.name}' already reported '{self._status.value}'")
        self._status = Status(status)
        self._message = message

    @property
    def status(self) -> Status | None:
        return self._status

    @property
    def message(self) -> str | None:
        return self._message

    @property
    def has_result(self) -> bool:
        return self._status is not None

    def get_results(self) -> dict[str, str]:
        if self._status is None:
            raise CheckError(f"Check '{self.name}' has not run")
        return {"status": self._status.value, "message": self._message or ""}


class FileCheck(Check):
    """A check fed every file with a matching extension during one tree walk.

    ``check_file`` is called once per matching file, then ``run`` once after
    the walk has finished. Extensions are matched exactly and case-sensitively.
    """

    stage: ClassVar[Stage | None] = Stage.PRE_HOST_INIT
    extension: str | list[str] = ""

    @classmethod
    def check_option_values(cls, options: dict[str, Any]) -> None:
        if "extension" in options:
            parse_extensions(options["extension"])

    def __init__(self, **options: Any) -> None:
        super().__init__(**options)
        self.extensions = parse_extensions(self.extension)

    @abstractmethod
    def check_file(self, path: Path) -> None:
        ...

    def wants(self, path: Path) -> bool:
        return file_extension(path) in self.extensions


_RESERVED = {"description", "stage", "name", "extensions"}


def stage_for(check: Any) -> Stage:
    """The stage a check (class, factory or instance) runs in.

    File checks always ride the pre-init walk, whatever they declare.
    """
    cls = check if isinstance(check, type) else type(check)
    if issubclass(cls, FileCheck):
        return Stage.PRE_HOST_INIT
    declared = getattr(check, "stage", None)
    return Stage(declared) if declared else Stage.IMMEDIATE
