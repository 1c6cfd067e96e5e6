"""Central registry of check names to check factories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable

from hostdoctor.core.exceptions import NoChecksError, RegistryError, UnknownCheckError
from hostdoctor.core.schema import CheckDescriptor

log = logging.getLogger(__name__)


class CheckRegistry:
    """Catalog of checks, keyed by name, in registration order."""

    def __init__(self) -> None:
        self._checks: dict[str, CheckDescriptor] = {}

    def register(
        self,
        name: str,
        factory: Callable[..., Any],
        documentation: str | None = None,
        **options: Any,
    ) -> None:
        """Register a check factory; a repeated name replaces the earlier entry."""
        if not name:
            raise RegistryError("Check name must not be empty")
        if name in self._checks:
            log.warning("Overwriting check registration: %s", name)
        if documentation is None:
            documentation = getattr(factory, "description", "") or ""
        self._checks[name] = CheckDescriptor(
            name=name,
            factory=factory,
            documentation=documentation,
            options=dict(options),
        )

    def unregister(self, name: str) -> None:
        if self._checks.pop(name, None) is None:
            log.debug("Ignoring removal of unregistered check: %s", name)

    def register_from_config(self, path: Path | str) -> None:
        """Merge checks declared in a YAML config file into the catalog."""
        from hostdoctor.core.check_config import load_check_config

        load_check_config(Path(path), self)

    def get(self, name: str) -> CheckDescriptor:
        if name not in self._checks:
            raise UnknownCheckError([name])
        return self._checks[name]

    def resolve(self, names: Iterable[str] | None = None) -> dict[str, Any]:
        """Build check instances for the given names, or for every check if none.

        Unknown names are all reported together before anything is built.
        """
        requested = list(dict.fromkeys(names or []))
        if not requested:
            if not self._checks:
                raise NoChecksError("No checks registered.")
            requested = list(self._checks)
        unknown = [n for n in requested if n not in self._checks]
        if unknown:
            raise UnknownCheckError(unknown)
        resolved = {name: self._checks[name].create() for name in requested}
        log.debug("Resolved %d check(s): %s", len(resolved), ", ".join(resolved))
        return resolved

    def list_all(self) -> list[CheckDescriptor]:
        """Return every registered descriptor in registration order."""
        return list(self._checks.values())

    def names(self) -> list[str]:
        return list(self._checks)

    def __contains__(self, name: object) -> bool:
        return name in self._checks

    def __len__(self) -> int:
        return len(self._checks)
