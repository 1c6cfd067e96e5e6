"""Host bootstrap collaborators the scheduler attaches to."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Protocol

import yaml

from hostdoctor.core.exceptions import HostBootError
from hostdoctor.core.schema import HostContext, Stage

log = logging.getLogger(__name__)

StageHandler = Callable[[HostContext], None]


class HostBootstrap(Protocol):
    """A host whose bootstrap fires named stages in a fixed order.

    Handlers registered for a stage the host never reaches are never called.
    """

    root: Path

    def on_stage(self, stage: Stage, handler: StageHandler) -> None:
        ...

    def boot(self) -> HostContext:
        ...


class DirectoryHost:
    """A host application rooted at a directory.

    Bootstrap: check the root, fire ``pre_host_init``; read the settings file
    (YAML) and fire ``config_loaded``; take an inventory of the root and fire
    ``post_host_init``.
    """

    def __init__(self, root: Path | str, settings_file: str = "host.yaml") -> None:
        self.root = Path(root).resolve()
        self.settings_file = settings_file
        self._handlers: dict[Stage, list[StageHandler]] = {}
        self.reached: list[Stage] = []

    def on_stage(self, stage: Stage, handler: StageHandler) -> None:
        if stage is Stage.IMMEDIATE:
            raise ValueError("Immediate checks do not wait for the host")
        self._handlers.setdefault(stage, []).append(handler)

    def _fire(self, stage: Stage, context: HostContext) -> None:
        context.stage = stage
        self.reached.append(stage)
        handlers = self._handlers.get(stage, [])
        log.debug("Host reached %s (%d handler(s))", stage.value, len(handlers))
        for handler in handlers:
            handler(context)

    def load_settings(self) -> tuple[dict, bool]:
        path = self.root / self.settings_file
        if not path.is_file():
            log.debug("No host settings at %s", path)
            return {}, False
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise HostBootError(f"Failed to load host settings {path}: {e}") from e
        if not isinstance(data, dict):
            raise HostBootError(f"Host settings {path} must be a mapping")
        return data, True

    def take_inventory(self) -> dict[str, int]:
        entries = list(self.root.iterdir())
        return {
            "entries": len(entries),
            "directories": sum(1 for e in entries if e.is_dir()),
            "files": sum(1 for e in entries if e.is_file()),
        }

    def boot(self) -> HostContext:
        if not self.root.is_dir():
            raise HostBootError(f"Host root is not a directory: {self.root}")
        context = HostContext(root=self.root)

        self._fire(Stage.PRE_HOST_INIT, context)

        context.settings, context.settings_loaded = self.load_settings()
        self._fire(Stage.CONFIG_LOADED, context)

        try:
            context.inventory = self.take_inventory()
        except OSError as e:
            raise HostBootError(f"Failed to initialize host at {self.root}: {e}") from e
        context.initialized = True
        log.debug("Host inventory: %s", context.inventory)
        self._fire(Stage.POST_HOST_INIT, context)
        return context
