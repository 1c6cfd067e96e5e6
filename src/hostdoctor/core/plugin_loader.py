"""Check plugins from drop-in directories, and check class references."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any

from hostdoctor.core.exceptions import PluginLoadError
from hostdoctor.core.registry import CheckRegistry

log = logging.getLogger(__name__)


@dataclass
class CheckPlugin:
    """A plugin file and the check names it registered once loaded."""

    name: str
    path: Path
    checks: list[str] = field(default_factory=list)


def _plugin_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.rglob("*.py") if not p.name.startswith("_"))


def _import_file(path: Path) -> ModuleType:
    """Execute a .py file as a private module and return it."""
    path = Path(path).resolve()
    if not path.is_file():
        raise PluginLoadError(f"Check source does not exist: {path}")
    module_name = f"hostdoctor_plugin_{path.stem}_{id(path)}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(f"Not an importable Python file: {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[module_name]
        raise PluginLoadError(f"Error while importing {path}: {type(e).__name__}: {e}") from e
    return module


def load_reference(ref: str, base_dir: Path | None = None) -> Any:
    """Resolve a check implementation reference.

    Accepted forms: a built-in class name (``FileEval``), ``pkg.module:Class``,
    ``pkg.module.Class`` and ``path/to/file.py:Class`` (relative to base_dir).
    """
    from hostdoctor.checks import CHECK_CLASSES

    if ref in CHECK_CLASSES:
        return CHECK_CLASSES[ref]

    sep = ":" if ":" in ref else "."
    target, _, attr = ref.rpartition(sep)
    if not target or not attr:
        raise PluginLoadError(f"Cannot resolve check reference '{ref}'")

    if target.endswith(".py"):
        source = Path(target)
        if base_dir is not None and not source.is_absolute():
            source = base_dir / source
        module = _import_file(source)
    else:
        try:
            module = importlib.import_module(target)
        except ImportError as e:
            raise PluginLoadError(f"Cannot import module '{target}' for '{ref}': {e}") from e

    if not hasattr(module, attr):
        raise PluginLoadError(f"'{target}' has no attribute '{attr}'")
    return getattr(module, attr)


class PluginLoader:
    """Registers checks from every plugin file under the given directories.

    A plugin is any non-private ``.py`` file (searched recursively) that
    defines ``register(registry)``.
    """

    def __init__(self, plugin_dirs: list[Path], registry: CheckRegistry) -> None:
        self._dirs = [Path(d).resolve() for d in plugin_dirs]
        self._registry = registry
        self.load_errors: list[tuple[Path, PluginLoadError]] = []

    def discover_plugins(self) -> list[CheckPlugin]:
        return [CheckPlugin(name=p.stem, path=p) for d in self._dirs for p in _plugin_files(d)]

    def load_plugin(self, plugin_path: Path) -> CheckPlugin:
        path = Path(plugin_path).resolve()
        module = _import_file(path)
        register = getattr(module, "register", None)
        if not callable(register):
            raise PluginLoadError(f"Plugin has no register() function: {path}")

        before = set(self._registry.names())
        try:
            register(self._registry)
        except Exception as e:
            raise PluginLoadError(f"register() in {path} raised {type(e).__name__}: {e}") from e
        added = [n for n in self._registry.names() if n not in before]
        log.debug("Plugin %s registered: %s", path.name, ", ".join(added) or "nothing new")
        return CheckPlugin(name=path.stem, path=path, checks=added)

    def load_all(self) -> list[CheckPlugin]:
        """Load every discovered plugin; failures are logged and kept in ``load_errors``."""
        self.load_errors = []
        loaded: list[CheckPlugin] = []
        for plugin in self.discover_plugins():
            try:
                loaded.append(self.load_plugin(plugin.path))
            except PluginLoadError as e:
                log.warning("Skipping check plugin %s: %s", plugin.path, e)
                self.load_errors.append((plugin.path, e))
        return loaded
