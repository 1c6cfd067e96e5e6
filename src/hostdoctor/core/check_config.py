"""Loading check declarations from YAML configuration files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from hostdoctor.checks.base import validate_options
from hostdoctor.core.exceptions import ConfigError, PluginLoadError
from hostdoctor.core.plugin_loader import load_reference
from hostdoctor.core.registry import CheckRegistry

log = logging.getLogger(__name__)

DEFAULT_CHECK_CONFIG = Path(__file__).resolve().parent.parent / "doctor.yaml"

_META_KEY = "_"


class ConfigMeta(BaseModel):
    """The ``_`` section of a check config file."""

    model_config = {"extra": "forbid"}

    inherit: str | None = None
    skipped_checks: list[str] = Field(default_factory=list)


class CheckEntry(BaseModel):
    """One named check declaration."""

    model_config = {"extra": "forbid", "populate_by_name": True}

    check: str | None = None
    class_: str | None = Field(default=None, alias="class")
    options: dict[str, Any] = Field(default_factory=dict)

    @property
    def reference(self) -> str | None:
        return self.check or self.class_


def read_check_config(path: Path) -> tuple[ConfigMeta, dict[str, CheckEntry]]:
    """Parse and validate a config file without touching any registry."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping of check names")

    raw_meta = data.pop(_META_KEY, None) or {}
    if not isinstance(raw_meta, dict):
        raise ConfigError(f"The '{_META_KEY}' section of {path} must be a mapping")
    try:
        meta = ConfigMeta.model_validate(raw_meta)
        entries: dict[str, CheckEntry] = {}
        for name, body in data.items():
            if not isinstance(body, dict):
                raise ConfigError(f"Check '{name}' in {path} must be a mapping")
            entries[str(name)] = CheckEntry.model_validate(body)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
    return meta, entries


def _resolve_inherit(value: str, base_dir: Path) -> Path:
    if value == "default":
        return DEFAULT_CHECK_CONFIG
    path = Path(value).expanduser()
    return path if path.is_absolute() else (base_dir / path)


def load_check_config(
    path: Path,
    registry: CheckRegistry,
    _seen: tuple[Path, ...] = (),
) -> None:
    """Register the checks declared in ``path`` (and anything it inherits)."""
    path = Path(path).resolve()
    if path in _seen:
        chain = " -> ".join(str(p) for p in (*_seen, path))
        raise ConfigError(f"Config inheritance cycle: {chain}")

    meta, entries = read_check_config(path)
    base_dir = path.parent

    if meta.inherit:
        load_check_config(_resolve_inherit(meta.inherit, base_dir), registry, (*_seen, path))

    for name, entry in entries.items():
        ref = entry.reference
        if ref and ref in registry:
            base = registry.get(ref)
            factory = base.factory
            options = {**base.options, **entry.options}
        elif ref:
            try:
                factory = load_reference(ref, base_dir)
            except PluginLoadError as e:
                raise ConfigError(f"Check '{name}' in {path}: {e}") from e
            options = dict(entry.options)
        elif name in registry:
            previous = registry.get(name)
            factory = previous.factory
            options = {**previous.options, **entry.options}
        else:
            raise ConfigError(f"Check '{name}' in {path} needs a 'check' reference")

        if not callable(factory):
            raise ConfigError(f"Check '{name}' in {path}: '{ref}' is not callable")
        if isinstance(factory, type):
            validate_options(factory, options)
        registry.register(name, factory, **options)

    for name in meta.skipped_checks:
        registry.unregister(name)

    log.debug("Loaded %d check declaration(s) from %s", len(entries), path)
