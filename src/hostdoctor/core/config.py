"""Application settings: hostdoctor.yaml, then .env, then DOCTOR_* variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

log = logging.getLogger(__name__)

SETTINGS_FILE = "hostdoctor.yaml"
ENV_PREFIX = "DOCTOR_"

# DOCTOR_* variable -> AppConfig field
ENV_FIELDS = {
    "DOCTOR_ROOT": "host_root",
    "DOCTOR_HOST_SETTINGS": "host_settings_file",
    "DOCTOR_CONFIG": "check_config",
    "DOCTOR_FORMAT": "format",
}


def _find_project_root(start: Path | None = None) -> Path:
    """Nearest directory, upward from ``start``, holding hostdoctor.yaml or pyproject.toml."""
    start = Path(start or Path.cwd()).resolve()
    for candidate in [start, *start.parents][:10]:
        if (candidate / SETTINGS_FILE).exists() or (candidate / "pyproject.toml").exists():
            return candidate
    return Path.cwd().resolve()


class AppConfig(BaseModel):
    """Where the host lives, which checks to load and how to print results."""

    host_root: str = "."
    host_settings_file: str = "host.yaml"
    check_config: str | None = None
    format: str = "table"
    plugin_dirs: list[str] = Field(default_factory=lambda: ["plugins"])


class ConfigManager:
    """Builds an AppConfig for one project root.

    Later sources win: ``hostdoctor.yaml``, the project's ``.env``, then
    ``DOCTOR_*`` variables already set in the process environment.
    Broken settings are logged and replaced by defaults; they never stop a run.
    """

    def __init__(
        self,
        project_root: Path | None = None,
        env_path: Path | None = None,
        config_path: Path | None = None,
    ) -> None:
        self._root = Path(project_root or _find_project_root()).resolve()
        self._env_path = Path(env_path) if env_path else self._root / ".env"
        self._config_path = Path(config_path) if config_path else self._root / SETTINGS_FILE
        self._config: AppConfig | None = None
        self._env: dict[str, str] = {}

    def load_env(self) -> dict[str, str]:
        """DOCTOR_* values from .env merged under the process environment; os.environ is untouched."""
        from dotenv import dotenv_values

        values: dict[str, str] = {}
        if self._env_path.is_file():
            try:
                values = {k: v for k, v in dotenv_values(self._env_path).items() if v is not None}
            except OSError as e:
                log.warning("Cannot read %s: %s", self._env_path, e)
        values.update((k, v) for k, v in os.environ.items() if k.startswith(ENV_PREFIX))
        self._env = values
        return self._env

    def load_yaml(self) -> dict[str, Any]:
        import yaml

        if not self._config_path.is_file():
            return {}
        try:
            data = yaml.safe_load(self._config_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            log.warning("Ignoring unreadable settings file %s: %s", self._config_path, e)
            return {}
        if data is None:
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring settings file %s: expected a mapping", self._config_path)
            return {}
        return data

    def load(self) -> AppConfig:
        settings = self.load_yaml()
        env = self.load_env()
        settings.update({name: env[key] for key, name in ENV_FIELDS.items() if env.get(key)})
        if env.get("DOCTOR_PLUGINS"):
            settings["plugin_dirs"] = [p for p in env["DOCTOR_PLUGINS"].split(os.pathsep) if p]

        try:
            self._config = AppConfig(**settings)
        except (TypeError, ValidationError) as e:
            log.warning("Invalid settings in %s, using defaults: %s", self._config_path, e)
            self._config = AppConfig()
        log.debug("Settings: %s", self._config.model_dump())
        return self._config

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            return self.load()
        return self._config

    @property
    def env(self) -> dict[str, str]:
        return self._env

    @property
    def project_root(self) -> Path:
        return self._root

    def resolve_path(self, value: str | Path) -> Path:
        """Absolute paths pass through; relative ones are taken from the project root."""
        path = Path(value).expanduser()
        return path if path.is_absolute() else (self._root / path).resolve()
