"""Pydantic models and data structures for the framework."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, Field


class Status(str, Enum):
    """Outcome reported by a check."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Stage(str, Enum):
    """Points in the host bootstrap at which checks may run, in firing order."""

    IMMEDIATE = "immediate"
    PRE_HOST_INIT = "pre_host_init"
    CONFIG_LOADED = "config_loaded"
    POST_HOST_INIT = "post_host_init"

    @property
    def order(self) -> int:
        return list(Stage).index(self)


class CheckState(str, Enum):
    """Lifecycle of a check instance within one invocation."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CheckDescriptor:
    """Registry entry: how to build a check and how to describe it."""

    name: str
    factory: Callable[..., Any]
    documentation: str = ""
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def stage(self) -> Stage:
        from hostdoctor.checks.base import stage_for

        return stage_for(self.factory)

    def create(self) -> Any:
        """Instantiate the check with its configured options."""
        check = self.factory(**self.options)
        check.name = self.name
        return check


class ResultRecord(BaseModel):
    """Formatter-ready projection of a completed check."""

    name: str
    status: Status
    message: str = ""

    def as_row(self, fields: list[str] | None = None) -> dict[str, str]:
        row = {"name": self.name, "status": self.status.value, "message": self.message}
        if not fields:
            return row
        return {f: row[f] for f in fields}


class HostContext(BaseModel):
    """What the host exposes to checks at the stage they run in."""

    model_config = {"arbitrary_types_allowed": True}

    root: Path
    stage: Stage = Stage.IMMEDIATE
    settings: dict[str, Any] = Field(default_factory=dict)
    settings_loaded: bool = False
    initialized: bool = False
    inventory: dict[str, Any] = Field(default_factory=dict)
