"""Framework core: registry, results, walk, config, schema.

The scheduler, doctor and config-file loader depend on ``hostdoctor.checks``
and are imported from their own modules.
"""

from hostdoctor.core.config import AppConfig, ConfigManager
from hostdoctor.core.registry import CheckRegistry
from hostdoctor.core.results import ResultCollector, ResultView
from hostdoctor.core.schema import (
    CheckDescriptor,
    CheckState,
    HostContext,
    ResultRecord,
    Stage,
    Status,
)
from hostdoctor.core.walk import WalkEntry, walk_tree

__all__ = [
    "AppConfig",
    "CheckDescriptor",
    "CheckRegistry",
    "CheckState",
    "ConfigManager",
    "HostContext",
    "ResultCollector",
    "ResultRecord",
    "ResultView",
    "Stage",
    "Status",
    "WalkEntry",
    "walk_tree",
]
