"""Built-in checks."""

from hostdoctor.checks.base import Check, FileCheck, file_extension
from hostdoctor.checks.disk import DiskSpace
from hostdoctor.checks.files import FileContains, FileEval, FileSize
from hostdoctor.checks.settings import HostInventory, SettingsPresent, SettingValue

BUILTIN_CHECKS = {
    "disk-space": DiskSpace,
    "file-eval": FileEval,
    "file-size": FileSize,
    "settings-present": SettingsPresent,
    "host-inventory": HostInventory,
}

# Names a config file may use in ``check:`` besides an import reference or a
# registered check name. The dashed names are templates that only work with
# options (a key, a regex) and are never registered by themselves.
CHECK_CLASSES = {
    "file-contains": FileContains,
    "setting-value": SettingValue,
    "DiskSpace": DiskSpace,
    "FileContains": FileContains,
    "FileEval": FileEval,
    "FileSize": FileSize,
    "HostInventory": HostInventory,
    "SettingsPresent": SettingsPresent,
    "SettingValue": SettingValue,
}


def register_builtin_checks(registry) -> None:
    """Register built-in checks on the given registry."""
    for name, cls in BUILTIN_CHECKS.items():
        registry.register(name, cls)


__all__ = [
    "BUILTIN_CHECKS",
    "CHECK_CLASSES",
    "Check",
    "DiskSpace",
    "FileCheck",
    "FileContains",
    "FileEval",
    "FileSize",
    "HostInventory",
    "SettingValue",
    "SettingsPresent",
    "file_extension",
    "register_builtin_checks",
]
