"""Tests for the Check base classes and the built-in checks."""

from __future__ import annotations

from collections import namedtuple
from pathlib import Path
from unittest.mock import patch

import pytest

from hostdoctor.checks import (
    DiskSpace,
    FileContains,
    FileEval,
    FileSize,
    HostInventory,
    SettingsPresent,
    SettingValue,
    file_extension,
)
from hostdoctor.core.exceptions import CheckError, ConfigError
from hostdoctor.core.schema import HostContext, Stage, Status

from _helpers import RecordingCheck

_Usage = namedtuple("_Usage", "total used free")
_MB = 1024 * 1024


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.php", "php"),
        ("archive.tar.gz", "gz"),
        (".htaccess", "htaccess"),
        ("Makefile", ""),
        ("trailing.", ""),
    ],
)
def test_file_extension(name: str, expected: str) -> None:
    assert file_extension(Path("/x") / name) == expected


def test_check_unknown_option_raises() -> None:
    with pytest.raises(ConfigError, match="Unknown option"):
        RecordingCheck(colour="blue")


def test_check_result_set_once() -> None:
    check = RecordingCheck()
    assert check.status is None and check.message is None
    check.set_result("warning", "hm")
    assert check.get_results() == {"status": "warning", "message": "hm"}
    with pytest.raises(CheckError):
        check.set_result("success", "again")


def test_check_get_results_before_run_raises() -> None:
    with pytest.raises(CheckError, match="has not run"):
        RecordingCheck().get_results()


def test_file_check_extension_option() -> None:
    assert FileEval().extensions == frozenset({"php"})
    assert FileEval(extension="php|inc").extensions == frozenset({"php", "inc"})
    assert FileEval().stage is Stage.PRE_HOST_INIT


def test_file_check_extension_list_option() -> None:
    assert FileEval(extension=["php", "inc"]).extensions == frozenset({"php", "inc"})
    assert FileEval(extension=("php",)).extensions == frozenset({"php"})
    assert FileEval(extension=["php", "inc"]).wants(Path("x.inc"))


@pytest.mark.parametrize("value", [5, None, {"php": True}, ["php", 3]])
def test_file_check_bad_extension_option_raises(value: object) -> None:
    with pytest.raises(ConfigError, match="extension"):
        FileEval(extension=value)


def test_file_eval_with_extension_list_flags_payload(tmp_path: Path) -> None:
    (tmp_path / "bad.php").write_text("<?php eval(base64_decode('x'));")
    check = FileEval(extension=["php", "inc"])
    for path in tmp_path.iterdir():
        if check.wants(path):
            check.check_file(path)
    check.run(HostContext(root=tmp_path))
    assert check.status is Status.ERROR
    assert check.message.startswith("1 'inc|php' file failed check")


def test_disk_space_levels(tmp_path: Path) -> None:
    ctx = HostContext(root=tmp_path)
    for free_mb, status in ((50, Status.ERROR), (500, Status.WARNING), (5000, Status.SUCCESS)):
        check = DiskSpace()
        with patch("hostdoctor.checks.disk.shutil.disk_usage", return_value=_Usage(0, 0, free_mb * _MB)):
            check.run(ctx)
        assert check.status is status


def test_file_eval_flags_obfuscated_payload(tmp_path: Path) -> None:
    clean = tmp_path / "clean.php"
    clean.write_text("<?php echo 'hi';")
    bad = tmp_path / "bad.php"
    bad.write_text("<?php eval(base64_decode('ZWNobyAx'));")
    check = FileEval()
    check.check_file(clean)
    check.check_file(bad)
    check.run(HostContext(root=tmp_path))
    assert check.status is Status.ERROR
    assert check.message.startswith("1 'php' file failed check")
    assert "bad.php" in check.message


def test_file_eval_clean(tmp_path: Path) -> None:
    check = FileEval()
    check.run(HostContext(root=tmp_path))
    assert check.status is Status.SUCCESS


def test_file_contains_without_regex_is_error(tmp_path: Path) -> None:
    check = FileContains()
    check.run(HostContext(root=tmp_path))
    assert check.status is Status.ERROR


def test_file_contains_custom_status(tmp_path: Path) -> None:
    f = tmp_path / "x.php"
    f.write_text("TODO")
    check = FileContains(regex="TODO", status_on_match="warning")
    check.check_file(f)
    check.run(HostContext(root=tmp_path))
    assert check.status is Status.WARNING


def test_file_size(tmp_path: Path) -> None:
    small = tmp_path / "small.log"
    small.write_text("x")
    big = tmp_path / "big.log"
    big.write_bytes(b"x" * 2048)
    check = FileSize(threshold_mb=0.001)
    check.check_file(small)
    check.check_file(big)
    check.run(HostContext(root=tmp_path))
    assert check.status is Status.WARNING
    assert "big.log" in check.message


def test_settings_present() -> None:
    ctx = HostContext(root=Path("."), settings={"a": 1}, settings_loaded=True)
    ok = SettingsPresent(required=["a"])
    ok.run(ctx)
    assert ok.status is Status.SUCCESS
    missing = SettingsPresent(required=["a", "b"])
    missing.run(ctx)
    assert missing.status is Status.ERROR
    assert "b" in missing.message
    unloaded = SettingsPresent()
    unloaded.run(HostContext(root=Path(".")))
    assert unloaded.status is Status.WARNING


@pytest.mark.parametrize(
    ("options", "settings", "status"),
    [
        ({"key": "debug", "falsy": True}, {"debug": False}, Status.SUCCESS),
        ({"key": "debug", "falsy": True}, {}, Status.SUCCESS),
        ({"key": "debug", "falsy": True}, {"debug": True}, Status.ERROR),
        ({"key": "cache", "truthy": True}, {"cache": 1}, Status.SUCCESS),
        ({"key": "env", "expected": "prod"}, {"env": "dev"}, Status.ERROR),
        ({"key": "env", "expected": "prod", "status_on_mismatch": "warning"}, {"env": "dev"}, Status.WARNING),
        ({"key": "env", "expected": "prod"}, {}, Status.ERROR),
        ({}, {}, Status.ERROR),
    ],
)
def test_setting_value(options: dict, settings: dict, status: Status) -> None:
    check = SettingValue(**options)
    check.run(HostContext(root=Path("."), settings=settings, settings_loaded=True))
    assert check.status is status


def test_host_inventory() -> None:
    check = HostInventory()
    check.run(HostContext(root=Path("."), initialized=True, inventory={"entries": 3}))
    assert check.status is Status.SUCCESS
    early = HostInventory()
    early.run(HostContext(root=Path(".")))
    assert early.status is Status.ERROR
