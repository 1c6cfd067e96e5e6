"""Tests for check configuration files."""

from __future__ import annotations

from pathlib import Path

import pytest

from hostdoctor.checks import FileEval, SettingValue, register_builtin_checks
from hostdoctor.core.check_config import DEFAULT_CHECK_CONFIG, read_check_config
from hostdoctor.core.exceptions import ConfigError
from hostdoctor.core.registry import CheckRegistry


def _builtin_registry() -> CheckRegistry:
    reg = CheckRegistry()
    register_builtin_checks(reg)
    return reg


def test_config_missing_file_raises(tmp_path: Path) -> None:
    reg = CheckRegistry()
    with pytest.raises(ConfigError, match="does not exist"):
        reg.register_from_config(tmp_path / "nope.yaml")


def test_config_malformed_yaml_raises(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("a-check: [unterminated\n")
    with pytest.raises(ConfigError, match="Malformed YAML"):
        CheckRegistry().register_from_config(cfg)


def test_config_top_level_must_be_mapping(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError, match="mapping"):
        CheckRegistry().register_from_config(cfg)


def test_config_entry_must_be_mapping(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("my-check: SettingValue\n")
    with pytest.raises(ConfigError, match="must be a mapping"):
        CheckRegistry().register_from_config(cfg)


def test_config_unknown_entry_key_raises(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("my-check:\n  check: SettingValue\n  colour: blue\n")
    with pytest.raises(ConfigError, match="Invalid config file"):
        CheckRegistry().register_from_config(cfg)


def test_config_empty_file_registers_nothing(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("")
    reg = CheckRegistry()
    reg.register_from_config(cfg)
    assert len(reg) == 0


def test_config_registers_builtin_class_with_options(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text(
        "debug-off:\n"
        "  check: SettingValue\n"
        "  options:\n"
        "    key: debug\n"
        "    falsy: true\n"
    )
    reg = CheckRegistry()
    reg.register_from_config(cfg)
    check = reg.resolve(["debug-off"])["debug-off"]
    assert isinstance(check, SettingValue)
    assert check.key == "debug"
    assert check.falsy is True


def test_config_accepts_legacy_class_key(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("eval-scan:\n  class: FileEval\n")
    reg = CheckRegistry()
    reg.register_from_config(cfg)
    assert isinstance(reg.resolve(["eval-scan"])["eval-scan"], FileEval)


def test_config_module_reference(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("eval-scan:\n  check: hostdoctor.checks.files:FileEval\nsize:\n  check: hostdoctor.checks.FileSize\n")
    reg = CheckRegistry()
    reg.register_from_config(cfg)
    assert reg.names() == ["eval-scan", "size"]


def test_config_file_reference_relative_to_config(tmp_path: Path) -> None:
    (tmp_path / "custom").mkdir()
    (tmp_path / "custom" / "probe.py").write_text(
        "from hostdoctor.checks.base import Check\n"
        "class Probe(Check):\n"
        "    description = 'A local probe.'\n"
        "    def run(self, context):\n"
        "        self.set_result('success', 'ok')\n"
    )
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("probe:\n  check: custom/probe.py:Probe\n")
    reg = CheckRegistry()
    reg.register_from_config(cfg)
    assert reg.list_all()[0].documentation == "A local probe."


def test_config_bad_reference_raises_config_error(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("x:\n  check: no_such_module_xyz:Thing\n")
    with pytest.raises(ConfigError, match="Check 'x'"):
        CheckRegistry().register_from_config(cfg)


def test_config_unknown_option_raises(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("x:\n  check: SettingValue\n  options:\n    colour: blue\n")
    with pytest.raises(ConfigError, match="colour"):
        CheckRegistry().register_from_config(cfg)


def test_config_overrides_builtin(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("disk-space:\n  check: SettingValue\n  options:\n    key: debug\n")
    reg = _builtin_registry()
    reg.register_from_config(cfg)
    assert isinstance(reg.resolve(["disk-space"])["disk-space"], SettingValue)


def test_config_reoptions_registered_check_without_reference(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("file-size:\n  options:\n    threshold_mb: 1\n")
    reg = _builtin_registry()
    reg.register_from_config(cfg)
    assert reg.resolve(["file-size"])["file-size"].threshold_mb == 1


def test_config_entry_without_reference_for_new_name_raises(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("brand-new:\n  options: {}\n")
    with pytest.raises(ConfigError, match="needs a 'check' reference"):
        CheckRegistry().register_from_config(cfg)


def test_config_inherit_default(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("_:\n  inherit: default\nmine:\n  check: FileEval\n")
    reg = CheckRegistry()
    reg.register_from_config(cfg)
    assert "setting-debug-falsy" in reg
    assert reg.names()[-1] == "mine"


def test_config_inherit_relative_path_and_skip(tmp_path: Path) -> None:
    (tmp_path / "base.yaml").write_text("one:\n  check: FileEval\ntwo:\n  check: FileSize\n")
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("_:\n  inherit: base.yaml\n  skipped_checks: [one]\nthree:\n  check: DiskSpace\n")
    reg = CheckRegistry()
    reg.register_from_config(cfg)
    assert reg.names() == ["two", "three"]


def test_config_inherit_cycle_raises(tmp_path: Path) -> None:
    (tmp_path / "a.yaml").write_text("_:\n  inherit: b.yaml\n")
    (tmp_path / "b.yaml").write_text("_:\n  inherit: a.yaml\n")
    with pytest.raises(ConfigError, match="cycle"):
        CheckRegistry().register_from_config(tmp_path / "a.yaml")


def test_config_later_source_overrides_earlier(tmp_path: Path) -> None:
    first = tmp_path / "first.yaml"
    first.write_text("probe:\n  check: FileEval\n")
    second = tmp_path / "second.yaml"
    second.write_text("probe:\n  check: FileSize\n")
    reg = CheckRegistry()
    reg.register_from_config(first)
    reg.register_from_config(second)
    assert type(reg.resolve(["probe"])["probe"]).__name__ == "FileSize"


def test_bundled_default_config_is_valid() -> None:
    meta, entries = read_check_config(DEFAULT_CHECK_CONFIG)
    assert meta.inherit is None
    assert "setting-debug-falsy" in entries
    reg = _builtin_registry()
    reg.register_from_config(DEFAULT_CHECK_CONFIG)
    assert "file-php-shell-exec" in reg


def test_config_check_names_a_template(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("my-check:\n  check: setting-value\n  options: {key: debug, falsy: true}\n")
    reg = _builtin_registry()
    reg.register_from_config(cfg)
    check = reg.resolve(["my-check"])["my-check"]
    assert isinstance(check, SettingValue)
    assert (check.key, check.falsy) == ("debug", True)


def test_config_check_names_a_registered_check(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("strict-debug:\n  check: debug-off\n  options: {status_on_mismatch: warning}\n")
    reg = CheckRegistry()
    reg.register("debug-off", SettingValue, key="debug", falsy=True)
    reg.register_from_config(cfg)
    check = reg.resolve(["strict-debug"])["strict-debug"]
    assert (check.key, check.falsy, check.status_on_mismatch) == ("debug", True, "warning")
    assert reg.get("debug-off").options == {"key": "debug", "falsy": True}


def test_config_check_named_registered_file_check(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("inc-eval:\n  check: file-eval\n  options: {extension: inc}\n")
    reg = _builtin_registry()
    reg.register_from_config(cfg)
    check = reg.resolve(["inc-eval"])["inc-eval"]
    assert isinstance(check, FileEval)
    assert check.extensions == frozenset({"inc"})


@pytest.mark.parametrize("meta", ["[1, 2]", "just-a-string"])
def test_config_meta_section_must_be_mapping(tmp_path: Path, meta: str) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text(f"_: {meta}\n")
    with pytest.raises(ConfigError, match="section .* must be a mapping"):
        CheckRegistry().register_from_config(cfg)


def test_config_not_utf8_raises(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_bytes(b"my-check:\n  check: \xff\xfe\n")
    with pytest.raises(ConfigError):
        CheckRegistry().register_from_config(cfg)


def test_config_extension_list(tmp_path: Path) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text("evals:\n  check: FileEval\n  options:\n    extension: [php, inc]\n")
    reg = CheckRegistry()
    reg.register_from_config(cfg)
    assert reg.resolve(["evals"])["evals"].extensions == frozenset({"php", "inc"})


@pytest.mark.parametrize("value", ["5", "{php: true}", "[php, 3]"])
def test_config_bad_extension_raises(tmp_path: Path, value: str) -> None:
    cfg = tmp_path / "doctor.yaml"
    cfg.write_text(f"evals:\n  check: FileEval\n  options:\n    extension: {value}\n")
    with pytest.raises(ConfigError, match="extension"):
        CheckRegistry().register_from_config(cfg)
