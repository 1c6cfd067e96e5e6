"""CLI entry point for hostdoctor."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click

from hostdoctor import __version__
from hostdoctor.checks import register_builtin_checks
from hostdoctor.core.check_config import DEFAULT_CHECK_CONFIG
from hostdoctor.core.config import ConfigManager
from hostdoctor.core.doctor import describe_checks, diagnose as run_diagnosis
from hostdoctor.core.exceptions import DoctorError, SkippedChecksError
from hostdoctor.core.host import DirectoryHost
from hostdoctor.core.log import console_log_context
from hostdoctor.core.plugin_loader import PluginLoader
from hostdoctor.core.registry import CheckRegistry
from hostdoctor.core.results import ResultView
from hostdoctor.formatters import FORMATTERS, get_formatter, render, select_fields

RESULT_FIELDS = ["name", "status", "message"]
LIST_FIELDS = ["name", "description", "stage"]


def _load_settings_and_checks(check_config: Path | None = None) -> tuple[ConfigManager, CheckRegistry]:
    """Load settings, register built-ins, plugins and the check config; return config and registry."""
    config = ConfigManager()
    config.load()
    registry = CheckRegistry()
    register_builtin_checks(registry)
    for plugin_dir in config.config.plugin_dirs:
        if (plugins_path := config.resolve_path(plugin_dir)).is_dir():
            PluginLoader([plugins_path], registry).load_all()
    if check_config is None:
        if config.config.check_config:
            check_config = config.resolve_path(config.config.check_config)
        else:
            check_config = DEFAULT_CHECK_CONFIG
    registry.register_from_config(check_config)
    return config, registry


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def _echo_results(view: ResultView, fmt: str, fields: list[str]) -> None:
    click.echo(render(fmt, [r.as_row() for r in view], fields))


format_option = click.option(
    "--format",
    "fmt",
    type=click.Choice(list(FORMATTERS)),
    default=None,
    help="Render output in a particular format (default: table, or DOCTOR_FORMAT).",
)
config_option = click.option(
    "--config",
    "check_config",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Use checks registered in a specific configuration file.",
)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug output on stderr.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """hostdoctor: diagnose what ails a host application."""
    ctx.with_resource(console_log_context(verbose))


@main.command("list-checks")
@config_option
@click.option("--fields", help="Limit the output to specific fields (default: name,description).")
@format_option
def list_checks(check_config: Path | None, fields: str | None, fmt: str | None) -> None:
    """List available checks to run."""
    try:
        config, registry = _load_settings_and_checks(check_config)
        selected = select_fields(fields, LIST_FIELDS, default=["name", "description"])
        fmt = fmt or config.config.format
        click.echo(render(fmt, describe_checks(registry), selected))
    except DoctorError as e:
        _fail(str(e))


@main.command()
@click.argument("checks", nargs=-1)
@click.option("--all", "run_all", is_flag=True, help="Run all registered checks.")
@click.option("--spotlight", is_flag=True, help="Focus on warnings and errors; ignore any successful checks.")
@click.option("--root", "root", type=click.Path(path_type=Path, file_okay=False), help="Host root directory (default: DOCTOR_ROOT or '.').")
@config_option
@click.option("--fields", help="Display one or more fields (default: name,status,message).")
@format_option
def diagnose(
    checks: tuple[str, ...],
    run_all: bool,
    spotlight: bool,
    root: Path | None,
    check_config: Path | None,
    fields: str | None,
    fmt: str | None,
) -> None:
    """Run a series of checks against the host to diagnose issues.

    A check reports a status ('success', 'warning' or 'error') and a
    human-readable message. An 'error' status is a finding, not a failure
    of this command.
    """
    try:
        config, registry = _load_settings_and_checks(check_config)
        selected = select_fields(fields, RESULT_FIELDS)
        fmt = fmt or config.config.format
        get_formatter(fmt)
        host_root = root or config.resolve_path(config.config.host_root)
        host = DirectoryHost(host_root, settings_file=config.config.host_settings_file)
        collector = run_diagnosis(registry, checks, host, run_all=run_all)
    except SkippedChecksError as e:
        view = e.collector.spotlight() if spotlight else e.collector.all()
        if view.records:
            _echo_results(view, fmt, selected)
        _fail(str(e))
    except DoctorError as e:
        _fail(str(e))

    view = collector.spotlight() if spotlight else collector.all()
    if spotlight and view.all_clear and fmt == "table":
        click.echo(f"Success: {view.summary()}")
        return
    _echo_results(view, fmt, selected)


if __name__ == "__main__":
    main()
