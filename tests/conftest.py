"""Shared pytest fixtures for hostdoctor tests.

Factory functions live in ``_helpers.py``; this module re-exports them as
pytest fixtures so tests can receive them via dependency injection.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from _helpers import (  # noqa: F401
    CollectingFileCheck,
    RecordingCheck,
    make_php_tree,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_events(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give each test a fresh shared event log on the recording doubles."""
    monkeypatch.setattr(RecordingCheck, "events", [])
    monkeypatch.setattr(CollectingFileCheck, "events", [])


@pytest.fixture(autouse=True)
def _no_doctor_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep DOCTOR_* variables from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("DOCTOR_"):
            monkeypatch.delenv(key)


@pytest.fixture()
def php_tree(tmp_path: Path) -> Path:
    """A small host tree with php, txt, inc and extensionless files."""
    return make_php_tree(tmp_path / "host")
