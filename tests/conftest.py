"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ACCRUAL_ENV_VARS = (
    "ACCRUAL_CSV_SEPARATOR",
    "ACCRUAL_FILENAME_PREFIX",
    "ACCRUAL_ID_COLUMNS",
    "ACCRUAL_PRIORITY_COLUMNS",
)


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def clean_accrual_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from ACCRUAL_* settings in the caller's shell."""
    for name in _ACCRUAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
