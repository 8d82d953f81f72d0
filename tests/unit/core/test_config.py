"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import AccrualConfig
from core.constants import DEFAULT_METADATA_COLUMNS
from core.errors import AccrualConfigError


def test_from_env_uses_defaults() -> None:
    """Config should fall back to the built-in defaults."""
    config = AccrualConfig.from_env()

    assert config == AccrualConfig()
    assert config.priority_columns == DEFAULT_METADATA_COLUMNS


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should read separator, prefix, and id columns from env."""
    monkeypatch.setenv("ACCRUAL_CSV_SEPARATOR", ";")
    monkeypatch.setenv("ACCRUAL_FILENAME_PREFIX", "pilot")
    monkeypatch.setenv("ACCRUAL_ID_COLUMNS", "subject, session")

    config = AccrualConfig.from_env()

    assert config.csv_separator == ";"
    assert config.filename_prefix == "pilot"
    assert config.id_columns == ("subject", "session")
    assert config.priority_columns[:3] == ("subject", "session", "sender")


def test_from_env_raises_for_empty_separator(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for an empty CSV separator."""
    monkeypatch.setenv("ACCRUAL_CSV_SEPARATOR", "")

    with pytest.raises(AccrualConfigError):
        AccrualConfig.from_env()

    assert True


def test_from_env_raises_for_quote_separator(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject separators that clash with CSV quoting."""
    monkeypatch.setenv("ACCRUAL_CSV_SEPARATOR", '"')

    with pytest.raises(AccrualConfigError):
        AccrualConfig.from_env()

    assert True


def test_from_env_raises_for_blank_column_list(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail when a column list has no names."""
    monkeypatch.setenv("ACCRUAL_PRIORITY_COLUMNS", " , ")

    with pytest.raises(AccrualConfigError):
        AccrualConfig.from_env()

    assert True


def test_from_file_layers_yaml_over_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """YAML settings should override environment values."""
    monkeypatch.setenv("ACCRUAL_FILENAME_PREFIX", "env-prefix")
    settings_path = tmp_path / "accrual.yaml"
    settings_path.write_text(
        "csv_separator: \"\\t\"\npriority_columns:\n  - trial\n  - id\n",
        encoding="utf-8",
    )

    config = AccrualConfig.from_file(str(settings_path))

    assert config.csv_separator == "\t"
    assert config.filename_prefix == "env-prefix"
    assert config.priority_columns == ("trial", "id")


def test_from_file_rejects_unknown_keys(tmp_path) -> None:
    """Unknown settings keys should be reported."""
    settings_path = tmp_path / "accrual.yaml"
    settings_path.write_text("separator: ';'\n", encoding="utf-8")

    with pytest.raises(AccrualConfigError, match="Unknown settings keys"):
        AccrualConfig.from_file(str(settings_path))

    assert True


def test_from_file_rejects_wrong_types(tmp_path) -> None:
    """Column lists must be lists of strings."""
    settings_path = tmp_path / "accrual.yaml"
    settings_path.write_text("id_columns: participant\n", encoding="utf-8")

    with pytest.raises(AccrualConfigError):
        AccrualConfig.from_file(str(settings_path))

    assert True


def test_from_file_rejects_missing_file(tmp_path) -> None:
    """A missing settings file should fail with guidance."""
    with pytest.raises(AccrualConfigError, match="does not exist"):
        AccrualConfig.from_file(str(tmp_path / "missing.yaml"))

    assert True


def test_from_file_empty_document_keeps_env(tmp_path) -> None:
    """An empty settings file should leave env config unchanged."""
    settings_path = tmp_path / "accrual.yaml"
    settings_path.write_text("", encoding="utf-8")

    assert AccrualConfig.from_file(str(settings_path)) == AccrualConfig.from_env()
