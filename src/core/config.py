"""Runtime configuration model for Accrual.

This module owns all environment variable and settings-file parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Mapping, cast

from core.constants import (
    CSV_FORBIDDEN_SEPARATOR_CHARS,
    DEFAULT_CSV_SEPARATOR,
    DEFAULT_FILENAME_PREFIX,
    DEFAULT_ID_COLUMNS,
    DEFAULT_METADATA_COLUMNS,
)
from core.errors import AccrualConfigError, AccrualDependencyError

_SETTINGS_KEYS = ("csv_separator", "filename_prefix", "id_columns", "priority_columns")


@dataclass(frozen=True)
class AccrualConfig:
    """Validated runtime configuration.

    Attributes:
        csv_separator: Default column separator for CSV export.
        filename_prefix: Default prefix for suggested export filenames.
        id_columns: Columns probed, in order, for a participant id.
        priority_columns: Columns moved to the front of the column order.
    """

    csv_separator: str = DEFAULT_CSV_SEPARATOR
    filename_prefix: str = DEFAULT_FILENAME_PREFIX
    id_columns: tuple[str, ...] = DEFAULT_ID_COLUMNS
    priority_columns: tuple[str, ...] = DEFAULT_METADATA_COLUMNS

    @classmethod
    def from_env(cls) -> "AccrualConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            AccrualConfigError: If environment values are invalid.
        """
        separator = _parse_separator(
            os.getenv("ACCRUAL_CSV_SEPARATOR", DEFAULT_CSV_SEPARATOR),
            "ACCRUAL_CSV_SEPARATOR",
        )
        prefix = os.getenv("ACCRUAL_FILENAME_PREFIX", DEFAULT_FILENAME_PREFIX)
        id_columns = DEFAULT_ID_COLUMNS
        raw_id_columns = os.getenv("ACCRUAL_ID_COLUMNS")
        if raw_id_columns is not None:
            id_columns = _parse_column_list(raw_id_columns, "ACCRUAL_ID_COLUMNS")
        raw_priority = os.getenv("ACCRUAL_PRIORITY_COLUMNS")
        if raw_priority is not None:
            priority_columns = _parse_column_list(raw_priority, "ACCRUAL_PRIORITY_COLUMNS")
        else:
            priority_columns = _default_priority_columns(id_columns)
        return cls(
            csv_separator=separator,
            filename_prefix=prefix,
            id_columns=id_columns,
            priority_columns=priority_columns,
        )

    @classmethod
    def from_file(cls, settings_path: str) -> "AccrualConfig":
        """Build config from a YAML settings file layered over the environment.

        Args:
            settings_path: Path to a YAML mapping of config fields.

        Returns:
            A validated config object.

        Raises:
            AccrualDependencyError: If PyYAML is unavailable.
            AccrualConfigError: If the file or any value is invalid.
        """
        payload = _load_settings_payload(settings_path)
        unknown_keys = sorted(str(key) for key in set(payload) - set(_SETTINGS_KEYS))
        if unknown_keys:
            raise AccrualConfigError(
                f"Unknown settings keys {unknown_keys} in {settings_path}. "
                f"Supported keys: {', '.join(_SETTINGS_KEYS)}."
            )
        config = cls.from_env()
        overrides: dict[str, object] = {}
        if "csv_separator" in payload:
            overrides["csv_separator"] = _parse_separator(
                _expect_string(payload["csv_separator"], "csv_separator"),
                "csv_separator",
            )
        if "filename_prefix" in payload:
            overrides["filename_prefix"] = _expect_string(
                payload["filename_prefix"], "filename_prefix"
            )
        if "id_columns" in payload:
            overrides["id_columns"] = _expect_column_list(payload["id_columns"], "id_columns")
            if "priority_columns" not in payload:
                overrides["priority_columns"] = _default_priority_columns(
                    cast(tuple[str, ...], overrides["id_columns"])
                )
        if "priority_columns" in payload:
            overrides["priority_columns"] = _expect_column_list(
                payload["priority_columns"], "priority_columns"
            )
        return replace(config, **overrides)


def _default_priority_columns(id_columns: tuple[str, ...]) -> tuple[str, ...]:
    metadata_columns = DEFAULT_METADATA_COLUMNS[len(DEFAULT_ID_COLUMNS) :]
    return tuple(dict.fromkeys((*id_columns, *metadata_columns)))


def _parse_separator(raw_value: str, source: str) -> str:
    """Validate a CSV separator value.

    Args:
        raw_value: Candidate separator.
        source: Env var or settings key the value came from.

    Returns:
        The separator unchanged.

    Raises:
        AccrualConfigError: If the separator is empty or clashes with quoting.
    """
    problem = separator_problem(raw_value)
    if problem is not None:
        raise AccrualConfigError(f"Invalid {source} value {raw_value!r}: {problem}")
    return raw_value


def separator_problem(separator: str) -> str | None:
    """Describe why a CSV separator is unusable, or return None.

    Args:
        separator: Candidate separator.

    Returns:
        Human-readable problem with remediation, or None when valid.
    """
    if not separator:
        return "separator must not be empty. Use ',' or another delimiter such as ';' or a tab."
    if any(char in separator for char in CSV_FORBIDDEN_SEPARATOR_CHARS):
        return "separator must not contain quotes or line breaks."
    return None


def _parse_column_list(raw_value: str, source: str) -> tuple[str, ...]:
    columns = tuple(part.strip() for part in raw_value.split(",") if part.strip())
    if not columns:
        raise AccrualConfigError(
            f"Invalid {source} value: expected a comma-separated list of column names."
        )
    return columns


def _load_settings_payload(settings_path: str) -> Mapping[str, object]:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise AccrualDependencyError(
            "YAML settings support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    settings_file = Path(settings_path).expanduser().resolve()
    if not settings_file.exists():
        raise AccrualConfigError(
            f"Settings file does not exist at {settings_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(settings_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise AccrualConfigError(
            f"Failed to read settings at {settings_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise AccrualConfigError(
            f"Failed to parse YAML settings at {settings_file}: {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise AccrualConfigError(
            f"Invalid settings at {settings_file}: expected mapping, "
            f"got {type(payload).__name__}."
        )
    return cast(Mapping[str, object], payload)


def _expect_string(value: object, key: str) -> str:
    if not isinstance(value, str):
        raise AccrualConfigError(
            f"Settings field '{key}' must be a string, got {type(value).__name__}."
        )
    return value


def _expect_column_list(value: object, key: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise AccrualConfigError(
            f"Settings field '{key}' must be a list of column names."
        )
    if not value:
        raise AccrualConfigError(f"Settings field '{key}' must not be empty.")
    return tuple(value)
