"""Cocinero configuration loader."""

import logging
import os
import re
import typing
from dataclasses import fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from cocinero_core.errors import create_error
from cocinero_core.types import LogFormat, LogLevel, ValidationIssue, ValidationResult

from .models import CocineroConfig

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "COCINERO_CONFIG_PATH"
LOCAL_CONFIG = Path("cocinero.yaml")

# Pattern: ${VAR}, ${VAR:-default}, ${VAR:?error}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([?-])([^}]*))?\}")

# section -> {key: expected type(s)}
SCHEMA: dict[str, dict[str, Any]] = {
    "logging": {
        "level": str,
        "format": str,
        "components": {"plan": bool, "run": bool, "action": bool, "hook": bool},
        "options": {"show_context": bool, "show_output": bool, "truncate_at": int},
    },
    "execution": {
        "shell": str,
        "action_timeout": (int, float, type(None)),
        "capture_output": bool,
    },
    "packages": {"install_command": list},
    "services": {"systemctl": str},
    "recipes": {"filename": str, "disclaimer": (str, type(None))},
}


def user_config_path() -> Path:
    return Path.home() / ".config" / "cocinero" / "config.yaml"


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Args:
        value: String with potential env var references

    Returns:
        String with env vars resolved

    Raises:
        ProvisionError(CONFIG_INVALID): If a required var is not set
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        operator = match.group(2)  # '-' or '?' or None
        operand = match.group(3)  # default value or error message

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        if operator == "?":
            raise create_error(
                "CONFIG_INVALID",
                detail=operand or f"Required environment variable {var_name} not set",
            )
        raise create_error(
            "CONFIG_INVALID",
            detail=f"Required environment variable {var_name} not set",
        )

    return ENV_VAR_PATTERN.sub(replacer, value)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries; values from override win."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    if isinstance(data, str):
        return resolve_env_vars(data)
    return data


def _enum_value(enum_type: type[Enum], value: str) -> Enum:
    """Look up an enum member by value, ignoring case."""
    for member in enum_type:
        if str(member.value).casefold() == value.casefold():
            return member
    return enum_type(value)


class ConfigLoader:
    """Load and validate cocinero configuration."""

    def __init__(self) -> None:
        self._config_path: Path | None = None

    @property
    def config_path(self) -> Path | None:
        """File the current configuration came from (None for defaults)."""
        return self._config_path

    def load(
        self,
        path: str | Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> CocineroConfig:
        """Load configuration from file.

        Resolution order if path not specified:
        1. COCINERO_CONFIG_PATH environment variable
        2. ./cocinero.yaml
        3. ~/.config/cocinero/config.yaml
        4. Default configuration

        An explicitly given path (argument or environment) must exist.

        Args:
            path: Optional path to config file
            overrides: Values merged over the file's (e.g. from CLI flags)

        Returns:
            Loaded CocineroConfig instance

        Raises:
            ProvisionError(CONFIG_INVALID): If the file is missing or invalid
        """
        explicit = path is not None or bool(os.environ.get(CONFIG_PATH_ENV))
        config_path = Path(path) if path is not None else self._resolve_config_path()

        data: dict[str, Any] = {}
        if config_path is None or not config_path.exists():
            if explicit:
                raise create_error(
                    "CONFIG_INVALID",
                    detail=f"Configuration file not found: {config_path}",
                )
            logger.debug("No config file found, using default configuration")
            config_path = None
        else:
            data = self._read(config_path)

        if overrides:
            data = deep_merge(data, overrides)

        return self.load_from_dict(data, config_path)

    def load_from_dict(
        self, data: dict[str, Any], config_path: Path | None = None
    ) -> CocineroConfig:
        """Load configuration from dictionary.

        Args:
            data: Configuration dictionary
            config_path: Optional path to config file (for tracking)

        Returns:
            Loaded CocineroConfig instance

        Raises:
            ProvisionError(CONFIG_INVALID): If configuration is invalid
        """
        validation = self.validate(data)
        for warning in validation.warnings:
            logger.warning("%s: %s", warning.path, warning.message)

        if not validation.valid:
            error_messages = [f"- {issue.path}: {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )

        try:
            config = self._dict_to_config(data)
        except (TypeError, ValueError) as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Failed to parse configuration: {e}",
            ) from e

        self._config_path = config_path

        logger.debug("Configuration loaded from %s", config_path or "defaults")
        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Unknown keys are warnings; wrong types are errors.

        Args:
            data: Configuration dictionary

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        if not isinstance(data, dict):
            errors.append(ValidationIssue(path="<root>", message="configuration must be a mapping"))
            return ValidationResult(valid=False, errors=errors, warnings=warnings)

        self._check_mapping(data, SCHEMA, "", errors, warnings)
        errors.extend(self._validate_values(data))
        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def _check_mapping(
        self,
        data: dict[str, Any],
        schema: dict[str, Any],
        prefix: str,
        errors: list[ValidationIssue],
        warnings: list[ValidationIssue],
    ) -> None:
        """Check data against schema, descending into nested sections."""
        for key, item in data.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            if key not in schema:
                warnings.append(
                    ValidationIssue(
                        path=path,
                        message=f"Unknown configuration key: {path}",
                        severity="warning",
                    )
                )
                continue

            expected = schema[key]
            if isinstance(expected, dict):
                if isinstance(item, dict):
                    self._check_mapping(item, expected, path, errors, warnings)
                else:
                    errors.append(ValidationIssue(path=path, message=f"{path} must be a mapping"))
            # bool is an int subclass, so reject it explicitly for numbers
            elif isinstance(item, bool) and bool not in _as_tuple(expected):
                errors.append(ValidationIssue(path=path, message=f"{key} has the wrong type"))
            elif not isinstance(item, expected):
                errors.append(ValidationIssue(path=path, message=f"{key} has the wrong type"))

    def _validate_values(self, data: dict[str, Any]) -> list[ValidationIssue]:
        errors: list[ValidationIssue] = []

        log_section = data.get("logging")
        if isinstance(log_section, dict):
            for key, enum_type in (("level", LogLevel), ("format", LogFormat)):
                value = log_section.get(key)
                if isinstance(value, str) and not any(
                    m.value.casefold() == value.casefold() for m in enum_type
                ):
                    allowed = ", ".join(m.value for m in enum_type)
                    errors.append(
                        ValidationIssue(
                            path=f"logging.{key}",
                            message=f"{key} must be one of: {allowed}",
                        )
                    )

        execution = data.get("execution")
        if isinstance(execution, dict):
            timeout = execution.get("action_timeout")
            if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout <= 0:
                errors.append(
                    ValidationIssue(
                        path="execution.action_timeout",
                        message="action_timeout must be a positive number or null",
                    )
                )

        packages = data.get("packages")
        if isinstance(packages, dict):
            command = packages.get("install_command")
            if isinstance(command, list) and (
                not command or not all(isinstance(part, str) for part in command)
            ):
                errors.append(
                    ValidationIssue(
                        path="packages.install_command",
                        message="install_command must be a non-empty list of strings",
                    )
                )

        return errors

    def _read(self, config_path: Path) -> dict[str, Any]:
        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid YAML in config file: {e}",
            ) from e
        except OSError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Cannot read config file {config_path}: {e.strerror or e}",
            ) from e

        return _resolve_env_vars_recursive(data)

    def _resolve_config_path(self) -> Path | None:
        """Resolve config file path using resolution order."""
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path)

        if LOCAL_CONFIG.exists():
            return LOCAL_CONFIG

        home_path = user_config_path()
        if home_path.exists():
            return home_path

        return None

    def _dict_to_config(self, data: dict[str, Any]) -> CocineroConfig:
        kwargs: dict[str, Any] = {}

        for f in fields(CocineroConfig):
            if f.name in data:
                kwargs[f.name] = self._convert_field(f.type, data[f.name])

        return CocineroConfig(**kwargs)

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Convert field value to appropriate type.

        Args:
            field_type: Expected field type
            value: Value to convert

        Returns:
            Converted value
        """
        if value is None:
            return None

        origin = typing.get_origin(field_type)

        if origin is list:
            if not isinstance(value, list):
                return value
            args = typing.get_args(field_type)
            if args:
                return [self._convert_field(args[0], item) for item in value]
            return value

        # Handle dataclasses
        if hasattr(field_type, "__dataclass_fields__"):
            if isinstance(value, dict):
                kwargs = {}
                for f in fields(field_type):
                    if f.name in value:
                        kwargs[f.name] = self._convert_field(f.type, value[f.name])
                return field_type(**kwargs)
            return value

        # Handle enums
        if isinstance(field_type, type) and issubclass(field_type, Enum):
            if isinstance(value, str):
                return _enum_value(field_type, value)
            return value

        # Return as-is for primitives
        return value


def _as_tuple(expected: Any) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)
