"""
Configuration loader for YAML files.

Loads and validates application settings and extractor definitions
from YAML files into Pydantic models.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import AppConfig, ExtractorDefinition

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dictionary.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML contents

    Raises:
        ConfigError: If file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}", path=path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in {path}",
            path=path,
            details=str(e),
        ) from e
    except OSError as e:
        raise ConfigError(
            f"Cannot read {path}",
            path=path,
            details=str(e),
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}", path=path)
    return data


def _expand_env_vars(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand environment variables in string values.

    Supports ${VAR} and ${VAR:-default} syntax.

    Args:
        data: Dictionary with potential env var references

    Returns:
        Dictionary with expanded values
    """
    def replacer(match: re.Match[str]) -> str:
        return os.environ.get(match.group(1), match.group(2) or "")

    def expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_PATTERN.sub(replacer, value)
        elif isinstance(value, dict):
            return {k: expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [expand_value(item) for item in value]
        return value

    return expand_value(data)


def load_app_config(
    path: Path | str | None = None,
    expand_env: bool = True,
) -> AppConfig:
    """Load application configuration from YAML file.

    Args:
        path: Path to app.yaml (default: configs/app.yaml)
        expand_env: Whether to expand environment variables

    Returns:
        Validated AppConfig instance (defaults if the file is missing)

    Raises:
        ConfigError: If configuration is invalid
    """
    path = Path("configs/app.yaml") if path is None else Path(path)

    if not path.exists():
        return AppConfig()

    data = _load_yaml_file(path)

    if expand_env:
        data = _expand_env_vars(data)

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid app configuration in {path}",
            path=path,
            details=str(e),
        ) from e


def load_extractor_definition(
    path: Path | str,
    expand_env: bool = True,
) -> ExtractorDefinition:
    """Load an extractor definition from a YAML file.

    Args:
        path: Path to the extractor YAML file
        expand_env: Whether to expand environment variables

    Returns:
        Validated ExtractorDefinition instance

    Raises:
        ConfigError: If the definition is invalid
    """
    path = Path(path)
    data = _load_yaml_file(path)

    if expand_env:
        data = _expand_env_vars(data)

    try:
        return ExtractorDefinition.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid extractor definition in {path}",
            path=path,
            details=str(e),
        ) from e


def load_all_extractor_definitions(
    extractors_dir: Path | str | None = None,
    expand_env: bool = True,
) -> dict[str, ExtractorDefinition]:
    """Load all extractor definitions from a directory.

    Args:
        extractors_dir: Directory containing extractor YAML files
                        (default: configs/extractors/)
        expand_env: Whether to expand environment variables

    Returns:
        Dictionary mapping each definition's domain to the definition

    Raises:
        ConfigError: If any definition is invalid
    """
    extractors_dir = Path("configs/extractors") if extractors_dir is None else Path(extractors_dir)

    if not extractors_dir.exists():
        return {}

    definitions: dict[str, ExtractorDefinition] = {}
    files = sorted([*extractors_dir.glob("*.yaml"), *extractors_dir.glob("*.yml")])

    for yaml_file in files:
        definition = load_extractor_definition(yaml_file, expand_env=expand_env)
        definitions[definition.domain] = definition

    return definitions


def validate_extractor_file(
    path: Path | str,
    expand_env: bool = True,
) -> list[str]:
    """Validate an extractor definition file without raising.

    Useful for dry-run validation.

    Args:
        path: Path to extractor YAML file
        expand_env: Whether to expand environment variables

    Returns:
        List of validation error messages (empty if valid)
    """
    path = Path(path)
    errors: list[str] = []

    if not path.exists():
        errors.append(f"File not found: {path}")
        return errors

    try:
        data = _load_yaml_file(path)
    except ConfigError as e:
        errors.append(str(e) if not e.details else f"{e}: {e.details}")
        return errors

    if expand_env:
        data = _expand_env_vars(data)

    try:
        ExtractorDefinition.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            msg = error["msg"]
            errors.append(f"{loc}: {msg}")

    return errors
