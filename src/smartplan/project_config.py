"""Project configuration file (smartplan_config.yaml).

Example::

    scheduler:
      working_hours_start: "08:30"
      working_hours_end: "16:30"
      working_days: [1, 2, 3, 4]
    plans_directory: plans
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from . import context
from .exceptions import ConfigurationError
from .scheduler.config import ScheduleSettings

CONFIG_FILENAME = "smartplan_config.yaml"


class ProjectConfig(BaseModel):
    """Top-level configuration file contents."""

    scheduler: ScheduleSettings = Field(default_factory=ScheduleSettings)
    plans_directory: Path | None = None  # Store used by the 'plans' command


def load_project_config(config_path: Path | str) -> ProjectConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to smartplan_config.yaml

    Returns:
        Parsed configuration; relative plans_directory is resolved against
        the config file's directory

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file content is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {config_path}: {e}") from e

    if data is None:
        return ProjectConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the root level")

    try:
        config = ProjectConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    if config.plans_directory is not None and not config.plans_directory.is_absolute():
        config.plans_directory = config_path.parent / config.plans_directory
    return config


def discover_project_config(
    plan_path: Path | None = None, config_path: Path | None = None
) -> ProjectConfig | None:
    """Find and load the configuration file.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Plan file directory / smartplan_config.yaml
    4. Current directory / smartplan_config.yaml
    """
    candidates: list[Path] = []
    if config_path:
        candidates.append(config_path)
    ctx_config = context.get_config_path()
    if ctx_config:
        candidates.append(ctx_config)
    if plan_path is not None:
        candidates.append(Path(plan_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return load_project_config(candidate)
    return None
