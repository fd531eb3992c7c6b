"""Launcher configuration loaded from YAML."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .core.project import DEFAULT_PROJECT_MARKERS

logger = logging.getLogger(__name__)

CONFIG_ENV = "TASK_LAUNCHER_CONFIG"
ACTIVE_FILE_ENV = "TASK_LAUNCHER_FILE"
LOCAL_CONFIG_NAME = ".task-launcher.yaml"
USER_CONFIG_PATH = Path("~/.config/task-launcher/config.yaml")


class LauncherConfig(BaseModel):
    """Settings for the launcher and its default collaborators."""

    providers: Optional[list[str]] = Field(
        None, description="Task providers to load, in discovery order (None = all)"
    )
    project_markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PROJECT_MARKERS),
        description="Files or directories marking a project root",
    )
    shell: str = Field("/bin/sh", description="Shell used to run task commands")
    sink_buffer_lines: int = Field(
        10000, ge=1, description="Output lines kept per sink"
    )
    discovery_workers: int = Field(
        2, ge=1, description="Threads available for background discovery"
    )


def find_config_file(cwd: Path | None = None) -> Optional[Path]:
    """
    Locate the config file.

    Lookup order: $TASK_LAUNCHER_CONFIG, ./.task-launcher.yaml,
    ~/.config/task-launcher/config.yaml.
    """
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()

    local = (cwd or Path.cwd()) / LOCAL_CONFIG_NAME
    if local.is_file():
        return local

    user = USER_CONFIG_PATH.expanduser()
    if user.is_file():
        return user
    return None


def load_config(path: Path | None = None) -> LauncherConfig:
    """
    Load configuration, falling back to defaults on any problem.

    Args:
        path: Explicit config file (None = search the usual locations)

    Returns:
        Parsed configuration
    """
    path = path or find_config_file()
    if path is None:
        return LauncherConfig()

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        config = LauncherConfig(**data)
        logger.info(f"Loaded config from {path}")
        return config
    except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
        logger.warning(f"Ignoring invalid config {path}: {e}")
        return LauncherConfig()


def active_file() -> Optional[Path]:
    """File backing the current context, taken from $TASK_LAUNCHER_FILE."""
    value = os.environ.get(ACTIVE_FILE_ENV)
    return Path(value).expanduser().resolve() if value else None
