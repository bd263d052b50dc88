"""User settings read from a YAML file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from ..generator.errors import ConfigurationError

CONFIG_ENV = "RANGER_CONFIG"
CONFIG_FILE = Path("~/.config/ranger/config.yml")


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    repo: str = "https://github.com/replicadse/ranger.git"
    branch: Optional[str] = None
    folder: Path = Path(".")


def config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV) or CONFIG_FILE).expanduser()


def load_settings(path: Optional[Path] = None) -> Settings:
    path = Path(path) if path is not None else config_path()
    if not path.exists():
        return Settings()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return Settings.model_validate(data)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(f"invalid settings file {path}: {e}") from e
