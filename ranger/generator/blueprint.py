"""Blueprint descriptor (``.ranger.yaml``) models and loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .namespace import split_path

logger = logging.getLogger(__name__)

BLUEPRINT_FILE = ".ranger.yaml"
ROOT_KEY = "vars"


class VariableDefinition(BaseModel):
    """A declared template variable."""

    model_config = ConfigDict(extra="forbid", frozen=True, coerce_numbers_to_str=True)

    default: Optional[str] = Field(default=None, description="Value used when no override is given")
    description: Optional[str] = Field(default=None, description="Shown when prompting")


class Blueprint(BaseModel):
    """Variables and helper commands a template source declares."""

    model_config = ConfigDict(extra="forbid", frozen=True, coerce_numbers_to_str=True)

    version: Optional[str] = None
    variables: Dict[str, VariableDefinition] = Field(default_factory=dict)
    helpers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("variables", mode="before")
    @classmethod
    def _empty_definitions(cls, value):
        # `name:` with no body declares a variable without a default
        if isinstance(value, dict):
            return {k: ({} if v is None else v) for k, v in value.items()}
        return value

    @field_validator("variables")
    @classmethod
    def _dotted_names(cls, value: Dict[str, VariableDefinition]):
        for name in value:
            try:
                split_path(name)
            except ConfigurationError as e:
                raise ValueError(str(e)) from e
        return value

    @field_validator("helpers")
    @classmethod
    def _callable_names(cls, value: Dict[str, str]):
        for name in value:
            if not name.isidentifier() or name == ROOT_KEY:
                raise ValueError(f"invalid helper name: {name!r}")
        return value

    def defaults(self) -> list[tuple[str, str]]:
        """Declared defaults in declaration order, skipping variables without one."""
        return [(name, d.default) for name, d in self.variables.items() if d.default is not None]


def load_blueprint(source_root: Path) -> Blueprint:
    """Load the blueprint at the source root, or an empty one if there is none."""
    path = Path(source_root) / BLUEPRINT_FILE
    if not path.is_file():
        logger.debug(f"No blueprint at {path}")
        return Blueprint()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"cannot read blueprint {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"blueprint {path} must be a mapping")

    try:
        blueprint = Blueprint.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid blueprint {path}: {e}") from e

    logger.info(
        f"Loaded blueprint: {len(blueprint.variables)} variable(s), "
        f"{len(blueprint.helpers)} helper(s)"
    )
    return blueprint
