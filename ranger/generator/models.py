"""Request and result models for one generate operation."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """Everything needed to run one generate operation."""

    out: Path = Field(..., description="Output directory")
    folder: Path = Field(
        default=Path("."),
        description="Template folder; relative to the checkout when repo is set",
    )
    repo: Optional[str] = Field(default=None, description="Git repository to clone")
    branch: Optional[str] = Field(default=None, description="Branch or tag to clone")
    overrides: list[tuple[str, str]] = Field(
        default_factory=list, description="Ordered KEY=VALUE overrides"
    )
    force: bool = Field(default=False, description="Replace an existing output directory")
    strict: bool = Field(default=True, description="Fail on undefined references")


class GenerateResult(BaseModel):
    """Outcome of a successful generate operation."""

    out: Path
    files: list[Path] = Field(default_factory=list, description="Rendered files")
    directories: list[Path] = Field(default_factory=list, description="Rendered directories")
