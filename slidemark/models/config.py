"""Config model."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, constr

from .base import SlidemarkBaseModel
from .options import RenderOptions

NonEmptyStr = constr(min_length=1)


class Config(SlidemarkBaseModel):
    project_root: NonEmptyStr = Field(..., description="Project root directory")
    themes_dir: NonEmptyStr = Field(..., description="Directory of theme CSS files")
    inputs_dir: NonEmptyStr = Field(..., description="Inputs directory")
    runs_dir: NonEmptyStr = Field(..., description="Runs output directory")
    default_theme: Optional[str] = Field(default=None, description="Theme used when a deck names none")
    options: RenderOptions = Field(default_factory=RenderOptions)
