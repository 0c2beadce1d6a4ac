"""Markdown slide engine: directives, slide segmentation and themed CSS."""

from .errors import (
    MalformedDirectiveBlock,
    ReservedDirectiveConflict,
    ScopeTokenCollision,
    SlidemarkError,
    ThemeNotFound,
    ThemeParseError,
)
from .models.options import Element, RenderOptions
from .models.slide import RenderResult
from .normalize.directives import DirectiveRegistry
from .render.renderer import Renderer
from .theme.registry import ThemeRegistry

__version__ = "0.1.0"

__all__ = [
    "DirectiveRegistry",
    "Element",
    "MalformedDirectiveBlock",
    "Renderer",
    "RenderOptions",
    "RenderResult",
    "ReservedDirectiveConflict",
    "ScopeTokenCollision",
    "SlidemarkError",
    "ThemeNotFound",
    "ThemeParseError",
    "ThemeRegistry",
]
