"""Pydantic models for slidemark contracts."""

from .base import SlidemarkBaseModel
from .config import Config
from .css import CssAtRule, CssComment, CssDeclaration, CssNode, CssRule
from .directive import Directive, DirectiveScope
from .options import Element, RenderOptions
from .slide import Deck, RenderEvent, RenderResult, Slide, StyleFragment
from .theme import Theme

__all__ = [
    "Config",
    "SlidemarkBaseModel",
    "CssAtRule",
    "CssComment",
    "CssDeclaration",
    "CssNode",
    "CssRule",
    "Directive",
    "DirectiveScope",
    "Element",
    "RenderOptions",
    "Deck",
    "RenderEvent",
    "RenderResult",
    "Slide",
    "StyleFragment",
    "Theme",
]
