"""Slide and render result contracts."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import ConfigDict, Field, conint

from .base import SlidemarkBaseModel

PageIndex = conint(ge=1)


class StyleFragment(SlidemarkBaseModel):
    """Raw CSS collected from the document, optionally scoped to one slide."""

    model_config = ConfigDict(frozen=True)

    css: str
    scoped: bool = False
    scope: Optional[str] = None


class Slide(SlidemarkBaseModel):
    """One slide page with its frozen directive snapshot."""

    model_config = ConfigDict(frozen=True)

    index: PageIndex
    directives: Dict[str, str] = Field(default_factory=dict)
    # markdown-it Token objects; kept by identity, never serialized.
    tokens: List[Any] = Field(default_factory=list, exclude=True)
    comments: List[str] = Field(default_factory=list)
    styles: List[StyleFragment] = Field(default_factory=list)
    container: Any = Field(default=None, exclude=True)


class RenderEvent(SlidemarkBaseModel):
    """A recovered, non-fatal condition noticed while rendering."""

    event_type: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class RenderResult(SlidemarkBaseModel):
    html: Union[str, List[str]]
    css: str
    comments: List[List[str]] = Field(default_factory=list)
    global_directives: Dict[str, str] = Field(default_factory=dict)
    slides: List[Slide] = Field(default_factory=list)
    events: List[RenderEvent] = Field(default_factory=list)


class Deck(SlidemarkBaseModel):
    """Segmented document: slides plus the resolved global directives."""

    slides: List[Slide] = Field(default_factory=list)
    global_directives: Dict[str, str] = Field(default_factory=dict)
    events: List[RenderEvent] = Field(default_factory=list)
