"""Render options contracts."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import ConfigDict, Field, constr, field_validator

from .base import SlidemarkBaseModel

NonEmptyStr = constr(min_length=1)
HeadingDivider = Union[bool, int, Tuple[int, ...]]

_HEADING_LEVELS = range(1, 7)
_LEVEL_SPLIT = re.compile(r"[\s,\[\]]+")


class Element(SlidemarkBaseModel):
    """A structural wrapper element, e.g. ``<div class="slidemark">``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tag: NonEmptyStr
    class_name: Optional[str] = Field(default=None, alias="class")
    attrs: Dict[str, str] = Field(default_factory=dict)

    def selector(self) -> str:
        classes = "".join(f".{name}" for name in (self.class_name or "").split())
        return f"{self.tag}{classes}"

    def html_attrs(self) -> Dict[str, str]:
        attrs = dict(self.attrs)
        if self.class_name:
            attrs["class"] = self.class_name
        return attrs


def normalize_heading_divider(value: Any) -> HeadingDivider:
    """Normalize a heading divider setting into ``False``, an int, or a tuple."""
    if value is None or value is False:
        return False
    if value is True:
        raise ValueError("heading_divider must be false, a level, or a list of levels")
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("", "false", "off", "no"):
            return False
        parts = [part for part in _LEVEL_SPLIT.split(text) if part]
        if not parts:
            return False
        if text.startswith("[") or len(parts) > 1:
            value = [int(part) for part in parts]
        else:
            value = int(parts[0])
    if isinstance(value, int):
        if value not in _HEADING_LEVELS:
            raise ValueError(f"Heading level out of range: {value}")
        return value
    levels = tuple(sorted({int(level) for level in value}))
    for level in levels:
        if level not in _HEADING_LEVELS:
            raise ValueError(f"Heading level out of range: {level}")
    return levels


def _wrap_elements(value: Any) -> Tuple[Any, ...]:
    if value is None or value is False:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


class RenderOptions(SlidemarkBaseModel):
    """Options recognized by the renderer. Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    background_syntax: bool = True
    heading_divider: HeadingDivider = False
    loose_yaml: bool = False
    inline_svg: bool = False
    inline_style: bool = True
    printable: bool = True
    scoped_style: bool = True
    containers: Tuple[Element, ...] = (Element(tag="div", class_name="slidemark"),)
    slide_containers: Tuple[Element, ...] = ()
    override_marker: NonEmptyStr = "_"

    @field_validator("heading_divider", mode="before")
    @classmethod
    def _check_heading_divider(cls, value: Any) -> HeadingDivider:
        return normalize_heading_divider(value)

    @field_validator("containers", "slide_containers", mode="before")
    @classmethod
    def _check_containers(cls, value: Any) -> Tuple[Any, ...]:
        return _wrap_elements(value)

    @field_validator("override_marker")
    @classmethod
    def _check_override_marker(cls, value: str) -> str:
        if any(char.isalnum() or char.isspace() for char in value):
            raise ValueError("override_marker must not contain letters, digits or spaces")
        return value

    def all_containers(self) -> Tuple[Element, ...]:
        """Deck containers followed by slide containers, outermost first."""
        return self.containers + self.slide_containers
