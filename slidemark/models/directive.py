"""Directive contracts."""

from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, constr

from .base import SlidemarkBaseModel

NonEmptyStr = constr(min_length=1)


class DirectiveScope(str, Enum):
    GLOBAL = "global"
    LOCAL = "local"
    SPOT = "spot"


class Directive(SlidemarkBaseModel):
    model_config = ConfigDict(frozen=True)

    key: NonEmptyStr
    value: str
    scope: DirectiveScope
