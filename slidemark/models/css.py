"""Parsed CSS rule tree contracts."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import ConfigDict, Field

from .base import SlidemarkBaseModel

IMPORT_AT_RULES = frozenset({"import", "import-theme"})


class CssDeclaration(SlidemarkBaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    important: bool = False

    def to_css(self) -> str:
        suffix = " !important" if self.important else ""
        return f"{self.name}: {self.value}{suffix};"


class CssRule(SlidemarkBaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["rule"] = "rule"
    selectors: List[str]
    declarations: List[CssDeclaration] = Field(default_factory=list)


class CssAtRule(SlidemarkBaseModel):
    """An at-rule holding nested rules, raw block content, or nothing."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["at-rule"] = "at-rule"
    keyword: str
    prelude: str = ""
    rules: Optional[List["CssNode"]] = None
    raw: Optional[str] = None

    @property
    def is_import(self) -> bool:
        return self.keyword.lower() in IMPORT_AT_RULES


class CssComment(SlidemarkBaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["comment"] = "comment"
    text: str


CssNode = Annotated[Union[CssRule, CssAtRule, CssComment], Field(discriminator="kind")]
CssAtRule.model_rebuild()
