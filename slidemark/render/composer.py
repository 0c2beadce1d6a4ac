"""Slide directives to container attributes, inline styles and markup."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.token import Token
from pydantic import ConfigDict, Field

from ..models.base import SlidemarkBaseModel
from ..models.options import Element, RenderOptions
from ..models.slide import Deck, Slide, StyleFragment
from ..normalize.directives import LOCAL_DIRECTIVES
from ..normalize.segmenter import SLIDE_CLOSE, sweep_empty_paragraphs
from ..style.declaration import StyleDeclaration
from ..style.packer import SVG_ATTR
from ..style.scope import ScopeTokenMinter, scope_attribute

PAGINATION_ATTR = "data-slidemark-pagination"
PAGINATION_TOTAL_ATTR = "data-slidemark-pagination-total"

_KEBAB = re.compile(r"([a-z0-9])([A-Z])")
_PRESET = re.compile(r"[^A-Za-z0-9]+")
_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def kebab_case(key: str) -> str:
    return _KEBAB.sub(r"\1-\2", key).lower()


def size_preset_class(value: str) -> Optional[str]:
    slug = _PRESET.sub("-", value).strip("-").lower()
    return f"size-{slug}" if slug else None


def compose_declaration(directives: Dict[str, str]) -> StyleDeclaration:
    """Inline style for a slide, evaluated in a fixed directive order."""
    style = StyleDeclaration()
    if directives.get("backgroundColor"):
        style.set("background-color", directives["backgroundColor"])
        style.set("background-image", "none")
    if directives.get("backgroundImage"):
        style.set("background-image", directives["backgroundImage"])
        style.set("background-position", "center")
        style.set("background-repeat", "no-repeat")
        style.set("background-size", "cover")
    if directives.get("backgroundPosition"):
        style.set("background-position", directives["backgroundPosition"])
    if directives.get("backgroundRepeat"):
        style.set("background-repeat", directives["backgroundRepeat"])
    if directives.get("backgroundSize"):
        style.set("background-size", directives["backgroundSize"])
    if directives.get("color"):
        style.set("color", directives["color"])
    return style


def _element_tokens(element: Element, name: str) -> Tuple[Token, Token]:
    opening = Token(f"{name}_open", element.tag, 1)
    opening.block = True
    for attr, value in element.html_attrs().items():
        opening.attrSet(attr, value)
    closing = Token(f"{name}_close", element.tag, -1)
    closing.block = True
    return opening, closing


def _size_number(value: str, fallback: str) -> str:
    match = _NUMBER.match(value)
    return match.group(1) if match else fallback


class ComposedDeck(SlidemarkBaseModel):
    model_config = ConfigDict(frozen=True)

    # Per-slide markdown-it token chunks, slide containers included.
    slide_tokens: List[List[Any]] = Field(default_factory=list)
    styles: List[StyleFragment] = Field(default_factory=list)


class StyleComposer:
    """Writes each slide's resolved directives onto its container token."""

    def __init__(
        self,
        options: RenderOptions,
        md: MarkdownIt,
        minter: Optional[ScopeTokenMinter] = None,
        theme: Optional[str] = None,
        slide_size: Tuple[str, str] = ("1280px", "720px"),
    ) -> None:
        self.options = options
        self.md = md
        self.minter = minter or ScopeTokenMinter()
        self.theme = theme
        self.slide_size = slide_size

    def compose(self, deck: Deck, env: Optional[Dict[str, Any]] = None) -> ComposedDeck:
        env = env if env is not None else {}
        styles: List[StyleFragment] = []
        style_directive = deck.global_directives.get("style")
        if style_directive and style_directive.strip():
            styles.append(StyleFragment(css=style_directive))

        chunks: List[List[Token]] = []
        total = len(deck.slides)
        for slide in deck.slides:
            styles.extend(self.compose_slide(slide, total))
            chunks.append(self._wrap(slide, env))
        return ComposedDeck(slide_tokens=chunks, styles=styles)

    def compose_slide(self, slide: Slide, total: int) -> List[StyleFragment]:
        """Set attributes on the slide container; return its style fragments."""
        container: Token = slide.container
        directives = slide.directives
        container.attrSet("id", str(slide.index))

        for key in LOCAL_DIRECTIVES:
            value = directives.get(key)
            if value:
                container.attrSet(f"data-{kebab_case(key)}", value)
        if self.theme:
            container.attrSet("data-theme", self.theme)

        classes = (directives.get("class") or "").split()
        if directives.get("size"):
            preset = size_preset_class(directives["size"])
            if preset:
                classes.append(preset)
        if classes:
            container.attrSet("class", " ".join(classes))

        style = compose_declaration(directives)
        if style:
            container.attrSet("style", style.to_css())

        if (directives.get("paginate") or "").strip().lower() == "true":
            container.attrSet(PAGINATION_ATTR, str(slide.index))
            container.attrSet(PAGINATION_TOTAL_ATTR, str(total))

        fragments: List[StyleFragment] = []
        for fragment in slide.styles:
            if fragment.scoped and self.options.scoped_style:
                token = self.minter.mint()
                container.attrSet(scope_attribute(token), "")
                fragments.append(fragment.model_copy(update={"scope": token}))
            else:
                fragments.append(fragment.model_copy(update={"scoped": False, "scope": None}))
        return fragments

    def _inline_element(self, text: str, tag: str, env: Dict[str, Any]) -> List[Token]:
        opening = Token(f"slide_{tag}_open", tag, 1)
        opening.block = True
        closing = Token(f"slide_{tag}_close", tag, -1)
        closing.block = True
        return [opening, *self.md.parseInline(text, env), closing]

    def _wrap(self, slide: Slide, env: Dict[str, Any]) -> List[Token]:
        body: List[Token] = [slide.container]
        header = slide.directives.get("header")
        if header:
            body.extend(self._inline_element(header, "header", env))
        body.extend(slide.tokens)
        footer = slide.directives.get("footer")
        if footer:
            body.extend(self._inline_element(footer, "footer", env))
        closing = Token(SLIDE_CLOSE, "section", -1)
        closing.block = True
        body.append(closing)
        sweep_empty_paragraphs(body)

        if self.options.inline_svg:
            width, height = self.slide_size
            svg_open = Token("slide_svg_open", "svg", 1)
            svg_open.block = True
            svg_open.attrSet(SVG_ATTR, "")
            svg_open.attrSet(
                "viewBox",
                f"0 0 {_size_number(width, '1280')} {_size_number(height, '720')}",
            )
            foreign_open = Token("slide_foreign_object_open", "foreignObject", 1)
            foreign_open.block = True
            foreign_open.attrSet("width", _size_number(width, "1280"))
            foreign_open.attrSet("height", _size_number(height, "720"))
            foreign_close = Token("slide_foreign_object_close", "foreignObject", -1)
            foreign_close.block = True
            svg_close = Token("slide_svg_close", "svg", -1)
            svg_close.block = True
            body = [svg_open, foreign_open, *body, foreign_close, svg_close]

        for element in reversed(self.options.slide_containers):
            opening, closing = _element_tokens(element, "slide_container")
            body = [opening, *body, closing]
        return body


def deck_container_tokens(options: RenderOptions) -> Tuple[List[Token], List[Token]]:
    """Opening tokens (outermost first) and closing tokens for the deck."""
    openings: List[Token] = []
    closings: List[Token] = []
    for element in options.containers:
        opening, closing = _element_tokens(element, "container")
        openings.append(opening)
        closings.insert(0, closing)
    return openings, closings
