"""Slide segmentation and directive inheritance.

Walks the markdown-it token stream once, splitting it into slides at
top-level thematic breaks (and qualifying headings when heading dividers are
on), while carrying local directives forward from slide to slide.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, FrozenSet, List

from markdown_it.token import Token

from ..models.directive import Directive, DirectiveScope
from ..models.options import HeadingDivider, RenderOptions, normalize_heading_divider
from ..models.slide import Deck, RenderEvent, Slide, StyleFragment
from .directives import DirectiveParser
from .tokenizer import COMMENT_TOKEN, FRONT_MATTER_TOKEN, STYLE_TOKEN, heading_level

SLIDE_OPEN = "slide_open"
SLIDE_CLOSE = "slide_close"

_BACKGROUND_SIZES = {"cover": "cover", "contain": "contain", "fit": "contain", "auto": "auto"}
_PERCENTAGE = re.compile(r"^\d+(?:\.\d+)?%$")


class SegmenterState(str, Enum):
    BEFORE_FIRST_SLIDE = "before_first_slide"
    IN_SLIDE = "in_slide"
    DONE = "done"


def divider_levels(setting: HeadingDivider) -> FrozenSet[int]:
    """Heading levels that start a new slide.

    An integer ``N`` selects ``h1`` through ``hN``; a tuple selects exactly the
    listed levels.
    """
    if setting is False or setting is True:
        return frozenset()
    if isinstance(setting, int):
        return frozenset(range(1, setting + 1))
    return frozenset(setting)


class _SlideBuilder:
    def __init__(self, index: int) -> None:
        self.index = index
        self.tokens: List[Token] = []
        self.spot: Dict[str, str] = {}
        self.comments: List[str] = []
        self.styles: List[StyleFragment] = []
        self.has_content = False


class SlideSegmenter:
    """Splits one token stream into slides. Not reusable across renders."""

    def __init__(self, options: RenderOptions, parser: DirectiveParser) -> None:
        self.options = options
        self.parser = parser
        self.state = SegmenterState.BEFORE_FIRST_SLIDE
        self.global_directives: Dict[str, str] = {}
        self.local_directives: Dict[str, str] = {}
        self.slides: List[Slide] = []
        self.events: List[RenderEvent] = []
        self._current = _SlideBuilder(1)

    def segment(self, tokens: List[Token]) -> Deck:
        for token in tokens:
            if self._is_boundary(token):
                self._enter_slide()
                self._close_slide()
                self._current = _SlideBuilder(len(self.slides) + 1)
                if token.type == "hr":
                    continue
            self._consume(token)

        self._close_slide()
        self.state = SegmenterState.DONE
        return Deck(
            slides=self.slides,
            global_directives=dict(self.global_directives),
            events=self.parser.events + self.events,
        )

    def _is_boundary(self, token: Token) -> bool:
        if token.level != 0:
            return False
        if token.type == "hr":
            return True
        level = heading_level(token)
        if level is None or not self._current.has_content:
            return False
        return level in divider_levels(self._heading_divider())

    def _heading_divider(self) -> HeadingDivider:
        value = self.global_directives.get("headingDivider")
        if value is None:
            return self.options.heading_divider
        try:
            return normalize_heading_divider(value)
        except ValueError:
            self.events.append(
                RenderEvent(event_type="HEADING_DIVIDER_INVALID", payload={"value": value})
            )
            return self.options.heading_divider

    def _enter_slide(self) -> None:
        if self.state is SegmenterState.BEFORE_FIRST_SLIDE:
            self.state = SegmenterState.IN_SLIDE

    def _consume(self, token: Token) -> None:
        current = self._current
        if token.type == FRONT_MATTER_TOKEN:
            self._apply(self.parser.parse(token.content, leading=self._leading).directives)
        elif token.type == COMMENT_TOKEN:
            self._comment(token)
        elif token.type == STYLE_TOKEN:
            current.styles.append(
                StyleFragment(css=token.content, scoped=bool(token.meta.get("scoped")))
            )
        else:
            if not token.hidden:
                self._enter_slide()
                current.has_content = True
            if token.type == "inline" and token.children:
                self._inline(token.children)
        current.tokens.append(token)

    @property
    def _leading(self) -> bool:
        return self.state is SegmenterState.BEFORE_FIRST_SLIDE

    def _comment(self, token: Token) -> None:
        parsed = self.parser.parse(token.content, leading=self._leading)
        if parsed.is_directive_block:
            token.meta["directives"] = [d.to_dict() for d in parsed.directives]
            self._apply(parsed.directives)
        elif token.content:
            self._current.comments.append(token.content)

    def _inline(self, children: List[Token]) -> None:
        for child in children:
            if child.type == COMMENT_TOKEN:
                self._comment(child)
            elif child.type == "image" and self.options.background_syntax:
                self._background_image(child)

    def _background_image(self, token: Token) -> None:
        options = token.meta.get("options") or []
        if "bg" not in options:
            return
        token.hidden = True
        token.meta["background"] = True

        url = token.meta.get("url", "")
        if not url.strip():
            return
        spot = self._current.spot
        spot["backgroundImage"] = f'url("{url}")'
        for option in options:
            if option in _BACKGROUND_SIZES:
                spot["backgroundSize"] = _BACKGROUND_SIZES[option]
            elif _PERCENTAGE.match(option):
                spot["backgroundSize"] = option

    def _apply(self, directives: List[Directive]) -> None:
        for directive in directives:
            if directive.scope is DirectiveScope.GLOBAL:
                self.global_directives[directive.key] = directive.value
            elif directive.scope is DirectiveScope.LOCAL:
                self.local_directives[directive.key] = directive.value
            else:
                self._current.spot[directive.key] = directive.value

    def _close_slide(self) -> None:
        current = self._current
        snapshot = {**self.global_directives, **self.local_directives, **current.spot}
        container = Token(SLIDE_OPEN, "section", 1)
        container.block = True
        container.meta["index"] = current.index
        self.slides.append(
            Slide(
                index=current.index,
                directives=snapshot,
                tokens=current.tokens,
                comments=current.comments,
                styles=current.styles,
                container=container,
            )
        )


def sweep_empty_paragraphs(tokens: List[Token]) -> None:
    """Hide paragraphs whose inline content is entirely hidden or blank."""
    for idx, token in enumerate(tokens):
        if token.type != "paragraph_open" or idx + 2 >= len(tokens):
            continue
        inline, closing = tokens[idx + 1], tokens[idx + 2]
        if inline.type != "inline" or closing.type != "paragraph_close":
            continue
        children = inline.children or []
        if all(_is_blank(child) for child in children):
            token.hidden = True
            closing.hidden = True
            inline.children = [child for child in children if child.hidden]


def _is_blank(token: Token) -> bool:
    if token.hidden:
        return True
    if token.type in ("softbreak", "hardbreak"):
        return True
    return token.type == "text" and not token.content.strip()
