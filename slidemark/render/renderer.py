"""Markdown to slide HTML and CSS renderer."""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Optional, Union

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from ..models.options import RenderOptions
from ..models.slide import Deck, RenderEvent, RenderResult, StyleFragment
from ..normalize.directives import DirectiveParser, DirectiveRegistry, is_disabled
from ..normalize.segmenter import SlideSegmenter
from ..normalize.tokenizer import create_markdown, tokenizer_plugin
from ..style.packer import PackOptions, StylesheetPacker
from ..style.scope import ScopeTokenMinter
from ..theme.registry import ThemeRegistry
from .composer import StyleComposer, deck_container_tokens

SLIDES_RULE = "slidemark_slides"


class Renderer:
    """Entry point tying tokenizer, segmenter, composer and packer together.

    A renderer can be reused for many documents. Each call to ``render`` builds
    its own segmenter, composer, packer and scope minter; only the theme
    registry and the directive handler tables are shared between calls.
    """

    def __init__(
        self,
        options: Optional[Union[RenderOptions, Dict[str, Any]]] = None,
        registry: Optional[ThemeRegistry] = None,
    ) -> None:
        if options is None:
            options = RenderOptions()
        elif isinstance(options, dict):
            options = RenderOptions.model_validate(options)
        self.options = options
        self.themes = registry if registry is not None else ThemeRegistry()
        self.directives = DirectiveRegistry()
        self.markdown = create_markdown(options)
        self.last_global_directives: Dict[str, str] = {}
        self.last_comments: List[List[str]] = []
        self.last_styles: List[StyleFragment] = []
        self.last_events: List[RenderEvent] = []

    def use(self, plugin: Callable[..., None], *params: Any) -> "Renderer":
        """Apply a markdown-it plugin to the underlying parser."""
        self.markdown.use(plugin, *params)
        return self

    def render(
        self,
        markdown: str,
        html_as_array: bool = False,
        enabled: bool = True,
        env: Optional[Dict[str, Any]] = None,
    ) -> RenderResult:
        env = env if env is not None else {}
        if not enabled:
            return self._render_plain(markdown, env, {}, [])

        deck = self.deck(markdown, env)
        if is_disabled(deck.global_directives.get("slidemark")):
            self._remember(deck)
            return self._render_plain(markdown, env, deck.global_directives, deck.events)

        packer = StylesheetPacker(self.themes)
        theme_name = deck.global_directives.get("theme")
        composed = self._composer(self.markdown, packer, theme_name).compose(deck, env)
        self._remember(deck, composed.styles)

        css = packer.pack(
            theme_name,
            PackOptions(
                containers=self.options.all_containers(),
                inline_svg=self.options.inline_svg,
                printable=self.options.printable,
                after=composed.styles,
            ),
        )
        return RenderResult(
            html=self._render_html(composed.slide_tokens, env, html_as_array),
            css=css,
            comments=[list(slide.comments) for slide in deck.slides],
            global_directives=deck.global_directives,
            slides=deck.slides,
            events=deck.events + packer.events,
        )

    def _render_html(
        self, chunks: List[List[Token]], env: Dict[str, Any], html_as_array: bool
    ) -> Union[str, List[str]]:
        md = self.markdown
        if html_as_array:
            return [md.renderer.render(chunk, md.options, env) for chunk in chunks]

        openings, closings = deck_container_tokens(self.options)
        tokens: List[Token] = list(openings)
        for chunk in chunks:
            tokens.extend(chunk)
        tokens.extend(closings)
        return md.renderer.render(tokens, md.options, env)

    def _render_plain(
        self,
        markdown: str,
        env: Dict[str, Any],
        global_directives: Dict[str, str],
        events: List[RenderEvent],
    ) -> RenderResult:
        # Fresh tokens: segmentation may already have hidden background images.
        md = self.markdown
        html = md.renderer.render(md.parse(markdown, env), md.options, env)
        return RenderResult(
            html=html,
            css="",
            comments=[],
            global_directives=dict(global_directives),
            events=list(events)
            + [RenderEvent(event_type="SLIDE_TRANSFORMS_DISABLED", payload={})],
        )

    def markdown_it_plugin(self, md: MarkdownIt) -> None:
        """Install the slide transforms into another markdown-it instance.

        ``md.render`` then returns slide HTML built with this renderer's
        options, directive handlers and themes. Pass ``{"slidemark": False}``
        as env to render one document as plain markdown. The globals, notes,
        style fragments and events of the latest document are kept on the
        ``last_*`` attributes; the stylesheet itself comes from ``render``.
        """
        tokenizer_plugin(md, self.options)

        def slides(state: StateCore) -> None:
            if state.inlineMode or state.env.get("slidemark") is False:
                return
            # Segmentation hides tokens in place.
            deck = self._segment(copy.deepcopy(state.tokens))
            if is_disabled(deck.global_directives.get("slidemark")):
                self._remember(deck)
                return

            packer = StylesheetPacker(self.themes)
            theme_name = deck.global_directives.get("theme")
            composed = self._composer(state.md, packer, theme_name).compose(deck, state.env)
            self._remember(deck, composed.styles)

            openings, closings = deck_container_tokens(self.options)
            tokens: List[Token] = list(openings)
            for chunk in composed.slide_tokens:
                tokens.extend(chunk)
            tokens.extend(closings)
            state.tokens = tokens

        md.core.ruler.push(SLIDES_RULE, slides)

    def deck(self, markdown: str, env: Optional[Dict[str, Any]] = None) -> Deck:
        """Segment ``markdown`` without composing or packing."""
        return self._segment(self.markdown.parse(markdown, env if env is not None else {}))

    def _segment(self, tokens: List[Token]) -> Deck:
        parser = DirectiveParser(
            self.directives,
            loose_yaml=self.options.loose_yaml,
            override_marker=self.options.override_marker,
        )
        return SlideSegmenter(self.options, parser).segment(tokens)

    def _composer(
        self, md: MarkdownIt, packer: StylesheetPacker, theme_name: Optional[str]
    ) -> StyleComposer:
        return StyleComposer(
            self.options,
            md,
            minter=ScopeTokenMinter(),
            theme=packer.resolve_theme(theme_name),
            slide_size=packer.slide_size(theme_name),
        )

    def _remember(self, deck: Deck, styles: Optional[List[StyleFragment]] = None) -> None:
        """Keep what the latest document declared; no styles means transforms were off."""
        self.last_global_directives = dict(deck.global_directives)
        self.last_comments = [list(s.comments) for s in deck.slides] if styles is not None else []
        self.last_styles = list(styles or [])
        self.last_events = list(deck.events)
