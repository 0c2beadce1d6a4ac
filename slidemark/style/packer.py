"""Assemble the final stylesheet from a theme chain and collected styles."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Set, Tuple, Union

from pydantic import Field, field_validator

from ..errors import ThemeNotFound
from ..models.base import SlidemarkBaseModel
from ..models.css import CssAtRule, CssComment, CssDeclaration, CssNode, CssRule
from ..models.options import Element
from ..models.slide import RenderEvent, StyleFragment
from ..models.theme import Theme
from ..theme.registry import ThemeRegistry
from .css import import_target, map_selectors, parse_css, serialize
from .scaffold import DEFAULT_HEIGHT, DEFAULT_WIDTH, SCAFFOLD_CSS
from .scope import scope_attribute

SVG_ATTR = "data-slidemark-svg"

_SECTION = re.compile(r"^section(?![\w-])")
_ROOT = ":root"


class PackOptions(SlidemarkBaseModel):
    containers: Tuple[Element, ...] = ()
    inline_svg: bool = False
    printable: bool = True
    after: List[StyleFragment] = Field(default_factory=list)

    @field_validator("after", mode="before")
    @classmethod
    def _wrap_after(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [StyleFragment(css=value)]
        return value


def _declaration(name: str, value: str, important: bool = False) -> CssDeclaration:
    return CssDeclaration(name=name, value=value, important=important)


def _replace_root(selector: str) -> str:
    if selector.startswith(_ROOT):
        return "section" + selector[len(_ROOT):]
    return selector


def scope_selector(selector: str, token: str) -> str:
    """Qualify ``selector`` so it only matches inside the scoped slide."""
    attr = f"[{scope_attribute(token)}]"
    selector = _replace_root(selector)
    if _SECTION.match(selector):
        return f"section{attr}{selector[len('section'):]}"
    return f"section{attr} {selector}"


def anchor_selector(selector: str, prefix: str) -> str:
    """Nest ``selector`` under the slide element reached through ``prefix``."""
    selector = _replace_root(selector)
    if prefix and selector.startswith(prefix):
        return selector
    if _SECTION.match(selector):
        return f"{prefix}{selector}"
    return f"{prefix}section {selector}"


class StylesheetPacker:
    """Packs one stylesheet. Create one per render; events are per instance."""

    def __init__(self, registry: ThemeRegistry) -> None:
        self.registry = registry
        self.events: List[RenderEvent] = []

    def pack(
        self,
        theme_name: Optional[str] = None,
        options: Optional[Union[PackOptions, Dict]] = None,
    ) -> str:
        if options is None:
            options = PackOptions()
        elif isinstance(options, dict):
            options = PackOptions.model_validate(options)

        themes = self.registry.snapshot()
        chain = self._resolve(theme_name, themes)
        emitted: Set[str] = {theme.name for theme in chain}
        hoisted: List[CssAtRule] = []

        nodes: List[CssNode] = list(parse_css(SCAFFOLD_CSS))
        for theme in chain:
            nodes.extend(self._expand(theme.rules, themes, emitted, hoisted))

        for fragment in options.after:
            fragment_nodes = self._expand(
                parse_css(fragment.css), themes, emitted, hoisted, keep_duplicates=True
            )
            if fragment.scope:
                fragment_nodes = map_selectors(
                    fragment_nodes, lambda s, token=fragment.scope: scope_selector(s, token)
                )
            nodes.extend(fragment_nodes)

        container_prefix = "".join(f"{c.selector()} > " for c in options.containers)
        slide_prefix = container_prefix
        if options.inline_svg:
            slide_prefix += f"svg[{SVG_ATTR}] > foreignObject > "
        nodes = map_selectors(nodes, lambda s: anchor_selector(s, slide_prefix))

        width, height = self._slide_size(chain)
        slide_selector = f"{slide_prefix}section"
        if options.inline_svg:
            nodes.extend(self._inline_svg_rules(container_prefix, slide_selector, width, height))
        if options.printable:
            nodes = [self._page_rule(width, height)] + nodes
            nodes.append(
                self._print_rules(container_prefix, slide_selector, options.inline_svg)
            )

        return serialize(list(hoisted) + nodes) + "\n"

    def resolve_theme(self, name: Optional[str]) -> Optional[str]:
        """Name of the theme a pack for ``name`` would actually use."""
        chain = self._resolve(name, self.registry.snapshot(), record=False)
        return chain[-1].name if chain else None

    def slide_size(self, name: Optional[str]) -> Tuple[str, str]:
        return self._slide_size(self._resolve(name, self.registry.snapshot(), record=False))

    def _resolve(
        self, name: Optional[str], themes: Dict[str, Theme], record: bool = True
    ) -> List[Theme]:
        if name:
            try:
                return self.registry.resolve_chain(name, themes)
            except ThemeNotFound:
                if record:
                    self.events.append(
                        RenderEvent(event_type="THEME_NOT_FOUND", payload={"theme": name})
                    )

        default = self.registry.default
        if default is not None and default.name in themes:
            return self.registry.resolve_chain(default.name, themes)
        if name and record:
            self.events.append(
                RenderEvent(event_type="THEME_FALLBACK_BARE", payload={"theme": name})
            )
        return []

    def _expand(
        self,
        nodes: List[CssNode],
        themes: Dict[str, Theme],
        emitted: Set[str],
        hoisted: List[CssAtRule],
        keep_duplicates: bool = False,
    ) -> List[CssNode]:
        """Inline registered imports. Repeats are dropped, or kept as comments."""
        expanded: List[CssNode] = []
        for node in nodes:
            if not (isinstance(node, CssAtRule) and node.is_import):
                expanded.append(node)
                continue
            target = import_target(node)
            if target in emitted:
                if keep_duplicates:
                    expanded.append(CssComment(text=f'@import "{target}";'))
                continue
            if target in themes:
                emitted.add(target)
                expanded.extend(self._expand(themes[target].rules, themes, emitted, hoisted))
                continue
            if node.keyword.lower() == "import":
                hoisted.append(node)
        return expanded

    def _slide_size(self, chain: List[Theme]) -> Tuple[str, str]:
        width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT
        for theme in chain:
            width = theme.width or width
            height = theme.height or height
        return width, height

    def _page_rule(self, width: str, height: str) -> CssAtRule:
        return CssAtRule(keyword="page", raw=f"size: {width} {height}; margin: 0;")

    def _inline_svg_rules(
        self, container_prefix: str, slide_selector: str, width: str, height: str
    ) -> List[CssNode]:
        return [
            CssRule(
                selectors=[f"{container_prefix}svg[{SVG_ATTR}]"],
                declarations=[_declaration("display", "block")],
            ),
            CssRule(
                selectors=[slide_selector],
                declarations=[
                    _declaration("width", width, important=True),
                    _declaration("height", height, important=True),
                ],
            ),
        ]

    def _print_rules(
        self, container_prefix: str, slide_selector: str, inline_svg: bool
    ) -> CssAtRule:
        rules: List[CssNode] = [
            CssRule(
                selectors=["html", "body"],
                declarations=[
                    _declaration("background-color", "#fff"),
                    _declaration("margin", "0"),
                    _declaration("page-break-inside", "avoid"),
                    _declaration("break-inside", "avoid-page"),
                ],
            ),
            CssRule(
                selectors=[slide_selector],
                declarations=[
                    _declaration("page-break-before", "always"),
                    _declaration("break-before", "page"),
                    _declaration("overflow", "hidden"),
                ],
            ),
            CssRule(
                selectors=[slide_selector, f"{slide_selector} *"],
                declarations=[
                    _declaration("-webkit-print-color-adjust", "exact", important=True),
                    _declaration("print-color-adjust", "exact", important=True),
                    _declaration("animation-delay", "0s", important=True),
                    _declaration("animation-duration", "0s", important=True),
                    _declaration("transition", "none", important=True),
                ],
            ),
        ]
        if inline_svg:
            rules.append(
                CssRule(
                    selectors=[f"{container_prefix}svg[{SVG_ATTR}]"],
                    declarations=[
                        _declaration("display", "block"),
                        _declaration("height", "100vh"),
                        _declaration("width", "100vw"),
                    ],
                )
            )
        return CssAtRule(keyword="media", prelude="print", rules=rules)
