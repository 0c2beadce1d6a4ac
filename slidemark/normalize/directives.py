"""Directive definitions, custom handler tables and the block parser.

Directives are ``key: value`` pairs written in the front matter or in HTML
comments. Built-in keys have a fixed scope class; custom handlers extend the
global or local table but can never claim a built-in key.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import Field

from ..errors import MalformedDirectiveBlock, ReservedDirectiveConflict
from ..models.base import SlidemarkBaseModel
from ..models.directive import Directive, DirectiveScope
from ..models.slide import RenderEvent
from .yaml_block import parse_yaml_block

GLOBAL_DIRECTIVES = ("theme", "style", "headingDivider", "slidemark")
LOCAL_DIRECTIVES = (
    "class",
    "header",
    "footer",
    "paginate",
    "backgroundImage",
    "backgroundColor",
    "backgroundSize",
    "backgroundPosition",
    "backgroundRepeat",
    "color",
    "size",
)
BUILTIN_DIRECTIVES = frozenset(GLOBAL_DIRECTIVES + LOCAL_DIRECTIVES)

DirectiveHandler = Callable[[str], Mapping[str, Any]]

_DIRECTIVE_NAME = re.compile(r"^[A-Za-z$][\w$-]*$")
_FALSE_VALUES = frozenset({"false", "no", "off", "0"})


def is_disabled(value: Optional[str]) -> bool:
    """True when a ``slidemark`` directive value turns the transforms off."""
    return value is not None and value.strip().lower() in _FALSE_VALUES


class DirectiveRegistry:
    """Custom directive handlers, one table per scope class.

    Handlers in the local table also serve the spot form of their key.
    """

    def __init__(self) -> None:
        self._global: Dict[str, DirectiveHandler] = {}
        self._local: Dict[str, DirectiveHandler] = {}

    def _check(self, key: str, handler: DirectiveHandler) -> None:
        if key in BUILTIN_DIRECTIVES:
            raise ReservedDirectiveConflict(key)
        if not _DIRECTIVE_NAME.match(key):
            raise ValueError(f"Invalid directive name: {key!r}")
        if not callable(handler):
            raise ValueError(f"Directive handler for {key!r} must be callable")

    def register_global(self, key: str, handler: DirectiveHandler) -> None:
        self._check(key, handler)
        self._local.pop(key, None)
        self._global[key] = handler

    def register_local(self, key: str, handler: DirectiveHandler) -> None:
        self._check(key, handler)
        self._global.pop(key, None)
        self._local[key] = handler

    def unregister(self, key: str) -> None:
        self._global.pop(key, None)
        self._local.pop(key, None)

    def is_global(self, key: str) -> bool:
        return key in GLOBAL_DIRECTIVES or key in self._global

    def is_local(self, key: str) -> bool:
        return key in LOCAL_DIRECTIVES or key in self._local

    def expand(self, key: str, value: str) -> Dict[str, str]:
        """Turn one directive into the meta keys it sets."""
        handler = self._global.get(key) or self._local.get(key)
        if handler is None:
            return {key: value}
        output = handler(value) or {}
        return {
            str(name): str(result)
            for name, result in output.items()
            if name not in BUILTIN_DIRECTIVES and result is not None
        }


class ParsedBlock(SlidemarkBaseModel):
    directives: List[Directive] = Field(default_factory=list)
    is_directive_block: bool = False


def _scalar(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return " ".join(value)
    return None


class DirectiveParser:
    """Extracts scoped directives from metadata blocks."""

    def __init__(
        self,
        registry: DirectiveRegistry,
        loose_yaml: bool = False,
        override_marker: str = "_",
    ) -> None:
        self.registry = registry
        self.loose_yaml = loose_yaml
        self.override_marker = override_marker
        self.events: List[RenderEvent] = []

    def load(self, text: str) -> Optional[Dict[str, Any]]:
        try:
            return parse_yaml_block(text, loose=self.loose_yaml)
        except MalformedDirectiveBlock as exc:
            self.events.append(
                RenderEvent(event_type="DIRECTIVE_BLOCK_DROPPED", payload={"reason": exc.reason})
            )
            return None

    def parse(self, text: str, leading: bool = False) -> ParsedBlock:
        """Parse one block.

        ``leading`` is true for blocks found before the first content of the
        document; only those may set global directives.
        """
        mapping = self.load(text)
        if not mapping:
            return ParsedBlock()

        directives: List[Directive] = []
        recognized = 0
        for raw_key, raw_value in mapping.items():
            key = str(raw_key)
            scope = self._classify(key)
            if scope is None:
                continue
            recognized += 1
            name = key[len(self.override_marker):] if scope is DirectiveScope.SPOT else key

            if scope is DirectiveScope.GLOBAL and not leading:
                self.events.append(
                    RenderEvent(event_type="GLOBAL_DIRECTIVE_IGNORED", payload={"key": key})
                )
                continue

            value = _scalar(raw_value)
            if value is None:
                continue
            for meta_key, meta_value in self._expand(name, value).items():
                directives.append(Directive(key=meta_key, value=meta_value, scope=scope))

        return ParsedBlock(directives=directives, is_directive_block=recognized == len(mapping))

    def _classify(self, key: str) -> Optional[DirectiveScope]:
        marker = self.override_marker
        if key.startswith(marker):
            base = key[len(marker):]
            if base and self.registry.is_local(base):
                return DirectiveScope.SPOT
            return None
        if self.registry.is_global(key):
            return DirectiveScope.GLOBAL
        if self.registry.is_local(key):
            return DirectiveScope.LOCAL
        return None

    def _expand(self, key: str, value: str) -> Dict[str, str]:
        try:
            return self.registry.expand(key, value)
        except Exception as exc:
            self.events.append(
                RenderEvent(
                    event_type="DIRECTIVE_HANDLER_FAILED",
                    payload={"key": key, "error": str(exc)},
                )
            )
            return {}
