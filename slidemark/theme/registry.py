"""Registry of named CSS themes shared across renders."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import ThemeNotFound, ThemeParseError
from ..models.css import CssAtRule, CssRule
from ..models.theme import Theme
from ..style.css import import_target, parse_css, parse_meta

_SIZE_SELECTORS = frozenset({"section", ":root"})


def _declared_size(rules, prop: str) -> Optional[str]:
    value: Optional[str] = None
    for rule in rules:
        if not isinstance(rule, CssRule):
            continue
        if not _SIZE_SELECTORS.intersection(rule.selectors):
            continue
        for decl in rule.declarations:
            if decl.name.lower() == prop:
                value = decl.value
    return value


def build_theme(css: str, name: Optional[str] = None) -> Theme:
    """Parse CSS text into a Theme, reading its name from ``@theme``."""
    meta = parse_meta(css)
    theme_name = (name or meta.get("theme") or "").strip()
    if not theme_name:
        raise ThemeParseError("Theme CSS must declare its name with /* @theme <name> */")

    rules = parse_css(css)
    import_name = None
    for rule in rules:
        if isinstance(rule, CssAtRule) and rule.is_import:
            import_name = import_target(rule)
            if import_name:
                break

    return Theme(
        name=theme_name,
        css=css,
        rules=rules,
        meta=meta,
        import_name=import_name,
        width=_declared_size(rules, "width"),
        height=_declared_size(rules, "height"),
    )


class ThemeRegistry:
    """Named themes plus an optional default.

    Writers replace whole entries under a lock; readers take a snapshot of the
    chain they need, so a pack in progress never sees a half-registered theme.
    """

    def __init__(self) -> None:
        self._themes: Dict[str, Theme] = {}
        self._default: Optional[str] = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._themes)

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    def register(self, css: str) -> Theme:
        theme = build_theme(css)
        return self.add(theme)

    def register_directory(self, directory: Path) -> List[Theme]:
        """Register every ``*.css`` file in ``directory``, in name order."""
        themes: List[Theme] = []
        for path in sorted(Path(directory).glob("*.css")):
            themes.append(self.register(path.read_text(encoding="utf-8")))
        return themes

    def add(self, theme: Theme) -> Theme:
        with self._lock:
            self._themes[theme.name] = theme
        return theme

    def get(self, name: Optional[str]) -> Optional[Theme]:
        if name is None:
            return None
        with self._lock:
            return self._themes.get(name)

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._themes

    def remove(self, name: str) -> bool:
        with self._lock:
            removed = self._themes.pop(name, None) is not None
            if removed and self._default == name:
                self._default = None
        return removed

    def names(self) -> List[str]:
        with self._lock:
            return list(self._themes)

    def set_default(self, name: Optional[str]) -> None:
        with self._lock:
            if name is not None and name not in self._themes:
                raise ThemeNotFound(name)
            self._default = name

    @property
    def default(self) -> Optional[Theme]:
        with self._lock:
            if self._default is None:
                return None
            return self._themes.get(self._default)

    def snapshot(self) -> Dict[str, Theme]:
        """Copy of the name -> Theme map taken under the lock."""
        with self._lock:
            return dict(self._themes)

    def resolve_chain(
        self, name: str, themes: Optional[Dict[str, Theme]] = None
    ) -> List[Theme]:
        """Return ``[root ancestor, ..., name]`` from one consistent snapshot."""
        if themes is None:
            themes = self.snapshot()

        if name not in themes:
            raise ThemeNotFound(name)

        chain: List[Theme] = []
        seen = set()
        current: Optional[str] = name
        while current and current in themes and current not in seen:
            seen.add(current)
            theme = themes[current]
            chain.append(theme)
            current = theme.import_name
        chain.reverse()
        return chain
