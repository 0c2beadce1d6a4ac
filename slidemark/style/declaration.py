"""Ordered inline style declarations."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple


class StyleDeclaration:
    """Ordered ``property -> value`` mapping rendered as an inline style.

    Setting an existing property replaces its value in place, so the
    first-seen order is kept unless ``move_to_end`` is called.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._props: Dict[str, str] = {}
        for prop, value in (initial or {}).items():
            self.set(prop, value)

    def set(self, prop: str, value: str) -> "StyleDeclaration":
        self._props[prop.strip().lower()] = value.strip()
        return self

    def get(self, prop: str) -> Optional[str]:
        return self._props.get(prop.strip().lower())

    def delete(self, prop: str) -> "StyleDeclaration":
        self._props.pop(prop.strip().lower(), None)
        return self

    def move_to_end(self, prop: str) -> "StyleDeclaration":
        key = prop.strip().lower()
        if key in self._props:
            self._props[key] = self._props.pop(key)
        return self

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._props.items()))

    def __contains__(self, prop: object) -> bool:
        return isinstance(prop, str) and prop.strip().lower() in self._props

    def __len__(self) -> int:
        return len(self._props)

    def __bool__(self) -> bool:
        return bool(self._props)

    def to_css(self) -> str:
        return "".join(f"{prop}:{value};" for prop, value in self._props.items())

    def __str__(self) -> str:
        return self.to_css()
