"""Per-render scope tokens for slide-scoped style blocks."""

from __future__ import annotations

import secrets
from typing import Optional, Set

from ..errors import ScopeTokenCollision

SCOPE_ATTR_PREFIX = "data-slidemark-scope-"


class ScopeTokenMinter:
    """Mints scope tokens that are unique within one render call."""

    def __init__(self, prefix: Optional[str] = None) -> None:
        self._prefix = prefix or secrets.token_hex(4)
        self._counter = 0
        self._issued: Set[str] = set()

    def mint(self) -> str:
        self._counter += 1
        token = f"{self._prefix}{self._counter}"
        if token in self._issued:
            raise ScopeTokenCollision(f"Scope token issued twice in one render: {token}")
        self._issued.add(token)
        return token

    @property
    def issued(self) -> Set[str]:
        return set(self._issued)


def scope_attribute(token: str) -> str:
    return f"{SCOPE_ATTR_PREFIX}{token}"
