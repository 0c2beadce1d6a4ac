"""Exceptions raised (or recovered) by the slide engine."""

from __future__ import annotations


class SlidemarkError(Exception):
    """Base class for every slidemark error."""


class MalformedDirectiveBlock(SlidemarkError, ValueError):
    """A metadata block failed to parse. Always recovered by the parser."""

    def __init__(self, reason: str, source: str = ""):
        self.reason = reason
        self.source = source
        super().__init__(f"Malformed directive block: {reason}")


class ThemeNotFound(SlidemarkError, LookupError):
    """A theme name is not registered. Recovered by the packer."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Theme is not registered: {name}")


class ThemeParseError(SlidemarkError, ValueError):
    """CSS text given to the registry has no discoverable theme name."""


class ReservedDirectiveConflict(SlidemarkError, ValueError):
    """A custom directive handler tried to claim a built-in key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Directive key is reserved by a built-in directive: {key}")


class ScopeTokenCollision(SlidemarkError, RuntimeError):
    """Two scoped style blocks received the same scope token in one render."""
