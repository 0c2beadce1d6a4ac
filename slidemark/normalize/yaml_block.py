"""YAML loading for directive blocks."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

import yaml

from ..errors import MalformedDirectiveBlock

# Values starting with one of these are left for YAML to interpret.
_YAML_INDICATORS = "\"'{|>~&*"
_LOOSE_LINE = re.compile(r"^(\s*[^\s:#][^\s:]*\s*:)(.+)$")


def loosen(text: str) -> str:
    """Quote plain ``key: value`` scalars so values such as ``#123`` survive."""
    lines = []
    for line in text.splitlines():
        match = _LOOSE_LINE.match(line)
        if match:
            prop, value = match.groups()
            trimmed = value.strip()
            if trimmed and trimmed[0] not in _YAML_INDICATORS:
                spaces = value[: len(value) - len(value.lstrip())] or " "
                escaped = trimmed.replace("\\", "\\\\").replace('"', '\\"')
                line = f'{prop}{spaces}"{escaped}"'
        lines.append(line)
    return "\n".join(lines).strip()


def parse_yaml_block(text: str, loose: bool = False) -> Optional[Dict[str, Any]]:
    """Load a metadata block; every scalar comes back as a string.

    Returns ``None`` when the block is valid YAML but not a mapping (plain
    comments). Raises ``MalformedDirectiveBlock`` on a syntax error.
    """
    source = loosen(text) if loose else text
    try:
        loaded = yaml.load(source, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise MalformedDirectiveBlock(str(exc).splitlines()[0], source=text) from exc
    if not isinstance(loaded, dict):
        return None
    return loaded
