"""Parsed CSS rule lists.

Themes and collected style fragments are parsed with tinycss2 into a small
rule tree (qualified rules with split selectors, at-rules with either nested
rules or raw content) so selectors can be rewritten without string splicing.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional

import tinycss2

from ..models.css import CssAtRule, CssComment, CssDeclaration, CssNode, CssRule

# At-rules whose block holds ordinary style rules.
NESTED_AT_RULES = frozenset({"media", "supports", "document", "layer", "container"})

_META_LINE = re.compile(r"^[*!\s]*@([\w-]+)\s+(.+?)\s*$", re.MULTILINE)


def _split_selectors(prelude) -> List[str]:
    selectors: List[str] = []
    current: list = []
    for token in prelude:
        if token.type == "literal" and token.value == ",":
            selectors.append(tinycss2.serialize(current).strip())
            current = []
        else:
            current.append(token)
    selectors.append(tinycss2.serialize(current).strip())
    return [selector for selector in selectors if selector]


def _parse_declarations(content) -> List[CssDeclaration]:
    declarations: List[CssDeclaration] = []
    for node in tinycss2.parse_declaration_list(
        content, skip_comments=True, skip_whitespace=True
    ):
        if node.type != "declaration":
            continue
        declarations.append(
            CssDeclaration(
                name=node.name,
                value=tinycss2.serialize(node.value).strip(),
                important=node.important,
            )
        )
    return declarations


def _convert(nodes) -> List[CssNode]:
    converted: List[CssNode] = []
    for node in nodes:
        if node.type == "qualified-rule":
            selectors = _split_selectors(node.prelude)
            if not selectors:
                continue
            converted.append(
                CssRule(selectors=selectors, declarations=_parse_declarations(node.content or []))
            )
        elif node.type == "at-rule":
            prelude = tinycss2.serialize(node.prelude).strip()
            keyword = node.at_keyword
            if node.content is None:
                converted.append(CssAtRule(keyword=keyword, prelude=prelude))
            elif node.lower_at_keyword in NESTED_AT_RULES:
                children = tinycss2.parse_rule_list(
                    node.content, skip_comments=True, skip_whitespace=True
                )
                converted.append(
                    CssAtRule(keyword=keyword, prelude=prelude, rules=_convert(children))
                )
            else:
                converted.append(
                    CssAtRule(
                        keyword=keyword,
                        prelude=prelude,
                        raw=tinycss2.serialize(node.content).strip(),
                    )
                )
    return converted


def parse_css(css: str) -> List[CssNode]:
    """Parse CSS text into a rule tree, dropping comments and parse errors."""
    nodes = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
    return _convert(nodes)


def parse_meta(css: str) -> Dict[str, str]:
    """Collect ``@key value`` pairs written inside top-level CSS comments."""
    meta: Dict[str, str] = {}
    for node in tinycss2.parse_stylesheet(css, skip_comments=False, skip_whitespace=True):
        if node.type != "comment":
            continue
        for key, value in _META_LINE.findall(node.value):
            meta[key] = value
    return meta


def import_target(rule: CssAtRule) -> Optional[str]:
    """Return the target of ``@import "name"`` / ``@import url(name)``."""
    if not rule.is_import:
        return None
    for token in tinycss2.parse_component_value_list(rule.prelude):
        if token.type in ("string", "url"):
            return token.value
        if token.type == "function" and token.lower_name == "url":
            for argument in token.arguments:
                if argument.type == "string":
                    return argument.value
            return None
        if token.type not in ("whitespace", "comment"):
            return None
    return None


def map_selectors(
    nodes: List[CssNode], rewrite: Callable[[str], str]
) -> List[CssNode]:
    """Return a copy of ``nodes`` with every style-rule selector rewritten."""
    mapped: List[CssNode] = []
    for node in nodes:
        if isinstance(node, CssRule):
            mapped.append(
                node.model_copy(update={"selectors": [rewrite(s) for s in node.selectors]})
            )
        elif isinstance(node, CssAtRule) and node.rules is not None:
            mapped.append(node.model_copy(update={"rules": map_selectors(node.rules, rewrite)}))
        else:
            mapped.append(node)
    return mapped


def serialize(nodes: List[CssNode], indent: str = "") -> str:
    """Serialize a rule tree back to CSS text."""
    lines: List[str] = []
    for node in nodes:
        if isinstance(node, CssRule):
            lines.append(f"{indent}{', '.join(node.selectors)} {{")
            lines.extend(f"{indent}  {decl.to_css()}" for decl in node.declarations)
            lines.append(f"{indent}}}")
            continue
        if isinstance(node, CssComment):
            lines.append(f"{indent}/* {node.text} */")
            continue
        head = f"{indent}@{node.keyword}"
        if node.prelude:
            head = f"{head} {node.prelude}"
        if node.rules is not None:
            lines.append(f"{head} {{")
            inner = serialize(node.rules, indent + "  ")
            if inner:
                lines.append(inner)
            lines.append(f"{indent}}}")
        elif node.raw is not None:
            lines.append(f"{head} {{ {node.raw} }}")
        else:
            lines.append(f"{head};")
    return "\n".join(lines)
