"""markdown-it setup: comment, style block, front matter and image rules.

The markdown-it token stream is the only document representation the engine
works on. These rules only add token types the engine needs to see; they do
not interpret directives.
"""

from __future__ import annotations

import re
from typing import List, Optional

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from mdit_py_plugins.front_matter import front_matter_plugin

from ..models.options import RenderOptions

COMMENT_TOKEN = "slide_comment"
STYLE_TOKEN = "slide_style"
FRONT_MATTER_TOKEN = "front_matter"

_COMMENT_OPEN = "<!--"
_COMMENT_CLOSE = "-->"
_STYLE_OPEN = re.compile(
    r"<style((?:\s+[\w-]+(?:=(?:\"[^\"]*\"|'[^']*'|[^\s>]*))?)*)\s*>", re.IGNORECASE
)
_STYLE_CLOSE = re.compile(r"</style\s*>", re.IGNORECASE)
_SCOPED_ATTR = re.compile(r"(?:^|\s)scoped(?:\s|=|$)", re.IGNORECASE)
_OPTION_SPLIT = re.compile(r"[\s,]+")

_BLOCK_ALT = {"alt": ["paragraph", "reference", "blockquote", "list"]}


def split_image_options(text: str) -> List[str]:
    """Split image alt text into option keywords."""
    return [part for part in _OPTION_SPLIT.split(text.strip()) if part]


def _closing_line(state: StateBlock, start_line: int, end_line: int, end_pos: int) -> Optional[int]:
    """Return the line holding ``end_pos`` if only whitespace follows it."""
    line = start_line
    while line < end_line and state.eMarks[line] < end_pos:
        line += 1
    if line >= end_line:
        return None
    if state.src[end_pos:state.eMarks[line]].strip():
        return None
    return line


def _block_start(state: StateBlock, start_line: int) -> Optional[int]:
    if state.sCount[start_line] - state.blkIndent >= 4:
        return None
    return state.bMarks[start_line] + state.tShift[start_line]


def comment_block(state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
    pos = _block_start(state, start_line)
    if pos is None or not state.src.startswith(_COMMENT_OPEN, pos):
        return False

    # An unterminated comment stays ordinary content.
    close = state.src.find(_COMMENT_CLOSE, pos + len(_COMMENT_OPEN))
    if close < 0:
        return False
    end_pos = close + len(_COMMENT_CLOSE)
    last_line = _closing_line(state, start_line, end_line, end_pos)
    if last_line is None:
        return False
    if silent:
        return True

    token = state.push(COMMENT_TOKEN, "", 0)
    token.map = [start_line, last_line + 1]
    token.content = state.src[pos + len(_COMMENT_OPEN):close].strip()
    token.markup = _COMMENT_OPEN
    token.hidden = True
    state.line = last_line + 1
    return True


def comment_inline(state: StateInline, silent: bool) -> bool:
    if not state.src.startswith(_COMMENT_OPEN, state.pos):
        return False
    close = state.src.find(_COMMENT_CLOSE, state.pos + len(_COMMENT_OPEN))
    if close < 0 or close + len(_COMMENT_CLOSE) > state.posMax:
        return False
    if not silent:
        token = state.push(COMMENT_TOKEN, "", 0)
        token.content = state.src[state.pos + len(_COMMENT_OPEN):close].strip()
        token.markup = _COMMENT_OPEN
        token.hidden = True
    state.pos = close + len(_COMMENT_CLOSE)
    return True


def style_block(state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
    pos = _block_start(state, start_line)
    if pos is None:
        return False
    opening = _STYLE_OPEN.match(state.src, pos)
    if not opening:
        return False
    closing = _STYLE_CLOSE.search(state.src, opening.end())
    if not closing:
        return False
    last_line = _closing_line(state, start_line, end_line, closing.end())
    if last_line is None:
        return False
    if silent:
        return True

    token = state.push(STYLE_TOKEN, "style", 0)
    token.map = [start_line, last_line + 1]
    token.content = state.src[opening.end():closing.start()]
    token.meta["scoped"] = bool(_SCOPED_ATTR.search(opening.group(1) or ""))
    token.hidden = True
    state.line = last_line + 1
    return True


def parse_images(state: StateCore) -> None:
    """Record the resolved URL and alt-text options on every image token."""
    for block in state.tokens:
        if block.type != "inline" or not block.children:
            continue
        for token in block.children:
            if token.type != "image":
                continue
            token.meta["url"] = token.attrGet("src") or ""
            token.meta["options"] = split_image_options(token.content)


def _render_visible_image(image_rule):
    def render_image(self, tokens, idx, options, env):
        if tokens[idx].hidden:
            return ""
        return image_rule(tokens, idx, options, env)

    return render_image


def comment_plugin(md: MarkdownIt) -> None:
    md.block.ruler.before("html_block", "slide_comment", comment_block, _BLOCK_ALT)
    md.inline.ruler.before("html_inline", "slide_comment", comment_inline)


def style_block_plugin(md: MarkdownIt) -> None:
    md.block.ruler.before("html_block", "slide_style", style_block, _BLOCK_ALT)


def image_plugin(md: MarkdownIt) -> None:
    md.core.ruler.after("inline", "slide_parse_image", parse_images)
    md.add_render_rule("image", _render_visible_image(md.renderer.rules["image"]))


def tokenizer_plugin(md: MarkdownIt, options: RenderOptions) -> None:
    """Add every rule slide segmentation relies on to ``md``."""
    md.use(front_matter_plugin)
    md.use(comment_plugin)
    if options.inline_style:
        md.use(style_block_plugin)
    md.use(image_plugin)


def create_markdown(options: RenderOptions) -> MarkdownIt:
    """Build the markdown-it instance used to tokenize and render decks."""
    return MarkdownIt("commonmark", {"html": True}).use(tokenizer_plugin, options)


def heading_level(token) -> Optional[int]:
    """Level of a ``heading_open`` token, ``None`` for anything else."""
    if token.type != "heading_open":
        return None
    tag = token.tag
    if len(tag) == 2 and tag[0] == "h" and tag[1].isdigit():
        return int(tag[1])
    return None
