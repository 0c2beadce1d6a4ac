"""Base rules emitted before every theme."""

from __future__ import annotations

DEFAULT_WIDTH = "1280px"
DEFAULT_HEIGHT = "720px"

SCAFFOLD_CSS = """
section {
  width: 1280px;
  height: 720px;
  box-sizing: border-box;
  overflow: hidden;
  position: relative;
  scroll-snap-align: center center;
}

section::after {
  bottom: 0;
  content: attr(data-slidemark-pagination);
  padding: inherit;
  pointer-events: none;
  position: absolute;
  right: 0;
}

section:not([data-slidemark-pagination])::after {
  display: none;
}

h1 {
  font-size: 2em;
  margin: 0.67em 0;
}
"""
