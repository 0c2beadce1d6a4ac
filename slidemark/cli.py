"""CLI entry point for slidemark."""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path

from .config import load_config
from .errors import ThemeNotFound, ThemeParseError
from .logging_utils import log_event, log_render_events
from .models.config import Config
from .render.renderer import Renderer
from .theme.registry import ThemeRegistry


def _generate_run_id() -> str:
    """Generate a timestamp-based run ID."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-root",
        type=str,
        default=None,
        help="Path to project root (default: auto-detect)",
    )


def _load_themes(config: Config) -> ThemeRegistry:
    registry = ThemeRegistry()
    registry.register_directory(Path(config.themes_dir))
    if config.default_theme:
        registry.set_default(config.default_theme)
    return registry


def cmd_themes(args: argparse.Namespace) -> int:
    config = load_config(Path(args.project_root) if args.project_root else None)
    try:
        registry = _load_themes(config)
    except (ThemeParseError, ThemeNotFound) as exc:
        print(f"ERROR: {exc}")
        return 1

    default = registry.default
    for name in sorted(registry.names()):
        theme = registry.get(name)
        marker = " (default)" if default is not None and default.name == name else ""
        parent = f" <- {theme.import_name}" if theme.import_name else ""
        print(f"{name}{parent}{marker}")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Render a markdown deck to HTML and CSS."""
    config = load_config(Path(args.project_root) if args.project_root else None)
    try:
        registry = _load_themes(config)
    except (ThemeParseError, ThemeNotFound) as exc:
        print(f"ERROR: {exc}")
        return 1

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"ERROR: Markdown file not found: {input_path}")
        return 1
    markdown = input_path.read_text(encoding="utf-8")

    run_id = args.run_id if args.run_id else _generate_run_id()
    run_dir = Path(config.runs_dir) / run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    log_path = run_dir / "run_log.jsonl"

    log_event(log_path, "MARKDOWN_LOADED", {"path": str(input_path), "bytes": len(markdown)})

    renderer = Renderer(config.options, registry)
    result = renderer.render(markdown, html_as_array=args.html_as_array)
    recovered = log_render_events(log_path, result.events)

    html_path = run_dir / "slides.html"
    with open(html_path, "w", encoding="utf-8") as f:
        if isinstance(result.html, list):
            f.write(json.dumps(result.html, ensure_ascii=True, indent=2))
        else:
            f.write(result.html)

    css_path = run_dir / "slides.css"
    with open(css_path, "w", encoding="utf-8") as f:
        f.write(result.css)

    comments_path = run_dir / "comments.json"
    with open(comments_path, "w", encoding="utf-8") as f:
        f.write(json.dumps(result.comments, ensure_ascii=True, indent=2))

    log_event(log_path, "RENDER_DONE", {
        "slides_rendered": len(result.slides),
        "theme": result.global_directives.get("theme"),
        "events": recovered,
    })

    print(f"Rendered {len(result.slides)} slides to: {html_path}")
    print(f"Stylesheet saved to: {css_path}")
    print(f"Run artifacts in: {run_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="slidemark CLI - Markdown slide renderer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Themes command
    themes_parser = subparsers.add_parser(
        "themes", help="List themes found in the themes directory"
    )
    _add_common_args(themes_parser)
    themes_parser.set_defaults(func=cmd_themes)

    # Render command
    render_parser = subparsers.add_parser(
        "render", help="Render a markdown deck to HTML and CSS"
    )
    _add_common_args(render_parser)
    render_parser.add_argument(
        "--input", type=str, required=True, help="Path to the markdown deck"
    )
    render_parser.add_argument(
        "--run-id", type=str, default=None, help="Run ID (default: auto-generated timestamp)"
    )
    render_parser.add_argument(
        "--html-as-array",
        action="store_true",
        help="Write slides.html as a JSON list with one entry per slide",
    )
    render_parser.set_defaults(func=cmd_render)

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
