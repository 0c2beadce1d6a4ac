"""Runtime configuration loader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .models.config import Config

CONFIG_FILENAME = "slidemark.json"


def _require_dir(path: Path, label: str) -> None:
    if not path.is_dir():
        raise FileNotFoundError(f"Missing {label}: {path}")


def _read_settings(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        settings = json.load(handle)
    if not isinstance(settings, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return settings


def load_config(project_root: Optional[Path] = None) -> Config:
    """Load configuration with canonical defaults and validate paths.

    ``slidemark.json`` at the project root may set ``default_theme`` and an
    ``options`` object validated as RenderOptions.
    """
    root = project_root or Path(__file__).resolve().parents[1]
    themes_dir = root / "themes"
    _require_dir(themes_dir, "themes directory")

    settings = _read_settings(root / CONFIG_FILENAME)
    return Config(
        project_root=str(root),
        themes_dir=str(themes_dir),
        inputs_dir=str(root / "inputs"),
        runs_dir=str(root / "runs"),
        default_theme=settings.get("default_theme"),
        options=settings.get("options") or {},
    )
