"""Structured JSONL logging helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable

from .models.slide import RenderEvent


def log_event(log_path: Path, event_type: str, payload: Dict[str, Any]) -> None:
    """Append a structured event to a JSONL log."""
    record = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "event_type": event_type,
        "payload": payload,
    }
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(record, ensure_ascii=True) + "\n")


def log_render_events(log_path: Path, events: Iterable[RenderEvent]) -> int:
    """Append every recovered render event; return how many were written."""
    count = 0
    for event in events:
        log_event(log_path, event.event_type, event.payload)
        count += 1
    return count
