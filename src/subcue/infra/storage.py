from __future__ import annotations

from dataclasses import asdict
import json
from pathlib import Path
from typing import Any

from subcue.schemas.subtitle import SubtitleCue


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_json(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def cues_to_payload(cues: list[SubtitleCue] | tuple[SubtitleCue, ...]) -> list[dict[str, Any]]:
    return [asdict(cue) for cue in cues]
