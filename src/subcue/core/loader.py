from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from subcue.core.formats import detect_format, parse_subtitle_text
from subcue.core.resolver import CueTimeline
from subcue.core.timecode import DEFAULT_FRAME_RATE
from subcue.schemas.subtitle import SubtitleCue

logger = logging.getLogger(__name__)


class SubtitleLoadError(RuntimeError):
    """Raised when a subtitle file cannot be read or has no known format."""


@dataclass(frozen=True)
class SubtitleTrack:
    path: Path
    format: str
    cues: tuple[SubtitleCue, ...]
    timeline: CueTimeline

    def active_at(self, seconds: float) -> SubtitleCue | None:
        return self.timeline.active_at(seconds)


def read_subtitle_text(path: Path, encoding: str = "utf-8") -> str:
    """Read and decode a subtitle file. A leading BOM is dropped."""
    if encoding.replace("_", "-").lower() in {"utf-8", "utf8"}:
        encoding = "utf-8-sig"
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SubtitleLoadError(f"Cannot read subtitle file {path}: {exc}") from exc
    return raw.decode(encoding, errors="replace")


def load_subtitle_track(
    path: Path,
    *,
    frame_rate: float = DEFAULT_FRAME_RATE,
    encoding: str = "utf-8",
) -> SubtitleTrack:
    fmt = detect_format(path)
    if fmt is None:
        raise SubtitleLoadError(f"Unsupported subtitle file extension: {path}")
    content = read_subtitle_text(path, encoding)
    cues = tuple(parse_subtitle_text(content, fmt, frame_rate=frame_rate))
    logger.info("Loaded %d %s cues from %s", len(cues), fmt, path)
    return SubtitleTrack(
        path=path,
        format=fmt,
        cues=cues,
        timeline=CueTimeline.from_cues(cues),
    )
