from __future__ import annotations

from collections.abc import Callable
from functools import partial
from pathlib import PurePath

from subcue.core.subtitle import parse_ass, parse_microdvd, parse_srt, parse_vtt
from subcue.core.timecode import DEFAULT_FRAME_RATE
from subcue.schemas.subtitle import SubtitleCue

SubtitleParser = Callable[[str], list[SubtitleCue]]

FORMAT_BY_EXTENSION: dict[str, str] = {
    ".srt": "srt",
    ".vtt": "vtt",
    ".ass": "ass",
    ".ssa": "ass",
    ".sub": "microdvd",
}
SUPPORTED_FORMATS = frozenset(FORMAT_BY_EXTENSION.values())
SUBTITLE_EXTENSIONS: tuple[str, ...] = tuple(FORMAT_BY_EXTENSION)


def detect_format(path: str | PurePath) -> str | None:
    """Return the parser name for a subtitle file, or None if unrecognized."""
    suffix = PurePath(str(path).replace("\\", "/")).suffix.lower()
    return FORMAT_BY_EXTENSION.get(suffix)


def get_parser(fmt: str, *, frame_rate: float = DEFAULT_FRAME_RATE) -> SubtitleParser:
    if fmt == "srt":
        return parse_srt
    if fmt == "vtt":
        return parse_vtt
    if fmt == "ass":
        return parse_ass
    if fmt == "microdvd":
        return partial(parse_microdvd, frame_rate=frame_rate)
    raise ValueError(
        f"Unsupported subtitle format '{fmt}'. Allowed: {sorted(SUPPORTED_FORMATS)}"
    )


def parse_subtitle_text(
    content: str, fmt: str, *, frame_rate: float = DEFAULT_FRAME_RATE
) -> list[SubtitleCue]:
    return get_parser(fmt, frame_rate=frame_rate)(content)
