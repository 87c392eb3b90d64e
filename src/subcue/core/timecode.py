from __future__ import annotations

import re

DEFAULT_FRAME_RATE = 25.0

_CLOCK_PATTERN = re.compile(
    r"^(?:(?P<hh>\d+):)?(?P<mm>\d{1,2}):(?P<ss>\d{1,2})(?:(?P<sep>[.,])(?P<frac>\d{1,3}))?$"
)


def parse_clock_timestamp(value: str, separators: str = ",.") -> float | None:
    """Parse ``HH:MM:SS,mmm`` style timestamps to seconds.

    Hours are optional (WebVTT allows ``MM:SS.mmm``) and may have a single
    digit (ASS writes ``H:MM:SS.cc``). The fraction is read as a decimal
    fraction, so ``,500`` and ``.50`` are both half a second.

    Returns ``None`` for anything malformed instead of raising, so callers can
    drop the cue and keep going.
    """
    match = _CLOCK_PATTERN.match(value.strip())
    if not match:
        return None
    sep = match.group("sep")
    if sep is not None and sep not in separators:
        return None
    hours = int(match.group("hh") or 0)
    minutes = int(match.group("mm"))
    seconds = int(match.group("ss"))
    if minutes >= 60 or seconds >= 60:
        return None
    frac = match.group("frac")
    fraction = int(frac) / (10 ** len(frac)) if frac else 0.0
    return hours * 3600 + minutes * 60 + seconds + fraction


def frames_to_seconds(frames: int, frame_rate: float = DEFAULT_FRAME_RATE) -> float | None:
    if frame_rate <= 0 or frames < 0:
        return None
    return frames / frame_rate


def format_srt_timestamp(seconds: float) -> str:
    """Format seconds to SRT timestamp (HH:MM:SS,mmm)."""
    millis = max(0, int(round(seconds * 1000)))
    hours = millis // 3_600_000
    minutes = (millis % 3_600_000) // 60_000
    secs = (millis % 60_000) // 1_000
    ms = millis % 1_000
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{ms:03d}"
