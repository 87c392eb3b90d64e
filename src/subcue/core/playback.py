from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from pathlib import Path

from subcue.core.discovery import find_subtitle_files
from subcue.core.loader import SubtitleLoadError, SubtitleTrack, load_subtitle_track
from subcue.infra.config import AppConfig
from subcue.schemas.subtitle import SubtitleCue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackSubtitles:
    """Subtitle state for one media file.

    Switching tracks builds a new value, so a reader holding the old one never
    sees a half-loaded track.
    """

    media_path: Path
    candidates: tuple[Path, ...]
    selected: int | None = None
    track: SubtitleTrack | None = None
    error: str | None = None


def select_track(
    state: PlaybackSubtitles, index: int, config: AppConfig
) -> PlaybackSubtitles:
    if index < 0 or index >= len(state.candidates):
        raise IndexError(
            f"Subtitle track {index} out of range (0..{len(state.candidates) - 1})"
        )
    path = state.candidates[index]
    try:
        track = load_subtitle_track(
            path, frame_rate=config.frame_rate, encoding=config.encoding
        )
    except SubtitleLoadError as exc:
        logger.warning("Subtitle track unavailable: %s", exc)
        return replace(state, selected=index, track=None, error=str(exc))
    return replace(state, selected=index, track=track, error=None)


def open_media_subtitles(media_path: Path, config: AppConfig) -> PlaybackSubtitles:
    """Discover subtitle tracks for a media file and load the first one."""
    candidates = tuple(
        find_subtitle_files(media_path, extensions=config.subtitle_extensions)
    )
    state = PlaybackSubtitles(media_path=media_path, candidates=candidates)
    if not candidates:
        return state
    return select_track(state, 0, config)


def active_cue(state: PlaybackSubtitles, seconds: float) -> SubtitleCue | None:
    if state.track is None:
        return None
    return state.track.active_at(seconds)
