from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
import logging
import re

from subcue.core.formats import SUBTITLE_EXTENSIONS

logger = logging.getLogger(__name__)

_PATH_SEPARATORS = re.compile(r"[\\/]")
_TRACK_TAG = re.compile(
    r"^(?:[a-z]{2,3}(?:[-_][a-z0-9]{2,8})?|forced|sdh|cc|hi|default)$", re.IGNORECASE
)
_MAX_TRACK_TAGS = 2


class SubtitleDiscoveryError(RuntimeError):
    """Raised when the media file's directory cannot be listed."""


def split_media_path(media_path: str | Path) -> tuple[Path, str]:
    """Split a media path into (directory, stem), accepting both / and \\."""
    raw = str(media_path)
    parts = _PATH_SEPARATORS.split(raw)
    name = parts[-1]
    if len(parts) == 1:
        directory = Path(".")
    else:
        head = raw[: len(raw) - len(name) - 1]
        directory = Path(head.replace("\\", "/") or "/")
    stem, dot, _ = name.rpartition(".")
    if not dot or not stem:
        stem = name
    return directory, stem


def _matches_stem(candidate: Path, stem: str) -> bool:
    # "movie.srt" and tagged tracks like "movie.en.srt" or "movie.pt-BR.forced.srt",
    # but not "movie.part1.srt", which belongs to "movie.part1.mkv".
    name = candidate.stem
    if name == stem:
        return True
    if not name.startswith(f"{stem}."):
        return False
    tags = name[len(stem) + 1 :].split(".")
    return len(tags) <= _MAX_TRACK_TAGS and all(_TRACK_TAG.match(tag) for tag in tags)


def find_subtitle_files(
    media_path: str | Path,
    extensions: Iterable[str] = SUBTITLE_EXTENSIONS,
) -> list[Path]:
    directory, stem = split_media_path(media_path)
    allowed = {ext.lower() for ext in extensions}
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise SubtitleDiscoveryError(
            f"Cannot list subtitle directory {directory}: {exc}"
        ) from exc
    matches = sorted(
        entry
        for entry in entries
        if entry.suffix.lower() in allowed
        and _matches_stem(entry, stem)
        and entry.is_file()
    )
    logger.debug("Found %d subtitle candidates for %s", len(matches), media_path)
    return matches
