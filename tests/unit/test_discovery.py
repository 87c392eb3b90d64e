from __future__ import annotations

from pathlib import Path

import pytest

from subcue.core.discovery import (
    SubtitleDiscoveryError,
    find_subtitle_files,
    split_media_path,
)


def _touch(directory: Path, *names: str) -> None:
    for name in names:
        (directory / name).write_text("", encoding="utf-8")


def test_split_media_path_handles_both_separators() -> None:
    assert split_media_path("/videos/show/movie.mkv") == (Path("/videos/show"), "movie")
    assert split_media_path("C:\\Videos\\movie.part1.mkv") == (Path("C:/Videos"), "movie.part1")
    assert split_media_path("movie.mp4") == (Path("."), "movie")
    assert split_media_path("/movie") == (Path("/"), "movie")


def test_find_subtitle_files_matches_stem_and_extension(tmp_path: Path) -> None:
    _touch(
        tmp_path,
        "movie.mp4",
        "movie.srt",
        "movie.en.vtt",
        "movie.ASS",
        "movie.sub",
        "movie.txt",
        "movie.nfo",
        "movie2.srt",
        "other.srt",
    )
    (tmp_path / "movie.ssa").mkdir()

    found = find_subtitle_files(tmp_path / "movie.mp4")

    assert found == sorted(
        [
            tmp_path / "movie.srt",
            tmp_path / "movie.en.vtt",
            tmp_path / "movie.ASS",
            tmp_path / "movie.sub",
        ]
    )


def test_find_subtitle_files_accepts_backslash_paths(tmp_path: Path) -> None:
    _touch(tmp_path, "clip.srt")
    media_path = str(tmp_path / "clip.mp4").replace("/", "\\")

    assert find_subtitle_files(media_path) == [tmp_path / "clip.srt"]


def test_find_subtitle_files_respects_extension_filter(tmp_path: Path) -> None:
    _touch(tmp_path, "clip.srt", "clip.vtt")

    assert find_subtitle_files(tmp_path / "clip.mp4", extensions=(".VTT",)) == [
        tmp_path / "clip.vtt"
    ]


def test_find_subtitle_files_returns_empty_when_nothing_matches(tmp_path: Path) -> None:
    _touch(tmp_path, "clip.mp4", "notes.txt")

    assert find_subtitle_files(tmp_path / "clip.mp4") == []


def test_find_subtitle_files_raises_for_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(SubtitleDiscoveryError, match="Cannot list subtitle directory"):
        find_subtitle_files(tmp_path / "missing" / "clip.mp4")


def test_find_subtitle_files_skips_sibling_media_tracks(tmp_path: Path) -> None:
    _touch(
        tmp_path,
        "movie.mkv",
        "movie.part1.mkv",
        "movie.part1.srt",
        "movie.eng.srt",
        "movie.pt-BR.forced.srt",
        "movie.en.sdh.extra.srt",
    )

    assert find_subtitle_files(tmp_path / "movie.mkv") == sorted(
        [tmp_path / "movie.eng.srt", tmp_path / "movie.pt-BR.forced.srt"]
    )
    assert find_subtitle_files(tmp_path / "movie.part1.mkv") == [
        tmp_path / "movie.part1.srt"
    ]
