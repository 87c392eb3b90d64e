from __future__ import annotations

from pathlib import Path

import pytest

from subcue.core.loader import SubtitleLoadError, load_subtitle_track, read_subtitle_text
from subcue.core.playback import (
    PlaybackSubtitles,
    active_cue,
    open_media_subtitles,
    select_track,
)
from subcue.infra.config import build_app_config

SRT_TEXT = "1\n00:00:01,000 --> 00:00:05,000\nenglish\n"
VTT_TEXT = "WEBVTT\n\n00:00:01.000 --> 00:00:05.000\nfrançais\n"


def test_read_subtitle_text_strips_bom_and_replaces_bad_bytes(tmp_path: Path) -> None:
    path = tmp_path / "a.srt"
    path.write_bytes(b"\xef\xbb\xbfhello \xff")

    assert read_subtitle_text(path) == "hello \ufffd"


def test_load_subtitle_track_with_legacy_encoding(tmp_path: Path) -> None:
    path = tmp_path / "legacy.srt"
    path.write_bytes("1\n00:00:01,000 --> 00:00:02,000\ncafé\n".encode("cp1252"))

    track = load_subtitle_track(path, encoding="cp1252")

    assert track.format == "srt"
    assert [cue.text for cue in track.cues] == ["café"]
    assert track.active_at(1.5) == track.cues[0]


def test_load_subtitle_track_rejects_unknown_extension(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text(SRT_TEXT, encoding="utf-8")

    with pytest.raises(SubtitleLoadError, match="Unsupported subtitle file extension"):
        load_subtitle_track(path)


def test_load_subtitle_track_wraps_read_errors(tmp_path: Path) -> None:
    with pytest.raises(SubtitleLoadError, match="Cannot read subtitle file") as exc_info:
        load_subtitle_track(tmp_path / "missing.srt")
    assert isinstance(exc_info.value.__cause__, OSError)


def test_open_media_subtitles_loads_first_track(tmp_path: Path) -> None:
    (tmp_path / "film.en.srt").write_text(SRT_TEXT, encoding="utf-8")
    (tmp_path / "film.fr.vtt").write_text(VTT_TEXT, encoding="utf-8")

    state = open_media_subtitles(tmp_path / "film.mkv", build_app_config())

    assert state.candidates == (tmp_path / "film.en.srt", tmp_path / "film.fr.vtt")
    assert state.selected == 0
    assert state.error is None
    assert active_cue(state, 2.0).text == "english"


def test_select_track_returns_new_state(tmp_path: Path) -> None:
    (tmp_path / "film.en.srt").write_text(SRT_TEXT, encoding="utf-8")
    (tmp_path / "film.fr.vtt").write_text(VTT_TEXT, encoding="utf-8")
    config = build_app_config()
    first = open_media_subtitles(tmp_path / "film.mkv", config)

    second = select_track(first, 1, config)

    assert second is not first
    assert first.selected == 0
    assert active_cue(first, 2.0).text == "english"
    assert second.selected == 1
    assert active_cue(second, 2.0).text == "français"
    with pytest.raises(IndexError):
        select_track(first, 2, config)


def test_select_track_reports_unreadable_file(tmp_path: Path) -> None:
    subtitle = tmp_path / "film.srt"
    subtitle.write_text(SRT_TEXT, encoding="utf-8")
    config = build_app_config()
    state = open_media_subtitles(tmp_path / "film.mkv", config)
    subtitle.unlink()

    reloaded = select_track(state, 0, config)

    assert reloaded.track is None
    assert "Cannot read subtitle file" in (reloaded.error or "")
    assert active_cue(reloaded, 2.0) is None


def test_open_media_subtitles_without_candidates(tmp_path: Path) -> None:
    state = open_media_subtitles(tmp_path / "film.mkv", build_app_config())

    assert state == PlaybackSubtitles(media_path=tmp_path / "film.mkv", candidates=())
    assert active_cue(state, 1.0) is None


def test_active_cue_on_out_of_order_track(tmp_path: Path) -> None:
    (tmp_path / "film.srt").write_text(
        "1\n00:00:05,000 --> 00:00:06,000\nlate\n\n"
        "2\n00:00:01,000 --> 00:00:03,000\nearly\n",
        encoding="utf-8",
    )

    state = open_media_subtitles(tmp_path / "film.mkv", build_app_config())

    assert active_cue(state, 2.0).text == "early"
    assert active_cue(state, 4.0) is None
