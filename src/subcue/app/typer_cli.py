from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from subcue.core.discovery import SubtitleDiscoveryError, find_subtitle_files
from subcue.core.formats import detect_format
from subcue.core.loader import SubtitleLoadError, SubtitleTrack, load_subtitle_track
from subcue.core.playback import active_cue, open_media_subtitles, select_track
from subcue.core.subtitle import write_srt
from subcue.core.timecode import format_srt_timestamp
from subcue.infra.config import AppConfig, build_app_config
from subcue.infra.logging_setup import configure_logging
from subcue.infra.storage import cues_to_payload, ensure_directory, write_json

app = typer.Typer(
    name="subcue",
    add_completion=False,
    help="Subtitle discovery, parsing and playback cue lookup.",
)


def _build_config(
    *,
    frame_rate: float | None = None,
    encoding: str | None = None,
    log_level: str | None = None,
) -> AppConfig:
    try:
        return build_app_config(
            frame_rate=frame_rate, encoding=encoding, log_level=log_level
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load_track(input_path: Path, config: AppConfig) -> SubtitleTrack:
    if not input_path.exists() or not input_path.is_file():
        raise typer.BadParameter(f"Subtitle file not found: {input_path}")
    try:
        return load_subtitle_track(
            input_path, frame_rate=config.frame_rate, encoding=config.encoding
        )
    except SubtitleLoadError as exc:
        typer.echo(f"[failed] {exc}")
        raise typer.Exit(code=2) from exc


def _one_line(text: str) -> str:
    return text.replace("\n", " / ")


@app.callback()
def main_callback(
    log_level: str | None = typer.Option(
        None, "--log-level", help="debug|info|warning|error (default: SUBCUE_LOG_LEVEL or warning)"
    ),
) -> None:
    config = _build_config(log_level=log_level)
    configure_logging(config.logging_level)


@app.command("find")
def find_command(
    media_path: Path = typer.Argument(..., help="Media file whose subtitles to look for."),
) -> None:
    """List subtitle files next to a media file."""
    try:
        candidates = find_subtitle_files(media_path)
    except SubtitleDiscoveryError as exc:
        typer.echo(f"[failed] {exc}")
        raise typer.Exit(code=2) from exc
    if not candidates:
        typer.echo(f"[done] No subtitle files found for {media_path}")
        return
    lines = [f"[done] {len(candidates)} subtitle file(s) for {media_path}"]
    for index, candidate in enumerate(candidates):
        lines.append(f"- [{index}] {candidate} ({detect_format(candidate)})")
    typer.echo("\n".join(lines))


@app.command("parse")
def parse_command(
    input_path: Path = typer.Argument(..., help="Subtitle file (.srt/.vtt/.ass/.ssa/.sub)."),
    frame_rate: float | None = typer.Option(
        None, "--frame-rate", help="MicroDVD frame rate (default: 25)."
    ),
    encoding: str | None = typer.Option(
        None, "--encoding", help="Text encoding of the subtitle file (default: utf-8)."
    ),
    json_out: Path | None = typer.Option(
        None, "--json-out", help="Write parsed cues as JSON to this path."
    ),
) -> None:
    """Parse a subtitle file and print its cues."""
    config = _build_config(frame_rate=frame_rate, encoding=encoding)
    track = _load_track(input_path, config)

    table = Table(title=escape(f"{track.path.name} ({track.format})"))
    table.add_column("#", justify="right")
    table.add_column("start")
    table.add_column("end")
    table.add_column("text")
    for cue in track.cues:
        table.add_row(
            str(cue.index),
            format_srt_timestamp(cue.start_time),
            format_srt_timestamp(cue.end_time),
            escape(cue.text),
        )
    Console().print(table)

    if json_out is not None:
        ensure_directory(json_out.parent)
        write_json(
            json_out,
            {
                "path": str(track.path),
                "format": track.format,
                "cues": cues_to_payload(track.cues),
            },
        )
        typer.echo(f"- json: {json_out}")


@app.command("at")
def at_command(
    media_path: Path = typer.Argument(..., help="Media file being played."),
    seconds: list[float] = typer.Argument(..., help="Playback positions in seconds."),
    track: int = typer.Option(0, "--track", "-t", help="Index of the subtitle track to use."),
    frame_rate: float | None = typer.Option(
        None, "--frame-rate", help="MicroDVD frame rate (default: 25)."
    ),
    encoding: str | None = typer.Option(
        None, "--encoding", help="Text encoding of the subtitle files (default: utf-8)."
    ),
) -> None:
    """Show the active cue at each playback position."""
    config = _build_config(frame_rate=frame_rate, encoding=encoding)
    try:
        state = open_media_subtitles(media_path, config)
    except SubtitleDiscoveryError as exc:
        typer.echo(f"[failed] {exc}")
        raise typer.Exit(code=2) from exc
    if not state.candidates:
        typer.echo(f"[done] No subtitles for {media_path}")
        return
    if track != state.selected:
        try:
            state = select_track(state, track, config)
        except IndexError as exc:
            raise typer.BadParameter(str(exc), param_hint="--track") from exc
    if state.track is None:
        typer.echo(f"[failed] {state.error}")
        raise typer.Exit(code=2)

    lines = [f"[done] track {state.selected}: {state.track.path}"]
    for position in seconds:
        cue = active_cue(state, position)
        if cue is None:
            lines.append(f"- {position:.3f}s: (no active cue)")
        else:
            lines.append(f"- {position:.3f}s: #{cue.index} {_one_line(cue.text)}")
    typer.echo("\n".join(lines))


@app.command("convert")
def convert_command(
    input_path: Path = typer.Argument(..., help="Subtitle file to convert."),
    output_path: Path | None = typer.Option(
        None, "--output-path", "-o", help="SRT output path (default: <input>.srt)."
    ),
    frame_rate: float | None = typer.Option(
        None, "--frame-rate", help="MicroDVD frame rate (default: 25)."
    ),
    encoding: str | None = typer.Option(
        None, "--encoding", help="Text encoding of the subtitle file (default: utf-8)."
    ),
) -> None:
    """Re-emit any supported subtitle file as SRT."""
    config = _build_config(frame_rate=frame_rate, encoding=encoding)
    track = _load_track(input_path, config)
    resolved_output_path = output_path or input_path.with_suffix(".srt")
    if resolved_output_path.resolve() == input_path.resolve():
        raise typer.BadParameter(
            f"Output would overwrite the input: {input_path}", param_hint="--output-path"
        )
    ensure_directory(resolved_output_path.parent)
    write_srt(track.cues, resolved_output_path)
    typer.echo(
        "[done] Subtitle conversion complete.\n"
        f"- input: {input_path} ({track.format})\n"
        f"- output: {resolved_output_path}\n"
        f"- cues: {len(track.cues)}"
    )


def run() -> None:
    """Console-script entrypoint."""
    app()
