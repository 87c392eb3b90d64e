from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
import html
import logging
from pathlib import Path
import re

from subcue.core.timecode import (
    DEFAULT_FRAME_RATE,
    format_srt_timestamp,
    frames_to_seconds,
    parse_clock_timestamp,
)
from subcue.schemas.subtitle import LINE_SEPARATOR, SubtitleCue

logger = logging.getLogger(__name__)

_BLOCK_SEPARATOR = re.compile(r"\n\s*\n")
_TIMING_PATTERN = re.compile(r"^\s*(\S+)\s*-->\s*(\S+)(?:\s+.*)?$")
_MARKUP_TAG = re.compile(r"</?[A-Za-z][^<>]*>|<\d{1,2}:[\d:.]+>")
_ASS_OVERRIDE_TAG = re.compile(r"\{[^{}]*\}")
_SRT_OVERRIDE_TAG = re.compile(r"\{\\[^{}]*\}")
_MICRODVD_LINE = re.compile(r"^\{(\d+)\}\{(\d+)\}(.*)$")
_MICRODVD_CONTROL_CODE = re.compile(r"\{[A-Za-z]:[^{}]*\}")

_VTT_NON_CUE_BLOCKS = frozenset({"NOTE", "STYLE", "REGION"})
_ASS_DEFAULT_COLUMNS: tuple[str, ...] = (
    "layer",
    "start",
    "end",
    "style",
    "name",
    "marginl",
    "marginr",
    "marginv",
    "effect",
    "text",
)


@dataclass(frozen=True)
class _CueDraft:
    start: float | None
    end: float | None
    text: str

    @property
    def valid(self) -> bool:
        if self.start is None or self.end is None:
            return False
        return self.start < self.end and bool(self.text)


def _collect(drafts: Iterable[_CueDraft | None], fmt: str) -> list[SubtitleCue]:
    """Keep valid drafts and number them 1..N in emission order."""
    cues: list[SubtitleCue] = []
    skipped = 0
    for draft in drafts:
        if draft is None or not draft.valid:
            skipped += 1
            continue
        cues.append(
            SubtitleCue(
                index=len(cues) + 1,
                start_time=draft.start,
                end_time=draft.end,
                text=draft.text,
            )
        )
    if skipped:
        logger.debug("%s: kept %d cues, skipped %d malformed units", fmt, len(cues), skipped)
    return cues


def _normalize_newlines(content: str) -> str:
    return content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")


def _split_blocks(content: str) -> list[str]:
    normalized = _normalize_newlines(content).strip()
    if not normalized:
        return []
    return [block for block in _BLOCK_SEPARATOR.split(normalized) if block.strip()]


def _join_lines(lines: Iterable[str]) -> str:
    stripped = (line.strip() for line in lines)
    return LINE_SEPARATOR.join(line for line in stripped if line)


def _timed_draft(
    lines: list[str], position: int, separators: str, clean: Callable[[str], str]
) -> _CueDraft | None:
    match = _TIMING_PATTERN.match(lines[position])
    if not match:
        return None
    return _CueDraft(
        start=parse_clock_timestamp(match.group(1), separators),
        end=parse_clock_timestamp(match.group(2), separators),
        text=_join_lines(clean(line) for line in lines[position + 1 :]),
    )


def _clean_srt_line(line: str) -> str:
    return _SRT_OVERRIDE_TAG.sub("", _MARKUP_TAG.sub("", line))


def _srt_draft(block: str) -> _CueDraft | None:
    lines = [line for line in block.split("\n") if line.strip()]
    # The timing line is first when the index line is missing, second otherwise.
    for position, line in enumerate(lines[:2]):
        if "-->" in line:
            return _timed_draft(lines, position, ",.", _clean_srt_line)
    return None


def parse_srt(content: str) -> list[SubtitleCue]:
    """Parse SubRip text.

    Source sequence numbers are ignored; cues are renumbered from 1.
    """
    return _collect((_srt_draft(block) for block in _split_blocks(content)), "srt")


def _clean_vtt_line(line: str) -> str:
    return html.unescape(_MARKUP_TAG.sub("", line))


def _vtt_draft(block: str) -> _CueDraft | None:
    lines = [line for line in block.split("\n") if line.strip()]
    for position, line in enumerate(lines):
        if "-->" in line:
            return _timed_draft(lines, position, ".", _clean_vtt_line)
    return None


def _iter_vtt_blocks(content: str) -> Iterator[str]:
    blocks = _split_blocks(content)
    if blocks and blocks[0].startswith("WEBVTT"):
        _, _, rest = blocks[0].partition("\n")
        # Header glued to the first cue without a blank line.
        if "-->" in rest:
            yield rest
        blocks = blocks[1:]
    for block in blocks:
        keyword = block.split(None, 1)[0]
        if keyword in _VTT_NON_CUE_BLOCKS:
            continue
        yield block


def parse_vtt(content: str) -> list[SubtitleCue]:
    """Parse WebVTT text. Cue identifiers and cue settings are ignored."""
    return _collect((_vtt_draft(block) for block in _iter_vtt_blocks(content)), "vtt")


def _ass_draft(value: str, columns: tuple[str, ...]) -> _CueDraft | None:
    fields = value.strip().split(",", len(columns) - 1)
    if len(fields) < len(columns):
        return None
    record = dict(zip(columns, fields))
    text = _ASS_OVERRIDE_TAG.sub("", record["text"])
    text = text.replace("\\N", "\n").replace("\\n", "\n").replace("\\h", " ")
    return _CueDraft(
        start=parse_clock_timestamp(record["start"], "."),
        end=parse_clock_timestamp(record["end"], "."),
        text=_join_lines(text.split("\n")),
    )


def _parse_ass_columns(value: str) -> tuple[str, ...] | None:
    columns = tuple(column.strip().lower() for column in value.split(","))
    if "start" not in columns or "end" not in columns or columns[-1] != "text":
        return None
    return columns


def _iter_ass_drafts(content: str) -> Iterator[_CueDraft | None]:
    columns = _ASS_DEFAULT_COLUMNS
    section = ""
    for raw_line in _normalize_newlines(content).split("\n"):
        line = raw_line.strip()
        if line.startswith("[") and line.endswith("]"):
            section = line.lower()
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        if key == "Format" and section == "[events]":
            columns = _parse_ass_columns(value) or _ASS_DEFAULT_COLUMNS
        elif key == "Dialogue":
            yield _ass_draft(value, columns)


def parse_ass(content: str) -> list[SubtitleCue]:
    """Parse ``Dialogue:`` events from ASS/SSA scripts.

    Only Start, End and Text are read. Override tags such as ``{\\i1}`` are
    removed and ``\\N``/``\\n`` become line breaks.
    """
    return _collect(_iter_ass_drafts(content), "ass")


def _microdvd_draft(line: str, frame_rate: float) -> _CueDraft | None:
    match = _MICRODVD_LINE.match(line.strip())
    if not match:
        return None
    text = _MICRODVD_CONTROL_CODE.sub("", match.group(3))
    return _CueDraft(
        start=frames_to_seconds(int(match.group(1)), frame_rate),
        end=frames_to_seconds(int(match.group(2)), frame_rate),
        text=_join_lines(text.split("|")),
    )


def parse_microdvd(
    content: str, frame_rate: float = DEFAULT_FRAME_RATE
) -> list[SubtitleCue]:
    """Parse MicroDVD ``{start}{end}text`` lines at a fixed frame rate."""
    lines = (line for line in _normalize_newlines(content).split("\n") if line.strip())
    return _collect((_microdvd_draft(line, frame_rate) for line in lines), "microdvd")


def format_srt(cues: Iterable[SubtitleCue]) -> str:
    lines: list[str] = []
    for index, cue in enumerate(cues, start=1):
        lines.append(str(index))
        lines.append(
            f"{format_srt_timestamp(cue.start_time)} --> {format_srt_timestamp(cue.end_time)}"
        )
        lines.append(cue.text.strip())
        lines.append("")
    return "\n".join(lines)


def write_srt(cues: Iterable[SubtitleCue], output_path: Path) -> None:
    """Write subtitle cues to an SRT file."""
    output_path.write_text(format_srt(cues), encoding="utf-8")
