from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass

from subcue.core.formats import SUBTITLE_EXTENSIONS
from subcue.core.timecode import DEFAULT_FRAME_RATE

DEFAULT_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "warning"
SUPPORTED_LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}


@dataclass(frozen=True)
class AppConfig:
    frame_rate: float
    encoding: str
    log_level: str
    subtitle_extensions: tuple[str, ...] = SUBTITLE_EXTENSIONS

    @property
    def logging_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


def normalize_frame_rate(value: float | str) -> float:
    try:
        frame_rate = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Frame rate must be a number, got '{value}'") from exc
    if not frame_rate > 0:
        raise ValueError(f"Frame rate must be > 0, got {value}")
    return frame_rate


def normalize_encoding(value: str) -> str:
    encoding = value.strip().lower()
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise ValueError(f"Unknown text encoding '{value}'") from exc
    return encoding


def normalize_log_level(value: str) -> str:
    level = value.strip().lower()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ValueError(
            f"Unsupported log level '{value}'. Allowed: {sorted(SUPPORTED_LOG_LEVELS)}"
        )
    return level


def resolve_frame_rate(custom: float | None = None) -> float:
    if custom is not None:
        return normalize_frame_rate(custom)
    env_value = os.getenv("SUBCUE_FRAME_RATE")
    if env_value:
        return normalize_frame_rate(env_value)
    return DEFAULT_FRAME_RATE


def build_app_config(
    *,
    frame_rate: float | None = None,
    encoding: str | None = None,
    log_level: str | None = None,
) -> AppConfig:
    return AppConfig(
        frame_rate=resolve_frame_rate(frame_rate),
        encoding=normalize_encoding(
            encoding or os.getenv("SUBCUE_ENCODING") or DEFAULT_ENCODING
        ),
        log_level=normalize_log_level(
            log_level or os.getenv("SUBCUE_LOG_LEVEL") or DEFAULT_LOG_LEVEL
        ),
    )
