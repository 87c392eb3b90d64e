from __future__ import annotations

from dataclasses import dataclass

LINE_SEPARATOR = "\n"


@dataclass(frozen=True)
class SubtitleCue:
    index: int
    start_time: float
    end_time: float
    text: str

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def lines(self) -> list[str]:
        return self.text.split(LINE_SEPARATOR)

    def contains(self, seconds: float) -> bool:
        """Start-inclusive, end-exclusive membership test."""
        return self.start_time <= seconds < self.end_time
