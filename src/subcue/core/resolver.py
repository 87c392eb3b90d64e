from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import accumulate

from subcue.schemas.subtitle import SubtitleCue


def resolve_active_cue(
    cues: Sequence[SubtitleCue], seconds: float
) -> SubtitleCue | None:
    """Linear scan: the first cue with start <= seconds < end, else None."""
    for cue in cues:
        if cue.contains(seconds):
            return cue
    return None


@dataclass(frozen=True)
class CueTimeline:
    """Binary-search lookup over cues sorted by start time.

    ``reach[i]`` is the latest end time among ``cues[:i + 1]``. It never
    decreases, so the first cue still running at ``t`` is found by bisecting
    it, and that cue is active when it has already started. On overlapping
    cues this picks the same cue as :func:`resolve_active_cue`.

    Hand-edited files can list cues out of order; those timelines fall back
    to the linear scan.
    """

    cues: tuple[SubtitleCue, ...]
    starts: tuple[float, ...]
    reach: tuple[float, ...]
    chronological: bool = True

    @classmethod
    def from_cues(cls, cues: Sequence[SubtitleCue]) -> CueTimeline:
        ordered = tuple(cues)
        return cls(
            cues=ordered,
            starts=tuple(cue.start_time for cue in ordered),
            reach=tuple(accumulate((cue.end_time for cue in ordered), max)),
            chronological=all(
                earlier.start_time <= later.start_time
                for earlier, later in zip(ordered, ordered[1:])
            ),
        )

    def __len__(self) -> int:
        return len(self.cues)

    def active_at(self, seconds: float) -> SubtitleCue | None:
        if not self.chronological:
            return resolve_active_cue(self.cues, seconds)
        started = bisect_right(self.starts, seconds)
        first_running = bisect_right(self.reach, seconds)
        if first_running < started:
            return self.cues[first_running]
        return None
