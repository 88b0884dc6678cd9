"""In-memory registry of claimed script spans for one scene."""

from __future__ import annotations

import bisect
import logging
from collections.abc import Iterable

from script_shots.models.shot import ClaimedRange, Shot, Span
from script_shots.services.errors import RangeOverlapError

logger = logging.getLogger(__name__)


class RangeRegistry:
    """Pairwise non-overlapping set of ClaimedRange, kept sorted by start."""

    def __init__(self) -> None:
        self._ranges: list[ClaimedRange] = []

    @classmethod
    def from_shots(cls, shots: Iterable[Shot]) -> RangeRegistry:
        """Rebuild the registry from stored shots.

        Shots are claimed in shot-number order. A stored span that intersects
        an earlier claim is left out of the registry (the shot itself is
        untouched); claimed spans stay pairwise disjoint.
        """
        registry = cls()
        for shot in sorted(shots, key=lambda s: s.shot_number):
            if shot.span is None:
                continue
            clashes = registry.conflicts(shot.span)
            if clashes:
                logger.warning(
                    "Skipping span [%d, %d) of shot %d in scene %s: overlaps shot(s) %s",
                    shot.span.start, shot.span.end, shot.shot_number, shot.scene_id,
                    [r.shot_number for r in clashes],
                )
                continue
            registry.claim(shot.span, shot.snippet or "", shot.shot_number)
        return registry

    def __len__(self) -> int:
        return len(self._ranges)

    def overlaps(self, span: Span) -> bool:
        return bool(self.conflicts(span))

    def conflicts(self, span: Span) -> list[ClaimedRange]:
        """Return the claimed ranges that intersect ``span``."""
        return [r for r in self._ranges if r.span.intersects(span)]

    def claim(self, span: Span, text: str, shot_number: int) -> ClaimedRange:
        if self.overlaps(span):
            raise RangeOverlapError(
                f"Span [{span.start}, {span.end}) overlaps an existing claim"
            )
        if self.get(shot_number) is not None:
            raise RangeOverlapError(f"Shot {shot_number} already owns a range")

        claimed = ClaimedRange(
            start=span.start, end=span.end, text=text, shot_number=shot_number,
        )
        starts = [r.start for r in self._ranges]
        self._ranges.insert(bisect.bisect_right(starts, claimed.start), claimed)
        return claimed

    def release(self, shot_number: int) -> ClaimedRange | None:
        """Remove the range owned by ``shot_number``; returns it, or None."""
        for i, r in enumerate(self._ranges):
            if r.shot_number == shot_number:
                return self._ranges.pop(i)
        return None

    def get(self, shot_number: int) -> ClaimedRange | None:
        for r in self._ranges:
            if r.shot_number == shot_number:
                return r
        return None

    def all_ranges(self) -> list[ClaimedRange]:
        return list(self._ranges)
