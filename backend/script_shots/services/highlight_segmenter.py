"""Split a scene script into claimed/unclaimed segments for highlighting."""

import logging

from script_shots.models.shot import ClaimedRange, Segment

logger = logging.getLogger(__name__)


def segments(script: str, ranges: list[ClaimedRange]) -> list[Segment]:
    """Return segments whose texts, concatenated in order, equal ``script``.

    Each claimed range becomes one claimed segment; the gaps between ranges
    become unclaimed segments. Zero-length segments are omitted. Ranges that
    run past the end of the script (stale after an edit) are clamped to it,
    and a range starting inside an earlier one is clamped to where the
    earlier one ends, so the result is always an exact cover.
    """
    result: list[Segment] = []
    cursor = 0
    length = len(script)

    for r in sorted(ranges, key=lambda r: (r.start, r.end)):
        start = max(r.start, cursor)
        end = min(r.end, length)
        if start >= end:
            logger.debug(
                "Range of shot %d [%d, %d) has no visible text", r.shot_number, r.start, r.end,
            )
            continue
        if start > cursor:
            result.append(Segment(text=script[cursor:start]))
        result.append(Segment(text=script[start:end], claimed=True, shot_number=r.shot_number))
        cursor = end

    if cursor < length:
        result.append(Segment(text=script[cursor:]))
    return result
