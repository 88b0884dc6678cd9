"""Locate a selected fragment inside canonical script text.

Selections captured from a rendered script often differ from the stored text
only in whitespace (soft line wraps, collapsed blank lines, non-breaking
spaces). Lookup is therefore two-pass:

1. exact substring search of the trimmed fragment;
2. search in a whitespace-collapsed view of both strings, with the match
   translated back to offsets in the original script.

The first occurrence wins in both passes. Offsets are codepoint offsets.
"""

from __future__ import annotations

import re

from script_shots.models.shot import Span

_WHITESPACE_RUN = re.compile(r"\s+")


class LocateError(Exception):
    """Raised when a fragment cannot be resolved to a span."""


class EmptyFragmentError(LocateError):
    pass


class FragmentNotFoundError(LocateError):
    pass


def collapse_whitespace(text: str) -> str:
    """Collapse every maximal whitespace run into a single space."""
    return _WHITESPACE_RUN.sub(" ", text)


def _normalized_index_map(script: str) -> list[int]:
    """Map each position of ``collapse_whitespace(script)`` to its original offset.

    A whitespace run counts as one unit and maps to the offset where the run
    begins.
    """
    positions: list[int] = []
    cursor = 0
    for run in _WHITESPACE_RUN.finditer(script):
        positions.extend(range(cursor, run.start()))
        positions.append(run.start())
        cursor = run.end()
    positions.extend(range(cursor, len(script)))
    return positions


def _translate(index_map: list[int], norm_start: int, norm_length: int, script_len: int) -> Span:
    norm_end = norm_start + norm_length
    if norm_length <= 0 or norm_end > len(index_map):
        raise FragmentNotFoundError("Normalized match falls outside the script")
    start = index_map[norm_start]
    # The trimmed fragment never ends in whitespace, so its last normalized
    # character maps to exactly one original character.
    end = index_map[norm_end - 1] + 1
    if end > script_len:
        raise FragmentNotFoundError("Normalized match falls outside the script")
    return Span(start=start, end=end)


def locate(script: str, fragment: str) -> Span:
    """Return the span of the first occurrence of ``fragment`` in ``script``.

    Raises EmptyFragmentError for a blank fragment and FragmentNotFoundError
    when neither the exact nor the whitespace-tolerant pass finds it.
    """
    needle = fragment.strip()
    if not needle:
        raise EmptyFragmentError("Selected text is empty")

    pos = script.find(needle)
    if pos >= 0:
        return Span(start=pos, end=pos + len(needle))

    norm_script = collapse_whitespace(script)
    norm_needle = collapse_whitespace(needle)
    norm_pos = norm_script.find(norm_needle)
    if norm_pos < 0:
        raise FragmentNotFoundError(f"Selected text not found in script: {needle[:50]!r}")

    return _translate(_normalized_index_map(script), norm_pos, len(norm_needle), len(script))


def find_all(script: str, fragment: str) -> list[Span]:
    """Return every occurrence of ``fragment`` in ``script``, ordered by start.

    Exact and whitespace-tolerant occurrences are merged on their start
    offset; occurrences may overlap. Used to detect ambiguous selections.
    """
    needle = fragment.strip()
    if not needle:
        return []

    found: dict[int, Span] = {}
    pos = script.find(needle)
    while pos >= 0:
        found[pos] = Span(start=pos, end=pos + len(needle))
        pos = script.find(needle, pos + 1)

    norm_script = collapse_whitespace(script)
    norm_needle = collapse_whitespace(needle)
    index_map = _normalized_index_map(script)
    pos = norm_script.find(norm_needle)
    while pos >= 0:
        span = _translate(index_map, pos, len(norm_needle), len(script))
        found.setdefault(span.start, span)
        pos = norm_script.find(norm_needle, pos + 1)
    return [found[start] for start in sorted(found)]
