"""Tests for RangeRegistry claim/overlap bookkeeping."""

import itertools
import random

import pytest

from script_shots.models.shot import Shot, Span
from script_shots.services.errors import RangeOverlapError
from script_shots.services.range_registry import RangeRegistry


def _span(start, end):
    return Span(start=start, end=end)


def _shot(number, span=None, snippet=None):
    return Shot(
        id=f"shot-{number}",
        scene_id="scene-001",
        shot_number=number,
        title=f"Shot {number}",
        span=span,
        snippet=snippet,
    )


# ─── Overlap queries ────────────────────────────────────────────


def test_overlaps_is_half_open():
    reg = RangeRegistry()
    reg.claim(_span(5, 10), "hello", 1)
    assert reg.overlaps(_span(9, 12))
    assert reg.overlaps(_span(0, 6))
    assert reg.overlaps(_span(6, 8))
    assert reg.overlaps(_span(0, 20))
    # Touching boundaries do not intersect
    assert not reg.overlaps(_span(10, 15))
    assert not reg.overlaps(_span(0, 5))


def test_conflicts_returns_intersecting_ranges():
    reg = RangeRegistry()
    reg.claim(_span(0, 4), "aaaa", 1)
    reg.claim(_span(10, 14), "bbbb", 2)
    reg.claim(_span(20, 24), "cccc", 3)
    clashes = reg.conflicts(_span(3, 12))
    assert [r.shot_number for r in clashes] == [1, 2]


# ─── Claim / release ────────────────────────────────────────────


def test_claim_returns_claimed_range():
    reg = RangeRegistry()
    claimed = reg.claim(_span(3, 7), "John", 4)
    assert claimed.start == 3
    assert claimed.end == 7
    assert claimed.text == "John"
    assert claimed.shot_number == 4
    assert claimed.span == _span(3, 7)


def test_claim_overlapping_span_raises_and_leaves_registry_unchanged():
    reg = RangeRegistry()
    reg.claim(_span(0, 10), "x" * 10, 1)
    with pytest.raises(RangeOverlapError):
        reg.claim(_span(5, 15), "y" * 10, 2)
    assert [r.shot_number for r in reg.all_ranges()] == [1]


def test_claim_same_shot_number_twice_raises():
    reg = RangeRegistry()
    reg.claim(_span(0, 2), "ab", 1)
    with pytest.raises(RangeOverlapError):
        reg.claim(_span(5, 7), "cd", 1)


def test_all_ranges_sorted_by_start():
    reg = RangeRegistry()
    reg.claim(_span(20, 25), "c", 3)
    reg.claim(_span(0, 5), "a", 1)
    reg.claim(_span(10, 15), "b", 2)
    assert [r.start for r in reg.all_ranges()] == [0, 10, 20]


def test_release_frees_span():
    reg = RangeRegistry()
    reg.claim(_span(0, 5), "a", 1)
    released = reg.release(1)
    assert released is not None
    assert released.shot_number == 1
    assert len(reg) == 0
    assert not reg.overlaps(_span(0, 5))
    reg.claim(_span(2, 4), "b", 2)


def test_release_unknown_shot_is_noop():
    reg = RangeRegistry()
    reg.claim(_span(0, 5), "a", 1)
    assert reg.release(99) is None
    assert len(reg) == 1


def test_no_overlap_invariant_under_random_claims():
    rng = random.Random(1234)
    reg = RangeRegistry()
    number = 0
    for _ in range(300):
        start = rng.randrange(0, 200)
        span = _span(start, start + rng.randrange(1, 15))
        if reg.overlaps(span):
            continue
        number += 1
        reg.claim(span, "", number)
        if number % 7 == 0:
            reg.release(rng.randint(1, number))
        for a, b in itertools.combinations(reg.all_ranges(), 2):
            assert not a.span.intersects(b.span)


# ─── Rebuild from stored shots ──────────────────────────────────


def test_from_shots_skips_spanless_shots():
    shots = [
        _shot(1, _span(0, 4), "John"),
        _shot(2),
        _shot(3, _span(10, 14), "sits"),
    ]
    reg = RangeRegistry.from_shots(shots)
    assert [r.shot_number for r in reg.all_ranges()] == [1, 3]
    assert reg.get(1).text == "John"


def test_from_shots_drops_overlapping_legacy_span():
    shots = [
        _shot(2, _span(3, 9), "later"),
        _shot(1, _span(0, 5), "first"),
    ]
    reg = RangeRegistry.from_shots(shots)
    # Lower shot number keeps its claim
    assert [r.shot_number for r in reg.all_ranges()] == [1]
