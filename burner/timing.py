"""
Segment Timing Correction

Bridges short pauses between adjacent segments so a highlighted word does
not vanish before the next one appears, then removes any remaining overlap
by opening a small symmetric gap around the overlap midpoint.

Both passes mutate the segments in place and are idempotent.
"""

import logging
from typing import List

from burner.transcript import Segment

logger = logging.getLogger(__name__)

MIN_BRIDGE_GAP = 0.2  # gaps at or below this are left alone
DEFAULT_MAX_GAP = 1.5  # gaps above this are treated as scene breaks
BRIDGE_LEAD = 0.1  # bridged segment ends this long before the next starts
OVERLAP_GAP = 0.2  # gap opened around an overlap midpoint

# Float tolerance for boundary comparisons
TOLERANCE = 1e-6


def _ms(value: float) -> float:
    return round(value, 3)


def fill_gaps(segments: List[Segment], max_gap: float = DEFAULT_MAX_GAP) -> List[Segment]:
    """
    Extend segments across short pauses.

    For every adjacent pair with MIN_BRIDGE_GAP < gap <= max_gap the current
    segment's trailing word is extended to end BRIDGE_LEAD before the next
    segment starts.

    Args:
        segments: Ordered segments (mutated in place)
        max_gap: Largest gap in seconds that is still bridged

    Returns:
        The same list, for chaining
    """
    bridged = 0
    for current, nxt in zip(segments, segments[1:]):
        gap = nxt.start - current.end
        if MIN_BRIDGE_GAP + TOLERANCE < gap <= max_gap + TOLERANCE:
            current.set_end(_ms(nxt.start - BRIDGE_LEAD))
            bridged += 1

    if bridged:
        logger.debug(f"Bridged {bridged} short gaps")
    return segments


def resolve_overlaps(segments: List[Segment]) -> List[Segment]:
    """
    Remove overlaps between adjacent segments.

    The overlap is replaced by an OVERLAP_GAP wide gap centred on the
    midpoint of the overlapping interval. Neither segment is allowed to
    invert; a segment too short to give up the time is collapsed to its
    start (or end) instead.

    Args:
        segments: Ordered segments (mutated in place)

    Returns:
        The same list, for chaining
    """
    fixed = 0
    for current, nxt in zip(segments, segments[1:]):
        if current.end <= nxt.start + TOLERANCE:
            continue

        midpoint = (current.end + nxt.start) / 2
        current.set_end(max(current.start, _ms(midpoint - OVERLAP_GAP / 2)))

        # Derived from the rounded end so the opened gap is exactly OVERLAP_GAP
        new_start = min(nxt.end, _ms(current.end + OVERLAP_GAP))
        nxt.set_start(max(new_start, current.end))
        fixed += 1

    if fixed:
        logger.debug(f"Resolved {fixed} overlapping segment pairs")
    return segments


def smooth_timing(segments: List[Segment], max_gap: float = DEFAULT_MAX_GAP) -> List[Segment]:
    """
    Run gap filling followed by overlap resolution.

    Overlap resolution must see the already-extended boundaries, so the
    order is fixed.
    """
    fill_gaps(segments, max_gap=max_gap)
    resolve_overlaps(segments)
    return segments
