"""
Schedule parsing (raw encoding -> ScheduleSlot tuples).

A raw schedule string looks like:

    월01-02(공학관 301)<p>수3,4(공학관 301)

- segments are separated by the <p> token (any case)
- each segment is a weekday label, a slot spec and optional room text;
  one pair of parentheses wrapping the whole room is removed
- a slot spec is a comma separated list of slot ids or ranges ("1-3", "1~3")

Important rules:
- parsing is pure and cached, so calling it twice gives identical results
- a malformed segment yields zero slots, it never raises
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Optional

from coursefinder.config import DAY_LABELS, SEPARATOR, TIME_SLOTS
from coursefinder.model import ScheduleSlot

log = logging.getLogger(__name__)


_SEPARATOR_RE = re.compile(re.escape(SEPARATOR), re.IGNORECASE)

_SEGMENT_RE = re.compile(
    r"^\s*(?P<day>[" + "".join(DAY_LABELS) + r"])\s*"
    r"(?P<slots>\d+(?:\s*[,~\-]\s*\d+)*)"
    r"(?P<rest>.*)$",
    re.DOTALL,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_slot_spec(spec: str) -> Optional[tuple[int, ...]]:
    """
    Expand "1,3-5" into (1, 3, 4, 5). Returns None for unknown slot ids
    or reversed ranges.
    """
    slots: list[int] = []
    for item in spec.split(","):
        bounds = [int(b) for b in re.split(r"[~\-]", item.strip())]
        if len(bounds) == 1:
            slots.append(bounds[0])
        elif len(bounds) == 2 and bounds[0] <= bounds[1]:
            slots.extend(range(bounds[0], bounds[1] + 1))
        else:
            return None

    if any(s not in TIME_SLOTS for s in slots):
        return None

    # Keep encoding order, drop repeats
    return tuple(dict.fromkeys(slots))


def _strip_outer_parens(text: str) -> str:
    """
    "(다산관(신관) 101)" -> "다산관(신관) 101". Text that is not wrapped
    by one balanced pair, such as "(팔101) 격주", is returned unchanged.
    """
    if not (text.startswith("(") and text.endswith(")")):
        return text

    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0 and i < len(text) - 1:
                return text
    return text[1:-1].strip() if depth == 0 else text


def parse_segment(segment: str) -> Optional[ScheduleSlot]:
    """
    Parses exactly one segment into one slot, or None if it is malformed.
    """
    m = _SEGMENT_RE.match(segment)
    if not m:
        return None

    slot_range = _parse_slot_spec(m.group("slots"))
    if not slot_range:
        return None

    room = _strip_outer_parens(m.group("rest").strip()) or None
    return ScheduleSlot(day=m.group("day"), range=slot_range, room=room)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@lru_cache(maxsize=8192)
def parse_schedule(encoding: str) -> tuple[ScheduleSlot, ...]:
    """
    Converts a raw schedule encoding into a tuple of slots.

    An empty encoding has zero slots. Malformed segments are dropped.
    """
    if not encoding or not encoding.strip():
        return ()

    slots: list[ScheduleSlot] = []
    for segment in _SEPARATOR_RE.split(encoding):
        if not segment.strip():
            continue
        slot = parse_segment(segment)
        if slot is None:
            log.debug("Ignoring malformed schedule segment %r", segment)
            continue
        slots.append(slot)

    return tuple(slots)
