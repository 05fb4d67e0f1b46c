"""Idle-time accumulator for one attendance session.

The whole heartbeat log is replayed on every call, oldest first:

* a gap longer than the threshold adds the part beyond the threshold;
* a suspicious (bot pattern) heartbeat adds its full gap, however short;
* the `active` flag plays no part, so an inactive heartbeat only counts beyond the threshold;
* the first heartbeat has nothing before it and adds nothing.
"""
from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import minutes_between
from ..core.constants import IDLE_THRESHOLD_MINUTES
from .model import ActivityLog


def idle_minutes(entries: Sequence[ActivityLog], *, threshold_minutes: float = IDLE_THRESHOLD_MINUTES) -> float:
    total = 0.0
    previous = None
    for entry in entries:
        if previous is not None:
            gap = max(minutes_between(previous.logged_at, entry.logged_at), 0.0)
            if entry.suspicious:
                total += gap
            elif gap > threshold_minutes:
                total += gap - threshold_minutes
        previous = entry
    return total


def idle_hours(entries: Sequence[ActivityLog], *, threshold_minutes: float = IDLE_THRESHOLD_MINUTES) -> float:
    return round(idle_minutes(entries, threshold_minutes=threshold_minutes) / 60, 2)
