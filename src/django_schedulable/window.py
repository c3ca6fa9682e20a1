"""Validity window evaluation.

Pure functions over (instant, boundary kind, now). Nothing here touches the
database; models and querysets delegate to these so that single-record
predicates and bulk filters share one definition of each boundary.

Boundaries are inclusive of the exact instant: an instant equal to `now`
has arrived, so it is neither scheduled nor pending its end.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.db.models import TextChoices


class BoundaryKind(TextChoices):
    """Which side of the window a timestamp field closes."""

    START = "start", "Start"
    END = "end", "End"


@dataclass(frozen=True)
class TemporalFact:
    """
    Lifecycle facts for one boundary at one reference time.

    - scheduled: the instant lies strictly after now
    - active: the boundary lets the window be open at now
    - expired: an end boundary has passed
    """

    scheduled: bool
    active: bool
    expired: bool


def evaluate(instant: Optional[datetime], kind: BoundaryKind, now: datetime) -> TemporalFact:
    """
    Compute the facts for a single boundary.

    An absent start never opens the window; an absent end never closes it.

    Args:
        instant: The boundary value, or None when unset
        kind: BoundaryKind.START or BoundaryKind.END
        now: Reference time

    Returns:
        TemporalFact for this boundary
    """
    if instant is None:
        return TemporalFact(
            scheduled=False,
            active=kind == BoundaryKind.END,
            expired=False,
        )

    scheduled = instant > now
    if kind == BoundaryKind.START:
        return TemporalFact(scheduled=scheduled, active=not scheduled, expired=False)
    return TemporalFact(scheduled=scheduled, active=scheduled, expired=not scheduled)


def is_scheduled(instant: Optional[datetime], now: datetime) -> bool:
    """True if the instant is set and still in the future."""
    return evaluate(instant, BoundaryKind.START, now).scheduled


def is_active(start: Optional[datetime], end: Optional[datetime], now: datetime) -> bool:
    """True if start has arrived and end (when set) has not."""
    return (
        evaluate(start, BoundaryKind.START, now).active
        and evaluate(end, BoundaryKind.END, now).active
    )


def is_expired(end: Optional[datetime], now: datetime) -> bool:
    """True if end is set and has arrived."""
    return evaluate(end, BoundaryKind.END, now).expired
