"""
Shaping schedule generator: distribute increases/decreases across rows.

Given the total stitch change needed and the number of rows available,
produces an ordered list of shaping events whose deltas sum exactly to the
requested change. Every component calculator delegates here, one call per
shaping phase; multi-phase curves (bind-off, rapid, gradual) are joined with
concatenate().

Two tie-break policies decide where uneven remainders land:

- EVEN_SPREAD uses Bresenham error accumulation: row i receives
  floor(i*u/n) - floor((i-1)*u/n) units, so 10 units over 4 rows
  gives [2, 3, 2, 3] and the last event always falls on the last row.
- FRONT_LOADED works the denser part first, matching the convention
  "decrease every 4th row 7 times, then every 5th row 3 times".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from knitcalc.errors import ShapingError


class ShapingAction(str, Enum):
    """Direction of a shaping operation."""

    INCREASE = "increase"
    DECREASE = "decrease"


class TieBreak(str, Enum):
    """Where the remainder of an uneven distribution is placed."""

    FRONT_LOADED = "frontLoaded"
    EVEN_SPREAD = "evenSpread"


@dataclass(frozen=True)
class ShapingEvent:
    """A stitch change worked on a single row (1-indexed within the schedule)."""

    at_row: int
    stitch_delta: int

    def __post_init__(self) -> None:
        if self.at_row < 1:
            raise ValueError(f"at_row must be >= 1, got {self.at_row}")
        if self.stitch_delta == 0:
            raise ValueError("stitch_delta must be non-zero")


@dataclass(frozen=True)
class ShapingSchedule:
    """
    Ordered shaping events over a block of rows.

    Invariants enforced at construction: rows strictly increase and lie in
    [1, available_rows]; the deltas sum exactly to total_delta. ``dense`` is
    set when more stitch units were requested than rows were available, so
    some rows carry multi-stitch events.
    """

    events: tuple[ShapingEvent, ...]
    total_delta: int
    available_rows: int
    dense: bool = False

    def __post_init__(self) -> None:
        if self.available_rows < 0:
            raise ValueError(f"available_rows must be >= 0, got {self.available_rows}")
        previous = 0
        for event in self.events:
            if event.at_row <= previous:
                raise ValueError(
                    f"shaping rows must strictly increase, got row {event.at_row} after {previous}"
                )
            previous = event.at_row
        if previous > self.available_rows:
            raise ValueError(
                f"shaping event at row {previous} exceeds available_rows {self.available_rows}"
            )
        actual = sum(e.stitch_delta for e in self.events)
        if actual != self.total_delta:
            raise ValueError(f"events sum to {actual}, expected total_delta {self.total_delta}")

    @property
    def is_empty(self) -> bool:
        return not self.events

    def final_count(self, start_count: int) -> int:
        """Stitch count after every event has been worked."""
        return start_count + self.total_delta

    def counts_at_rows(self, start_count: int) -> list[tuple[int, int]]:
        """(row, stitch count after that row) for each shaping row."""
        counts: list[tuple[int, int]] = []
        current = start_count
        for event in self.events:
            current += event.stitch_delta
            counts.append((event.at_row, current))
        return counts


@dataclass(frozen=True)
class ShapingInterval:
    """A single shaping instruction: perform action every N rows, repeated M times."""

    action: ShapingAction
    every_n_rows: int
    times: int
    stitches_per_action: int


def distribute(
    total_delta: int,
    available_rows: int,
    tie_break: TieBreak = TieBreak.EVEN_SPREAD,
    stitches_per_event: int = 1,
) -> ShapingSchedule:
    """
    Distribute a stitch change across a block of rows.

    Args:
        total_delta: Total stitch change. Positive = increases, negative = decreases.
        available_rows: Rows over which the change must be completed.
        tie_break: Placement policy for uneven remainders.
        stitches_per_event: Granularity of one shaping action (2 for a
            symmetric pair of edges, 8 for four raglan lines, ...).

    Returns:
        ShapingSchedule whose deltas sum to total_delta. Empty if total_delta is 0.

    Raises:
        ShapingError: If available_rows <= 0 with a non-zero delta, if
            stitches_per_event < 1, or if total_delta is not a multiple of
            stitches_per_event.
    """
    if stitches_per_event < 1:
        raise ShapingError(f"stitches_per_event must be >= 1, got {stitches_per_event}")
    if total_delta == 0:
        return ShapingSchedule(events=(), total_delta=0, available_rows=max(available_rows, 0))
    if available_rows <= 0:
        raise ShapingError(
            f"Cannot distribute {total_delta} stitches over {available_rows} rows"
        )
    if abs(total_delta) % stitches_per_event != 0:
        raise ShapingError(
            f"total_delta ({total_delta}) must be divisible by "
            f"stitches_per_event ({stitches_per_event})"
        )

    sign = 1 if total_delta > 0 else -1
    units = abs(total_delta) // stitches_per_event

    match tie_break:
        case TieBreak.EVEN_SPREAD:
            per_row = _even_spread(units, available_rows)
        case TieBreak.FRONT_LOADED:
            per_row = _front_loaded(units, available_rows)

    events = tuple(
        ShapingEvent(at_row=row, stitch_delta=sign * count * stitches_per_event)
        for row, count in enumerate(per_row, start=1)
        if count
    )
    return ShapingSchedule(
        events=events,
        total_delta=total_delta,
        available_rows=available_rows,
        dense=units > available_rows,
    )


def concatenate(*phases: ShapingSchedule) -> ShapingSchedule:
    """Join phases end to end, offsetting each by the rows of the phases before it."""
    events: list[ShapingEvent] = []
    offset = 0
    for phase in phases:
        events.extend(
            ShapingEvent(at_row=e.at_row + offset, stitch_delta=e.stitch_delta)
            for e in phase.events
        )
        offset += phase.available_rows
    return ShapingSchedule(
        events=tuple(events),
        total_delta=sum(p.total_delta for p in phases),
        available_rows=offset,
        dense=any(p.dense for p in phases),
    )


def work_even(rows: int) -> ShapingSchedule:
    """A phase of *rows* rows with no shaping."""
    return ShapingSchedule(events=(), total_delta=0, available_rows=max(rows, 0))


def summarize(schedule: ShapingSchedule) -> list[ShapingInterval]:
    """
    Group a schedule's events into "every N rows, M times" intervals.

    The row gap of the first event is counted from the start of the
    schedule, so leading plain rows show up in the first interval.
    """
    intervals: list[ShapingInterval] = []
    previous_row = 0
    for event in schedule.events:
        gap = event.at_row - previous_row
        previous_row = event.at_row
        action = ShapingAction.INCREASE if event.stitch_delta > 0 else ShapingAction.DECREASE
        size = abs(event.stitch_delta)
        if intervals:
            last = intervals[-1]
            if (last.action, last.every_n_rows, last.stitches_per_action) == (action, gap, size):
                intervals[-1] = ShapingInterval(action, gap, last.times + 1, size)
                continue
        intervals.append(ShapingInterval(action, gap, 1, size))
    return intervals


# ── Helpers ────────────────────────────────────────────────────────────────────


def _even_spread(units: int, rows: int) -> list[int]:
    return [(i * units) // rows - ((i - 1) * units) // rows for i in range(1, rows + 1)]


def _front_loaded(units: int, rows: int) -> list[int]:
    if units >= rows:
        base, extra = divmod(units, rows)
        return [base + 1] * extra + [base] * (rows - extra)

    base_gap, longer = divmod(rows, units)
    gaps = [base_gap] * (units - longer) + [base_gap + 1] * longer
    per_row = [0] * rows
    row = 0
    for gap in gaps:
        row += gap
        per_row[row - 1] = 1
    return per_row
