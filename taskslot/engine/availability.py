"""Availability calculation: free gaps between fixed intervals."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ..models.interval import Gap, TimeInterval
from ..models.settings import Settings
from ..utils.datetime_utils import at_hour, iter_days, weekday_number

logger = logging.getLogger(__name__)


def compute_gaps(
    fixed_intervals: Iterable[TimeInterval],
    settings: Settings,
    horizon_start: datetime,
    horizon_end: datetime,
    min_gap_minutes: Optional[float] = None,
) -> List[Gap]:
    """Return the free working-time gaps over the horizon, chronologically.

    Each working day contributes the stretches of ``[max(horizon_start,
    day_start), day_end)`` not covered by a fixed interval. Gaps shorter
    than ``min_gap_minutes`` (default: minimum break plus minimum task
    length) are dropped.
    """
    if min_gap_minutes is None:
        min_gap_minutes = settings.min_gap_minutes

    intervals = list(fixed_intervals)
    gaps: List[Gap] = []

    for day in iter_days(horizon_start, horizon_end):
        if weekday_number(day) not in settings.work_days:
            continue

        day_start = at_hour(day, settings.working_hours_start)
        day_end = at_hour(day, settings.working_hours_end)
        effective_start = max(horizon_start, day_start)

        # Horizon begins after working hours end this day
        if effective_start >= day_end:
            continue

        day_intervals = sorted(
            (i for i in intervals if i.overlaps(effective_start, day_end)),
            key=lambda i: i.start,
        )

        cursor = effective_start
        for interval in day_intervals:
            if cursor < interval.start:
                gaps.append(Gap(cursor, interval.start))
            cursor = max(cursor, interval.end)

        if cursor < day_end:
            gaps.append(Gap(cursor, day_end))

    usable = [gap for gap in gaps if gap.minutes >= min_gap_minutes]
    logger.debug(
        "Found %s gap(s) (%s too short) between %s and %s",
        len(usable), len(gaps) - len(usable), horizon_start, horizon_end,
    )
    return usable
