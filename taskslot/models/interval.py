"""Time interval data models.

Everything that occupies the calendar shares the ``TimeInterval`` shape.
Concrete variants say what kind of occupant it is:

- ``FixedInterval``: an immovable event entered by the user or imported.
- ``TravelLeg``: transit time bound to a fixed event or a scheduled task.
- ``ScheduledTask``: a task placed by the engine.

``Gap`` is not an occupant: it is a free window derived by the
availability calculator and consumed by the placement engine.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import ClassVar, Optional

from ..errors import ValidationError
from ..utils.datetime_utils import minutes_between


@dataclass(frozen=True)
class TimeInterval:
    """Half-open interval [start, end) with a display name."""

    kind: ClassVar[str] = 'interval'

    start: datetime
    end: datetime
    name: str

    def __post_init__(self):
        """Reject empty or inverted intervals."""
        if not isinstance(self.start, datetime) or not isinstance(self.end, datetime):
            raise ValidationError(f"Interval '{self.name}' needs datetime bounds")
        if self.end <= self.start:
            raise ValidationError(
                f"Interval '{self.name}' ends at {self.end.isoformat()} "
                f"before it starts at {self.start.isoformat()}"
            )

    @property
    def minutes(self) -> float:
        """Length in minutes."""
        return minutes_between(self.start, self.end)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Check if this interval intersects [start, end)."""
        return self.start < end and self.end > start


@dataclass(frozen=True)
class FixedInterval(TimeInterval):
    """An immovable calendar occupant."""

    kind: ClassVar[str] = 'fixed'

    interval_id: str = ''
    location: Optional[str] = None
    imported: bool = False


@dataclass(frozen=True)
class TravelLeg(TimeInterval):
    """Transit time immediately before or after the interval it is bound to."""

    kind: ClassVar[str] = 'travel'

    interval_id: str = ''
    bound_to: str = ''
    direction: str = 'to'  # 'to' precedes the owner, 'from' follows it


@dataclass(frozen=True)
class ScheduledTask(TimeInterval):
    """A task placed into a gap by the engine."""

    kind: ClassVar[str] = 'task'

    task_id: str = ''


@dataclass(frozen=True)
class Gap:
    """Unclaimed working time [start, end).

    A gap shrunk past its end is kept but never fits anything.
    """

    start: datetime
    end: datetime

    @property
    def minutes(self) -> float:
        """Length in minutes, negative once shrunk past its end."""
        return minutes_between(self.start, self.end)

    def fits(self, minutes: float) -> bool:
        """Check if a block of the given length fits in this gap."""
        return self.minutes > 0 and self.minutes >= minutes

    def shrink_to(self, start: datetime) -> 'Gap':
        """Copy of this gap starting at a later point."""
        return replace(self, start=start)
