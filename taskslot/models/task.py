"""Task data model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..errors import ValidationError


@dataclass
class Task:
    """Represents a schedulable task with metadata."""

    task_id: str
    name: str
    deadline: datetime
    duration_minutes: int
    priority: int = 1
    location: Optional[str] = None
    travel_before_minutes: int = 0
    travel_after_minutes: int = 0
    scheduled: bool = False
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None

    def __post_init__(self):
        """Validate durations and the deadline."""
        if not isinstance(self.deadline, datetime):
            raise ValidationError(f"Task '{self.name}' needs a datetime deadline")
        if self.duration_minutes <= 0:
            raise ValidationError(f"Task '{self.name}' duration must be positive")
        if self.travel_before_minutes < 0 or self.travel_after_minutes < 0:
            raise ValidationError(f"Task '{self.name}' travel time cannot be negative")

    def get_total_minutes(self) -> int:
        """Duration including travel before and after."""
        return self.duration_minutes + self.travel_before_minutes + self.travel_after_minutes

    def reset_schedule(self):
        self.scheduled = False
        self.scheduled_start = None
        self.scheduled_end = None

    def mark_scheduled(self, start: datetime, end: datetime):
        self.scheduled = True
        self.scheduled_start = start
        self.scheduled_end = end
