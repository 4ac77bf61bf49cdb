"""Scheduling engine: availability, placement and calendar state."""

from .availability import compute_gaps
from .calendar import CalendarState
from .placement import Placement, ScheduleResult, schedule_tasks

__all__ = ['compute_gaps', 'schedule_tasks', 'Placement', 'ScheduleResult', 'CalendarState']
