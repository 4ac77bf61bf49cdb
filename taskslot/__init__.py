"""Fit prioritized tasks into the free gaps of a fixed calendar."""

from .engine import CalendarState, compute_gaps, schedule_tasks
from .errors import ValidationError
from .models import FixedInterval, Gap, Settings, Task, TravelLeg

__version__ = '0.1.0'

__all__ = [
    'CalendarState',
    'compute_gaps',
    'schedule_tasks',
    'ValidationError',
    'FixedInterval',
    'TravelLeg',
    'Gap',
    'Settings',
    'Task',
]
