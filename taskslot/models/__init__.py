"""Calendar data models."""

from .interval import FixedInterval, Gap, ScheduledTask, TimeInterval, TravelLeg
from .settings import Settings
from .task import Task
from .trace import DecisionTrace, PlacementDecision

__all__ = [
    'TimeInterval',
    'FixedInterval',
    'TravelLeg',
    'ScheduledTask',
    'Gap',
    'Settings',
    'Task',
    'DecisionTrace',
    'PlacementDecision',
]
