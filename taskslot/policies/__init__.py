"""Task ordering policy implementations."""

from .base import OrderingPolicy
from .priority import PriorityDeadlinePolicy

__all__ = ['OrderingPolicy', 'PriorityDeadlinePolicy']
