"""Priority-then-deadline ordering policy."""

from typing import List

from ..models.task import Task
from .base import OrderingPolicy


class PriorityDeadlinePolicy(OrderingPolicy):
    """Default policy: priority first, then deadline."""

    def order_tasks(self, tasks: List[Task]) -> List[Task]:
        """Order tasks by priority (highest first), then deadline (earliest first).

        ``sorted`` is stable, so full ties keep their input order. Setting
        ``tie_break.secondary`` to anything but ``deadline`` drops the
        deadline key and leaves priority ties in input order.
        """
        secondary = self.config.get('tie_break', {}).get('secondary', 'deadline')

        if secondary == 'deadline':
            return sorted(tasks, key=lambda task: (-task.priority, task.deadline))
        return sorted(tasks, key=lambda task: -task.priority)

    def get_policy_name(self) -> str:
        """Return policy name."""
        return "PRIORITY-DEADLINE"
