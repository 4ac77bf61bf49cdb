"""Base task ordering policy interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.task import Task


class OrderingPolicy(ABC):
    """Abstract base class for task ordering policies.

    The placement engine attempts tasks in the order a policy returns.
    Implementations must be deterministic for equal inputs.
    """

    def __init__(self, config: Optional[dict] = None):
        """Initialize policy with configuration."""
        self.config = config or {}

    @abstractmethod
    def order_tasks(self, tasks: List[Task]) -> List[Task]:
        """Order tasks according to policy logic."""
        pass

    @abstractmethod
    def get_policy_name(self) -> str:
        """Return the name of this policy."""
        pass
