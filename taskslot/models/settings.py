"""Scheduling settings."""

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, FrozenSet

from ..errors import ValidationError


@dataclass(frozen=True)
class Settings:
    """Working-time policy shared by the availability and placement passes.

    ``work_days`` uses 0=Sunday .. 6=Saturday. ``min_task_minutes`` is the
    smallest task the calendar expects; together with ``min_break_minutes``
    it sets the shortest gap worth reporting.
    """

    working_hours_start: int = 9
    working_hours_end: int = 17
    work_days: FrozenSet[int] = frozenset({1, 2, 3, 4, 5})
    min_break_minutes: int = 15
    default_task_duration: int = 60
    min_task_minutes: int = 15
    horizon_days: int = 14

    def __post_init__(self):
        """Normalize work days and validate every field."""
        object.__setattr__(self, 'work_days', frozenset(self.work_days))

        for hour in (self.working_hours_start, self.working_hours_end):
            if not 0 <= hour <= 23:
                raise ValidationError(f"Working hour out of range 0-23: {hour}")
        if self.working_hours_end <= self.working_hours_start:
            raise ValidationError("Working hours must end after they start")
        if not self.work_days <= set(range(7)):
            raise ValidationError(f"Work days must be within 0-6: {sorted(self.work_days)}")
        if self.min_break_minutes < 0:
            raise ValidationError("Minimum break cannot be negative")
        if self.default_task_duration <= 0:
            raise ValidationError("Default task duration must be positive")
        if self.min_task_minutes <= 0:
            raise ValidationError("Minimum task duration must be positive")
        if self.horizon_days <= 0:
            raise ValidationError("Planning horizon must be at least one day")

    @property
    def min_gap_minutes(self) -> int:
        """Shortest gap that can hold a minimal task plus the break."""
        return self.min_break_minutes + self.min_task_minutes

    def replace(self, **changes) -> 'Settings':
        """Validated copy with the given fields changed."""
        try:
            return replace(self, **changes)
        except TypeError as e:
            raise ValidationError(f"Unknown setting in {sorted(changes)}: {e}") from e

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'Settings':
        """Build settings from the ``scheduling`` section of a config dict."""
        scheduling = config.get('scheduling', {})
        defaults = cls()
        return cls(
            working_hours_start=scheduling.get('working_hours_start', defaults.working_hours_start),
            working_hours_end=scheduling.get('working_hours_end', defaults.working_hours_end),
            work_days=scheduling.get('working_days', defaults.work_days),
            min_break_minutes=scheduling.get('min_break_minutes', defaults.min_break_minutes),
            default_task_duration=scheduling.get('default_task_duration', defaults.default_task_duration),
            min_task_minutes=scheduling.get('min_task_minutes', defaults.min_task_minutes),
            horizon_days=scheduling.get('planning_horizon_days', defaults.horizon_days),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire format used by snapshots."""
        return {
            'workingHours': {
                'start': self.working_hours_start,
                'end': self.working_hours_end,
            },
            'workDays': sorted(self.work_days),
            'minBreakBetweenTasks': self.min_break_minutes,
            'defaultTaskDuration': self.default_task_duration,
            'minTaskDuration': self.min_task_minutes,
            'horizonDays': self.horizon_days,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Settings':
        """Inverse of ``to_dict``; missing keys fall back to defaults."""
        defaults = cls()
        hours = data.get('workingHours', {})
        try:
            return cls(
                working_hours_start=int(hours.get('start', defaults.working_hours_start)),
                working_hours_end=int(hours.get('end', defaults.working_hours_end)),
                work_days=[int(d) for d in data.get('workDays', defaults.work_days)],
                min_break_minutes=int(data.get('minBreakBetweenTasks', defaults.min_break_minutes)),
                default_task_duration=int(data.get('defaultTaskDuration', defaults.default_task_duration)),
                min_task_minutes=int(data.get('minTaskDuration', defaults.min_task_minutes)),
                horizon_days=int(data.get('horizonDays', defaults.horizon_days)),
            )
        except ValidationError:
            raise
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid settings: {e}") from e

    def describe(self) -> Dict[str, Any]:
        """Flat view for traces and logs."""
        data = asdict(self)
        data['work_days'] = sorted(self.work_days)
        return data
