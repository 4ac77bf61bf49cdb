"""Calendar state: tasks, fixed intervals and settings rescheduled as one unit."""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Tuple, Union

from ..errors import ValidationError
from ..models.interval import FixedInterval, Gap, TimeInterval, TravelLeg
from ..models.settings import Settings
from ..models.task import Task
from ..policies.base import OrderingPolicy
from ..policies.priority import PriorityDeadlinePolicy
from ..utils.datetime_utils import parse_timestamp
from .availability import compute_gaps
from .placement import ScheduleResult, schedule_tasks

logger = logging.getLogger(__name__)

# name -> minutes, or None when no estimate is available
DurationSupplier = Callable[[str], Optional[int]]
# location -> (minutes travelling there, minutes travelling back)
TravelSupplier = Callable[[str], Tuple[int, int]]

FixedOccupant = Union[FixedInterval, TravelLeg]


def generate_id() -> str:
    """Short random identifier for tasks and events."""
    return str(uuid.uuid4())[:8]


class CalendarState:
    """One user's calendar.

    Holds the task list, the fixed intervals (events plus travel legs
    bound to them) and the settings. Every mutation re-runs the whole
    schedule from scratch over ``[clock(), clock() + horizon_days)``;
    intervals generated by a pass are kept only until the next pass.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        tasks: Iterable[Task] = (),
        intervals: Iterable[FixedOccupant] = (),
        clock: Callable[[], datetime] = datetime.now,
        policy: Optional[OrderingPolicy] = None,
        duration_supplier: Optional[DurationSupplier] = None,
        travel_supplier: Optional[TravelSupplier] = None,
    ):
        self.settings = settings or Settings()
        self.tasks: List[Task] = list(tasks)
        self.intervals: List[FixedOccupant] = list(intervals)
        self.clock = clock
        self.policy = policy or PriorityDeadlinePolicy()
        self.duration_supplier = duration_supplier
        self.travel_supplier = travel_supplier
        self.last_result: Optional[ScheduleResult] = None

    # --- Tasks ---

    def add_task(
        self,
        name: str,
        deadline: Union[str, datetime],
        priority: int = 1,
        duration: Optional[int] = None,
        location: Optional[str] = None,
        travel_before: Optional[int] = None,
        travel_after: Optional[int] = None,
        task_id: Optional[str] = None,
    ) -> Task:
        """Add a task and reschedule."""
        if duration is None:
            duration = self._supply_duration(name)

        if location and (travel_before is None or travel_after is None):
            supplied_before, supplied_after = self._supply_travel(location)
            if travel_before is None:
                travel_before = supplied_before
            if travel_after is None:
                travel_after = supplied_after

        if task_id is not None and any(t.task_id == task_id for t in self.tasks):
            raise ValidationError(f"Task id already in use: {task_id}")

        task = Task(
            task_id=task_id or generate_id(),
            name=name,
            deadline=parse_timestamp(deadline),
            duration_minutes=int(duration),
            priority=int(priority),
            location=location,
            travel_before_minutes=int(travel_before or 0),
            travel_after_minutes=int(travel_after or 0),
        )
        self.tasks.append(task)
        logger.info("Task added: %s", task.name)

        self.reschedule()
        return task

    def remove_task(self, task_id: str) -> Task:
        """Remove a task by id and reschedule."""
        task = self.get_task(task_id)
        self.tasks.remove(task)
        self.reschedule()
        return task

    def get_task(self, task_id: str) -> Task:
        for task in self.tasks:
            if task.task_id == task_id:
                return task
        raise KeyError(f"Unknown task: {task_id}")

    # --- Fixed events ---

    def add_event(
        self,
        name: str,
        start: Union[str, datetime],
        end: Union[str, datetime],
        location: Optional[str] = None,
        travel_before: Optional[int] = None,
        travel_after: Optional[int] = None,
        imported: bool = False,
        interval_id: Optional[str] = None,
    ) -> FixedInterval:
        """Add a fixed event, plus travel legs around it, and reschedule."""
        event = FixedInterval(
            parse_timestamp(start),
            parse_timestamp(end),
            name,
            interval_id=interval_id or generate_id(),
            location=location,
            imported=imported,
        )

        if location and (travel_before is None or travel_after is None):
            supplied_before, supplied_after = self._supply_travel(location)
            if travel_before is None:
                travel_before = supplied_before
            if travel_after is None:
                travel_after = supplied_after

        legs = self._event_travel_legs(event, travel_before or 0, travel_after or 0)
        self.intervals.append(event)
        self.intervals.extend(legs)
        logger.info("Event added: %s", event.name)

        self.reschedule()
        return event

    def add_events(self, events: Iterable[FixedInterval]) -> int:
        """Add already-built fixed intervals (e.g. from an import) and reschedule once.

        Events matching an existing interval in name, start and end are
        skipped. Returns how many were added.
        """
        existing = {(i.name, i.start, i.end) for i in self.intervals}
        added = 0
        for event in events:
            key = (event.name, event.start, event.end)
            if key in existing:
                continue
            existing.add(key)
            self.intervals.append(event)
            added += 1

        logger.info("Imported %s event(s)", added)
        self.reschedule()
        return added

    def remove_event(self, interval_id: str) -> FixedInterval:
        """Remove a fixed event and its travel legs, then reschedule."""
        event = next(
            (i for i in self.intervals if isinstance(i, FixedInterval) and i.interval_id == interval_id),
            None,
        )
        if event is None:
            raise KeyError(f"Unknown event: {interval_id}")

        self.intervals = [
            i for i in self.intervals
            if i is not event and not (isinstance(i, TravelLeg) and i.bound_to == interval_id)
        ]
        self.reschedule()
        return event

    def _event_travel_legs(self, event: FixedInterval, before: int, after: int) -> List[TravelLeg]:
        if before < 0 or after < 0:
            raise ValidationError(f"Event '{event.name}' travel time cannot be negative")

        legs = []
        if before > 0:
            legs.append(TravelLeg(
                event.start - timedelta(minutes=before), event.start, f"Travel to {event.name}",
                interval_id=f"{event.interval_id}:to", bound_to=event.interval_id, direction='to',
            ))
        if after > 0:
            legs.append(TravelLeg(
                event.end, event.end + timedelta(minutes=after), f"Travel from {event.name}",
                interval_id=f"{event.interval_id}:from", bound_to=event.interval_id, direction='from',
            ))
        return legs

    # --- Settings ---

    def update_settings(self, **changes) -> Settings:
        """Apply validated settings changes and reschedule."""
        self.settings = self.settings.replace(**changes)
        logger.info("Settings updated: %s", changes)
        self.reschedule()
        return self.settings

    # --- Scheduling ---

    def horizon(self, start: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        start = start or self.clock()
        return start, start + timedelta(days=self.settings.horizon_days)

    def gaps(self, horizon_start: Optional[datetime] = None) -> List[Gap]:
        """Free gaps over the horizon, ignoring previously scheduled tasks."""
        start, end = self.horizon(horizon_start)
        return compute_gaps(self.intervals, self.settings, start, end)

    def reschedule(self, horizon_start: Optional[datetime] = None) -> ScheduleResult:
        """Re-derive the whole schedule and apply it to the tasks."""
        start, end = self.horizon(horizon_start)
        gaps = compute_gaps(self.intervals, self.settings, start, end)
        result = schedule_tasks(
            self.tasks, gaps, self.settings,
            policy=self.policy, horizon_start=start, horizon_end=end,
        )

        for task in self.tasks:
            task.reset_schedule()
        placed = {p.task_id: p for p in result.placements}
        for task in self.tasks:
            placement = placed.get(task.task_id)
            if placement is not None:
                task.mark_scheduled(placement.start, placement.end)

        self.last_result = result
        return result

    @property
    def scheduled_intervals(self) -> List[TimeInterval]:
        """Task and travel intervals generated by the last pass."""
        if self.last_result is None:
            return []
        return self.last_result.scheduled_intervals()

    @property
    def all_intervals(self) -> List[TimeInterval]:
        """Fixed and generated intervals in chronological order."""
        return sorted([*self.intervals, *self.scheduled_intervals], key=lambda i: i.start)

    @property
    def unscheduled_tasks(self) -> List[Task]:
        return [task for task in self.tasks if not task.scheduled]

    # --- Collaborators ---

    def _supply_duration(self, name: str) -> int:
        if self.duration_supplier is not None:
            try:
                estimate = self.duration_supplier(name)
            except Exception:
                logger.exception("Duration estimate failed for task: %s", name)
            else:
                if estimate:
                    return int(estimate)
        return self.settings.default_task_duration

    def _supply_travel(self, location: str) -> Tuple[int, int]:
        if self.travel_supplier is None:
            return 0, 0
        try:
            to_minutes, from_minutes = self.travel_supplier(location)
        except Exception:
            logger.exception("Travel time lookup failed for location: %s", location)
            return 0, 0
        logger.info("Travel for %s: to %sm, from %sm", location, to_minutes, from_minutes)
        return int(to_minutes), int(from_minutes)
