"""Greedy first-fit task placement engine."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from ..models.interval import Gap, ScheduledTask, TimeInterval, TravelLeg
from ..models.settings import Settings
from ..models.task import Task
from ..models.trace import DecisionTrace, PlacementDecision
from ..policies.base import OrderingPolicy
from ..policies.priority import PriorityDeadlinePolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """A task bound to concrete times, with its travel legs."""

    task: ScheduledTask
    travel_before: Optional[TravelLeg] = None
    travel_after: Optional[TravelLeg] = None

    @property
    def task_id(self) -> str:
        return self.task.task_id

    @property
    def start(self) -> datetime:
        return self.task.start

    @property
    def end(self) -> datetime:
        return self.task.end

    @property
    def span_end(self) -> datetime:
        """End including travel."""
        return self.travel_after.end if self.travel_after else self.task.end

    def intervals(self) -> List[TimeInterval]:
        """Generated intervals in chronological order."""
        return [i for i in (self.travel_before, self.task, self.travel_after) if i is not None]


@dataclass(frozen=True)
class ScheduleResult:
    """Outcome of one placement pass.

    ``placements`` follow processing order, not chronological order.
    """

    placements: List[Placement]
    unscheduled: List[Task]
    remaining_gaps: List[Gap]
    trace: DecisionTrace

    def scheduled_intervals(self) -> List[TimeInterval]:
        """All generated task and travel intervals, sorted by start."""
        intervals = [i for p in self.placements for i in p.intervals()]
        return sorted(intervals, key=lambda i: i.start)


def _place(task: Task, gap: Gap) -> Placement:
    """Lay out travel-to, task, travel-from back to back from the gap start."""
    cursor = gap.start
    travel_before = travel_after = None

    if task.travel_before_minutes > 0:
        leg_end = cursor + timedelta(minutes=task.travel_before_minutes)
        travel_before = TravelLeg(
            cursor, leg_end, f"Travel to {task.name}",
            interval_id=f"{task.task_id}:to", bound_to=task.task_id, direction='to',
        )
        cursor = leg_end

    task_end = cursor + timedelta(minutes=task.duration_minutes)
    placed = ScheduledTask(cursor, task_end, task.name, task_id=task.task_id)
    cursor = task_end

    if task.travel_after_minutes > 0:
        leg_end = cursor + timedelta(minutes=task.travel_after_minutes)
        travel_after = TravelLeg(
            cursor, leg_end, f"Travel from {task.name}",
            interval_id=f"{task.task_id}:from", bound_to=task.task_id, direction='from',
        )

    return Placement(placed, travel_before, travel_after)


def schedule_tasks(
    tasks: Sequence[Task],
    gaps: Sequence[Gap],
    settings: Settings,
    policy: Optional[OrderingPolicy] = None,
    horizon_start: Optional[datetime] = None,
    horizon_end: Optional[datetime] = None,
) -> ScheduleResult:
    """Place tasks into gaps, first fit, in policy order.

    Neither ``tasks`` nor ``gaps`` is modified: the gap list is copied and
    each used gap is replaced by its shrunk remainder, which starts
    ``min_break_minutes`` after the placed block. Tasks are never split;
    a task with no fitting gap ends up in ``unscheduled``.
    """
    policy = policy or PriorityDeadlinePolicy()
    remaining = list(gaps)
    placements: List[Placement] = []
    unscheduled: List[Task] = []
    decisions: List[PlacementDecision] = []
    brk = timedelta(minutes=settings.min_break_minutes)

    for task in policy.order_tasks(list(tasks)):
        total = task.get_total_minutes()
        index = next((i for i, gap in enumerate(remaining) if gap.fits(total)), None)

        if index is None:
            logger.warning("Could not schedule task: %s", task.name)
            unscheduled.append(task)
            decisions.append(PlacementDecision(
                task_id=task.task_id,
                task_name=task.name,
                priority=task.priority,
                total_minutes=total,
                start=None,
                end=None,
                reason=f"No gap of {total} minutes in horizon",
                constraint_applied="no_fitting_gap",
            ))
            continue

        placement = _place(task, remaining[index])
        remaining[index] = remaining[index].shrink_to(placement.span_end + brk)
        placements.append(placement)

        late = placement.end > task.deadline
        decisions.append(PlacementDecision(
            task_id=task.task_id,
            task_name=task.name,
            priority=task.priority,
            total_minutes=total,
            start=placement.start,
            end=placement.end,
            reason="Placed in first fitting gap",
            constraint_applied="past_deadline" if late else None,
        ))

    logger.info("Scheduled %s out of %s tasks", len(placements), len(tasks))

    trace = DecisionTrace(
        policy_name=policy.get_policy_name(),
        horizon_start=horizon_start or (gaps[0].start if gaps else None),
        horizon_end=horizon_end or (gaps[-1].end if gaps else None),
        config=settings.describe(),
        decisions=decisions,
        summary_stats=_compute_summary_stats(placements, unscheduled, decisions, gaps, remaining),
    )

    return ScheduleResult(placements, unscheduled, remaining, trace)


def _compute_summary_stats(
    placements: List[Placement],
    unscheduled: List[Task],
    decisions: List[PlacementDecision],
    gaps: Sequence[Gap],
    remaining: List[Gap],
) -> Dict[str, Any]:
    """Compute summary statistics for the trace."""
    task_minutes = sum(p.task.minutes for p in placements)
    travel_minutes = sum(
        leg.minutes for p in placements for leg in (p.travel_before, p.travel_after) if leg
    )

    return {
        'tasks_scheduled': len(placements),
        'tasks_total': len(placements) + len(unscheduled),
        'tasks_unscheduled': len(unscheduled),
        'gaps_total': len(gaps),
        'free_minutes': sum(g.minutes for g in gaps),
        'scheduled_task_minutes': task_minutes,
        'travel_minutes': travel_minutes,
        'free_minutes_remaining': sum(g.minutes for g in remaining if g.minutes > 0),
        'late_placements': sum(1 for d in decisions if d.constraint_applied == "past_deadline"),
    }
