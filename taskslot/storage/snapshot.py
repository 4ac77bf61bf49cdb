"""JSON snapshots of a calendar state.

Format (version 1)::

    {
      "version": 1,
      "settings": {"workingHours": {"start": 9, "end": 17}, "workDays": [...], ...},
      "events": [{"kind": "fixed" | "travel", "id", "name", "start", "end", ...}],
      "tasks": [{"id", "name", "priority", "duration", "deadline", ...}],
      "scheduled": [...]
    }

``scheduled`` lists the intervals generated by the last pass for
consumers that render or export them; it is ignored when loading because
every load is followed by a fresh pass.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..engine.calendar import CalendarState, FixedOccupant
from ..errors import ValidationError
from ..models.interval import FixedInterval, ScheduledTask, TimeInterval, TravelLeg
from ..models.settings import Settings
from ..models.task import Task
from ..utils.datetime_utils import parse_timestamp

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def interval_to_dict(interval: TimeInterval) -> Dict[str, Any]:
    data = {
        'kind': interval.kind,
        'name': interval.name,
        'start': _iso(interval.start),
        'end': _iso(interval.end),
    }
    if isinstance(interval, FixedInterval):
        data.update(id=interval.interval_id, location=interval.location, imported=interval.imported)
    elif isinstance(interval, TravelLeg):
        data.update(id=interval.interval_id, boundTo=interval.bound_to, direction=interval.direction)
    elif isinstance(interval, ScheduledTask):
        data.update(taskId=interval.task_id)
    return data


def interval_from_dict(data: Dict[str, Any]) -> FixedOccupant:
    kind = data.get('kind', 'fixed')
    start = parse_timestamp(data.get('start'))
    end = parse_timestamp(data.get('end'))
    name = data.get('name', '')

    if kind == 'fixed':
        return FixedInterval(
            start, end, name,
            interval_id=data.get('id', ''),
            location=data.get('location'),
            imported=bool(data.get('imported', False)),
        )
    if kind == 'travel':
        return TravelLeg(
            start, end, name,
            interval_id=data.get('id', ''),
            bound_to=data.get('boundTo', ''),
            direction=data.get('direction', 'to'),
        )
    raise ValidationError(f"Unknown interval kind: {kind!r}")


def task_to_dict(task: Task) -> Dict[str, Any]:
    return {
        'id': task.task_id,
        'name': task.name,
        'priority': task.priority,
        'duration': task.duration_minutes,
        'deadline': _iso(task.deadline),
        'location': task.location,
        'travelBefore': task.travel_before_minutes,
        'travelAfter': task.travel_after_minutes,
        'scheduled': task.scheduled,
        'scheduledStart': _iso(task.scheduled_start),
        'scheduledEnd': _iso(task.scheduled_end),
    }


def task_from_dict(data: Dict[str, Any], settings: Settings) -> Task:
    start = data.get('scheduledStart')
    end = data.get('scheduledEnd')
    duration = data.get('duration')
    if duration is None:
        duration = settings.default_task_duration
    try:
        return Task(
            task_id=data['id'],
            name=data.get('name', ''),
            deadline=parse_timestamp(data.get('deadline')),
            duration_minutes=int(duration),
            priority=int(data.get('priority', 1)),
            location=data.get('location'),
            travel_before_minutes=int(data.get('travelBefore', 0)),
            travel_after_minutes=int(data.get('travelAfter', 0)),
            scheduled=bool(data.get('scheduled', False)),
            scheduled_start=parse_timestamp(start) if start else None,
            scheduled_end=parse_timestamp(end) if end else None,
        )
    except KeyError as e:
        raise ValidationError(f"Task is missing field {e}") from e
    except ValidationError:
        raise
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid task {data.get('name')!r}: {e}") from e


def to_dict(state: CalendarState) -> Dict[str, Any]:
    """Serialize tasks, fixed intervals and settings."""
    return {
        'version': SNAPSHOT_VERSION,
        'settings': state.settings.to_dict(),
        'events': [interval_to_dict(i) for i in state.intervals],
        'tasks': [task_to_dict(t) for t in state.tasks],
        'scheduled': [interval_to_dict(i) for i in state.scheduled_intervals],
    }


def from_dict(
    data: Dict[str, Any],
    clock: Optional[Callable[[], datetime]] = None,
    **state_kwargs,
) -> CalendarState:
    """Rebuild a calendar state from ``to_dict`` output.

    Task scheduling state is restored as saved; it is only recomputed
    when the caller reschedules.
    """
    version = data.get('version', SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise ValidationError(f"Unsupported snapshot version: {version}")

    settings = Settings.from_dict(data.get('settings', {}))
    intervals: List[FixedOccupant] = [interval_from_dict(e) for e in data.get('events', [])]
    tasks = [task_from_dict(t, settings) for t in data.get('tasks', [])]
    seen = set()
    for task in tasks:
        if task.task_id in seen:
            raise ValidationError(f"Duplicate task id in snapshot: {task.task_id}")
        seen.add(task.task_id)

    if clock is not None:
        state_kwargs['clock'] = clock
    return CalendarState(settings=settings, tasks=tasks, intervals=intervals, **state_kwargs)


def save_snapshot(state: CalendarState, path: Union[str, Path]) -> Path:
    """Write a snapshot as JSON."""
    path = Path(path)
    with open(path, 'w') as f:
        json.dump(to_dict(state), f, indent=2)
    logger.info("Saved %s task(s) and %s interval(s) to %s", len(state.tasks), len(state.intervals), path)
    return path


def load_snapshot(path: Union[str, Path], **state_kwargs) -> CalendarState:
    """Read a snapshot written by ``save_snapshot``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")

    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Snapshot {path} is not valid JSON: {e}") from e

    return from_dict(data, **state_kwargs)
