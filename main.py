"""Main entry point for the task slot scheduler."""

import argparse
import json
import logging
import uuid
from datetime import datetime
from pathlib import Path

from taskslot.engine.calendar import CalendarState
from taskslot.models.settings import Settings
from taskslot.policies.priority import PriorityDeadlinePolicy
from taskslot.storage.snapshot import load_snapshot, save_snapshot
from taskslot.utils.config import load_config, get_default_config, merge_config
from taskslot.utils.datetime_utils import parse_timestamp


def open_state(state_path: str, config_path: str, start: datetime = None) -> CalendarState:
    """Load the saved calendar, or start an empty one from configuration.

    Task ordering always follows the configuration, also for saved calendars.
    """
    clock = (lambda: start) if start else datetime.now
    config = merge_config(load_config(config_path)) if Path(config_path).exists() else get_default_config()
    policy = PriorityDeadlinePolicy(config)

    if Path(state_path).exists():
        return load_snapshot(state_path, clock=clock, policy=policy)

    return CalendarState(settings=Settings.from_config(config), clock=clock, policy=policy)


def run_scheduling(state: CalendarState, state_path: str):
    """Reschedule everything and report the result."""
    result = state.reschedule()

    print(f"\nScheduled {len(result.placements)} out of {len(state.tasks)} tasks")
    for interval in result.scheduled_intervals():
        print(f"  {interval.start:%a %Y-%m-%d %H:%M}-{interval.end:%H:%M}  {interval.name}")

    if result.unscheduled:
        print("\nUnscheduled Tasks:")
        for task in result.unscheduled:
            details = f"Priority: {task.priority}, Duration: {task.duration_minutes} mins, Deadline: {task.deadline:%Y-%m-%d}"
            if task.travel_before_minutes or task.travel_after_minutes:
                details += f", Travel: {task.travel_before_minutes + task.travel_after_minutes} mins"
            print(f"  {task.name} ({details})")

    save_snapshot(state, state_path)

    # Save trace
    trace = result.trace
    trace.run_id = str(uuid.uuid4())[:8]
    results_dir = Path("results")
    results_dir.mkdir(exist_ok=True)

    trace_path = results_dir / f"trace_{trace.run_id}.json"
    with open(trace_path, 'w') as f:
        json.dump(trace.to_dict(), f, indent=2, default=str)

    # Save human-readable log
    log_path = results_dir / f"trace_{trace.run_id}.log"
    with open(log_path, 'w') as f:
        f.write(trace.to_human_readable())

    print(f"\nTrace saved to: {trace_path}")
    print(f"Human-readable log saved to: {log_path}")

    return result


def show_gaps(state: CalendarState):
    """Print the free gaps over the horizon."""
    gaps = state.gaps()
    print(f"\n{len(gaps)} free gap(s)")
    for gap in gaps:
        print(f"  {gap.start:%a %Y-%m-%d %H:%M}-{gap.end:%H:%M}  ({gap.minutes:.0f} min)")
    return gaps


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Task Slot Scheduler"
    )
    parser.add_argument(
        'command',
        choices=['schedule', 'gaps', 'add-task', 'add-event'],
        help='Command to run'
    )
    parser.add_argument(
        '--state',
        type=str,
        default='calendar.json',
        help='Path to calendar snapshot (default: calendar.json)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default='config.yaml',
        help='Path to configuration file used for new calendars (default: config.yaml)'
    )
    parser.add_argument(
        '--start',
        type=str,
        help='Horizon start as ISO-8601 (default: now)'
    )
    parser.add_argument('--name', type=str, help='Task or event name')
    parser.add_argument('--deadline', type=str, help='Task deadline (ISO-8601)')
    parser.add_argument('--priority', type=int, default=1, help='Task priority, higher is more urgent')
    parser.add_argument('--duration', type=int, help='Task duration in minutes')
    parser.add_argument('--event-start', type=str, help='Event start (ISO-8601)')
    parser.add_argument('--event-end', type=str, help='Event end (ISO-8601)')
    parser.add_argument('--location', type=str, help='Task or event location')
    parser.add_argument('--travel-before', type=int, help='Travel minutes before')
    parser.add_argument('--travel-after', type=int, help='Travel minutes after')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    start = parse_timestamp(args.start) if args.start else None
    state = open_state(args.state, args.config, start)

    if args.command == 'schedule':
        run_scheduling(state, args.state)
    elif args.command == 'gaps':
        show_gaps(state)
    elif args.command == 'add-task':
        if not args.name or not args.deadline:
            parser.error('add-task requires --name and --deadline')
        task = state.add_task(
            args.name,
            args.deadline,
            priority=args.priority,
            duration=args.duration,
            location=args.location,
            travel_before=args.travel_before,
            travel_after=args.travel_after,
        )
        save_snapshot(state, args.state)
        status = f"{task.scheduled_start:%a %Y-%m-%d %H:%M}" if task.scheduled else "unscheduled"
        print(f"Task added: {task.name} [{task.task_id}] -> {status}")
    elif args.command == 'add-event':
        if not args.name or not args.event_start or not args.event_end:
            parser.error('add-event requires --name, --event-start and --event-end')
        event = state.add_event(
            args.name,
            args.event_start,
            args.event_end,
            location=args.location,
            travel_before=args.travel_before,
            travel_after=args.travel_after,
        )
        save_snapshot(state, args.state)
        print(f"Event added: {event.name} [{event.interval_id}]")


if __name__ == "__main__":
    main()
