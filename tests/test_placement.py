import unittest
from datetime import datetime

from taskslot.engine.availability import compute_gaps
from taskslot.engine.placement import schedule_tasks
from taskslot.models.interval import FixedInterval, Gap
from taskslot.models.settings import Settings
from taskslot.models.task import Task
from taskslot.policies.priority import PriorityDeadlinePolicy


def at(day: int, hour: int, minute: int = 0) -> datetime:
    # January 2024: the 2nd is a Tuesday.
    return datetime(2024, 1, day, hour, minute)


def task(task_id: str, duration: int, priority: int = 1, deadline: datetime = None, **kwargs) -> Task:
    return Task(
        task_id=task_id,
        name=task_id,
        deadline=deadline or at(31, 17),
        duration_minutes=duration,
        priority=priority,
        **kwargs,
    )


class TestScheduleTasks(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = Settings(working_hours_start=9, working_hours_end=17, min_break_minutes=15)

    def test_task_goes_into_first_gap(self) -> None:
        gaps = compute_gaps([FixedInterval(at(2, 10), at(2, 11), "meeting")], self.settings, at(2, 0), at(3, 0))
        result = schedule_tasks([task("t", 30, priority=5, deadline=at(3, 17))], gaps, self.settings)

        self.assertEqual(len(result.placements), 1)
        self.assertEqual((result.placements[0].start, result.placements[0].end), (at(2, 9), at(2, 9, 30)))
        self.assertEqual(result.unscheduled, [])
        self.assertEqual(result.remaining_gaps[0], Gap(at(2, 9, 45), at(2, 10)))

    def test_higher_priority_task_takes_scarce_time(self) -> None:
        settings = self.settings.replace(working_hours_start=8)
        fixed = [FixedInterval(at(2, 8), at(2, 8, 40), "standup")]
        long_task = task("long", 480, priority=10, deadline=at(3, 17))
        short_task = task("short", 30, priority=5, deadline=at(3, 17))

        gaps = compute_gaps(fixed, settings, at(2, 0), at(2, 23))
        self.assertEqual([g.minutes for g in gaps], [500])

        result = schedule_tasks([short_task, long_task], gaps, settings)
        self.assertEqual([p.task_id for p in result.placements], ["long"])
        self.assertEqual((result.placements[0].start, result.placements[0].end), (at(2, 8, 40), at(2, 16, 40)))
        self.assertEqual(result.unscheduled, [short_task])
        self.assertEqual(result.remaining_gaps[0].minutes, 5)

        # A later day in the horizon picks up the bumped task
        gaps = compute_gaps(fixed, settings, at(2, 0), at(4, 0))
        result = schedule_tasks([short_task, long_task], gaps, settings)
        placed = {p.task_id: p for p in result.placements}
        self.assertEqual(placed["short"].start, at(3, 8))
        self.assertEqual(result.unscheduled, [])

    def test_equal_priority_earlier_deadline_first(self) -> None:
        later = task("later", 30, priority=3, deadline=at(5, 17))
        sooner = task("sooner", 30, priority=3, deadline=at(3, 17))

        result = schedule_tasks([later, sooner], [Gap(at(2, 9), at(2, 10))], self.settings)

        self.assertEqual([p.task_id for p in result.placements], ["sooner"])
        self.assertEqual(result.unscheduled, [later])

    def test_full_ties_keep_input_order(self) -> None:
        first = task("a", 30, priority=2, deadline=at(4, 17))
        second = task("b", 30, priority=2, deadline=at(4, 17))

        result = schedule_tasks([first, second], [Gap(at(2, 9), at(2, 12))], self.settings)

        self.assertEqual([(p.task_id, p.start) for p in result.placements], [("a", at(2, 9)), ("b", at(2, 9, 45))])

    def test_travel_legs_surround_the_task(self) -> None:
        t = task("visit", 60, location="Clinic", travel_before_minutes=15, travel_after_minutes=20)

        result = schedule_tasks([t], [Gap(at(2, 9), at(2, 12))], self.settings)
        placement = result.placements[0]

        self.assertEqual((placement.travel_before.start, placement.travel_before.end), (at(2, 9), at(2, 9, 15)))
        self.assertEqual((placement.start, placement.end), (at(2, 9, 15), at(2, 10, 15)))
        self.assertEqual((placement.travel_after.start, placement.travel_after.end), (at(2, 10, 15), at(2, 10, 35)))
        self.assertEqual(placement.travel_before.bound_to, "visit")
        self.assertEqual(result.remaining_gaps, [Gap(at(2, 10, 50), at(2, 12))])
        self.assertEqual(result.trace.summary_stats["travel_minutes"], 35)

    def test_travel_counts_towards_fit(self) -> None:
        t = task("visit", 50, travel_before_minutes=10, travel_after_minutes=10)
        gaps = [Gap(at(2, 9), at(2, 10))]

        result = schedule_tasks([t], gaps, self.settings)

        self.assertEqual(result.placements, [])
        self.assertEqual(result.unscheduled, [t])
        self.assertEqual(result.remaining_gaps, gaps)
        self.assertEqual(result.trace.decisions[0].constraint_applied, "no_fitting_gap")
        self.assertEqual(result.trace.decisions[0].total_minutes, 70)

    def test_first_fit_not_best_fit(self) -> None:
        gaps = [Gap(at(2, 9), at(2, 12)), Gap(at(2, 13), at(2, 13, 45))]
        result = schedule_tasks([task("t", 30)], gaps, self.settings)
        self.assertEqual(result.placements[0].start, at(2, 9))

    def test_exhausted_gap_is_skipped(self) -> None:
        gaps = [Gap(at(2, 9), at(2, 10))]
        result = schedule_tasks(
            [task("hour", 60, priority=2), task("quarter", 15, priority=1)], gaps, self.settings
        )

        self.assertEqual([p.task_id for p in result.placements], ["hour"])
        self.assertEqual([t.task_id for t in result.unscheduled], ["quarter"])
        self.assertEqual(result.remaining_gaps[0].minutes, -15)

    def test_inputs_are_not_modified(self) -> None:
        gaps = [Gap(at(2, 9), at(2, 12))]
        tasks = [task("t", 30)]

        schedule_tasks(tasks, gaps, self.settings)

        self.assertEqual(gaps, [Gap(at(2, 9), at(2, 12))])
        self.assertFalse(tasks[0].scheduled)
        self.assertIsNone(tasks[0].scheduled_start)

    def test_same_inputs_give_same_result(self) -> None:
        gaps = compute_gaps(
            [FixedInterval(at(2, 10), at(2, 11), "meeting")], self.settings, at(2, 0), at(16, 0)
        )
        tasks = [task(f"t{i}", 45 + 15 * i, priority=i % 3, deadline=at(3 + i, 17)) for i in range(8)]

        first = schedule_tasks(tasks, gaps, self.settings)
        second = schedule_tasks(tasks, gaps, self.settings)

        self.assertEqual(first, second)

    def test_placements_follow_processing_order(self) -> None:
        gaps = [Gap(at(2, 9), at(2, 10)), Gap(at(2, 11), at(2, 17))]
        urgent = task("urgent", 120, priority=9)
        minor = task("minor", 30, priority=1)

        result = schedule_tasks([minor, urgent], gaps, self.settings)

        self.assertEqual([p.task_id for p in result.placements], ["urgent", "minor"])
        self.assertEqual([i.name for i in result.scheduled_intervals()], ["minor", "urgent"])

    def test_late_placement_is_flagged_not_refused(self) -> None:
        t = task("overdue", 30, deadline=at(1, 17))
        result = schedule_tasks([t], [Gap(at(2, 9), at(2, 10))], self.settings)

        self.assertEqual(len(result.placements), 1)
        self.assertEqual(result.trace.decisions[0].constraint_applied, "past_deadline")
        self.assertEqual(result.trace.summary_stats["late_placements"], 1)

    def test_no_gaps_leaves_everything_unscheduled(self) -> None:
        tasks = [task("a", 30), task("b", 60, priority=4)]
        result = schedule_tasks(tasks, [], self.settings)

        self.assertEqual(result.placements, [])
        self.assertEqual([t.task_id for t in result.unscheduled], ["b", "a"])
        self.assertEqual(result.trace.summary_stats["tasks_unscheduled"], 2)

    def test_tie_break_can_ignore_deadline(self) -> None:
        policy = PriorityDeadlinePolicy({"tie_break": {"secondary": "none"}})
        later = task("later", 30, deadline=at(9, 17))
        sooner = task("sooner", 30, deadline=at(3, 17))

        self.assertEqual(policy.order_tasks([later, sooner]), [later, sooner])
        self.assertEqual(PriorityDeadlinePolicy().order_tasks([later, sooner]), [sooner, later])

    def test_trace_renders(self) -> None:
        result = schedule_tasks([task("t", 30), task("big", 600)], [Gap(at(2, 9), at(2, 12))], self.settings,
                                horizon_start=at(2, 0), horizon_end=at(16, 0))
        text = result.trace.to_human_readable()

        self.assertIn("Policy: PRIORITY-DEADLINE", text)
        self.assertIn("t (p1) -> 2024-01-02 09:00-09:30", text)
        self.assertIn("big (p1) -> unscheduled", text)
        self.assertEqual(result.trace.to_dict()["summary_stats"]["tasks_scheduled"], 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
