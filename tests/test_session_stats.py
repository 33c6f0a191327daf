import os
import sys
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import SessionStats
from models import WorkoutSession

MONDAY = datetime.datetime(2024, 3, 11, 18, 0)
WEDNESDAY = MONDAY + datetime.timedelta(days=2)


def make_session(sid, completed_at, exercises=(), routine_id="r1", duration=None):
    started = (completed_at or MONDAY) - datetime.timedelta(hours=1)
    return WorkoutSession(
        id=sid,
        routine_id=routine_id,
        routine_name="Push Day",
        user_id="u1",
        started_at=started,
        completed_at=completed_at,
        duration=duration,
        exercises=[
            {
                "exercise_id": ex_id,
                "exercise_name": name,
                "reps": 8,
                "weight": weight,
                "completed": completed,
            }
            for ex_id, name, weight, completed in exercises
        ],
    )


class WeeklyConsistencyTestCase(unittest.TestCase):
    def test_empty(self) -> None:
        result = SessionStats.weekly_consistency([], WEDNESDAY)
        self.assertEqual(result.model_dump(), {"completed": 0, "total": 7})

    def test_distinct_days(self) -> None:
        sessions = [
            make_session("a", MONDAY),
            make_session("b", MONDAY + datetime.timedelta(hours=2)),
            make_session("c", WEDNESDAY),
        ]
        result = SessionStats.weekly_consistency(sessions, WEDNESDAY)
        self.assertEqual(result.completed, 2)
        self.assertEqual(result.total, 7)

    def test_ignores_previous_week_and_in_progress(self) -> None:
        sessions = [
            make_session("a", MONDAY - datetime.timedelta(minutes=1)),
            make_session("b", None),
            make_session("c", WEDNESDAY),
        ]
        self.assertEqual(SessionStats.weekly_consistency(sessions, WEDNESDAY).completed, 1)

    def test_sunday_belongs_to_previous_monday(self) -> None:
        sunday = MONDAY + datetime.timedelta(days=6)
        sessions = [make_session("a", MONDAY), make_session("b", sunday)]
        self.assertEqual(SessionStats.weekly_consistency(sessions, sunday).completed, 2)


class StreakTestCase(unittest.TestCase):
    def test_streak_stops_at_gap(self) -> None:
        week = datetime.timedelta(days=7)
        sessions = [
            make_session("w0", MONDAY),
            make_session("w1", MONDAY - week),
            make_session("w3", MONDAY - 3 * week),
        ]
        self.assertEqual(SessionStats.weekly_streak(sessions, WEDNESDAY), 2)

    def test_idle_current_week(self) -> None:
        sessions = [make_session("w1", MONDAY - datetime.timedelta(days=7))]
        self.assertEqual(SessionStats.weekly_streak(sessions, WEDNESDAY), 0)

    def test_today_counts(self) -> None:
        sessions = [make_session("w0", WEDNESDAY)]
        self.assertEqual(SessionStats.weekly_streak(sessions, WEDNESDAY), 1)

    def test_streak_across_year_boundary(self) -> None:
        now = datetime.datetime(2025, 1, 2, 12)
        sessions = [
            make_session("a", datetime.datetime(2025, 1, 1, 9)),
            make_session("b", datetime.datetime(2024, 12, 24, 9)),
            make_session("c", datetime.datetime(2024, 12, 17, 9)),
        ]
        self.assertEqual(SessionStats.weekly_streak(sessions, now), 3)

    def test_streak_record(self) -> None:
        week = datetime.timedelta(days=7)
        sessions = [make_session("now", MONDAY)]
        sessions += [make_session(f"old{i}", MONDAY - (i + 3) * week) for i in range(4)]
        sessions.append(make_session("future", MONDAY + 2 * week))
        record = SessionStats.streak_record(sessions, WEDNESDAY)
        self.assertEqual(record.current, 1)
        self.assertEqual(record.best, 4)
        self.assertEqual(SessionStats.streak_record([], WEDNESDAY).model_dump(), {"current": 0, "best": 0})


class ExerciseStatsTestCase(unittest.TestCase):
    def test_end_to_end_week(self) -> None:
        sessions = [
            make_session("a", MONDAY, [("e1", "Bench Press", 50, True)]),
            make_session("b", WEDNESDAY, [("e1", "Bench Press", 55, True)]),
        ]
        self.assertEqual(
            SessionStats.weekly_consistency(sessions, WEDNESDAY).model_dump(),
            {"completed": 2, "total": 7},
        )
        stats = SessionStats.exercise_stats(sessions, "week", now=WEDNESDAY)
        self.assertEqual(
            [s.model_dump() for s in stats],
            [
                {
                    "exercise_id": "e1",
                    "exercise_name": "Bench Press",
                    "current_weight": 55,
                    "change": 10,
                    "chart_data": [50, 55],
                }
            ],
        )

    def test_sorted_by_completion_date(self) -> None:
        sessions = [
            make_session("late", WEDNESDAY, [("e1", "Squat", 120, True)]),
            make_session("early", MONDAY, [("e1", "Squat", 100, True)]),
        ]
        stat = SessionStats.exercise_stats(sessions, "week", now=WEDNESDAY)[0]
        self.assertEqual(stat.chart_data, [100, 120])
        self.assertEqual(stat.change, 20)
        self.assertEqual(stat.current_weight, 120)

    def test_single_point_has_no_change(self) -> None:
        sessions = [make_session("a", MONDAY, [("e1", "Squat", 100, True)])]
        stat = SessionStats.exercise_stats(sessions, "week", now=WEDNESDAY)[0]
        self.assertEqual(stat.chart_data, [100])
        self.assertEqual(stat.change, 0)

    def test_zero_weight_and_incomplete_entries_excluded(self) -> None:
        sessions = [
            make_session(
                "a",
                MONDAY,
                [
                    ("e1", "Squat", 0, True),
                    ("e2", "Push Up", 0, True),
                    ("e3", "Row", 70, False),
                ],
            ),
            make_session("b", WEDNESDAY, [("e1", "Squat", 90, True)]),
        ]
        stats = SessionStats.exercise_stats(sessions, "week", now=WEDNESDAY)
        self.assertEqual([s.exercise_id for s in stats], ["e1"])
        self.assertEqual(stats[0].chart_data, [90])

    def test_week_window_is_rolling_seven_days(self) -> None:
        sessions = [
            make_session("old", WEDNESDAY - datetime.timedelta(days=7, minutes=1), [("e1", "Squat", 80, True)]),
            make_session("edge", WEDNESDAY - datetime.timedelta(days=7), [("e1", "Squat", 90, True)]),
            make_session("future", WEDNESDAY + datetime.timedelta(minutes=1), [("e1", "Squat", 200, True)]),
        ]
        stat = SessionStats.exercise_stats(sessions, "week", now=WEDNESDAY)[0]
        self.assertEqual(stat.chart_data, [90])

    def test_month_selector_ignores_now(self) -> None:
        sessions = [
            make_session("feb", datetime.datetime(2024, 2, 29, 23, 0), [("e1", "Squat", 60, True)]),
            make_session("first", datetime.datetime(2024, 3, 1, 0, 0), [("e1", "Squat", 80, True)]),
            make_session("last", datetime.datetime(2024, 3, 31, 21, 0), [("e1", "Squat", 100, True)]),
            make_session("apr", datetime.datetime(2024, 4, 1, 6, 0), [("e1", "Squat", 120, True)]),
        ]
        now = datetime.datetime(2025, 1, 15)
        stat = SessionStats.exercise_stats(sessions, "month", "2024-03", now=now)[0]
        self.assertEqual(stat.chart_data, [80, 100])
        self.assertEqual(stat.change, 25)

    def test_rolling_month(self) -> None:
        now = datetime.datetime(2024, 3, 31, 12)
        sessions = [
            make_session("in", now - datetime.timedelta(days=29), [("e1", "Squat", 80, True)]),
            make_session("out", now - datetime.timedelta(days=31), [("e1", "Squat", 60, True)]),
        ]
        stat = SessionStats.exercise_stats(sessions, "month", now=now)[0]
        self.assertEqual(stat.chart_data, [80])

    def test_negative_change_and_order(self) -> None:
        sessions = [
            make_session("a", MONDAY, [("e2", "Deadlift", 140, True), ("e1", "Squat", 100, True)]),
            make_session("b", WEDNESDAY, [("e1", "Squat", 95, True), ("e2", "Deadlift", 140, True)]),
        ]
        stats = SessionStats.exercise_stats(sessions, "week", now=WEDNESDAY)
        self.assertEqual([s.exercise_id for s in stats], ["e2", "e1"])
        self.assertEqual(stats[1].change, -5)
        self.assertEqual(stats[0].change, 0)

    def test_name_and_order_from_first_sighting(self) -> None:
        sessions = [
            make_session("a", MONDAY, [("e2", "Dead", 0, True), ("e1", "Bench", 50, True)]),
            make_session("b", WEDNESDAY, [("e2", "Deadlift", 100, True)]),
        ]
        stats = SessionStats.exercise_stats(sessions, "week", now=WEDNESDAY)
        self.assertEqual(
            [(s.exercise_id, s.exercise_name) for s in stats],
            [("e2", "Dead"), ("e1", "Bench")],
        )
        self.assertEqual(stats[0].chart_data, [100])

    def test_bad_period_raises(self) -> None:
        with self.assertRaises(ValueError):
            SessionStats.exercise_stats([], "year", now=WEDNESDAY)
        with self.assertRaises(ValueError):
            SessionStats.exercise_stats([], "month", "2024-3x", now=WEDNESDAY)

    def test_empty(self) -> None:
        self.assertEqual(SessionStats.exercise_stats([], "week", now=WEDNESDAY), [])


class RoutineSummaryTestCase(unittest.TestCase):
    def test_summary_counts(self) -> None:
        now = datetime.datetime(2024, 3, 13, 20)
        sessions = [
            make_session("a", datetime.datetime(2024, 3, 11, 7)),
            make_session("b", datetime.datetime(2024, 3, 11, 19)),
            make_session("c", datetime.datetime(2024, 3, 5, 7)),
            make_session("d", datetime.datetime(2024, 2, 28, 7)),
            make_session("e", None),
        ]
        summary = SessionStats.routine_summary(sessions, now)
        self.assertEqual(summary.model_dump(), {"this_week": 2, "this_month": 3, "streak": 3})

    def test_empty(self) -> None:
        self.assertEqual(
            SessionStats.routine_summary([], WEDNESDAY).model_dump(),
            {"this_week": 0, "this_month": 0, "streak": 0},
        )

    def test_routine_stats(self) -> None:
        sessions = [
            make_session("a", MONDAY, duration=40),
            make_session("b", WEDNESDAY, duration=55),
            make_session("c", WEDNESDAY, routine_id="other", duration=90),
            make_session("d", None, duration=10),
            make_session("e", MONDAY - datetime.timedelta(days=3)),
        ]
        stats = SessionStats.routine_stats(sessions, "r1")
        self.assertEqual(stats.times_completed, 3)
        self.assertEqual(stats.last_completed, WEDNESDAY)
        self.assertEqual(stats.average_duration, 47.5)
        self.assertEqual(stats.total_time_spent, 95)
        empty = SessionStats.routine_stats(sessions, "missing")
        self.assertEqual(empty.times_completed, 0)
        self.assertIsNone(empty.last_completed)

    def test_active_months(self) -> None:
        sessions = [
            make_session("a", datetime.datetime(2024, 1, 5)),
            make_session("b", datetime.datetime(2024, 3, 5)),
            make_session("c", datetime.datetime(2024, 3, 9)),
            make_session("d", None),
        ]
        self.assertEqual(SessionStats.active_months(sessions), ["2024-03", "2024-01"])

    def test_exercise_history(self) -> None:
        sessions = [
            make_session("b", WEDNESDAY, [("e1", "Squat", 0, True)]),
            make_session("a", MONDAY, [("e1", "Squat", 100, True), ("e2", "Row", 50, True)]),
            make_session("c", MONDAY, [("e1", "Squat", 120, False)]),
        ]
        history = SessionStats.exercise_history(sessions, "e1")
        self.assertEqual([(h.date, h.weight) for h in history], [(MONDAY, 100), (WEDNESDAY, 0)])
        self.assertEqual(len(SessionStats.exercise_history(sessions, "e1", now=MONDAY)), 1)


class PropertyTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.sessions = [
            make_session("a", MONDAY, [("e1", "Squat", 100, True)]),
            make_session("b", WEDNESDAY, [("e1", "Squat", 110, True)]),
            make_session("c", MONDAY - datetime.timedelta(days=7), [("e1", "Squat", 90, True)]),
        ]

    def _all(self, sessions):
        return (
            SessionStats.weekly_consistency(sessions, WEDNESDAY),
            SessionStats.exercise_stats(sessions, "week", now=WEDNESDAY),
            SessionStats.exercise_stats(sessions, "month", now=WEDNESDAY),
            SessionStats.routine_summary(sessions, WEDNESDAY),
        )

    def test_deterministic(self) -> None:
        self.assertEqual(self._all(self.sessions), self._all(self.sessions))

    def test_in_progress_sessions_have_no_effect(self) -> None:
        in_progress = make_session("x", None, [("e1", "Squat", 500, True)])
        self.assertEqual(self._all(self.sessions), self._all(self.sessions + [in_progress]))

    def test_malformed_completion_is_not_completed(self) -> None:
        broken = WorkoutSession(
            id="bad",
            started_at=MONDAY,
            completed_at="not-a-date",
            exercises=[{"exercise_id": "e1", "weight": 500, "completed": True}],
        )
        self.assertIsNone(broken.completed_at)
        self.assertEqual(self._all(self.sessions), self._all(self.sessions + [broken]))


if __name__ == "__main__":
    unittest.main()
