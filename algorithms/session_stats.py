from __future__ import annotations
import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from models import (
    WEEKLY_TARGET,
    ExerciseHistoryEntry,
    ExerciseStat,
    RoutineStats,
    RoutineSummary,
    StreakRecord,
    WeeklyConsistency,
    WorkoutSession,
)
from .calendar_tools import CalendarTools
from .math_tools import MathTools


class SessionStats:
    """Pure aggregations over a user's workout session history.

    Every method takes the full, unordered session list plus a reference
    ``now`` and returns a fresh value.  Sessions without ``completed_at`` are
    ignored everywhere.
    """

    @staticmethod
    def completed(sessions: Iterable[WorkoutSession]) -> List[WorkoutSession]:
        return [s for s in sessions if s.completed_at is not None]

    @staticmethod
    def weekly_consistency(
        sessions: Iterable[WorkoutSession], now: datetime.datetime
    ) -> WeeklyConsistency:
        """Count distinct days with a completed workout since Monday."""
        start = CalendarTools.week_start(now)
        days = {
            s.completed_at.date()
            for s in SessionStats.completed(sessions)
            if s.completed_at >= start
        }
        return WeeklyConsistency(completed=len(days), total=WEEKLY_TARGET)

    @staticmethod
    def _active_weeks(sessions: Iterable[WorkoutSession]) -> set[datetime.date]:
        return {
            CalendarTools.week_key(s.completed_at)
            for s in SessionStats.completed(sessions)
        }

    @staticmethod
    def weekly_streak(
        sessions: Iterable[WorkoutSession], now: datetime.datetime
    ) -> int:
        """Return the number of consecutive active weeks ending this week.

        The walk stops at the first week without a completed session, so an
        idle current week yields 0.
        """
        weeks = SessionStats._active_weeks(sessions)
        cursor = CalendarTools.week_key(now)
        step = datetime.timedelta(days=CalendarTools.WEEK_DAYS)
        streak = 0
        while cursor in weeks:
            streak += 1
            cursor -= step
        return streak

    @staticmethod
    def streak_record(
        sessions: Iterable[WorkoutSession], now: datetime.datetime
    ) -> StreakRecord:
        """Return the current streak and the best run of active weeks."""
        sessions = list(sessions)
        current_week = CalendarTools.week_key(now)
        weeks = sorted(w for w in SessionStats._active_weeks(sessions) if w <= current_week)
        best = run = 0
        prev: Optional[datetime.date] = None
        for week in weeks:
            if prev is not None and (week - prev).days == CalendarTools.WEEK_DAYS:
                run += 1
            else:
                run = 1
            best = max(best, run)
            prev = week
        return StreakRecord(current=SessionStats.weekly_streak(sessions, now), best=best)

    @staticmethod
    def exercise_stats(
        sessions: Iterable[WorkoutSession],
        period: str = "week",
        selected_month: Optional[str] = None,
        *,
        now: datetime.datetime,
    ) -> List[ExerciseStat]:
        """Return weight progress for every exercise trained in the period.

        ``period`` is ``"week"`` (last 7 days) or ``"month"`` (last 30 days,
        or the calendar month ``selected_month`` given as ``YYYY-MM``).
        Only completed entries with a positive weight count; exercises without
        such an entry are left out.  Names and order come from the first
        time an exercise appears in the period.
        """
        start, end = CalendarTools.period_bounds(now, period, selected_month)
        names: Dict[str, str] = {}
        points: Dict[str, List[Tuple[datetime.datetime, float]]] = {}
        for session in SessionStats.completed(sessions):
            if not start <= session.completed_at <= end:
                continue
            for entry in session.exercises:
                names.setdefault(entry.exercise_id, entry.exercise_name)
                if not entry.has_load:
                    continue
                points.setdefault(entry.exercise_id, []).append(
                    (session.completed_at, entry.weight)
                )

        result: List[ExerciseStat] = []
        for exercise_id in names:
            series = points.get(exercise_id)
            if not series:
                continue
            series.sort(key=lambda p: p[0])
            chart = [weight for _date, weight in series]
            current = chart[-1]
            result.append(
                ExerciseStat(
                    exercise_id=exercise_id,
                    exercise_name=names[exercise_id],
                    current_weight=current,
                    change=MathTools.percent_change(chart[0], current),
                    chart_data=chart,
                )
            )
        return result

    @staticmethod
    def exercise_history(
        sessions: Iterable[WorkoutSession],
        exercise_id: str,
        now: Optional[datetime.datetime] = None,
    ) -> List[ExerciseHistoryEntry]:
        """Chronological log of every completed entry for ``exercise_id``."""
        cutoff = CalendarTools.normalize(now) if now is not None else None
        history: List[ExerciseHistoryEntry] = []
        for session in SessionStats.completed(sessions):
            if cutoff is not None and session.completed_at > cutoff:
                continue
            for entry in session.exercises:
                if entry.exercise_id != exercise_id or not entry.completed:
                    continue
                history.append(
                    ExerciseHistoryEntry(
                        date=entry.completed_at or session.completed_at,
                        reps=entry.reps,
                        weight=entry.weight,
                    )
                )
        history.sort(key=lambda h: h.date)
        return history

    @staticmethod
    def routine_summary(
        sessions: Iterable[WorkoutSession], now: datetime.datetime
    ) -> RoutineSummary:
        sessions = SessionStats.completed(sessions)
        week_start = CalendarTools.week_start(now)
        month_start = CalendarTools.month_start(now)
        return RoutineSummary(
            this_week=sum(1 for s in sessions if s.completed_at >= week_start),
            this_month=sum(1 for s in sessions if s.completed_at >= month_start),
            streak=SessionStats.weekly_streak(sessions, now),
        )

    @staticmethod
    def routine_stats(
        sessions: Iterable[WorkoutSession], routine_id: str
    ) -> RoutineStats:
        """Lifetime completion totals for ``routine_id``."""
        done = [
            s for s in SessionStats.completed(sessions) if s.routine_id == routine_id
        ]
        durations = [s.duration for s in done if s.duration is not None]
        return RoutineStats(
            routine_id=routine_id,
            times_completed=len(done),
            last_completed=max((s.completed_at for s in done), default=None),
            average_duration=round(MathTools.mean(durations), 1),
            total_time_spent=sum(durations),
        )

    @staticmethod
    def active_months(sessions: Iterable[WorkoutSession]) -> List[str]:
        """Return ``YYYY-MM`` keys with completed sessions, newest first."""
        months = {
            CalendarTools.month_key(s.completed_at)
            for s in SessionStats.completed(sessions)
        }
        return sorted(months, reverse=True)
