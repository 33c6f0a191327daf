from __future__ import annotations
import datetime
import logging
from typing import Callable, Dict, List, Optional

from algorithms import CalendarTools, SessionStats
from db import SessionRepository
from models import WorkoutSession

log = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]


class StatisticsService:
    """Compute workout statistics for a user's session history.

    The service fetches sessions from the repository and hands them to the
    pure aggregators in :class:`algorithms.SessionStats` together with the
    time reported by ``clock``.
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        clock: Clock | None = None,
        cache_enabled: bool = True,
    ) -> None:
        self.sessions = session_repo
        self.clock = clock or datetime.datetime.now
        self.cache_enabled = cache_enabled
        self._cache: Dict[Optional[str], List[WorkoutSession]] = {}
        self._cache_revision: Optional[int] = None

    def clear_cache(self) -> None:
        """Clear any cached session lists."""
        self._cache.clear()

    def _now(self) -> datetime.datetime:
        return CalendarTools.normalize(self.clock())

    def _user_sessions(self, user_id: Optional[str]) -> List[WorkoutSession]:
        revision = self.sessions.revision
        if self.cache_enabled:
            if self._cache_revision != revision:
                self._cache.clear()
                self._cache_revision = revision
            cached = self._cache.get(user_id)
            if cached is not None:
                log.debug("session cache hit for %s", user_id)
                return cached
        rows = self.sessions.fetch_for_user(user_id)
        if self.cache_enabled:
            self._cache[user_id] = rows
        log.debug("aggregating %d sessions for %s", len(rows), user_id)
        return rows

    def weekly_consistency(self, user_id: Optional[str] = None) -> dict[str, int]:
        return SessionStats.weekly_consistency(
            self._user_sessions(user_id), self._now()
        ).model_dump()

    def exercise_stats(
        self,
        user_id: Optional[str] = None,
        period: str = "week",
        month: Optional[str] = None,
    ) -> List[dict]:
        stats = SessionStats.exercise_stats(
            self._user_sessions(user_id), period, month, now=self._now()
        )
        return [s.model_dump() for s in stats]

    def routine_summary(self, user_id: Optional[str] = None) -> dict[str, int]:
        return SessionStats.routine_summary(
            self._user_sessions(user_id), self._now()
        ).model_dump()

    def streak_record(self, user_id: Optional[str] = None) -> dict[str, int]:
        return SessionStats.streak_record(
            self._user_sessions(user_id), self._now()
        ).model_dump()

    def routine_stats(self, user_id: Optional[str], routine_id: str) -> dict:
        return SessionStats.routine_stats(
            self._user_sessions(user_id), routine_id
        ).model_dump()

    def exercise_history(self, user_id: Optional[str], exercise_id: str) -> List[dict]:
        history = SessionStats.exercise_history(
            self._user_sessions(user_id), exercise_id, self._now()
        )
        return [h.model_dump() for h in history]

    def active_months(self, user_id: Optional[str] = None) -> List[str]:
        return SessionStats.active_months(self._user_sessions(user_id))

    def overview(self, user_id: Optional[str] = None, period: str = "week") -> dict:
        """Return the dashboard statistics in one call."""
        sessions = self._user_sessions(user_id)
        now = self._now()
        return {
            "weekly_consistency": SessionStats.weekly_consistency(sessions, now).model_dump(),
            "routine_summary": SessionStats.routine_summary(sessions, now).model_dump(),
            "exercise_stats": [
                s.model_dump()
                for s in SessionStats.exercise_stats(sessions, period, now=now)
            ],
        }
