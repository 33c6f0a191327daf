import logging
import time
from typing import Optional

from fastapi import APIRouter, Body, FastAPI, HTTPException, Request, Response

from config import APP_VERSION
from db import SessionRepository
from stats_service import Clock, StatisticsService

log = logging.getLogger(__name__)


class RateLimiter:
    """Simple in-memory rate limiter."""

    def __init__(self, limit: int = 60, window: int = 60) -> None:
        self.limit = limit
        self.window = window
        self.requests: dict[str, list[float]] = {}
        self._last_sweep = 0.0

    def prune(self, now: float) -> None:
        """Drop addresses with no request inside the window."""
        stale = [
            ip
            for ip, times in self.requests.items()
            if not times or now - times[-1] >= self.window
        ]
        for ip in stale:
            del self.requests[ip]
        self._last_sweep = now

    async def __call__(self, request: Request, call_next):
        ip = request.client.host if request.client else "anon"
        now = time.time()
        if now - self._last_sweep >= self.window:
            self.prune(now)
        history = [t for t in self.requests.get(ip, []) if now - t < self.window]
        if len(history) >= self.limit:
            log.warning("rate limit exceeded for %s", ip)
            return Response("rate limit exceeded", status_code=429)
        history.append(now)
        self.requests[ip] = history
        return await call_next(request)


class StatsAPI:
    """Provides REST endpoints for workout statistics."""

    def __init__(
        self,
        session_repo: SessionRepository | None = None,
        clock: Clock | None = None,
        *,
        cache_enabled: bool = True,
        rate_limit: int | None = None,
        rate_window: int = 60,
    ) -> None:
        self.sessions = session_repo or SessionRepository()
        self.statistics = StatisticsService(
            self.sessions, clock, cache_enabled=cache_enabled
        )
        self.app = FastAPI(
            title="FitTrack Stats API",
            description="REST API for workout consistency, streak and progress statistics",
            version=APP_VERSION,
        )
        if rate_limit is not None:
            limiter = RateLimiter(limit=rate_limit, window=rate_window)
            self.app.middleware("http")(limiter)
        self._setup_routes()

    def _setup_routes(self) -> None:
        sessions_router = APIRouter(prefix="/sessions", tags=["Sessions"])
        stats_router = APIRouter(prefix="/users/{user_id}", tags=["Statistics"])

        @self.app.get("/health")
        def health():
            return {"status": "ok", "version": APP_VERSION}

        @sessions_router.post("")
        def add_session(session: dict = Body(...)):
            try:
                sid = self.sessions.add_raw(session)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": sid}

        @sessions_router.get("")
        def list_sessions(user_id: Optional[str] = None):
            return [s.model_dump() for s in self.sessions.fetch_for_user(user_id)]

        @sessions_router.delete("/{session_id}")
        def delete_session(session_id: str):
            try:
                self.sessions.delete(session_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"status": "deleted"}

        @stats_router.get("/stats/weekly_consistency")
        def stats_weekly_consistency(user_id: str):
            return self.statistics.weekly_consistency(user_id)

        @stats_router.get("/stats/exercise_stats")
        def stats_exercise_stats(
            user_id: str,
            period: str = "week",
            month: str = None,
        ):
            try:
                return self.statistics.exercise_stats(user_id, period, month)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @stats_router.get("/stats/routine_summary")
        def stats_routine_summary(user_id: str):
            return self.statistics.routine_summary(user_id)

        @stats_router.get("/stats/streak")
        def stats_streak(user_id: str):
            return self.statistics.streak_record(user_id)

        @stats_router.get("/stats/months")
        def stats_months(user_id: str):
            return self.statistics.active_months(user_id)

        @stats_router.get("/stats/overview")
        def stats_overview(user_id: str, period: str = "week"):
            try:
                return self.statistics.overview(user_id, period)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @stats_router.get("/routines/{routine_id}/stats")
        def routine_stats(user_id: str, routine_id: str):
            return self.statistics.routine_stats(user_id, routine_id)

        @stats_router.get("/exercises/{exercise_id}/history")
        def exercise_history(user_id: str, exercise_id: str):
            return self.statistics.exercise_history(user_id, exercise_id)

        self.app.include_router(sessions_router)
        self.app.include_router(stats_router)


api = StatsAPI()
app = api.app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app)
