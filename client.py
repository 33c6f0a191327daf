import requests
from typing import Optional


class StatsClient:
    """Simple REST client for the statistics API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str, **params):
        resp = requests.get(
            f"{self.base_url}{path}",
            params={k: v for k, v in params.items() if v is not None},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def add_session(self, session: dict) -> str:
        resp = requests.post(f"{self.base_url}/sessions", json=session, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()["id"]

    def delete_session(self, session_id: str) -> None:
        resp = requests.delete(f"{self.base_url}/sessions/{session_id}", timeout=self.timeout)
        resp.raise_for_status()

    def weekly_consistency(self, user_id: str) -> dict:
        return self._get(f"/users/{user_id}/stats/weekly_consistency")

    def exercise_stats(
        self, user_id: str, period: str = "week", month: Optional[str] = None
    ) -> list:
        return self._get(f"/users/{user_id}/stats/exercise_stats", period=period, month=month)

    def routine_summary(self, user_id: str) -> dict:
        return self._get(f"/users/{user_id}/stats/routine_summary")

    def streak(self, user_id: str) -> dict:
        return self._get(f"/users/{user_id}/stats/streak")

    def overview(self, user_id: str) -> dict:
        return self._get(f"/users/{user_id}/stats/overview")

    def list_sessions(self, user_id: Optional[str] = None) -> list:
        return self._get("/sessions", user_id=user_id)

    def active_months(self, user_id: str) -> list:
        return self._get(f"/users/{user_id}/stats/months")

    def routine_stats(self, user_id: str, routine_id: str) -> dict:
        return self._get(f"/users/{user_id}/routines/{routine_id}/stats")

    def exercise_history(self, user_id: str, exercise_id: str) -> list:
        return self._get(f"/users/{user_id}/exercises/{exercise_id}/history")
