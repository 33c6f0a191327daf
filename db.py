import json
import logging
import os
import threading
import uuid
from typing import Iterable, List, Optional

import yaml
from pydantic import ValidationError

from models import WorkoutSession

log = logging.getLogger(__name__)

_KEY_ALIASES = {
    "routineId": "routine_id",
    "routineName": "routine_name",
    "userId": "user_id",
    "startedAt": "started_at",
    "completedAt": "completed_at",
    "exerciseId": "exercise_id",
    "exerciseName": "exercise_name",
}


def _snake_keys(raw: dict) -> dict:
    return {_KEY_ALIASES.get(k, k): v for k, v in raw.items()}


def _flatten_sets(entry: dict) -> dict:
    """Collapse a per-set exercise log into one entry.

    Reps are summed over completed sets, weight is the heaviest completed
    set and the entry counts as completed when any set was.
    """
    sets = entry.pop("sets") or []
    done = [s for s in sets if isinstance(s, dict) and s.get("completed")]
    weights = []
    for s in done:
        try:
            weights.append(float(s.get("weight") or 0))
        except (TypeError, ValueError):
            continue
    reps = 0
    for s in done:
        try:
            reps += int(s.get("reps") or 0)
        except (TypeError, ValueError):
            continue
    entry["reps"] = reps
    entry["weight"] = max(weights, default=0.0)
    entry["completed"] = bool(done)
    return entry


def normalize_session(raw: dict) -> dict:
    """Return ``raw`` in the canonical session shape.

    Accepts camelCase keys and the legacy per-set exercise layout, which is
    flattened to one entry per exercise.
    """
    if not isinstance(raw, dict):
        raise ValueError("session must be a mapping")
    data = _snake_keys(raw)
    exercises = []
    for entry in data.get("exercises") or []:
        if not isinstance(entry, dict):
            raise ValueError("exercise entries must be mappings")
        entry = _snake_keys(entry)
        if "sets" in entry:
            entry = _flatten_sets(entry)
        exercises.append(entry)
    data["exercises"] = exercises
    if not data.get("id"):
        data["id"] = uuid.uuid4().hex
    return data


class SessionRepository:
    """In-memory store of workout sessions keyed by id."""

    def __init__(self, sessions: Iterable[WorkoutSession] = ()) -> None:
        self._sessions: dict[str, WorkoutSession] = {}
        self._lock = threading.Lock()
        self.revision = 0
        for session in sessions:
            self.add(session)

    def add(self, session: WorkoutSession) -> str:
        with self._lock:
            self._sessions[session.id] = session
            self.revision += 1
        return session.id

    def add_raw(self, raw: dict) -> str:
        """Validate ``raw`` and store it, returning the session id."""
        try:
            session = WorkoutSession(**normalize_session(raw))
        except ValidationError as e:
            log.warning("rejected session %s: %s", raw.get("id"), e)
            raise ValueError(str(e))
        return self.add(session)

    def fetch(self, session_id: str) -> WorkoutSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise ValueError("session not found")
        return session

    def fetch_all(self) -> List[WorkoutSession]:
        with self._lock:
            return list(self._sessions.values())

    def fetch_for_user(self, user_id: Optional[str]) -> List[WorkoutSession]:
        if user_id is None:
            return self.fetch_all()
        with self._lock:
            return [s for s in self._sessions.values() if s.user_id == user_id]

    def delete(self, session_id: str) -> None:
        with self._lock:
            if session_id not in self._sessions:
                raise ValueError("session not found")
            del self._sessions[session_id]
            self.revision += 1

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
            self.revision += 1

    def load_file(self, path: str) -> int:
        """Load raw sessions from a YAML or JSON list and return the count."""
        if not os.path.exists(path):
            raise ValueError(f"session file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        if isinstance(data, dict):
            data = data.get("sessions") or []
        if not isinstance(data, list):
            raise ValueError("session file must contain a list of sessions")
        for raw in data:
            self.add_raw(raw)
        log.info("loaded %d sessions from %s", len(data), path)
        return len(data)
