import datetime

from db import SessionRepository

SAMPLE_EXERCISES = [
    ("bench-press", "Bench Press", 60.0),
    ("back-squat", "Back Squat", 80.0),
    ("push-up", "Push Up", 0.0),
]


def sample_sessions(
    user_id: str = "demo",
    now: datetime.datetime | None = None,
    weeks: int = 4,
) -> list[dict]:
    """Return raw sessions with two workouts a week for the last ``weeks`` weeks."""
    now = now or datetime.datetime.now()
    sessions = []
    for week in range(weeks):
        for offset, hour in ((0, 7), (2, 18)):
            done = now - datetime.timedelta(days=week * 7 + offset)
            done = done.replace(hour=hour, minute=0, second=0, microsecond=0)
            done = min(done, now)
            step = (weeks - week) * 2.5
            sessions.append(
                {
                    "id": f"{user_id}-{week}-{offset}",
                    "routine_id": "full-body",
                    "routine_name": "Full Body",
                    "user_id": user_id,
                    "started_at": (done - datetime.timedelta(minutes=45)).isoformat(),
                    "completed_at": done.isoformat(),
                    "duration": 45,
                    "exercises": [
                        {
                            "exercise_id": ex_id,
                            "exercise_name": name,
                            "reps": 10,
                            "weight": base + step if base else 0.0,
                            "completed": True,
                        }
                        for ex_id, name, base in SAMPLE_EXERCISES
                    ],
                }
            )
    return sessions


def seed(repo: SessionRepository, user_id: str = "demo") -> int:
    if repo.fetch_for_user(user_id):
        print("Repository already contains sessions")
        return 0
    rows = sample_sessions(user_id)
    for raw in rows:
        repo.add_raw(raw)
    print("Seed data inserted")
    return len(rows)


if __name__ == "__main__":
    seed(SessionRepository())
