import argparse
import datetime
import json
import logging
from typing import Optional

import yaml

from tools import SessionStats
from db import SessionRepository
from seed_sample_data import sample_sessions
from settings_schema import load_settings

log = logging.getLogger(__name__)


def _parse_now(parser: argparse.ArgumentParser, value: Optional[str]) -> datetime.datetime:
    if not value:
        return datetime.datetime.now()
    try:
        return datetime.datetime.fromisoformat(value)
    except ValueError:
        parser.error(f"invalid --now timestamp: {value}")


def _load(path: str, user_id: Optional[str]):
    repo = SessionRepository()
    repo.load_file(path)
    return repo.fetch_for_user(user_id)


def summary(path: str, user_id: Optional[str], now: datetime.datetime) -> dict:
    sessions = _load(path, user_id)
    return {
        "weekly_consistency": SessionStats.weekly_consistency(sessions, now).model_dump(),
        "routine_summary": SessionStats.routine_summary(sessions, now).model_dump(),
        "streak": SessionStats.streak_record(sessions, now).model_dump(),
    }


def exercises(
    path: str,
    user_id: Optional[str],
    now: datetime.datetime,
    period: str = "week",
    month: Optional[str] = None,
) -> list[dict]:
    sessions = _load(path, user_id)
    return [
        s.model_dump()
        for s in SessionStats.exercise_stats(sessions, period, month, now=now)
    ]


def write_demo(
    out_path: str, user_id: str = "demo", now: Optional[datetime.datetime] = None
) -> None:
    with open(out_path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"sessions": sample_sessions(user_id, now=now)}, f, sort_keys=False)


def serve(host: str, port: int, sessions_path: Optional[str], settings) -> None:
    import uvicorn
    from rest_api import StatsAPI

    repo = SessionRepository()
    if sessions_path:
        repo.load_file(sessions_path)
    api = StatsAPI(
        repo,
        cache_enabled=settings.cache_enabled,
        rate_limit=settings.rate_limit,
        rate_window=settings.rate_window,
    )
    uvicorn.run(api.app, host=host, port=port)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Workout statistics")
    parser.add_argument("--settings", default=None)
    sub = parser.add_subparsers(dest="cmd", required=True)

    summ = sub.add_parser("summary")
    summ.add_argument("--sessions", required=True)
    summ.add_argument("--user", default=None)
    summ.add_argument("--now", default=None)

    exs = sub.add_parser("exercises")
    exs.add_argument("--sessions", required=True)
    exs.add_argument("--user", default=None)
    exs.add_argument("--now", default=None)
    exs.add_argument("--period", choices=["week", "month"], default=None)
    exs.add_argument("--month", default=None)

    srv = sub.add_parser("serve")
    srv.add_argument("--host", default=None)
    srv.add_argument("--port", type=int, default=None)
    srv.add_argument("--sessions", default=None)

    demo = sub.add_parser("demo")
    demo.add_argument("--out", default="sessions.yaml")
    demo.add_argument("--user", default="demo")
    demo.add_argument("--now", default=None)

    args = parser.parse_args(argv)
    settings = load_settings(args.settings)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(message)s")

    if args.cmd == "summary":
        result = summary(args.sessions, args.user, _parse_now(parser, args.now))
        print(json.dumps(result, indent=2, default=str))
    elif args.cmd == "exercises":
        result = exercises(
            args.sessions,
            args.user,
            _parse_now(parser, args.now),
            args.period or settings.default_period,
            args.month,
        )
        print(json.dumps(result, indent=2, default=str))
    elif args.cmd == "serve":
        serve(
            args.host or settings.api_host,
            args.port or settings.api_port,
            args.sessions,
            settings,
        )
    elif args.cmd == "demo":
        write_demo(args.out, args.user, _parse_now(parser, args.now))
        log.info("demo sessions written to %s", args.out)


if __name__ == "__main__":
    main()
