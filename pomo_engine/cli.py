"""Command line driver for the interval engine."""

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional

from .config.loader import ConfigLoader
from .engine import PomodoroEngine, build_engine
from .errors import ConfigurationError, IntervalError, SystemFailureError
from .logging.config import configure_logging
from .persistence import BACKENDS
from .state.models import Interval
from .utils.time import format_duration, now_local


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pomo-engine",
        description="Run pomodoro work and break intervals"
    )
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory containing pomo.yaml")
    parser.add_argument("--db", dest="db_path", default=None,
                        help="SQLite database file")
    parser.add_argument("--backend", choices=BACKENDS, default=None)
    parser.add_argument("--pomodoro", type=float, default=None, help="Pomodoro length in minutes")
    parser.add_argument("--short-break", type=float, default=None, help="Short break length in minutes")
    parser.add_argument("--long-break", type=float, default=None, help="Long break length in minutes")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--json-logs", action="store_const", const=True, default=None)

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("start", help="Run the current interval in the foreground")
    commands.add_parser("pause", help="Pause the running interval")
    commands.add_parser("next", help="Show the category of the next interval")
    summary = commands.add_parser("summary", help="Show time spent on a day")
    summary.add_argument("--day", type=date.fromisoformat, default=None,
                         help="Day as YYYY-MM-DD (default: today)")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "durations": {
            "pomodoro": args.pomodoro,
            "short_break": args.short_break,
            "long_break": args.long_break,
        },
        "storage": {
            "backend": args.backend,
            "db_path": args.db_path,
        },
        "logging": {
            "level": args.log_level,
            "format_json": args.json_logs,
        },
    }


def _print_start(interval: Interval) -> None:
    print(f"{interval.category.value} #{interval.id} started, "
          f"{format_duration(interval.remaining)} remaining", flush=True)


def _print_tick(interval: Interval) -> None:
    print(f"{interval.category.value} #{interval.id} "
          f"{format_duration(interval.remaining)} remaining", flush=True)


def _print_end(interval: Interval) -> None:
    print(f"{interval.category.value} #{interval.id} done", flush=True)


def cmd_start(engine: PomodoroEngine, args: argparse.Namespace) -> int:
    interval = engine.current_interval()
    handle = engine.start_background(
        interval,
        on_start=_print_start,
        on_tick=_print_tick,
        on_end=_print_end
    )
    try:
        while not handle.join(0.2):
            pass
    except KeyboardInterrupt:
        handle.cancel()
        handle.join()
        print(f"{interval.category.value} #{interval.id} cancelled", flush=True)

    if handle.error is not None:
        raise handle.error
    return 0


def cmd_pause(engine: PomodoroEngine, args: argparse.Namespace) -> int:
    paused = engine.pause(engine.repository.last())
    print(f"{paused.category.value} #{paused.id} paused at "
          f"{format_duration(paused.actual_duration)}")
    return 0


def cmd_next(engine: PomodoroEngine, args: argparse.Namespace) -> int:
    print(engine.next_category().value)
    return 0


def cmd_summary(engine: PomodoroEngine, args: argparse.Namespace) -> int:
    day = args.day or now_local().date()
    totals = engine.daily_summary(day)
    print(f"{day.isoformat()}")
    for name, total in totals.items():
        print(f"  {name}: {format_duration(total)}")
    return 0


COMMANDS: dict[str, Callable[[PomodoroEngine, argparse.Namespace], int]] = {
    "start": cmd_start,
    "pause": cmd_pause,
    "next": cmd_next,
    "summary": cmd_summary,
}


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = ConfigLoader.create(args.config_dir).load_settings(_overrides(args))
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    configure_logging(level=settings.log_level, format_json=settings.log_json)

    try:
        engine = build_engine(settings)
        return COMMANDS[args.command](engine, args)
    except (IntervalError, SystemFailureError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
