"""Tests for the command line driver."""

import pytest
from datetime import datetime, timedelta

from pomo_engine.cli import build_parser, main
from pomo_engine.persistence import SQLiteIntervalStore
from pomo_engine.state.models import Category, Interval, IntervalState


@pytest.fixture
def cli_env(tmp_path):
    """Config directory with an accelerated clock and a fresh database."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "pomo.yaml").write_text("timer:\n  tick_interval: 0.01\n")
    db_path = tmp_path / "cli.db"
    base_args = ["--config-dir", str(config_dir), "--db", str(db_path), "--log-level", "WARNING"]
    return base_args, db_path


class TestParser:
    """Argument parsing."""

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_summary_day(self):
        args = build_parser().parse_args(["summary", "--day", "2026-10-18"])
        assert args.day.isoformat() == "2026-10-18"


class TestCommands:
    """Commands against a sqlite database."""

    def test_next_on_empty_history(self, cli_env, capsys):
        base_args, _ = cli_env
        assert main(base_args + ["next"]) == 0
        assert capsys.readouterr().out.strip() == "Pomodoro"

    def test_start_runs_current_interval(self, cli_env, capsys):
        base_args, db_path = cli_env

        assert main(base_args + ["--pomodoro", "0.05", "start"]) == 0

        out = capsys.readouterr().out
        assert "Pomodoro #1 started, 00:03 remaining" in out
        assert "Pomodoro #1 done" in out
        stored = SQLiteIntervalStore(db_path).by_id(1)
        assert stored.state == IntervalState.DONE
        assert stored.actual_duration == timedelta(seconds=3)

    def test_start_stdout_has_only_progress_lines(self, cli_env, capsys):
        """Timer and scheduler logs never mix into the progress output."""
        base_args, _ = cli_env

        assert main(base_args + ["--log-level", "DEBUG", "--pomodoro", "0.05", "start"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 5
        assert all(line.startswith("Pomodoro #1 ") for line in lines)

    def test_pause_running_interval(self, cli_env, capsys):
        base_args, db_path = cli_env
        store = SQLiteIntervalStore(db_path)
        store.create(Interval.new(Category.POMODORO, timedelta(minutes=25)))
        store.update(store.by_id(1).with_state(IntervalState.RUNNING).with_tick())

        assert main(base_args + ["pause"]) == 0

        assert "Pomodoro #1 paused at 00:01" in capsys.readouterr().out
        assert store.by_id(1).state == IntervalState.PAUSED

    def test_pause_without_intervals_fails(self, cli_env, capsys):
        base_args, _ = cli_env
        assert main(base_args + ["pause"]) == 1
        assert "no intervals" in capsys.readouterr().err

    def test_summary(self, cli_env, capsys):
        base_args, db_path = cli_env
        store = SQLiteIntervalStore(db_path)
        store.create(Interval(
            category=Category.POMODORO,
            planned_duration=timedelta(minutes=25),
            start_time=datetime(2026, 10, 18, 9, 0).astimezone(),
            actual_duration=timedelta(minutes=25),
            state=IntervalState.DONE,
        ))

        assert main(base_args + ["summary", "--day", "2026-10-18"]) == 0

        out = capsys.readouterr().out
        assert "Pomodoro: 25:00" in out
        assert "Breaks: 00:00" in out

    def test_invalid_config_exits_2(self, tmp_path, capsys):
        config_dir = tmp_path / "bad"
        config_dir.mkdir()
        (config_dir / "pomo.yaml").write_text("timer:\n  tick_interval: -1\n")

        assert main(["--config-dir", str(config_dir), "next"]) == 2
        assert "timer.tick_interval" in capsys.readouterr().err
